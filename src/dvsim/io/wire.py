from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from dvsim.core.types import NO_HOP, Cost, NodeId

ID_TYPES = ("int", "str")


@dataclass(frozen=True)
class WireFormat:
    """Sentinels and id handling of the text formats.

    The core never sees these numbers: infinite cost and missing next hops
    are translated here in both directions.
    """

    infinite_cost: int = 9999
    no_hop: int = -1
    remove_cost: int = -999
    id_type: str = "int"

    def parse_id(self, token: str) -> NodeId:
        if self.id_type == "str":
            return token
        return int(token)

    def format_cost(self, cost: Cost) -> str:
        if not math.isfinite(cost):
            return str(self.infinite_cost)
        return str(int(cost))

    def format_hop(self, hop: Optional[NodeId]) -> str:
        if hop is NO_HOP:
            return str(self.no_hop)
        return str(hop)


DEFAULT_WIRE = WireFormat()
