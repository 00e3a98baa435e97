from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple, Union

NodeId = Union[int, str]
Cost = float

INFINITE_COST: Cost = math.inf
NO_HOP: Optional[NodeId] = None
UNKNOWN_COST: Cost = -1


@dataclass(frozen=True)
class Link:
    node1: NodeId
    node2: NodeId
    cost: int


@dataclass(frozen=True)
class ChangeRecord:
    """A topology edit. ``cost is None`` removes the link."""

    node1: NodeId
    node2: NodeId
    cost: Optional[int]

    @property
    def is_removal(self) -> bool:
        return self.cost is None


@dataclass(frozen=True)
class Message:
    source: NodeId
    destination: NodeId
    content: str


@dataclass(frozen=True)
class MessageReport:
    message: Message
    cost: Cost
    hops: Optional[Tuple[NodeId, ...]]

    @property
    def reachable(self) -> bool:
        return self.hops is not None
