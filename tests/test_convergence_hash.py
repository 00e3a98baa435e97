from __future__ import annotations

from dvsim.core.convergence import hash_routes
from dvsim.core.types import INFINITE_COST, NO_HOP


def test_convergence_hash_stable_against_dict_order():
    a = {
        1: {1: (1, 0), 3: (2, 2), 2: (2, 1)},
        2: {2: (2, 0), 1: (1, 1), 3: (3, 1)},
    }
    b = {
        2: {3: (3, 1), 1: (1, 1), 2: (2, 0)},
        1: {2: (2, 1), 1: (1, 0), 3: (2, 2)},
    }
    assert hash_routes(a) == hash_routes(b)


def test_convergence_hash_distinguishes_unreachable():
    reachable = {1: {1: (1, 0), 2: (2, 1)}}
    unreachable = {1: {1: (1, 0), 2: (NO_HOP, INFINITE_COST)}}
    assert hash_routes(reachable) != hash_routes(unreachable)
