from __future__ import annotations
from collections import Counter
from enum import Enum
from itertools import islice
import logging
from typing import Dict, List, Optional, Protocol, Tuple

from .graph import Edge, Node

logger = logging.getLogger(__name__)


class EdgeSource(Protocol):
    @property
    def edge_count(self) -> int: ...

    def edge_at(self, pos) -> Optional[Edge]: ...


class Failure(Enum):
    BAD_TARGET_LENGTH = "cycle length must be a positive even number"
    LENGTH_MISMATCH = "number of edges differs from the cycle length"
    NOT_AN_INDEX = "edge position is not an integer"
    DUPLICATE_EDGE = "edge position used more than once"
    EDGE_OUT_OF_RANGE = "edge position outside the graph"
    DEGREE_NOT_TWO = "a node is not entered and left exactly once"
    NOT_SINGLE_CYCLE = "edges form more than one cycle"


def _is_index(x) -> bool:
    return isinstance(x, int) and not isinstance(x, bool)


def check_cycle(g: EdgeSource, target_len, edges) -> Optional[Failure]:
    """Return the first check ``edges`` fails, or None for a valid cycle.

    ``edges`` is a list of edge positions in any order. Valid means: exactly
    ``target_len`` distinct positions inside the graph whose edges form one
    simple cycle, i.e. every touched node has degree two and a single walk
    covers all of them. Never raises on bad input.
    """
    if not _is_index(target_len) or target_len <= 0 or target_len % 2:
        return Failure.BAD_TARGET_LENGTH
    try:
        # never read more than one item past the expected length
        positions = list(islice(edges, target_len + 1))
    except TypeError:
        return Failure.LENGTH_MISMATCH
    if len(positions) != target_len:
        return Failure.LENGTH_MISMATCH

    if not all(_is_index(p) for p in positions):
        return Failure.NOT_AN_INDEX
    if len(set(positions)) != len(positions):
        return Failure.DUPLICATE_EDGE

    edge_count = g.edge_count
    if any(not 0 <= p < edge_count for p in positions):
        return Failure.EDGE_OUT_OF_RANGE

    selected: List[Tuple[int, Node, Node]] = []
    for p in positions:
        edge = g.edge_at(p)
        if edge is None:
            return Failure.EDGE_OUT_OF_RANGE
        u, v = edge
        selected.append((p, u, v))

    degree: Counter = Counter()
    for _, u, v in selected:
        degree[u] += 1
        degree[v] += 1
    if any(d != 2 for d in degree.values()):
        return Failure.DEGREE_NOT_TWO

    # walk the selected subgraph, consuming each edge once
    incident: Dict[Node, List[Tuple[int, Node]]] = {}
    for p, u, v in selected:
        incident.setdefault(u, []).append((p, v))
        incident.setdefault(v, []).append((p, u))
    start = selected[0][1]
    node = start
    used = set()
    steps = 0
    while True:
        nxt = next(((p, other) for p, other in incident[node] if p not in used), None)
        if nxt is None:
            break
        p, node = nxt
        used.add(p)
        steps += 1
        if node == start:
            break
    if node != start or steps != target_len or len(used) != len(selected):
        return Failure.NOT_SINGLE_CYCLE
    return None


def verify(g: EdgeSource, target_len, edges) -> bool:
    failure = check_cycle(g, target_len, edges)
    if failure is not None:
        logger.debug("cycle rejected: %s", failure.value)
        return False
    return True
