"""Bipartite multigraph derived from a siphash key.

The graph has ``n`` edges and ``n + n`` nodes split into the partitions U
and V. Edges are kept as a position-indexed tuple: the position of an edge
is its identity for solving and verifying, so the order is never changed
after construction.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import IntEnum
import logging
from typing import Dict, Iterable, Iterator, List, NamedTuple, Optional, Sequence, Tuple

from .hashing import CuckooHash

logger = logging.getLogger(__name__)


class GraphConstructionError(ValueError):
    pass


class Side(IntEnum):
    U = 0
    V = 1


class Node(NamedTuple):
    side: Side
    index: int

    @classmethod
    def u(cls, index: int) -> "Node":
        return cls(Side.U, index)

    @classmethod
    def v(cls, index: int) -> "Node":
        return cls(Side.V, index)

    def __repr__(self) -> str:
        return f"{self.side.name}({self.index})"


Edge = Tuple[Node, Node]


def _orient(edge: Sequence[Node]) -> Edge:
    a, b = edge
    if a.side == Side.U and b.side == Side.V:
        return (a, b)
    if a.side == Side.V and b.side == Side.U:
        return (b, a)
    raise GraphConstructionError(f"edge {a!r}-{b!r} does not join U to V")


def _position(pos) -> Optional[int]:
    # bools are ints in Python but never edge positions
    if isinstance(pos, bool) or not isinstance(pos, int):
        return None
    return pos


@dataclass(frozen=True)
class Graph:
    edges: Tuple[Edge, ...]
    _positions: Dict[Edge, List[int]] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        n = len(self.edges)
        positions: Dict[Edge, List[int]] = {}
        for i, e in enumerate(self.edges):
            u, v = e
            if not (0 <= u.index < n and 0 <= v.index < n):
                raise GraphConstructionError(
                    f"edge {i} {u!r}-{v!r} has an endpoint outside [0, {n})")
            positions.setdefault(e, []).append(i)
        object.__setattr__(self, "_positions", positions)

    @classmethod
    def build(cls, key: Sequence[int], n: int) -> "Graph":
        """Derive edge ``i`` as ``(U(h(2i) % n), V(h(2i+1) % n))`` for ``i < n``.

        Endpoints are used as hashed; nodes differing only in their last bit
        are not merged.
        """
        if n <= 0:
            raise GraphConstructionError(f"edge count must be positive, got {n}")
        h = CuckooHash(key)
        edges = tuple(
            (Node.u(h.endpoint(i, Side.U, n)), Node.v(h.endpoint(i, Side.V, n)))
            for i in range(n)
        )
        logger.debug("built graph with %d edges", n)
        return cls(edges)

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[int, int]]) -> "Graph":
        edges = []
        for u, v in pairs:
            edges.append((Node.u(u), Node.v(v)))
        if not edges:
            raise GraphConstructionError("a graph needs at least one edge")
        return cls(tuple(edges))

    @classmethod
    def from_edges(cls, edges: Iterable[Sequence[Node]]) -> "Graph":
        oriented = tuple(_orient(e) for e in edges)
        if not oriented:
            raise GraphConstructionError("a graph needs at least one edge")
        return cls(oriented)

    @property
    def edge_count(self) -> int:
        return len(self.edges)

    @property
    def node_count(self) -> int:
        return 2 * len(self.edges)

    def __len__(self) -> int:
        return len(self.edges)

    def __iter__(self) -> Iterator[Edge]:
        return iter(self.edges)

    def edge_at(self, pos) -> Optional[Edge]:
        pos = _position(pos)
        if pos is None or not 0 <= pos < len(self.edges):
            return None
        return self.edges[pos]

    def positions_of(self, edge: Sequence[Node]) -> List[int]:
        try:
            key = _orient(edge)
        except (TypeError, ValueError, AttributeError):
            return []
        return list(self._positions.get(key, ()))

    def index_of(self, edge: Sequence[Node]) -> Optional[int]:
        found = self.positions_of(edge)
        return found[0] if found else None


class HashedEdges:
    """Read-only edge source that hashes endpoints on demand.

    Offers the ``edge_count``/``edge_at`` surface of :class:`Graph` without
    materialising all ``n`` edges, so checking a proof costs a couple of
    hashes per claimed edge.
    """

    def __init__(self, key: Sequence[int], n: int):
        if n <= 0:
            raise GraphConstructionError(f"edge count must be positive, got {n}")
        self.h = CuckooHash(key)
        self.n = n

    @property
    def edge_count(self) -> int:
        return self.n

    def edge_at(self, pos) -> Optional[Edge]:
        pos = _position(pos)
        if pos is None or not 0 <= pos < self.n:
            return None
        return (Node.u(self.h.endpoint(pos, Side.U, self.n)),
                Node.v(self.h.endpoint(pos, Side.V, self.n)))
