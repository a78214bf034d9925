from __future__ import annotations
import logging
from typing import Dict, Iterator, List, Set, Tuple

from .graph import Edge, Graph, Node

logger = logging.getLogger(__name__)

# (position, u, v) as handed back by remove_edge, enough to undo the removal
EdgeRecord = Tuple[int, Node, Node]


class AdjacencyIndex:
    """Mutable node -> incident edges map derived from a :class:`Graph`.

    Every adjacency keeps the position of the edge that created it, so
    parallel edges of the multigraph stay distinct and a path through the
    index is already a list of edge positions. The index is disposable:
    it is never the record of what edge ``p`` is, the graph is.
    """

    def __init__(self):
        self._incident: Dict[Node, Dict[int, Node]] = {}
        self._edges: Dict[int, Edge] = {}

    @classmethod
    def from_graph(cls, g: Graph) -> "AdjacencyIndex":
        index = cls()
        for pos, (u, v) in enumerate(g.edges):
            index._attach(pos, u, v)
        return index

    def copy(self) -> "AdjacencyIndex":
        other = AdjacencyIndex()
        other._incident = {node: dict(inc) for node, inc in self._incident.items()}
        other._edges = dict(self._edges)
        return other

    def _attach(self, pos: int, u: Node, v: Node) -> None:
        self._incident.setdefault(u, {})[pos] = v
        self._incident.setdefault(v, {})[pos] = u
        self._edges[pos] = (u, v)

    # queries

    def __len__(self) -> int:
        return len(self._incident)

    def __contains__(self, node) -> bool:
        return node in self._incident

    @property
    def node_count(self) -> int:
        return len(self._incident)

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    def nodes(self) -> List[Node]:
        return list(self._incident)

    def edges(self) -> Iterator[int]:
        return iter(self._edges)

    def has_edge(self, pos: int) -> bool:
        return pos in self._edges

    def degree(self, node: Node) -> int:
        return len(self._incident.get(node, ()))

    def neighbors(self, node: Node) -> Set[Node]:
        return set(self._incident.get(node, {}).values())

    def incident(self, node: Node) -> List[Tuple[int, Node]]:
        # snapshot, callers mutate the index while iterating
        return list(self._incident.get(node, {}).items())

    # mutation

    def remove_edge(self, pos: int) -> EdgeRecord:
        u, v = self._edges.pop(pos)
        del self._incident[u][pos]
        del self._incident[v][pos]
        return (pos, u, v)

    def restore_edge(self, record: EdgeRecord) -> None:
        pos, u, v = record
        if pos in self._edges:
            raise ValueError(f"edge {pos} is already present")
        self._attach(pos, u, v)

    def remove_node(self, node: Node) -> List[EdgeRecord]:
        removed = [self.remove_edge(pos) for pos in list(self._incident.get(node, ()))]
        self._incident.pop(node, None)
        return removed

    def discard_empty(self) -> int:
        empty = [node for node, inc in self._incident.items() if not inc]
        for node in empty:
            del self._incident[node]
        return len(empty)


def trim(index: AdjacencyIndex, rounds: int) -> None:
    """Edge trimming: drop every edge touching a node of degree < 2.

    A node with fewer than two incident edges cannot sit on a cycle, so its
    edges are removed and the removal may expose new leaves for the next
    round. Stops after ``rounds`` rounds, when the index is empty, or at the
    fixed point. Fewer rounds only leave more work for the search; the
    surviving edges always include every edge that lies on a cycle.
    """
    if rounds < 0:
        raise ValueError(f"rounds must be >= 0, got {rounds}")
    for r in range(rounds):
        if not len(index):
            break
        leaves = [node for node in index.nodes() if index.degree(node) < 2]
        removed = 0
        for node in leaves:
            # an earlier leaf in this round may already have taken this one out
            if node in index:
                removed += len(index.remove_node(node))
        index.discard_empty()
        logger.debug("trim round %d: removed %d edges, %d edges / %d nodes left",
                     r + 1, removed, index.edge_count, index.node_count)
        if not leaves:
            break
