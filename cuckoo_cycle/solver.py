from __future__ import annotations
from contextlib import closing
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Set, Tuple
import logging
import threading

from .adjacency import AdjacencyIndex, EdgeRecord
from .graph import Graph, Node
from .verify import check_cycle

logger = logging.getLogger(__name__)


class CycleBookkeepingError(RuntimeError):
    """The search produced an edge position the graph does not have."""


def _check_target_len(target_len: int) -> None:
    if isinstance(target_len, bool) or not isinstance(target_len, int) \
            or target_len <= 0 or target_len % 2:
        raise ValueError(f"cycle length must be a positive even integer, got {target_len!r}")


@dataclass
class CycleSearcher:
    """Backtracking search for a simple cycle of exactly ``target_len`` edges.

    Walks start from every node still holding two or more edges. Edges taken
    by the current path are detached from the index and put back on
    backtrack (an undo log), so sibling branches never see each other's
    removals. Cost grows exponentially with ``target_len``, the branching
    factor being the node degree left after trimming: more trimming rounds
    mean fewer branches.
    """
    graph: Graph
    target_len: int
    threads: int = 1
    metrics: Dict[str, int] = field(default_factory=dict)

    def __post_init__(self):
        _check_target_len(self.target_len)
        if self.threads < 1:
            raise ValueError(f"threads must be >= 1, got {self.threads}")
        self.metrics.update({
            "starts": 0,
            "branches": 0,
            "candidates": 0,
            "rejected_candidates": 0,
        })
        self._lock = threading.Lock()

    def _count(self, name: str, by: int = 1) -> None:
        with self._lock:
            self.metrics[name] += by

    def _walks(self, index: AdjacencyIndex, start: Node) -> Iterator[List[int]]:
        path: List[int] = []
        on_path: Set[Node] = {start}
        # frames of (node, remaining incident edges, record of the edge taken into node)
        stack: List[Tuple[Node, Iterator[Tuple[int, Node]], Optional[EdgeRecord]]] = [
            (start, iter(index.incident(start)), None)]

        def unwind() -> None:
            node, _, record = stack.pop()
            if record is not None:
                on_path.discard(node)
                path.pop()
                index.restore_edge(record)

        try:
            while stack:
                node, edges, _ = stack[-1]
                last_step = len(path) + 1 == self.target_len
                for pos, nxt in edges:
                    if not index.has_edge(pos):
                        continue
                    if last_step:
                        if nxt == start:
                            yield path + [pos]
                        continue
                    if nxt == start or nxt in on_path:
                        continue
                    self._count("branches")
                    record = index.remove_edge(pos)
                    path.append(pos)
                    on_path.add(nxt)
                    stack.append((nxt, iter(index.incident(nxt)), record))
                    break
                else:
                    unwind()
        finally:
            # closed early: put back whatever the current path still holds
            while stack:
                unwind()

    def _accept(self, path: List[int]) -> Optional[List[int]]:
        self._count("candidates")
        candidate = sorted(path)
        if any(self.graph.edge_at(p) is None for p in candidate):
            raise CycleBookkeepingError(
                f"search produced edge positions outside a graph of {self.graph.edge_count} edges: {candidate}")
        failure = check_cycle(self.graph, self.target_len, candidate)
        if failure is not None:
            self._count("rejected_candidates")
            logger.warning("discarding closed walk %s: %s", candidate, failure.value)
            return None
        return candidate

    def _search_from(self, index: AdjacencyIndex, starts: List[Node]) -> Optional[List[int]]:
        # edges of exhausted start nodes stay detached until we return
        undo: List[EdgeRecord] = []
        try:
            for start in starts:
                if index.degree(start) < 2:
                    continue
                self._count("starts")
                with closing(self._walks(index, start)) as walks:
                    for path in walks:
                        found = self._accept(path)
                        if found is not None:
                            return found
                # every cycle through start has been tried
                undo.extend(index.remove_edge(pos) for pos, _ in index.incident(start))
            return None
        finally:
            for record in reversed(undo):
                index.restore_edge(record)

    def search(self, index: AdjacencyIndex) -> Optional[List[int]]:
        starts = sorted(node for node in index.nodes() if index.degree(node) >= 2)
        logger.debug("searching %d-cycles from %d start nodes (%d edges)",
                     self.target_len, len(starts), index.edge_count)
        if self.threads == 1 or len(starts) < 2:
            return self._search_from(index, starts)

        # each worker owns a private copy of the index
        results: Dict[int, Optional[List[int]]] = {}
        errors: List[Exception] = []
        lock = threading.Lock()

        def worker(w: int):
            try:
                res = self._search_from(index.copy(), starts[w::self.threads])
            except Exception as exc:
                with lock:
                    errors.append(exc)
                return
            with lock:
                results[w] = res

        threads: List[threading.Thread] = []
        for w in range(min(self.threads, len(starts))):
            t = threading.Thread(target=worker, args=(w,), daemon=True)
            threads.append(t)
            t.start()
        for t in threads:
            t.join()
        if errors:
            raise errors[0]

        found = [res for res in results.values() if res is not None]
        return min(found) if found else None


def search(g: Graph, index: AdjacencyIndex, target_len: int, threads: int = 1) -> Optional[List[int]]:
    """Find a verified ``target_len``-cycle in ``index``.

    Returns the sorted edge positions, or None when no such cycle exists.
    ``index`` is left as it was passed in.
    """
    return CycleSearcher(g, target_len, threads=threads).search(index)
