from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Dict, Optional, Sequence, Tuple
import logging
import platform
import sys
import time
import psutil

from .adjacency import AdjacencyIndex, trim
from .graph import Graph, HashedEdges
from .hashing import Key, key_from_header
from .solver import CycleSearcher
from .verify import verify

logger = logging.getLogger(__name__)


@dataclass
class SolverConfig:
    header: bytes
    n: int  # number of edges
    cycle_len: int = 42
    trim_rounds: int = 100
    threads: int = 1
    nonce: int = 0  # first nonce tried
    max_attempts: int = 1
    time_budget_ms: Optional[int] = None


@dataclass
class SolveResult:
    found: bool
    nonce: Optional[int] = None
    key: Optional[Tuple[int, int, int, int]] = None
    cycle_edges: List[int] = field(default_factory=list)
    # budget ran out: not the same thing as "no cycle in any attempted graph"
    timed_out: bool = False
    elapsed_ms: float = 0.0
    rss_bytes: int = 0  # resident set size when the solve finished
    metrics: Dict[str, int | float] = field(default_factory=dict)
    build_info: Dict[str, str] = field(default_factory=dict)


def build_info() -> Dict[str, str]:
    info = {
        "python": sys.version.split()[0],
        "platform": platform.platform(),
        "cpu_count": str(psutil.cpu_count(logical=True)),
    }
    return info


def find_cycle(graph: Graph, cycle_len: int, trim_rounds: int = 100, threads: int = 1,
               metrics: Optional[Dict[str, int | float]] = None) -> Optional[List[int]]:
    """
    Solve one graph: fresh adjacency index, edge trimming, cycle search.
    Returns sorted edge positions or None. Counters are added into ``metrics`` if given.
    """
    searcher = CycleSearcher(graph, cycle_len, threads=threads)
    index = AdjacencyIndex.from_graph(graph)
    trim(index, trim_rounds)
    logger.debug("%d of %d edges survive trimming", index.edge_count, graph.edge_count)
    cycle = searcher.search(index)

    if metrics is not None:
        metrics["edges"] = metrics.get("edges", 0) + graph.edge_count
        metrics["edges_after_trim"] = metrics.get("edges_after_trim", 0) + index.edge_count
        for name, value in searcher.metrics.items():
            metrics[name] = metrics.get(name, 0) + value
    return cycle


def verify_cycle(header: bytes, n: int, cycle_edges: Sequence[int], cycle_len: int = 42,
                 nonce: int = 0) -> bool:
    """
    Verify a claimed cycle (edge positions) for the graph of ``header``/``nonce``.
    Only the claimed edges are hashed; the graph itself is never built.
    """
    if isinstance(n, bool) or not isinstance(n, int) or n <= 0:
        return False
    try:
        key = key_from_header(header, nonce)
    except (TypeError, ValueError):
        logger.debug("cannot derive a key from header %r and nonce %r", header, nonce)
        return False
    return verify(HashedEdges(key, n), cycle_len, cycle_edges)


def solve(config: SolverConfig) -> SolveResult:
    """
    Try nonces ``config.nonce, config.nonce + 1, ...`` until a cycle is found,
    ``max_attempts`` graphs were searched, or the time budget is spent.
    The budget is checked between attempts; a running search is not interrupted.
    """
    proc = psutil.Process()
    t0 = time.perf_counter()

    metrics: Dict[str, int | float] = {}
    attempts = 0
    found = False
    timed_out = False
    nonce: Optional[int] = None
    key: Optional[Key] = None
    cycle: List[int] = []

    time_budget_ms = config.time_budget_ms if config.time_budget_ms is not None else 0

    while True:
        if config.max_attempts and attempts >= config.max_attempts:
            break
        now_ms = (time.perf_counter() - t0) * 1000.0
        if time_budget_ms and now_ms >= time_budget_ms:
            timed_out = True
            logger.info("time budget of %d ms spent after %d attempts", time_budget_ms, attempts)
            break

        nonce = config.nonce + attempts
        attempts += 1
        key = key_from_header(config.header, nonce)
        graph = Graph.build(key, config.n)
        logger.info("attempt %d: nonce %d", attempts, nonce)
        res = find_cycle(graph, config.cycle_len, config.trim_rounds, config.threads, metrics)
        if res is not None:
            found = True
            cycle = res
            break

    elapsed_ms = (time.perf_counter() - t0) * 1000.0
    rss = getattr(proc.memory_info(), "rss", 0)

    metrics["attempts"] = attempts

    return SolveResult(
        found=found,
        nonce=nonce if found else None,
        key=key if found else None,
        cycle_edges=cycle,
        timed_out=timed_out,
        elapsed_ms=elapsed_ms,
        rss_bytes=rss,
        metrics=metrics,
        build_info=build_info(),
    )
