import pytest

from cuckoo_cycle import solver
from cuckoo_cycle.adjacency import AdjacencyIndex, trim
from cuckoo_cycle.graph import Graph
from cuckoo_cycle.solver import CycleBookkeepingError, CycleSearcher, search
from cuckoo_cycle.verify import Failure, verify

HEXAGON = Graph.from_pairs([(0, 0), (1, 0), (1, 2), (3, 2), (3, 3), (0, 3)])
TWO_SQUARES = Graph.from_pairs([(0, 0), (0, 1), (1, 0), (1, 1), (6, 6), (6, 7), (7, 6), (7, 7)])


def _solve(g, target_len, rounds=100, threads=1):
    index = AdjacencyIndex.from_graph(g)
    trim(index, rounds)
    return search(g, index, target_len, threads=threads)


def test_finds_hexagon():
    assert _solve(HEXAGON, 6) == [0, 1, 2, 3, 4, 5]


def test_no_cycle_of_other_length():
    assert _solve(HEXAGON, 4) is None
    assert _solve(HEXAGON, 8) is None


def test_no_cycle_longer_than_graph():
    assert _solve(HEXAGON, 42) is None


def test_disjoint_squares_are_not_an_8_cycle():
    assert _solve(TWO_SQUARES, 8) is None
    assert _solve(TWO_SQUARES, 4) == [0, 1, 2, 3]


def test_finds_parallel_edge_two_cycle():
    g = Graph.build((0, 1, 1, 5), 8)
    assert _solve(g, 2) == [2, 4]


def test_built_graph_cycles():
    g = Graph.build((0, 1, 1, 5), 8)
    assert _solve(g, 4) == [3, 5, 6, 7]
    assert _solve(g, 6) is None


@pytest.mark.parametrize("n,target_len", [(16, 6), (256, 6)])
def test_roundtrip_found_cycles_verify(n, target_len):
    g = Graph.build((0, 1, 1, 5), n)
    cycle = _solve(g, target_len)
    assert cycle is not None
    assert cycle == sorted(cycle)
    assert verify(g, target_len, cycle)


def test_search_without_trimming_agrees():
    g = Graph.build((0, 1, 1, 5), 16)
    for rounds in (0, 1, 100):
        cycle = _solve(g, 6, rounds=rounds)
        assert cycle is not None and verify(g, 6, cycle)
    assert _solve(Graph.build((0, 1, 1, 5), 64), 6, rounds=0) is None


def test_search_leaves_index_untouched():
    g = Graph.build((0, 1, 1, 5), 256)
    index = AdjacencyIndex.from_graph(g)
    trim(index, 100)
    before = {node: sorted(index.incident(node)) for node in index.nodes()}
    assert search(g, index, 8) is None
    assert {node: sorted(index.incident(node)) for node in index.nodes()} == before
    assert search(g, index, 6) is not None
    assert {node: sorted(index.incident(node)) for node in index.nodes()} == before


def test_threaded_search():
    g = Graph.build((0, 1, 1, 5), 256)
    single = _solve(g, 6)
    multi = _solve(g, 6, threads=4)
    assert multi is not None and verify(g, 6, multi)
    assert single is not None
    assert _solve(TWO_SQUARES, 4, threads=2) == [0, 1, 2, 3]
    assert _solve(TWO_SQUARES, 8, threads=3) is None


def test_rejected_candidate_does_not_stop_search(monkeypatch):
    real = solver.check_cycle
    calls = []

    def flaky(g, target_len, edges):
        calls.append(list(edges))
        if len(calls) == 1:
            return Failure.NOT_SINGLE_CYCLE
        return real(g, target_len, edges)

    monkeypatch.setattr(solver, "check_cycle", flaky)
    searcher = CycleSearcher(TWO_SQUARES, 4)
    index = AdjacencyIndex.from_graph(TWO_SQUARES)
    assert searcher.search(index) == [0, 1, 2, 3]
    assert searcher.metrics["rejected_candidates"] == 1
    assert searcher.metrics["candidates"] == 2


def test_bookkeeping_error_is_not_a_false():
    index = AdjacencyIndex.from_graph(HEXAGON)
    with pytest.raises(CycleBookkeepingError):
        search(Graph.from_pairs([(0, 0)]), index, 6)


@pytest.mark.parametrize("target_len", [0, 3, -2, 2.0])
def test_bad_target_len(target_len):
    with pytest.raises(ValueError):
        CycleSearcher(HEXAGON, target_len)


def test_bad_threads():
    with pytest.raises(ValueError):
        CycleSearcher(HEXAGON, 6, threads=0)


def test_metrics_counted():
    searcher = CycleSearcher(HEXAGON, 6)
    searcher.search(AdjacencyIndex.from_graph(HEXAGON))
    assert searcher.metrics["starts"] == 1
    assert searcher.metrics["candidates"] == 1
    assert searcher.metrics["branches"] >= 5


def _ring(k):
    # U(i)-V(i)-U(i+1)-...-U(0): one simple cycle of 2k edges
    pairs = []
    for i in range(k):
        pairs.append((i, i))
        pairs.append(((i + 1) % k, i))
    return Graph.from_pairs(pairs)


def test_long_cycle_does_not_hit_recursion_limit():
    g = _ring(1000)
    index = AdjacencyIndex.from_graph(g)
    assert search(g, index, 2000) == list(range(2000))
    assert index.edge_count == 2000
