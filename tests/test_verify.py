import itertools

import pytest

from cuckoo_cycle.graph import Graph, HashedEdges
from cuckoo_cycle.verify import Failure, check_cycle, verify

HEXAGON = Graph.from_pairs([(0, 0), (1, 0), (1, 2), (3, 2), (3, 3), (0, 3)])
TWO_SQUARES = Graph.from_pairs([(0, 0), (0, 1), (1, 0), (1, 1), (6, 6), (6, 7), (7, 6), (7, 7)])


def test_verify_hexagon():
    assert verify(HEXAGON, 6, [0, 1, 2, 3, 4, 5])


def test_order_does_not_matter():
    assert verify(HEXAGON, 6, [5, 3, 1, 0, 2, 4])
    assert verify(HEXAGON, 6, (4, 5, 0, 1, 2, 3))


def test_two_disjoint_cycles_rejected():
    assert not verify(TWO_SQUARES, 8, [0, 1, 2, 3, 4, 5, 6, 7])
    assert check_cycle(TWO_SQUARES, 8, list(range(8))) is Failure.NOT_SINGLE_CYCLE
    # each square on its own is fine
    assert verify(TWO_SQUARES, 4, [0, 1, 2, 3])
    assert verify(TWO_SQUARES, 4, [4, 5, 6, 7])


def test_two_disjoint_two_cycles_rejected():
    g = Graph.from_pairs([(1, 3), (1, 3), (2, 0), (2, 0)])
    assert verify(g, 2, [0, 1])
    assert check_cycle(g, 4, [0, 1, 2, 3]) is Failure.NOT_SINGLE_CYCLE


@pytest.mark.parametrize("target_len,edges", [
    (6, [0, 1, 2, 3, 4]),
    (4, [0, 1, 2, 3, 4, 5]),
    (6, []),
])
def test_length_mismatch(target_len, edges):
    assert check_cycle(HEXAGON, target_len, edges) is Failure.LENGTH_MISMATCH


@pytest.mark.parametrize("target_len", [0, -2, 3, 5, 6.0, "6", None, True])
def test_bad_target_length(target_len):
    assert check_cycle(HEXAGON, target_len, [0, 1, 2, 3, 4, 5]) is Failure.BAD_TARGET_LENGTH


def test_empty_cycle_is_never_valid():
    assert not verify(HEXAGON, 0, [])
    assert check_cycle(HEXAGON, 0, []) is Failure.BAD_TARGET_LENGTH


def test_duplicate_edge_rejected():
    assert check_cycle(HEXAGON, 6, [0, 1, 2, 3, 4, 4]) is Failure.DUPLICATE_EDGE
    assert check_cycle(HEXAGON, 6, [0, 0, 0, 0, 0, 0]) is Failure.DUPLICATE_EDGE


@pytest.mark.parametrize("edges", [[0, 1, 2, 3, 4, 6], [0, 1, 2, 3, 4, -1], [0, 1, 2, 3, 4, 1 << 70]])
def test_out_of_range_rejected(edges):
    assert check_cycle(HEXAGON, 6, edges) is Failure.EDGE_OUT_OF_RANGE


@pytest.mark.parametrize("edges", [[0, 1, 2, 3, 4, "5"], [0, 1, 2, 3, 4, 5.0], [0, 1, 2, 3, 4, None],
                                   [0, 1, 2, 3, 4, True]])
def test_non_integer_positions_rejected(edges):
    assert check_cycle(HEXAGON, 6, edges) is Failure.NOT_AN_INDEX


def test_non_iterable_rejected():
    assert not verify(HEXAGON, 6, None)
    assert not verify(HEXAGON, 6, 5)


def test_loose_ends_rejected():
    g = Graph.from_pairs([(0, 0), (1, 0), (1, 1), (2, 1)])
    assert check_cycle(g, 4, [0, 1, 2, 3]) is Failure.DEGREE_NOT_TWO


def test_branching_rejected():
    # V(0) touched three times, U(3) once
    g = Graph.from_pairs([(0, 0), (1, 0), (2, 0), (3, 1)])
    assert check_cycle(g, 4, [0, 1, 2, 3]) is Failure.DEGREE_NOT_TWO


def test_lazy_edges_agree_with_graph():
    key = (0, 1, 1, 5)
    cycle = [33, 79, 99, 122, 164, 248]
    assert verify(Graph.build(key, 256), 6, cycle)
    assert verify(HashedEdges(key, 256), 6, cycle)
    assert not verify(HashedEdges(key, 256), 6, cycle[:-1] + [249])


def test_endless_input_is_not_drained():
    assert check_cycle(HEXAGON, 6, itertools.count()) is Failure.LENGTH_MISMATCH


def test_generator_input():
    assert verify(HEXAGON, 6, (p for p in range(6)))
