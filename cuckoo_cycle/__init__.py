from .adjacency import AdjacencyIndex, trim
from .api import SolverConfig, SolveResult, find_cycle, solve, verify_cycle
from .graph import Graph, GraphConstructionError, HashedEdges, Node, Side
from .hashing import CuckooHash, SipHash24, key_from_header
from .solver import CycleBookkeepingError, CycleSearcher, search
from .verify import Failure, check_cycle, verify

__all__ = [
    "AdjacencyIndex",
    "CuckooHash",
    "CycleBookkeepingError",
    "CycleSearcher",
    "Failure",
    "Graph",
    "GraphConstructionError",
    "HashedEdges",
    "Node",
    "Side",
    "SipHash24",
    "SolverConfig",
    "SolveResult",
    "check_cycle",
    "find_cycle",
    "key_from_header",
    "search",
    "solve",
    "trim",
    "verify",
    "verify_cycle",
]
