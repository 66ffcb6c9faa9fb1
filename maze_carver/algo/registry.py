from enum import Enum
from typing import Callable, Dict, Optional, Type

from maze_carver.core.errors import UnknownAlgorithm
from maze_carver.core.grid import Grid
from maze_carver.core.reporting import Channel, ResultSlot
from maze_carver.algo.base import Generator
from maze_carver.algo.aldous_broder import AldousBroder
from maze_carver.algo.binary_tree import BinaryTree
from maze_carver.algo.dfs import RecursiveBacktracker
from maze_carver.algo.hunt_and_kill import HuntAndKill
from maze_carver.algo.sidewinder import Sidewinder
from maze_carver.algo.wilsons import Wilsons


class Algorithm(Enum):
    BINARY_TREE = "binary-tree"
    SIDEWINDER = "sidewinder"
    ALDOUS_BRODER = "aldous-broder"
    WILSONS = "wilsons"
    HUNT_AND_KILL = "hunt-and-kill"
    RECURSIVE_BACKTRACKER = "recursive-backtracker"


GENERATORS: Dict[Algorithm, Type[Generator]] = {
    Algorithm.BINARY_TREE: BinaryTree,
    Algorithm.SIDEWINDER: Sidewinder,
    Algorithm.ALDOUS_BRODER: AldousBroder,
    Algorithm.WILSONS: Wilsons,
    Algorithm.HUNT_AND_KILL: HuntAndKill,
    Algorithm.RECURSIVE_BACKTRACKER: RecursiveBacktracker,
}

ALGORITHM_NAMES = tuple(algorithm.value for algorithm in Algorithm)

Routine = Callable[..., ResultSlot]


def resolve(name) -> Algorithm:
    if isinstance(name, Algorithm):
        return name
    try:
        return Algorithm(name)
    except ValueError:
        raise UnknownAlgorithm(name) from None


def generator_class(name) -> Type[Generator]:
    return GENERATORS[resolve(name)]


def algorithm_functions(name) -> Routine:
    """
    Resolves an algorithm name to its routine:
    routine(grid, stream=None, seed=None, rng=None) -> ResultSlot
    """
    return generator_class(name).start


def generate(name, rows: int, columns: int, stream: Optional[Channel] = None, seed: int = None) -> ResultSlot:
    """Fresh grid plus algorithm in one call; bad input fails here, not mid-stream."""
    routine = algorithm_functions(name)
    return routine(Grid(rows, columns), stream=stream, seed=seed)
