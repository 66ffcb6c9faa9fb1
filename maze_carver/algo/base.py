import random
from abc import ABC, abstractmethod
from typing import Iterator, Optional

from maze_carver.core.grid import Coord, Grid
from maze_carver.core.reporting import Channel, ResultSlot, spawn


class Generator(ABC):
    name = ""

    def __init__(self, grid: Grid, seed: int = None, rng=None):
        self.initial = grid
        self.grid = grid
        self.seed = seed
        # Anything with choice() and randrange() will do
        self.rng = rng if rng is not None else random.Random(seed)
        self.step_count = 0

    @abstractmethod
    def run(self) -> Iterator[Grid]:
        """
        Yields the new grid snapshot after every link carved.
        self.grid always holds the latest snapshot.
        """
        pass

    def carve(self, a: Coord, b: Coord) -> Grid:
        self.grid = self.grid.link(a, b)
        self.step_count += 1
        return self.grid

    def finish(self, grid: Grid) -> Grid:
        return grid.named(self.name)

    def run_all(self) -> Grid:
        """Helper to run the generator to completion."""
        for _ in self.run():
            pass
        return self.finish(self.grid)

    @classmethod
    def start(cls, grid: Grid, stream: Optional[Channel] = None, seed: int = None, rng=None) -> ResultSlot:
        generator = cls(grid, seed=seed, rng=rng)
        return spawn(generator.run(), grid, stream, finish=generator.finish, name=cls.name)
