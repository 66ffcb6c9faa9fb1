from typing import Iterator

from maze_carver.core.grid import Grid
from maze_carver.algo.base import Generator


class AldousBroder(Generator):
    """
    Unbiased random walk. Every move to a cell never seen before carves a
    link; moves onto visited cells just move.
    """
    name = "aldous-broder"

    def run(self) -> Iterator[Grid]:
        grid = self.grid
        current = self.rng.choice(list(grid.coords()))
        visited = {current}

        while len(visited) < grid.size:
            nxt = self.rng.choice(grid.neighbors(current))
            if nxt not in visited:
                visited.add(nxt)
                yield self.carve(current, nxt)
            current = nxt
