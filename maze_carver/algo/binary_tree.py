from typing import Iterator

from maze_carver.core.grid import Grid
from maze_carver.algo.base import Generator


class BinaryTree(Generator):
    name = "binary-tree"

    def run(self) -> Iterator[Grid]:
        grid = self.grid

        for coord in grid.coords():
            # North before east, so a choice of candidates[-1] always means east
            candidates = []
            for direction in (Grid.NORTH, Grid.EAST):
                other = grid.neighbor(coord, direction)
                if other is not None:
                    candidates.append(other)

            # Only the north-east corner has neither
            if not candidates:
                continue

            yield self.carve(coord, self.rng.choice(candidates))
