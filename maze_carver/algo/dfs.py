from typing import Iterator, List

from maze_carver.core.grid import Coord, Grid
from maze_carver.algo.base import Generator


class RecursiveBacktracker(Generator):
    name = "recursive-backtracker"

    def run(self) -> Iterator[Grid]:
        grid = self.grid

        start = self.rng.choice(list(grid.coords()))
        visited = {start}

        # Stack of (row, col)
        stack: List[Coord] = [start]

        while stack:
            current = stack[-1]

            # Find unvisited neighbors
            neighbors = [other for other in grid.neighbors(current) if other not in visited]

            if neighbors:
                # Choose random neighbor
                nxt = self.rng.choice(neighbors)
                visited.add(nxt)
                stack.append(nxt)
                yield self.carve(current, nxt)
            else:
                # Backtrack
                stack.pop()
