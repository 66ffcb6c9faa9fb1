from typing import Iterator, Optional

from maze_carver.core.grid import Coord, Grid
from maze_carver.algo.base import Generator


class HuntAndKill(Generator):
    name = "hunt-and-kill"

    def run(self) -> Iterator[Grid]:
        grid = self.grid
        current: Optional[Coord] = self.rng.choice(list(grid.coords()))
        visited = {current}

        while current is not None:
            # Kill: random walk through unvisited cells
            fresh = [other for other in grid.neighbors(current) if other not in visited]
            if fresh:
                nxt = self.rng.choice(fresh)
                visited.add(nxt)
                yield self.carve(current, nxt)
                current = nxt
                continue

            # Hunt: first unvisited cell (row-major) touching the maze
            current = None
            for coord in grid.coords():
                if coord in visited:
                    continue
                seen = [other for other in grid.neighbors(coord) if other in visited]
                if seen:
                    visited.add(coord)
                    yield self.carve(coord, self.rng.choice(seen))
                    current = coord
                    break
