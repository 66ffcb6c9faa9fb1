from typing import Iterator, List

from maze_carver.core.grid import Coord, Grid
from maze_carver.algo.base import Generator


class Sidewinder(Generator):
    name = "sidewinder"

    def run(self) -> Iterator[Grid]:
        grid = self.grid

        for row in range(grid.rows):
            run: List[Coord] = []

            for col in range(grid.columns):
                coord = (row, col)
                run.append(coord)

                at_north_edge = grid.neighbor(coord, Grid.NORTH) is None
                at_east_edge = grid.neighbor(coord, Grid.EAST) is None
                close_run = at_east_edge or (not at_north_edge and self.rng.randrange(2) == 0)

                if close_run:
                    member = self.rng.choice(run)
                    north = grid.neighbor(member, Grid.NORTH)
                    # The top row is a single run carved eastward
                    if north is not None:
                        yield self.carve(member, north)
                    run = []
                else:
                    yield self.carve(coord, grid.neighbor(coord, Grid.EAST))
