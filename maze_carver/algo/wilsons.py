from typing import Dict, Iterator

from maze_carver.core.grid import Coord, Grid
from maze_carver.algo.base import Generator


class Wilsons(Generator):
    """
    Loop-erased random walks. A walk starts at a random cell outside the
    maze and wanders until it hits the maze. Only the last direction taken
    out of each cell is remembered, so loops erase themselves. The walk is
    then replayed from its start, carving as it goes.
    """
    name = "wilsons"

    def run(self) -> Iterator[Grid]:
        grid = self.grid

        # Swap-remove list + positions for O(1) random pick and removal
        unvisited = list(grid.coords())
        positions = {coord: i for i, coord in enumerate(unvisited)}

        def remove(coord):
            i = positions.pop(coord)
            last = unvisited.pop()
            if last != coord:
                unvisited[i] = last
                positions[last] = i

        first = self.rng.choice(unvisited)
        remove(first)
        in_maze = {first}

        while unvisited:
            start = self.rng.choice(unvisited)

            # Walk phase: nothing is carved yet
            exits: Dict[Coord, int] = {}
            cell = start
            while cell not in in_maze:
                _, direction = self.rng.choice(list(grid.directions(cell)))
                exits[cell] = direction
                cell = grid.neighbor(cell, direction)

            # Replay phase
            cell = start
            while cell not in in_maze:
                nxt = grid.neighbor(cell, exits[cell])
                in_maze.add(cell)
                remove(cell)
                yield self.carve(cell, nxt)
                cell = nxt
