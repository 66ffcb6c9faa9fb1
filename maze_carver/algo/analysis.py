from typing import Dict, FrozenSet, Iterator, List, Optional, Tuple

from maze_carver.core.errors import NoPath, UnreachableCell
from maze_carver.core.grid import Coord, Grid
from maze_carver.core.reporting import Channel, ResultSlot, spawn, synchronous


class Distances:
    """
    Link-distances from a source cell, as known at one point of the search.

    `grid` is the maze annotated with every distance found so far; its
    changed_cells (and ours) is the shell announced by this report.
    """

    __slots__ = ('maze', 'grid', 'source', 'max', 'changed_cells', '_values')

    def __init__(self, maze: Grid, source: Coord, values: Dict[Coord, int], max_distance: int = 0,
                 changed_cells: FrozenSet[Coord] = frozenset(), grid: Optional[Grid] = None):
        self.maze = maze
        self.source = source
        self._values = values
        self.max = max_distance
        self.changed_cells = frozenset(changed_cells)
        self.grid = grid if grid is not None else maze

    def __getitem__(self, coord: Coord) -> int:
        return self._values[coord]

    def __contains__(self, coord) -> bool:
        return coord in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self):
        return iter(self._values)

    def get(self, coord: Coord, default=None):
        return self._values.get(coord, default)

    def items(self):
        return self._values.items()

    def as_dict(self) -> Dict[Coord, int]:
        return dict(self._values)

    def farthest(self) -> Tuple[Coord, int]:
        """A cell at the greatest distance (first in row-major order on ties)."""
        best = self.source
        for coord in self.maze.coords():
            if self._values.get(coord, -1) > self._values.get(best, -1):
                best = coord
        return best, self._values.get(best, 0)

    def __repr__(self):
        return f"<Distances from {self.source} cells={len(self)} max={self.max}>"


def _shells(grid: Grid, source: Coord) -> Iterator[Distances]:
    """Breadth-first over links only, one report per shell of equal distance."""
    values = {source: 0}
    annotated = grid.annotate({source: 0})
    yield Distances(grid, source, dict(values), 0, annotated.changed_cells, annotated)

    frontier = [source]
    distance = 0
    while frontier:
        shell: List[Coord] = []
        for coord in frontier:
            for other in grid.linked(coord):
                if other not in values:
                    values[other] = distance + 1
                    shell.append(other)
        if not shell:
            break

        distance += 1
        annotated = annotated.annotate({coord: distance for coord in shell})
        yield Distances(grid, source, dict(values), distance, annotated.changed_cells, annotated)
        frontier = shell

    if len(values) < grid.size:
        raise UnreachableCell(source, (c for c in grid.coords() if c not in values))


def find_distances(grid: Grid, source: Coord, stream: Optional[Channel] = None) -> ResultSlot:
    source = tuple(source)
    grid.index(source)
    initial = Distances(grid, source, {})
    return spawn(_shells(grid, source), initial, stream, name="find-distances")


distances_from = synchronous(find_distances)


def find_path(distances: Distances, from_coord: Coord, to_coord: Coord) -> List[Coord]:
    """
    Walks back from to_coord, always onto the linked neighbor one step
    closer to the source. Returns the path ordered from_coord -> to_coord.
    """
    from_coord = tuple(from_coord)
    to_coord = tuple(to_coord)
    grid = distances.maze
    grid.index(from_coord)
    grid.index(to_coord)

    if to_coord not in distances:
        raise NoPath(from_coord, to_coord)

    current = to_coord
    path = [current]
    while current != from_coord:
        target = distances[current] - 1
        step = None
        for other in grid.linked(current):
            if distances.get(other) == target:
                step = other
                break
        if step is None:
            raise NoPath(from_coord, to_coord, stuck_at=current)
        current = step
        path.append(current)

    path.reverse()
    return path


def longest_path(grid: Grid) -> List[Coord]:
    """
    In a perfect maze the cell farthest from anywhere is one end of a
    longest path; the cell farthest from it is the other end.
    """
    start, _ = distances_from(grid, (0, 0)).farthest()
    distances = distances_from(grid, start)
    goal, _ = distances.farthest()
    return find_path(distances, start, goal)
