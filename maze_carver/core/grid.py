from array import array
from typing import Any, Dict, FrozenSet, Iterator, List, Mapping, NamedTuple, Optional, Tuple

from maze_carver.core.errors import InvalidDimension, InvalidLink, OutOfBounds

Coord = Tuple[int, int]


class Cell(NamedTuple):
    coord: Coord
    neighbors: FrozenSet[Coord]
    links: FrozenSet[Coord]
    annotation: Any = None


class Grid:
    """
    A rectangular lattice of cells addressed by (row, column).

    Each cell is one byte of wall bits. A wall bit that has been cleared
    between two adjacent cells is a link. Grids are snapshots: link(),
    annotate() and named() return a new Grid and leave the receiver alone,
    so a consumer holding an older snapshot never sees it change.
    """

    # Bitmask Constants
    NORTH = 0b00000001
    EAST  = 0b00000010
    SOUTH = 0b00000100
    WEST  = 0b00001000

    # All walls present by default (N|E|S|W) = 15
    ALL_WALLS = NORTH | EAST | SOUTH | WEST

    # Neighbor order matters for seeded runs
    DIRECTIONS = (NORTH, SOUTH, EAST, WEST)

    # Direction Helpers
    DR = {NORTH: -1, SOUTH: 1, EAST: 0, WEST: 0}
    DC = {NORTH: 0, SOUTH: 0, EAST: 1, WEST: -1}
    OPPOSITE = {NORTH: SOUTH, SOUTH: NORTH, EAST: WEST, WEST: EAST}

    __slots__ = ('rows', 'columns', 'cells', 'annotations', 'algorithm_name', 'changed_cells')

    def __init__(self, rows: int, columns: int):
        if not _positive_int(rows) or not _positive_int(columns):
            raise InvalidDimension(rows, columns)
        self.rows = rows
        self.columns = columns
        # 'B' (unsigned char) -> 1 byte per cell
        self.cells = array('B', [self.ALL_WALLS] * (rows * columns))
        self.annotations: Dict[Coord, Any] = {}
        self.algorithm_name = ""
        self.changed_cells: FrozenSet[Coord] = frozenset()

    def _derive(self, cells=None, annotations=None, algorithm_name=None, changed_cells=frozenset()) -> "Grid":
        # Unchanged parts are shared with the receiver; they are never written in place.
        grid = Grid.__new__(Grid)
        grid.rows = self.rows
        grid.columns = self.columns
        grid.cells = self.cells if cells is None else cells
        grid.annotations = self.annotations if annotations is None else annotations
        grid.algorithm_name = self.algorithm_name if algorithm_name is None else algorithm_name
        grid.changed_cells = frozenset(changed_cells)
        return grid

    @property
    def size(self) -> int:
        return self.rows * self.columns

    def contains(self, coord: Coord) -> bool:
        row, col = coord
        return 0 <= row < self.rows and 0 <= col < self.columns

    def index(self, coord: Coord) -> int:
        try:
            row, col = coord
        except (TypeError, ValueError):
            raise OutOfBounds(coord, self.rows, self.columns) from None
        if self.contains((row, col)):
            return row * self.columns + col
        raise OutOfBounds(coord, self.rows, self.columns)

    def coords(self) -> Iterator[Coord]:
        """Yields every coordinate in row-major order."""
        for row in range(self.rows):
            for col in range(self.columns):
                yield (row, col)

    def neighbor(self, coord: Coord, direction: int) -> Optional[Coord]:
        row = coord[0] + self.DR[direction]
        col = coord[1] + self.DC[direction]
        if self.contains((row, col)):
            return (row, col)
        return None

    def directions(self, coord: Coord) -> Iterator[Tuple[Coord, int]]:
        """
        Yields (neighbor, direction_to_neighbor) for all lattice neighbors.
        Does NOT check links.
        """
        for direction in self.DIRECTIONS:
            other = self.neighbor(coord, direction)
            if other is not None:
                yield other, direction

    def neighbors(self, coord: Coord) -> List[Coord]:
        self.index(coord)
        return [other for other, _ in self.directions(coord)]

    def linked(self, coord: Coord) -> List[Coord]:
        """Neighbors reachable through a carved link, in N, S, E, W order."""
        val = self.cells[self.index(coord)]
        return [other for other, direction in self.directions(coord) if not (val & direction)]

    def is_linked(self, a: Coord, b: Coord) -> bool:
        direction = self._direction_between(a, b)
        return direction is not None and not (self.cells[self.index(a)] & direction)

    def lookup(self, coord: Coord) -> Cell:
        self.index(coord)
        return Cell(
            coord=tuple(coord),
            neighbors=frozenset(self.neighbors(coord)),
            links=frozenset(self.linked(coord)),
            annotation=self.annotations.get(tuple(coord)),
        )

    def link(self, a: Coord, b: Coord) -> "Grid":
        """
        Removes the wall between a and b, on both sides.
        Returns the new snapshot with changed_cells = {a, b}, or no changed
        cells if the two were already linked.
        """
        idx_a = self.index(a)
        idx_b = self.index(b)
        direction = self._direction_between(a, b)
        if direction is None:
            raise InvalidLink(a, b)
        if not (self.cells[idx_a] & direction):
            return self._derive(changed_cells=())

        cells = array('B', self.cells)
        cells[idx_a] &= ~direction
        cells[idx_b] &= ~self.OPPOSITE[direction]
        return self._derive(cells=cells, changed_cells=(tuple(a), tuple(b)))

    def annotate(self, mapping: Mapping[Coord, Any]) -> "Grid":
        for coord in mapping:
            self.index(coord)
        annotations = dict(self.annotations)
        annotations.update(mapping)
        return self._derive(annotations=annotations, changed_cells=mapping.keys())

    def named(self, algorithm_name: str) -> "Grid":
        return self._derive(algorithm_name=algorithm_name, changed_cells=self.changed_cells)

    def link_count(self) -> int:
        count = 0
        for i, val in enumerate(self.cells):
            row, col = divmod(i, self.columns)
            # Counting only south and east links sees each link once
            if row < self.rows - 1 and not (val & self.SOUTH):
                count += 1
            if col < self.columns - 1 and not (val & self.EAST):
                count += 1
        return count

    def is_fresh(self) -> bool:
        return (
            not self.algorithm_name
            and not self.changed_cells
            and all(val == self.ALL_WALLS for val in self.cells)
        )

    def _direction_between(self, a: Coord, b: Coord) -> Optional[int]:
        dr = b[0] - a[0]
        dc = b[1] - a[1]
        for direction in self.DIRECTIONS:
            if self.DR[direction] == dr and self.DC[direction] == dc:
                return direction
        return None

    def __eq__(self, other):
        if not isinstance(other, Grid):
            return NotImplemented
        return (
            self.rows == other.rows
            and self.columns == other.columns
            and self.cells == other.cells
            and self.annotations == other.annotations
        )

    __hash__ = None

    def __repr__(self):
        name = f" {self.algorithm_name}" if self.algorithm_name else ""
        return f"<Grid {self.rows}x{self.columns}{name} links={self.link_count()}>"


def make_grid(rows: int, columns: int) -> Grid:
    return Grid(rows, columns)


def _positive_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0
