class MazeError(Exception):
    """Base class for every error raised by the maze engine."""


class InvalidDimension(MazeError, ValueError):
    def __init__(self, rows, columns):
        super().__init__(f"Grid dimensions must be positive integers, got {rows!r}x{columns!r}")
        self.rows = rows
        self.columns = columns


class OutOfBounds(MazeError, IndexError):
    def __init__(self, coord, rows: int, columns: int):
        super().__init__(f"Coordinate {coord!r} out of bounds for {rows}x{columns} grid")
        self.coord = coord


class InvalidLink(MazeError, ValueError):
    def __init__(self, a, b):
        super().__init__(f"Cannot link {a!r} to {b!r}: cells are not adjacent")
        self.a = a
        self.b = b


class UnknownAlgorithm(MazeError, ValueError):
    def __init__(self, name):
        super().__init__(f"Unknown algorithm {name!r}")
        self.name = name


class UnreachableCell(MazeError, RuntimeError):
    """Raised when analysis finds cells that cannot be reached over links."""

    def __init__(self, source, unreachable):
        self.source = source
        self.unreachable = frozenset(unreachable)
        super().__init__(f"{len(self.unreachable)} cell(s) unreachable from {source!r}")


class NoPath(MazeError, RuntimeError):
    def __init__(self, from_coord, to_coord, stuck_at=None):
        msg = f"No path from {from_coord!r} to {to_coord!r}"
        if stuck_at is not None:
            msg += f" (stuck at {stuck_at!r})"
        super().__init__(msg)
        self.from_coord = from_coord
        self.to_coord = to_coord


class ProtocolError(MazeError, RuntimeError):
    """Misuse of the reporting protocol, e.g. reading a result too early."""


class Cancelled(MazeError, RuntimeError):
    """The consumer cancelled the stream before the routine finished."""
