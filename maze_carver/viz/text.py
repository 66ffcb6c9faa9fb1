import sys

from maze_carver.core.grid import Grid

CELL_WIDTH = 3


def cell_body(grid: Grid, coord) -> str:
    annotation = grid.annotations.get(coord)
    if annotation is None:
        return " " * CELL_WIDTH
    label = str(annotation)
    if len(label) > CELL_WIDTH:
        # Wide values (e.g. distances >= 1000) only fit as their tail
        label = label[-CELL_WIDTH:]
    return label.center(CELL_WIDTH)


def render_text(grid: Grid) -> str:
    lines = ["+" + ("-" * CELL_WIDTH + "+") * grid.columns]

    for row in range(grid.rows):
        body = "|"
        bottom = "+"
        for col in range(grid.columns):
            coord = (row, col)
            body += cell_body(grid, coord)
            body += " " if grid.is_linked(coord, (row, col + 1)) else "|"
            bottom += (" " if grid.is_linked(coord, (row + 1, col)) else "-") * CELL_WIDTH
            bottom += "+"
        lines.append(body)
        lines.append(bottom)

    return "\n".join(lines)


def print_grid(grid: Grid, out=None):
    out = out if out is not None else sys.stdout
    if grid.algorithm_name:
        print(f"generated with {grid.algorithm_name}", file=out)
    print(render_text(grid), file=out)
    print(file=out)
