import logging
import os
from numbers import Real
from typing import Optional, Tuple

import cv2
import numpy as np

from maze_carver.core.grid import Grid

logger = logging.getLogger(__name__)

# BGR, OpenCV order
COLOR_BG = (10, 10, 10)
COLOR_WALL = (200, 200, 200)

MAX_CELL_SIZE = 255


def color_cell(max_distance: Real, distance: Real) -> Tuple[int, int, int]:
    """Green scale: brightest at distance 0, darkest at max_distance."""
    if max_distance <= 0:
        intensity = 1.0
    else:
        intensity = (max_distance - distance) / max_distance
    dark = round(255 * intensity)
    bright = 128 + round(127 * intensity)
    return (dark, bright, dark)


def _max_annotation(grid: Grid) -> Optional[Real]:
    numeric = [v for v in grid.annotations.values() if isinstance(v, Real)]
    return max(numeric) if numeric else None


def validate_cell_size(cell_size: int) -> int:
    if not (isinstance(cell_size, int) and 0 < cell_size <= MAX_CELL_SIZE):
        raise ValueError(f"Cell size must be between 1 and {MAX_CELL_SIZE}, got {cell_size!r}")
    return cell_size


def render_image(grid: Grid, cell_size: int = 10) -> np.ndarray:
    """Returns an (height, width, 3) uint8 BGR image of the grid."""
    validate_cell_size(cell_size)
    height = grid.rows * cell_size + 1
    width = grid.columns * cell_size + 1

    img = np.empty((height, width, 3), dtype=np.uint8)
    img[:, :] = COLOR_BG

    # 1. Backgrounds from numeric annotations (distances)
    max_distance = _max_annotation(grid)
    if max_distance is not None:
        for (row, col), value in grid.annotations.items():
            if not isinstance(value, Real):
                continue
            y, x = row * cell_size, col * cell_size
            img[y:y + cell_size + 1, x:x + cell_size + 1] = color_cell(max_distance, value)

    # 2. Walls, each drawn once: north/west edges of the border, south/east of every cell
    cv2.line(img, (0, 0), (width - 1, 0), COLOR_WALL, 1)
    cv2.line(img, (0, 0), (0, height - 1), COLOR_WALL, 1)
    for row, col in grid.coords():
        x1, y1 = col * cell_size, row * cell_size
        x2, y2 = x1 + cell_size, y1 + cell_size
        if not grid.is_linked((row, col), (row, col + 1)):
            cv2.line(img, (x2, y1), (x2, y2), COLOR_WALL, 1)
        if not grid.is_linked((row, col), (row + 1, col)):
            cv2.line(img, (x1, y2), (x2, y2), COLOR_WALL, 1)

    return img


def save_image(grid: Grid, path: str, cell_size: int = 10):
    """Writes the grid as an image; the format follows the file extension."""
    ext = os.path.splitext(path)[1]
    if not ext:
        raise ValueError(f"Cannot tell the image format of {path!r}: no extension")
    img = render_image(grid, cell_size)
    try:
        written = cv2.imwrite(path, img)
    except cv2.error as e:
        raise ValueError(f"Could not write image {path!r}: {e}") from e
    if not written:
        raise ValueError(f"Could not write image {path!r}")
    logger.info(f"Saved {grid.rows}x{grid.columns} maze to {path}")
