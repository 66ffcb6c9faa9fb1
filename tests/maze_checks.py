"""Shared helpers for the test modules: capturing reports and checking mazes."""
import os
import sys
from collections import deque

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_carver.core.grid import Grid
from maze_carver.core.reporting import Channel

TIMEOUT = 10


def all_reports(routine, *args, **kwargs):
    """Every report a consumer sees: the stream contents, then the final result."""
    stream = Channel()
    slot = routine(*args, stream=stream, **kwargs)
    reports = list(stream)
    reports.append(slot.get(timeout=TIMEOUT))
    return reports


def final_grid(routine, *args, **kwargs):
    return all_reports(routine, *args, **kwargs)[-1]


def reachable(grid: Grid, start=(0, 0)):
    seen = {start}
    frontier = deque([start])
    while frontier:
        current = frontier.popleft()
        for other in grid.linked(current):
            if other not in seen:
                seen.add(other)
                frontier.append(other)
    return seen


def has_cycle(grid: Grid, start=(0, 0)) -> bool:
    """Breadth-first, never going back along the link just arrived on."""
    frontier = deque([(start, None)])
    visited = set()
    while frontier:
        current, parent = frontier.popleft()
        if current in visited:
            return True
        visited.add(current)
        for other in grid.linked(current):
            if other != parent:
                frontier.append((other, current))
    return False


def is_perfect(grid: Grid) -> bool:
    return (
        grid.link_count() == grid.size - 1
        and len(reachable(grid)) == grid.size
        and not has_cycle(grid)
    )
