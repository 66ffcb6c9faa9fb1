import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_checks import TIMEOUT, all_reports

from maze_carver.core.errors import NoPath, OutOfBounds, UnreachableCell
from maze_carver.core.grid import make_grid
from maze_carver.core.reporting import Channel
from maze_carver.algo.analysis import Distances, distances_from, find_distances, find_path, longest_path
from maze_carver.algo.dfs import RecursiveBacktracker


def u_shaped_maze():
    # (0,0)-(0,1)
    #         |
    # (1,0)-(1,1)
    return make_grid(2, 2).link((0, 0), (0, 1)).link((0, 1), (1, 1)).link((1, 1), (1, 0))


class TestDistances(unittest.TestCase):
    def test_distances(self):
        distances = distances_from(u_shaped_maze(), (0, 0))

        self.assertEqual(distances.as_dict(), {(0, 0): 0, (0, 1): 1, (1, 1): 2, (1, 0): 3})
        self.assertEqual(distances.max, 3)
        self.assertEqual(distances.farthest(), ((1, 0), 3))

    def test_one_report_per_shell(self):
        reports = all_reports(find_distances, u_shaped_maze(), (0, 0))
        initial, shells, final = reports[0], reports[1:-1], reports[-1]

        self.assertEqual(len(initial), 0)
        self.assertEqual(initial.changed_cells, frozenset())

        self.assertEqual([s.changed_cells for s in shells],
                         [{(0, 0)}, {(0, 1)}, {(1, 1)}, {(1, 0)}])
        self.assertEqual([s.max for s in shells], [0, 1, 2, 3])
        self.assertIs(final, shells[-1])

        # The annotated snapshot carries every distance found so far
        self.assertEqual(shells[2].grid.annotations, {(0, 0): 0, (0, 1): 1, (1, 1): 2})
        self.assertEqual(shells[2].grid.changed_cells, {(1, 1)})

    def test_shells_on_generated_maze(self):
        maze = RecursiveBacktracker(make_grid(9, 7), seed=8).run_all()
        reports = all_reports(find_distances, maze, (4, 3))

        announced = {}
        last_max = -1
        for index, shell in enumerate(reports[1:-1]):
            self.assertGreater(shell.max, last_max)
            last_max = shell.max
            for coord in shell.changed_cells:
                self.assertNotIn(coord, announced, "each cell is announced exactly once")
                announced[coord] = index
                self.assertEqual(shell[coord], index)
                self.assertEqual(shell.grid.annotations[coord], index)

        self.assertEqual(len(announced), maze.size)
        self.assertEqual(announced, reports[-1].as_dict())

    def test_links_only(self):
        # Adjacent but unlinked: (0,0)-(1,0) is a wall, so the long way round
        distances = distances_from(u_shaped_maze(), (1, 0))
        self.assertEqual(distances[(0, 0)], 3)

    def test_analysis_leaves_maze_alone(self):
        maze = u_shaped_maze()
        before = maze.cells.tobytes()
        distances = distances_from(maze, (0, 0))
        self.assertEqual(maze.cells.tobytes(), before)
        self.assertEqual(maze.annotations, {})
        self.assertIs(distances.maze, maze)

    def test_unreachable(self):
        with self.assertRaises(UnreachableCell) as ctx:
            distances_from(make_grid(2, 2).link((0, 0), (0, 1)), (0, 0))
        self.assertEqual(ctx.exception.unreachable, {(1, 0), (1, 1)})

    def test_unreachable_reported_through_slot(self):
        stream = Channel()
        slot = find_distances(make_grid(1, 3), (0, 0), stream=stream)
        list(stream)
        with self.assertRaises(UnreachableCell):
            slot.get(timeout=TIMEOUT)

    def test_source_out_of_bounds_fails_synchronously(self):
        with self.assertRaises(OutOfBounds):
            find_distances(u_shaped_maze(), (2, 0))

    def test_single_cell(self):
        distances = distances_from(make_grid(1, 1), (0, 0))
        self.assertEqual(distances.as_dict(), {(0, 0): 0})
        self.assertEqual(distances.max, 0)


class TestPaths(unittest.TestCase):
    def test_find_path(self):
        distances = distances_from(u_shaped_maze(), (0, 0))
        self.assertEqual(find_path(distances, (0, 0), (1, 0)), [(0, 0), (0, 1), (1, 1), (1, 0)])
        self.assertEqual(find_path(distances, (0, 0), (0, 0)), [(0, 0)])

    def test_no_path(self):
        distances = distances_from(u_shaped_maze(), (0, 0))
        # Distances are measured from (0,0), so walking back never meets (1,0)
        with self.assertRaises(NoPath):
            find_path(distances, (1, 0), (0, 1))

        partial = Distances(u_shaped_maze(), (0, 0), {(0, 0): 0})
        with self.assertRaises(NoPath):
            find_path(partial, (0, 0), (1, 1))

    def test_path_on_generated_maze(self):
        maze = RecursiveBacktracker(make_grid(10, 10), seed=3).run_all()
        distances = distances_from(maze, (0, 0))
        path = find_path(distances, (0, 0), (9, 9))

        self.assertEqual(len(path), distances[(9, 9)] + 1)
        for a, b in zip(path, path[1:]):
            self.assertTrue(maze.is_linked(a, b))

    def test_longest_path(self):
        corridor = make_grid(1, 5)
        for col in range(4):
            corridor = corridor.link((0, col), (0, col + 1))
        path = longest_path(corridor)
        self.assertEqual(sorted(path), [(0, c) for c in range(5)])

        self.assertEqual(len(longest_path(u_shaped_maze())), 4)

    def test_longest_path_is_longest(self):
        maze = RecursiveBacktracker(make_grid(6, 6), seed=21).run_all()
        path = longest_path(maze)
        for coord in maze.coords():
            self.assertLessEqual(distances_from(maze, coord).max, len(path) - 1)


if __name__ == '__main__':
    unittest.main()
