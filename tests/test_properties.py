"""
Property-based checks for every generation algorithm.

There is no way to look at a maze and prove it came from a correct
implementation of, say, Wilson's algorithm. What every algorithm must
share is that the result is perfect and that the reports follow the
animation rules, so those are checked over random grid sizes and seeds.
"""
import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from hypothesis import given, settings
from hypothesis import strategies as st

from maze_checks import all_reports, is_perfect

from maze_carver.core.grid import make_grid
from maze_carver.algo.analysis import distances_from, find_distances
from maze_carver.algo.registry import ALGORITHM_NAMES, algorithm_functions

dimension = st.integers(min_value=1, max_value=8)
seeds = st.integers(min_value=0, max_value=2**32 - 1)
algorithms = st.sampled_from(ALGORITHM_NAMES)


class TestAlgorithmProperties(unittest.TestCase):
    @given(name=algorithms, rows=dimension, columns=dimension, seed=seeds)
    @settings(max_examples=60, deadline=None)
    def test_produces_a_perfect_maze(self, name, rows, columns, seed):
        final = all_reports(algorithm_functions(name), make_grid(rows, columns), seed=seed)[-1]

        self.assertTrue(is_perfect(final))
        # Reachability again, through the analysis routine itself
        self.assertEqual(len(distances_from(final, (0, 0))), rows * columns)

    @given(name=algorithms, rows=dimension, columns=dimension, seed=seeds)
    @settings(max_examples=30, deadline=None)
    def test_first_report_is_new(self, name, rows, columns, seed):
        first = all_reports(algorithm_functions(name), make_grid(rows, columns), seed=seed)[0]
        # On a 1x1 grid the stream is empty and the first report is the (named) final grid
        self.assertEqual(first, make_grid(rows, columns))
        self.assertEqual(first.link_count(), 0)
        self.assertEqual((first.rows, first.columns), (rows, columns))

    @given(name=algorithms, rows=dimension, columns=dimension, seed=seeds)
    @settings(max_examples=40, deadline=None)
    def test_all_cells_changed(self, name, rows, columns, seed):
        grid = make_grid(rows, columns)
        reports = all_reports(algorithm_functions(name), grid, seed=seed)
        changed = set()
        for report in reports:
            changed |= report.changed_cells
        if rows * columns > 1:
            self.assertEqual(changed, set(grid.coords()))
        else:
            # A lone cell is never touched; the result is the input itself
            self.assertEqual(reports, [grid])

    @given(name=algorithms, rows=dimension, columns=dimension, seed=seeds)
    @settings(max_examples=40, deadline=None)
    def test_each_update_links_two_cells(self, name, rows, columns, seed):
        reports = all_reports(algorithm_functions(name), make_grid(rows, columns), seed=seed)
        previous = reports[0]
        for update in reports[1:-1]:
            self.assertEqual(len(update.changed_cells), 2)
            a, b = update.changed_cells
            self.assertTrue(update.is_linked(a, b))
            self.assertFalse(previous.is_linked(a, b))
            previous = update


class TestDistanceProperties(unittest.TestCase):
    @given(rows=dimension, columns=dimension, seed=seeds, data=st.data())
    @settings(max_examples=30, deadline=None)
    def test_max_grows_one_shell_at_a_time(self, rows, columns, seed, data):
        maze = all_reports(algorithm_functions("wilsons"), make_grid(rows, columns), seed=seed)[-1]
        source = (data.draw(st.integers(0, rows - 1)), data.draw(st.integers(0, columns - 1)))

        shells = all_reports(find_distances, maze, source)[1:-1]
        self.assertEqual([s.max for s in shells], list(range(len(shells))))
        seen = set()
        for shell in shells:
            self.assertTrue(shell.changed_cells)
            self.assertFalse(seen & shell.changed_cells)
            seen |= shell.changed_cells
            for coord in shell.changed_cells:
                self.assertEqual(shell[coord], shell.max)
        self.assertEqual(len(seen), rows * columns)


if __name__ == '__main__':
    unittest.main()
