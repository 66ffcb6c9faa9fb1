import sys
import os
import time

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_carver.core.grid import Grid
from maze_carver.core.reporting import Channel, drain
from maze_carver.algo.analysis import distances_from
from maze_carver.algo.registry import ALGORITHM_NAMES, algorithm_functions, generator_class


def benchmark_size(rows: int, columns: int):
    print(f"\n--- Benchmarking {rows}x{columns} ({rows * columns:,} cells) ---")
    print(f"{'ALGORITHM':<22} | {'DIRECT (s)':<10} | {'STREAMED (s)':<12} | {'REPORTS':<8} | {'MAX DIST':<8}")
    print("-" * 72)

    for name in ALGORITHM_NAMES:
        # 1. Generation only, no protocol overhead
        t0 = time.time()
        grid = generator_class(name)(Grid(rows, columns), seed=42).run_all()
        direct = time.time() - t0

        # 2. Through the reporting protocol, consumer draining as fast as it can
        t0 = time.time()
        stream = Channel()
        slot = algorithm_functions(name)(Grid(rows, columns), stream=stream, seed=42)
        reports = 0
        for _ in stream:
            reports += 1
        drain(stream, slot)
        streamed = time.time() - t0

        distances = distances_from(grid, (0, 0))
        print(f"{name:<22} | {direct:<10.4f} | {streamed:<12.4f} | {reports:<8} | {distances.max:<8}")


def run_suite():
    sizes = [
        (10, 10),
        (40, 40),
        (100, 100),
    ]

    for rows, columns in sizes:
        benchmark_size(rows, columns)


if __name__ == "__main__":
    run_suite()
