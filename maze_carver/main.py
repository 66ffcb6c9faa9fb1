import argparse
import logging
import re
import sys

from maze_carver.core.errors import MazeError
from maze_carver.core.grid import Grid
from maze_carver.core.reporting import Channel, drain
from maze_carver.algo.analysis import distances_from, find_path, longest_path
from maze_carver.algo.registry import ALGORITHM_NAMES, algorithm_functions

logger = logging.getLogger("maze_carver")

MAX_DIMENSION = 9999


def setup_logging(verbose: bool):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )


def parse_grid_size(text: str):
    """'5' -> (5, 5), '8x5' -> (8, 5)"""
    match = re.fullmatch(r"(\d{1,5})(?:x(\d{1,5}))?", text.strip())
    if not match:
        raise argparse.ArgumentTypeError(
            "Grid size should be an integer (for a square grid) or a ROWSxCOLUMNS size (e.g., 10x20)")
    rows = int(match.group(1))
    columns = int(match.group(2)) if match.group(2) else rows
    for value in (rows, columns):
        if not 0 < value <= MAX_DIMENSION:
            raise argparse.ArgumentTypeError(f"Grid dimensions must be numbers between 1 and {MAX_DIMENSION:,}")
    return rows, columns


def parse_coord(text: str):
    """'2,3' -> (2, 3)"""
    match = re.fullmatch(r"\s*(\d+)\s*,\s*(\d+)\s*", text)
    if not match:
        raise argparse.ArgumentTypeError("Coordinates should be ROW,COLUMN (e.g., 0,4)")
    return int(match.group(1)), int(match.group(2))


def parse_cell_size(text: str):
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError("Cell size must be a number") from None
    if not 0 < value < 256:
        raise argparse.ArgumentTypeError("Must be a number between 0 and 256")
    return value


def build_parser():
    parser = argparse.ArgumentParser(prog="maze-carver", description="Maze Carver: perfect maze generator")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("algorithms", help="List the generation algorithms")

    gen_parser = subparsers.add_parser("generate", help="Generate a maze")
    gen_parser.add_argument("algorithm", help=f"One of: {', '.join(ALGORITHM_NAMES)}, or 'all'")
    gen_parser.add_argument("--size", "-s", type=parse_grid_size, default=(5, 5), help="Grid size (e.g. 5 or 8x5)")
    gen_parser.add_argument("--seed", type=int, default=None, help="Random Seed")
    gen_parser.add_argument("--output", "-o", type=str, help="Write output to an image file (format defined by extension)")
    gen_parser.add_argument("--cell-size", "-c", type=parse_cell_size, default=10, help="Size of maze cells in pixels. Ignored when rendering as text.")
    gen_parser.add_argument("--distances", type=parse_coord, metavar="ROW,COL", help="Annotate distances from this cell")
    gen_parser.add_argument("--path", type=parse_coord, metavar="ROW,COL", help="Show the shortest path from the distances source to this cell")
    gen_parser.add_argument("--longest", action="store_true", help="Show a longest path through the maze")
    gen_parser.add_argument("--visual", action="store_true", help="Animate generation in a window")

    return parser


def generate_one(name: str, args) -> Grid:
    rows, columns = args.size
    routine = algorithm_functions(name)
    stream = Channel()
    slot = routine(Grid(rows, columns), stream=stream, seed=args.seed)

    reports = 0

    def count(_):
        nonlocal reports
        reports += 1

    carved = drain(stream, slot, on_report=count)
    logger.debug(f"{name}: {reports} reports, {carved.link_count()} links")
    maze = carved

    source = args.distances
    if args.path is not None and source is None:
        source = (0, 0)

    if source is not None:
        distances = distances_from(maze, source)
        logger.info(f"Distances from {source}: max {distances.max}")
        if args.path is not None:
            path = find_path(distances, source, args.path)
            logger.info(f"Path {source} -> {args.path}: {len(path)} cells")
            maze = maze.annotate({coord: distances[coord] for coord in path})
        else:
            maze = distances.grid

    if args.longest:
        path = longest_path(carved)
        logger.info(f"Longest path: {path[0]} -> {path[-1]}, {len(path)} cells")
        # Path indices replace any distance labels
        maze = carved.annotate({coord: i for i, coord in enumerate(path)})

    return maze


def run_visual(name: str, args):
    from maze_carver.viz.renderer import Renderer

    rows, columns = args.size
    source = args.distances
    if args.path is not None and source is None:
        source = (0, 0)
    renderer = Renderer(Grid(rows, columns), name, seed=args.seed, source=source, target=args.path)
    renderer.init_window()
    renderer.run_loop()
    return renderer.maze


def command_generate(args) -> int:
    if args.algorithm == "all":
        if args.output:
            logger.error("You can only write one maze to an output file; do not use '--output' and 'all' at the same time.")
            return 1
        names = ALGORITHM_NAMES
    else:
        names = [args.algorithm]

    for name in names:
        logger.info(f"Generating {args.size[0]}x{args.size[1]} maze with {name}...")
        if args.visual:
            run_visual(name, args)
            continue

        maze = generate_one(name, args)
        if args.output:
            from maze_carver.viz.image import save_image
            save_image(maze, args.output, args.cell_size)
        else:
            from maze_carver.viz.text import print_grid
            print_grid(maze)
    return 0


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return 1

    logger.debug(f"Running command: {args.command}")

    try:
        if args.command == "algorithms":
            for name in ALGORITHM_NAMES:
                print(name)
            return 0
        if args.command == "generate":
            return command_generate(args)
    except MazeError as e:
        logger.error(str(e))
        return 1
    except ValueError as e:
        # Image writing problems (bad extension, unwritable path)
        logger.error(str(e))
        return 1
    return 1


if __name__ == "__main__":
    sys.exit(main())
