import logging
import queue
from numbers import Real
from typing import List, Optional

import pygame

from maze_carver.core.grid import Coord, Grid
from maze_carver.core.reporting import Channel, ResultSlot
from maze_carver.algo.analysis import find_distances, find_path
from maze_carver.algo.registry import algorithm_functions
from maze_carver.viz.image import color_cell

logger = logging.getLogger(__name__)


class Renderer:
    """
    Animates a generation run (and optionally a distance analysis) in a
    pygame window. Each frame takes at most `reports_per_frame` snapshots
    from the stream, so the producer is paced by the frame rate.
    Closing the window cancels whatever stream is still running.
    """
    COLOR_BG = (10, 10, 10)
    COLOR_WALL = (200, 200, 200)
    COLOR_CHANGED = (60, 100, 160)# Blue tint
    COLOR_SOLUTION = (255, 215, 0)# Gold

    FPS = 60

    def __init__(self, grid: Grid, algorithm: str, seed: int = None, source: Optional[Coord] = None,
                 target: Optional[Coord] = None, width=1280, height=720, reports_per_frame=1):
        self.grid = grid
        self.routine = algorithm_functions(algorithm)
        self.seed = seed
        self.source = source
        self.target = target
        self.screen_width = width
        self.screen_height = height
        self.reports_per_frame = reports_per_frame

        # Camera
        self.cell_size = 20.0  # Pixels per cell
        self.offset_x = 0.0
        self.offset_y = 0.0
        self.zoom_speed = 1.1

        self.phase = "idle"
        self.stream: Optional[Channel] = None
        self.slot: Optional[ResultSlot] = None
        self.maze: Optional[Grid] = None
        self.distances = None
        self.path: List[Coord] = []
        self.report_count = 0

        self.font = None
        self.running = True
        self.clock = None
        self.surface = None

    # --- Protocol driving -------------------------------------------------

    @property
    def finished(self) -> bool:
        return self.phase == "done"

    def begin(self):
        self.stream = Channel()
        self.slot = self.routine(self.grid, stream=self.stream, seed=self.seed)
        self.phase = "carving"

    def step(self) -> bool:
        """Consumes up to reports_per_frame reports. Returns False once everything is done."""
        if self.phase == "idle":
            self.begin()
        if self.finished:
            return False

        for _ in range(self.reports_per_frame):
            try:
                report = self.stream.get(block=False)
            except queue.Empty:
                break
            if report is None:
                self._advance(self.slot.get())
                break
            self.report_count += 1
            self.grid = report.grid if self.phase == "analysing" else report

        return not self.finished

    def _advance(self, final):
        if self.phase == "carving":
            self.maze = final
            self.grid = final
            logger.info(f"Carved {final.rows}x{final.columns} maze with {final.algorithm_name}")
            if self.source is None:
                self.phase = "done"
                return
            self.stream = Channel()
            self.slot = find_distances(final, self.source, stream=self.stream)
            self.phase = "analysing"
        else:
            self.distances = final
            self.grid = final.grid
            logger.info(f"Distances from {final.source}: max {final.max}")
            if self.target is not None:
                self.path = find_path(final, self.source, self.target)
            self.phase = "done"

    def cancel(self):
        if self.stream is not None and not self.finished:
            self.stream.cancel()
            logger.info(f"Cancelled while {self.phase}")

    # --- Drawing ------------------------------------------------------------

    def fit_to_screen(self):
        """Auto-adjust zoom and pan to fit the entire grid on screen with padding."""
        padding = 40
        available_w = self.screen_width - (padding * 2)
        available_h = self.screen_height - (padding * 2)

        self.cell_size = min(available_w / self.grid.columns, available_h / self.grid.rows)

        self.offset_x = (self.screen_width - self.grid.columns * self.cell_size) / 2
        self.offset_y = (self.screen_height - self.grid.rows * self.cell_size) / 2

    def init_window(self):
        pygame.init()
        pygame.display.set_caption(f"Maze Carver - {self.grid.rows}x{self.grid.columns}")
        self.surface = pygame.display.set_mode((self.screen_width, self.screen_height), pygame.RESIZABLE)
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("Consolas", 16)
        self.fit_to_screen()

    def handle_input(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                self.screen_width, self.screen_height = event.w, event.h

            elif event.type == pygame.MOUSEWHEEL:
                # Zoom towards mouse
                mx, my = pygame.mouse.get_pos()
                wx = (mx - self.offset_x) / self.cell_size
                wy = (my - self.offset_y) / self.cell_size

                if event.y > 0:
                    self.cell_size *= self.zoom_speed
                else:
                    self.cell_size /= self.zoom_speed
                self.cell_size = max(1.0, min(100.0, self.cell_size))

                self.offset_x = mx - wx * self.cell_size
                self.offset_y = my - wy * self.cell_size

            elif event.type == pygame.MOUSEMOTION:
                if pygame.mouse.get_pressed()[0] or pygame.mouse.get_pressed()[2]:
                    self.offset_x += event.rel[0]
                    self.offset_y += event.rel[1]

    def cell_rect(self, coord: Coord):
        row, col = coord
        px = int(col * self.cell_size + self.offset_x)
        py = int(row * self.cell_size + self.offset_y)
        size = int(self.cell_size) + 1
        return px, py, size

    def draw_grid(self):
        self.surface.fill(self.COLOR_BG)
        grid = self.grid

        # 1. Backgrounds: distances, then the cells touched by the latest report
        numeric = [v for v in grid.annotations.values() if isinstance(v, Real)]
        max_distance = max(numeric) if numeric else 0
        for coord, value in grid.annotations.items():
            if isinstance(value, Real):
                px, py, size = self.cell_rect(coord)
                pygame.draw.rect(self.surface, color_cell(max_distance, value), (px, py, size, size))

        if not self.finished:
            for coord in grid.changed_cells:
                px, py, size = self.cell_rect(coord)
                pygame.draw.rect(self.surface, self.COLOR_CHANGED, (px, py, size, size))

        for coord in self.path:
            px, py, size = self.cell_rect(coord)
            pygame.draw.rect(self.surface, self.COLOR_SOLUTION, (px, py, size, size))

        # 2. Walls
        for row, col in grid.coords():
            px, py, size = self.cell_rect((row, col))
            if not grid.is_linked((row, col), (row + 1, col)):
                pygame.draw.line(self.surface, self.COLOR_WALL, (px, py + size), (px + size, py + size), 1)
            if not grid.is_linked((row, col), (row, col + 1)):
                pygame.draw.line(self.surface, self.COLOR_WALL, (px + size, py), (px + size, py + size), 1)
            if row == 0:
                pygame.draw.line(self.surface, self.COLOR_WALL, (px, py), (px + size, py), 1)
            if col == 0:
                pygame.draw.line(self.surface, self.COLOR_WALL, (px, py), (px, py + size), 1)

    def draw_hud(self):
        fps = int(self.clock.get_fps())
        info = [
            f"FPS: {fps}",
            f"Size: {self.grid.rows}x{self.grid.columns}",
            f"Reports: {self.report_count}",
            f"Status: {self.phase}",
        ]
        if self.distances is not None:
            info.append(f"Max distance: {self.distances.max}")

        for i, text in enumerate(info):
            lbl = self.font.render(text, True, (255, 255, 255))
            self.surface.blit(lbl, (10, 10 + i * 20))

    def run_loop(self):
        try:
            while self.running:
                self.handle_input()
                self.step()

                self.draw_grid()
                self.draw_hud()
                pygame.display.flip()

                self.clock.tick(self.FPS)
        finally:
            self.cancel()
            pygame.quit()
