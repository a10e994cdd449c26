"""Command-line entry point and the interactive window that plays back a plan."""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Sequence

import pygame

from mapfviz.colors import (
    FONT,
    FONT_INFO,
    NODE,
    WHITE,
    WINDOW_Y_TOP_BUFFER,
    Color,
    GroupPalette,
    agent_color,
)
from mapfviz.graph import Graph, Orientation
from mapfviz.safe_zones import SafeZonesManager
from mapfviz.solution import load_solution
from mapfviz.viewer_state import (
    HELP,
    INITIAL_CAMERA_Z,
    Key,
    LineMode,
    ViewerState,
)

USAGE = (
    "Please check the arguments, e.g.,\n"
    "> mapf-visualizer assets/random-32-32-20.map "
    "assets/demo_random-32-32-20.txt [--safe-zones "
    "assets/demo_random-32-32-20.safe_zones]"
)

FRAME_RATE = 30
GRID_GAP = 1

_SPECIAL_KEYS = {
    pygame.K_RIGHT: Key.RIGHT,
    pygame.K_LEFT: Key.LEFT,
    pygame.K_UP: Key.UP,
    pygame.K_DOWN: Key.DOWN,
}


class ArgumentError(ValueError):
    """The command line is invalid."""


@dataclass(frozen=True)
class Args:
    """Parsed command-line options."""

    map_file: str
    solution_file: str
    safe_zones_file: str | None = None
    capture_only: bool = False


def _readable(path: str) -> bool:
    try:
        with open(path, "rb"):
            return True
    except OSError:
        return False


def parse_args(argv: Sequence[str]) -> Args:
    """Parse the arguments that follow the program name."""
    argv = list(argv)
    if len(argv) < 2 or not _readable(argv[0]) or not _readable(argv[1]):
        raise ArgumentError(f"{USAGE}\nGot {len(argv)} args\n{' '.join(argv)}")
    safe_zones_file: str | None = None
    capture_only = False
    rest = iter(enumerate(argv[2:], start=2))
    for i, arg in rest:
        if arg == "--safe-zones" and i + 1 < len(argv):
            _, safe_zones_file = next(rest)
        elif arg == "--capture-only":
            capture_only = True
        else:
            raise ArgumentError(f"Unknown argument: {arg}")
    return Args(argv[0], argv[1], safe_zones_file, capture_only)


class Viewer:
    """A pygame window that plays back the plan held by a ViewerState."""

    def __init__(
        self,
        state: ViewerState,
        palette: GroupPalette | None = None,
        snapshot_dir: str | Path | None = None,
    ) -> None:
        self.state = state
        self.palette = palette
        self.snapshot_dir = (
            Path(snapshot_dir) if snapshot_dir is not None else Path.home() / "Desktop"
        )
        self.pan = (0.0, 0.0)
        self._font: pygame.font.Font | None = None
        self._info_font: pygame.font.Font | None = None

    # geometry ---------------------------------------------------------

    @property
    def _zoom(self) -> float:
        return INITIAL_CAMERA_Z / self.state.camera_z

    def _to_screen(self, px: float, py: float) -> tuple[float, float]:
        w, h = self.state.window_size
        cx, cy = w / 2, h / 2 - WINDOW_Y_TOP_BUFFER / 2
        zoom = self._zoom
        return (
            cx + (px - cx) * zoom + self.pan[0],
            cy + (py - cy) * zoom + self.pan[1],
        )

    def _line(self, surface, color: Color, a, b, width: int = 1) -> None:
        pygame.draw.line(
            surface, color, self._to_screen(*a), self._to_screen(*b), width
        )

    def _circle(self, surface, color: Color, center, radius: float) -> None:
        pygame.draw.circle(
            surface, color, self._to_screen(*center), max(radius * self._zoom, 1)
        )

    def _rect(self, surface, color: Color, x: float, y: float, size: float) -> None:
        sx, sy = self._to_screen(x, y)
        side = max(round(size * self._zoom), 1)
        pygame.draw.rect(surface, color, pygame.Rect(round(sx), round(sy), side, side))

    def _triangle(
        self, surface, center: tuple[float, float], radius: float, angle: float
    ) -> None:
        if math.isnan(angle):
            return
        rad = math.radians(angle)
        cos, sin = math.cos(rad), math.sin(rad)
        points = [
            self._to_screen(
                center[0] + px * cos - py * sin, center[1] + px * sin + py * cos
            )
            for px, py in ((0, radius), (0, -radius), (radius, 0))
        ]
        pygame.draw.polygon(surface, WHITE, points)

    def _text(self, surface, text: str, color: Color, x: float, y: float) -> None:
        assert self._font is not None
        image = self._font.render(text, True, color)
        surface.blit(image, self._to_screen(x, y))

    # drawing ----------------------------------------------------------

    def _draw_cells(self, surface) -> None:
        state = self.state
        gap = GRID_GAP if state.grid else 0
        for v in state.graph.vertices:
            color = NODE
            group = state.cell_group(v.index)
            if group is not None and self.palette is not None:
                color = self.palette.color(group)
            x_draw = v.x * state.scale + (state.cell_center(0, 0)[0] - state.scale // 2)
            y_draw = v.y * state.scale + (state.cell_center(0, 0)[1] - state.scale // 2)
            self._rect(surface, color, x_draw, y_draw, state.scale - gap)
            if state.show_font:
                self._text(surface, str(v.index), FONT, x_draw + 1, y_draw + 1)

    def _draw_goals(self, surface) -> None:
        state = self.state
        for i, goal in enumerate(state.goals):
            center = state.cell_center(goal.vertex.x, goal.vertex.y)
            half = state.goal_rad / 2
            self._rect(
                surface, agent_color(i), center[0] - half, center[1] - half,
                state.goal_rad,
            )
            if goal.orientation is not Orientation.NONE:
                self._triangle(surface, center, half, goal.orientation.to_angle())

    def _draw_agents(self, surface) -> None:
        state = self.state
        t1 = int(state.timestep)
        t2 = t1 + 1
        for i in range(state.num_agents):
            color = agent_color(i)
            pose = state.solution[t1][i]
            pos = state.agent_position(i)
            center = (pos.x, pos.y)
            self._circle(surface, color, center, state.agent_rad)

            goal = state.goals[i]
            if state.line_mode is LineMode.STRAIGHT:
                self._line(
                    surface, color,
                    state.cell_center(goal.vertex.x, goal.vertex.y), center,
                )
            elif state.line_mode is LineMode.PATH:
                if t2 <= state.makespan:
                    nxt = state.solution[t2][i].vertex
                    self._line(
                        surface, color, center, state.cell_center(nxt.x, nxt.y), 2
                    )
                for t in range(t1 + 1, state.makespan):
                    v_from = state.solution[t][i].vertex
                    v_to = state.solution[t + 1][i].vertex
                    if v_from is v_to:
                        continue
                    self._line(
                        surface, color,
                        state.cell_center(v_from.x, v_from.y),
                        state.cell_center(v_to.x, v_to.y), 2,
                    )

            if pose == goal:
                self._circle(surface, WHITE, center, state.agent_rad * 0.7)

            if pose.orientation is not Orientation.NONE:
                self._triangle(surface, center, state.agent_rad, pos.angle)

            if state.show_font:
                half = state.font_size // 2
                self._text(surface, str(i), FONT, pos.x - half, pos.y - half)

    def _draw_info(self, surface) -> None:
        assert self._info_font is not None
        state = self.state
        lines = (
            f"time step: {state.timestep:.2f} / {state.makespan}",
            f"speed: {state.speed:.3f}",
        )
        y = 5
        for line in lines:
            image = self._info_font.render(line, True, FONT_INFO)
            surface.blit(image, (5, y))
            y += image.get_height() + 2

    def render(self, surface) -> None:
        """Draw one frame of the current state onto ``surface``."""
        if self._font is None:
            pygame.font.init()
            self._font = pygame.font.Font(None, self.state.font_size * 2)
            self._info_font = pygame.font.Font(None, 20)
        surface.fill((0, 0, 0))
        self._draw_cells(surface)
        if self.state.show_goals:
            self._draw_goals(surface)
        self._draw_agents(surface)

    def _save_snapshot(self, surface) -> Path:
        self.snapshot_dir.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime("%Y-%m-%d-%H-%M-%S-%f")[:-3]
        path = self.snapshot_dir / f"screenshot-{stamp}.png"
        pygame.image.save(surface, str(path))
        return path

    # main loop --------------------------------------------------------

    def _handle_event(self, event) -> bool:
        """Apply one event; return False when the viewer should close."""
        if event.type == pygame.QUIT:
            return False
        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                return False
            key = _SPECIAL_KEYS.get(event.key, event.unicode)
            if key:
                self.state.handle_key(key)
        elif event.type == pygame.MOUSEMOTION and event.buttons[0]:
            self.pan = (self.pan[0] + event.rel[0], self.pan[1] + event.rel[1])
        return True

    def run(self) -> None:
        """Open the window and play back until it is closed."""
        pygame.init()
        try:
            screen = pygame.display.set_mode(self.state.window_size)
            pygame.display.set_caption("mapfviz")
            clock = pygame.time.Clock()
            while True:
                if not all(self._handle_event(e) for e in pygame.event.get()):
                    return
                self.state.update()
                self.render(screen)
                if self.state.snapshot:
                    self._save_snapshot(screen)
                    self.state.snapshot = False
                    if self.state.capture_only:
                        return
                self._draw_info(screen)
                pygame.display.flip()
                clock.tick(FRAME_RATE)
        finally:
            pygame.quit()


def main(argv: Sequence[str] | None = None) -> int:
    """Run the viewer from the command line."""
    if argv is None:
        argv = sys.argv[1:]
    try:
        args = parse_args(argv)
    except ArgumentError as exc:
        print(exc)
        return 1

    try:
        graph = Graph.from_file(args.map_file)
        solution = load_solution(args.solution_file, graph)
    except (OSError, ValueError) as exc:
        print(exc, file=sys.stderr)
        return 1

    safe_zones: SafeZonesManager | None = None
    palette: GroupPalette | None = None
    if args.safe_zones_file:
        try:
            safe_zones = SafeZonesManager.from_file(args.safe_zones_file, len(graph.cells))
        except OSError:
            print(f"failed to load {args.safe_zones_file}")
            safe_zones = SafeZonesManager({}, len(graph.cells))
        except ValueError as exc:
            print(exc, file=sys.stderr)
            return 1
        palette = GroupPalette(safe_zones.num_agent_groups())

    try:
        state = ViewerState(graph, solution, safe_zones, args.capture_only)
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1
    if not args.capture_only:
        print(HELP)
    Viewer(state, palette).run()
    return 0