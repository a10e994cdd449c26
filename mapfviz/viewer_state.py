"""Playback state of the viewer, independent of any drawing backend."""

from __future__ import annotations

import math
from enum import Enum
from typing import NamedTuple

from mapfviz.colors import (
    DEFAULT_SCREEN_HEIGHT,
    DEFAULT_SCREEN_WIDTH,
    SCREEN_X_BUFFER,
    WINDOW_X_BUFFER,
    WINDOW_Y_BOTTOM_BUFFER,
    WINDOW_Y_TOP_BUFFER,
)
from mapfviz.graph import Graph, Orientation, Solution
from mapfviz.safe_zones import SafeZonesManager

INITIAL_CAMERA_Z = 580.0
MIN_CAMERA_Z = 50.0
SPEED_STEP = 0.001


def compute_scale(width: int, height: int) -> int:
    """Pixel size of one grid cell for a grid of the given dimensions."""
    if width <= 0 or height <= 0:
        raise ValueError(f"grid must be non-empty, got {width}x{height}")
    max_w = DEFAULT_SCREEN_WIDTH - SCREEN_X_BUFFER * 2 - WINDOW_X_BUFFER * 2
    max_h = DEFAULT_SCREEN_HEIGHT - WINDOW_Y_TOP_BUFFER - WINDOW_Y_BOTTOM_BUFFER
    return min(max_w // width, max_h // height) + 1


class LineMode(Enum):
    """What line is drawn from each agent."""

    STRAIGHT = 0
    PATH = 1
    NONE = 2

    def next(self) -> LineMode:
        members = list(LineMode)
        return members[(members.index(self) + 1) % len(members)]


class Key(str, Enum):
    """Viewer commands and the keys bound to them."""

    RESET = "r"
    PLAY = "p"
    LOOP = "l"
    GOALS = "g"
    FONT = "f"
    SNAPSHOT = " "
    LINE_MODE = "v"
    RIGHT = "right"
    LEFT = "left"
    UP = "up"
    DOWN = "down"
    ZOOM_IN = "i"
    ZOOM_OUT = "o"
    GRID = "G"


class AgentPosition(NamedTuple):
    x: float
    y: float
    angle: float


HELP = """keys for visualizer
- p : play or pause
- l : loop or not
- r : reset
- v : show virtual line to goals
- f : show agent & node id
- g : show goals
- right : progress
- left  : back
- up    : speed up
- down  : speed down
- i : toggle zoom in
- o : toggle zoom out
- G : toggle gridlines
- space : screenshot (saved in Desktop)
- esc : terminate"""


class ViewerState:
    """Time, speed, display toggles and geometry of a plan being played back."""

    def __init__(
        self,
        graph: Graph,
        solution: Solution,
        safe_zones: SafeZonesManager | None = None,
        capture_only: bool = False,
    ) -> None:
        if not solution:
            raise ValueError("solution is empty")
        self.graph = graph
        self.solution = solution
        self.safe_zones = safe_zones
        self.capture_only = capture_only
        self.num_agents = len(solution[0])
        self.makespan = len(solution) - 1
        self.goals = solution[-1]

        self.scale = compute_scale(graph.width, graph.height)
        self.agent_rad = self.scale / math.sqrt(2) / 2
        self.goal_rad = self.scale / 4.0
        self.font_size = max(self.scale // 8, 6)

        self.autoplay = True
        self.loop = True
        self.show_goals = True
        self.show_font = False
        self.snapshot = capture_only
        self.zoom_out = False
        self.zoom_in = False
        self.grid = True
        self.line_mode = LineMode.PATH if capture_only else LineMode.STRAIGHT

        self.timestep = 0.0
        self.speed = 0.1
        self.speed_min = 0.0
        self.speed_max = 1.0
        self.camera_z = INITIAL_CAMERA_Z

    @property
    def window_size(self) -> tuple[int, int]:
        """Width and height of the window in pixels."""
        return (
            self.graph.width * self.scale + 2 * WINDOW_X_BUFFER,
            self.graph.height * self.scale
            + WINDOW_Y_TOP_BUFFER
            + WINDOW_Y_BOTTOM_BUFFER,
        )

    def update(self) -> None:
        """Advance one frame of autoplay."""
        if not self.autoplay:
            return
        t = self.timestep + self.speed
        if t <= self.makespan:
            self.timestep = t
        else:
            self.timestep = 0.0 if self.loop else float(self.makespan)

        if self.zoom_out:
            self.camera_z *= 1.01
        if self.zoom_in:
            self.camera_z = max(self.camera_z * 0.99, MIN_CAMERA_Z)

    def handle_key(self, key: str | Key) -> None:
        """Apply the command bound to ``key``; unbound keys are ignored."""
        try:
            command = Key(key)
        except ValueError:
            return
        if command is Key.RESET:
            self.timestep = 0.0
        elif command is Key.PLAY:
            self.autoplay = not self.autoplay
        elif command is Key.LOOP:
            self.loop = not self.loop
        elif command is Key.GOALS:
            self.show_goals = not self.show_goals
        elif command is Key.FONT:
            self.show_font = (not self.show_font) and (
                self.scale - self.font_size > 6
            )
        elif command is Key.SNAPSHOT:
            self.snapshot = True
        elif command is Key.LINE_MODE:
            self.line_mode = self.line_mode.next()
        elif command is Key.RIGHT:
            self.timestep = min(float(self.makespan), self.timestep + self.speed)
        elif command is Key.LEFT:
            self.timestep = max(0.0, self.timestep - self.speed)
        elif command is Key.UP:
            self.speed = min(self.speed + SPEED_STEP, self.speed_max)
        elif command is Key.DOWN:
            self.speed = max(self.speed - SPEED_STEP, self.speed_min)
        elif command is Key.ZOOM_IN:
            self.zoom_in = not self.zoom_in
        elif command is Key.ZOOM_OUT:
            self.zoom_out = not self.zoom_out
        elif command is Key.GRID:
            self.grid = not self.grid

    def cell_center(self, x: float, y: float) -> tuple[float, float]:
        """Pixel coordinates of the centre of grid position (x, y)."""
        half = self.scale // 2
        return (
            x * self.scale + WINDOW_X_BUFFER + half,
            y * self.scale + WINDOW_Y_TOP_BUFFER + half,
        )

    def agent_position(self, i: int) -> AgentPosition:
        """Interpolated pixel position and heading of agent ``i``."""
        t1 = int(self.timestep)
        t2 = t1 + 1
        frac = self.timestep - t1
        pose = self.solution[t1][i]
        x = float(pose.vertex.x)
        y = float(pose.vertex.y)
        angle = pose.orientation.to_angle()
        if t2 <= self.makespan:
            nxt = self.solution[t2][i]
            x += (nxt.vertex.x - x) * frac
            y += (nxt.vertex.y - y) * frac
            if pose.orientation is not Orientation.NONE:
                diff = nxt.orientation.to_angle() - angle
                if diff > 180.0:
                    diff -= 360.0
                if diff < -180.0:
                    diff += 360.0
                angle += diff * frac
        px, py = self.cell_center(x, y)
        return AgentPosition(px, py, angle)

    def cell_group(self, index: int) -> int | None:
        """Agent group for which cell ``index`` is safe now, or None."""
        if self.safe_zones is None:
            return None
        return self.safe_zones.safe_agent_group(index, int(self.timestep))