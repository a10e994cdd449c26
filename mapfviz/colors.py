"""Colour scheme and window layout constants for the viewer."""

from __future__ import annotations

from typing import NamedTuple

DEFAULT_SCREEN_WIDTH = 1280
DEFAULT_SCREEN_HEIGHT = 600
SCREEN_X_BUFFER = 50
SCREEN_Y_BUFFER = 75
WINDOW_X_BUFFER = 25
WINDOW_Y_TOP_BUFFER = 50
WINDOW_Y_BOTTOM_BUFFER = 25


class Color(NamedTuple):
    r: int
    g: int
    b: int


BACKGROUND = Color(0, 0, 0)
NODE = Color(255, 255, 255)
FONT = Color(100, 100, 100)
FONT_INFO = Color(255, 255, 255)
EDGE = Color(200, 200, 200)
WHITE = Color(255, 255, 255)

AGENT_COLORS: tuple[Color, ...] = (
    Color(233, 30, 99),
    Color(33, 150, 243),
    Color(76, 175, 80),
    Color(255, 152, 0),
    Color(0, 188, 212),
    Color(156, 39, 176),
    Color(121, 85, 72),
    Color(255, 187, 59),
    Color(244, 67, 54),
    Color(96, 125, 139),
    Color(0, 150, 136),
    Color(63, 81, 181),
)


def agent_color(index: int) -> Color:
    """Colour of agent ``index``; the palette repeats."""
    return AGENT_COLORS[index % len(AGENT_COLORS)]


class GroupPalette:
    """Colours for safe-zone agent groups."""

    def __init__(self, num_groups: int) -> None:
        self._colors = [
            Color((i * 50) % 256, (i * 80) % 256, (i * 30) % 256)
            for i in range(1, num_groups + 1)
        ]

    def __len__(self) -> int:
        return len(self._colors)

    def color(self, group_id: int) -> Color:
        """Colour of the given group."""
        if not 0 <= group_id < len(self._colors):
            raise IndexError("Group ID out of range")
        return self._colors[group_id]