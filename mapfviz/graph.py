"""Grid graphs read from MAPF map files, and the poses agents take on them."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from itertools import islice
from pathlib import Path
from typing import Iterable, Iterator

_HEIGHT = re.compile(r"height\s(\d+)")
_WIDTH = re.compile(r"width\s(\d+)")
_MAP = re.compile(r"map")
_OBSTACLES = frozenset("T@")


def _chomp(lines: Iterable[str]) -> Iterator[str]:
    """Yield lines without their trailing newline or carriage return."""
    for line in lines:
        yield line.rstrip("\n").removesuffix("\r")


@dataclass(eq=False)
class Vertex:
    """A free cell of the grid; equality is identity."""

    id: int
    index: int
    x: int
    y: int
    neighbors: list[Vertex] = field(default_factory=list, repr=False)


class Orientation(Enum):
    """Heading of an agent on the grid."""

    NONE = 0
    X_MINUS = 1
    X_PLUS = 2
    Y_MINUS = 3
    Y_PLUS = 4

    @classmethod
    def from_string(cls, s: str) -> Orientation:
        """Return the orientation named by ``s``, or NONE for anything else."""
        try:
            return cls[s]
        except KeyError:
            return cls.NONE

    def to_angle(self) -> float:
        """Rotation in degrees; NaN for NONE."""
        return _ANGLES.get(self, math.nan)

    def __str__(self) -> str:
        return self.name


_ANGLES = {
    Orientation.X_MINUS: 180.0,
    Orientation.X_PLUS: 0.0,
    Orientation.Y_MINUS: 270.0,
    Orientation.Y_PLUS: 90.0,
}


@dataclass(frozen=True)
class Pose:
    """Location and orientation of one agent."""

    vertex: Vertex | None
    orientation: Orientation = Orientation.NONE


Config = list[Pose]
Solution = list[Config]


@dataclass
class Graph:
    """A four-connected grid graph.

    ``vertices`` holds the free cells in row-major order; ``cells`` has one
    entry per grid cell, ``None`` where the cell is an obstacle.
    """

    width: int = 0
    height: int = 0
    vertices: list[Vertex] = field(default_factory=list)
    cells: list[Vertex | None] = field(default_factory=list)

    @classmethod
    def parse(cls, lines: Iterable[str]) -> Graph:
        """Build a graph from the lines of a map file."""
        it = _chomp(lines)
        width = height = 0
        for line in it:
            if m := _HEIGHT.fullmatch(line):
                height = int(m[1])
            if m := _WIDTH.fullmatch(line):
                width = int(m[1])
            if _MAP.fullmatch(line):
                break

        graph = cls(width=width, height=height, cells=[None] * (width * height))
        for y, line in enumerate(islice(it, height)):
            if len(line) < width:
                raise ValueError(
                    f"map row {y} has {len(line)} cells, expected {width}"
                )
            for x, symbol in enumerate(line[:width]):
                if symbol in _OBSTACLES:
                    continue
                index = width * y + x
                vertex = Vertex(len(graph.vertices), index, x, y)
                graph.vertices.append(vertex)
                graph.cells[index] = vertex

        for v in graph.vertices:
            candidates = []
            if v.x > 0:
                candidates.append((v.x - 1, v.y))
            if v.x < width - 1:
                candidates.append((v.x + 1, v.y))
            if v.y < height - 1:
                candidates.append((v.x, v.y + 1))
            if v.y > 0:
                candidates.append((v.x, v.y - 1))
            v.neighbors.extend(
                u
                for u in (graph.cells[width * cy + cx] for cx, cy in candidates)
                if u is not None
            )
        return graph

    @classmethod
    def from_file(cls, path: str | Path) -> Graph:
        """Read a map file."""
        with open(path, encoding="utf-8") as fh:
            return cls.parse(fh)

    def vertex_at(self, x: int, y: int) -> Vertex | None:
        """Return the vertex at cell (x, y), or None for an obstacle."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(
                f"cell ({x}, {y}) is outside the {self.width}x{self.height} grid"
            )
        return self.cells[self.width * y + x]