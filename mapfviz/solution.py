"""Reading plans: one configuration of agent poses per timestep."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

from mapfviz.graph import Config, Graph, Orientation, Pose, Solution

_POSE = re.compile(r"\((\d+),(\d+),?([XY]{1}_[A-Z]{4,5})?\),")
_MARKER = ":("
_WINDOW = 128


def _parse_config(line: str, graph: Graph) -> Config:
    config: Config = []
    pos = 0
    while pos < len(line):
        m = _POSE.search(line, pos, min(pos + _WINDOW, len(line)))
        if m is None:
            break
        x, y = int(m[1]), int(m[2])
        try:
            vertex = graph.vertex_at(x, y)
        except IndexError as exc:
            raise ValueError(str(exc)) from exc
        if vertex is None:
            raise ValueError(f"cell ({x}, {y}) in the plan is an obstacle")
        orientation = (
            Orientation.from_string(m[3]) if m[3] is not None else Orientation.NONE
        )
        config.append(Pose(vertex, orientation))
        pos += len(m[0])
    return config


def parse_solution(lines: Iterable[str], graph: Graph) -> Solution:
    """Build a plan from the lines of a solution file.

    Only lines containing ``:(`` carry a configuration; the rest are skipped.
    """
    return [_parse_config(line, graph) for line in lines if _MARKER in line]


def load_solution(path: str | Path, graph: Graph) -> Solution:
    """Read a solution file."""
    with open(path, encoding="utf-8") as fh:
        return parse_solution(fh, graph)