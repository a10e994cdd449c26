"""Safe zones: per agent group, the time intervals in which each vertex is safe."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Iterator, Mapping, Sequence

logger = logging.getLogger(__name__)

SafeInterval = tuple[int, int]

_AGENT_GROUP = re.compile(r"Safe zone for agent group (\d+):")
_START = re.compile(r"Temporal graph start")
_END = re.compile(r"Temporal graph end")
_VERTEX = re.compile(r"\{([^}]*)\}")
_RANGE = re.compile(r"\[(\d+),(\d+)\]")


class SafeZonesError(ValueError):
    """A safe-zones file is malformed."""


def _chomp(lines: Iterable[str]) -> Iterator[str]:
    for line in lines:
        yield line.rstrip("\n").removesuffix("\r")


def _read_temporal_graph(lines: Iterator[str]) -> list[list[SafeInterval]]:
    zones: list[list[SafeInterval]] = []
    for line in lines:
        if _END.fullmatch(line):
            break
        for vertex in _VERTEX.finditer(line):
            zones.append(
                [(int(m[1]), int(m[2])) for m in _RANGE.finditer(vertex[1])]
            )
    return zones


class SafeZonesManager:
    """Safe intervals for every vertex, for each agent group."""

    def __init__(
        self,
        zones: Mapping[int, Sequence[Sequence[SafeInterval]]],
        num_vertices: int,
    ) -> None:
        self.num_vertices = num_vertices
        self._zones = {
            group: [list(intervals) for intervals in zones[group]]
            for group in sorted(zones)
        }

    @classmethod
    def parse(cls, lines: Iterable[str], num_vertices: int) -> SafeZonesManager:
        """Read safe zones from the lines of a safe-zones file."""
        it = _chomp(lines)
        zones: dict[int, list[list[SafeInterval]]] = {}
        current = last = -1
        for line in it:
            if m := _AGENT_GROUP.fullmatch(line):
                current = int(m[1])
            if _START.fullmatch(line):
                if current == -1:
                    raise SafeZonesError(
                        "Agent group ID must be set before reading safe zones."
                    )
                if current != last + 1:
                    raise SafeZonesError(
                        "Agent group IDs must be consecutive. "
                        f"Expected {last + 1} but found {current}"
                    )
                group_zones = _read_temporal_graph(it)
                if len(group_zones) != num_vertices:
                    raise SafeZonesError(
                        f"Safe zones size of agent group {current} does not match "
                        f"number of vertices. Expected {num_vertices} but found "
                        f"{len(group_zones)}"
                    )
                zones[current] = group_zones
                last = current
        return cls(zones, num_vertices)

    @classmethod
    def from_file(cls, path: str | Path, num_vertices: int) -> SafeZonesManager:
        """Read a safe-zones file."""
        with open(path, encoding="utf-8") as fh:
            return cls.parse(fh, num_vertices)

    def num_agent_groups(self) -> int:
        """Number of agent groups with safe zones."""
        return len(self._zones)

    def safe_agent_group(self, vertex_id: int, timestamp: int) -> int | None:
        """Group for which ``vertex_id`` is safe at ``timestamp``, or None.

        When several groups qualify the lowest one wins and the others are
        reported as warnings.
        """
        if not 0 <= vertex_id < self.num_vertices:
            raise IndexError(
                f"Vertex ID out of range. Expected 0 to {self.num_vertices - 1} "
                f"but got {vertex_id}"
            )
        found: int | None = None
        for group, zones in self._zones.items():
            for start, end in zones[vertex_id]:
                if not start <= timestamp <= end:
                    continue
                if found is None:
                    found = group
                    break
                logger.warning(
                    "Multiple safe zones found for vertex %d at timestamp %s. "
                    "Ignoring the current agent group (%d) Returning the first "
                    "found agent group ID: %d",
                    vertex_id,
                    timestamp,
                    group,
                    found,
                )
        return found