import math

import pytest

from mapfviz.colors import WINDOW_X_BUFFER, WINDOW_Y_TOP_BUFFER
from mapfviz.graph import Graph
from mapfviz.safe_zones import SafeZonesManager
from mapfviz.solution import parse_solution
from mapfviz.viewer_state import (
    Key,
    LineMode,
    ViewerState,
    compute_scale,
)

MAP = ["type octile", "height 2", "width 3", "map", "...", ".@."]
PLAN = [
    "0:(0,0,X_PLUS),(2,1),",
    "1:(1,0,Y_MINUS),(2,0),",
    "2:(2,0,Y_MINUS),(2,0),",
]


@pytest.fixture
def graph():
    return Graph.parse(MAP)


@pytest.fixture
def state(graph):
    return ViewerState(graph, parse_solution(PLAN, graph))


def test_compute_scale_pinned():
    assert compute_scale(32, 32) == 17


def test_compute_scale_shrinks_with_grid():
    assert compute_scale(10, 10) >= compute_scale(100, 100) >= 1


def test_compute_scale_rejects_empty():
    with pytest.raises(ValueError):
        compute_scale(0, 5)


def test_basic_properties(state, graph):
    assert state.num_agents == 2
    assert state.makespan == 2
    assert state.goals == state.solution[-1]
    assert state.scale == compute_scale(graph.width, graph.height)
    assert state.font_size >= 6


def test_defaults(state):
    assert state.line_mode is LineMode.STRAIGHT
    assert state.snapshot is False
    assert state.autoplay and state.loop and state.show_goals and state.grid
    assert state.timestep == 0.0


def test_capture_only_defaults(graph):
    s = ViewerState(graph, parse_solution(PLAN, graph), capture_only=True)
    assert s.line_mode is LineMode.PATH
    assert s.snapshot is True


def test_empty_solution_raises(graph):
    with pytest.raises(ValueError):
        ViewerState(graph, [])


def test_update_advances_by_speed(state):
    state.update()
    assert state.timestep == pytest.approx(state.speed)


def test_update_loops(state):
    state.timestep = state.makespan - 0.05
    state.update()
    assert state.timestep == 0.0


def test_update_stops_without_loop(state):
    state.handle_key("l")
    state.timestep = state.makespan - 0.05
    state.update()
    assert state.timestep == state.makespan


def test_update_paused(state):
    state.handle_key(Key.PLAY)
    state.timestep = 1.0
    state.update()
    assert state.timestep == 1.0


def test_zoom_in_clamped(state):
    state.handle_key("i")
    before = state.camera_z
    state.update()
    assert state.camera_z < before
    state.camera_z = 50.2
    state.update()
    assert state.camera_z == 50.0


def test_zoom_out_grows(state):
    state.handle_key("o")
    before = state.camera_z
    state.update()
    assert state.camera_z > before


def test_line_mode_cycles(state):
    seen = []
    for _ in range(3):
        state.handle_key("v")
        seen.append(state.line_mode)
    assert seen == [LineMode.PATH, LineMode.NONE, LineMode.STRAIGHT]


def test_right_and_left_clamp(state):
    state.speed = 1.0
    for _ in range(5):
        state.handle_key(Key.RIGHT)
    assert state.timestep == state.makespan
    for _ in range(5):
        state.handle_key("left")
    assert state.timestep == 0.0


def test_speed_keys_clamp(state):
    state.speed = state.speed_max
    state.handle_key("up")
    assert state.speed == state.speed_max
    state.speed = state.speed_min
    state.handle_key("down")
    assert state.speed == state.speed_min


def test_reset(state):
    state.timestep = 1.5
    state.handle_key("r")
    assert state.timestep == 0.0


def test_toggles(state):
    state.handle_key("g")
    state.handle_key("G")
    state.handle_key(" ")
    assert state.show_goals is False
    assert state.grid is False
    assert state.snapshot is True


def test_font_toggle_on_large_cells(state):
    state.handle_key("f")
    assert state.show_font is True
    state.handle_key("f")
    assert state.show_font is False


def test_font_toggle_refused_on_small_cells():
    g = Graph.parse(["height 1", "width 600", "map", "." * 600])
    s = ViewerState(g, parse_solution(["0:(0,0),"], g))
    s.handle_key("f")
    assert s.show_font is False


def test_unknown_key_ignored(state):
    state.handle_key("z")
    assert state.timestep == 0.0
    assert state.autoplay is True


def test_key_lookup():
    assert Key(" ") is Key.SNAPSHOT


def test_cell_center_spacing(state):
    x0, y0 = state.cell_center(0, 0)
    x1, _ = state.cell_center(1, 0)
    _, y1 = state.cell_center(0, 1)
    assert x1 - x0 == state.scale
    assert y1 - y0 == state.scale
    assert WINDOW_X_BUFFER <= x0 < WINDOW_X_BUFFER + state.scale
    assert WINDOW_Y_TOP_BUFFER <= y0 < WINDOW_Y_TOP_BUFFER + state.scale


def test_agent_position_at_integer_time(state):
    state.timestep = 1.0
    pos = state.agent_position(0)
    assert (pos.x, pos.y) == state.cell_center(1, 0)
    assert pos.angle == 270.0


def test_agent_position_interpolates(state):
    state.timestep = 0.5
    pos = state.agent_position(0)
    ax, ay = state.cell_center(0, 0)
    bx, by = state.cell_center(1, 0)
    assert pos.x == pytest.approx((ax + bx) / 2)
    assert pos.y == pytest.approx((ay + by) / 2)
    assert pos.angle == pytest.approx(-45.0)


def test_agent_position_without_orientation(state):
    state.timestep = 2.0
    pos = state.agent_position(1)
    assert (pos.x, pos.y) == state.cell_center(2, 0)
    assert math.isnan(pos.angle)


def test_cell_group(graph):
    zones = [[] for _ in graph.cells]
    zones[0] = [(0, 1)]
    manager = SafeZonesManager({0: zones}, len(graph.cells))
    s = ViewerState(graph, parse_solution(PLAN, graph), manager)
    assert s.cell_group(0) == 0
    assert s.cell_group(1) is None
    s.timestep = 1.9
    assert s.cell_group(0) == 0
    s.timestep = 2.0
    assert s.cell_group(0) is None


def test_cell_group_without_zones(state):
    assert state.cell_group(0) is None


def test_window_size_fits_grid(state, graph):
    w, h = state.window_size
    assert w > graph.width * state.scale
    assert h > graph.height * state.scale