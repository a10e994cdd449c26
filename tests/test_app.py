import pygame
import pytest

from mapfviz.app import ArgumentError, Args, Viewer, main, parse_args
from mapfviz.colors import GroupPalette
from mapfviz.graph import Graph
from mapfviz.safe_zones import SafeZonesManager
from mapfviz.solution import parse_solution
from mapfviz.viewer_state import ViewerState

MAP = """type octile
height 3
width 4
map
....
.@..
....
"""

PLAN = """0:(0,0),(3,2),
1:(1,0),(3,1),
2:(2,0),(2,1),
"""


@pytest.fixture
def files(tmp_path):
    map_file = tmp_path / "grid.map"
    map_file.write_text(MAP)
    plan_file = tmp_path / "plan.txt"
    plan_file.write_text(PLAN)
    return str(map_file), str(plan_file)


def test_parse_args_minimal(files):
    map_file, plan_file = files
    assert parse_args([map_file, plan_file]) == Args(map_file, plan_file, None, False)


def test_parse_args_options(files, tmp_path):
    map_file, plan_file = files
    zones = str(tmp_path / "zones")
    args = parse_args([map_file, plan_file, "--capture-only", "--safe-zones", zones])
    assert args.capture_only is True
    assert args.safe_zones_file == zones


def test_parse_args_too_few(files):
    with pytest.raises(ArgumentError, match="Please check the arguments"):
        parse_args([files[0]])


def test_parse_args_missing_file(files, tmp_path):
    with pytest.raises(ArgumentError):
        parse_args([files[0], str(tmp_path / "absent.txt")])


def test_parse_args_unknown(files):
    with pytest.raises(ArgumentError, match="Unknown argument: --bogus"):
        parse_args([*files, "--bogus"])


def test_parse_args_safe_zones_without_value(files):
    with pytest.raises(ArgumentError, match="Unknown argument: --safe-zones"):
        parse_args([*files, "--safe-zones"])


def test_main_bad_arguments(capsys):
    assert main([]) == 1
    assert "Please check the arguments" in capsys.readouterr().out


def test_main_unknown_argument(files, capsys):
    assert main([*files, "--nope"]) == 1
    assert "Unknown argument: --nope" in capsys.readouterr().out


def test_capture_only_writes_snapshot(tmp_path, monkeypatch):
    monkeypatch.setenv("SDL_VIDEODRIVER", "dummy")
    graph = Graph.parse(MAP.splitlines())
    solution = parse_solution(PLAN.splitlines(), graph)
    state = ViewerState(graph, solution, None, True)
    out = tmp_path / "shots"
    Viewer(state, None, out).run()
    shots = list(out.glob("screenshot-*.png"))
    assert len(shots) == 1
    image = pygame.image.load(str(shots[0]))
    assert image.get_size() == state.window_size
    assert state.snapshot is False


def test_render_with_safe_zones(tmp_path, monkeypatch):
    monkeypatch.setenv("SDL_VIDEODRIVER", "dummy")
    graph = Graph.parse(MAP.splitlines())
    solution = parse_solution(PLAN.splitlines(), graph)
    zones = SafeZonesManager({0: [[(0, 5)]] * len(graph.cells)}, len(graph.cells))
    palette = GroupPalette(1)
    state = ViewerState(graph, solution, zones, False)
    viewer = Viewer(state, palette, tmp_path)
    pygame.init()
    try:
        surface = pygame.Surface(state.window_size)
        viewer.render(surface)
        cell = graph.vertex_at(0, 2)
        cx, cy = state.cell_center(cell.x, cell.y)
        color = surface.get_at((int(cx), int(cy)))
        assert tuple(color)[:3] == tuple(palette.color(0))
    finally:
        pygame.quit()