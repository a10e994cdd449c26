# mapfviz

An interactive viewer for multi-agent path finding (MAPF) plans on grid maps.
It animates every agent along its planned path. It also shows the goals, the
orientations where the plan gives them, and, if you ask for it, the safe zones
that belong to each agent group. The window is drawn with pygame.

## Installation

```
pip install .
```

This installs the `mapf-visualizer` command.

## Usage

```
mapf-visualizer MAP_FILE SOLUTION_FILE [--safe-zones SAFE_ZONES_FILE] [--capture-only]
```

- `MAP_FILE` is a grid map in the usual MAPF benchmark format. It has
  `height N` and `width N` header lines, then a `map` line, then one row of
  cells per line. `T` and `@` mark obstacles, and every other character is a
  free cell.
- `SOLUTION_FILE` is the plan. Only lines that contain `:(` are read. Each such
  line holds the configuration of all agents at one timestep, written as
  `(x,y),` or `(x,y,ORIENTATION),`, where the orientation is `X_MINUS`,
  `X_PLUS`, `Y_MINUS` or `Y_PLUS`. A pose that lies outside the grid or on an
  obstacle is reported as an error.
- `--safe-zones FILE` colours each cell by the agent group for which it is safe
  at the current timestep.
  - Each group begins with a line `Safe zone for agent group K:`, and the groups
    must be numbered 0, 1, 2 and so on.
  - The group's data sits between the lines `Temporal graph start` and
    `Temporal graph end`.
  - Between those lines there is one `{[a,b][c,d]...}` entry for every grid
    cell, obstacles included. Each entry lists inclusive intervals of safe
    timesteps.
  - If the file cannot be opened, the viewer prints `failed to load FILE` and
    runs without safe zones.
  - A malformed file stops the program with an error.
- `--capture-only` does not start an interactive session. It opens the window,
  saves a snapshot of the first frame and exits.

If the first two arguments are missing or are not readable files, or if an
argument is not recognised, the command prints a usage message and exits with
status 1.

## Keys

| key   | action                             |
|-------|------------------------------------|
| p     | play or pause                      |
| l     | loop or not                        |
| r     | reset to timestep 0                |
| v     | cycle lines: to goal / path / none |
| f     | show agent and cell ids            |
| g     | show goals                         |
| right | step forward by the current speed  |
| left  | step back by the current speed     |
| up    | speed up                           |
| down  | slow down                          |
| i     | toggle zoom in                     |
| o     | toggle zoom out                    |
| G     | toggle gridlines                   |
| space | screenshot                         |
| esc   | quit                               |

You can pan the view by dragging with the left mouse button. The current
timestep and speed are shown in the top-left corner.

Screenshots are saved as PNG files named `screenshot-<timestamp>.png` in
`~/Desktop`. The folder is created if it does not exist.

## Library use

You can also use the parsers and the playback state on their own:

```python
from mapfviz.graph import Graph
from mapfviz.solution import load_solution
from mapfviz.safe_zones import SafeZonesManager
from mapfviz.viewer_state import ViewerState

graph = Graph.from_file("random-32-32-20.map")
plan = load_solution("demo.txt", graph)
zones = SafeZonesManager.from_file("demo.safe_zones", len(graph.cells))
group = zones.safe_agent_group(0, 3)  # None when no group is safe there

state = ViewerState(graph, plan, zones)
state.handle_key("right")
print(state.timestep, state.agent_position(0))
```

## Modules

- `mapfviz.graph` provides `Graph` (its `parse`, `from_file` and `vertex_at`
  methods), along with `Vertex`, `Orientation` and `Pose`.
- `mapfviz.solution` provides `parse_solution` and `load_solution`.
- `mapfviz.safe_zones` provides `SafeZonesManager` and `SafeZonesError`.
- `mapfviz.colors` provides the layout constants, `agent_color` and
  `GroupPalette`.
- `mapfviz.viewer_state` provides `ViewerState`, `LineMode`, `Key` and
  `compute_scale`. None of it depends on pygame.
- `mapfviz.app` provides `parse_args`, `Viewer` and `main`.

## Limitations

- Screenshots are raster PNG images. There is no vector or PDF output.
- There are no on-screen sliders. Time and speed change only through the
  keys above.