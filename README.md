# gridplan

Global path planning on 2D occupancy grids. A map has two grids, an
inflation grid and a log-odds grid, both stored in row-major order. A cell is
free when its inflation value is not positive and its log-odds value does not
exceed the threshold. Paths are searched on the 8-connected grid. They are
then reduced to their turning points and shortened into any-angle paths with
line-of-sight checks.

## Installing

```
pip install .
pip install ".[test]"   # to run the tests
```

## Building blocks

- `gridplan.types` holds `Index` (grid row `i`, column `j`), `Pos2D` (world
  `x`, `y`) and `MapData`. It also holds these functions:
  - `make_map_data` builds zero-filled grids for the given bounds and cell
    size. It raises `ValueError` when the cell size is not positive or when
    the bounds are inverted.
  - `octile_distance` gives the distance between two cells.
  - `bresenham_line` gives the cells on a straight line.
- `gridplan.open_list` holds `OpenList`, a min-heap of `OpenNode` entries. It
  orders them by f cost, by g cost, or by f with ties broken by g, as chosen
  with `CostMode`. An unknown mode falls back to f then g. Calling `push` or
  `pop` before a mode is set raises `OpenListNotReadyError`. Popping an empty
  list raises `IndexError`. `dump()` lists the queued nodes in pop order.
- `gridplan.core` holds `GridPlannerCore`, the shared planner base. It
  provides:
  - `pos_to_idx` and `idx_to_pos`, which convert between world positions and
    grid indices;
  - `is_free`;
  - `has_line_of_sight`;
  - `sparsify_path`;
  - `make_any_angle_path`;
  - `generate_path`, which plans and then post-processes the result.
- `gridplan.astar` holds `AStar`, which searches with an octile heuristic.
  Use it with cost mode `"f"` or `"fg"`.
- `gridplan.dijkstra` holds `Dijkstra`, which is meant for cost mode `"g"`.
  Its `find_better_point` method returns the nearest reachable free cell to a
  blocked position. Inflated and occupied cells may be crossed, but at a high
  cost.
- `gridplan.global_planner` holds the following:
  - `GlobalPlanner` keeps the robot pose, map grids, goal and replan flag.
    These are fed through `on_pose`, `on_inflation`, `on_logodds`, `on_goal`
    and `on_replan`.
  - `ready()` reports when planning can start.
  - `setup_planner()` creates the main planner and the fallback planner.
  - Each call to `step()` runs one round of the planning loop. It returns the
    `PathMessage` published in that round, or `None`. When the robot or the
    goal sits on a blocked cell, a nearby free cell is used in its place. A
    corrected goal is passed to the optional `goal_updater` callback.
  - `on_goal` accepts a new goal only if both of its coordinates differ from
    the current goal.
  - `load_params` reads a `PlannerParams` from a mapping. It returns the
    params together with a flag that says whether every required key was
    present.

When a path is found, its points run from the goal back to the start. When
the goal cannot be reached, the raw plan is only the start position.

## Example

```python
from gridplan.types import Pos2D, make_map_data
from gridplan.astar import AStar

data = make_map_data(Pos2D(-1.0, -1.0), Pos2D(1.0, 1.0), 0.1, 10, 20)
planner = AStar("fg", data)
path = planner.generate_path(Pos2D(-0.5, -0.5), Pos2D(0.5, 0.5), data)
for point in path:
    print(point.x, point.y)
```

## Command line

```
gridplan --start X Y --goal X Y [--map grids.json] [--param KEY=VALUE ...]
gridplan --help
```

The command plans one path and prints its points as `x y` lines.

- `--param` sets a planner setting. The keys are `cell_size`,
  `log_odds_thresh`, `log_odds_cap`, `gp_rate`, `min_x`, `min_y`, `max_x`,
  `max_y`, `verbose_planner`, `planner_name` (`astar` or `djikstra`) and
  `cost_mode` (`f`, `g` or `fg`).
- `--map` names a JSON file with `inflation` and `logodds` lists. A grid that
  is missing from the file, or a missing `--map`, is taken as all zeros.

The command exits with status 1 when no path can be produced.

## What it does not do

The package does not subscribe to or publish anything, and it does not run a
timed loop. The caller feeds data into `GlobalPlanner` and calls `step()`
itself. The `gp_rate` setting is stored but not used for timing.

## Tests

```
pytest
```