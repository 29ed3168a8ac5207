"""Goal handling and replanning around the grid planners."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .astar import AStar
from .core import GridPlannerCore
from .dijkstra import Dijkstra
from .types import Index, Pos2D, _round_half_away, make_map_data

logger = logging.getLogger(__name__)

_EPS = 1e-6
_UNSET_ROBOT = -500.0
_UNSET_GOAL = -1000.0
_FALLBACK_COST_MODE = "g"


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    return bool(value)


@dataclass
class PlannerParams:
    """Settings of the global planner."""

    cell_size: float = 0.05
    log_odds_thresh: int = 10
    log_odds_cap: int = 20
    rate: float = 25.0
    min_x: float = -10.0
    min_y: float = -10.0
    max_x: float = 10.0
    max_y: float = 10.0
    verbose: bool = False
    planner_name: str = "astar"
    cost_mode: str = "fg"


# (key, attribute, converter, whether a missing key makes the set incomplete)
_PARAM_KEYS: tuple[tuple[str, str, Callable[[Any], Any], bool], ...] = (
    ("cell_size", "cell_size", float, True),
    ("log_odds_thresh", "log_odds_thresh", int, True),
    ("log_odds_cap", "log_odds_cap", int, True),
    ("gp_rate", "rate", float, True),
    ("min_x", "min_x", float, True),
    ("min_y", "min_y", float, True),
    ("max_x", "max_x", float, True),
    ("max_y", "max_y", float, True),
    ("verbose_planner", "verbose", _to_bool, True),
    ("planner_name", "planner_name", str, False),
    ("cost_mode", "cost_mode", str, False),
)


def load_params(mapping: Mapping[str, Any]) -> tuple[PlannerParams, bool]:
    """Read planner settings from ``mapping``.

    Returns the settings and whether every required key was present; missing
    keys take their defaults.
    """
    values: dict[str, Any] = {}
    complete = True
    for key, attr, convert, required in _PARAM_KEYS:
        if key in mapping:
            values[attr] = convert(mapping[key])
        else:
            logger.warning("parameter %s not found, using default", key)
            if required:
                complete = False
    return PlannerParams(**values), complete


@dataclass
class PathMessage:
    """A published path: its sequence number and its poses."""

    id: int = 0
    poses: list[Pos2D] = field(default_factory=list)
    frame_id: str = "world"


class GlobalPlanner:
    """Keeps robot, goal and map state and decides when to (re)plan.

    ``goal_updater`` is called with a corrected goal whenever the requested
    goal lies on a blocked cell; it returns whether the update was accepted.
    """

    def __init__(
        self,
        params: PlannerParams | None = None,
        goal_updater: Callable[[Pos2D], bool] | None = None,
    ) -> None:
        self.params = params if params is not None else PlannerParams()
        p = self.params
        self.map_data = make_map_data(
            Pos2D(p.min_x, p.min_y),
            Pos2D(p.max_x, p.max_y),
            p.cell_size,
            p.log_odds_thresh,
            p.log_odds_cap,
        )
        self.goal_updater = goal_updater

        self.robot_position = Pos2D(_UNSET_ROBOT, _UNSET_ROBOT)
        self.robot_index = Index(int(_UNSET_ROBOT), int(_UNSET_ROBOT))
        self.backup_position = self.robot_position
        self.robot_status = True
        self.backup_mode = False

        self.current_goal = Pos2D(_UNSET_GOAL, _UNSET_GOAL)
        self.goal_status = True

        self.trigger_plan = False
        self.trigger_replan = False

        self.path: list[Pos2D] = []
        self.path_id = 0
        self.message = PathMessage()

        self.main_planner: GridPlannerCore | None = None
        self.fallback_planner: Dijkstra | None = None

    # -- incoming data ---------------------------------------------------

    def on_pose(self, x: float, y: float) -> None:
        self.robot_position = Pos2D(x, y)
        self.robot_index = self._pos_to_idx(self.robot_position)

    def on_inflation(self, data) -> None:
        self.map_data.grid_inflation = list(data)

    def on_logodds(self, data) -> None:
        self.map_data.grid_logodds = list(data)

    def on_goal(self, x: float, y: float) -> None:
        """Accept a goal that differs from the current one in both coordinates."""
        if abs(x - self.current_goal.x) > _EPS and abs(y - self.current_goal.y) > _EPS:
            self.current_goal = Pos2D(x, y)
            self.path = []
            self.message = PathMessage(id=self.path_id)
            self.trigger_plan = True
            if self.params.verbose:
                logger.info("new goal received: (%g,%g)", x, y)

    def on_replan(self, trigger: bool) -> None:
        self.trigger_replan = bool(trigger)
        if self.trigger_replan and self.params.verbose:
            logger.warning("replan requested")

    # -- state -----------------------------------------------------------

    def ready(self) -> bool:
        """True once pose, grids and a goal have arrived and a plan is due."""
        return (
            self.robot_position.x != _UNSET_ROBOT
            and bool(self.map_data.grid_inflation)
            and bool(self.map_data.grid_logodds)
            and self.current_goal.x != _UNSET_GOAL
            and self.trigger_plan
        )

    def setup_planner(self) -> None:
        """Create the main planner named in the settings and the fallback."""
        name = self.params.planner_name
        mode = self.params.cost_mode
        if name in ("djikstra", "dijkstra"):
            if mode != "g":
                logger.error("Dijkstra requires g cost but %r is set; planning will fail", mode)
            self.main_planner = Dijkstra(mode, self.map_data)
        else:
            if mode == "g":
                logger.error("A* requires f or fg cost but g is set; planning will fail")
            self.main_planner = AStar(mode, self.map_data)
        self.fallback_planner = Dijkstra(_FALLBACK_COST_MODE, self.map_data)
        if self.params.verbose:
            logger.info("planners ready")

    def _pos_to_idx(self, pos: Pos2D) -> Index:
        md = self.map_data
        return Index(
            _round_half_away((pos.x - md.origin.x) / md.cell_size),
            _round_half_away((pos.y - md.origin.y) / md.cell_size),
        )

    def is_free(self, pos: Pos2D) -> bool:
        """True when ``pos`` is on the map, not inflated and not occupied."""
        idx = self._pos_to_idx(pos)
        md = self.map_data
        if not (0 <= idx.i < md.map_size.i and 0 <= idx.j < md.map_size.j):
            return False
        key = idx.i * md.map_size.j + idx.j
        if md.grid_inflation[key] > 0:
            return False
        return md.grid_logodds[key] <= md.lo_thresh

    # -- planning loop ---------------------------------------------------

    def step(self) -> PathMessage | None:
        """Run one round of the planning loop.

        Returns the path message published in this round, or None when
        nothing was published.
        """
        if self.main_planner is None or self.fallback_planner is None:
            raise RuntimeError("planners are not set up")

        self.robot_status = self.is_free(self.robot_position)
        self.goal_status = self.is_free(self.current_goal)

        if self.trigger_plan or self.trigger_replan:
            return self._replan()

        if not self.path:
            self.trigger_plan = True
            logger.warning("no path available")
            return None
        if not self.goal_status:
            self.trigger_plan = True
            return None
        if not self.robot_status:
            if self.backup_mode:
                return self.message
            self.trigger_plan = True
            return None
        self.backup_mode = False
        return self.message

    def _replan(self) -> PathMessage | None:
        assert self.main_planner is not None and self.fallback_planner is not None
        start = self.robot_position

        if not self.robot_status:
            logger.warning("robot on a blocked cell, finding a better start")
            self.backup_position = self.fallback_planner.find_better_point(
                self.robot_position, self.map_data
            )
            start = self.backup_position
            if self.goal_status:
                self.backup_mode = True

        if not self.goal_status:
            logger.warning("goal on a blocked cell, finding a better goal")
            updated = self.fallback_planner.find_better_point(self.current_goal, self.map_data)
            if self.goal_updater is None:
                logger.info("no goal updater to notify")
            elif self.goal_updater(updated):
                logger.info("mission planner updated")
            else:
                logger.info("failed to update mission planner")
            self.current_goal = updated

        self.path = self.main_planner.generate_path(start, self.current_goal, self.map_data)
        self._write_message()

        if not self.path:
            logger.warning("no path found")
            return None
        self.trigger_plan = False
        self.trigger_replan = False
        return self.message

    def _write_message(self) -> None:
        self.path_id += 1
        self.message = PathMessage(id=self.path_id, poses=list(self.path))
        if self.params.verbose:
            logger.info("current path id: %d", self.path_id)