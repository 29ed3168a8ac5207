"""Shared machinery for grid-based path planners."""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass

from .open_list import CostMode, OpenList, OpenNode, _parse_mode
from .types import Index, MapData, Pos2D, _round_half_away, bresenham_line

logger = logging.getLogger(__name__)


@dataclass
class Node:
    """Search state of one grid cell."""

    g: float = 0.0
    h: float = 0.0
    visited: bool = False
    idx: Index = Index(-1, -1)
    parent: Index = Index(-1, -1)


class GridPlannerCore(ABC):
    """Base for planners searching an occupancy grid.

    Subclasses implement :meth:`plan`; :meth:`generate_path` plans and then
    post-processes the raw path.
    """

    neighbour_offsets: tuple[Index, ...] = (
        Index(1, 0),
        Index(1, 1),
        Index(0, 1),
        Index(-1, 1),
        Index(-1, 0),
        Index(-1, -1),
        Index(0, -1),
        Index(1, -1),
    )

    def __init__(self, cost_mode: str | CostMode = "f", map_data: MapData | None = None) -> None:
        self.cost_mode = _parse_mode(cost_mode)
        self.start = Index(-1, -1)
        self.goal = Index(-1, -1)
        self.nodes: list[Node] = []
        self.map_height = 0
        self.map_width = 0
        self.cell_size = 1.0
        self.map_origin = Pos2D(0.0, 0.0)
        self.open_list = OpenList(self.cost_mode)
        if map_data is not None:
            self.prepare(cost_mode, map_data)

    def prepare(self, cost_mode: str | CostMode, map_data: MapData) -> None:
        """Size the planner to the map and rebuild the node store."""
        self.cost_mode = _parse_mode(cost_mode)
        self.map_height = map_data.map_size.i
        self.map_width = map_data.map_size.j
        self.cell_size = map_data.cell_size
        self.map_origin = Pos2D(map_data.origin.x, map_data.origin.y)
        self.start = Index(-1, -1)
        self.goal = Index(-1, -1)
        self.nodes = [
            Node(idx=Index(i, j))
            for i in range(self.map_height)
            for j in range(self.map_width)
        ]
        self.open_list.clear()
        self.open_list.set_mode(self.cost_mode)
        logger.debug("planner prepared for a %dx%d grid", self.map_height, self.map_width)

    def _push_node(self, node: Node) -> None:
        f = 0.0 if self.cost_mode is CostMode.G else node.g + node.h
        # Costs enter the open list as whole numbers.
        self.open_list.push(OpenNode(int(f), int(node.g), node.idx))

    def _pop_node(self) -> Node:
        return self.nodes[self.flatten(self.open_list.pop().idx)]

    def _as_index(self, where: Index | Pos2D) -> Index:
        return self.pos_to_idx(where) if isinstance(where, Pos2D) else where

    def flatten(self, idx: Index) -> int:
        return idx.i * self.map_width + idx.j

    def pos_to_idx(self, pos: Pos2D) -> Index:
        return Index(
            _round_half_away((pos.x - self.map_origin.x) / self.cell_size),
            _round_half_away((pos.y - self.map_origin.y) / self.cell_size),
        )

    def idx_to_pos(self, idx: Index) -> Pos2D:
        return Pos2D(
            idx.i * self.cell_size + self.map_origin.x,
            idx.j * self.cell_size + self.map_origin.y,
        )

    def out_of_bounds(self, idx: Index | Pos2D) -> bool:
        idx = self._as_index(idx)
        return not (0 <= idx.i < self.map_height and 0 <= idx.j < self.map_width)

    def is_free(self, idx: Index | Pos2D, map_data: MapData) -> bool:
        """True when the cell is on the map, not inflated and not occupied."""
        idx = self._as_index(idx)
        if self.out_of_bounds(idx):
            return False
        key = self.flatten(idx)
        if map_data.grid_inflation[key] > 0:
            return False
        return map_data.grid_logodds[key] <= map_data.lo_thresh

    def has_line_of_sight(
        self, src: Index | Pos2D, end: Index | Pos2D, map_data: MapData
    ) -> bool:
        line = bresenham_line(self._as_index(src), self._as_index(end))
        return all(self.is_free(cell, map_data) for cell in line)

    def sparsify_path(self, path: list[Pos2D]) -> list[Pos2D]:
        """Keep only the end points and the points where the path turns."""
        if len(path) <= 2:
            return list(path)
        turning = [path[0]]
        for prev, cur, nxt in zip(path, path[1:], path[2:]):
            dx_next, dy_next = nxt.x - cur.x, nxt.y - cur.y
            dx_prev, dy_prev = cur.x - prev.x, cur.y - prev.y
            if math.fabs(dx_next * dy_prev - dy_next * dx_prev) > 1e-5:
                turning.append(cur)
        turning.append(path[-1])
        return turning

    def make_any_angle_path(self, points: list[Pos2D], map_data: MapData) -> list[Pos2D]:
        """Drop turning points that can be skipped by a straight free line."""
        if not points:
            raise ValueError("cannot shorten an empty path")
        result = [points[0]]
        current = self.pos_to_idx(points[0])
        for point, following in zip(points[1:-1], points[2:]):
            if not self.has_line_of_sight(current, self.pos_to_idx(following), map_data):
                result.append(point)
                current = self.pos_to_idx(point)
        result.append(points[-1])
        return result

    @abstractmethod
    def plan(self, start: Index | Pos2D, goal: Index | Pos2D, map_data: MapData) -> list[Pos2D]:
        """Search the grid and return the raw path in world coordinates."""

    def post_process_path(self, raw_path: list[Pos2D], map_data: MapData) -> list[Pos2D]:
        if len(raw_path) <= 2:
            return list(raw_path)
        return self.make_any_angle_path(self.sparsify_path(raw_path), map_data)

    def generate_path(
        self, start: Index | Pos2D, goal: Index | Pos2D, map_data: MapData
    ) -> list[Pos2D]:
        raw = self.plan(self._as_index(start), self._as_index(goal), map_data)
        return self.post_process_path(raw, map_data)