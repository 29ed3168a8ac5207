"""Dijkstra search over an occupancy grid, with a free-cell finder."""

from __future__ import annotations

import logging
import math

from .astar import _search_path
from .core import GridPlannerCore
from .types import Index, MapData, Pos2D

logger = logging.getLogger(__name__)

_UNREACHED = 1e5
_TOLERANCE = 1e-5
_INFLATED_STEP = 100.0
_OCCUPIED_STEP = 1000.0


class Dijkstra(GridPlannerCore):
    """Uninformed grid planner; also finds the nearest free cell to a bad one."""

    def plan(self, start: Index | Pos2D, goal: Index | Pos2D, map_data: MapData) -> list[Pos2D]:
        """Return the raw path from goal back to start in world coordinates."""
        return _search_path(self, start, goal, map_data, lambda _cell, _goal: 0.0)

    def _step_cost(self, nb: Index, cardinal: bool, map_data: MapData) -> float:
        if self.is_free(nb, map_data):
            return 1.0 if cardinal else math.sqrt(2)
        key = self.flatten(nb)
        if map_data.grid_inflation[key] > 0:
            return _INFLATED_STEP
        if map_data.grid_logodds[key] > map_data.lo_thresh:
            return _OCCUPIED_STEP
        return 0.0

    def find_better_point(self, bad: Index | Pos2D, map_data: MapData) -> Pos2D:
        """Return the cheapest-to-reach free cell around ``bad``.

        Crossing inflated or occupied cells is allowed but expensive. When no
        free cell exists, the position of ``bad`` itself is returned.
        """
        bad = self._as_index(bad)
        if self.out_of_bounds(bad):
            raise ValueError(f"point {bad} lies outside the map")
        self.open_list.clear()

        for node in self.nodes:
            node.h = 0.0
            node.g = _UNREACHED
            node.visited = False
        self.start = bad

        first = self.nodes[self.flatten(bad)]
        first.g = 0.0
        self._push_node(first)

        try:
            while len(self.open_list):
                node = self._pop_node()
                if node.visited:
                    continue
                node.visited = True
                if self.is_free(node.idx, map_data):
                    logger.debug("better point found at %s", node.idx)
                    return self.idx_to_pos(node.idx)

                cardinal = True
                for offset in self.neighbour_offsets:
                    nb = Index(node.idx.i + offset.i, node.idx.j + offset.j)
                    if self.out_of_bounds(nb):
                        continue
                    g_nb = node.g + self._step_cost(nb, cardinal, map_data)
                    nb_node = self.nodes[self.flatten(nb)]
                    if nb_node.g > g_nb + _TOLERANCE:
                        nb_node.g = g_nb
                        nb_node.parent = node.idx
                        self._push_node(nb_node)
                    cardinal = not cardinal
        finally:
            self.open_list.clear()

        logger.warning("unable to find a better point than %s", bad)
        return self.idx_to_pos(bad)