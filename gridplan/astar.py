"""A* search over an occupancy grid."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable

from .core import GridPlannerCore, Node
from .types import Index, MapData, Pos2D, octile_distance

logger = logging.getLogger(__name__)

_UNREACHED = 1e5
_TOLERANCE = 1e-5


def _expand(planner: GridPlannerCore, node: Node, map_data: MapData) -> None:
    """Relax the free neighbours of ``node`` and queue the improved ones."""
    cardinal = True
    for offset in planner.neighbour_offsets:
        nb = Index(node.idx.i + offset.i, node.idx.j + offset.j)
        if not planner.is_free(nb, map_data):
            # The step-cost flag only flips for neighbours that are examined.
            continue
        g_nb = node.g + (1.0 if cardinal else math.sqrt(2))
        nb_node = planner.nodes[planner.flatten(nb)]
        if nb_node.g > g_nb + _TOLERANCE:
            nb_node.g = g_nb
            nb_node.parent = node.idx
            planner._push_node(nb_node)
        cardinal = not cardinal


def _backtrack(planner: GridPlannerCore, node: Node) -> list[Index]:
    """Cells from ``node`` back to the planner's start, following parents."""
    cells = [node.idx]
    while node.idx != planner.start:
        node = planner.nodes[planner.flatten(node.parent)]
        cells.append(node.idx)
    return cells


def _search_path(
    planner: GridPlannerCore,
    start: Index | Pos2D,
    goal: Index | Pos2D,
    map_data: MapData,
    heuristic: Callable[[Index, Index], float],
) -> list[Pos2D]:
    """Best-first search from ``start`` to ``goal``.

    Returns the path from goal back to start in world coordinates, or just
    the start position when the goal cannot be reached.
    """
    start = planner._as_index(start)
    goal = planner._as_index(goal)
    if planner.out_of_bounds(start):
        raise ValueError(f"start {start} lies outside the map")
    planner.start = start
    planner.goal = goal

    for node in planner.nodes:
        node.h = heuristic(node.idx, goal)
        node.g = _UNREACHED
        node.visited = False

    first = planner.nodes[planner.flatten(start)]
    first.g = 0.0
    planner._push_node(first)

    path_idx: list[Index] = []
    try:
        while len(planner.open_list):
            node = planner._pop_node()
            if node.visited:
                continue
            node.visited = True
            if node.idx == goal:
                logger.debug("goal found, backtracking to start")
                path_idx = _backtrack(planner, node)
                break
            _expand(planner, node, map_data)
    finally:
        planner.open_list.clear()

    if not path_idx:
        logger.debug("no path from %s to %s", start, goal)
        return [planner.idx_to_pos(start)]
    return [planner.idx_to_pos(idx) for idx in path_idx]


class AStar(GridPlannerCore):
    """Grid planner guided by the octile distance to the goal."""

    def plan(self, start: Index | Pos2D, goal: Index | Pos2D, map_data: MapData) -> list[Pos2D]:
        """Return the raw path from goal back to start in world coordinates."""
        return _search_path(self, start, goal, map_data, octile_distance)