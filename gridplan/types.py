"""Grid coordinates, world positions and occupancy map data."""

from __future__ import annotations

import math
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Index:
    """A cell of the grid: row ``i`` and column ``j``."""

    i: int
    j: int


@dataclass(frozen=True)
class Pos2D:
    """A position in world coordinates."""

    x: float
    y: float


def _round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


@dataclass
class MapData:
    """Occupancy map geometry together with its inflation and log-odds grids."""

    pos_min: Pos2D = Pos2D(-10.0, -10.0)
    pos_max: Pos2D = Pos2D(10.0, 10.0)
    cell_size: float = 0.05
    lo_thresh: int = 10
    lo_cap: int = 20
    origin: Pos2D = Pos2D(-10.0, -10.0)
    map_size: Index = Index(0, 0)
    grid_inflation: list[int] = field(default_factory=list)
    grid_logodds: list[int] = field(default_factory=list)

    @property
    def total_cells(self) -> int:
        return self.map_size.i * self.map_size.j


def make_map_data(
    pos_min: Pos2D,
    pos_max: Pos2D,
    cell_size: float,
    lo_thresh: int,
    lo_cap: int,
) -> MapData:
    """Build map data for the given bounds, with both grids zero-filled."""
    if cell_size <= 0:
        raise ValueError("cell_size must be positive")
    size = Index(
        _round_half_away((pos_max.x - pos_min.x) / cell_size),
        _round_half_away((pos_max.y - pos_min.y) / cell_size),
    )
    if size.i < 0 or size.j < 0:
        raise ValueError("pos_max must not lie below pos_min")
    total = size.i * size.j
    return MapData(
        pos_min=pos_min,
        pos_max=pos_max,
        cell_size=cell_size,
        lo_thresh=lo_thresh,
        lo_cap=lo_cap,
        origin=pos_min,
        map_size=size,
        grid_inflation=[0] * total,
        grid_logodds=[0] * total,
    )


def octile_distance(a: Index, b: Index) -> float:
    """Distance between two cells moving in eight directions."""
    di = abs(a.i - b.i)
    dj = abs(a.j - b.j)
    return (max(di, dj) - min(di, dj)) + math.sqrt(2) * min(di, dj)


def bresenham_line(src: Index, end: Index) -> list[Index]:
    """Cells crossed by a straight line from ``src`` to ``end``, both included."""
    i, j = src.i, src.j
    di = abs(end.i - i)
    dj = abs(end.j - j)
    step_i = 1 if end.i >= i else -1
    step_j = 1 if end.j >= j else -1
    err = di - dj
    cells = []
    while True:
        cells.append(Index(i, j))
        if i == end.i and j == end.j:
            return cells
        doubled = 2 * err
        if doubled > -dj:
            err -= dj
            i += step_i
        if doubled < di:
            err += di
            j += step_j