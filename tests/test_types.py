import math

import pytest

from gridplan.types import (
    Index,
    MapData,
    Pos2D,
    bresenham_line,
    make_map_data,
    octile_distance,
)


def test_make_map_data_sizes_from_bounds():
    data = make_map_data(Pos2D(0.0, 0.0), Pos2D(2.0, 3.0), 1.0, 10, 20)
    assert data.map_size == Index(2, 3)
    assert data.total_cells == 6
    assert data.grid_inflation == [0] * 6
    assert data.grid_logodds == [0] * 6


def test_make_map_data_origin_is_minimum():
    low = Pos2D(-1.5, 2.0)
    data = make_map_data(low, Pos2D(1.5, 4.0), 0.5, 7, 9)
    assert data.origin == low
    assert data.lo_thresh == 7
    assert data.lo_cap == 9


def test_make_map_data_rejects_bad_cell_size():
    with pytest.raises(ValueError):
        make_map_data(Pos2D(0.0, 0.0), Pos2D(1.0, 1.0), 0.0, 10, 20)


def test_map_data_defaults():
    data = MapData()
    assert data.cell_size == 0.05
    assert data.lo_thresh == 10
    assert data.lo_cap == 20
    assert data.total_cells == 0


def test_octile_cardinal_is_manhattan():
    assert octile_distance(Index(0, 0), Index(3, 0)) == 3.0
    assert octile_distance(Index(2, 5), Index(2, 1)) == 4.0


def test_octile_diagonal():
    for n in range(1, 6):
        assert octile_distance(Index(0, 0), Index(n, n)) == pytest.approx(
            n * math.sqrt(2)
        )


def test_octile_symmetric_and_zero():
    a, b = Index(1, 7), Index(-3, 2)
    assert octile_distance(a, b) == octile_distance(b, a)
    assert octile_distance(a, a) == 0


@pytest.mark.parametrize(
    "src,end",
    [
        (Index(0, 0), Index(5, 2)),
        (Index(3, 3), Index(-2, 0)),
        (Index(0, 0), Index(1, 7)),
        (Index(4, -1), Index(4, -6)),
        (Index(-2, 5), Index(2, 1)),
    ],
)
def test_bresenham_invariants(src, end):
    cells = bresenham_line(src, end)
    assert cells[0] == src
    assert cells[-1] == end
    assert len(cells) == max(abs(end.i - src.i), abs(end.j - src.j)) + 1
    for a, b in zip(cells, cells[1:]):
        assert max(abs(a.i - b.i), abs(a.j - b.j)) == 1


def test_bresenham_horizontal():
    assert bresenham_line(Index(2, 0), Index(2, 3)) == [
        Index(2, 0),
        Index(2, 1),
        Index(2, 2),
        Index(2, 3),
    ]


def test_bresenham_single_cell():
    assert bresenham_line(Index(4, 4), Index(4, 4)) == [Index(4, 4)]