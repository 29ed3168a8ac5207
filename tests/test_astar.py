import pytest

from gridplan.astar import AStar
from gridplan.types import Index, Pos2D, make_map_data, octile_distance


def _map(size=5):
    return make_map_data(Pos2D(0.0, 0.0), Pos2D(float(size), float(size)), 1.0, 10, 20)


def _block(md, cells, logodds=False):
    width = md.map_size.j
    for i, j in cells:
        if logodds:
            md.grid_logodds[i * width + j] = md.lo_thresh + 1
        else:
            md.grid_inflation[i * width + j] = 1


def _assert_connected(path):
    for a, b in zip(path, path[1:]):
        assert max(abs(a.x - b.x), abs(a.y - b.y)) == pytest.approx(1.0)


def test_plan_runs_from_goal_back_to_start():
    md = _map()
    planner = AStar("fg", md)
    path = planner.plan(Index(0, 0), Index(4, 4), md)
    assert path[0] == Pos2D(4, 4)
    assert path[-1] == Pos2D(0, 0)
    assert len(path) >= 5
    _assert_connected(path)


def test_plan_accepts_world_positions():
    md = _map()
    planner = AStar("fg", md)
    path = planner.plan(Pos2D(0.2, 0.1), Pos2D(3.9, 4.1), md)
    assert path[0] == Pos2D(4, 4)
    assert path[-1] == Pos2D(0, 0)


def test_plan_routes_through_the_only_gap():
    md = _map()
    _block(md, [(2, 0), (2, 1), (2, 2), (2, 3)])
    planner = AStar("fg", md)
    path = planner.plan(Index(0, 0), Index(4, 0), md)
    assert Pos2D(2, 4) in path
    assert all(planner.is_free(p, md) for p in path)
    _assert_connected(path)


def test_plan_avoids_occupied_logodds_cells():
    md = _map()
    _block(md, [(2, 1), (2, 2), (2, 3), (2, 4)], logodds=True)
    planner = AStar("f", md)
    path = planner.plan(Index(0, 4), Index(4, 4), md)
    assert Pos2D(2, 0) in path
    assert all(planner.is_free(p, md) for p in path)


def test_unreachable_goal_returns_start_only():
    md = _map()
    _block(md, [(2, j) for j in range(5)])
    planner = AStar("fg", md)
    assert planner.plan(Index(0, 0), Index(4, 4), md) == [Pos2D(0, 0)]
    assert len(planner.open_list) == 0


def test_goal_equal_to_start():
    md = _map()
    planner = AStar("fg", md)
    assert planner.plan(Index(3, 1), Index(3, 1), md) == [Pos2D(3, 1)]


def test_heuristic_is_octile_distance_to_goal():
    md = _map()
    planner = AStar("fg", md)
    goal = Index(4, 4)
    planner.plan(Index(0, 0), goal, md)
    for node in planner.nodes:
        assert node.h == pytest.approx(octile_distance(node.idx, goal))
    assert planner.start == Index(0, 0)
    assert planner.goal == goal


def test_start_outside_map_is_rejected():
    md = _map()
    planner = AStar("fg", md)
    with pytest.raises(ValueError):
        planner.plan(Index(-1, 0), Index(4, 4), md)


def test_generate_path_in_open_map_is_a_straight_line():
    md = _map()
    planner = AStar("fg", md)
    assert planner.generate_path(Index(0, 0), Index(4, 4), md) == [Pos2D(4, 4), Pos2D(0, 0)]


def test_generate_path_keeps_a_corner_around_a_wall():
    md = _map()
    _block(md, [(2, 0), (2, 1), (2, 2), (2, 3)])
    planner = AStar("fg", md)
    path = planner.generate_path(Index(0, 0), Index(4, 0), md)
    assert path[0] == Pos2D(4, 0)
    assert path[-1] == Pos2D(0, 0)
    assert len(path) > 2
    for a, b in zip(path, path[1:]):
        assert planner.has_line_of_sight(a, b, md)


def test_repeated_plans_give_the_same_path():
    md = _map()
    planner = AStar("fg", md)
    first = planner.plan(Index(0, 0), Index(4, 2), md)
    second = planner.plan(Index(0, 0), Index(4, 2), md)
    assert first == second