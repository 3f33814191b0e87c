import pytest

from corridor_router import connection_candidates, connection_point, route_link, route_links
from dungeon_config import GenerationConfig, LayoutVariant
from dungeon_geometry import GridPos
from dungeon_models import LinkKind
from path_grid import WalkabilityGrid, build_walkability_grid, grid_dimensions
from pathfinder import (
    DEFAULT_PATH_COSTS,
    UNIFORM_PATH_COSTS,
    count_turns,
    find_path,
    heuristic,
)


def _assert_connected(path):
    for start, end in zip(path, path[1:]):
        assert start.is_adjacent(end)


def test_path_to_same_cell_is_single_cell():
    grid = WalkabilityGrid(3, 3)

    assert find_path(grid, GridPos(1, 1), GridPos(1, 1)) == [GridPos(1, 1)]


def test_blocked_endpoints_and_enclosed_goal_return_empty():
    grid = WalkabilityGrid(5, 5)
    for cell in (GridPos(3, 2), GridPos(4, 3), GridPos(3, 4), GridPos(2, 3)):
        grid.block(cell)

    assert find_path(grid, GridPos(0, 0), GridPos(3, 3)) == []
    assert find_path(grid, GridPos(3, 2), GridPos(0, 0)) == []
    assert find_path(grid, GridPos(0, 0), GridPos(9, 9)) == []


def test_cost_bias_prefers_fewer_turns():
    grid = WalkabilityGrid(3, 3)
    start, goal = GridPos(0, 0), GridPos(2, 2)

    biased = find_path(grid, start, goal, DEFAULT_PATH_COSTS)
    uniform = find_path(grid, start, goal, UNIFORM_PATH_COSTS)

    assert biased[0] == start and biased[-1] == goal
    assert len(biased) == 5
    assert count_turns(biased) <= 1
    assert len(uniform) == 5
    assert count_turns(uniform) >= 2
    _assert_connected(biased)
    _assert_connected(uniform)


def test_path_detours_around_wall():
    grid = WalkabilityGrid(7, 5)
    for y in range(4):
        grid.block(GridPos(3, y))

    path = find_path(grid, GridPos(0, 0), GridPos(6, 0))

    assert path[0] == GridPos(0, 0) and path[-1] == GridPos(6, 0)
    assert GridPos(3, 4) in path
    assert all(grid.is_walkable(cell) for cell in path)
    _assert_connected(path)


def test_iteration_cap_gives_up():
    grid = WalkabilityGrid(20, 20)

    assert find_path(grid, GridPos(0, 0), GridPos(19, 19), max_iterations=3) == []
    assert find_path(grid, GridPos(0, 0), GridPos(19, 19), max_iterations=10_000)


def test_heuristic_discounts_diagonal_component():
    assert heuristic(GridPos(0, 0), GridPos(4, 0)) == 4
    assert heuristic(GridPos(0, 0), GridPos(2, 2)) == pytest.approx(2 * 2 ** 0.5)


def test_count_turns():
    path = [GridPos(0, 0), GridPos(1, 0), GridPos(1, 1), GridPos(1, 2), GridPos(2, 2)]

    assert count_turns(path) == 2
    assert count_turns(path[:2]) == 0


def test_walkability_grid_blocks_rooms_and_link_spans(make_graph):
    graph = make_graph([(1, 1), (2, 1), (2, 2)], [(0, 1), (1, 2)])

    grid = build_walkability_grid(graph, 4, 3)

    assert grid.to_rows() == ["....", ".##.", "..#."]
    assert grid.nearest_walkable(GridPos(2, 1)) == GridPos(2, 0)
    assert grid.nearest_walkable(GridPos(9, 9)) is None
    assert len(list(grid.walkable_cells())) == 9


def test_grid_dimensions_follow_variant():
    ship = GenerationConfig(variant=LayoutVariant.SHIP, rooms_per_deck=[2, 3, 1])

    assert grid_dimensions(ship) == (11, 3)
    assert grid_dimensions(GenerationConfig(width=12, height=8)) == (12, 8)
    with pytest.raises(ValueError):
        WalkabilityGrid(0, 4)


def test_connection_candidates_face_the_other_room_first():
    candidates = connection_candidates(GridPos(2, 2), GridPos(2, 0))

    assert candidates == [GridPos(2, 1), GridPos(3, 2), GridPos(1, 2), GridPos(2, 3)]


def test_connection_point_falls_back_to_nearest_walkable():
    grid = WalkabilityGrid(5, 1)
    for x in range(4):
        grid.block(GridPos(x, 0))

    assert connection_point(grid, GridPos(1, 0), GridPos(0, 0)) == GridPos(4, 0)


def test_door_links_route_straight_and_secondary_links_go_around(make_graph):
    graph = make_graph(
        [(1, 1), (2, 1), (2, 2), (1, 2)],
        [(0, 1), (1, 2), (2, 3), (3, 0, LinkKind.SECONDARY)],
    )
    grid = build_walkability_grid(graph, 5, 5)

    routes = route_links(graph, grid)

    assert [route.waypoints for route in routes[:3]] == [
        (GridPos(1, 1), GridPos(2, 1)),
        (GridPos(2, 1), GridPos(2, 2)),
        (GridPos(2, 2), GridPos(1, 2)),
    ]
    secondary = routes[3]
    assert secondary.routed
    assert secondary.waypoints[0] == GridPos(1, 2)
    assert secondary.waypoints[-1] == GridPos(1, 1)
    assert all(grid.is_walkable(cell) for cell in secondary.waypoints[1:-1])
    _assert_connected(list(secondary.waypoints))


def test_unroutable_secondary_link_returns_empty_route(make_graph):
    graph = make_graph([(0, 0), (1, 0)], [(0, 1, LinkKind.SECONDARY)])
    grid = build_walkability_grid(graph, 2, 1)

    route = route_link(graph, grid, graph.links[0])

    assert not route.routed
    assert route.waypoints == ()
