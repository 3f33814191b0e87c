import json

import networkx as nx
import pytest

from benchmark_generation import build_room_graph, gini_coefficient, percentile, run_single_generation
from dice import Dice
from dungeon_config import GenerationConfig, LayoutVariant
import dungeon_generator
from dungeon_generator import MAX_RANDOM_SEED, MIN_RANDOM_SEED, DungeonGenerator, resolve_seed
from dungeon_geometry import GridPos
from dungeon_models import LinkKind, RoomLink, RoomNode, RoomType
from graph_validator import find_integrity_issues, reachable_room_ids, validate_graph
from main import main, render_ascii
from path_grid import WalkabilityGrid
from prng import PRNG
from ship_planner import plan_rooms_per_deck, ship_config, weighted_room_count


class _FixedDice:
    def __init__(self, value: int) -> None:
        self.value = value

    def d(self, sides: int) -> int:
        return self.value


def test_empty_graph_is_valid(make_graph):
    assert validate_graph(make_graph([]))


def test_disconnected_graph_is_invalid(make_graph):
    graph = make_graph([(0, 0), (1, 0), (5, 5)], [(0, 1)])

    assert not validate_graph(graph)
    assert reachable_room_ids(graph, 0) == {0, 1}


def test_integrity_issues_are_reported(make_graph):
    graph = make_graph([(0, 0), (1, 0), (4, 4)], [(0, 1)])
    assert find_integrity_issues(graph) == []

    graph.links.append(RoomLink(0, 9))
    graph.links.append(RoomLink(1, 2))
    graph.rooms.append(RoomNode(id=2, x=1, y=0))

    issues = find_integrity_issues(graph)
    assert any("missing rooms [9]" in issue for issue in issues)
    assert any("not grid-adjacent" in issue for issue in issues)
    assert any("(1, 0) holds 2 rooms" in issue for issue in issues)
    assert any("Room id 2 is used 2 times" in issue for issue in issues)


@pytest.mark.parametrize("roll,expected", [(1, 1), (6, 1), (7, 2), (11, 2), (15, 3), (18, 4), (20, 5), (21, 6)])
def test_weighted_room_count_favours_small_decks(roll, expected):
    assert weighted_room_count(_FixedDice(roll)) == expected


def test_plan_rooms_per_deck():
    dice = Dice(PRNG(3))

    assert plan_rooms_per_deck(dice, "2d1+1", randomize=False, rooms_per_deck=2) == [2, 2, 2]
    assert plan_rooms_per_deck(dice, "1d1-5", randomize=False) == [1]
    plan = plan_rooms_per_deck(dice, "1d1+3")
    assert len(plan) == 4
    assert all(1 <= count <= 6 for count in plan)
    with pytest.raises(ValueError):
        plan_rooms_per_deck(dice, "1d4", rooms_per_deck=0)


def test_ship_config_uses_archetype_name_and_deck_notation():
    config = ship_config(Dice(PRNG(8)), "freighter", "1d1+2", seed=8)

    assert config.variant is LayoutVariant.SHIP
    assert config.archetype == "Freighter"
    assert config.deck_count == 3
    assert config.width == 11
    assert config.num_rooms == sum(config.rooms_per_deck)


def test_generation_is_deterministic_for_a_seed():
    config = GenerationConfig(num_rooms=15, seed=123)

    first = DungeonGenerator(config).generate()
    second = DungeonGenerator(config).generate()

    assert first.seed == 123
    assert first.graph.to_dict() == second.graph.to_dict()


@pytest.mark.parametrize("seed", [3, 17, 2024])
def test_dungeon_pipeline_types_every_room(seed):
    result = DungeonGenerator(GenerationConfig(num_rooms=15, seed=seed, archetype="Raider")).generate()

    assert result.valid
    assert result.integrity_issues == []
    assert result.assignment is not None and result.assignment.complete
    assert all(room.room_type is not None for room in result.graph.rooms)
    assert {RoomType.COMMAND, RoomType.ENGINE, RoomType.LIFE_SUPPORT} <= {
        room.room_type for room in result.graph.rooms
    }


@pytest.mark.parametrize("seed", [1, 5, 99])
def test_ship_pipeline_routes_every_link(seed):
    rng = PRNG(seed)
    config = ship_config(Dice(rng), "Colony Ship", seed=seed, collect_metrics=True)
    generator = DungeonGenerator(config, rng)

    result = generator.generate()
    routes = generator.route_corridors()

    assert result.valid
    assert len(routes) == len(result.graph.links)
    assert all(len(route.waypoints) == 2 for route in routes if route.link.kind is LinkKind.DOOR)
    assert "type_assignment" in result.metrics.snapshot()
    assert generator.navigation_grid().width == 11


def test_degraded_flag_for_unplaceable_rooms():
    result = DungeonGenerator(GenerationConfig(num_rooms=8, width=1, height=1, seed=2)).generate()

    assert result.degraded
    assert result.valid


def test_routes_require_a_generated_layout():
    generator = DungeonGenerator(GenerationConfig(seed=1))

    with pytest.raises(RuntimeError):
        generator.route_corridors()


def test_networkx_connectivity_agrees_with_validator():
    for seed in (4, 8, 15, 16, 23, 42):
        result = DungeonGenerator(GenerationConfig(num_rooms=20, seed=seed, assign_room_types=False)).generate()
        room_graph = build_room_graph(result.graph)
        assert nx.is_connected(room_graph) == result.valid
        assert room_graph.number_of_edges() == len(result.graph.links)


def test_benchmark_helpers():
    assert gini_coefficient([3, 3, 3]) == pytest.approx(0.0)
    assert gini_coefficient([]) == 0.0
    assert gini_coefficient([0, 0, 10]) == pytest.approx(0.0)
    assert percentile([1.0, 2.0, 3.0, 4.0], 50) == pytest.approx(2.5)


def test_single_benchmark_run_collects_phase_metrics():
    run = run_single_generation(11, 0.8, num_rooms=12, width=16, height=16)

    assert run.total_rooms <= 12
    assert run.valid
    assert {"main_path", "branches", "secondary_links", "type_assignment"} <= set(run.phase_metrics)
    assert sum(run.type_counts.values()) == run.total_rooms


def test_render_ascii_overlays_room_labels():
    grid = WalkabilityGrid(3, 2)
    grid.block(GridPos(2, 1))

    rows = render_ascii(grid, {(1, 0): "C"})

    assert rows == [".C.", "..#"]


def test_cli_prints_layout(capsys):
    main(["--seed", "5", "--rooms", "8", "--width", "10", "--height", "10"])

    output = capsys.readouterr().out
    assert "Using seed 5" in output
    assert "rooms" in output


def test_cli_generates_ship_layout(capsys):
    main(["--seed", "5", "--variant", "ship", "--decks", "1d1+2"])

    output = capsys.readouterr().out
    assert "Using seed 5" in output
    assert "valid=True" in output
    assert "Routed" in output


def test_cli_json_output(capsys):
    main(["--seed", "5", "--rooms", "8", "--width", "10", "--height", "10", "--json"])

    seed_line, _, body = capsys.readouterr().out.partition("\n")
    payload = json.loads(body)

    assert seed_line == "Using seed 5"
    assert payload["seed"] == 5
    assert payload["valid"]
    assert 0 < len(payload["graph"]["rooms"]) <= 8
    assert len(payload["routes"]) == len(payload["graph"]["links"])
    assert [route["link"] for route in payload["routes"]] == payload["graph"]["links"]


def test_cli_json_output_for_ship(capsys):
    main(["--seed", "12", "--variant", "ship", "--decks", "1d1+1", "--json"])

    _, _, body = capsys.readouterr().out.partition("\n")
    payload = json.loads(body)

    rooms = payload["graph"]["rooms"]
    assert payload["seed"] == 12
    assert payload["valid"]
    assert {room["y"] for room in rooms} == {0, 1}


def test_random_seed_never_draws_zero(monkeypatch):
    bounds = []

    def fake_randint(low, high):
        bounds.append((low, high))
        return low

    monkeypatch.setattr(dungeon_generator.random, "randint", fake_randint)

    seed = resolve_seed(GenerationConfig(seed=None))

    assert bounds == [(MIN_RANDOM_SEED, MAX_RANDOM_SEED)]
    assert seed == MIN_RANDOM_SEED == 1
