import json
from pathlib import Path

import pytest

from dungeon_config import GenerationConfig, LayoutVariant
from dungeon_graph import DungeonGraph
from dungeon_models import BranchClass, LinkKind
from graph_validator import find_integrity_issues, validate_graph
from layout_generator import LayoutGenerator
from metrics import GenerationMetrics
from prng import PRNG

GOLDEN_DIR = Path(__file__).resolve().parent / "golden"


def _layout_signature(graph: DungeonGraph):
    rooms = [
        {"id": room.id, "x": room.x, "y": room.y, "branch_class": room.branch_class.value}
        for room in graph.rooms
    ]
    links = [link.to_dict() for link in graph.links]
    return rooms, links


def test_seed_42_matches_golden_layout():
    golden = json.loads((GOLDEN_DIR / "seed42_default.json").read_text())
    config = GenerationConfig(assign_room_types=False, **golden["config"])

    result = LayoutGenerator(config, PRNG(config.seed)).generate()

    rooms, links = _layout_signature(result.graph)
    assert rooms == golden["rooms"]
    assert links == golden["links"]
    assert result.complete


def test_same_seed_reproduces_layout(dungeon_config):
    first = LayoutGenerator(dungeon_config, PRNG(dungeon_config.seed)).generate()
    second = LayoutGenerator(dungeon_config, PRNG(dungeon_config.seed)).generate()

    assert first.graph.to_dict() == second.graph.to_dict()


@pytest.mark.parametrize("seed", [1, 7, 42, 1000, 31337])
def test_dungeon_layout_invariants(seed):
    config = GenerationConfig(num_rooms=25, width=20, height=20, seed=seed, assign_room_types=False)

    result = LayoutGenerator(config, PRNG(seed)).generate()
    graph = result.graph

    assert len(graph.rooms) <= config.num_rooms
    assert len({room.pos for room in graph.rooms}) == len(graph.rooms)
    assert [room.id for room in graph.rooms] == list(range(len(graph.rooms)))
    assert all(0 <= room.x < config.width and 0 <= room.y < config.height for room in graph.rooms)
    assert len({link.key() for link in graph.links}) == len(graph.links)
    assert find_integrity_issues(graph) == []
    assert validate_graph(graph)

    doors = [link for link in graph.links if link.kind is LinkKind.DOOR]
    secondary = [link for link in graph.links if link.kind is LinkKind.SECONDARY]
    assert len(doors) == len(graph.rooms) - 1
    assert len(secondary) <= config.max_secondary_links


def test_anchor_room_is_first_and_on_main_path(dungeon_config):
    graph = LayoutGenerator(dungeon_config, PRNG(3)).generate().graph

    assert graph.rooms[0].pos.to_tuple() == dungeon_config.anchor
    assert graph.rooms[0].branch_class is BranchClass.MAIN


def test_tiny_grid_reports_undersized_layout():
    config = GenerationConfig(num_rooms=12, width=1, height=1, seed=5, assign_room_types=False)

    result = LayoutGenerator(config, PRNG(5)).generate()

    assert result.room_count == 1
    assert not result.complete
    assert result.undersized
    assert validate_graph(result.graph)


def test_generate_runs_only_once(dungeon_config):
    generator = LayoutGenerator(dungeon_config, PRNG(1))
    generator.generate()

    with pytest.raises(RuntimeError):
        generator.generate()


def test_metrics_are_recorded_per_phase():
    config = GenerationConfig(num_rooms=10, seed=9, collect_metrics=True, assign_room_types=False)

    result = LayoutGenerator(config, PRNG(9)).generate()

    assert isinstance(result.metrics, GenerationMetrics)
    runs = result.metrics.runs
    assert [run.name for run in runs] == ["main_path", "branches", "secondary_links"]
    assert sum(run.rooms_added for run in runs) == result.room_count
    assert sum(run.links_added for run in runs) == len(result.graph.links)
    assert runs[-1].rooms_total == result.room_count
    assert runs[-1].links_total == len(result.graph.links)
    assert runs[0].rooms_total == runs[0].rooms_added
    assert result.metrics.total_time == pytest.approx(sum(run.duration for run in runs))
    assert result.metrics.slowest() in runs


def test_metrics_snapshot_merges_repeated_phases():
    metrics = GenerationMetrics()
    assert metrics.slowest() is None

    metrics.record_phase_run("grow", 0.5, 3, 2, 3, 2)
    metrics.record_phase_run("grow", 0.25, 1, 1, 4, 3)

    assert metrics.snapshot() == {
        "grow": {"duration": 0.75, "rooms_added": 4, "links_added": 3, "rooms_total": 4, "links_total": 3}
    }


def test_ship_layout_records_deck_rows_phase():
    config = GenerationConfig(
        variant=LayoutVariant.SHIP,
        rooms_per_deck=[2, 3],
        seed=4,
        collect_metrics=True,
        assign_room_types=False,
    )

    result = LayoutGenerator(config, PRNG(4)).generate()

    assert set(result.metrics.snapshot()) == {"deck_rows", "secondary_links"}
    assert result.room_count == 5
    assert result.complete
