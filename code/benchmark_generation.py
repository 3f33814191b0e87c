#!/usr/bin/env python3

# This file performs multiple runs of layout generation, collecting and reporting metrics.
# Used for testing both performance of the pipeline and quality of resulting graphs.

from __future__ import annotations

import argparse
import datetime
import json
import math
import os
import random
import statistics
import subprocess
import time
from collections import Counter
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

import networkx as nx

from dungeon_config import GenerationConfig
from dungeon_generator import MAX_RANDOM_SEED, MIN_RANDOM_SEED, DungeonGenerator
from dungeon_graph import DungeonGraph
from dungeon_models import LinkKind

DEFAULT_CONFIG_KWARGS = dict(
    num_rooms=30,
    width=24,
    height=24,
    branching_factor=0.4,
    directional_bias=0.7,
    archetype="Default",
    collect_metrics=True,
)

DEFAULT_ROOM_COMPLETION_THRESHOLD_RATIO = 0.8
DEFAULT_CYCLE_COUNT_THRESHOLD = 1

PERCENTILES = [1.0, 5.0] + [float(value) for value in range(10, 100, 10)] + [95.0, 99.0]


def build_config(seed: int, **overrides: Any) -> GenerationConfig:
    kwargs = dict(DEFAULT_CONFIG_KWARGS)
    kwargs.update(overrides)
    return GenerationConfig(seed=seed, **kwargs)  # type: ignore[arg-type]


@dataclass
class GenerationRunResult:
    seed: int
    duration: float
    total_rooms: int
    total_links: int
    secondary_links: int
    room_target: int
    room_acceptance_threshold: int
    meets_room_threshold: bool
    valid: bool
    cycle_count: int
    largest_component_fraction: float
    graph_diameter: int
    routed_fraction: float
    diversity_score: float
    dropped_types: int
    type_counts: Counter[str]
    phase_metrics: Dict[str, Dict[str, float | int]]


def gini_coefficient(counts: List[int]) -> float:
    """Compute the Gini coefficient for a list of non-negative counts."""
    data = sorted(value for value in counts if value > 0)
    if not data:
        return 0.0
    total = sum(data)
    n = len(data)
    weighted_sum = sum(index * value for index, value in enumerate(data, start=1))
    return (2.0 * weighted_sum) / (n * total) - (n + 1) / n


def percentile(values: List[float], pct: float) -> float:
    if not values:
        return float("nan")
    if pct <= 0:
        return min(values)
    if pct >= 100:
        return max(values)
    ordered = sorted(values)
    rank = (len(ordered) - 1) * (pct / 100.0)
    lower = math.floor(rank)
    upper = math.ceil(rank)
    if lower == upper:
        return ordered[int(rank)]
    fraction = rank - lower
    return ordered[lower] + (ordered[upper] - ordered[lower]) * fraction


def fraction_at_least(values: List[float], threshold: float) -> float:
    if not values:
        return float("nan")
    return sum(1 for value in values if value >= threshold) / len(values)


def format_value(value: float, formatter: Callable[[float], str] | None = None) -> str:
    numeric = float(value)
    if math.isnan(numeric):
        return "nan"
    if formatter is None:
        return f"{numeric:.3f}"
    return formatter(numeric)


def format_seconds(value: float) -> str:
    if value >= 1.0:
        return f"{value:.3f}s"
    return f"{value * 1000:.1f}ms"


def json_safe_number(value: float | int | None) -> float | int | None:
    if value is None:
        return None
    numeric = float(value)
    if math.isnan(numeric) or math.isinf(numeric):
        return None
    if isinstance(value, int):
        return value
    return numeric


def compute_basic_stats(values: List[float]) -> Dict[str, float]:
    return {
        "mean": statistics.mean(values),
        "median": statistics.median(values),
        "min": min(values),
        "max": max(values),
        "stdev": statistics.stdev(values) if len(values) > 1 else float("nan"),
    }


@dataclass
class MetricDefinition:
    key: str
    name: str
    values: List[float]
    value_formatter: Callable[[float], str] | None = None
    success_threshold: float | None = None
    success_label: str | None = None


def report_metric(definition: MetricDefinition) -> None:
    values = definition.values
    print(definition.name + ":")
    if not values:
        print("  (no data)")
        return

    stats = compute_basic_stats(values)
    formatted = {key: format_value(value, definition.value_formatter) for key, value in stats.items()}
    print(
        "  Count {count}, mean {mean}, median {median}, min {min}, max {max}, stdev {stdev}".format(
            count=len(values), **formatted
        )
    )

    percentile_parts = []
    for pct in PERCENTILES:
        label = f"p{int(pct)}" if float(pct).is_integer() else f"p{pct:g}"
        percentile_parts.append(f"{label}={format_value(percentile(values, pct), definition.value_formatter)}")
    print("  Percentiles: " + ", ".join(percentile_parts))

    if definition.success_threshold is not None:
        success_rate = fraction_at_least(values, definition.success_threshold)
        label = definition.success_label or (
            ">= " + format_value(definition.success_threshold, definition.value_formatter)
        )
        print(f"  Success rate {success_rate:.1%} ({label})")


def summarize_metric_for_json(definition: MetricDefinition) -> Dict[str, Any]:
    values = definition.values
    summary: Dict[str, Any] = {"count": len(values)}
    if values:
        summary.update({key: json_safe_number(value) for key, value in compute_basic_stats(values).items()})
    else:
        summary.update({"mean": None, "median": None, "min": None, "max": None, "stdev": None})
    summary["percentiles"] = {
        (f"p{int(pct)}" if float(pct).is_integer() else f"p{pct:g}"): (
            json_safe_number(percentile(values, pct)) if values else None
        )
        for pct in PERCENTILES
    }
    if definition.success_threshold is not None:
        success_rate = fraction_at_least(values, definition.success_threshold) if values else float("nan")
        summary["success_rate"] = json_safe_number(success_rate)
        summary["success_threshold"] = json_safe_number(definition.success_threshold)
    return summary


def get_git_commit_hash() -> str | None:
    try:
        completed = subprocess.run(
            ["git", "rev-parse", "HEAD"],
            check=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
        )
        return completed.stdout.strip()
    except (subprocess.CalledProcessError, FileNotFoundError, OSError):
        return None


def build_room_graph(graph: DungeonGraph) -> nx.Graph:
    room_graph = nx.Graph()
    for room in graph.rooms:
        room_graph.add_node(room.id)
    for link in graph.links:
        room_graph.add_edge(link.source_id, link.target_id, kind=link.kind.value)
    return room_graph


def run_single_generation(seed: int, room_completion_ratio: float, **overrides: Any) -> GenerationRunResult:
    """Run one generation with the provided seed and collect metrics."""
    config = build_config(seed, **overrides)
    generator = DungeonGenerator(config)

    start = time.perf_counter()
    result = generator.generate()
    routes = generator.route_corridors()
    end = time.perf_counter()

    graph = result.graph
    total_rooms = len(graph.rooms)
    room_target = config.num_rooms
    room_threshold = math.floor(room_target * room_completion_ratio)

    room_graph = build_room_graph(graph)
    cycle_count = len(nx.cycle_basis(room_graph))

    largest_component_fraction = 0.0
    graph_diameter = 0
    if total_rooms > 0:
        largest = max(nx.connected_components(room_graph), key=len)
        largest_component_fraction = len(largest) / total_rooms
        if len(largest) >= 2:
            graph_diameter = int(nx.diameter(room_graph.subgraph(largest)))

    type_counts: Counter[str] = Counter(
        room.room_type.label for room in graph.rooms if room.room_type is not None
    )
    secondary_routes = [route for route in routes if route.link.kind is LinkKind.SECONDARY]
    routed_fraction = (
        sum(1 for route in secondary_routes if route.routed) / len(secondary_routes)
        if secondary_routes
        else 1.0
    )

    return GenerationRunResult(
        seed=seed,
        duration=end - start,
        total_rooms=total_rooms,
        total_links=len(graph.links),
        secondary_links=len(secondary_routes),
        room_target=room_target,
        room_acceptance_threshold=room_threshold,
        meets_room_threshold=total_rooms >= room_threshold,
        valid=result.valid,
        cycle_count=cycle_count,
        largest_component_fraction=largest_component_fraction,
        graph_diameter=graph_diameter,
        routed_fraction=routed_fraction,
        diversity_score=1.0 - gini_coefficient(list(type_counts.values())),
        dropped_types=len(result.assignment.dropped_types) if result.assignment else 0,
        type_counts=type_counts,
        phase_metrics=result.metrics.snapshot() if result.metrics else {},
    )


def run_benchmark(
    num_runs: int, seed: int | None, room_completion_ratio: float, **overrides: Any
) -> List[GenerationRunResult]:
    """Run the generator multiple times and collect run-level metrics."""
    rng = random.Random(seed)
    return [
        run_single_generation(rng.randint(MIN_RANDOM_SEED, MAX_RANDOM_SEED), room_completion_ratio, **overrides)
        for _ in range(num_runs)
    ]


def aggregate_phase_metrics(results: List[GenerationRunResult]) -> Dict[str, Dict[str, float]]:
    totals: Dict[str, Dict[str, float]] = {}
    for result in results:
        for name, metrics in result.phase_metrics.items():
            aggregate = totals.setdefault(
                name,
                {"runs": 0.0, "total_time": 0.0, "total_rooms_added": 0.0, "total_links_added": 0.0},
            )
            aggregate["runs"] += 1
            aggregate["total_time"] += float(metrics["duration"])
            aggregate["total_rooms_added"] += float(metrics["rooms_added"])
            aggregate["total_links_added"] += float(metrics["links_added"])
    for aggregate in totals.values():
        runs = aggregate["runs"]
        aggregate["average_time"] = aggregate["total_time"] / runs if runs else 0.0
    return totals


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Run the layout generator multiple times and report timing and quality statistics."
    )
    parser.add_argument("-n", "--runs", type=int, default=20, help="Number of generations (default: 20)")
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Optional seed for the benchmark harness RNG; keeps run seeds reproducible",
    )
    parser.add_argument("--rooms", type=int, default=DEFAULT_CONFIG_KWARGS["num_rooms"])
    parser.add_argument("--archetype", type=str, default=DEFAULT_CONFIG_KWARGS["archetype"])
    parser.add_argument(
        "--room-completion-threshold-ratio",
        type=float,
        default=DEFAULT_ROOM_COMPLETION_THRESHOLD_RATIO,
        help="Fraction of the target room count required for a run to be considered successful",
    )
    parser.add_argument(
        "--cycle-count-threshold",
        type=float,
        default=DEFAULT_CYCLE_COUNT_THRESHOLD,
        help="Minimum cycle count in the room graph for success evaluation",
    )
    parser.add_argument("--no-save", action="store_true", help="Skip writing the JSON summary")
    args = parser.parse_args()

    if args.runs <= 0:
        raise SystemExit("Number of runs must be a positive integer")
    if not (0.0 < args.room_completion_threshold_ratio <= 1.0):
        raise SystemExit("Room completion threshold ratio must be within (0, 1]")

    results = run_benchmark(
        args.runs,
        args.seed,
        args.room_completion_threshold_ratio,
        num_rooms=args.rooms,
        archetype=args.archetype,
    )

    durations = [result.duration for result in results]
    worst_index = durations.index(max(durations))
    room_target = results[0].room_target
    room_threshold = results[0].room_acceptance_threshold

    results_json: List[Dict[str, Any]] = []
    for idx, result in enumerate(results, start=1):
        print(
            "Run {idx:02d}: {time} (seed {seed}) | rooms {rooms}/{target} | links {links}"
            " | cycles {cycles} | valid {valid}".format(
                idx=idx,
                time=format_seconds(result.duration),
                seed=result.seed,
                rooms=result.total_rooms,
                target=room_target,
                links=result.total_links,
                cycles=result.cycle_count,
                valid=result.valid,
            )
        )
        results_json.append(
            {
                "run_id": idx,
                "seed": result.seed,
                "total_time_seconds": result.duration,
                "num_rooms": result.total_rooms,
                "num_links": result.total_links,
                "valid": result.valid,
                "graph_diameter": result.graph_diameter,
                "num_cycles": result.cycle_count,
                "routed_fraction": result.routed_fraction,
                "dropped_types": result.dropped_types,
            }
        )

    metrics_to_report = [
        MetricDefinition(
            key="generation_time",
            name="Generation time",
            values=durations,
            value_formatter=lambda value: f"{value:.4f}s",
        ),
        MetricDefinition(
            key="rooms_placed",
            name="Rooms placed",
            values=[float(result.total_rooms) for result in results],
            value_formatter=lambda value: f"{value:.0f}",
            success_threshold=float(room_threshold),
            success_label=f">= {room_threshold} (target {room_target})",
        ),
        MetricDefinition(
            key="connected",
            name="Fully connected",
            values=[1.0 if result.valid else 0.0 for result in results],
            value_formatter=lambda value: f"{value:.0%}",
            success_threshold=1.0,
        ),
        MetricDefinition(
            key="cycle_count",
            name="Cycle count",
            values=[float(result.cycle_count) for result in results],
            value_formatter=lambda value: f"{value:.1f}",
            success_threshold=args.cycle_count_threshold,
        ),
        MetricDefinition(
            key="graph_diameter",
            name="Graph diameter",
            values=[float(result.graph_diameter) for result in results],
            value_formatter=lambda value: f"{value:.0f}",
        ),
        MetricDefinition(
            key="routed_fraction",
            name="Secondary links routed",
            values=[result.routed_fraction for result in results],
            value_formatter=lambda value: f"{value:.1%}",
        ),
        MetricDefinition(
            key="diversity",
            name="Room type diversity (1 - Gini)",
            values=[result.diversity_score for result in results],
        ),
    ]

    print()
    print(f"Worst-case generation time: {format_seconds(durations[worst_index])} (seed {results[worst_index].seed})")
    aggregated_results_json: Dict[str, Any] = {}
    for metric in metrics_to_report:
        print()
        report_metric(metric)
        aggregated_results_json[metric.key] = summarize_metric_for_json(metric)

    total_type_counts: Counter[str] = Counter()
    for result in results:
        total_type_counts.update(result.type_counts)
    total_typed = sum(total_type_counts.values())
    if total_typed:
        print()
        print("Room type distribution across runs:")
        for label, count in total_type_counts.most_common():
            print(f"  {label}: {count} rooms ({count / total_typed:.1%})")

    phase_totals = aggregate_phase_metrics(results)
    if phase_totals:
        print()
        print("Phase performance summary:")
        for name, metrics in sorted(phase_totals.items(), key=lambda item: item[1]["total_time"], reverse=True):
            print(
                f"  {name}: runs={int(metrics['runs'])},"
                f" total_time={format_seconds(metrics['total_time'])},"
                f" avg_time={format_seconds(metrics['average_time'])},"
                f" rooms={metrics['total_rooms_added']:.0f}, links={metrics['total_links_added']:.0f}"
            )

    if args.no_save:
        return

    timestamp = datetime.datetime.now(datetime.timezone.utc)
    script_dir = os.path.dirname(os.path.abspath(__file__))
    benchmarks_dir = os.path.abspath(os.path.join(script_dir, "..", "benchmarks"))
    os.makedirs(benchmarks_dir, exist_ok=True)
    output_path = os.path.join(benchmarks_dir, f"benchmark-{timestamp.strftime('%Y%m%dT%H%M%SZ')}.json")

    benchmark_data = {
        "benchmark_run_info": {
            "timestamp": timestamp.replace(microsecond=0).isoformat(),
            "git_commit_hash": get_git_commit_hash(),
            "num_iterations": args.runs,
            "parameters": {"seed": args.seed, "rooms": args.rooms, "archetype": args.archetype},
        },
        "aggregated_results": aggregated_results_json,
        "results": results_json,
        "phase_summary": phase_totals,
    }
    with open(output_path, "w", encoding="utf-8") as handle:
        json.dump(benchmark_data, handle, indent=2, sort_keys=True)
        handle.write("\n")
    print(f"\nSaved benchmark results to {os.path.relpath(output_path)}")


if __name__ == "__main__":
    main()
