#!/usr/bin/env python3

from __future__ import annotations

import argparse
import json
import logging
import random
from typing import Dict, List, Optional

from archetypes import Archetype
from dice import Dice
from dungeon_config import GenerationConfig, LayoutVariant
from dungeon_generator import MAX_RANDOM_SEED, MIN_RANDOM_SEED, DungeonGenerator
from path_grid import WalkabilityGrid
from prng import PRNG
from ship_planner import ship_config


def build_config(args: argparse.Namespace, rng: PRNG) -> GenerationConfig:
    common = dict(
        seed=args.seed,
        branching_factor=args.branching,
        directional_bias=args.bias,
        collect_metrics=args.metrics,
    )
    if args.variant == LayoutVariant.SHIP.value:
        # Deck dice draw from the run's generator, ahead of layout.
        return ship_config(Dice(rng), args.archetype, args.decks, **common)
    return GenerationConfig(
        num_rooms=args.rooms,
        archetype=args.archetype,
        width=args.width,
        height=args.height,
        variant=LayoutVariant.DUNGEON,
        **common,
    )


def render_ascii(grid: WalkabilityGrid, labels: Dict[tuple, str]) -> List[str]:
    """Rows of the grid with room cells replaced by the first letter of their label."""
    rows = []
    for y, row in enumerate(grid.to_rows()):
        cells = list(row)
        for x in range(len(cells)):
            label = labels.get((x, y))
            if label:
                cells[x] = label
        rows.append("".join(cells))
    return rows


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Generate a dungeon or ship deck layout.")
    parser.add_argument("--seed", type=int, default=None, help="Seed; a random one is picked and printed when omitted")
    parser.add_argument("--variant", choices=[variant.value for variant in LayoutVariant], default="dungeon")
    parser.add_argument("--rooms", type=int, default=12, help="Room count for the dungeon variant")
    parser.add_argument("--width", type=int, default=20)
    parser.add_argument("--height", type=int, default=20)
    parser.add_argument(
        "--archetype",
        type=str,
        default=Archetype.DEFAULT.value,
        help="Archetype name, e.g. 'Freighter'; unknown names use the default tables",
    )
    parser.add_argument("--decks", type=str, default=None, help="Deck dice notation for ships, e.g. 1d6+2")
    parser.add_argument("--branching", type=float, default=0.3)
    parser.add_argument("--bias", type=float, default=0.7)
    parser.add_argument("--metrics", action="store_true", help="Collect and print per-phase timings")
    parser.add_argument("--json", action="store_true", help="Print the graph and routes as JSON")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.seed is None:
        # Pick a seed randomly and print it, so the layout can be reproduced with --seed.
        args.seed = random.randint(MIN_RANDOM_SEED, MAX_RANDOM_SEED)
    print(f"Using seed {args.seed}")

    rng = PRNG(args.seed)
    try:
        config = build_config(args, rng)
    except ValueError as exc:
        raise SystemExit(f"Invalid configuration: {exc}") from exc

    generator = DungeonGenerator(config, rng)
    result = generator.generate()
    routes = generator.route_corridors()

    if args.json:
        payload = {
            "seed": args.seed,
            "graph": result.graph.to_dict(),
            "routes": [
                {"link": route.link.to_dict(), "waypoints": [pos.to_tuple() for pos in route.waypoints]}
                for route in routes
            ],
            "valid": result.valid,
            "complete": result.layout.complete,
        }
        print(json.dumps(payload, indent=2))
        return

    graph = result.graph
    print(
        f"{len(graph.rooms)}/{config.num_rooms} rooms, {len(graph.links)} links, "
        f"valid={result.valid}, complete={result.layout.complete}"
    )
    for room in graph.rooms:
        print(f"  {room.id:3d} ({room.x:2d},{room.y:2d}) {room.name}")
    unrouted = sum(1 for route in routes if not route.routed)
    print(f"Routed {len(routes) - unrouted}/{len(routes)} links")
    if result.assignment is not None and result.assignment.dropped_types:
        dropped = ", ".join(room_type.label for room_type in result.assignment.dropped_types)
        print(f"Dropped types: {dropped}")

    labels = {
        room.pos.to_tuple(): (room.room_type.label[0] if room.room_type else "R") for room in graph.rooms
    }
    for row in render_ascii(generator.navigation_grid(), labels):
        print(row)

    if result.metrics is not None:
        for name, values in result.metrics.snapshot().items():
            print(
                f"  {name}: {values['duration'] * 1000:.2f}ms, +{values['rooms_added']} rooms,"
                f" +{values['links_added']} links ({values['rooms_total']} rooms total)"
            )


if __name__ == "__main__":
    main()
