"""DungeonGenerator runs the full pipeline: layout, type assignment, validation, routing."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from time import perf_counter
from typing import List, Optional

from corridor_router import LinkRoute, route_links
from dice import Dice
from dungeon_config import GenerationConfig
from dungeon_graph import DungeonGraph
from graph_validator import find_integrity_issues, validate_graph
from layout_generator import LayoutGenerator, LayoutResult
from metrics import GenerationMetrics
from path_grid import WalkabilityGrid, build_walkability_grid, grid_dimensions
from pathfinder import DEFAULT_PATH_COSTS, PathCostConfig
from prng import PRNG
from room_type_assigner import AssignmentResult, RoomTypeAssigner
from room_type_sampler import RoomTypeSampler

logger = logging.getLogger(__name__)

# Seed 0 zeroes every state word, so the generator would only ever return 0.
MIN_RANDOM_SEED = 1
MAX_RANDOM_SEED = 1_000_000


@dataclass
class GenerationResult:
    """Everything a renderer needs from one run, plus the flags describing its quality."""

    seed: Optional[int]
    layout: LayoutResult
    assignment: Optional[AssignmentResult]
    valid: bool
    integrity_issues: List[str]
    metrics: Optional[GenerationMetrics] = None

    @property
    def graph(self) -> DungeonGraph:
        return self.layout.graph

    @property
    def degraded(self) -> bool:
        """True when callers should fall back to a partial or debug view."""
        if not self.valid or self.integrity_issues or not self.layout.complete:
            return True
        return self.assignment is not None and not self.assignment.complete


def resolve_seed(config: GenerationConfig) -> int:
    if config.seed is not None:
        return config.seed
    # Pick a seed and log it, so a bad layout can be reproduced by setting the seed in the config.
    seed = random.randint(MIN_RANDOM_SEED, MAX_RANDOM_SEED)
    logger.info("Using random seed %d", seed)
    return seed


class DungeonGenerator:
    """Manages the overall process of generating a typed room graph."""

    def __init__(self, config: GenerationConfig, rng: Optional[PRNG] = None) -> None:
        self.config = config
        if rng is None:
            self.seed: Optional[int] = resolve_seed(config)
            rng = PRNG(self.seed)
        else:
            self.seed = config.seed
        self.rng = rng
        self.result: Optional[GenerationResult] = None

    def generate(self) -> GenerationResult:
        layout_generator = LayoutGenerator(self.config, self.rng)
        layout = layout_generator.generate()
        metrics = layout_generator.metrics

        assignment: Optional[AssignmentResult] = None
        if self.config.assign_room_types and layout.graph.rooms:
            start = perf_counter()
            assigner = RoomTypeAssigner(
                RoomTypeSampler(Dice(self.rng)),
                self.config.archetype,
                self.config.guaranteed_types,
            )
            assignment = assigner.assign(layout.graph)
            if metrics is not None:
                metrics.record_phase_run(
                    "type_assignment",
                    perf_counter() - start,
                    0,
                    0,
                    len(layout.graph.rooms),
                    len(layout.graph.links),
                )

        valid = validate_graph(layout.graph)
        issues = find_integrity_issues(layout.graph)
        if not valid:
            logger.warning("Generated graph is not fully connected (seed %s)", self.seed)
        for issue in issues:
            logger.error("Graph integrity issue: %s", issue)

        self.result = GenerationResult(
            seed=self.seed,
            layout=layout,
            assignment=assignment,
            valid=valid,
            integrity_issues=issues,
            metrics=metrics,
        )
        return self.result

    def _require_result(self) -> GenerationResult:
        if self.result is None:
            raise RuntimeError("Call generate() before building grids or routes")
        return self.result

    def navigation_grid(self) -> WalkabilityGrid:
        result = self._require_result()
        width, height = grid_dimensions(self.config)
        return build_walkability_grid(result.graph, width, height, self.config.cell_size)

    def route_corridors(self, costs: PathCostConfig = DEFAULT_PATH_COSTS) -> List[LinkRoute]:
        result = self._require_result()
        return route_links(result.graph, self.navigation_grid(), costs)
