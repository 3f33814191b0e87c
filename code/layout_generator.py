"""LayoutGenerator runs the room-graph phases in order over one PRNG."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from time import perf_counter
from typing import Callable, Optional

from dungeon_config import GenerationConfig, LayoutVariant
from dungeon_constants import UNDERSIZED_ROOM_RATIO
from dungeon_graph import DungeonGraph
from layout_phases import (
    run_branch_phase,
    run_deck_rows_phase,
    run_main_path_phase,
    run_secondary_links_phase,
)
from layout_phases.base import PhaseContext
from metrics import GenerationMetrics
from prng import PRNG

logger = logging.getLogger(__name__)


@dataclass
class LayoutResult:
    """Room graph plus flags describing how close it came to the request."""

    graph: DungeonGraph
    requested_rooms: int
    metrics: Optional[GenerationMetrics] = None

    @property
    def room_count(self) -> int:
        return len(self.graph.rooms)

    @property
    def complete(self) -> bool:
        return self.room_count >= self.requested_rooms

    @property
    def undersized(self) -> bool:
        return self.room_count < math.ceil(self.requested_rooms * UNDERSIZED_ROOM_RATIO)


class LayoutGenerator:
    """Manages the phases that build a room graph from a config."""

    def __init__(self, config: GenerationConfig, rng: PRNG) -> None:
        self.config = config
        self.rng = rng
        self.graph = DungeonGraph()
        self.metrics = GenerationMetrics() if config.collect_metrics else None

    def _run_phase(
        self,
        name: str,
        func: Callable[..., int],
        *args,
        **kwargs,
    ) -> int:
        if self.metrics is None:
            return func(*args, **kwargs)

        rooms_before = len(self.graph.rooms)
        links_before = len(self.graph.links)
        start = perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            rooms_total = len(self.graph.rooms)
            links_total = len(self.graph.links)
            self.metrics.record_phase_run(
                name,
                perf_counter() - start,
                rooms_total - rooms_before,
                links_total - links_before,
                rooms_total,
                links_total,
            )

    def generate(self) -> LayoutResult:
        """Builds the room graph. Can only be called once per generator."""
        if self.graph.rooms:
            raise RuntimeError("LayoutGenerator.generate() has already run")

        context = PhaseContext(config=self.config, graph=self.graph, rng=self.rng)

        if self.config.variant is LayoutVariant.SHIP:
            self._run_phase("deck_rows", run_deck_rows_phase, context)
        else:
            self._run_phase("main_path", run_main_path_phase, context)
            self._run_phase("branches", run_branch_phase, context)

        self._run_phase("secondary_links", run_secondary_links_phase, context)

        result = LayoutResult(
            graph=self.graph,
            requested_rooms=self.config.num_rooms,
            metrics=self.metrics,
        )
        if result.undersized:
            logger.warning(
                "Layout is undersized: %d of %d requested rooms placed",
                result.room_count,
                result.requested_rooms,
            )
        elif not result.complete:
            logger.info(
                "Layout is incomplete: %d of %d requested rooms placed",
                result.room_count,
                result.requested_rooms,
            )
        return result
