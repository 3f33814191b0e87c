"""Context object providing shared state and helpers for layout phases."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence, TypeVar

from dice import Dice
from dungeon_config import GenerationConfig
from dungeon_geometry import GridPos
from dungeon_graph import DungeonGraph
from prng import PRNG

T = TypeVar("T")


@dataclass
class PhaseContext:
    """Encapsulates the graph under construction and the run's random source."""

    config: GenerationConfig
    graph: DungeonGraph
    rng: PRNG
    dice: Dice = field(init=False)

    def __post_init__(self) -> None:
        self.dice = Dice(self.rng)

    def in_bounds(self, pos: GridPos) -> bool:
        return 0 <= pos.x < self.config.width and 0 <= pos.y < self.config.height

    def is_free(self, pos: GridPos) -> bool:
        return self.in_bounds(pos) and not self.graph.is_occupied(pos)

    def choose(self, options: Sequence[T]) -> T:
        """Pick one element uniformly with the run's generator."""
        if not options:
            raise ValueError("Cannot choose from an empty sequence")
        return options[self.rng.next_int(0, len(options) - 1)]

    def free_neighbors(self, pos: GridPos) -> List[GridPos]:
        return [cell for _, cell in pos.neighbors() if self.is_free(cell)]
