"""Configuration container for layout generation."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence, Tuple

from dungeon_constants import (
    DEFAULT_CELL_SIZE,
    DEFAULT_DUNGEON_HEIGHT,
    DEFAULT_DUNGEON_WIDTH,
    MAX_BRANCHING_FACTOR,
    MAX_PLACEMENT_ATTEMPTS,
    MIN_MAIN_PATH_ROOMS,
    RANDOM_SEED,
    SECONDARY_LINK_RATIO,
    SHIP_WIDTH,
)
from dungeon_models import DEFAULT_GUARANTEED_TYPES, RoomType


class LayoutVariant(Enum):
    DUNGEON = "dungeon"  # Main path plus branches grown from the grid centre.
    SHIP = "ship"  # One contiguous row of rooms per deck, aligned on a central spine.


@dataclass
class GenerationConfig:
    """Aggregates all tunable parameters for a generation run."""

    num_rooms: int = 12
    width: int = DEFAULT_DUNGEON_WIDTH
    height: int = DEFAULT_DUNGEON_HEIGHT
    variant: LayoutVariant = LayoutVariant.DUNGEON
    # Ship variant only; when given, num_rooms becomes its sum and height the deck count.
    rooms_per_deck: Optional[Sequence[int]] = None
    # Share of rooms grown as side branches instead of along the main path.
    branching_factor: float = 0.3
    # Probability of continuing straight when extending the main path.
    directional_bias: float = 0.7
    min_secondary_links: int = 1
    max_secondary_links: Optional[int] = None
    cell_size: int = DEFAULT_CELL_SIZE
    archetype: str = "Default"
    seed: Optional[int] = RANDOM_SEED
    max_placement_attempts: int = MAX_PLACEMENT_ATTEMPTS
    collect_metrics: bool = False
    assign_room_types: bool = True
    guaranteed_types: Sequence[RoomType] = field(default_factory=lambda: DEFAULT_GUARANTEED_TYPES)

    def __post_init__(self) -> None:
        if not isinstance(self.variant, LayoutVariant):
            self.variant = LayoutVariant(self.variant)

        if self.rooms_per_deck is not None:
            self.rooms_per_deck = tuple(int(count) for count in self.rooms_per_deck)
            if not self.rooms_per_deck:
                raise ValueError("GenerationConfig rooms_per_deck must list at least one deck")
            if any(count <= 0 for count in self.rooms_per_deck):
                raise ValueError("GenerationConfig rooms_per_deck entries must be positive")
            if self.variant is not LayoutVariant.SHIP:
                raise ValueError("GenerationConfig rooms_per_deck requires the ship variant")
            self.num_rooms = sum(min(count, SHIP_WIDTH) for count in self.rooms_per_deck)
            self.width = SHIP_WIDTH
            self.height = len(self.rooms_per_deck)

        if self.num_rooms <= 0:
            raise ValueError("GenerationConfig num_rooms must be positive")
        if self.width <= 0 or self.height <= 0:
            raise ValueError("GenerationConfig width and height must be positive")
        if self.variant is LayoutVariant.SHIP and self.rooms_per_deck is None:
            raise ValueError("GenerationConfig ship variant requires rooms_per_deck")
        if not (0.0 <= self.branching_factor <= 1.0):
            raise ValueError("GenerationConfig branching_factor must be within [0, 1]")
        if not (0.0 <= self.directional_bias <= 1.0):
            raise ValueError("GenerationConfig directional_bias must be within [0, 1]")
        if self.min_secondary_links < 0:
            raise ValueError("GenerationConfig min_secondary_links cannot be negative")
        if self.max_secondary_links is None:
            self.max_secondary_links = max(
                self.min_secondary_links, math.ceil(self.num_rooms * SECONDARY_LINK_RATIO)
            )
        if self.max_secondary_links < self.min_secondary_links:
            raise ValueError("GenerationConfig max_secondary_links must be >= min_secondary_links")
        if self.cell_size <= 0:
            raise ValueError("GenerationConfig cell_size must be positive")
        if self.max_placement_attempts <= 0:
            raise ValueError("GenerationConfig max_placement_attempts must be positive")

        self.guaranteed_types = tuple(
            member if isinstance(member, RoomType) else RoomType.from_label(member)
            for member in self.guaranteed_types
        )

    @property
    def effective_branching_factor(self) -> float:
        return min(self.branching_factor, MAX_BRANCHING_FACTOR)

    @property
    def main_path_rooms(self) -> int:
        """Rooms laid along the main path before branching starts."""
        return max(MIN_MAIN_PATH_ROOMS, math.floor(self.num_rooms * (1 - self.effective_branching_factor)))

    @property
    def anchor(self) -> Tuple[int, int]:
        return self.width // 2, self.height // 2

    @property
    def pixel_size(self) -> Tuple[int, int]:
        return self.width * self.cell_size, self.height * self.cell_size

    @property
    def deck_count(self) -> int:
        if self.rooms_per_deck is not None:
            return len(self.rooms_per_deck)
        return self.height
