"""Weighted sampling of semantic room types for an archetype."""

from __future__ import annotations

import logging
from bisect import bisect_left
from typing import List, Optional, Sequence

from archetypes import Archetype, ArchetypeProfile, get_profile
from dice import Dice
from dungeon_constants import SAMPLING_ATTEMPTS_PER_SLOT
from dungeon_models import DEFAULT_GUARANTEED_TYPES, UNIQUE_ROOM_TYPES, RoomType

logger = logging.getLogger(__name__)


def prepare_guaranteed(guaranteed: Sequence[RoomType], count: int) -> List[RoomType]:
    """Guaranteed types with repeated unique types removed, truncated to ``count``."""
    prepared: List[RoomType] = []
    for room_type in guaranteed:
        if len(prepared) >= count:
            break
        if room_type in UNIQUE_ROOM_TYPES and room_type in prepared:
            continue
        prepared.append(room_type)
    return prepared


def fallback_type(profile: ArchetypeProfile) -> RoomType:
    """Heaviest non-unique type of the archetype, used once sampling gives up."""
    candidates = [
        (weight, room_type)
        for room_type, weight in profile.weights.items()
        if weight > 0 and room_type not in UNIQUE_ROOM_TYPES
    ]
    if not candidates:
        return RoomType.CARGO_HOLD
    best_weight = max(weight for weight, _ in candidates)
    return next(room_type for weight, room_type in candidates if weight == best_weight)


class RoomTypeSampler:
    """Draws room types from an archetype's weight table with the run's dice."""

    def __init__(self, dice: Dice) -> None:
        self.dice = dice

    def draw_type(self, archetype: str | Archetype | None) -> RoomType:
        """Inverse-CDF draw: roll ``1..total`` and take the first cumulative bucket reaching it."""
        profile = get_profile(archetype)
        types, ends = profile.cumulative_table()
        if not types:
            return RoomType.CARGO_HOLD
        roll = self.dice.roll(ends[-1]).total
        return types[bisect_left(ends, roll)]

    def sample_types(
        self,
        archetype: str | Archetype | None,
        count: int,
        guaranteed: Optional[Sequence[RoomType]] = None,
    ) -> List[RoomType]:
        """Return exactly ``count`` types, guaranteed ones first.

        Unique types are never repeated. Resampling after a unique collision is
        capped; once the cap is hit, remaining slots get the archetype's
        heaviest non-unique type.
        """
        if count <= 0:
            return []
        if guaranteed is None:
            guaranteed = DEFAULT_GUARANTEED_TYPES
        profile = get_profile(archetype)

        room_types = prepare_guaranteed(guaranteed, count)
        placed = set(room_types)
        attempts_left = SAMPLING_ATTEMPTS_PER_SLOT * count

        while len(room_types) < count and attempts_left > 0:
            attempts_left -= 1
            room_type = self.draw_type(profile.archetype)
            if room_type in UNIQUE_ROOM_TYPES and room_type in placed:
                continue
            room_types.append(room_type)
            placed.add(room_type)

        if len(room_types) < count:
            filler = fallback_type(profile)
            logger.warning(
                "Sampling for %s exhausted its attempt budget; filling %d slots with %s",
                profile.name,
                count - len(room_types),
                filler.label,
            )
            room_types.extend([filler] * (count - len(room_types)))
        return room_types
