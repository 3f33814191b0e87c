"""Roll up a ship's deck plan (deck count and rooms per deck) from its archetype."""

from __future__ import annotations

import math
from bisect import bisect_left
from typing import List, Optional

from archetypes import Archetype, get_profile
from dice import Dice
from dungeon_config import GenerationConfig, LayoutVariant
from dungeon_constants import SECONDARY_LINK_RATIO

# Rooms per deck 1..6 weighted 6:5:4:3:2:1 on a d21, so small decks are most common.
ROOM_COUNT_WEIGHTS = (6, 5, 4, 3, 2, 1)
_ROOM_COUNT_ENDS = tuple(sum(ROOM_COUNT_WEIGHTS[: index + 1]) for index in range(len(ROOM_COUNT_WEIGHTS)))


def weighted_room_count(dice: Dice) -> int:
    roll = dice.d(_ROOM_COUNT_ENDS[-1])
    return bisect_left(_ROOM_COUNT_ENDS, roll) + 1


def plan_rooms_per_deck(
    dice: Dice,
    deck_notation: str,
    randomize: bool = True,
    rooms_per_deck: int = 1,
) -> List[int]:
    """Roll the deck count, then a room count for each deck (or a fixed count)."""
    if rooms_per_deck <= 0:
        raise ValueError("rooms_per_deck must be positive")
    num_decks = max(1, dice.roll_notation(deck_notation).total)
    if not randomize:
        return [rooms_per_deck] * num_decks
    return [weighted_room_count(dice) for _ in range(num_decks)]


def ship_config(
    dice: Dice,
    archetype: str | Archetype | None,
    deck_notation: Optional[str] = None,
    randomize: bool = True,
    **overrides,
) -> GenerationConfig:
    """Build a ship-variant config for ``archetype`` using its deck dice unless one is given."""
    profile = get_profile(archetype)
    deck_plan = plan_rooms_per_deck(dice, deck_notation or profile.deck_dice, randomize)
    total_rooms = sum(deck_plan)
    overrides.setdefault("max_secondary_links", max(1, math.ceil(total_rooms * SECONDARY_LINK_RATIO)))
    return GenerationConfig(
        variant=LayoutVariant.SHIP,
        rooms_per_deck=deck_plan,
        archetype=profile.name,
        **overrides,
    )
