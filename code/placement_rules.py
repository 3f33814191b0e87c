"""Deck-zone and adjacency scoring for semantic room types.

Every function here is pure: scores depend only on the room types, the
archetype and the deck geometry. Unknown types score neutrally and unknown
archetypes use the default tables, so callers never have to guard lookups.
"""

from __future__ import annotations

import math
from dataclasses import replace
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple

from archetypes import Archetype, get_profile
from dungeon_constants import LOWER_DECK_FRACTION, UPPER_DECK_FRACTION
from dungeon_models import (
    PROPULSION_ROOM_TYPES,
    AdjacencyRule,
    DeckPlacementRule,
    DeckZone,
    RoomType,
)

_T = RoomType

MIN_DECK_SCORE = -50
MAX_DECK_SCORE = 10
ANY_ZONE_SCORE = 5
AVOID_MULTIPLIER = 3
PROPULSION_UPPER_PENALTY = 20

MIN_ADJACENCY_SCORE = -10
MAX_ADJACENCY_SCORE = 10
SELF_CLUSTER_SCORE = 5


def _deck_rule(room_type: RoomType, zone: DeckZone, weight: int, avoid: Optional[DeckZone] = None) -> DeckPlacementRule:
    return DeckPlacementRule(room_type=room_type, preferred_zone=zone, weight=weight, avoid_zone=avoid)


DECK_PLACEMENT_RULES: Dict[RoomType, DeckPlacementRule] = {
    rule.room_type: rule
    for rule in (
        _deck_rule(_T.COMMAND, DeckZone.UPPER, 9, DeckZone.LOWER),
        _deck_rule(_T.COMPUTER, DeckZone.UPPER, 7),
        _deck_rule(_T.ENGINE, DeckZone.LOWER, 15, DeckZone.UPPER),
        _deck_rule(_T.ENGINES, DeckZone.LOWER, 15, DeckZone.UPPER),
        _deck_rule(_T.THRUSTERS, DeckZone.LOWER, 12, DeckZone.UPPER),
        _deck_rule(_T.JUMP_DRIVE, DeckZone.LOWER, 6),
        _deck_rule(_T.LIVING_QUARTERS, DeckZone.MIDDLE, 5),
        _deck_rule(_T.BARRACKS, DeckZone.MIDDLE, 5),
        _deck_rule(_T.GALLEY, DeckZone.MIDDLE, 4),
        _deck_rule(_T.HABITAT_AREA, DeckZone.MIDDLE, 5),
        _deck_rule(_T.CARGO_HOLD, DeckZone.LOWER, 7),
        _deck_rule(_T.LIFE_SUPPORT, DeckZone.MIDDLE, 6),
        _deck_rule(_T.MEDBAY, DeckZone.MIDDLE, 5),
        _deck_rule(_T.CRYOCHAMBER, DeckZone.MIDDLE, 4),
        _deck_rule(_T.SCIENCE_LAB, DeckZone.MIDDLE, 5, DeckZone.LOWER),
        _deck_rule(_T.WEAPON, DeckZone.ANY, 3),
    )
}


def _adjacency_rule(
    room_type: RoomType,
    required: Iterable[RoomType] = (),
    preferred: Iterable[RoomType] = (),
    avoid: Iterable[RoomType] = (),
) -> AdjacencyRule:
    return AdjacencyRule(
        room_type=room_type,
        required=frozenset(required),
        preferred=frozenset(preferred),
        avoid=frozenset(avoid),
    )


ADJACENCY_RULES: Dict[RoomType, AdjacencyRule] = {
    rule.room_type: rule
    for rule in (
        _adjacency_rule(
            _T.COMMAND,
            required=(_T.COMPUTER,),
            preferred=(_T.LIVING_QUARTERS,),
            avoid=(_T.ENGINE, _T.ENGINES, _T.CARGO_HOLD),
        ),
        _adjacency_rule(
            _T.COMPUTER,
            required=(_T.COMMAND,),
            preferred=(_T.SCIENCE_LAB,),
            avoid=(_T.ENGINE, _T.ENGINES),
        ),
        _adjacency_rule(
            _T.ENGINE,
            preferred=(_T.THRUSTERS, _T.ENGINES, _T.JUMP_DRIVE),
            avoid=(_T.LIVING_QUARTERS, _T.COMMAND, _T.HABITAT_AREA),
        ),
        _adjacency_rule(
            _T.ENGINES,
            preferred=(_T.ENGINE, _T.THRUSTERS, _T.JUMP_DRIVE),
            avoid=(_T.LIVING_QUARTERS, _T.COMMAND, _T.HABITAT_AREA),
        ),
        _adjacency_rule(
            _T.THRUSTERS,
            preferred=(_T.ENGINE, _T.ENGINES),
            avoid=(_T.LIVING_QUARTERS, _T.COMMAND),
        ),
        _adjacency_rule(
            _T.JUMP_DRIVE,
            preferred=(_T.ENGINE, _T.ENGINES, _T.COMPUTER),
            avoid=(_T.HABITAT_AREA, _T.CRYOCHAMBER),
        ),
        _adjacency_rule(
            _T.LIVING_QUARTERS,
            preferred=(_T.GALLEY, _T.HABITAT_AREA, _T.MEDBAY),
            avoid=(_T.ENGINE, _T.ENGINES, _T.CARGO_HOLD, _T.WEAPON),
        ),
        _adjacency_rule(
            _T.BARRACKS,
            preferred=(_T.GALLEY, _T.WEAPON),
            avoid=(_T.ENGINE, _T.ENGINES),
        ),
        _adjacency_rule(
            _T.GALLEY,
            preferred=(_T.LIVING_QUARTERS, _T.BARRACKS, _T.HABITAT_AREA),
            avoid=(_T.ENGINE, _T.ENGINES, _T.MEDBAY),
        ),
        _adjacency_rule(
            _T.HABITAT_AREA,
            preferred=(_T.LIVING_QUARTERS, _T.GALLEY, _T.MEDBAY),
            avoid=(_T.ENGINE, _T.ENGINES, _T.CARGO_HOLD, _T.WEAPON),
        ),
        _adjacency_rule(
            _T.CARGO_HOLD,
            preferred=(_T.CARGO_HOLD,),
            avoid=(_T.COMMAND, _T.LIVING_QUARTERS, _T.MEDBAY, _T.HABITAT_AREA),
        ),
        _adjacency_rule(
            _T.LIFE_SUPPORT,
            preferred=(_T.HABITAT_AREA, _T.LIVING_QUARTERS),
        ),
        _adjacency_rule(
            _T.MEDBAY,
            preferred=(_T.LIVING_QUARTERS, _T.HABITAT_AREA, _T.CRYOCHAMBER),
            avoid=(_T.ENGINE, _T.ENGINES, _T.CARGO_HOLD),
        ),
        _adjacency_rule(
            _T.CRYOCHAMBER,
            preferred=(_T.MEDBAY, _T.LIFE_SUPPORT),
            avoid=(_T.ENGINE, _T.ENGINES, _T.JUMP_DRIVE),
        ),
        _adjacency_rule(
            _T.SCIENCE_LAB,
            preferred=(_T.COMPUTER, _T.MEDBAY),
            avoid=(_T.ENGINE, _T.ENGINES, _T.CARGO_HOLD),
        ),
        _adjacency_rule(
            _T.WEAPON,
            preferred=(_T.COMMAND, _T.BARRACKS),
            avoid=(_T.HABITAT_AREA, _T.CRYOCHAMBER, _T.LIVING_QUARTERS),
        ),
    )
}


def deck_zone_thresholds(total_decks: int) -> Tuple[int, int]:
    """Return ``(upper, lower)``: decks ``<= upper`` are UPPER, decks ``>= lower`` are LOWER."""
    return math.floor(total_decks * UPPER_DECK_FRACTION), math.floor(total_decks * LOWER_DECK_FRACTION)


def deck_zone(total_decks: int, deck_index: int) -> DeckZone:
    upper, lower = deck_zone_thresholds(total_decks)
    if deck_index <= upper:
        return DeckZone.UPPER
    if deck_index >= lower:
        return DeckZone.LOWER
    return DeckZone.MIDDLE


def merged_deck_rule(room_type: RoomType, archetype: str | Archetype | None) -> Optional[DeckPlacementRule]:
    rule = DECK_PLACEMENT_RULES.get(room_type)
    if rule is None:
        return None
    override = get_profile(archetype).deck_overrides.get(room_type)
    return replace(rule, **override) if override else rule


def merged_adjacency_rule(room_type: RoomType, archetype: str | Archetype | None) -> Optional[AdjacencyRule]:
    rule = ADJACENCY_RULES.get(room_type)
    if rule is None:
        return None
    override = get_profile(archetype).adjacency_overrides.get(room_type)
    return replace(rule, **override) if override else rule


def deck_position_score(
    room_type: RoomType,
    archetype: str | Archetype | None,
    total_decks: int,
    deck_index: int,
) -> int:
    """Score in ``[-50, 10]`` for putting ``room_type`` on ``deck_index``."""
    rule = merged_deck_rule(room_type, archetype)
    if rule is None:
        return 0
    if rule.preferred_zone is DeckZone.ANY:
        return ANY_ZONE_SCORE

    zone = deck_zone(total_decks, deck_index)
    if zone is rule.preferred_zone:
        score = rule.weight
    elif zone is rule.avoid_zone:
        score = -AVOID_MULTIPLIER * rule.weight
        if room_type in PROPULSION_ROOM_TYPES and zone is DeckZone.UPPER:
            score -= PROPULSION_UPPER_PENALTY
            if total_decks > 3 and deck_index == 0:
                score -= PROPULSION_UPPER_PENALTY
    else:
        score = -math.ceil(rule.weight / 2)
    return max(MIN_DECK_SCORE, min(MAX_DECK_SCORE, score))


def adjacency_score(room_type_a: RoomType, room_type_b: RoomType, archetype: str | Archetype | None) -> int:
    """Symmetric score in ``[-10, 10]`` for placing the two types next to each other."""
    if room_type_a is room_type_b:
        rule = merged_adjacency_rule(room_type_a, archetype)
        if rule is not None and (room_type_a in rule.preferred or room_type_a in rule.required):
            return SELF_CLUSTER_SCORE
        return 0

    score = 0
    rule_a = merged_adjacency_rule(room_type_a, archetype)
    if rule_a is not None:
        score += rule_a.contribution(room_type_b)
    rule_b = merged_adjacency_rule(room_type_b, archetype)
    if rule_b is not None:
        score += rule_b.contribution(room_type_a)
    return max(MIN_ADJACENCY_SCORE, min(MAX_ADJACENCY_SCORE, score))


def optimal_deck(
    room_type: RoomType,
    archetype: str | Archetype | None,
    total_decks: int,
    deck_index: int,
) -> int:
    """Deck a room of ``room_type`` currently on ``deck_index`` would rather be on."""
    rule = merged_deck_rule(room_type, archetype)
    if rule is None or rule.preferred_zone is DeckZone.ANY:
        return deck_index

    if deck_zone(total_decks, deck_index) is rule.preferred_zone:
        return deck_index
    upper, lower = deck_zone_thresholds(total_decks)
    if rule.preferred_zone is DeckZone.UPPER:
        return min(upper, math.floor(total_decks * 0.2))
    if rule.preferred_zone is DeckZone.LOWER:
        return min(total_decks - 1, max(lower, math.floor(total_decks * 0.8)))
    return math.floor(total_decks * 0.5)


def optimal_horizontal_position(
    room_type: RoomType,
    archetype: str | Archetype | None,
    available_positions: Sequence[int],
    existing_rooms: Mapping[int, RoomType],
) -> Optional[int]:
    """Pick the column on a deck whose horizontal neighbours suit ``room_type`` best.

    ``existing_rooms`` maps occupied columns to their types. Returns None when
    nothing is available and the middle candidate when there is nothing to
    score against. Ties go to the earliest candidate.
    """
    if not available_positions:
        return None
    if len(available_positions) == 1:
        return available_positions[0]
    if not existing_rooms:
        return available_positions[len(available_positions) // 2]

    def score(column: int) -> int:
        return sum(
            adjacency_score(room_type, existing_rooms[neighbor], archetype)
            for neighbor in (column - 1, column + 1)
            if neighbor in existing_rooms
        )

    return max(available_positions, key=score)
