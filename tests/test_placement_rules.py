import itertools

import pytest

from archetypes import ARCHETYPE_PROFILES, Archetype, get_profile
from dungeon_models import DeckZone, RoomType
from placement_rules import (
    adjacency_score,
    deck_position_score,
    deck_zone,
    merged_adjacency_rule,
    merged_deck_rule,
    optimal_deck,
    optimal_horizontal_position,
)


@pytest.mark.parametrize(
    "total_decks,deck_index,expected",
    [
        (5, 0, DeckZone.UPPER),
        (5, 1, DeckZone.UPPER),
        (5, 2, DeckZone.MIDDLE),
        (5, 3, DeckZone.LOWER),
        (5, 4, DeckZone.LOWER),
        (3, 0, DeckZone.UPPER),
        (3, 1, DeckZone.MIDDLE),
        (3, 2, DeckZone.LOWER),
        (1, 0, DeckZone.UPPER),
    ],
)
def test_deck_zone_thresholds(total_decks, deck_index, expected):
    assert deck_zone(total_decks, deck_index) is expected


@pytest.mark.parametrize(
    "room_type,total_decks,deck_index,expected",
    [
        (RoomType.COMMAND, 5, 0, 9),
        (RoomType.COMMAND, 5, 4, -27),
        (RoomType.COMPUTER, 5, 2, -4),
        (RoomType.ENGINE, 5, 4, 10),
        (RoomType.ENGINE, 5, 0, -50),
        (RoomType.THRUSTERS, 3, 0, -50),
        (RoomType.LIFE_SUPPORT, 5, 2, 6),
        (RoomType.WEAPON, 5, 0, 5),
        (RoomType.WEAPON, 5, 4, 5),
    ],
)
def test_default_deck_scores(room_type, total_decks, deck_index, expected):
    assert deck_position_score(room_type, "Default", total_decks, deck_index) == expected


def test_deck_scores_stay_in_range_for_every_archetype():
    for archetype, room_type in itertools.product(Archetype, RoomType):
        for total_decks in range(1, 9):
            for deck_index in range(total_decks):
                score = deck_position_score(room_type, archetype, total_decks, deck_index)
                assert -50 <= score <= 10


def test_archetype_deck_overrides_are_merged():
    rule = merged_deck_rule(RoomType.WEAPON, "Raider")

    assert rule.preferred_zone is DeckZone.UPPER
    assert rule.weight == 8
    assert deck_position_score(RoomType.WEAPON, "Raider", 5, 0) == 8
    assert deck_position_score(RoomType.WEAPON, "Default", 5, 0) == 5


def test_unknown_archetype_uses_default_tables():
    assert get_profile("Space Yacht") is ARCHETYPE_PROFILES[Archetype.DEFAULT]
    assert deck_position_score(RoomType.COMMAND, "Space Yacht", 5, 0) == 9


@pytest.mark.parametrize(
    "type_a,type_b,expected",
    [
        (RoomType.COMMAND, RoomType.COMPUTER, 10),
        (RoomType.COMMAND, RoomType.ENGINE, -10),
        (RoomType.LIVING_QUARTERS, RoomType.GALLEY, 10),
        (RoomType.LIFE_SUPPORT, RoomType.HABITAT_AREA, 5),
        (RoomType.CARGO_HOLD, RoomType.CARGO_HOLD, 5),
        (RoomType.ENGINE, RoomType.ENGINE, 0),
        (RoomType.WEAPON, RoomType.SCIENCE_LAB, 0),
    ],
)
def test_default_adjacency_scores(type_a, type_b, expected):
    assert adjacency_score(type_a, type_b, "Default") == expected


def test_adjacency_score_is_symmetric_and_bounded():
    for archetype in Archetype:
        for type_a, type_b in itertools.combinations_with_replacement(RoomType, 2):
            forward = adjacency_score(type_a, type_b, archetype)
            assert forward == adjacency_score(type_b, type_a, archetype)
            assert -10 <= forward <= 10


def test_same_type_clustering_follows_archetype_overrides():
    assert adjacency_score(RoomType.SCIENCE_LAB, RoomType.SCIENCE_LAB, "Default") == 0
    assert adjacency_score(RoomType.SCIENCE_LAB, RoomType.SCIENCE_LAB, "Exploration Vessel") == 5
    assert RoomType.CRYOCHAMBER in merged_adjacency_rule(RoomType.CRYOCHAMBER, "Colony Ship").preferred


def test_optimal_deck_moves_rooms_toward_preferred_zone():
    assert optimal_deck(RoomType.ENGINE, "Default", 5, 0) == 4
    assert optimal_deck(RoomType.ENGINE, "Default", 5, 3) == 3
    assert optimal_deck(RoomType.COMMAND, "Default", 5, 4) == 1
    assert optimal_deck(RoomType.MEDBAY, "Default", 6, 0) == 3
    assert optimal_deck(RoomType.WEAPON, "Default", 5, 2) == 2


def test_optimal_horizontal_position():
    existing = {4: RoomType.COMMAND, 7: RoomType.ENGINE}

    assert optimal_horizontal_position(RoomType.COMPUTER, "Default", [], existing) is None
    assert optimal_horizontal_position(RoomType.COMPUTER, "Default", [2], existing) == 2
    assert optimal_horizontal_position(RoomType.COMPUTER, "Default", [1, 2, 3], {}) == 2
    assert optimal_horizontal_position(RoomType.COMPUTER, "Default", [3, 6, 8], existing) == 3
    assert optimal_horizontal_position(RoomType.THRUSTERS, "Default", [3, 6, 8], existing) == 6


def test_default_weights_total():
    profile = get_profile(Archetype.DEFAULT)

    assert profile.total_weight == 44
    types, ends = profile.cumulative_table()
    assert ends[-1] == 44
    assert types[0] is RoomType.BARRACKS
    assert RoomType.SCIENCE_LAB not in get_profile("Freighter").cumulative_table()[0]
