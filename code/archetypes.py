"""Ship archetype tables: room-type weights and placement-rule overrides."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Tuple

from dungeon_constants import SHIP_DEFAULT_DECK_DICE
from dungeon_models import DeckZone, RoomType

RuleOverride = Mapping[str, Any]

_T = RoomType


class Archetype(Enum):
    MINING_FRIGATE = "Mining Frigate"
    FREIGHTER = "Freighter"
    RAIDER = "Raider"
    EXECUTIVE_TRANSPORT = "Executive Transport"
    EXPLORATION_VESSEL = "Exploration Vessel"
    JUMPLINER = "Jumpliner"
    CORVETTE = "Corvette"
    TROOPSHIP = "Troopship"
    COLONY_SHIP = "Colony Ship"
    DEFAULT = "Default"

    @classmethod
    def from_name(cls, name: str | Archetype | None) -> Archetype:
        """Resolve a display name (case-insensitive) or enum name; unknown names map to DEFAULT."""
        if isinstance(name, Archetype):
            return name
        if not name:
            return cls.DEFAULT
        wanted = name.strip().lower()
        for member in cls:
            if member.value.lower() == wanted or member.name.lower() == wanted.replace(" ", "_"):
                return member
        return cls.DEFAULT


@dataclass(frozen=True)
class ArchetypeProfile:
    """Fixed-shape description of one archetype."""

    archetype: Archetype
    weights: Mapping[RoomType, int]
    deck_dice: str = SHIP_DEFAULT_DECK_DICE
    deck_overrides: Mapping[RoomType, RuleOverride] = field(default_factory=dict)
    adjacency_overrides: Mapping[RoomType, RuleOverride] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.archetype.value

    @property
    def total_weight(self) -> int:
        return sum(weight for weight in self.weights.values() if weight > 0)

    def cumulative_table(self) -> Tuple[Tuple[RoomType, ...], Tuple[int, ...]]:
        """Room types with positive weight and their running weight totals, in enum order."""
        types = []
        ends = []
        running = 0
        for room_type in RoomType:
            weight = self.weights.get(room_type, 0)
            if weight <= 0:
                continue
            running += weight
            types.append(room_type)
            ends.append(running)
        return tuple(types), tuple(ends)


def _weights(*values: int) -> Dict[RoomType, int]:
    """Weights listed in RoomType declaration order."""
    members = tuple(RoomType)
    if len(values) != len(members):
        raise ValueError(f"Expected {len(members)} weights, got {len(values)}")
    return dict(zip(members, values))


# Columns: barracks, cargo, command, computer, cryo, engine, engines, galley,
# habitat, jump drive, life support, quarters, medbay, science, thrusters, weapon.
ARCHETYPE_PROFILES: Dict[Archetype, ArchetypeProfile] = {
    Archetype.MINING_FRIGATE: ArchetypeProfile(
        Archetype.MINING_FRIGATE,
        _weights(4, 8, 2, 2, 1, 3, 3, 2, 1, 1, 3, 3, 2, 1, 3, 1),
        deck_dice="1d4+2",
        deck_overrides={_T.CARGO_HOLD: {"preferred_zone": DeckZone.LOWER, "weight": 10}},
    ),
    Archetype.FREIGHTER: ArchetypeProfile(
        Archetype.FREIGHTER,
        _weights(3, 10, 2, 2, 1, 3, 3, 2, 2, 2, 3, 3, 1, 0, 2, 1),
        deck_dice="1d6+3",
        deck_overrides={_T.CARGO_HOLD: {"preferred_zone": DeckZone.MIDDLE, "weight": 10}},
        adjacency_overrides={_T.CARGO_HOLD: {"preferred": frozenset({_T.CARGO_HOLD})}},
    ),
    Archetype.RAIDER: ArchetypeProfile(
        Archetype.RAIDER,
        _weights(4, 2, 3, 3, 0, 5, 5, 2, 0, 2, 2, 2, 1, 0, 4, 5),
        deck_dice="1d3+2",
        deck_overrides={
            _T.WEAPON: {"preferred_zone": DeckZone.UPPER, "weight": 8},
            _T.ENGINE: {"preferred_zone": DeckZone.LOWER, "weight": 10},
        },
        adjacency_overrides={
            _T.COMMAND: {"required": frozenset({_T.WEAPON, _T.COMPUTER})},
            _T.WEAPON: {"preferred": frozenset({_T.COMMAND, _T.BARRACKS, _T.COMPUTER})},
        },
    ),
    Archetype.EXECUTIVE_TRANSPORT: ArchetypeProfile(
        Archetype.EXECUTIVE_TRANSPORT,
        _weights(1, 2, 3, 3, 1, 2, 2, 4, 3, 2, 3, 5, 3, 1, 2, 3),
        deck_dice="1d4+2",
        deck_overrides={_T.LIVING_QUARTERS: {"preferred_zone": DeckZone.UPPER, "weight": 8}},
    ),
    Archetype.EXPLORATION_VESSEL: ArchetypeProfile(
        Archetype.EXPLORATION_VESSEL,
        _weights(2, 3, 3, 4, 4, 3, 3, 3, 4, 3, 4, 3, 3, 5, 2, 1),
        deck_dice="1d6+2",
        deck_overrides={_T.SCIENCE_LAB: {"preferred_zone": DeckZone.UPPER, "weight": 9}},
        adjacency_overrides={_T.SCIENCE_LAB: {"preferred": frozenset({_T.SCIENCE_LAB, _T.COMPUTER})}},
    ),
    Archetype.JUMPLINER: ArchetypeProfile(
        Archetype.JUMPLINER,
        _weights(1, 3, 2, 3, 2, 2, 2, 4, 5, 5, 4, 5, 2, 1, 2, 1),
        deck_dice="2d4+2",
    ),
    Archetype.CORVETTE: ArchetypeProfile(
        Archetype.CORVETTE,
        _weights(4, 1, 4, 4, 0, 4, 4, 2, 1, 2, 3, 2, 2, 1, 3, 5),
        deck_dice="1d4+2",
        deck_overrides={
            _T.COMMAND: {"preferred_zone": DeckZone.UPPER, "weight": 10},
            _T.WEAPON: {"preferred_zone": DeckZone.UPPER, "weight": 8},
        },
    ),
    Archetype.TROOPSHIP: ArchetypeProfile(
        Archetype.TROOPSHIP,
        _weights(8, 5, 3, 2, 3, 2, 2, 3, 3, 2, 3, 2, 4, 1, 2, 5),
        deck_dice="1d6+3",
        deck_overrides={_T.BARRACKS: {"preferred_zone": DeckZone.MIDDLE, "weight": 9}},
    ),
    Archetype.COLONY_SHIP: ArchetypeProfile(
        Archetype.COLONY_SHIP,
        _weights(2, 5, 2, 3, 8, 2, 2, 4, 8, 3, 5, 4, 4, 4, 2, 2),
        deck_dice="2d4+4",
        deck_overrides={
            _T.HABITAT_AREA: {"preferred_zone": DeckZone.MIDDLE, "weight": 10},
            _T.CRYOCHAMBER: {"preferred_zone": DeckZone.MIDDLE, "weight": 10},
        },
        adjacency_overrides={
            _T.HABITAT_AREA: {"preferred": frozenset({_T.HABITAT_AREA, _T.GALLEY})},
            _T.CRYOCHAMBER: {"preferred": frozenset({_T.CRYOCHAMBER, _T.MEDBAY})},
        },
    ),
    Archetype.DEFAULT: ArchetypeProfile(
        Archetype.DEFAULT,
        _weights(3, 3, 3, 3, 2, 3, 3, 3, 3, 2, 3, 3, 3, 2, 3, 2),
        deck_dice="1d6+2",
    ),
}


def get_profile(archetype: str | Archetype | None) -> ArchetypeProfile:
    return ARCHETYPE_PROFILES[Archetype.from_name(archetype)]
