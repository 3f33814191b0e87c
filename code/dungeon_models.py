"""Core dataclasses used by the layout generator and the type assigner."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple

from dungeon_geometry import GridPos


class RoomType(Enum):
    """Semantic room labels assigned after the layout exists.

    Declaration order is the order of the cumulative weight tables used when
    sampling, so reordering members changes generated ships.
    """

    BARRACKS = "Barracks"
    CARGO_HOLD = "Cargo Hold"
    COMMAND = "Command"
    COMPUTER = "Computer"
    CRYOCHAMBER = "Cryochamber"
    ENGINE = "Engine"
    ENGINES = "Engines"
    GALLEY = "Galley"
    HABITAT_AREA = "Habitat Area"
    JUMP_DRIVE = "Jump Drive"
    LIFE_SUPPORT = "Life Support"
    LIVING_QUARTERS = "Living Quarters"
    MEDBAY = "Medbay"
    SCIENCE_LAB = "Science Lab"
    THRUSTERS = "Thrusters"
    WEAPON = "Weapon"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def from_label(cls, label: str) -> RoomType:
        normalized = label.strip().lower().replace("_", " ")
        for member in cls:
            if member.value.lower() == normalized or member.name.lower() == label.strip().lower():
                return member
        raise ValueError(f"Unknown room type {label!r}")


UNIQUE_ROOM_TYPES = frozenset((RoomType.COMMAND, RoomType.JUMP_DRIVE, RoomType.ENGINE))
PROPULSION_ROOM_TYPES = frozenset((RoomType.ENGINE, RoomType.ENGINES, RoomType.THRUSTERS))
DEFAULT_GUARANTEED_TYPES: Tuple[RoomType, ...] = (
    RoomType.COMMAND,
    RoomType.ENGINE,
    RoomType.LIFE_SUPPORT,
)


class LinkKind(Enum):
    DOOR = "door"  # Structural connection created while growing the layout.
    SECONDARY = "secondary"  # Extra loop-forming connection between adjacent rooms.


class BranchClass(Enum):
    """Records which generation phase created a room."""

    MAIN = "main"
    BRANCH = "branch"
    DECK = "deck"


@dataclass
class RoomNode:
    """A single room occupying one grid cell."""

    id: int
    x: int
    y: int
    branch_class: BranchClass = BranchClass.MAIN
    room_type: Optional[RoomType] = None
    name: str = ""

    def __post_init__(self) -> None:
        if not self.name:
            self.name = default_room_name(self.id, self.room_type)

    @property
    def pos(self) -> GridPos:
        return GridPos(self.x, self.y)

    def assign_type(self, room_type: RoomType) -> None:
        self.room_type = room_type
        self.name = default_room_name(self.id, room_type)

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "x": self.x,
            "y": self.y,
            "branch_class": self.branch_class.value,
            "room_type": self.room_type.label if self.room_type is not None else None,
        }


@dataclass(frozen=True)
class RoomLink:
    """Connection between two rooms, referenced by id."""

    source_id: int
    target_id: int
    kind: LinkKind = LinkKind.DOOR

    def key(self) -> Tuple[int, int]:
        """Unordered identity of the connected pair."""
        if self.source_id <= self.target_id:
            return self.source_id, self.target_id
        return self.target_id, self.source_id

    def other(self, room_id: int) -> int:
        if room_id == self.source_id:
            return self.target_id
        if room_id == self.target_id:
            return self.source_id
        raise ValueError(f"Room {room_id} is not an endpoint of link {self.key()}")

    def to_dict(self) -> Dict[str, object]:
        return {"source": self.source_id, "target": self.target_id, "kind": self.kind.value}


def default_room_name(room_id: int, room_type: Optional[RoomType]) -> str:
    if room_type is None:
        return f"Room {room_id}"
    return f"{room_type.label} {room_id}"


class DeckZone(Enum):
    UPPER = "upper"
    MIDDLE = "middle"
    LOWER = "lower"
    ANY = "any"


@dataclass(frozen=True)
class DeckPlacementRule:
    """Which third of the ship a room type wants to live in."""

    room_type: RoomType
    preferred_zone: DeckZone
    weight: int
    avoid_zone: Optional[DeckZone] = None


@dataclass(frozen=True)
class AdjacencyRule:
    """Neighbour preferences for a room type; merged per archetype."""

    room_type: RoomType
    required: FrozenSet[RoomType] = frozenset()
    preferred: FrozenSet[RoomType] = frozenset()
    avoid: FrozenSet[RoomType] = frozenset()

    def contribution(self, other: RoomType) -> int:
        """Score this rule gives to having ``other`` next door."""
        score = 0
        if other in self.required:
            score += 10
        if other in self.preferred:
            score += 5
        if other in self.avoid:
            score -= 7
        return score
