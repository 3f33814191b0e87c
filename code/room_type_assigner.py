"""Greedy assignment of sampled room types to positions in a room graph."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from archetypes import Archetype
from dungeon_graph import DungeonGraph
from dungeon_models import DEFAULT_GUARANTEED_TYPES, RoomNode, RoomType
from placement_rules import adjacency_score, deck_position_score
from room_type_sampler import RoomTypeSampler, prepare_guaranteed

logger = logging.getLogger(__name__)


@dataclass
class AssignmentResult:
    """Outcome of a type-assignment pass over one graph."""

    archetype: Archetype
    total_decks: int
    sampled_types: List[RoomType] = field(default_factory=list)
    assignments: Dict[int, RoomType] = field(default_factory=dict)
    # Types that had no position left to go to.
    dropped_types: List[RoomType] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.dropped_types


def deck_layout(graph: DungeonGraph) -> tuple[int, int]:
    """Return ``(min_y, total_decks)``; deck index of a room is ``room.y - min_y``."""
    bounds = graph.bounds()
    if bounds is None:
        return 0, 0
    _, min_y, _, max_y = bounds
    return min_y, max_y - min_y + 1


def placement_score(
    graph: DungeonGraph,
    room: RoomNode,
    room_type: RoomType,
    archetype: Archetype,
    min_y: int,
    total_decks: int,
) -> int:
    """Deck score plus adjacency scores against already-typed linked neighbours."""
    score = deck_position_score(room_type, archetype, total_decks, room.y - min_y)
    for neighbor_id in graph.linked_neighbors(room.id):
        neighbor_type = graph.get_room(neighbor_id).room_type
        if neighbor_type is not None:
            score += adjacency_score(room_type, neighbor_type, archetype)
    return score


def assign_types(
    graph: DungeonGraph,
    room_types: Sequence[RoomType],
    archetype: str | Archetype | None = Archetype.DEFAULT,
    guaranteed: Sequence[RoomType] = (),
) -> AssignmentResult:
    """Place ``room_types`` onto ``graph`` one type at a time, best position first.

    Guaranteed types are placed before the rest; remaining types follow in the
    given order. Each type takes the unassigned room with the highest score,
    the earliest room in graph order winning ties. This is a single greedy
    pass, not an optimal assignment.
    """
    archetype = Archetype.from_name(archetype)
    min_y, total_decks = deck_layout(graph)
    result = AssignmentResult(archetype=archetype, total_decks=total_decks, sampled_types=list(room_types))

    remaining = list(room_types)
    ordered: List[RoomType] = []
    for room_type in guaranteed:
        if room_type in remaining:
            remaining.remove(room_type)
            ordered.append(room_type)
    ordered.extend(remaining)

    unassigned: List[RoomNode] = [room for room in graph.rooms if room.room_type is None]
    for room_type in ordered:
        if not unassigned:
            result.dropped_types.append(room_type)
            continue
        best_room: Optional[RoomNode] = None
        best_score = 0
        for room in unassigned:
            score = placement_score(graph, room, room_type, archetype, min_y, total_decks)
            if best_room is None or score > best_score:
                best_room, best_score = room, score
        assert best_room is not None
        best_room.assign_type(room_type)
        result.assignments[best_room.id] = room_type
        unassigned.remove(best_room)

    if result.dropped_types:
        logger.warning(
            "Dropped %d room types with no free position: %s",
            len(result.dropped_types),
            ", ".join(room_type.label for room_type in result.dropped_types),
        )
    return result


class RoomTypeAssigner:
    """Samples types for an archetype and assigns them to a graph."""

    def __init__(
        self,
        sampler: RoomTypeSampler,
        archetype: str | Archetype | None = Archetype.DEFAULT,
        guaranteed: Optional[Sequence[RoomType]] = None,
    ) -> None:
        self.sampler = sampler
        self.archetype = Archetype.from_name(archetype)
        self.guaranteed = tuple(guaranteed) if guaranteed is not None else DEFAULT_GUARANTEED_TYPES

    def assign(self, graph: DungeonGraph) -> AssignmentResult:
        count = len(graph.rooms)
        room_types = self.sampler.sample_types(self.archetype, count, self.guaranteed)
        guaranteed = prepare_guaranteed(self.guaranteed, count)
        logger.debug(
            "Assigning %d types for %s (%d guaranteed)", count, self.archetype.value, len(guaranteed)
        )
        return assign_types(graph, room_types, self.archetype, guaranteed)
