"""Deck-row phase: lay out a ship as one contiguous row of rooms per deck."""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from dungeon_constants import SHIP_SPINE_X, SHIP_WIDTH
from dungeon_geometry import GridPos
from dungeon_graph import DungeonGraph
from dungeon_models import BranchClass, LinkKind, RoomNode

from .base import PhaseContext

logger = logging.getLogger(__name__)


def deck_start_range(rooms_on_deck: int) -> Tuple[int, int]:
    """Inclusive range of start columns that keep the row in bounds and on the spine."""
    min_start = max(0, SHIP_SPINE_X - (rooms_on_deck - 1))
    max_start = min(SHIP_WIDTH - rooms_on_deck, SHIP_SPINE_X)
    return min_start, max_start


def run_deck_rows_phase(context: PhaseContext) -> int:
    """Place every deck row and return the number of rooms placed.

    Rooms within a row are chained to their left neighbour, and every room
    gets a door to the room directly above it when that cell is occupied.
    Rows always cover the spine column, so the decks stay connected.
    """
    config = context.config
    graph = context.graph
    if config.rooms_per_deck is None:
        raise ValueError("Deck rows require rooms_per_deck")

    placed = 0
    for deck, requested in enumerate(config.rooms_per_deck):
        rooms_on_deck = min(requested, SHIP_WIDTH)
        if rooms_on_deck < requested:
            logger.warning(
                "Deck %d requested %d rooms; capped at ship width %d", deck, requested, SHIP_WIDTH
            )
        min_start, max_start = deck_start_range(rooms_on_deck)
        if min_start == max_start:
            start = min_start
        else:
            start = min_start + context.dice.d(max_start - min_start + 1) - 1

        above_row = [room for room in graph.rooms if room.y == deck - 1]
        left: RoomNode | None = None
        for column in range(start, start + rooms_on_deck):
            room = graph.add_room(column, deck, BranchClass.DECK)
            placed += 1
            if left is not None:
                graph.add_link(left.id, room.id, LinkKind.DOOR)
            above = _room_above(graph, room, above_row)
            if above is not None:
                graph.add_link(above.id, room.id, LinkKind.DOOR)
            left = room

    return placed


def _room_above(graph: DungeonGraph, room: RoomNode, above_row: List[RoomNode]) -> Optional[RoomNode]:
    """Room on the previous deck to link ``room`` to, if any.

    The room directly above wins. Rooms within one column of the spine
    otherwise fall back to the row's room closest to the spine, which only
    counts when it is grid-adjacent.
    """
    directly_above = graph.room_at(GridPos(room.x, room.y - 1))
    if directly_above is not None:
        return directly_above
    if abs(room.x - SHIP_SPINE_X) > 1 or not above_row:
        return None
    nearest = min(above_row, key=lambda other: abs(other.x - SHIP_SPINE_X))
    return nearest if nearest.pos.is_adjacent(room.pos) else None
