"""Main-path phase: a self-avoiding walk from the grid anchor."""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from dungeon_geometry import Direction, GridPos
from dungeon_models import BranchClass, LinkKind

from .base import PhaseContext

logger = logging.getLogger(__name__)


def run_main_path_phase(context: PhaseContext) -> int:
    """Lay the main path and return the number of rooms placed.

    Each step extends from the newest room into a free neighbour that touches
    at most one existing main-path room, which keeps the path one cell wide.
    With probability ``directional_bias`` the walk keeps its previous heading.
    """
    config = context.config
    graph = context.graph
    if graph.rooms:
        raise ValueError("Main path must be laid on an empty graph")

    target = min(config.main_path_rooms, config.num_rooms)
    anchor = GridPos(*config.anchor)
    current = graph.add_room(anchor.x, anchor.y, BranchClass.MAIN)
    last_direction: Optional[Direction] = None

    while len(graph.rooms) < target:
        candidates = _main_path_candidates(context, current.pos)
        if not candidates:
            logger.debug(
                "Main path stopped at %d/%d rooms: no free cell next to room %d",
                len(graph.rooms),
                target,
                current.id,
            )
            break

        chosen: Optional[Tuple[Direction, GridPos]] = None
        if last_direction is not None and context.rng.next() < config.directional_bias:
            chosen = next((item for item in candidates if item[0] is last_direction), None)
        if chosen is None:
            chosen = context.choose(candidates)

        direction, cell = chosen
        room = graph.add_room(cell.x, cell.y, BranchClass.MAIN)
        graph.add_link(current.id, room.id, LinkKind.DOOR)
        current = room
        last_direction = direction

    return len(graph.rooms)


def _main_path_candidates(context: PhaseContext, pos: GridPos) -> List[Tuple[Direction, GridPos]]:
    return [
        (direction, cell)
        for direction, cell in pos.neighbors()
        if context.is_free(cell) and context.graph.count_adjacent(cell, BranchClass.MAIN) <= 1
    ]
