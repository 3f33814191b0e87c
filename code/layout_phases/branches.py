"""Branch phase: attach side rooms to random existing rooms."""

from __future__ import annotations

import logging
from typing import List

from dungeon_geometry import GridPos
from dungeon_models import BranchClass, LinkKind

from .base import PhaseContext

logger = logging.getLogger(__name__)


def run_branch_phase(context: PhaseContext) -> int:
    """Grow branch rooms until the room target is met; return rooms added.

    A candidate cell must be free and touch at most one existing branch room,
    so branches stay thin instead of clumping. The phase gives up after
    ``max_placement_attempts`` consecutive picks without a candidate.
    """
    config = context.config
    graph = context.graph
    added = 0
    failures = 0

    while len(graph.rooms) < config.num_rooms and failures < config.max_placement_attempts:
        source = context.choose(graph.rooms)
        candidates = _branch_candidates(context, source.pos)
        if not candidates:
            failures += 1
            continue

        cell = context.choose(candidates)
        room = graph.add_room(cell.x, cell.y, BranchClass.BRANCH)
        graph.add_link(source.id, room.id, LinkKind.DOOR)
        added += 1
        failures = 0

    if len(graph.rooms) < config.num_rooms:
        logger.debug(
            "Branch phase gave up after %d consecutive failures with %d/%d rooms",
            failures,
            len(graph.rooms),
            config.num_rooms,
        )
    return added


def _branch_candidates(context: PhaseContext, pos: GridPos) -> List[GridPos]:
    return [
        cell
        for cell in context.free_neighbors(pos)
        if context.graph.count_adjacent(cell, BranchClass.BRANCH) <= 1
    ]
