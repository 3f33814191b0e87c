"""Secondary-link phase: add loop-forming links between adjacent, unlinked rooms."""

from __future__ import annotations

import logging

from dungeon_models import LinkKind

from .base import PhaseContext

logger = logging.getLogger(__name__)


def run_secondary_links_phase(context: PhaseContext) -> int:
    """Add between ``min_secondary_links`` and ``max_secondary_links`` links; return the count added."""
    config = context.config
    graph = context.graph
    if not graph.rooms:
        return 0

    target = context.rng.next_int(config.min_secondary_links, config.max_secondary_links)
    added = 0
    failures = 0
    while added < target and failures < config.max_placement_attempts:
        if not graph.has_unlinked_adjacent_pair():
            break
        room = context.choose(graph.rooms)
        options = graph.unlinked_grid_neighbors(room.id)
        if not options:
            failures += 1
            continue
        other = context.choose(options)
        graph.add_link(room.id, other.id, LinkKind.SECONDARY)
        added += 1
        failures = 0

    if added < target:
        logger.debug("Secondary links: added %d of %d requested", added, target)
    return added
