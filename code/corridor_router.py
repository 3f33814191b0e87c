"""Turns graph links into drawable waypoint lists using the walkability grid."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from dungeon_geometry import GridPos, sign
from dungeon_graph import DungeonGraph
from dungeon_models import LinkKind, RoomLink, RoomNode
from path_grid import WalkabilityGrid
from pathfinder import DEFAULT_PATH_COSTS, PathCostConfig, find_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LinkRoute:
    """Waypoints for one link; empty waypoints mean the caller should fall back to a straight line."""

    link: RoomLink
    waypoints: Tuple[GridPos, ...]

    @property
    def routed(self) -> bool:
        return bool(self.waypoints)


def connection_candidates(room: GridPos, toward: GridPos) -> List[GridPos]:
    """Cells next to ``room`` ordered: facing ``toward``, the two perpendicular sides, then behind."""
    sx = sign(toward.x - room.x)
    sy = sign(toward.y - room.y)
    if abs(toward.x - room.x) >= abs(toward.y - room.y):
        primary = (sx if sx else 1, 0)
        sides = [(0, sy if sy else 1), (0, -sy if sy else -1)]
    else:
        primary = (0, sy if sy else 1)
        sides = [(sx if sx else 1, 0), (-sx if sx else -1, 0)]
    offsets = [primary, *sides, (-primary[0], -primary[1])]

    candidates: List[GridPos] = []
    for ox, oy in offsets:
        cell = GridPos(room.x + ox, room.y + oy)
        if cell not in candidates:
            candidates.append(cell)
    return candidates


def connection_point(grid: WalkabilityGrid, room: GridPos, toward: GridPos) -> Optional[GridPos]:
    """First walkable candidate next to ``room``, else the nearest walkable cell anywhere."""
    for cell in connection_candidates(room, toward):
        if grid.is_walkable(cell):
            return cell
    return grid.nearest_walkable(room)


def route_link(
    graph: DungeonGraph,
    grid: WalkabilityGrid,
    link: RoomLink,
    costs: PathCostConfig = DEFAULT_PATH_COSTS,
) -> LinkRoute:
    """Door links run straight between the two rooms; secondary links go around via A*."""
    source: RoomNode = graph.get_room(link.source_id)
    target: RoomNode = graph.get_room(link.target_id)
    if link.kind is LinkKind.DOOR:
        return LinkRoute(link, (source.pos, target.pos))

    start = connection_point(grid, source.pos, target.pos)
    goal = connection_point(grid, target.pos, source.pos)
    if start is None or goal is None:
        logger.warning("No walkable connection cell for link %s", link.key())
        return LinkRoute(link, ())

    path = find_path(grid, start, goal, costs)
    if not path:
        logger.warning("No corridor route for link %s", link.key())
        return LinkRoute(link, ())
    return LinkRoute(link, (source.pos, *path, target.pos))


def route_links(
    graph: DungeonGraph,
    grid: WalkabilityGrid,
    costs: PathCostConfig = DEFAULT_PATH_COSTS,
) -> List[LinkRoute]:
    return [route_link(graph, grid, link, costs) for link in graph.links]
