"""Diagnostic checks for generated room graphs. Nothing here repairs a graph."""

from __future__ import annotations

from collections import Counter
from typing import Dict, List, Set

from dungeon_geometry import GridPos
from dungeon_graph import DungeonGraph


def reachable_room_ids(graph: DungeonGraph, root_id: int) -> Set[int]:
    """Ids reachable from ``root_id`` following links in either direction."""
    adjacency: Dict[int, List[int]] = {room.id: [] for room in graph.rooms}
    for link in graph.links:
        if link.source_id in adjacency and link.target_id in adjacency:
            adjacency[link.source_id].append(link.target_id)
            adjacency[link.target_id].append(link.source_id)

    visited: Set[int] = set()
    stack = [root_id]
    while stack:
        room_id = stack.pop()
        if room_id in visited:
            continue
        visited.add(room_id)
        stack.extend(other for other in adjacency.get(room_id, ()) if other not in visited)
    return visited


def validate_graph(graph: DungeonGraph) -> bool:
    """True iff every room is reachable from ``rooms[0]``. An empty graph is valid."""
    if not graph.rooms:
        return True
    visited = reachable_room_ids(graph, graph.rooms[0].id)
    return len(visited) == len({room.id for room in graph.rooms})


def find_integrity_issues(graph: DungeonGraph) -> List[str]:
    """Describe dangling links, shared cells and non-adjacent links; empty when clean."""
    issues: List[str] = []
    room_ids = {room.id for room in graph.rooms}
    positions: Dict[int, GridPos] = {room.id: room.pos for room in graph.rooms}

    for link in graph.links:
        missing = [room_id for room_id in (link.source_id, link.target_id) if room_id not in room_ids]
        if missing:
            issues.append(f"Link {link.key()} references missing rooms {missing}")
            continue
        if not positions[link.source_id].is_adjacent(positions[link.target_id]):
            issues.append(f"Link {link.key()} joins rooms that are not grid-adjacent")

    cell_counts = Counter(room.pos for room in graph.rooms)
    for pos, count in sorted(cell_counts.items()):
        if count > 1:
            issues.append(f"Cell {pos.to_tuple()} holds {count} rooms")

    id_counts = Counter(room.id for room in graph.rooms)
    for room_id, count in sorted(id_counts.items()):
        if count > 1:
            issues.append(f"Room id {room_id} is used {count} times")
    return issues
