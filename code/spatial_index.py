"""Spatial index for tracking which room occupies each grid cell."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Dict, Optional, Tuple

from dungeon_geometry import Direction, GridPos


class SpatialIndex:
    """Caches cell occupancy to accelerate neighbour lookups."""

    def __init__(self) -> None:
        self._cell_to_room: Dict[GridPos, int] = {}

    def __len__(self) -> int:
        return len(self._cell_to_room)

    def __contains__(self, pos: object) -> bool:
        return pos in self._cell_to_room

    def add_room(self, room_id: int, pos: GridPos) -> None:
        """Record ``pos`` as occupied by ``room_id``."""
        existing = self._cell_to_room.get(pos)
        if existing is not None and existing != room_id:
            raise ValueError(f"Cell {pos.to_tuple()} already holds room {existing}")
        self._cell_to_room[pos] = room_id

    def remove_room(self, room_id: int, pos: GridPos) -> None:
        """Remove the cell entry if it still maps to ``room_id``."""
        if self._cell_to_room.get(pos) == room_id:
            self._cell_to_room.pop(pos, None)

    def room_at(self, pos: GridPos) -> Optional[int]:
        return self._cell_to_room.get(pos)

    def is_occupied(self, pos: GridPos) -> bool:
        return pos in self._cell_to_room

    def neighbors(self, pos: GridPos) -> Iterator[Tuple[Direction, int]]:
        """Yield ``(direction, room_id)`` for occupied cells next to ``pos`` in N, E, S, W order."""
        for direction, cell in pos.neighbors():
            room_id = self._cell_to_room.get(cell)
            if room_id is not None:
                yield direction, room_id
