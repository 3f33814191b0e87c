"""Data container for the room graph produced by layout generation."""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Set, Tuple

from dungeon_geometry import GridPos
from dungeon_models import BranchClass, LinkKind, RoomLink, RoomNode, RoomType
from spatial_index import SpatialIndex


class DungeonGraph:
    """Stores rooms and links, enforcing one room per cell and adjacent-only links."""

    def __init__(self) -> None:
        self.rooms: List[RoomNode] = []
        self.links: List[RoomLink] = []
        self.spatial_index = SpatialIndex()
        self._rooms_by_id: Dict[int, RoomNode] = {}
        self._link_keys: Set[Tuple[int, int]] = set()
        self._adjacency: Dict[int, List[int]] = {}

    def __len__(self) -> int:
        return len(self.rooms)

    @property
    def next_room_id(self) -> int:
        return len(self.rooms)

    def add_room(
        self,
        x: int,
        y: int,
        branch_class: BranchClass = BranchClass.MAIN,
        room_type: Optional[RoomType] = None,
    ) -> RoomNode:
        pos = GridPos(x, y)
        if self.spatial_index.is_occupied(pos):
            raise ValueError(f"Cell {pos.to_tuple()} is already occupied")
        room = RoomNode(id=self.next_room_id, x=x, y=y, branch_class=branch_class, room_type=room_type)
        self.rooms.append(room)
        self._rooms_by_id[room.id] = room
        self._adjacency[room.id] = []
        self.spatial_index.add_room(room.id, pos)
        return room

    def add_link(self, source_id: int, target_id: int, kind: LinkKind = LinkKind.DOOR) -> RoomLink:
        source = self.get_room(source_id)
        target = self.get_room(target_id)
        if source_id == target_id:
            raise ValueError(f"Room {source_id} cannot link to itself")
        if not source.pos.is_adjacent(target.pos):
            raise ValueError(
                f"Rooms {source_id} at {source.pos.to_tuple()} and {target_id} at "
                f"{target.pos.to_tuple()} are not grid-adjacent"
            )
        link = RoomLink(source_id, target_id, kind)
        if link.key() in self._link_keys:
            raise ValueError(f"Rooms {source_id} and {target_id} are already linked")
        self.links.append(link)
        self._link_keys.add(link.key())
        self._adjacency[source_id].append(target_id)
        self._adjacency[target_id].append(source_id)
        return link

    def get_room(self, room_id: int) -> RoomNode:
        room = self._rooms_by_id.get(room_id)
        if room is None:
            raise KeyError(f"Unknown room id {room_id}")
        return room

    def room_at(self, pos: GridPos) -> Optional[RoomNode]:
        room_id = self.spatial_index.room_at(pos)
        return self._rooms_by_id[room_id] if room_id is not None else None

    def is_occupied(self, pos: GridPos) -> bool:
        return self.spatial_index.is_occupied(pos)

    def has_link(self, room_a_id: int, room_b_id: int) -> bool:
        key = (room_a_id, room_b_id) if room_a_id <= room_b_id else (room_b_id, room_a_id)
        return key in self._link_keys

    def linked_neighbors(self, room_id: int) -> List[int]:
        """Ids of rooms connected to ``room_id`` by any link, in link order."""
        return list(self._adjacency.get(room_id, ()))

    def grid_neighbors(self, room_id: int) -> List[RoomNode]:
        """Rooms occupying the cells next to ``room_id`` in N, E, S, W order."""
        room = self.get_room(room_id)
        return [self._rooms_by_id[other] for _, other in self.spatial_index.neighbors(room.pos)]

    def count_adjacent(self, pos: GridPos, branch_class: BranchClass) -> int:
        """Count rooms of ``branch_class`` occupying the cells next to ``pos``."""
        return sum(
            1
            for _, room_id in self.spatial_index.neighbors(pos)
            if self._rooms_by_id[room_id].branch_class is branch_class
        )

    def unlinked_grid_neighbors(self, room_id: int) -> List[RoomNode]:
        return [other for other in self.grid_neighbors(room_id) if not self.has_link(room_id, other.id)]

    def has_unlinked_adjacent_pair(self) -> bool:
        return any(self.unlinked_grid_neighbors(room.id) for room in self.rooms)

    def iter_link_endpoints(self) -> Iterator[Tuple[RoomLink, RoomNode, RoomNode]]:
        for link in self.links:
            yield link, self._rooms_by_id[link.source_id], self._rooms_by_id[link.target_id]

    def bounds(self) -> Optional[Tuple[int, int, int, int]]:
        """Return ``(min_x, min_y, max_x, max_y)`` inclusive, or None when empty."""
        if not self.rooms:
            return None
        xs = [room.x for room in self.rooms]
        ys = [room.y for room in self.rooms]
        return min(xs), min(ys), max(xs), max(ys)

    def to_dict(self) -> Dict[str, object]:
        return {
            "rooms": [room.to_dict() for room in self.rooms],
            "links": [link.to_dict() for link in self.links],
        }
