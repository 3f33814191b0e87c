"""Walkability grid derived from a room graph, used for corridor routing."""

from __future__ import annotations

from collections import deque
from typing import Iterator, List, Optional, Tuple

from dungeon_config import GenerationConfig, LayoutVariant
from dungeon_constants import DEFAULT_CELL_SIZE, SHIP_WIDTH
from dungeon_geometry import GridPos
from dungeon_graph import DungeonGraph


class WalkabilityGrid:
    """Width x height boolean grid; a cell is walkable when nothing occupies it."""

    def __init__(self, width: int, height: int, cell_size: int = DEFAULT_CELL_SIZE) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("WalkabilityGrid width and height must be positive")
        self.width = width
        self.height = height
        self.cell_size = cell_size
        self._cells: List[List[bool]] = [[True for _ in range(width)] for _ in range(height)]

    def in_bounds(self, pos: GridPos) -> bool:
        return 0 <= pos.x < self.width and 0 <= pos.y < self.height

    def is_walkable(self, pos: GridPos) -> bool:
        return self.in_bounds(pos) and self._cells[pos.y][pos.x]

    def block(self, pos: GridPos) -> None:
        if self.in_bounds(pos):
            self._cells[pos.y][pos.x] = False

    def walkable_cells(self) -> Iterator[GridPos]:
        for y, row in enumerate(self._cells):
            for x, walkable in enumerate(row):
                if walkable:
                    yield GridPos(x, y)

    def nearest_walkable(self, pos: GridPos, max_radius: Optional[int] = None) -> Optional[GridPos]:
        """Breadth-first search outward from ``pos`` for the closest walkable cell."""
        if self.is_walkable(pos):
            return pos
        if not self.in_bounds(pos):
            return None
        seen = {pos}
        queue = deque([(pos, 0)])
        while queue:
            current, distance = queue.popleft()
            if max_radius is not None and distance >= max_radius:
                continue
            for _, cell in current.neighbors():
                if cell in seen or not self.in_bounds(cell):
                    continue
                if self.is_walkable(cell):
                    return cell
                seen.add(cell)
                queue.append((cell, distance + 1))
        return None

    def to_rows(self) -> List[str]:
        """ASCII rows, ``.`` for walkable and ``#`` for blocked cells."""
        return ["".join("." if cell else "#" for cell in row) for row in self._cells]


def grid_dimensions(config: GenerationConfig) -> Tuple[int, int]:
    if config.variant is LayoutVariant.SHIP:
        return SHIP_WIDTH, config.deck_count
    return config.width, config.height


def build_walkability_grid(
    graph: DungeonGraph,
    width: int,
    height: int,
    cell_size: int = DEFAULT_CELL_SIZE,
) -> WalkabilityGrid:
    """Block every room cell and every cell spanned by an axis-aligned link."""
    grid = WalkabilityGrid(width, height, cell_size)
    for room in graph.rooms:
        grid.block(room.pos)
    for _, source, target in graph.iter_link_endpoints():
        if source.x == target.x:
            for y in range(min(source.y, target.y), max(source.y, target.y) + 1):
                grid.block(GridPos(source.x, y))
        elif source.y == target.y:
            for x in range(min(source.x, target.x), max(source.x, target.x) + 1):
                grid.block(GridPos(x, source.y))
    return grid
