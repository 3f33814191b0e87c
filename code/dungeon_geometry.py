"""Geometry helpers for working with grid cells and cardinal directions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Tuple


class Direction(Enum):
    """Cardinal directions with unit vectors on the cell grid.

    Declaration order (N, E, S, W) is the order every generation phase scans
    neighbours in, so it is part of the reproducibility contract.
    """

    NORTH = (0, -1)
    EAST = (1, 0)
    SOUTH = (0, 1)
    WEST = (-1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @property
    def is_horizontal(self) -> bool:
        return self.dy == 0

    def opposite(self) -> Direction:
        return Direction.from_tuple((-self.dx, -self.dy))

    @classmethod
    def from_tuple(cls, value: Tuple[int, int]) -> Direction:
        try:
            return cls(tuple(value))
        except ValueError as exc:
            raise ValueError(f"Unsupported direction {value}") from exc

    @classmethod
    def between(cls, start: GridPos, end: GridPos) -> Direction:
        """Direction of the single step from ``start`` to an adjacent ``end``."""
        return cls.from_tuple((end.x - start.x, end.y - start.y))


CARDINAL_DIRECTIONS: Tuple[Direction, ...] = tuple(Direction)


@dataclass(frozen=True, order=True)
class GridPos:
    """Integer cell coordinate."""

    x: int
    y: int

    def __iter__(self) -> Iterator[int]:
        yield self.x
        yield self.y

    def to_tuple(self) -> Tuple[int, int]:
        return self.x, self.y

    @classmethod
    def from_tuple(cls, value: Tuple[int, int]) -> GridPos:
        return cls(*value)

    def neighbor(self, direction: Direction) -> GridPos:
        return GridPos(self.x + direction.dx, self.y + direction.dy)

    def neighbors(self) -> Iterator[Tuple[Direction, GridPos]]:
        for direction in CARDINAL_DIRECTIONS:
            yield direction, self.neighbor(direction)

    def manhattan(self, other: GridPos) -> int:
        return abs(self.x - other.x) + abs(self.y - other.y)

    def is_adjacent(self, other: GridPos) -> bool:
        return self.manhattan(other) == 1


def sign(value: int) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0
