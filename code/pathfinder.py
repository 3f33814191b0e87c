"""Cost-biased A* search that prefers long straight corridors over short twisty ones."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Set

from dungeon_geometry import CARDINAL_DIRECTIONS, Direction, GridPos
from path_grid import WalkabilityGrid

OCTILE_FACTOR = math.sqrt(2) - 2


@dataclass(frozen=True)
class PathCostConfig:
    """Step-cost tuning for :func:`find_path`."""

    base_cost: float = 1.0
    turn_penalty: float = 10.0
    straight_bonus: float = 0.25
    off_axis_penalty: float = 5.0
    alignment_bonus_scale: float = 0.05
    max_alignment_bonus: float = 0.5


DEFAULT_PATH_COSTS = PathCostConfig()
UNIFORM_PATH_COSTS = PathCostConfig(
    turn_penalty=0.0,
    straight_bonus=0.0,
    off_axis_penalty=0.0,
    alignment_bonus_scale=0.0,
    max_alignment_bonus=0.0,
)


@dataclass
class PathNode:
    pos: GridPos
    g: float
    h: float
    parent: Optional[PathNode] = None
    direction: Optional[Direction] = None

    @property
    def f(self) -> float:
        return self.g + self.h


def heuristic(pos: GridPos, goal: GridPos) -> float:
    """Octile-style estimate. Overestimates for 4-way movement, which favours fewer expansions."""
    dx = abs(goal.x - pos.x)
    dy = abs(goal.y - pos.y)
    return dx + dy + OCTILE_FACTOR * min(dx, dy)


def step_cost(node: PathNode, direction: Direction, goal: GridPos, costs: PathCostConfig) -> float:
    dx = goal.x - node.pos.x
    dy = goal.y - node.pos.y
    cost = costs.base_cost

    if node.direction is not None:
        if direction is not node.direction:
            cost += costs.turn_penalty
        else:
            cost -= costs.straight_bonus

    x_dominant = abs(dx) >= abs(dy)
    major, minor = (abs(dx), abs(dy)) if x_dominant else (abs(dy), abs(dx))
    if direction.is_horizontal != x_dominant:
        penalty = costs.off_axis_penalty
        if major > 2 * minor:
            penalty *= 2
        cost += penalty
    else:
        offset = dx if x_dominant else dy
        step = direction.dx if x_dominant else direction.dy
        if offset * step > 0:
            cost -= min(costs.max_alignment_bonus, costs.alignment_bonus_scale * abs(offset))
    return cost


def find_path(
    grid: WalkabilityGrid,
    start: GridPos,
    goal: GridPos,
    costs: PathCostConfig = DEFAULT_PATH_COSTS,
    max_iterations: Optional[int] = None,
) -> List[GridPos]:
    """Return the cells from ``start`` to ``goal`` inclusive, or ``[]`` when unreachable.

    The open list is re-sorted by ``(f, h)`` every iteration; nodes are
    closed on first pop and never reopened. An empty result is a normal
    outcome, not an error.
    """
    if not grid.is_walkable(start) or not grid.is_walkable(goal):
        return []

    open_nodes: List[PathNode] = [PathNode(start, 0.0, heuristic(start, goal))]
    open_by_pos: Dict[GridPos, PathNode] = {start: open_nodes[0]}
    closed: Set[GridPos] = set()
    iterations = 0

    while open_nodes:
        if max_iterations is not None and iterations >= max_iterations:
            return []
        iterations += 1

        open_nodes.sort(key=lambda node: (node.f, node.h))
        current = open_nodes.pop(0)
        del open_by_pos[current.pos]

        if current.pos == goal:
            return _reconstruct(current)
        closed.add(current.pos)

        for direction in CARDINAL_DIRECTIONS:
            cell = current.pos.neighbor(direction)
            if cell in closed or not grid.is_walkable(cell):
                continue
            g = current.g + step_cost(current, direction, goal, costs)
            existing = open_by_pos.get(cell)
            if existing is None:
                node = PathNode(cell, g, heuristic(cell, goal), current, direction)
                open_nodes.append(node)
                open_by_pos[cell] = node
            elif g < existing.g:
                existing.g = g
                existing.parent = current
                existing.direction = direction

    return []


def _reconstruct(node: PathNode) -> List[GridPos]:
    path: List[GridPos] = []
    current: Optional[PathNode] = node
    while current is not None:
        path.append(current.pos)
        current = current.parent
    path.reverse()
    return path


def count_turns(path: List[GridPos]) -> int:
    """Number of direction changes along a path of adjacent cells."""
    turns = 0
    previous: Optional[Direction] = None
    for start, end in zip(path, path[1:]):
        direction = Direction.between(start, end)
        if previous is not None and direction is not previous:
            turns += 1
        previous = direction
    return turns
