import sys
from pathlib import Path
from typing import Callable, Iterable, Tuple

import pytest

ROOT_DIR = Path(__file__).resolve().parent.parent
CODE_DIR = ROOT_DIR / "code"
if str(CODE_DIR) not in sys.path:
    sys.path.insert(0, str(CODE_DIR))

from dungeon_config import GenerationConfig
from dungeon_graph import DungeonGraph
from dungeon_models import BranchClass, LinkKind
from layout_phases.base import PhaseContext
from prng import PRNG


@pytest.fixture
def dungeon_config() -> GenerationConfig:
    return GenerationConfig(
        num_rooms=6,
        width=10,
        height=10,
        branching_factor=0.5,
        directional_bias=0.7,
        min_secondary_links=1,
        seed=42,
        assign_room_types=False,
    )


@pytest.fixture
def make_graph() -> Callable[..., DungeonGraph]:
    """Build a graph from room cells and ``(source, target[, kind])`` link tuples."""

    def _make_graph(
        cells: Iterable[Tuple[int, int]],
        links: Iterable[tuple] = (),
        branch_class: BranchClass = BranchClass.MAIN,
    ) -> DungeonGraph:
        graph = DungeonGraph()
        for x, y in cells:
            graph.add_room(x, y, branch_class)
        for link in links:
            source, target, *rest = link
            graph.add_link(source, target, rest[0] if rest else LinkKind.DOOR)
        return graph

    return _make_graph


@pytest.fixture
def make_context() -> Callable[..., PhaseContext]:
    def _make_context(config: GenerationConfig, graph: DungeonGraph | None = None, seed: int = 1) -> PhaseContext:
        return PhaseContext(config=config, graph=graph if graph is not None else DungeonGraph(), rng=PRNG(seed))

    return _make_context
