"""Shared constants for layout generation, type assignment and routing."""

from __future__ import annotations

RANDOM_SEED = None  # Set to a number for reproducible behavior (for debugging); None picks a fresh seed per run.

DEFAULT_CELL_SIZE = 48
DEFAULT_DUNGEON_WIDTH = 20
DEFAULT_DUNGEON_HEIGHT = 20

# Branching factor is capped when sizing the main path so it always keeps a third of the rooms.
MAX_BRANCHING_FACTOR = 0.67
MIN_MAIN_PATH_ROOMS = 2
# Fraction of room count used as the default upper bound on secondary links.
SECONDARY_LINK_RATIO = 0.3
# A layout with fewer than this fraction of the requested rooms is reported as undersized.
UNDERSIZED_ROOM_RATIO = 0.5

MAX_PLACEMENT_ATTEMPTS = 40  # Consecutive failed attempts before a phase gives up.

SHIP_WIDTH = 11
SHIP_SPINE_X = 5
SHIP_DEFAULT_DECK_DICE = "1d6+2"

# Zone thresholds as fractions of the deck count.
UPPER_DECK_FRACTION = 0.33
LOWER_DECK_FRACTION = 0.67

# Resample budget per requested slot when a unique type keeps colliding.
SAMPLING_ATTEMPTS_PER_SLOT = 64
