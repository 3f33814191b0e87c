"""Dice helpers built on top of the run's seeded PRNG."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Tuple

from prng import PRNG

_NOTATION_PATTERN = re.compile(r"^\s*(\d*)\s*[dD]\s*(\d+)\s*(?:([+-])\s*(\d+))?\s*$")


@dataclass(frozen=True)
class DiceRollResult:
    """Total of a roll together with the individual die faces."""

    total: int
    rolls: Tuple[int, ...]


class Dice:
    """Rolls polyhedral dice using an explicitly supplied generator."""

    def __init__(self, rng: PRNG) -> None:
        self.rng = rng

    def roll(self, sides: int, quantity: int = 1) -> DiceRollResult:
        if sides < 1:
            raise ValueError(f"Dice must have at least one side, got {sides}")
        if quantity < 1:
            raise ValueError(f"Must roll at least one die, got {quantity}")
        rolls = tuple(self.rng.next_int(1, sides) for _ in range(quantity))
        return DiceRollResult(total=sum(rolls), rolls=rolls)

    def d(self, sides: int) -> int:
        """Roll a single die and return its face."""
        return self.roll(sides).total

    def roll_notation(self, notation: str) -> DiceRollResult:
        """Roll dice described as ``NdS``, ``dS`` or ``NdS+M`` / ``NdS-M``.

        The modifier is folded into ``total``; ``rolls`` keeps the raw faces.
        """
        quantity, sides, modifier = parse_notation(notation)
        result = self.roll(sides, quantity)
        return DiceRollResult(total=result.total + modifier, rolls=result.rolls)


def parse_notation(notation: str) -> Tuple[int, int, int]:
    """Split dice notation into ``(quantity, sides, modifier)``."""
    match = _NOTATION_PATTERN.match(notation)
    if match is None:
        raise ValueError(f"Invalid dice notation {notation!r}")
    quantity_text, sides_text, sign, modifier_text = match.groups()
    quantity = int(quantity_text) if quantity_text else 1
    sides = int(sides_text)
    modifier = int(modifier_text) if modifier_text else 0
    if sign == "-":
        modifier = -modifier
    if quantity < 1 or sides < 1:
        raise ValueError(f"Invalid dice notation {notation!r}")
    return quantity, sides, modifier
