"""Timing and growth records for the phases of one generation run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass(frozen=True)
class PhaseRun:
    """One phase execution and how the graph looked once it finished."""

    name: str
    duration: float
    rooms_added: int
    links_added: int
    rooms_total: int
    links_total: int

    def to_dict(self) -> Dict[str, float | int]:
        return {
            "duration": self.duration,
            "rooms_added": self.rooms_added,
            "links_added": self.links_added,
            "rooms_total": self.rooms_total,
            "links_total": self.links_total,
        }


@dataclass
class GenerationMetrics:
    """Phase runs in execution order."""

    runs: List[PhaseRun] = field(default_factory=list)

    def record_phase_run(
        self,
        name: str,
        duration: float,
        rooms_added: int,
        links_added: int,
        rooms_total: int,
        links_total: int,
    ) -> PhaseRun:
        run = PhaseRun(name, duration, rooms_added, links_added, rooms_total, links_total)
        self.runs.append(run)
        return run

    @property
    def total_time(self) -> float:
        return sum(run.duration for run in self.runs)

    def slowest(self) -> Optional[PhaseRun]:
        return max(self.runs, key=lambda run: run.duration, default=None)

    def snapshot(self) -> Dict[str, Dict[str, float | int]]:
        """Per-phase values keyed by name; a repeated phase sums its durations and deltas."""
        merged: Dict[str, Dict[str, float | int]] = {}
        for run in self.runs:
            values = run.to_dict()
            previous = merged.get(run.name)
            if previous is not None:
                for key in ("duration", "rooms_added", "links_added"):
                    values[key] += previous[key]
            merged[run.name] = values
        return merged
