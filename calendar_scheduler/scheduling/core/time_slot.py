"""
Time slot representation for the scheduling system.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Tuple

from .exceptions import SchedulingValidationError


@dataclass(frozen=True, order=True)
class TimeSlot:
    """
    A candidate placement. Produced fresh per scheduling request and never persisted;
    ordering is by start, then end.
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.end <= self.start:
            raise SchedulingValidationError(
                f"Slot end {self.end.isoformat()} must be after start {self.start.isoformat()}"
            )

    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def duration_minutes(self) -> int:
        return int(self.duration().total_seconds() // 60)

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return self.start < end and self.end > start

    def __repr__(self):
        return f"TimeSlot({self.start.strftime('%a %d %b %I:%M %p')} - {self.end.strftime('%I:%M %p')})"


@dataclass(frozen=True)
class ScoreBreakdown:
    """Component scores (0-100 each) and their weighted total."""
    constraint_score: float = 0.0
    energy_score: float = 0.0
    timing_score: float = 0.0
    balance_score: float = 0.0
    total_score: float = 0.0

    def as_dict(self) -> dict:
        return {
            "constraint_score": self.constraint_score,
            "energy_score": self.energy_score,
            "timing_score": self.timing_score,
            "balance_score": self.balance_score,
            "total_score": self.total_score,
        }


@dataclass(frozen=True)
class Penalty:
    name: str
    penalty: float


@dataclass(frozen=True)
class ScoredSlot(TimeSlot):
    """
    A TimeSlot with its score and explanation.
    A hard-rejected slot keeps score 0, an all-zero breakdown and its violations.
    """
    score: float = 0.0
    breakdown: ScoreBreakdown = field(default_factory=ScoreBreakdown)
    violations: Tuple[str, ...] = ()
    penalties: Tuple[Penalty, ...] = ()

    @property
    def is_admissible(self) -> bool:
        return not self.violations

    def __repr__(self):
        status = f"score={self.score:.1f}" if self.is_admissible else f"rejected={list(self.violations)}"
        return f"ScoredSlot({self.start.strftime('%a %d %b %I:%M %p')} - {self.end.strftime('%I:%M %p')}, {status})"
