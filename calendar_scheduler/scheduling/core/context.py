"""
Read-only view of the world the engine needs for one scheduling request.
"""

from dataclasses import dataclass, field
from datetime import datetime, time
from typing import Optional, Sequence, Tuple

from .constants import (
    Chronotype, DEFAULT_BUFFER_MINUTES, DEFAULT_MAX_BACK_TO_BACK,
    DEFAULT_WORK_START, DEFAULT_WORK_END, DEFAULT_WORK_DAYS,
)
from .day_parts import DayPart
from .exceptions import SchedulingValidationError


@dataclass(frozen=True)
class ScheduledEvent:
    """An already materialized calendar event, in the reference timezone."""
    start: datetime
    end: datetime
    category: str = "general"
    title: str = ""

    def __post_init__(self):
        if self.end < self.start:
            raise SchedulingValidationError(f"Event '{self.title}' ends before it starts")

    @property
    def duration_minutes(self) -> float:
        return (self.end - self.start).total_seconds() / 60


@dataclass(frozen=True)
class TimeRange:
    start: datetime
    end: datetime

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return start < self.end and end > self.start

    def contains(self, start: datetime, end: datetime) -> bool:
        return self.start <= start and end <= self.end


@dataclass(frozen=True)
class FocusBlock:
    start: datetime
    end: datetime
    title: str = "Focus Block"
    protected: bool = True


@dataclass(frozen=True)
class WorkingHours:
    start: time = DEFAULT_WORK_START
    end: time = DEFAULT_WORK_END
    days: Tuple[int, ...] = DEFAULT_WORK_DAYS  # datetime.weekday(): Monday=0


def require_naive(moments) -> None:
    """The engine works on naive wall-clock times in one reference timezone."""
    for moment in moments:
        if moment is not None and moment.utcoffset() is not None:
            raise SchedulingValidationError(
                f"Timezone-aware datetime {moment.isoformat()} given; convert to naive reference-timezone time first"
            )


def _coerce_chronotype(value) -> Chronotype:
    if isinstance(value, Chronotype):
        return value
    try:
        return Chronotype(value)
    except ValueError:
        raise SchedulingValidationError(
            f"Unknown chronotype {value!r} (expected one of {[c.value for c in Chronotype]})"
        ) from None


@dataclass(frozen=True)
class SchedulingContext:
    """
    Snapshot supplied fresh per request by the caller. Frozen: the engine reads it, never writes it.
    Optional fields left as None mean "not known"; constraints needing them treat the slot as
    unaffected and log a warning.
    """
    events: Sequence[ScheduledEvent] = ()
    chronotype: Chronotype = Chronotype.BALANCED
    now: datetime = field(default_factory=datetime.now)
    working_hours: Optional[WorkingHours] = field(default_factory=WorkingHours)
    preferred_hours: Optional[DayPart] = None
    lunch_time: Optional[DayPart] = None
    blocked_ranges: Sequence[TimeRange] = ()
    focus_blocks: Sequence[FocusBlock] = ()
    buffer_minutes: int = DEFAULT_BUFFER_MINUTES
    max_back_to_back: int = DEFAULT_MAX_BACK_TO_BACK

    def __post_init__(self):
        object.__setattr__(self, "chronotype", _coerce_chronotype(self.chronotype))
        object.__setattr__(self, "events", tuple(self.events))
        object.__setattr__(self, "blocked_ranges", tuple(self.blocked_ranges))
        object.__setattr__(self, "focus_blocks", tuple(self.focus_blocks))
        if self.buffer_minutes < 0:
            raise SchedulingValidationError("buffer_minutes cannot be negative")

        moments = [self.now]
        for item in (*self.events, *self.blocked_ranges, *self.focus_blocks):
            moments.extend((item.start, item.end))
        require_naive(moments)
