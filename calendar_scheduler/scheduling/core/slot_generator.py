"""
Candidate slot generation.

One stepping loop serves every search the product needs: a plain scan over the
horizon, a morning-only scan, a focus-block scan... they only differ in the
day-part filter passed in.
"""

import logging
import math
from datetime import date, datetime, timedelta
from typing import Iterable, Iterator, List, Optional

from .constants import DEFAULT_STEP_MINUTES
from .context import require_naive
from .day_parts import DayPart, DayPartFilter, resolve_day_parts
from .exceptions import SchedulingValidationError
from .time_slot import TimeSlot

logger = logging.getLogger(__name__)


def _ceil_to_step(moment: datetime, origin: datetime, step: timedelta) -> datetime:
    """Smallest origin + k*step (k >= 0) that is >= moment."""
    if moment <= origin:
        return origin
    steps = math.ceil((moment - origin) / step)
    return origin + steps * step


class CandidateSlotGenerator:
    """
    Lazy, finite sequence of fixed-duration TimeSlots inside [max(window_start, now), window_end].
    `now` defaults to the current local time.

    Without day parts the scan is continuous and aligned to step boundaries counted from
    midnight. With day parts each window is scanned per day from its own start; overlapping
    windows are deduplicated by start instant and yielded in start order.
    """

    def __init__(self, duration_minutes: int, window_start: datetime, window_end: datetime,
                 step_minutes: int = DEFAULT_STEP_MINUTES, day_parts: Optional[DayPartFilter] = None,
                 now: Optional[datetime] = None, weekdays: Optional[Iterable[int]] = None):
        if duration_minutes <= 0:
            raise SchedulingValidationError(f"Duration must be positive, got {duration_minutes} minutes")
        if step_minutes <= 0:
            raise SchedulingValidationError(f"Step must be positive, got {step_minutes} minutes")
        if now is None:
            now = datetime.now()
        require_naive((window_start, window_end, now))
        if window_end < window_start:
            raise SchedulingValidationError(
                f"Search window ends ({window_end.isoformat()}) before it starts ({window_start.isoformat()})"
            )

        self.duration = timedelta(minutes=duration_minutes)
        self.step = timedelta(minutes=step_minutes)
        self.window_start = window_start
        self.window_end = window_end
        self.now = now
        self.day_parts: List[DayPart] = resolve_day_parts(day_parts) if day_parts else []
        self.weekdays = frozenset(weekdays) if weekdays is not None else None

    @property
    def effective_start(self) -> datetime:
        if self.now > self.window_start:
            return self.now
        return self.window_start

    def __iter__(self) -> Iterator[TimeSlot]:
        start = self.effective_start
        if start + self.duration > self.window_end:
            return iter(())
        if self.day_parts:
            return self._iter_day_parts(start)
        return self._iter_continuous(start)

    def _allowed_day(self, day: date) -> bool:
        return self.weekdays is None or day.weekday() in self.weekdays

    def _iter_continuous(self, start: datetime) -> Iterator[TimeSlot]:
        midnight = datetime.combine(start.date(), datetime.min.time())
        current = _ceil_to_step(start, midnight, self.step)

        while current + self.duration <= self.window_end:
            if self._allowed_day(current.date()):
                yield TimeSlot(current, current + self.duration)
            current += self.step

    def _iter_day_parts(self, start: datetime) -> Iterator[TimeSlot]:
        for day in self._get_days_in_window(start):
            if not self._allowed_day(day):
                continue

            # Gather per day so overlapping windows collapse onto one start instant
            starts = set()
            for part in self.day_parts:
                part_start, part_end = part.bounds_on(day)
                lower = max(part_start, start)
                upper = min(part_end, self.window_end)

                current = _ceil_to_step(lower, part_start, self.step)
                while current + self.duration <= upper:
                    starts.add(current)
                    current += self.step

            for slot_start in sorted(starts):
                yield TimeSlot(slot_start, slot_start + self.duration)

    def _get_days_in_window(self, start: datetime) -> List[date]:
        """Get all calendar days touched by the scheduling window"""
        days = []
        current_day = start.date()
        end_day = self.window_end.date()

        while current_day <= end_day:
            days.append(current_day)
            current_day += timedelta(days=1)

        return days

    def __repr__(self):
        parts = ", ".join(part.name for part in self.day_parts) or "all day"
        return (f"CandidateSlotGenerator({self.duration}, every {self.step}, "
                f"{self.window_start.isoformat()} -> {self.window_end.isoformat()}, {parts})")


def generate_candidate_slots(duration_minutes: int, window_start: datetime, window_end: datetime,
                             step_minutes: int = DEFAULT_STEP_MINUTES,
                             day_parts: Optional[DayPartFilter] = None,
                             now: Optional[datetime] = None,
                             weekdays: Optional[Iterable[int]] = None) -> Iterator[TimeSlot]:
    """Functional shortcut around CandidateSlotGenerator."""
    generator = CandidateSlotGenerator(
        duration_minutes, window_start, window_end,
        step_minutes=step_minutes, day_parts=day_parts, now=now, weekdays=weekdays,
    )
    logger.debug(f"Generating candidates: {generator!r}")
    return iter(generator)
