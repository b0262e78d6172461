"""
Named day-part windows used to restrict candidate generation and validation.
"""

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Dict, Iterable, List, Sequence, Tuple, Union

from .exceptions import SchedulingValidationError


@dataclass(frozen=True)
class DayPart:
    """A daily window such as "morning 09:00-12:00". Does not cross midnight."""
    name: str
    start: time
    end: time

    def __post_init__(self):
        if self.end <= self.start:
            raise SchedulingValidationError(
                f"Day part '{self.name}' must end after it starts ({self.start} - {self.end})"
            )

    def bounds_on(self, day: date) -> Tuple[datetime, datetime]:
        return datetime.combine(day, self.start), datetime.combine(day, self.end)

    def contains(self, start: datetime, end: datetime) -> bool:
        """True if [start, end] sits inside this window on start's day."""
        window_start, window_end = self.bounds_on(start.date())
        return window_start <= start and end <= window_end

    def overlaps(self, start: datetime, end: datetime) -> bool:
        window_start, window_end = self.bounds_on(start.date())
        return start < window_end and end > window_start


MORNING = (DayPart("morning", time(9, 0), time(12, 0)),)
FOCUS = (
    DayPart("focus-am", time(9, 0), time(11, 0)),
    DayPart("focus-pm", time(14, 0), time(16, 0)),
)
WORKING = (DayPart("working", time(9, 0), time(18, 0)),)

NAMED_DAY_PARTS: Dict[str, Tuple[DayPart, ...]] = {
    "morning": MORNING,
    "focus": FOCUS,
    "working": WORKING,
}

DayPartFilter = Union[str, DayPart, Iterable[Union[str, DayPart]]]


def resolve_day_parts(day_parts: DayPartFilter) -> List[DayPart]:
    """
    Resolve a filter given as a preset name, a DayPart, or a mix of both
    into a flat list of DayPart windows.
    """
    if isinstance(day_parts, (str, DayPart)):
        day_parts = [day_parts]

    resolved: List[DayPart] = []
    for part in day_parts:
        if isinstance(part, DayPart):
            resolved.append(part)
        elif part in NAMED_DAY_PARTS:
            resolved.extend(NAMED_DAY_PARTS[part])
        else:
            raise SchedulingValidationError(
                f"Unknown day part '{part}' (expected one of {sorted(NAMED_DAY_PARTS)})"
            )
    return resolved


def fits_any_day_part(start: datetime, end: datetime, day_parts: Sequence[DayPart]) -> bool:
    return any(part.contains(start, end) for part in day_parts)
