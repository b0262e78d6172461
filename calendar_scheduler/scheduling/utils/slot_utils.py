"""
Event and slot utility functions shared by constraints and scoring.
"""

from datetime import date, datetime, timedelta
from typing import Dict, List, Sequence

from ..core.context import ScheduledEvent, SchedulingContext
from ..core.time_slot import TimeSlot


def intervals_overlap(start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime) -> bool:
    """Half-open overlap test: touching intervals do not overlap."""
    return start_a < end_b and end_a > start_b


def find_conflicts(slot: TimeSlot, events: Sequence[ScheduledEvent]) -> List[ScheduledEvent]:
    """Find all events overlapping a proposed slot"""
    return [event for event in events if slot.overlaps(event.start, event.end)]


def week_start_for(day: date) -> datetime:
    """Sunday 00:00 of the week containing day."""
    days_since_sunday = (day.weekday() + 1) % 7  # Monday=0 ... Sunday=6
    sunday = day - timedelta(days=days_since_sunday)
    return datetime.combine(sunday, datetime.min.time())


def events_on_day(day: date, events: Sequence[ScheduledEvent]) -> List[ScheduledEvent]:
    return [event for event in events if event.start.date() == day]


def day_load_minutes(day: date, events: Sequence[ScheduledEvent]) -> float:
    """Total scheduled minutes of events starting on a given day"""
    return sum(event.duration_minutes for event in events_on_day(day, events))


def week_load_minutes(week_start: datetime, events: Sequence[ScheduledEvent]) -> float:
    """Total scheduled minutes of events starting within [week_start, week_start + 7 days)"""
    week_end = week_start + timedelta(days=7)
    return sum(event.duration_minutes for event in events if week_start <= event.start < week_end)


def free_time_stats(context: SchedulingContext, start: datetime, end: datetime) -> Dict[str, float]:
    """
    Free time statistics inside working hours for [start, end).
    Returns total/largest/average free block in minutes and the free percentage (0-100).
    """
    hours = context.working_hours
    free_blocks: List[float] = []
    total_working = 0.0

    current_day = start.date()
    while current_day <= end.date():
        if hours is not None and current_day.weekday() not in hours.days:
            current_day += timedelta(days=1)
            continue

        if hours is not None:
            day_start = datetime.combine(current_day, hours.start)
            day_end = datetime.combine(current_day, hours.end)
        else:
            day_start = datetime.combine(current_day, datetime.min.time())
            day_end = day_start + timedelta(days=1)
        day_start = max(day_start, start)
        day_end = min(day_end, end)

        if day_start < day_end:
            total_working += (day_end - day_start).total_seconds() / 60
            free_blocks.extend(_free_blocks_between(day_start, day_end, context.events))

        current_day += timedelta(days=1)

    if not free_blocks:
        return {
            "total_free_minutes": 0.0,
            "largest_free_block": 0.0,
            "average_free_block": 0.0,
            "free_time_percentage": 0.0,
        }

    total_free = sum(free_blocks)
    return {
        "total_free_minutes": total_free,
        "largest_free_block": max(free_blocks),
        "average_free_block": total_free / len(free_blocks),
        "free_time_percentage": round(total_free / total_working * 100) if total_working > 0 else 0.0,
    }


def _free_blocks_between(day_start: datetime, day_end: datetime,
                         events: Sequence[ScheduledEvent]) -> List[float]:
    busy = sorted(
        (event for event in events if intervals_overlap(day_start, day_end, event.start, event.end)),
        key=lambda event: event.start,
    )

    blocks = []
    cursor = day_start
    for event in busy:
        if event.start > cursor:
            blocks.append((event.start - cursor).total_seconds() / 60)
        cursor = max(cursor, event.end)

    if cursor < day_end:
        blocks.append((day_end - cursor).total_seconds() / 60)

    return blocks
