"""
Workload-based scoring functions for slot evaluation.
"""

from ..core.constants import MAX_BALANCE_DEVIATION_MINUTES
from ..core.context import SchedulingContext
from ..core.time_slot import TimeSlot
from ..utils.slot_utils import day_load_minutes, week_load_minutes, week_start_for


def calculate_balance_score(slot: TimeSlot, context: SchedulingContext) -> float:
    """
    Balance score (0.0 - 100.0): how close the slot's day stays to the week's average load.

    The day's projected load (existing events + this slot) is compared with the average
    daily load of the Sunday-started week; the score drops linearly to 0 at a
    4 hour deviation.
    """
    slot_date = slot.start.date()

    day_minutes = day_load_minutes(slot_date, context.events)
    week_minutes = week_load_minutes(week_start_for(slot_date), context.events)
    avg_daily_minutes = week_minutes / 7

    projected_day_minutes = day_minutes + slot.duration_minutes
    deviation = abs(projected_day_minutes - avg_daily_minutes)

    return max(0.0, 100.0 - (deviation / MAX_BALANCE_DEVIATION_MINUTES) * 100.0)
