"""
Time-based scoring functions for slot evaluation.
"""

from datetime import datetime

from ..core.constants import DEFAULT_TIMING_DECAY, IDEAL_LEAD_HOURS, MAX_PRIORITY, MIN_PRIORITY
from ..core.exceptions import SchedulingValidationError
from ..core.time_slot import TimeSlot


def validate_priority(priority: int) -> int:
    if isinstance(priority, bool) or not isinstance(priority, int) or not MIN_PRIORITY <= priority <= MAX_PRIORITY:
        raise SchedulingValidationError(
            f"Priority must be an integer within {MIN_PRIORITY}-{MAX_PRIORITY}, got {priority!r}"
        )
    return priority


def ideal_lead_hours(priority: int) -> int:
    """
    Ideal lead time for a priority: 1 -> 4 hours ... 5 -> 2 weeks.
    """
    return IDEAL_LEAD_HOURS[validate_priority(priority)]


def calculate_timing_score(slot: TimeSlot, now: datetime, priority: int,
                           decay: float = DEFAULT_TIMING_DECAY) -> float:
    """
    Timing score (0.0 - 100.0) based on how soon the slot starts.
    100 inside the ideal window, then decays by `decay` per ideal period beyond it.
    A slot in the past scores 0.
    """
    ideal_hours = ideal_lead_hours(priority)
    hours_from_now = (slot.start - now).total_seconds() / 3600

    if hours_from_now < 0:
        return 0.0  # Slot is in the past
    if hours_from_now <= ideal_hours:
        return 100.0

    periods = (hours_from_now - ideal_hours) / ideal_hours
    return max(0.0, 100.0 * decay ** periods)
