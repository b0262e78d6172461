"""
Energy-based scoring functions for slot evaluation.
"""

from typing import Union

from ..core.constants import Chronotype
from ..core.context import SchedulingContext
from ..core.time_slot import TimeSlot


def energy_level(hour: int, chronotype: Union[Chronotype, str] = Chronotype.BALANCED) -> float:
    """
    Map an hour of day (0-23) to a normalized energy level (0.0 - 1.0) for a chronotype.
    The balanced curve is symmetric around noon.
    """
    if not 0 <= hour <= 23:
        raise ValueError(f"Hour must be within 0-23, got {hour}")
    chronotype = Chronotype(chronotype)

    if chronotype == Chronotype.MORNING:
        # Peak energy in the morning
        if 6 <= hour <= 11:
            return 0.9
        if 12 <= hour <= 14:
            return 0.6
        if 15 <= hour <= 17:
            return 0.7
        if 18 <= hour <= 20:
            return 0.4
        return 0.2

    if chronotype == Chronotype.EVENING:
        # Peak energy in the evening
        if 6 <= hour <= 9:
            return 0.3
        if 10 <= hour <= 14:
            return 0.6
        if 15 <= hour <= 18:
            return 0.8
        if 19 <= hour <= 22:
            return 0.9
        return 0.2

    # Balanced: two plateaus either side of a midday dip
    if 6 <= hour <= 7 or 17 <= hour <= 18:
        return 0.5
    if 8 <= hour <= 11 or 13 <= hour <= 16:
        return 0.8
    if hour == 12:
        return 0.6
    if 19 <= hour <= 22:
        return 0.4
    return 0.2


def calculate_energy_score(slot: TimeSlot, context: SchedulingContext) -> float:
    """
    Energy score (0.0 - 100.0): average energy at the slot's start and end hour.
    """
    start_energy = energy_level(slot.start.hour, context.chronotype)
    end_energy = energy_level(slot.end.hour, context.chronotype)
    return (start_energy + end_energy) / 2 * 100
