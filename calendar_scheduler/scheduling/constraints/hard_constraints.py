"""
Hard constraints and the validator that applies them.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Tuple

from ..core.constants import ConstraintType
from ..core.context import SchedulingContext
from ..core.day_parts import DayPartFilter, fits_any_day_part, resolve_day_parts
from ..core.time_slot import TimeSlot
from ..utils.slot_utils import find_conflicts
from .base import HardConstraint, SchedulingConstraint, require

logger = logging.getLogger(__name__)


class NoOverlapConstraint(HardConstraint):
    """
    Slot must not overlap an existing event of a blocking category.
    blocking_categories=None means every event blocks.
    """

    name = "no-overlap"
    description = "Must not overlap existing events"

    def __init__(self, blocking_categories: Optional[Iterable[str]] = None):
        self.blocking_categories = frozenset(blocking_categories) if blocking_categories is not None else None

    def _blocking_conflicts(self, slot: TimeSlot, context: SchedulingContext):
        conflicts = find_conflicts(slot, context.events)
        if self.blocking_categories is None:
            return conflicts
        return [event for event in conflicts if event.category in self.blocking_categories]

    def is_satisfied(self, slot: TimeSlot, context: SchedulingContext) -> bool:
        return not self._blocking_conflicts(slot, context)

    def violation_message(self, slot: TimeSlot, context: SchedulingContext) -> str:
        conflicts = self._blocking_conflicts(slot, context)
        described = ", ".join(
            f"'{event.title or 'event'}' ({event.category}, "
            f"{event.start.strftime('%H:%M')}-{event.end.strftime('%H:%M')})"
            for event in conflicts
        )
        return f"Conflicts with {described}"


class NotInPastConstraint(HardConstraint):
    name = "not-in-past"
    description = "Must not start before now"

    def is_satisfied(self, slot: TimeSlot, context: SchedulingContext) -> bool:
        return slot.start >= context.now

    def violation_message(self, slot: TimeSlot, context: SchedulingContext) -> str:
        return f"Starts in the past ({slot.start.isoformat()} < {context.now.isoformat()})"


class DayPartConstraint(HardConstraint):
    """Slot must sit entirely inside one of the requested day parts."""

    name = "day-part"

    def __init__(self, day_parts: DayPartFilter):
        self.day_parts = resolve_day_parts(day_parts)
        self.description = "Must be within " + ", ".join(
            f"{part.name} {part.start.strftime('%H:%M')}-{part.end.strftime('%H:%M')}" for part in self.day_parts
        )

    def is_satisfied(self, slot: TimeSlot, context: SchedulingContext) -> bool:
        return fits_any_day_part(slot.start, slot.end, self.day_parts)


class WorkingHoursConstraint(HardConstraint):
    name = "working-hours"
    description = "Must be within working hours"

    def is_satisfied(self, slot: TimeSlot, context: SchedulingContext) -> bool:
        hours = require(context.working_hours, "working_hours", self)
        if slot.start.weekday() not in hours.days:
            return False
        day = slot.start.date()
        return (datetime.combine(day, hours.start) <= slot.start
                and slot.end <= datetime.combine(day, hours.end))


class BlockedTimeConstraint(HardConstraint):
    name = "blocked-time"
    description = "Must not overlap blocked hours"

    def is_satisfied(self, slot: TimeSlot, context: SchedulingContext) -> bool:
        return not any(blocked.overlaps(slot.start, slot.end) for blocked in context.blocked_ranges)


class DeadlineConstraint(HardConstraint):
    name = "deadline"

    def __init__(self, deadline: datetime):
        self.deadline = deadline
        self.description = f"Must finish by {deadline.isoformat()}"

    def is_satisfied(self, slot: TimeSlot, context: SchedulingContext) -> bool:
        return slot.end <= self.deadline


DEFAULT_HARD_CONSTRAINTS: Tuple[HardConstraint, ...] = (
    NoOverlapConstraint(),
    NotInPastConstraint(),
    BlockedTimeConstraint(),
)


def validate_hard_constraints(slot: TimeSlot, context: SchedulingContext,
                              constraints: Sequence[SchedulingConstraint]) -> Tuple[bool, List[str]]:
    """
    Check a slot against every hard constraint. Does not stop at the first failure:
    all violations are collected so callers can explain the rejection.
    """
    violations: List[str] = []

    for constraint in constraints:
        if constraint.constraint_type != ConstraintType.HARD:
            continue
        result = constraint.check(slot, context)
        if result.violated:
            violations.append(result.description)

    if violations:
        logger.debug(f"❌ Slot rejected {slot!r}: {violations}")

    return not violations, violations
