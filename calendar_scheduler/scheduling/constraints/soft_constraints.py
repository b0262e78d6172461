"""
Soft constraints: preferences that reduce a slot's desirability without disqualifying it.

Daily/weekly load is deliberately absent here; the balance dimension of SlotScorer owns it.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional, Sequence, Tuple

from ..core.constants import ConstraintType
from ..core.context import SchedulingContext, TimeRange
from ..core.time_slot import Penalty, TimeSlot
from ..utils.slot_utils import events_on_day, intervals_overlap
from .base import SchedulingConstraint, SoftConstraint, require

logger = logging.getLogger(__name__)


class SameCategoryProximityConstraint(SoftConstraint):
    """
    Light penalty for landing too close to an event of the same category.
    The penalty grows linearly as the gap shrinks from min_gap_minutes down to 0.
    """

    name = "same-category-proximity"
    penalty = 10.0

    def __init__(self, category: Optional[str], min_gap_minutes: int = 30):
        self.category = category
        self.min_gap_minutes = min_gap_minutes
        self.description = f"Keep {min_gap_minutes} minutes away from other '{category}' events"

    def _smallest_gap(self, slot: TimeSlot, context: SchedulingContext) -> Optional[float]:
        category = require(self.category, "category of the event being placed", self)
        gaps = []
        for event in context.events:
            if event.category != category:
                continue
            if intervals_overlap(slot.start, slot.end, event.start, event.end):
                gaps.append(0.0)
            elif event.end <= slot.start:
                gaps.append((slot.start - event.end).total_seconds() / 60)
            else:
                gaps.append((event.start - slot.end).total_seconds() / 60)
        return min(gaps) if gaps else None

    def is_satisfied(self, slot: TimeSlot, context: SchedulingContext) -> bool:
        return self.penalty_for(slot, context) == 0

    def penalty_for(self, slot: TimeSlot, context: SchedulingContext) -> float:
        gap = self._smallest_gap(slot, context)
        if gap is None or gap >= self.min_gap_minutes:
            return 0.0
        return self.penalty * (1 - gap / self.min_gap_minutes)


class PreferredHoursConstraint(SoftConstraint):
    """Moderate penalty for slots outside the user's stated preferred hours."""

    name = "preferred-hours"
    description = "Prefer the user's stated preferred hours"
    penalty = 20.0

    def is_satisfied(self, slot: TimeSlot, context: SchedulingContext) -> bool:
        preferred = require(context.preferred_hours, "preferred_hours", self)
        return preferred.contains(slot.start, slot.end)


class PreferredTimeConstraint(SoftConstraint):
    name = "preferred-time"
    description = "Prefer scheduling within user-preferred time ranges"
    penalty = 20.0

    def __init__(self, preferred_times: Sequence[TimeRange]):
        self.preferred_times = tuple(preferred_times)

    def is_satisfied(self, slot: TimeSlot, context: SchedulingContext) -> bool:
        return any(time_range.contains(slot.start, slot.end) for time_range in self.preferred_times)


class BufferTimeConstraint(SoftConstraint):
    name = "buffer-time"
    description = "Maintain buffer time between events"
    penalty = 10.0

    def is_satisfied(self, slot: TimeSlot, context: SchedulingContext) -> bool:
        buffer = timedelta(minutes=context.buffer_minutes)
        for event in context.events:
            # Event ends just before the slot, or starts just after it
            if timedelta(0) <= slot.start - event.end < buffer:
                return False
            if timedelta(0) <= event.start - slot.end < buffer:
                return False
        return True


class MeetingClusteringConstraint(SoftConstraint):
    """Cluster meetings together so the rest of the day stays free for focus."""

    name = "meeting-clustering"
    description = "Cluster meetings together to create focus blocks"
    penalty = 12.0

    def __init__(self, meeting_categories: Sequence[str] = ("work", "meeting"), max_gap_minutes: int = 60):
        self.meeting_categories = frozenset(meeting_categories)
        self.max_gap_minutes = max_gap_minutes

    def _is_meeting(self, event) -> bool:
        return event.category in self.meeting_categories or "meeting" in event.title.lower()

    def is_satisfied(self, slot: TimeSlot, context: SchedulingContext) -> bool:
        meetings = [event for event in events_on_day(slot.start.date(), context.events) if self._is_meeting(event)]
        if not meetings:
            return True  # No existing meetings, any time is fine

        for meeting in meetings:
            gap = min(
                abs((slot.start - meeting.end).total_seconds()),
                abs((meeting.start - slot.end).total_seconds()),
            ) / 60
            if gap <= self.max_gap_minutes:
                return True
        return False


class FocusTimeProtectionConstraint(SoftConstraint):
    name = "focus-time-protection"
    description = "Avoid scheduling during protected focus blocks"
    penalty = 25.0

    def is_satisfied(self, slot: TimeSlot, context: SchedulingContext) -> bool:
        return not any(
            block.protected and intervals_overlap(slot.start, slot.end, block.start, block.end)
            for block in context.focus_blocks
        )


class AvoidBackToBackConstraint(SoftConstraint):
    """Penalize slots that would extend a chain of back-to-back events past the user's limit."""

    name = "avoid-back-to-back"
    description = "Avoid too many back-to-back meetings"
    penalty = 8.0

    def __init__(self, adjacency_minutes: int = 15):
        self.adjacency = timedelta(minutes=adjacency_minutes)

    def _chain_length(self, anchor: datetime, context: SchedulingContext, backwards: bool) -> int:
        remaining = list(context.events)
        count = 0
        cursor = anchor
        while True:
            if backwards:
                link = next((e for e in remaining if abs(cursor - e.end) <= self.adjacency and e.start < cursor), None)
            else:
                link = next((e for e in remaining if abs(e.start - cursor) <= self.adjacency and e.end > cursor), None)
            if link is None:
                return count
            remaining.remove(link)
            count += 1
            cursor = link.start if backwards else link.end

    def is_satisfied(self, slot: TimeSlot, context: SchedulingContext) -> bool:
        consecutive = 1  # This slot counts as 1
        consecutive += self._chain_length(slot.start, context, backwards=True)
        consecutive += self._chain_length(slot.end, context, backwards=False)
        return consecutive <= context.max_back_to_back


class LunchTimeConstraint(SoftConstraint):
    name = "lunch-time"
    description = "Avoid scheduling during lunch hours"
    penalty = 15.0

    def is_satisfied(self, slot: TimeSlot, context: SchedulingContext) -> bool:
        lunch = require(context.lunch_time, "lunch_time", self)
        return not lunch.overlaps(slot.start, slot.end)


class WeekendAvoidanceConstraint(SoftConstraint):
    name = "avoid-weekends"
    description = "Prefer weekdays over weekends"
    penalty = 30.0

    def is_satisfied(self, slot: TimeSlot, context: SchedulingContext) -> bool:
        return slot.start.weekday() < 5  # Saturday=5, Sunday=6


class PriorityAlignmentConstraint(SoftConstraint):
    """Schedule high-priority items sooner. Higher priority = larger penalty for delay."""

    name = "priority-alignment"
    description = "Schedule high-priority items sooner"

    # Priority -> latest acceptable start, in hours from now
    MAX_LEAD_HOURS = {1: 24, 2: 48, 3: 72}

    def __init__(self, priority: int):
        self.priority = priority
        self.penalty = priority * 10.0

    def is_satisfied(self, slot: TimeSlot, context: SchedulingContext) -> bool:
        max_lead = self.MAX_LEAD_HOURS.get(self.priority)
        if max_lead is None:
            return True  # Lower priority items have no time preference
        hours_from_now = (slot.start - context.now).total_seconds() / 3600
        return hours_from_now <= max_lead


DEFAULT_SOFT_CONSTRAINTS: Tuple[SoftConstraint, ...] = (
    BufferTimeConstraint(),
    MeetingClusteringConstraint(),
    FocusTimeProtectionConstraint(),
    AvoidBackToBackConstraint(),
    WeekendAvoidanceConstraint(),
)


def calculate_soft_constraint_score(slot: TimeSlot, context: SchedulingContext,
                                    constraints: Sequence[SchedulingConstraint]) -> Tuple[float, List[Penalty]]:
    """
    Score a slot against soft constraints.
    Starts at 100 and subtracts every penalty, floored at 0.
    """
    penalties: List[Penalty] = []
    total_penalty = 0.0

    for constraint in constraints:
        if constraint.constraint_type != ConstraintType.SOFT:
            continue
        result = constraint.check(slot, context)
        if result.penalty > 0:
            penalties.append(Penalty(result.name, result.penalty))
            total_penalty += result.penalty

    return max(0.0, 100.0 - total_penalty), penalties
