"""
Scheduling service: turns a placement request into constraints, candidates and a ranked answer.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .. import config
from ..scheduling.constraints.base import SchedulingConstraint
from ..scheduling.constraints.hard_constraints import (
    BlockedTimeConstraint, DayPartConstraint, DeadlineConstraint, NoOverlapConstraint,
    NotInPastConstraint, WorkingHoursConstraint, validate_hard_constraints,
)
from ..scheduling.constraints.soft_constraints import (
    DEFAULT_SOFT_CONSTRAINTS, LunchTimeConstraint, PreferredHoursConstraint, PreferredTimeConstraint,
    PriorityAlignmentConstraint, SameCategoryProximityConstraint,
)
from ..scheduling.core.context import ScheduledEvent, SchedulingContext, TimeRange, require_naive
from ..scheduling.core.day_parts import DayPartFilter
from ..scheduling.core.exceptions import SchedulingValidationError
from ..scheduling.core.slot_generator import CandidateSlotGenerator
from ..scheduling.core.time_slot import ScoredSlot, TimeSlot
from ..scheduling.scoring.slot_scoring import ScoreWeights, SlotScorer
from ..scheduling.scoring.time_scoring import validate_priority
from ..scheduling.utils.slot_utils import find_conflicts, free_time_stats

logger = logging.getLogger(__name__)

WEEKDAYS = (0, 1, 2, 3, 4)

RESCHEDULE_PRIORITY = 2
RESCHEDULE_WITHIN_DAYS = 7
URGENT_RESCHEDULE_REASONS = ("cancellation", "conflict")


@dataclass
class SchedulingRequest:
    """What to place and where to look. Window defaults to [now, now + horizon]."""
    duration_minutes: int
    priority: int = config.DEFAULT_PRIORITY
    window_start: Optional[datetime] = None
    window_end: Optional[datetime] = None
    day_parts: Optional[DayPartFilter] = None
    step_minutes: int = config.DEFAULT_STEP_MINUTES
    category: Optional[str] = None
    deadline: Optional[datetime] = None
    preferred_times: Sequence[TimeRange] = ()
    blocking_categories: Optional[Sequence[str]] = None
    respect_working_hours: bool = False
    include_weekends: bool = True
    hard_constraints: Sequence[SchedulingConstraint] = field(default_factory=list)
    soft_constraints: Sequence[SchedulingConstraint] = field(default_factory=list)
    limit: Optional[int] = None

    def __post_init__(self):
        if self.duration_minutes <= 0:
            raise SchedulingValidationError(f"Duration must be positive, got {self.duration_minutes} minutes")
        validate_priority(self.priority)
        require_naive([self.window_start, self.window_end, self.deadline,
                       *(moment for r in self.preferred_times for moment in (r.start, r.end))])
        if self.window_start and self.window_end and self.window_end < self.window_start:
            raise SchedulingValidationError("Search window end is before its start")


@dataclass
class RescheduleChange:
    event: ScheduledEvent
    new_slot: ScoredSlot
    reason: str


@dataclass
class RescheduleResult:
    """Moves that found a new home, and the events that could not be placed."""
    changes: List[RescheduleChange] = field(default_factory=list)
    conflicts: List[ScheduledEvent] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return len(self.changes) > 0


class SchedulerService:
    """Service wiring the candidate generator, constraints and SlotScorer together."""

    def __init__(self, scorer: Optional[SlotScorer] = None, horizon_days: int = config.DEFAULT_HORIZON_DAYS):
        self.scorer = scorer or SlotScorer(
            weights={
                "constraints": config.WEIGHT_CONSTRAINTS,
                "energy": config.WEIGHT_ENERGY,
                "timing": config.WEIGHT_TIMING,
                "balance": config.WEIGHT_BALANCE,
            },
            timing_decay=config.TIMING_DECAY,
        )
        self.horizon_days = horizon_days

    # ================================
    # REQUEST -> CONSTRAINTS & CANDIDATES
    # ================================

    def build_constraints(self, request: SchedulingRequest,
                          context: SchedulingContext) -> Tuple[List[SchedulingConstraint], List[SchedulingConstraint]]:
        """Assemble hard and soft constraint lists for a request."""
        hard: List[SchedulingConstraint] = [
            NoOverlapConstraint(request.blocking_categories),
            NotInPastConstraint(),
            BlockedTimeConstraint(),
        ]
        if request.day_parts:
            hard.append(DayPartConstraint(request.day_parts))
        if request.respect_working_hours:
            hard.append(WorkingHoursConstraint())
        if request.deadline:
            hard.append(DeadlineConstraint(request.deadline))
        hard.extend(request.hard_constraints)

        soft: List[SchedulingConstraint] = list(DEFAULT_SOFT_CONSTRAINTS)
        if context.preferred_hours is not None:
            soft.append(PreferredHoursConstraint())
        if context.lunch_time is not None:
            soft.append(LunchTimeConstraint())
        if request.category:
            soft.append(SameCategoryProximityConstraint(request.category))
        if request.preferred_times:
            soft.append(PreferredTimeConstraint(request.preferred_times))
        soft.append(PriorityAlignmentConstraint(request.priority))
        soft.extend(request.soft_constraints)

        return hard, soft

    def candidate_slots(self, request: SchedulingRequest, context: SchedulingContext) -> CandidateSlotGenerator:
        window_start = request.window_start or context.now
        window_end = request.window_end or request.deadline or window_start + timedelta(days=self.horizon_days)

        return CandidateSlotGenerator(
            request.duration_minutes,
            window_start,
            window_end,
            step_minutes=request.step_minutes,
            day_parts=request.day_parts,
            now=context.now,
            weekdays=None if request.include_weekends else WEEKDAYS,
        )

    # ================================
    # RANKED SEARCH
    # ================================

    def score_candidates(self, request: SchedulingRequest, context: SchedulingContext) -> List[ScoredSlot]:
        """Every candidate for the request, scored and ranked best first."""
        hard, soft = self.build_constraints(request, context)
        candidates = self.candidate_slots(request, context)
        logger.info(f"🔍 Scoring candidates for {request.duration_minutes} min, priority {request.priority}: {candidates!r}")

        return self.scorer.score_slots(candidates, context, hard, soft, request.priority, request.limit)

    def find_best_slot(self, request: SchedulingRequest, context: SchedulingContext) -> Optional[ScoredSlot]:
        hard, soft = self.build_constraints(request, context)
        best = self.scorer.find_best_slot(self.candidate_slots(request, context), context, hard, soft, request.priority)

        if best is None:
            logger.info("📭 No candidate slots in the search window")
        elif not best.is_admissible:
            logger.info(f"🚫 Every candidate was rejected, e.g. {list(best.violations)}")
        else:
            logger.info(f"✅ Best slot {best!r}")
        return best

    # ================================
    # FIRST-FIT SEARCHES
    # ================================

    def find_next_available_slot(self, duration_minutes: int, context: SchedulingContext,
                                 day_parts: Optional[DayPartFilter] = None,
                                 window_end: Optional[datetime] = None,
                                 include_weekends: bool = True,
                                 step_minutes: int = config.DEFAULT_STEP_MINUTES) -> Optional[ScoredSlot]:
        """
        Earliest admissible slot, ignoring quality: hard constraints only, no soft constraints,
        default priority. Stops at the first hit.
        """
        request = SchedulingRequest(
            duration_minutes=duration_minutes,
            window_end=window_end,
            day_parts=day_parts,
            step_minutes=step_minutes,
            include_weekends=include_weekends,
        )
        hard, _ = self.build_constraints(request, context)

        for slot in self.candidate_slots(request, context):
            admissible, _ = validate_hard_constraints(slot, context, hard)
            if admissible:
                return self.scorer.score_slot(slot, context, hard, (), request.priority)
        return None

    def find_morning_slot(self, duration_minutes: int, context: SchedulingContext,
                          window_end: Optional[datetime] = None) -> Optional[ScoredSlot]:
        return self.find_next_available_slot(duration_minutes, context, day_parts="morning", window_end=window_end)

    def find_focus_slot(self, duration_minutes: int, context: SchedulingContext,
                        window_end: Optional[datetime] = None) -> Optional[ScoredSlot]:
        return self.find_next_available_slot(duration_minutes, context, day_parts="focus", window_end=window_end)

    def find_conflicts(self, slot: TimeSlot, context: SchedulingContext) -> List[ScheduledEvent]:
        """Events a proposed slot would overlap."""
        return find_conflicts(slot, context.events)

    def free_time(self, context: SchedulingContext, start: datetime, end: datetime) -> Dict[str, float]:
        return free_time_stats(context, start, end)

    # ================================
    # RESCHEDULING
    # ================================

    def reschedule(self, events: Sequence[ScheduledEvent], context: SchedulingContext,
                   reason: str = "conflict", note: Optional[str] = None) -> RescheduleResult:
        """
        Find a new slot for each existing event. The event keeps its duration and category and is
        placed at priority 2; cancellations and conflicts must land within a week of `context.now`.
        Each moved event is dropped from the calendar before its search, and every placement is
        added back so later moves in the same batch cannot collide with it.
        """
        result = RescheduleResult()
        working = context

        for event in events:
            working = replace(working, events=tuple(e for e in working.events if e != event))
            deadline = None
            if reason in URGENT_RESCHEDULE_REASONS:
                deadline = context.now + timedelta(days=RESCHEDULE_WITHIN_DAYS)

            request = SchedulingRequest(
                duration_minutes=max(1, round(event.duration_minutes)),
                priority=RESCHEDULE_PRIORITY,
                category=event.category,
                deadline=deadline,
            )
            best = self.find_best_slot(request, working)

            if best is None or not best.is_admissible:
                logger.warning(f"⚠️ Could not reschedule '{event.title}' ({reason})")
                result.conflicts.append(event)
                continue

            result.changes.append(RescheduleChange(event, best, note or f"Rescheduled due to {reason}"))
            moved = ScheduledEvent(best.start, best.end, category=event.category, title=event.title)
            working = replace(working, events=(*working.events, moved))
            logger.info(f"🔁 Moved '{event.title}' from {event.start:%Y-%m-%d %H:%M} to {best.start:%Y-%m-%d %H:%M}")

        return result

    # ================================
    # CONFIGURATION
    # ================================

    def get_weights(self) -> ScoreWeights:
        return self.scorer.get_weights()

    def update_weights(self, weights: Mapping[str, float]) -> ScoreWeights:
        return self.scorer.update_weights(weights)


# Global scheduler service instance
scheduler_service = SchedulerService()
