from pydantic import BaseModel, Field, NaiveDatetime
from datetime import datetime, time
from typing import Optional, List

from .config import DEFAULT_PRIORITY, DEFAULT_STEP_MINUTES
from .scheduling.core.constants import Chronotype, DEFAULT_BUFFER_MINUTES, DEFAULT_MAX_BACK_TO_BACK
from .scheduling.core.context import FocusBlock, ScheduledEvent, SchedulingContext, TimeRange, WorkingHours
from .scheduling.core.day_parts import DayPart
from .scheduling.core.time_slot import ScoredSlot
from .scheduling.scoring.slot_scoring import explain_slot
from .services.scheduler_service import SchedulingRequest

# ----------------- Context Schemas ---------------------


class EventIn(BaseModel):
    start_time: NaiveDatetime
    end_time: NaiveDatetime
    category: str = "general"
    title: str = ""

    def to_event(self) -> ScheduledEvent:
        return ScheduledEvent(start=self.start_time, end=self.end_time, category=self.category, title=self.title)


class TimeRangeIn(BaseModel):
    start: NaiveDatetime
    end: NaiveDatetime


class FocusBlockIn(TimeRangeIn):
    title: str = "Focus Block"
    protected: bool = True


class DailyWindowIn(BaseModel):
    start: time
    end: time


class WorkingHoursIn(DailyWindowIn):
    days: List[int] = [0, 1, 2, 3, 4]


class ContextIn(BaseModel):
    events: List[EventIn] = []
    chronotype: Chronotype = Chronotype.BALANCED
    now: Optional[NaiveDatetime] = None
    working_hours: Optional[WorkingHoursIn] = None
    preferred_hours: Optional[DailyWindowIn] = None
    lunch_time: Optional[DailyWindowIn] = None
    blocked_ranges: List[TimeRangeIn] = []
    focus_blocks: List[FocusBlockIn] = []
    buffer_minutes: int = DEFAULT_BUFFER_MINUTES
    max_back_to_back: int = DEFAULT_MAX_BACK_TO_BACK

    def to_context(self) -> SchedulingContext:
        working_hours = WorkingHours()
        if self.working_hours:
            working_hours = WorkingHours(self.working_hours.start, self.working_hours.end, tuple(self.working_hours.days))

        kwargs = {"now": self.now} if self.now else {}
        return SchedulingContext(
            events=[event.to_event() for event in self.events],
            chronotype=self.chronotype,
            working_hours=working_hours,
            preferred_hours=DayPart("preferred", self.preferred_hours.start, self.preferred_hours.end) if self.preferred_hours else None,
            lunch_time=DayPart("lunch", self.lunch_time.start, self.lunch_time.end) if self.lunch_time else None,
            blocked_ranges=[TimeRange(r.start, r.end) for r in self.blocked_ranges],
            focus_blocks=[FocusBlock(b.start, b.end, b.title, b.protected) for b in self.focus_blocks],
            buffer_minutes=self.buffer_minutes,
            max_back_to_back=self.max_back_to_back,
            **kwargs,
        )

# ----------------- Request Schemas ---------------------


class SlotRequestIn(BaseModel):
    duration_minutes: int
    priority: int = DEFAULT_PRIORITY
    window_start: Optional[NaiveDatetime] = None
    window_end: Optional[NaiveDatetime] = None
    day_parts: Optional[List[str]] = None  # preset names: "morning", "focus", "working"
    step_minutes: int = DEFAULT_STEP_MINUTES
    category: Optional[str] = None
    deadline: Optional[NaiveDatetime] = None
    preferred_times: List[TimeRangeIn] = []
    blocking_categories: Optional[List[str]] = None
    respect_working_hours: bool = False
    include_weekends: bool = True
    limit: Optional[int] = 10

    def to_request(self) -> SchedulingRequest:
        return SchedulingRequest(
            duration_minutes=self.duration_minutes,
            priority=self.priority,
            window_start=self.window_start,
            window_end=self.window_end,
            day_parts=self.day_parts,
            step_minutes=self.step_minutes,
            category=self.category,
            deadline=self.deadline,
            preferred_times=[TimeRange(r.start, r.end) for r in self.preferred_times],
            blocking_categories=self.blocking_categories,
            respect_working_hours=self.respect_working_hours,
            include_weekends=self.include_weekends,
            limit=self.limit,
        )


class SuggestionRequest(BaseModel):
    context: ContextIn = Field(default_factory=ContextIn)
    request: SlotRequestIn

# ----------------- Response Schemas ---------------------


class ScoreBreakdownOut(BaseModel):
    constraint_score: float
    energy_score: float
    timing_score: float
    balance_score: float
    total_score: float

    class Config:
        from_attributes = True


class PenaltyOut(BaseModel):
    name: str
    penalty: float

    class Config:
        from_attributes = True


class ScoredSlotOut(BaseModel):
    start_time: datetime
    end_time: datetime
    duration_minutes: int
    score: float
    breakdown: ScoreBreakdownOut
    violations: List[str] = []
    penalties: List[PenaltyOut] = []
    reasons: List[str] = []

    @classmethod
    def from_scored(cls, scored: ScoredSlot) -> "ScoredSlotOut":
        return cls(
            start_time=scored.start,
            end_time=scored.end,
            duration_minutes=scored.duration_minutes,
            score=round(scored.score, 2),
            breakdown=ScoreBreakdownOut.model_validate(scored.breakdown),
            violations=list(scored.violations),
            penalties=[PenaltyOut.model_validate(p) for p in scored.penalties],
            reasons=explain_slot(scored),
        )


class WeightsOut(BaseModel):
    constraints: float
    energy: float
    timing: float
    balance: float

    class Config:
        from_attributes = True


class WeightsUpdate(BaseModel):
    constraints: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    energy: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    timing: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    balance: Optional[float] = Field(None, ge=0, allow_inf_nan=False)


class FreeTimeOut(BaseModel):
    total_free_minutes: float
    largest_free_block: float
    average_free_block: float
    free_time_percentage: float
