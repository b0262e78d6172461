"""
Calendar Scheduler Scheduling Engine

Candidate generation, hard/soft constraint evaluation and multi-factor scoring for
placing a task, meeting or focus block into an existing calendar.
Works on plain in-memory data; storage and transport live outside this package.
"""

from .core.constants import Chronotype, ConstraintType
from .core.context import FocusBlock, ScheduledEvent, SchedulingContext, TimeRange, WorkingHours
from .core.day_parts import DayPart, FOCUS, MORNING, NAMED_DAY_PARTS, WORKING
from .core.exceptions import ConstraintEvaluationError, SchedulingError, SchedulingValidationError
from .core.slot_generator import CandidateSlotGenerator, generate_candidate_slots
from .core.time_slot import Penalty, ScoreBreakdown, ScoredSlot, TimeSlot
from .constraints.base import ConstraintResult, HardConstraint, SchedulingConstraint, SoftConstraint
from .constraints.hard_constraints import DEFAULT_HARD_CONSTRAINTS, validate_hard_constraints
from .constraints.soft_constraints import DEFAULT_SOFT_CONSTRAINTS, calculate_soft_constraint_score
from .scoring.energy_scoring import energy_level
from .scoring.slot_scoring import ScoreWeights, SlotScorer, explain_slot

__version__ = "1.0.0"
