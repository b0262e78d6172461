"""
Main slot scoring aggregator that combines all domain-specific scoring functions.
"""

import logging
import math
import threading
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Sequence

from ..constraints.base import SchedulingConstraint
from ..constraints.hard_constraints import validate_hard_constraints
from ..constraints.soft_constraints import calculate_soft_constraint_score
from ..core.constants import DEFAULT_TIMING_DECAY, DEFAULT_WEIGHTS
from ..core.context import SchedulingContext
from ..core.exceptions import SchedulingValidationError
from ..core.time_slot import ScoreBreakdown, ScoredSlot, TimeSlot
from .energy_scoring import calculate_energy_score
from .time_scoring import calculate_timing_score, validate_priority
from .workload_scoring import calculate_balance_score

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoreWeights:
    constraints: float
    energy: float
    timing: float
    balance: float

    def total(self) -> float:
        return self.constraints + self.energy + self.timing + self.balance

    def as_dict(self) -> dict:
        return {
            "constraints": self.constraints,
            "energy": self.energy,
            "timing": self.timing,
            "balance": self.balance,
        }


def normalize_weights(weights: Mapping[str, float]) -> ScoreWeights:
    """Validate the four weights and rescale them to sum to 1.0."""
    unknown = set(weights) - set(DEFAULT_WEIGHTS)
    if unknown:
        raise SchedulingValidationError(f"Unknown weight(s) {sorted(unknown)} (expected {sorted(DEFAULT_WEIGHTS)})")

    merged = {key: weights.get(key, 0.0) for key in DEFAULT_WEIGHTS}
    for key, value in merged.items():
        if not math.isfinite(value):
            raise SchedulingValidationError(f"Weight '{key}' must be a finite number, got {value}")
        if value < 0:
            raise SchedulingValidationError(f"Weight '{key}' cannot be negative, got {value}")

    total = sum(merged.values())
    if total <= 0:
        raise SchedulingValidationError("At least one weight must be positive")
    if not math.isfinite(total):
        raise SchedulingValidationError("Weights are too large to normalize")

    return ScoreWeights(**{key: value / total for key, value in merged.items()})


class SlotScorer:
    """
    Scores candidate slots on four dimensions (soft constraints, energy, timing, balance)
    and combines them with weights that always sum to 1.0.

    score_slot is pure and order-independent. The weights are the only mutable state;
    update_weights takes a lock and each scoring batch works on one weights snapshot, but
    sharing one scorer between request threads still means weight changes land between batches.
    """

    def __init__(self, weights: Optional[Mapping[str, float]] = None, timing_decay: float = DEFAULT_TIMING_DECAY):
        if not 0 < timing_decay <= 1:
            raise SchedulingValidationError(f"Timing decay must be within (0, 1], got {timing_decay}")
        self._lock = threading.Lock()
        self._weights = normalize_weights({**DEFAULT_WEIGHTS, **(weights or {})})
        self.timing_decay = timing_decay

    # ================================
    # WEIGHTS
    # ================================

    def get_weights(self) -> ScoreWeights:
        with self._lock:
            return self._weights

    def update_weights(self, weights: Optional[Mapping[str, float]] = None, **partial: float) -> ScoreWeights:
        """
        Merge the given weights over the current ones, then renormalize all four.
        Setting only energy shifts every weight proportionally.
        """
        changes = {**(weights or {}), **partial}
        with self._lock:
            self._weights = normalize_weights({**self._weights.as_dict(), **changes})
            logger.info(f"⚖️ Scoring weights updated: {self._weights.as_dict()}")
            return self._weights

    # ================================
    # SCORING
    # ================================

    def score_slot(self, slot: TimeSlot, context: SchedulingContext,
                   hard_constraints: Sequence[SchedulingConstraint] = (),
                   soft_constraints: Sequence[SchedulingConstraint] = (),
                   priority: int = 3) -> ScoredSlot:
        """Score a single time slot."""
        validate_priority(priority)
        return self._score_slot(slot, context, hard_constraints, soft_constraints, priority, self.get_weights())

    def _score_slot(self, slot: TimeSlot, context: SchedulingContext,
                    hard_constraints: Sequence[SchedulingConstraint],
                    soft_constraints: Sequence[SchedulingConstraint],
                    priority: int, weights: ScoreWeights) -> ScoredSlot:
        # Hard constraints first: a rejected slot is not scored any further
        admissible, violations = validate_hard_constraints(slot, context, hard_constraints)
        if not admissible:
            return ScoredSlot(slot.start, slot.end, score=0.0, breakdown=ScoreBreakdown(),
                              violations=tuple(violations))

        constraint_score, penalties = calculate_soft_constraint_score(slot, context, soft_constraints)
        energy_score = calculate_energy_score(slot, context)
        timing_score = calculate_timing_score(slot, context.now, priority, self.timing_decay)
        balance_score = calculate_balance_score(slot, context)

        total_score = (
            (weights.constraints * constraint_score) +
            (weights.energy * energy_score) +
            (weights.timing * timing_score) +
            (weights.balance * balance_score)
        )

        breakdown = ScoreBreakdown(
            constraint_score=constraint_score,
            energy_score=energy_score,
            timing_score=timing_score,
            balance_score=balance_score,
            total_score=total_score,
        )
        return ScoredSlot(slot.start, slot.end, score=total_score, breakdown=breakdown,
                          penalties=tuple(penalties))

    def score_slots(self, slots: Iterable[TimeSlot], context: SchedulingContext,
                    hard_constraints: Sequence[SchedulingConstraint] = (),
                    soft_constraints: Sequence[SchedulingConstraint] = (),
                    priority: int = 3, limit: Optional[int] = None) -> List[ScoredSlot]:
        """
        Score every candidate and return them best first.
        The sort is stable: equal scores keep candidate-generation order.
        """
        validate_priority(priority)
        if limit is not None and limit <= 0:
            raise SchedulingValidationError(f"Limit must be positive, got {limit}")

        weights = self.get_weights()
        scored = [
            self._score_slot(slot, context, hard_constraints, soft_constraints, priority, weights)
            for slot in slots
        ]
        scored.sort(key=lambda s: s.score, reverse=True)

        admissible = sum(1 for s in scored if s.is_admissible)
        logger.debug(f"📊 Scored {len(scored)} candidate slots ({admissible} admissible, priority {priority})")

        return scored[:limit] if limit is not None else scored

    def find_best_slot(self, slots: Iterable[TimeSlot], context: SchedulingContext,
                       hard_constraints: Sequence[SchedulingConstraint] = (),
                       soft_constraints: Sequence[SchedulingConstraint] = (),
                       priority: int = 3) -> Optional[ScoredSlot]:
        """
        Best slot from a list, or None when there were no candidates at all.
        A zero-scored slot is still returned; the caller decides whether to accept it.
        """
        scored = self.score_slots(slots, context, hard_constraints, soft_constraints, priority, limit=1)
        return scored[0] if scored else None

    def __repr__(self):
        return f"SlotScorer(weights={self.get_weights().as_dict()}, timing_decay={self.timing_decay})"


def explain_slot(scored: ScoredSlot) -> List[str]:
    """Human-readable reasons behind a slot's score."""
    if not scored.is_admissible:
        return [f"Rejected: {violation}" for violation in scored.violations]

    reasons = []
    breakdown = scored.breakdown
    if breakdown.energy_score > 80:
        reasons.append("Scheduled during peak energy time")
    if breakdown.timing_score > 90:
        reasons.append("Optimal timing for priority level")
    if breakdown.balance_score > 85:
        reasons.append("Good workload balance")
    if breakdown.constraint_score > 90:
        reasons.append("Meets all preferences")
    for penalty in scored.penalties:
        reasons.append(f"Penalized by {penalty.name} (-{penalty.penalty:g})")
    return reasons
