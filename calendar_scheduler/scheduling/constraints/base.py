"""
Constraint base classes.

Constraints are data handed to the engine, not branches inside it: the validator and the
soft scorer only ever walk a list of SchedulingConstraint objects, so a new rule is a new
subclass (or a wrapped callable) and nothing else changes.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional

from ..core.constants import ConstraintType
from ..core.context import SchedulingContext
from ..core.exceptions import ConstraintEvaluationError
from ..core.time_slot import TimeSlot


@dataclass(frozen=True)
class ConstraintResult:
    name: str
    violated: bool
    penalty: float = 0.0
    description: str = ""


class SchedulingConstraint(ABC):
    """A named rule evaluated against a (slot, context) pair."""

    constraint_type: ConstraintType
    name: str = "constraint"
    description: str = ""

    @property
    def logger(self) -> logging.Logger:
        return logging.getLogger(type(self).__module__)

    @abstractmethod
    def is_satisfied(self, slot: TimeSlot, context: SchedulingContext) -> bool:
        """Return True when the slot respects this rule. May raise ConstraintEvaluationError."""

    @abstractmethod
    def evaluate(self, slot: TimeSlot, context: SchedulingContext) -> ConstraintResult:
        """Evaluate the rule. Exceptions are handled by check()."""

    def check(self, slot: TimeSlot, context: SchedulingContext) -> ConstraintResult:
        """
        Evaluate without ever raising. A rule that errors or lacks the context data it needs
        counts as not violated / zero penalty, and the fault is logged here.
        """
        try:
            return self.evaluate(slot, context)
        except Exception as e:
            self.logger.warning(f"⚠️ Constraint '{self.name}' could not be evaluated for {slot!r}: {e}")
            return ConstraintResult(self.name, violated=False, penalty=0.0, description=str(e))

    def __repr__(self):
        return f"{type(self).__name__}(name={self.name!r}, type={self.constraint_type.value})"


class HardConstraint(SchedulingConstraint):
    """Admissibility gate: any violation makes the slot unusable."""

    constraint_type = ConstraintType.HARD

    def violation_message(self, slot: TimeSlot, context: SchedulingContext) -> str:
        return self.description or self.name

    def evaluate(self, slot: TimeSlot, context: SchedulingContext) -> ConstraintResult:
        if self.is_satisfied(slot, context):
            return ConstraintResult(self.name, violated=False)
        return ConstraintResult(self.name, violated=True, description=self.violation_message(slot, context))

    @classmethod
    def from_callable(cls, name: str, rule: Callable[[TimeSlot, SchedulingContext], bool],
                      description: str = "") -> "HardConstraint":
        return _CallableHardConstraint(name, rule, description)


class SoftConstraint(SchedulingConstraint):
    """
    Preference rule. A violated rule contributes `penalty` points; subclasses with a
    continuous notion of "how badly" override penalty_for.
    """

    constraint_type = ConstraintType.SOFT
    penalty: float = 10.0

    def penalty_for(self, slot: TimeSlot, context: SchedulingContext) -> float:
        return 0.0 if self.is_satisfied(slot, context) else self.penalty

    def evaluate(self, slot: TimeSlot, context: SchedulingContext) -> ConstraintResult:
        penalty = max(0.0, self.penalty_for(slot, context))
        return ConstraintResult(self.name, violated=penalty > 0, penalty=penalty, description=self.description)

    @classmethod
    def from_callable(cls, name: str, rule: Callable[[TimeSlot, SchedulingContext], bool],
                      penalty: float = 10.0, description: str = "") -> "SoftConstraint":
        return _CallableSoftConstraint(name, rule, penalty, description)


class _CallableHardConstraint(HardConstraint):
    def __init__(self, name: str, rule: Callable[[TimeSlot, SchedulingContext], bool], description: str = ""):
        self.name = name
        self.rule = rule
        self.description = description or name

    def is_satisfied(self, slot: TimeSlot, context: SchedulingContext) -> bool:
        return bool(self.rule(slot, context))


class _CallableSoftConstraint(SoftConstraint):
    def __init__(self, name: str, rule: Callable[[TimeSlot, SchedulingContext], bool],
                 penalty: float = 10.0, description: str = ""):
        self.name = name
        self.rule = rule
        self.penalty = penalty
        self.description = description or name

    def is_satisfied(self, slot: TimeSlot, context: SchedulingContext) -> bool:
        return bool(self.rule(slot, context))


def require(value, what: str, constraint: Optional[SchedulingConstraint] = None):
    """Return value, or raise ConstraintEvaluationError when the context lacks it."""
    if value is None:
        owner = f" for '{constraint.name}'" if constraint is not None else ""
        raise ConstraintEvaluationError(f"Missing context data{owner}: {what}")
    return value
