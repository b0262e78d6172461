"""
Exceptions raised by the scheduling engine.
"""


class SchedulingError(Exception):
    """Base class for scheduling engine errors."""


class SchedulingValidationError(SchedulingError, ValueError):
    """A request was malformed (bad duration, inverted window, unknown chronotype...)."""


class ConstraintEvaluationError(SchedulingError):
    """
    Raised inside a constraint when it cannot be evaluated.
    Never escapes the constraint boundary: SchedulingConstraint.check catches it.
    """
