"""
Shared constants and enums for the scheduling engine.
"""

import enum
from datetime import time


class Chronotype(str, enum.Enum):
    MORNING = "morning"
    EVENING = "evening"
    BALANCED = "balanced"


class ConstraintType(str, enum.Enum):
    HARD = "hard"   # admissibility gate
    SOFT = "soft"   # penalty contributor


# Default weights for the four score dimensions (renormalized by SlotScorer)
DEFAULT_WEIGHTS = {
    "constraints": 0.40,
    "energy": 0.25,
    "timing": 0.20,
    "balance": 0.15,
}

# Ideal lead time in hours, keyed by priority (1 = most urgent)
IDEAL_LEAD_HOURS = {
    1: 4,      # Within 4 hours
    2: 24,     # Within 1 day
    3: 72,     # Within 3 days
    4: 168,    # Within 1 week
    5: 336,    # Within 2 weeks
}
MIN_PRIORITY = 1
MAX_PRIORITY = 5

# 5% reduction per ideal period beyond the ideal window
DEFAULT_TIMING_DECAY = 0.95

# Day load deviation (minutes) at which the balance score reaches 0
MAX_BALANCE_DEVIATION_MINUTES = 240

DEFAULT_STEP_MINUTES = 15
DEFAULT_BUFFER_MINUTES = 5
DEFAULT_MAX_BACK_TO_BACK = 3

# Default working hours: 9 AM - 5 PM, Monday - Friday (datetime.weekday() numbering)
DEFAULT_WORK_START = time(9, 0)
DEFAULT_WORK_END = time(17, 0)
DEFAULT_WORK_DAYS = (0, 1, 2, 3, 4)
