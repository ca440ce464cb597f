"""
Grading Engine Core Package

Shared data models, the assessment policy and the result aggregator.

**DESIGN RULES:**

1. **Immutable Data Models**
   - Frozen dataclasses; edits create new instances

2. **Calculated Totals (Never Hand-Summed)**
   - `total_mark` and `percentage` only ever come from `aggregate()`
   - `QuestionCatalog.max_total` is calculated from its questions

3. **Policy as Data**
   - Label → fraction tables are configuration (`AssessmentPolicy`),
     never constants at call sites
"""

from .aggregation import Aggregate, aggregate, percentage_of
from .errors import (
    AggregationInvariantViolation,
    GradingError,
    OutOfBoundsMark,
    PersistenceError,
    SessionStateError,
    UnknownLabelError,
)
from .models import ExamResult, Question, QuestionCatalog, QuestionResult, clamp_direct_mark
from .policy import AssessmentPolicy, PRESETS, round_half_up

__all__ = [
    "Aggregate",
    "aggregate",
    "percentage_of",
    "AggregationInvariantViolation",
    "GradingError",
    "OutOfBoundsMark",
    "PersistenceError",
    "SessionStateError",
    "UnknownLabelError",
    "ExamResult",
    "Question",
    "QuestionCatalog",
    "QuestionResult",
    "clamp_direct_mark",
    "AssessmentPolicy",
    "PRESETS",
    "round_half_up",
]
