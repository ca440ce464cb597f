"""
Core Models Package

Immutable, validated data models for grading.

All models in this package are frozen dataclasses. A session edit never
mutates a result in place; it builds a new ExamResult, so a rejected edit
leaves the previous one intact.

| Model | Role |
|-------|------|
| `Question` / `QuestionCatalog` | Read-only exam questions, max marks |
| `QuestionResult` | One question's mark, label- or direct-sourced |
| `ExamResult` | Per-student aggregate, total and percentage |
"""

from .questions import Question, QuestionCatalog
from .marks import QuestionResult, clamp_direct_mark
from .results import ExamResult

__all__ = [
    "Question",
    "QuestionCatalog",
    "QuestionResult",
    "clamp_direct_mark",
    "ExamResult",
]
