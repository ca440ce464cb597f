"""
Schemas Package

JSON schema definitions and validation utilities.
"""

from .validator import (
    validate_exam_result,
    validate_catalog,
    validate_policy,
    ValidationError,
    RESULT_SCHEMA_VERSION,
    POLICY_SCHEMA_VERSION,
)

__all__ = [
    "validate_exam_result",
    "validate_catalog",
    "validate_policy",
    "ValidationError",
    "RESULT_SCHEMA_VERSION",
    "POLICY_SCHEMA_VERSION",
]
