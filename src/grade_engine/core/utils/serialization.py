"""
Serialization Utilities

Provides to/from JSON utilities for the grading models.

- `serialize_*` / `deserialize_*` pairs for wire payloads
- Validation via schemas before deserialization
- `load_*_json` / `save_*_json` for files on disk
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ..models.questions import QuestionCatalog
from ..models.results import ExamResult
from ..policy import AssessmentPolicy
from ..schemas.validator import (
    POLICY_SCHEMA_VERSION,
    RESULT_SCHEMA_VERSION,
    ValidationError,
    validate_catalog,
    validate_exam_result,
    validate_policy,
)


# ─────────────────────────────────────────────────────────────────────────────
# ExamResult Serialization
# ─────────────────────────────────────────────────────────────────────────────

def serialize_exam_result(result: ExamResult) -> dict[str, Any]:
    """
    Serialize an ExamResult to a dictionary.

    The output can be written to JSON and will pass schema validation.
    """
    data = {"schema_version": RESULT_SCHEMA_VERSION}
    data.update(result.to_dict())
    return data


def deserialize_exam_result(
    data: dict[str, Any],
    *,
    validate: bool = True,
    strict: bool = False,
) -> ExamResult:
    """
    Deserialize an ExamResult from a dictionary.

    Args:
        data: Dictionary from JSON
        validate: Whether to validate before deserializing
        strict: Use the full JSON Schema when validating

    Raises:
        ValidationError: If validate=True and data is invalid
    """
    if validate:
        validate_exam_result(data, strict=strict)
    try:
        return ExamResult.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Cannot build exam result: {e}", errors=[str(e)]) from e


# ─────────────────────────────────────────────────────────────────────────────
# Catalog Serialization
# ─────────────────────────────────────────────────────────────────────────────

def deserialize_catalog(
    data: dict[str, Any],
    *,
    validate: bool = True,
    strict: bool = False,
) -> QuestionCatalog:
    """
    Deserialize a QuestionCatalog from a dictionary.

    Raises:
        ValidationError: If validate=True and data is invalid
    """
    if validate:
        validate_catalog(data, strict=strict)
    try:
        return QuestionCatalog.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Cannot build catalog: {e}", errors=[str(e)]) from e


def load_catalog_json(path: Path, *, strict: bool = False) -> QuestionCatalog:
    """
    Load a catalog from a JSON file.

    Raises:
        FileNotFoundError: If file doesn't exist
        ValidationError: If the file is not a valid catalog
    """
    if not path.exists():
        raise FileNotFoundError(f"Catalog file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Error parsing {path.name}: {e}", path=str(path)) from e

    return deserialize_catalog(data, strict=strict)


def save_catalog_json(catalog: QuestionCatalog, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(catalog.to_dict(), f, indent=2, ensure_ascii=False)


# ─────────────────────────────────────────────────────────────────────────────
# Policy Serialization
# ─────────────────────────────────────────────────────────────────────────────

def serialize_policy(policy: AssessmentPolicy) -> dict[str, Any]:
    data: dict[str, Any] = {"schema_version": POLICY_SCHEMA_VERSION}
    data.update(policy.to_dict())
    return data


def deserialize_policy(
    data: dict[str, Any],
    *,
    validate: bool = True,
    strict: bool = False,
) -> AssessmentPolicy:
    """
    Deserialize an AssessmentPolicy, keeping the file's label order.

    Raises:
        ValidationError: If validate=True and data is invalid
    """
    if validate:
        validate_policy(data, strict=strict)
    try:
        return AssessmentPolicy.from_pairs(
            [(item["label"], item["fraction"]) for item in data["labels"]]
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Cannot build policy: {e}", errors=[str(e)]) from e


def load_policy_json(path: Path, *, strict: bool = False) -> AssessmentPolicy:
    """
    Load an assessment policy from a JSON file.

    Raises:
        FileNotFoundError: If file doesn't exist
        ValidationError: If the file is not a valid policy
    """
    if not path.exists():
        raise FileNotFoundError(f"Policy file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Error parsing {path.name}: {e}", path=str(path)) from e

    return deserialize_policy(data, strict=strict)


def save_policy_json(policy: AssessmentPolicy, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(serialize_policy(policy), f, indent=2, ensure_ascii=False)
