"""
Schema Validation Utilities

Validates JSON payloads (exam results, catalogs, policy files) before they
are turned into models.

- Basic checks always run and fail fast with a field path
- `strict=True` additionally validates against the bundled JSON Schema
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema


# Schema version constants
RESULT_SCHEMA_VERSION = 1
POLICY_SCHEMA_VERSION = 1


# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _require(data: dict[str, Any], required: list[str], path: str = "") -> None:
    missing = [f for f in required if f not in data]
    if missing:
        raise ValidationError(
            f"Missing required fields: {missing}",
            path=path,
            errors=[f"Missing field: {f}" for f in missing],
        )


def _check_strict(data: dict[str, Any], schema_name: str) -> None:
    schema = _load_schema(schema_name)
    try:
        jsonschema.validate(data, schema)
    except jsonschema.ValidationError as e:
        raise ValidationError(
            f"Schema validation failed: {e.message}",
            path=".".join(str(p) for p in e.absolute_path),
            errors=[e.message],
        ) from e


def validate_exam_result(data: dict[str, Any], *, strict: bool = False) -> None:
    """
    Validate a stored exam result payload.

    Args:
        data: Result dictionary to validate
        strict: If True, also validate against exam_result.schema.json

    Raises:
        ValidationError: If data is invalid
    """
    _require(data, [
        "schema_version", "exam_id", "student_id",
        "question_results", "total_mark", "percentage",
    ])

    version = data.get("schema_version")
    if version != RESULT_SCHEMA_VERSION:
        raise ValidationError(
            f"Unsupported result schema version: {version} (expected {RESULT_SCHEMA_VERSION})",
            path="schema_version",
        )

    for key in ("exam_id", "student_id"):
        value = data.get(key)
        if not (isinstance(value, str) and value):
            raise ValidationError(f"Invalid {key}: {value!r}", path=key)

    for key in ("total_mark", "percentage"):
        value = data.get(key)
        if not _is_number(value) or value < 0:
            raise ValidationError(
                f"Invalid {key}: {value!r} (must be non-negative number)",
                path=key,
            )

    results = data.get("question_results")
    if not isinstance(results, list):
        raise ValidationError("question_results must be a list", path="question_results")

    seen: set[str] = set()
    for i, item in enumerate(results):
        _validate_question_result(item, f"question_results[{i}]")
        if item["question_id"] in seen:
            raise ValidationError(
                f"Duplicate result for question {item['question_id']!r}",
                path=f"question_results[{i}].question_id",
            )
        seen.add(item["question_id"])

    remark = data.get("remark")
    if remark is not None and not isinstance(remark, str):
        raise ValidationError("remark must be a string", path="remark")

    if strict:
        _check_strict(data, "exam_result")


def _validate_question_result(data: Any, path: str) -> None:
    """Validate one question result entry."""
    if not isinstance(data, dict):
        raise ValidationError("question result must be an object", path=path)
    _require(data, ["question_id", "awarded_mark", "source"], path)

    mark = data["awarded_mark"]
    if not _is_number(mark) or mark < 0:
        raise ValidationError(
            f"Invalid awarded_mark: {mark!r} (must be non-negative number)",
            path=f"{path}.awarded_mark",
        )

    source = data["source"]
    if source not in ("label", "direct"):
        raise ValidationError(f"Invalid mark source: {source!r}", path=f"{path}.source")
    if source == "label" and not data.get("label"):
        raise ValidationError("label source requires a label", path=f"{path}.label")
    if source == "direct" and data.get("label") is not None:
        raise ValidationError("direct source must not carry a label", path=f"{path}.label")


def validate_catalog(data: dict[str, Any], *, strict: bool = False) -> None:
    """
    Validate a question catalog payload.

    Raises:
        ValidationError: If data is invalid
    """
    _require(data, ["exam_id", "questions"])

    questions = data.get("questions")
    if not isinstance(questions, list):
        raise ValidationError("questions must be a list", path="questions")

    seen: set[str] = set()
    for i, item in enumerate(questions):
        path = f"questions[{i}]"
        if not isinstance(item, dict):
            raise ValidationError("question must be an object", path=path)
        _require(item, ["question_id", "max_mark"], path)
        max_mark = item["max_mark"]
        if not _is_number(max_mark) or max_mark < 0:
            raise ValidationError(
                f"Invalid max_mark: {max_mark!r} (must be non-negative number)",
                path=f"{path}.max_mark",
            )
        if item["question_id"] in seen:
            raise ValidationError(
                f"Duplicate question id {item['question_id']!r}",
                path=f"{path}.question_id",
            )
        seen.add(item["question_id"])

    if strict:
        _check_strict(data, "catalog")


def validate_policy(data: dict[str, Any], *, strict: bool = False) -> None:
    """
    Validate an assessment policy file payload.

    Raises:
        ValidationError: If data is invalid
    """
    _require(data, ["schema_version", "labels"])

    version = data.get("schema_version")
    if version != POLICY_SCHEMA_VERSION:
        raise ValidationError(
            f"Unsupported policy schema version: {version} (expected {POLICY_SCHEMA_VERSION})",
            path="schema_version",
        )

    labels = data.get("labels")
    if not isinstance(labels, list) or not labels:
        raise ValidationError("labels must be a non-empty list", path="labels")

    for i, item in enumerate(labels):
        path = f"labels[{i}]"
        if not isinstance(item, dict):
            raise ValidationError("label entry must be an object", path=path)
        _require(item, ["label", "fraction"], path)
        fraction = item["fraction"]
        if not _is_number(fraction) or not (0 <= fraction <= 1):
            raise ValidationError(
                f"Invalid fraction: {fraction!r} (must be within [0, 1])",
                path=f"{path}.fraction",
            )

    if strict:
        _check_strict(data, "policy")
