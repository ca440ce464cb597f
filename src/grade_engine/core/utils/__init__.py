"""
Utils Package

Serialization and utility functions.
"""

from .serialization import (
    serialize_exam_result,
    deserialize_exam_result,
    deserialize_catalog,
    load_catalog_json,
    save_catalog_json,
    serialize_policy,
    deserialize_policy,
    load_policy_json,
    save_policy_json,
)

__all__ = [
    "serialize_exam_result",
    "deserialize_exam_result",
    "deserialize_catalog",
    "load_catalog_json",
    "save_catalog_json",
    "serialize_policy",
    "deserialize_policy",
    "load_policy_json",
    "save_policy_json",
]
