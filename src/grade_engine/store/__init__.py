"""
Result Store Package

The persistence boundary for exam results and its implementations.
"""

from .base import ResultStore, SaveConfirmation
from .json_store import JsonFileResultStore
from .memory import InMemoryResultStore

__all__ = [
    "ResultStore",
    "SaveConfirmation",
    "JsonFileResultStore",
    "InMemoryResultStore",
]
