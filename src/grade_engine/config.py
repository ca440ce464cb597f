"""
Module: config

Purpose:
    Configuration dataclass for the grading engine. Immutable
    configuration with validation on construction.

Key Classes:
    - GradingConfig: Policy source, result storage and validation mode

Dependencies:
    - dataclasses (std)
    - pathlib (std)

Used By:
    - Hosts that build GradingSession instances
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .core.policy import PRESETS, AssessmentPolicy
from .core.utils.serialization import load_policy_json
from .store import InMemoryResultStore, JsonFileResultStore, ResultStore


@dataclass(frozen=True)
class GradingConfig:
    """
    Configuration for grading sessions (immutable).

    Exactly one policy source is required; there is no default table.

    Attributes:
        policy_preset: Name of a built-in table ("three_level", "four_level")
        policy_path: Path to a policy JSON file
        results_dir: Directory for the JSON result store; None keeps
            results in memory
        strict_validation: Validate files against the full JSON Schema

    Example:
        >>> config = GradingConfig(
        ...     policy_path=Path("policy.json"),
        ...     results_dir=Path("/var/lib/grades"),
        ... )
        >>> policy = config.load_policy()
        >>> store = config.create_store()
    """

    policy_preset: Optional[str] = None
    policy_path: Optional[Path] = None
    results_dir: Optional[Path] = None
    strict_validation: bool = False

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if (self.policy_preset is None) == (self.policy_path is None):
            raise ValueError("Set exactly one of policy_preset or policy_path")
        if self.policy_preset is not None and self.policy_preset not in PRESETS:
            raise ValueError(
                f"Unknown policy preset {self.policy_preset!r} "
                f"(expected one of {sorted(PRESETS)})"
            )
        if self.results_dir is not None and self.results_dir.exists() and not self.results_dir.is_dir():
            raise ValueError(f"results_dir is not a directory: {self.results_dir}")

    def load_policy(self) -> AssessmentPolicy:
        """
        Resolve the configured assessment policy.

        Raises:
            FileNotFoundError: If policy_path does not exist
            ValidationError: If the policy file is invalid
        """
        if self.policy_path is not None:
            return load_policy_json(self.policy_path, strict=self.strict_validation)
        return AssessmentPolicy.preset(self.policy_preset)

    def create_store(self) -> ResultStore:
        """JSON file store when results_dir is set, else an in-memory store."""
        if self.results_dir is not None:
            return JsonFileResultStore(self.results_dir, strict=self.strict_validation)
        return InMemoryResultStore()
