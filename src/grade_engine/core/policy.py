"""
Module: policy

Purpose:
    Provides AssessmentPolicy - the configurable table that maps a
    qualitative assessment label to a fraction of a question's maximum
    mark, plus the whole-mark rounding rule used to apply it.

Key Functions:
    - AssessmentPolicy.from_mapping(mapping): Build a policy from label → fraction
    - AssessmentPolicy.preset(name): Built-in tables from the legacy screens
    - AssessmentPolicy.awarded_mark(label, max_mark): Apply the policy
    - round_half_up(value, places): Decimal half-up rounding

Dependencies:
    - dataclasses (std)
    - decimal (std)

Used By:
    - core.models.marks
    - config
    - session

Notes:
    The legacy screens disagree on what a partial answer is worth
    (25%, 30% or 50%). No preset is the default; the deploying owner
    chooses a preset or supplies a policy file.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Mapping, Sequence, Tuple, Union

from .errors import UnknownLabelError

Number = Union[int, float]


def round_half_up(value: Union[Number, Decimal], places: int = 0) -> Number:
    """
    Round half away from zero for non-negative values.

    Unlike round(), 2.5 rounds to 3.

    Args:
        value: Number to round
        places: Decimal places to keep

    Returns:
        int when places == 0, else float
    """
    exponent = Decimal(1).scaleb(-places)
    rounded = Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP)
    if places == 0:
        return int(rounded)
    return float(rounded)


# Label tables reproduced from the legacy entry screens.
PRESETS: dict[str, Tuple[Tuple[str, float], ...]] = {
    "three_level": (
        ("not_written", 0.0),
        ("poorly_written", 0.3),
        ("well_written", 1.0),
    ),
    "four_level": (
        ("did_not_write", 0.0),
        ("did_not_write_well", 0.25),
        ("wrote_no_marks", 0.5),
        ("wrote_well", 1.0),
    ),
}


@dataclass(frozen=True)
class AssessmentPolicy:
    """
    Ordered label → fraction table (immutable).

    Attributes:
        entries: (label, fraction) pairs in display order

    Invariants:
        - at least one label
        - labels are unique and non-empty
        - every fraction is in [0, 1]

    Example:
        >>> policy = AssessmentPolicy.from_mapping({"none": 0, "full": 1})
        >>> policy.awarded_mark("full", 4)
        4
    """

    entries: Tuple[Tuple[str, float], ...]

    def __post_init__(self) -> None:
        """Validate the table on construction."""
        if not self.entries:
            raise ValueError("AssessmentPolicy needs at least one label")
        seen: set[str] = set()
        for label, fraction in self.entries:
            if not label:
                raise ValueError("Assessment labels must be non-empty")
            if label in seen:
                raise ValueError(f"Duplicate assessment label: {label!r}")
            if not (0.0 <= fraction <= 1.0):
                raise ValueError(
                    f"Fraction for {label!r} must be within [0, 1]: {fraction}"
                )
            seen.add(label)

    # ─────────────────────────────────────────────────────────────────────────
    # Factory Methods
    # ─────────────────────────────────────────────────────────────────────────

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Number]) -> AssessmentPolicy:
        """Build a policy from an insertion-ordered mapping."""
        return cls(entries=tuple((label, float(f)) for label, f in mapping.items()))

    @classmethod
    def from_pairs(cls, pairs: Sequence[Tuple[str, Number]]) -> AssessmentPolicy:
        return cls(entries=tuple((label, float(f)) for label, f in pairs))

    @classmethod
    def preset(cls, name: str) -> AssessmentPolicy:
        """
        Build one of the built-in label tables.

        Args:
            name: Key of PRESETS

        Raises:
            ValueError: If the preset does not exist
        """
        if name not in PRESETS:
            raise ValueError(
                f"Unknown policy preset {name!r} (expected one of {sorted(PRESETS)})"
            )
        return cls(entries=PRESETS[name])

    # ─────────────────────────────────────────────────────────────────────────
    # Lookup
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def labels(self) -> tuple[str, ...]:
        return tuple(label for label, _ in self.entries)

    def __contains__(self, label: object) -> bool:
        return any(label == known for known, _ in self.entries)

    def fraction(self, label: str) -> float:
        """
        Fraction of the maximum mark awarded for a label.

        Raises:
            UnknownLabelError: If label is not configured
        """
        for known, fraction in self.entries:
            if known == label:
                return fraction
        raise UnknownLabelError(label, self.labels)

    def awarded_mark(self, label: str, max_mark: Number) -> Number:
        """
        Whole mark awarded for a label on a question worth max_mark.

        Rounds half-up to the nearest whole mark, so 0.25 of 10 is 3.
        Capped at max_mark, which only matters for fractional max marks.

        Args:
            label: Configured assessment label
            max_mark: Question's maximum mark (non-negative)

        Returns:
            Mark in [0, max_mark]

        Raises:
            UnknownLabelError: If label is not configured
        """
        fraction = self.fraction(label)
        mark = round_half_up(Decimal(str(fraction)) * Decimal(str(max_mark)))
        return min(mark, max_mark)

    def to_dict(self) -> dict:
        return {
            "labels": [
                {"label": label, "fraction": fraction}
                for label, fraction in self.entries
            ]
        }

    def __repr__(self) -> str:
        table = ", ".join(f"{label}={fraction:g}" for label, fraction in self.entries)
        return f"AssessmentPolicy({table})"
