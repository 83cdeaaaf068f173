"""
Fail-fast input checks shared by every calculator.

Each calculator collects all problems with its inputs into a ValidationResult
before any accumulation starts, then raises once with the full list:
- a missing required collection raises NullInputError immediately
- negative amounts, balances and rates raise InvalidArgumentError
- non-positive window lengths and inverted date ranges raise InvalidArgumentError
- growth and inflation rates at or below -100% raise InvalidArgumentError
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, List, Optional

import numpy as np


class NullInputError(TypeError):
    """A required collection argument was None."""


class InvalidArgumentError(ValueError):
    """An input value was outside its allowed domain."""


@dataclass
class ValidationResult:
    """Collects every validation error for one calculator call."""
    context: str = "input"
    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def summary(self) -> str:
        if not self.errors:
            return f"{self.context}: all checks passed."
        lines = [f"{self.context}: {len(self.errors)} invalid argument(s):"]
        for e in self.errors:
            lines.append(f"  - {e}")
        return "\n".join(lines)

    def raise_for_errors(self) -> None:
        if self.errors:
            raise InvalidArgumentError(self.summary())

    # --- individual checks ---

    def non_negative(self, value: Optional[float], label: str) -> None:
        if value is not None and value < 0:
            self.errors.append(f"{label} cannot be negative (got {value}).")

    def greater_than(self, value: Optional[float], floor: float, label: str) -> None:
        if value is not None and value <= floor:
            self.errors.append(f"{label} must be greater than {floor} (got {value}).")

    def whole_positive(self, value: Any, label: str) -> None:
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            self.errors.append(f"{label} must be a whole number of days (got {value!r}).")
        elif value <= 0:
            self.errors.append(f"{label} must be positive (got {value}).")

    def date_order(self, start: date, end: date, *, label: str = "end date") -> None:
        if end < start:
            self.errors.append(f"{label} {end} must not be before start date {start}.")

    def each_non_negative(self, items: Iterable[Any], attr: str, label: str) -> None:
        n_neg = sum(1 for item in items if getattr(item, attr) < 0)
        if n_neg > 0:
            self.errors.append(f"{n_neg} {label} have a negative {attr}.")


def require(value: Any, name: str) -> None:
    """Raise NullInputError when a required collection is missing."""
    if value is None:
        raise NullInputError(f"{name} is required.")
