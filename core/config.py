"""
Engine configuration.
Constants shared by the calculators live here so callers can override them per call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class EngineConfig:
    days_per_year: int = 365
    months_per_year: int = 12

    # total debt at or below this counts as paid off (absorbs rounding)
    debt_free_threshold: float = 0.01

    # stress factor applied to daily spend in the conservative spendable scenario
    conservative_multiplier: float = 1.5

    default_inflation_rate: float = 0.03
    default_window_days: Tuple[int, ...] = (7, 30, 90)

    # net worth milestone tracked by the forward simulation
    millionaire_threshold: float = 1_000_000.0

    default_event_description: str = "Daily balance"


DEFAULT_CONFIG = EngineConfig()
