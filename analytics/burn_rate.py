"""
Burn rate — rolling daily-spend statistics over trailing windows.

For a window of N days ending on the calculation date (inclusive):
  1. Sum same-day spending events into one total per calendar day
  2. Lay the totals onto a dense N-day array, zero-spend days included
  3. Average = total spend / N (not / number of days with spend)
  4. Standard deviation is the population std over the dense array
  5. Percentiles use the nearest-rank method on the sorted dense array
  6. Min is taken over days with spend only; max over all days
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Iterable, Optional, Sequence

import numpy as np
import pandas as pd

from core.config import DEFAULT_CONFIG, EngineConfig
from core.models import SpendingEvent
from core.utils import DateLike, calendar_days, to_day
from core.validators import ValidationResult, require

logger = logging.getLogger(__name__)

# percentile levels reported per window, in whole percent
_PERCENTILES = (25, 75, 90)


@dataclass(frozen=True)
class BurnRateInput:
    spending_events: Iterable[SpendingEvent]
    calculation_date: DateLike
    window_days: Optional[Sequence[int]] = None  # None -> config.default_window_days


@dataclass(frozen=True)
class WindowBurnRate:
    window_days: int
    average_daily_spend: float
    standard_deviation: float
    min_daily_spend: float
    max_daily_spend: float
    percentile_25: float
    percentile_75: float
    percentile_90: float


@dataclass(frozen=True)
class BurnRateResult:
    by_window: Dict[int, WindowBurnRate]

    def __getitem__(self, window_days: int) -> WindowBurnRate:
        return self.by_window[window_days]

    def to_dataframe(self) -> pd.DataFrame:
        """One row per window, in the order the windows were requested."""
        return pd.DataFrame([
            {
                "window_days": w.window_days,
                "average_daily_spend": w.average_daily_spend,
                "standard_deviation": w.standard_deviation,
                "min_daily_spend": w.min_daily_spend,
                "max_daily_spend": w.max_daily_spend,
                "p25": w.percentile_25,
                "p75": w.percentile_75,
                "p90": w.percentile_90,
            }
            for w in self.by_window.values()
        ])


def nearest_rank(sorted_values: np.ndarray, pct: int) -> float:
    """Nearest-rank percentile: index = ceil(n * pct / 100) - 1, clamped to [0, n-1]."""
    n = len(sorted_values)
    if n == 0:
        return 0.0
    idx = -(-n * pct // 100) - 1
    idx = max(0, min(idx, n - 1))
    return float(sorted_values[idx])


def _daily_totals(events: Iterable[SpendingEvent]) -> Dict[date, float]:
    totals: Dict[date, float] = {}
    for e in events:
        day = to_day(e.date)
        totals[day] = totals.get(day, 0.0) + float(e.amount)
    return totals


def _window_burn_rate(
    totals: Dict[date, float],
    calculation_date: date,
    window_days: int,
) -> WindowBurnRate:
    window_start = calculation_date - timedelta(days=window_days)  # exclusive
    days = calendar_days(window_start + timedelta(days=1), calculation_date)
    daily = np.array([totals.get(d, 0.0) for d in days], dtype=float)

    total_spend = float(daily.sum())
    average = total_spend / window_days

    # population std around the window average
    std = float(np.sqrt(np.mean((daily - average) ** 2)))

    non_zero = daily[daily > 0]
    min_spend = float(non_zero.min()) if non_zero.size > 0 else 0.0
    max_spend = float(daily.max())

    sorted_daily = np.sort(daily)
    p25, p75, p90 = (nearest_rank(sorted_daily, p) for p in _PERCENTILES)

    return WindowBurnRate(
        window_days=window_days,
        average_daily_spend=average,
        standard_deviation=std,
        min_daily_spend=min_spend,
        max_daily_spend=max_spend,
        percentile_25=p25,
        percentile_75=p75,
        percentile_90=p90,
    )


def calculate_burn_rate(
    inputs: BurnRateInput,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> BurnRateResult:
    """
    Compute spending statistics for every requested trailing window.

    Raises
    ------
    NullInputError
        inputs or inputs.spending_events is None
    InvalidArgumentError
        a window length is not a positive whole number or a spending amount is negative
    """
    require(inputs, "inputs")
    require(inputs.spending_events, "spending_events")

    events = list(inputs.spending_events)
    windows = list(inputs.window_days) if inputs.window_days is not None else list(config.default_window_days)
    calc_date = to_day(inputs.calculation_date)

    check = ValidationResult(context="burn rate")
    for w in windows:
        check.whole_positive(w, "window days")
    check.each_non_negative(events, "amount", "spending events")
    check.raise_for_errors()

    totals = _daily_totals(events)

    by_window: Dict[int, WindowBurnRate] = {}
    for w in windows:
        by_window[int(w)] = _window_burn_rate(totals, calc_date, int(w))

    logger.debug(
        "Burn rate on %s over windows %s from %d events.", calc_date, windows, len(events)
    )
    return BurnRateResult(by_window=by_window)
