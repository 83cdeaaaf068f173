from __future__ import annotations

from datetime import date, datetime
from typing import List, Union

import numpy as np
import pandas as pd
from dateutil.relativedelta import relativedelta

DateLike = Union[date, datetime, pd.Timestamp, str]


def to_day(value: DateLike) -> date:
    """Normalise a date-like value to a calendar day (time of day is dropped)."""
    if isinstance(value, datetime):  # also covers pd.Timestamp
        return value.date()
    if isinstance(value, date):
        return value
    return pd.Timestamp(value).date()


def annual_to_periodic_rate(annual_rate: float, periods_per_year: int) -> float:
    """Compound conversion of an annual rate to a per-period rate via (1+r)^(1/n) - 1."""
    return float(np.power(1.0 + float(annual_rate), 1.0 / periods_per_year) - 1.0)


def calendar_days(start: date, end: date) -> List[date]:
    """Every calendar day from start to end inclusive (empty if end < start)."""
    if end < start:
        return []
    return list(pd.date_range(start, end, freq="D").date)


def add_months(day: date, months: int) -> date:
    """Calendar month arithmetic; day-of-month is clamped to the target month's length."""
    return day + relativedelta(months=months)


def months_between(start: date, end: date) -> int:
    """Calendar months from start to end, ignoring day-of-month."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def month_steps(start: date, end: date) -> List[date]:
    """
    start, then one calendar month after each previous step, up to end inclusive.
    A clamped day-of-month carries forward: Jan 31 -> Feb 29 -> Mar 29.
    """
    steps: List[date] = []
    current = start
    while current <= end:
        steps.append(current)
        current = add_months(current, 1)
    return steps
