"""
Spendable cash — how much can be spent now without missing anything before the next paycheck.

  next paycheck   = earliest income strictly after the calculation date (may be None)
  window          = (calculation date, next paycheck]  or  (calculation date, ∞) with no paycheck
  safety buffer   = manual buffer, else daily spend × days until paycheck, else 0
  spendable now   = cash − obligations in window − buffer − contributions in window
  cash at payday  = cash − obligations − contributions − projected spend + paycheck

With a daily-spend estimate and a paycheck ahead, a conservative scenario is
recomputed with daily spend and buffer both stressed by the configured multiplier.
Results are not clamped at zero.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Tuple

from analytics.burn_rate import BurnRateInput, BurnRateResult, calculate_burn_rate
from core.config import DEFAULT_CONFIG, EngineConfig
from core.models import IncomeEvent, Obligation, SpendingEvent
from core.utils import DateLike, to_day
from core.validators import ValidationResult, require

logger = logging.getLogger(__name__)

# windows feeding the history-based estimate; the shortest drives the daily spend
_HISTORY_WINDOWS = (7, 30)


@dataclass(frozen=True)
class SpendableInput:
    available_cash: float
    calculation_date: DateLike
    upcoming_obligations: Iterable[Obligation] = ()
    upcoming_income: Iterable[IncomeEvent] = ()
    manual_safety_buffer: Optional[float] = None
    estimated_daily_spend: Optional[float] = None
    planned_contributions: Iterable[Obligation] = ()


@dataclass(frozen=True)
class SpendableBreakdown:
    available_cash: float
    total_obligations: float
    safety_buffer: float
    planned_contributions: float
    days_until_next_paycheck: int


@dataclass(frozen=True)
class SpendableScenario:
    name: str
    estimated_daily_spend: float
    spendable_amount: float
    expected_cash_at_paycheck: float


@dataclass(frozen=True)
class SpendableResult:
    spendable_now: float
    expected_cash_at_next_paycheck: float
    next_paycheck_date: Optional[date]
    breakdown: SpendableBreakdown
    conservative_scenario: Optional[SpendableScenario] = None


def _due_in_window(
    items: List[Obligation],
    calc_date: date,
    paycheck_date: Optional[date],
) -> float:
    total = 0.0
    for o in items:
        due = to_day(o.due_date)
        if due <= calc_date:
            continue
        if paycheck_date is not None and due > paycheck_date:
            continue
        total += float(o.amount)
    return total


def _safety_buffer(
    manual_buffer: Optional[float],
    daily_spend: Optional[float],
    days_until_paycheck: int,
) -> float:
    if manual_buffer is not None:
        return float(manual_buffer)
    if daily_spend is not None and days_until_paycheck > 0:
        return float(daily_spend) * days_until_paycheck
    return 0.0


def calculate_spendable(
    inputs: SpendableInput,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> SpendableResult:
    """
    Estimate safe-to-spend cash before the next paycheck.

    Raises
    ------
    NullInputError
        inputs is None
    InvalidArgumentError
        negative cash, amounts, buffer or daily spend
    """
    require(inputs, "inputs")

    obligations = list(inputs.upcoming_obligations or ())
    income = list(inputs.upcoming_income or ())
    contributions = list(inputs.planned_contributions or ())
    calc_date = to_day(inputs.calculation_date)

    check = ValidationResult(context="spendable")
    check.non_negative(inputs.available_cash, "available cash")
    check.non_negative(inputs.manual_safety_buffer, "manual safety buffer")
    check.non_negative(inputs.estimated_daily_spend, "estimated daily spend")
    check.each_non_negative(obligations, "amount", "obligations")
    check.each_non_negative(income, "amount", "income events")
    check.each_non_negative(contributions, "amount", "planned contributions")
    check.raise_for_errors()

    cash = float(inputs.available_cash)

    # earliest strictly-future income; min() keeps the first of equal dates
    future_income = [i for i in income if to_day(i.date) > calc_date]
    next_paycheck = min(future_income, key=lambda i: to_day(i.date)) if future_income else None
    next_paycheck_date = to_day(next_paycheck.date) if next_paycheck is not None else None
    paycheck_amount = float(next_paycheck.amount) if next_paycheck is not None else 0.0
    days_until = (next_paycheck_date - calc_date).days if next_paycheck_date is not None else 0

    total_obligations = _due_in_window(obligations, calc_date, next_paycheck_date)
    total_contributions = _due_in_window(contributions, calc_date, next_paycheck_date)

    daily_spend = inputs.estimated_daily_spend
    buffer = _safety_buffer(inputs.manual_safety_buffer, daily_spend, days_until)

    spendable_now = cash - total_obligations - buffer - total_contributions

    projected_spend = float(daily_spend) * days_until if daily_spend is not None and days_until > 0 else 0.0
    expected_cash = cash - total_obligations - total_contributions - projected_spend + paycheck_amount

    conservative = None
    if daily_spend is not None and days_until > 0:
        m = config.conservative_multiplier
        stressed_daily = float(daily_spend) * m
        conservative = SpendableScenario(
            name="Conservative",
            estimated_daily_spend=stressed_daily,
            spendable_amount=cash - total_obligations - buffer * m - total_contributions,
            expected_cash_at_paycheck=(
                cash - total_obligations - total_contributions
                - stressed_daily * days_until + paycheck_amount
            ),
        )

    logger.debug(
        "Spendable on %s: %.2f now, next paycheck %s (%d days).",
        calc_date, spendable_now, next_paycheck_date, days_until,
    )
    return SpendableResult(
        spendable_now=spendable_now,
        expected_cash_at_next_paycheck=expected_cash,
        next_paycheck_date=next_paycheck_date,
        breakdown=SpendableBreakdown(
            available_cash=cash,
            total_obligations=total_obligations,
            safety_buffer=buffer,
            planned_contributions=total_contributions,
            days_until_next_paycheck=days_until,
        ),
        conservative_scenario=conservative,
    )


def calculate_spendable_from_history(
    available_cash: float,
    calculation_date: DateLike,
    spending_events: Iterable[SpendingEvent],
    *,
    upcoming_obligations: Iterable[Obligation] = (),
    upcoming_income: Iterable[IncomeEvent] = (),
    manual_safety_buffer: Optional[float] = None,
    planned_contributions: Iterable[Obligation] = (),
    config: EngineConfig = DEFAULT_CONFIG,
) -> Tuple[SpendableResult, BurnRateResult]:
    """
    Spendable estimate with daily spend taken from recent history.

    Burn rate is computed over 7- and 30-day windows ending on the calculation
    date; the 7-day average becomes the estimated daily spend.
    """
    burn = calculate_burn_rate(
        BurnRateInput(
            spending_events=spending_events,
            calculation_date=calculation_date,
            window_days=_HISTORY_WINDOWS,
        ),
        config=config,
    )
    daily_spend = burn[_HISTORY_WINDOWS[0]].average_daily_spend

    result = calculate_spendable(
        SpendableInput(
            available_cash=available_cash,
            calculation_date=calculation_date,
            upcoming_obligations=upcoming_obligations,
            upcoming_income=upcoming_income,
            manual_safety_buffer=manual_safety_buffer,
            estimated_daily_spend=daily_spend,
            planned_contributions=planned_contributions,
        ),
        config=config,
    )
    return result, burn
