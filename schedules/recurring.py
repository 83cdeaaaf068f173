"""
Recurring schedule expansion — turns an anchor date + frequency into concrete occurrences.

Callers use this to build synthetic event lists for the simulation and the
investment projector (paychecks, contributions, minimum payments). None of the
other calculators call it internally.

Stepping rules:
  - WEEKLY / BIWEEKLY / SEMIMONTHLY advance a fixed 7 / 14 / 15 days
  - MONTHLY / QUARTERLY / ANNUALLY advance by calendar unit; the k-th occurrence
    is anchor + k steps, so a 31st anchor returns to the 31st after a short month
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Iterator, List

from core.models import (
    DebtAccount,
    IncomeEvent,
    InvestmentContribution,
    RecurringFrequency,
    SimulationEvent,
    SimulationEventType,
)
from core.utils import DateLike, to_day
from core.validators import InvalidArgumentError, ValidationResult, require

logger = logging.getLogger(__name__)


def get_occurrences(
    anchor_date: DateLike,
    frequency: RecurringFrequency,
    start_date: DateLike,
    end_date: DateLike,
) -> Iterator[date]:
    """
    Lazily yield every occurrence of the schedule within [start_date, end_date].

    Nothing is yielded when start_date > end_date or the anchor lies after end_date.
    An anchor before start_date is fast-forwarded one step at a time until it
    reaches or passes start_date.
    """
    if not isinstance(frequency, RecurringFrequency):
        raise InvalidArgumentError(f"Unsupported frequency: {frequency!r}")
    return _occurrences(to_day(anchor_date), frequency, to_day(start_date), to_day(end_date))


def _occurrences(
    anchor: date,
    frequency: RecurringFrequency,
    start: date,
    end: date,
) -> Iterator[date]:
    if start > end or anchor > end:
        return

    step = frequency.step
    k = 0
    current = anchor
    while current < start:
        k += 1
        current = anchor + step * k

    while current <= end:
        yield current
        k += 1
        current = anchor + step * k


def expand_contributions(
    amount: float,
    frequency: RecurringFrequency,
    anchor_date: DateLike,
    start_date: DateLike,
    end_date: DateLike,
) -> List[InvestmentContribution]:
    """Expand a recurring contribution into InvestmentContributions for the projector."""
    check = ValidationResult(context="recurring contribution")
    check.non_negative(amount, "contribution amount")
    check.raise_for_errors()

    return [
        InvestmentContribution(date=d, amount=float(amount))
        for d in get_occurrences(anchor_date, frequency, start_date, end_date)
    ]


def expand_income(
    amount: float,
    frequency: RecurringFrequency,
    anchor_date: DateLike,
    description: str,
    start_date: DateLike,
    end_date: DateLike,
) -> List[IncomeEvent]:
    """Expand a pay schedule into IncomeEvents (same stepping as contributions)."""
    check = ValidationResult(context="income schedule")
    check.non_negative(amount, "income amount")
    check.raise_for_errors()

    return [
        IncomeEvent(date=d, amount=float(amount), description=description)
        for d in get_occurrences(anchor_date, frequency, start_date, end_date)
    ]


def expand_minimum_payments(
    debts: Iterable[DebtAccount],
    start_date: DateLike,
    end_date: DateLike,
    *,
    frequency: RecurringFrequency = RecurringFrequency.MONTHLY,
) -> List[SimulationEvent]:
    """
    Build one DEBT_PAYMENT event per debt per period, anchored on start_date.

    Debts without a positive minimum payment are skipped. Events come back in
    date order; same-day payments keep the order of `debts`.
    """
    require(debts, "debts")
    debts = list(debts)

    events: List[SimulationEvent] = []
    for debt in debts:
        if debt.minimum_payment <= 0:
            logger.debug("No minimum payment for %s; skipping schedule.", debt.name)
            continue
        for d in get_occurrences(start_date, frequency, start_date, end_date):
            events.append(
                SimulationEvent(
                    date=d,
                    type=SimulationEventType.DEBT_PAYMENT,
                    description=f"Minimum payment for {debt.name}",
                    amount=float(debt.minimum_payment),
                    related_debt_name=debt.name,
                )
            )

    events.sort(key=lambda e: e.date)
    return events
