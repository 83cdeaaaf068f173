"""
Debt payment allocation — minimums everywhere, the whole extra pool to one debt.

Rules:
  1. Debts with no balance are dropped and do not appear in the result
  2. Every remaining debt gets its minimum payment
  3. The extra pool goes to the single highest-priority debt, capped at
     balance - minimum so it is never overpaid
  4. Whatever that debt cannot absorb is NOT passed on to the next debt

Priority:
  AVALANCHE: effective rate, highest first
  SNOWBALL:  balance, smallest first
  HYBRID:    same ordering as avalanche
Ties keep the caller's order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional

import pandas as pd

from core.models import AllocationStrategy, Debt
from core.utils import DateLike, to_day
from core.validators import InvalidArgumentError, ValidationResult, require

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DebtAllocationInput:
    debts: Iterable[Debt]
    extra_payment: float
    strategy: AllocationStrategy = AllocationStrategy.AVALANCHE
    as_of_date: Optional[DateLike] = None  # promo rates are judged on this day; None -> today


@dataclass(frozen=True)
class DebtPayment:
    debt_name: str
    minimum_payment: float
    extra_payment: float
    total_payment: float
    remaining_balance: float


@dataclass(frozen=True)
class DebtAllocationResult:
    payments_by_debt: Dict[str, DebtPayment]
    total_payment: float
    strategy: AllocationStrategy

    def to_dataframe(self) -> pd.DataFrame:
        """Payments in priority order."""
        return pd.DataFrame([
            {
                "debt": p.debt_name,
                "minimum_payment": p.minimum_payment,
                "extra_payment": p.extra_payment,
                "total_payment": p.total_payment,
                "remaining_balance": p.remaining_balance,
            }
            for p in self.payments_by_debt.values()
        ])


def prioritize(debts: List[Debt], strategy: AllocationStrategy, as_of: date) -> List[Debt]:
    """Order debts for the extra pool. sorted() is stable, so ties keep input order."""
    if strategy in (AllocationStrategy.AVALANCHE, AllocationStrategy.HYBRID):
        return sorted(debts, key=lambda d: -d.effective_rate(as_of))
    if strategy == AllocationStrategy.SNOWBALL:
        return sorted(debts, key=lambda d: d.balance)
    raise ValueError(f"Unknown allocation strategy: {strategy!r}")


def _allocate_with_priority(prioritized: List[Debt], extra_payment: float) -> Dict[str, DebtPayment]:
    payments: Dict[str, DebtPayment] = {}
    remaining_extra = float(extra_payment)

    for rank, debt in enumerate(prioritized):
        minimum = float(debt.minimum_payment)
        extra = 0.0

        if rank == 0 and remaining_extra > 0:
            headroom = max(float(debt.balance) - minimum, 0.0)
            extra = min(remaining_extra, headroom)
            remaining_extra -= extra

        total = min(minimum + extra, float(debt.balance))
        payments[debt.name] = DebtPayment(
            debt_name=debt.name,
            minimum_payment=minimum,
            extra_payment=extra,
            total_payment=total,
            remaining_balance=float(debt.balance) - total,
        )

    if remaining_extra > 0:
        logger.debug(
            "%.2f of the extra pool left unallocated (top debt %s fully covered).",
            remaining_extra,
            prioritized[0].name,
        )
    return payments


def allocate_debt_payments(inputs: DebtAllocationInput) -> DebtAllocationResult:
    """
    Split this period's payments across debts under the chosen strategy.

    Raises
    ------
    NullInputError
        inputs or inputs.debts is None
    InvalidArgumentError
        unknown strategy, negative extra pool, balance, rate or minimum payment,
        or duplicate debt names
    """
    require(inputs, "inputs")
    require(inputs.debts, "debts")

    debts = list(inputs.debts)
    strategy = inputs.strategy
    if not isinstance(strategy, AllocationStrategy):
        try:
            strategy = AllocationStrategy(strategy)
        except ValueError as e:
            raise InvalidArgumentError(f"Unknown allocation strategy: {strategy!r}") from e

    check = ValidationResult(context="debt allocation")
    check.non_negative(inputs.extra_payment, "extra payment amount")
    for d in debts:
        check.non_negative(d.balance, f"balance of {d.name}")
        check.non_negative(d.annual_rate, f"annual rate of {d.name}")
        check.non_negative(d.minimum_payment, f"minimum payment of {d.name}")
        check.non_negative(d.promo_rate, f"promotional rate of {d.name}")
    names = [d.name for d in debts]
    dupes = sorted({n for n in names if names.count(n) > 1})
    if dupes:
        check.errors.append(f"Duplicate debt names: {dupes}")
    check.raise_for_errors()

    as_of = to_day(inputs.as_of_date) if inputs.as_of_date is not None else date.today()

    active = [d for d in debts if d.balance > 0]
    if not active:
        return DebtAllocationResult(payments_by_debt={}, total_payment=0.0, strategy=strategy)

    prioritized = prioritize(active, strategy, as_of)
    payments = _allocate_with_priority(prioritized, inputs.extra_payment)
    total = float(sum(p.total_payment for p in payments.values()))

    logger.debug(
        "%s allocation over %d debts: total payment %.2f.", strategy.value, len(payments), total
    )
    return DebtAllocationResult(payments_by_debt=payments, total_payment=total, strategy=strategy)


def suggest_minimum_payment(
    balance: float,
    *,
    promo_rate: Optional[float] = None,
    promo_end_date: Optional[DateLike] = None,
    as_of_date: Optional[DateLike] = None,
) -> float:
    """
    Default minimum payment for a debt that has none on file:
    2% of balance while a 0% promo is running, 4% otherwise, rounded to cents.
    """
    if balance <= 0:
        return 0.0
    as_of = to_day(as_of_date) if as_of_date is not None else date.today()
    promo_active = (
        promo_rate == 0
        and promo_end_date is not None
        and to_day(promo_end_date) > as_of
    )
    pct = 0.02 if promo_active else 0.04
    return round(float(balance) * pct, 2)
