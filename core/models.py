"""
Value types shared by the calculators.

Every record is frozen: callers build them per call and the engine never
mutates them. Working balances are copied into local dicts during a pass.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Dict, Optional

from dateutil.relativedelta import relativedelta


class SimulationEventType(Enum):
    INCOME = "Income"
    EXPENSE = "Expense"
    DEBT_PAYMENT = "DebtPayment"
    DEBT_CHARGE = "DebtCharge"
    INTEREST_ACCRUAL = "InterestAccrual"

    @property
    def requires_debt(self) -> bool:
        return self in (
            SimulationEventType.DEBT_PAYMENT,
            SimulationEventType.DEBT_CHARGE,
            SimulationEventType.INTEREST_ACCRUAL,
        )


class AllocationStrategy(Enum):
    AVALANCHE = "Avalanche"  # highest effective rate first
    SNOWBALL = "Snowball"    # smallest balance first
    HYBRID = "Hybrid"        # currently identical to avalanche


class RecurringFrequency(Enum):
    WEEKLY = "Weekly"
    BIWEEKLY = "BiWeekly"
    SEMIMONTHLY = "SemiMonthly"  # flat 15-day interval, not 1st/15th
    MONTHLY = "Monthly"
    QUARTERLY = "Quarterly"
    ANNUALLY = "Annually"

    @property
    def step(self) -> relativedelta:
        return _FREQUENCY_STEPS[self]


_FREQUENCY_STEPS: Dict[RecurringFrequency, relativedelta] = {
    RecurringFrequency.WEEKLY: relativedelta(days=7),
    RecurringFrequency.BIWEEKLY: relativedelta(days=14),
    RecurringFrequency.SEMIMONTHLY: relativedelta(days=15),
    RecurringFrequency.MONTHLY: relativedelta(months=1),
    RecurringFrequency.QUARTERLY: relativedelta(months=3),
    RecurringFrequency.ANNUALLY: relativedelta(years=1),
}


class AccountType(Enum):
    CASH = "Cash"
    DEBT = "Debt"
    INVESTMENT = "Investment"


class LedgerEventType(Enum):
    INCOME = "Income"
    EXPENSE = "Expense"
    DEBT_CHARGE = "DebtCharge"
    DEBT_PAYMENT = "DebtPayment"
    INTEREST_FEE = "InterestFee"
    SAVINGS_CONTRIBUTION = "SavingsContribution"
    INVESTMENT_CONTRIBUTION = "InvestmentContribution"


@dataclass(frozen=True)
class SpendingEvent:
    """One outflow on a calendar day; several may share a date."""
    date: date
    amount: float


@dataclass(frozen=True)
class Obligation:
    """A scheduled future outflow that has not happened yet."""
    due_date: date
    amount: float
    description: str = ""


@dataclass(frozen=True)
class IncomeEvent:
    date: date
    amount: float
    description: str = ""


@dataclass(frozen=True)
class Debt:
    """Snapshot of a debt for payment allocation. Rates are annual decimals (0.1999)."""
    name: str
    balance: float
    annual_rate: float
    minimum_payment: float
    promo_rate: Optional[float] = None
    promo_end_date: Optional[date] = None

    def effective_rate(self, as_of: date) -> float:
        """Promotional rate while the promo is still running on `as_of`, else the standing rate."""
        if self.promo_rate is not None and self.promo_end_date is not None and self.promo_end_date > as_of:
            return self.promo_rate
        return self.annual_rate


@dataclass(frozen=True)
class DebtAccount:
    """A debt tracked through the forward simulation, keyed by a unique name."""
    name: str
    balance: float
    annual_rate: float
    minimum_payment: float = 0.0
    promo_rate: Optional[float] = None
    promo_end_date: Optional[date] = None


@dataclass(frozen=True)
class SimulationEvent:
    """
    A discrete event applied by the forward simulation.

    related_debt_name must name a DebtAccount for DEBT_PAYMENT, DEBT_CHARGE and
    INTEREST_ACCRUAL; it is ignored for INCOME and EXPENSE.
    """
    date: date
    type: SimulationEventType
    description: str
    amount: float
    related_debt_name: Optional[str] = None


@dataclass(frozen=True)
class InvestmentContribution:
    date: date
    amount: float


@dataclass(frozen=True)
class InvestmentAccount:
    """An investment balance grown daily inside the forward simulation."""
    name: str
    balance: float
    annual_return_rate: float  # e.g. 0.07 for 7%


@dataclass(frozen=True)
class SimulationContribution:
    """Moves cash into a tracked investment account during the forward simulation."""
    date: date
    amount: float
    target_account_name: str
    source_account_name: str = "Cash"


@dataclass(frozen=True)
class LedgerEvent:
    type: LedgerEventType
    amount: float
