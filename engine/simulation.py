"""
Forward simulation — steps one calendar day at a time from start to end date.

Per day, in order:
  1. Grow tracked investment accounts by one day of compounded return
  2. Accrue one day of compound interest on every debt with a balance
     (skipped on the first day)
  3. Move scheduled contributions from cash into investment accounts
  4. Apply that day's events in the order given:
       Income          cash += amount
       Expense         cash -= amount
       DebtPayment     payment = min(amount, balance); debt -= payment; cash -= payment
       DebtCharge      debt += amount (no cash effect)
       InterestAccrual debt += amount, counted as interest paid
  5. Record the day's snapshot; the first day total debt falls to the
     debt-free threshold fixes debt_free_date (never reset)

Daily rates come from annual rates via (1 + r)^(1/365) - 1. The loop is
inherently sequential: each day's interest depends on the prior day's balance.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional

import pandas as pd

from core.config import DEFAULT_CONFIG, EngineConfig
from core.models import (
    DebtAccount,
    InvestmentAccount,
    SimulationContribution,
    SimulationEvent,
    SimulationEventType,
)
from core.utils import DateLike, annual_to_periodic_rate, calendar_days, to_day
from core.validators import ValidationResult, require

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ForwardSimulationInput:
    start_date: DateLike
    end_date: DateLike
    initial_cash: float
    debts: Iterable[DebtAccount]
    events: Iterable[SimulationEvent]
    investment_accounts: Iterable[InvestmentAccount] = ()
    contributions: Iterable[SimulationContribution] = ()


@dataclass(frozen=True)
class SimulationSnapshot:
    date: date
    cash_balance: float
    debt_balances: Dict[str, float]
    total_debt: float
    interest_accrued: float
    event_description: str
    investment_balances: Dict[str, float] = field(default_factory=dict)
    investment_growth: float = 0.0
    net_worth: float = 0.0


@dataclass(frozen=True)
class FinalInvestmentBalance:
    account_name: str
    balance: float
    total_growth: float
    total_contributed: float


@dataclass(frozen=True)
class ForwardSimulationResult:
    snapshots: List[SimulationSnapshot]
    debt_free_date: Optional[date]
    final_cash_balance: float
    final_debt_balances: Dict[str, float]
    total_interest_paid: float
    millionaire_date: Optional[date] = None
    final_investment_balances: Dict[str, FinalInvestmentBalance] = field(default_factory=dict)
    final_net_worth: float = 0.0
    total_investment_growth: float = 0.0
    total_contributed: float = 0.0

    @property
    def final_investment_balance(self) -> float:
        return float(sum(b.balance for b in self.final_investment_balances.values()))

    def to_dataframe(self) -> pd.DataFrame:
        """One row per simulated day, with a `debt:<name>` column per debt."""
        rows = []
        for s in self.snapshots:
            row = {
                "date": pd.Timestamp(s.date),
                "cash_balance": s.cash_balance,
                "total_debt": s.total_debt,
                "interest_accrued": s.interest_accrued,
                "investment_growth": s.investment_growth,
                "net_worth": s.net_worth,
                "event_description": s.event_description,
            }
            for name, bal in s.debt_balances.items():
                row[f"debt:{name}"] = bal
            for name, bal in s.investment_balances.items():
                row[f"investment:{name}"] = bal
            rows.append(row)
        return pd.DataFrame(rows)


def _validate(
    inputs: ForwardSimulationInput,
    start: date,
    end: date,
    debts: List[DebtAccount],
    events: List[SimulationEvent],
    accounts: List[InvestmentAccount],
    contributions: List[SimulationContribution],
) -> None:
    check = ValidationResult(context="forward simulation")
    check.date_order(start, end)
    check.non_negative(inputs.initial_cash, "initial cash")

    names = [d.name for d in debts]
    dupes = sorted({n for n in names if names.count(n) > 1})
    if dupes:
        check.errors.append(f"Duplicate debt names: {dupes}")
    for d in debts:
        check.non_negative(d.balance, f"balance of {d.name}")
        check.non_negative(d.annual_rate, f"annual rate of {d.name}")

    check.each_non_negative(events, "amount", "events")
    n_unlinked = sum(1 for e in events if e.type.requires_debt and not e.related_debt_name)
    if n_unlinked > 0:
        check.errors.append(f"{n_unlinked} debt events have no related debt name.")

    account_names = [a.name for a in accounts]
    if len(set(account_names)) != len(account_names):
        check.errors.append("Duplicate investment account names.")
    for a in accounts:
        check.non_negative(a.balance, f"balance of {a.name}")
        check.non_negative(a.annual_return_rate, f"annual return of {a.name}")
    check.each_non_negative(contributions, "amount", "contributions")

    check.raise_for_errors()


def _group_by_day(items) -> Dict[date, list]:
    """Bucket items by calendar day; sorted() is stable so same-day order is kept."""
    grouped: Dict[date, list] = {}
    for item in sorted(items, key=lambda x: to_day(x.date)):
        grouped.setdefault(to_day(item.date), []).append(item)
    return grouped


def run_simulation(
    inputs: ForwardSimulationInput,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> ForwardSimulationResult:
    """
    Walk cash, debts and investments forward day by day.

    Raises
    ------
    NullInputError
        inputs, inputs.debts or inputs.events is None
    InvalidArgumentError
        end before start, negative amounts/balances/rates, duplicate names,
        or a debt event without a related debt name
    """
    require(inputs, "inputs")
    require(inputs.debts, "debts")
    require(inputs.events, "events")

    start = to_day(inputs.start_date)
    end = to_day(inputs.end_date)
    debts = list(inputs.debts)
    events = list(inputs.events)
    accounts = list(inputs.investment_accounts or ())
    contributions = list(inputs.contributions or ())

    _validate(inputs, start, end, debts, events, accounts, contributions)

    # --- Working state ---
    cash = float(inputs.initial_cash)
    debt_balances: Dict[str, float] = {d.name: float(d.balance) for d in debts}
    daily_debt_rates = {
        d.name: annual_to_periodic_rate(d.annual_rate, config.days_per_year) for d in debts
    }

    inv_balances: Dict[str, float] = {a.name: float(a.balance) for a in accounts}
    daily_inv_rates = {
        a.name: annual_to_periodic_rate(a.annual_return_rate, config.days_per_year) for a in accounts
    }
    inv_growth: Dict[str, float] = {a.name: 0.0 for a in accounts}
    inv_contributed: Dict[str, float] = {a.name: 0.0 for a in accounts}

    events_by_day = _group_by_day(events)
    contributions_by_day = _group_by_day(contributions)

    snapshots: List[SimulationSnapshot] = []
    total_interest = 0.0
    total_growth = 0.0
    total_contributed = 0.0
    debt_free_date: Optional[date] = None
    millionaire_date: Optional[date] = None

    # ========= MAIN DAY LOOP =========
    for day in calendar_days(start, end):
        interest_today = 0.0
        growth_today = 0.0
        description = config.default_event_description

        # 1. investment growth
        for name in inv_balances:
            growth = inv_balances[name] * daily_inv_rates[name]
            inv_balances[name] += growth
            inv_growth[name] += growth
            growth_today += growth
        total_growth += growth_today

        # 2. debt interest (none on the first day)
        if day > start:
            for name, balance in debt_balances.items():
                if balance > 0:
                    interest = balance * daily_debt_rates[name]
                    debt_balances[name] = balance + interest
                    interest_today += interest
            total_interest += interest_today

        # 3. contributions: cash always leaves, the target only gains if tracked
        for c in contributions_by_day.get(day, ()):
            amount = float(c.amount)
            cash -= amount
            total_contributed += amount
            if c.target_account_name in inv_balances:
                inv_balances[c.target_account_name] += amount
                inv_contributed[c.target_account_name] += amount
            else:
                logger.debug("Contribution on %s targets unknown account %r.", day, c.target_account_name)

        # 4. events
        for evt in events_by_day.get(day, ()):
            description = evt.description
            amount = float(evt.amount)
            kind = evt.type

            if kind == SimulationEventType.INCOME:
                cash += amount
            elif kind == SimulationEventType.EXPENSE:
                cash -= amount
            elif kind.requires_debt:
                name = evt.related_debt_name
                if name not in debt_balances:
                    logger.debug("Event %r on %s names unknown debt %r; skipped.", evt.description, day, name)
                    continue
                if kind == SimulationEventType.DEBT_PAYMENT:
                    payment = min(amount, debt_balances[name])
                    debt_balances[name] -= payment
                    cash -= payment
                elif kind == SimulationEventType.DEBT_CHARGE:
                    debt_balances[name] += amount
                elif kind == SimulationEventType.INTEREST_ACCRUAL:
                    debt_balances[name] += amount
                    interest_today += amount
                    total_interest += amount
                else:
                    raise ValueError(f"Unhandled simulation event type: {kind!r}")
            else:
                raise ValueError(f"Unhandled simulation event type: {kind!r}")

        # 5. snapshot
        total_debt = float(sum(debt_balances.values()))
        total_investments = float(sum(inv_balances.values()))
        net_worth = cash + total_investments - total_debt

        if millionaire_date is None and net_worth >= config.millionaire_threshold:
            millionaire_date = day
            logger.info("Net worth reaches %.0f on %s.", config.millionaire_threshold, day)

        snapshots.append(
            SimulationSnapshot(
                date=day,
                cash_balance=cash,
                debt_balances=dict(debt_balances),
                total_debt=total_debt,
                interest_accrued=interest_today,
                event_description=description,
                investment_balances=dict(inv_balances),
                investment_growth=growth_today,
                net_worth=net_worth,
            )
        )

        if debt_free_date is None and total_debt <= config.debt_free_threshold:
            debt_free_date = day
            logger.info("Debt free on %s.", day)

    # ========= BUILD RESULT =========
    final_investments = {
        name: FinalInvestmentBalance(
            account_name=name,
            balance=inv_balances[name],
            total_growth=inv_growth[name],
            total_contributed=inv_contributed[name],
        )
        for name in inv_balances
    }

    logger.debug(
        "Simulated %d days from %s to %s; interest paid %.2f.",
        len(snapshots), start, end, total_interest,
    )
    return ForwardSimulationResult(
        snapshots=snapshots,
        debt_free_date=debt_free_date,
        final_cash_balance=cash,
        final_debt_balances=dict(debt_balances),
        total_interest_paid=total_interest,
        millionaire_date=millionaire_date,
        final_investment_balances=final_investments,
        final_net_worth=snapshots[-1].net_worth,
        total_investment_growth=total_growth,
        total_contributed=total_contributed,
    )
