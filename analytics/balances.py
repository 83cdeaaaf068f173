"""
Account balance from an opening balance plus ledger events.
"""

from __future__ import annotations

from typing import Iterable

from core.models import AccountType, LedgerEvent, LedgerEventType
from core.validators import require


def _signed_amount(account_type: AccountType, event: LedgerEvent) -> float:
    amount = float(event.amount)
    kind = event.type
    if kind in (LedgerEventType.INCOME, LedgerEventType.DEBT_CHARGE, LedgerEventType.INTEREST_FEE):
        return amount
    if kind in (LedgerEventType.EXPENSE, LedgerEventType.DEBT_PAYMENT):
        return -amount
    if kind in (LedgerEventType.SAVINGS_CONTRIBUTION, LedgerEventType.INVESTMENT_CONTRIBUTION):
        # contributions leave cash and land in the receiving account
        return -amount if account_type == AccountType.CASH else amount
    raise ValueError(f"Unknown ledger event type: {kind!r}")


def calculate_balance(
    account_type: AccountType,
    initial_balance: float,
    events: Iterable[LedgerEvent],
) -> float:
    """Fold ledger events into the account's current balance."""
    require(events, "events")
    balance = float(initial_balance)
    for e in events:
        balance += _signed_amount(account_type, e)
    return balance
