"""
Planning — decisions a person can act on this period: debt payment split and safe-to-spend cash.
"""

from .debt_allocation import (
    DebtAllocationInput,
    DebtAllocationResult,
    DebtPayment,
    allocate_debt_payments,
    suggest_minimum_payment,
)
from .spendable import (
    SpendableBreakdown,
    SpendableInput,
    SpendableResult,
    SpendableScenario,
    calculate_spendable,
    calculate_spendable_from_history,
)

__all__ = [
    "DebtAllocationInput",
    "DebtAllocationResult",
    "DebtPayment",
    "allocate_debt_payments",
    "suggest_minimum_payment",
    "SpendableBreakdown",
    "SpendableInput",
    "SpendableResult",
    "SpendableScenario",
    "calculate_spendable",
    "calculate_spendable_from_history",
]
