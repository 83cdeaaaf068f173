"""
Analytics — spending statistics and ledger balances computed from historical events.
"""

from .balances import calculate_balance
from .burn_rate import BurnRateInput, BurnRateResult, WindowBurnRate, calculate_burn_rate

__all__ = [
    "calculate_balance",
    "BurnRateInput",
    "BurnRateResult",
    "WindowBurnRate",
    "calculate_burn_rate",
]
