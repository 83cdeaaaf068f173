"""
Core package — value types, configuration, validation and shared date/rate helpers.
No calculation logic lives here.
"""

from .config import DEFAULT_CONFIG, EngineConfig
from .models import (
    AccountType,
    AllocationStrategy,
    Debt,
    DebtAccount,
    IncomeEvent,
    InvestmentAccount,
    InvestmentContribution,
    LedgerEvent,
    LedgerEventType,
    Obligation,
    RecurringFrequency,
    SimulationContribution,
    SimulationEvent,
    SimulationEventType,
    SpendingEvent,
)
from .utils import annual_to_periodic_rate, to_day
from .validators import InvalidArgumentError, NullInputError, ValidationResult

__all__ = [
    "DEFAULT_CONFIG",
    "EngineConfig",
    "AccountType",
    "AllocationStrategy",
    "Debt",
    "DebtAccount",
    "IncomeEvent",
    "InvestmentAccount",
    "InvestmentContribution",
    "LedgerEvent",
    "LedgerEventType",
    "Obligation",
    "RecurringFrequency",
    "SimulationContribution",
    "SimulationEvent",
    "SimulationEventType",
    "SpendingEvent",
    "annual_to_periodic_rate",
    "to_day",
    "InvalidArgumentError",
    "NullInputError",
    "ValidationResult",
]
