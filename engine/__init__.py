"""
Projection engine — day-stepping cash/debt simulation and investment growth projection.
"""

from .investment import (
    InvestmentProjectionInput,
    InvestmentProjectionPoint,
    InvestmentProjectionResult,
    project,
    project_investment,
    project_investment_monthly,
)
from .simulation import (
    FinalInvestmentBalance,
    ForwardSimulationInput,
    ForwardSimulationResult,
    SimulationSnapshot,
    run_simulation,
)

__all__ = [
    "InvestmentProjectionInput",
    "InvestmentProjectionPoint",
    "InvestmentProjectionResult",
    "project",
    "project_investment",
    "project_investment_monthly",
    "FinalInvestmentBalance",
    "ForwardSimulationInput",
    "ForwardSimulationResult",
    "SimulationSnapshot",
    "run_simulation",
]
