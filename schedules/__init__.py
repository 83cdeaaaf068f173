"""
Schedules — expand recurring contributions, paychecks and minimum payments into dated events.
"""

from .recurring import (
    expand_contributions,
    expand_income,
    expand_minimum_payments,
    get_occurrences,
)

__all__ = [
    "get_occurrences",
    "expand_contributions",
    "expand_income",
    "expand_minimum_payments",
]
