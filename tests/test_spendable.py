"""
Spendable cash before the next paycheck.
"""

from datetime import date, timedelta

import pytest

from core.config import EngineConfig
from core.models import IncomeEvent, Obligation, SpendingEvent
from core.validators import InvalidArgumentError
from planning.spendable import (
    SpendableInput,
    calculate_spendable,
    calculate_spendable_from_history,
)

CALC = date(2024, 3, 1)


def in_days(n: int) -> date:
    return CALC + timedelta(days=n)


def paycheck(n: int, amount: float = 2000.0) -> IncomeEvent:
    return IncomeEvent(in_days(n), amount, "Paycheck")


class TestSpendable:

    def test_obligations_before_paycheck(self):
        result = calculate_spendable(SpendableInput(
            available_cash=1000.0,
            calculation_date=CALC,
            upcoming_obligations=[Obligation(in_days(4), 200.0, "Rent"), Obligation(in_days(9), 50.0)],
            upcoming_income=[paycheck(14)],
        ))
        assert result.spendable_now == 750.0
        assert result.expected_cash_at_next_paycheck == 2750.0
        assert result.next_paycheck_date == in_days(14)
        assert result.breakdown.total_obligations == 250.0
        assert result.breakdown.safety_buffer == 0.0
        assert result.breakdown.days_until_next_paycheck == 14
        assert result.conservative_scenario is None

    def test_obligations_after_paycheck_excluded(self):
        result = calculate_spendable(SpendableInput(
            1000.0, CALC,
            upcoming_obligations=[Obligation(in_days(14), 100.0), Obligation(in_days(15), 300.0)],
            upcoming_income=[paycheck(14)],
        ))
        # due on payday still counts
        assert result.breakdown.total_obligations == 100.0

    def test_past_and_same_day_obligations_excluded(self):
        result = calculate_spendable(SpendableInput(
            1000.0, CALC,
            upcoming_obligations=[Obligation(in_days(-3), 100.0), Obligation(CALC, 100.0)],
            upcoming_income=[paycheck(14)],
        ))
        assert result.spendable_now == 1000.0

    def test_no_paycheck_counts_all_future_obligations(self):
        result = calculate_spendable(SpendableInput(
            1000.0, CALC,
            upcoming_obligations=[Obligation(in_days(5), 100.0), Obligation(in_days(400), 300.0)],
            estimated_daily_spend=20.0,
        ))
        assert result.next_paycheck_date is None
        assert result.breakdown.days_until_next_paycheck == 0
        assert result.breakdown.safety_buffer == 0.0
        assert result.spendable_now == 600.0
        assert result.expected_cash_at_next_paycheck == 600.0
        assert result.conservative_scenario is None

    def test_income_on_calculation_date_ignored(self):
        result = calculate_spendable(SpendableInput(
            1000.0, CALC, upcoming_income=[IncomeEvent(CALC, 500.0), paycheck(7, 1500.0)],
        ))
        assert result.next_paycheck_date == in_days(7)
        assert result.expected_cash_at_next_paycheck == 2500.0

    def test_earliest_future_paycheck_wins(self):
        result = calculate_spendable(SpendableInput(
            0.0, CALC, upcoming_income=[paycheck(20, 9.0), paycheck(10, 1.0), paycheck(30, 7.0)],
        ))
        assert result.next_paycheck_date == in_days(10)
        assert result.expected_cash_at_next_paycheck == 1.0

    def test_buffer_from_daily_spend(self):
        result = calculate_spendable(SpendableInput(
            1000.0, CALC, upcoming_income=[paycheck(5)], estimated_daily_spend=20.0,
        ))
        assert result.breakdown.safety_buffer == 100.0
        assert result.spendable_now == 900.0
        assert result.expected_cash_at_next_paycheck == 2900.0

        conservative = result.conservative_scenario
        assert conservative.name == "Conservative"
        assert conservative.estimated_daily_spend == 30.0
        assert conservative.spendable_amount == 850.0
        assert conservative.expected_cash_at_paycheck == 2850.0

    def test_manual_buffer_takes_precedence(self):
        result = calculate_spendable(SpendableInput(
            1000.0, CALC,
            upcoming_income=[paycheck(5)],
            manual_safety_buffer=50.0,
            estimated_daily_spend=20.0,
        ))
        assert result.breakdown.safety_buffer == 50.0
        assert result.spendable_now == 950.0
        assert result.expected_cash_at_next_paycheck == 2900.0
        assert result.conservative_scenario.spendable_amount == 925.0
        assert result.conservative_scenario.expected_cash_at_paycheck == 2850.0

    def test_stress_multiplier_from_config(self):
        result = calculate_spendable(
            SpendableInput(1000.0, CALC, upcoming_income=[paycheck(5)], estimated_daily_spend=20.0),
            config=EngineConfig(conservative_multiplier=2.0),
        )
        assert result.conservative_scenario.spendable_amount == 800.0

    def test_contributions_in_window(self):
        result = calculate_spendable(SpendableInput(
            1000.0, CALC,
            upcoming_income=[paycheck(14)],
            planned_contributions=[Obligation(in_days(3), 150.0, "IRA"), Obligation(in_days(20), 150.0)],
        ))
        assert result.breakdown.planned_contributions == 150.0
        assert result.spendable_now == 850.0
        assert result.expected_cash_at_next_paycheck == 2850.0

    def test_not_clamped_at_zero(self):
        result = calculate_spendable(SpendableInput(
            100.0, CALC, upcoming_obligations=[Obligation(in_days(1), 400.0)],
        ))
        assert result.spendable_now == -300.0

    def test_none_collections_treated_as_empty(self):
        result = calculate_spendable(SpendableInput(
            1000.0, CALC, upcoming_obligations=None, upcoming_income=None, planned_contributions=None,
        ))
        assert result.spendable_now == 1000.0

    @pytest.mark.parametrize("field", ["available_cash", "manual_safety_buffer", "estimated_daily_spend"])
    def test_negative_values_rejected(self, field):
        kwargs = {"available_cash": 1000.0, "calculation_date": CALC, field: -1.0}
        with pytest.raises(InvalidArgumentError):
            calculate_spendable(SpendableInput(**kwargs))

    def test_negative_obligation_rejected(self):
        with pytest.raises(InvalidArgumentError):
            calculate_spendable(SpendableInput(
                1000.0, CALC, upcoming_obligations=[Obligation(in_days(1), -5.0)],
            ))


class TestSpendableFromHistory:

    def test_seven_day_average_drives_buffer(self):
        history = [SpendingEvent(in_days(-i), 10.0) for i in range(7)]
        result, burn = calculate_spendable_from_history(
            1000.0, CALC, history, upcoming_income=[paycheck(5)],
        )
        assert burn[7].average_daily_spend == pytest.approx(10.0)
        assert burn[30].average_daily_spend == pytest.approx(70.0 / 30)
        assert result.breakdown.safety_buffer == pytest.approx(50.0)
        assert result.spendable_now == pytest.approx(950.0)
        assert result.conservative_scenario.estimated_daily_spend == pytest.approx(15.0)
