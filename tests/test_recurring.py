"""
Recurring schedule expansion: occurrence dates per frequency, range clipping,
and the contribution/income/minimum-payment helpers built on top.
"""

from datetime import date, datetime

import pytest

from core.models import DebtAccount, RecurringFrequency, SimulationEventType
from core.validators import InvalidArgumentError
from schedules.recurring import (
    expand_contributions,
    expand_income,
    expand_minimum_payments,
    get_occurrences,
)


def occurrences(anchor, frequency, start, end):
    return list(get_occurrences(anchor, frequency, start, end))


class TestGetOccurrences:

    def test_monthly_keeps_day_of_month(self):
        dates = occurrences(
            date(2025, 1, 15), RecurringFrequency.MONTHLY, date(2025, 1, 1), date(2025, 6, 30)
        )
        assert dates == [date(2025, m, 15) for m in range(1, 7)]

    def test_weekly_january(self):
        dates = occurrences(
            date(2025, 1, 1), RecurringFrequency.WEEKLY, date(2025, 1, 1), date(2025, 1, 31)
        )
        assert dates == [date(2025, 1, d) for d in (1, 8, 15, 22, 29)]

    def test_biweekly_full_year(self):
        dates = occurrences(
            date(2025, 1, 1), RecurringFrequency.BIWEEKLY, date(2025, 1, 1), date(2025, 12, 31)
        )
        assert len(dates) == 27
        assert dates[1] == date(2025, 1, 15)
        assert dates[-1] == date(2025, 12, 31)

    def test_quarterly(self):
        dates = occurrences(
            date(2025, 1, 1), RecurringFrequency.QUARTERLY, date(2025, 1, 1), date(2025, 12, 31)
        )
        assert dates == [date(2025, 1, 1), date(2025, 4, 1), date(2025, 7, 1), date(2025, 10, 1)]

    def test_annually(self):
        dates = occurrences(
            date(2025, 1, 1), RecurringFrequency.ANNUALLY, date(2025, 1, 1), date(2027, 12, 31)
        )
        assert dates == [date(2025, 1, 1), date(2026, 1, 1), date(2027, 1, 1)]

    def test_semimonthly_is_flat_fifteen_days(self):
        dates = occurrences(
            date(2025, 1, 1), RecurringFrequency.SEMIMONTHLY, date(2025, 1, 1), date(2025, 3, 31)
        )
        assert dates == [
            date(2025, 1, 1),
            date(2025, 1, 16),
            date(2025, 1, 31),
            date(2025, 2, 15),
            date(2025, 3, 2),
            date(2025, 3, 17),
        ]

    def test_anchor_before_start_is_fast_forwarded(self):
        dates = occurrences(
            date(2025, 1, 1), RecurringFrequency.MONTHLY, date(2025, 3, 1), date(2025, 6, 30)
        )
        assert dates == [date(2025, 3, 1), date(2025, 4, 1), date(2025, 5, 1), date(2025, 6, 1)]

    def test_anchor_after_start_begins_at_anchor(self):
        dates = occurrences(
            date(2025, 1, 10), RecurringFrequency.WEEKLY, date(2025, 1, 1), date(2025, 1, 20)
        )
        assert dates == [date(2025, 1, 10), date(2025, 1, 17)]

    def test_month_end_anchor_returns_to_31st(self):
        dates = occurrences(
            date(2025, 1, 31), RecurringFrequency.MONTHLY, date(2025, 1, 1), date(2025, 5, 31)
        )
        assert dates == [
            date(2025, 1, 31),
            date(2025, 2, 28),
            date(2025, 3, 31),
            date(2025, 4, 30),
            date(2025, 5, 31),
        ]

    def test_start_after_end_is_empty(self):
        assert occurrences(
            date(2025, 1, 1), RecurringFrequency.MONTHLY, date(2025, 6, 1), date(2025, 1, 1)
        ) == []

    def test_anchor_after_end_is_empty(self):
        assert occurrences(
            date(2026, 1, 1), RecurringFrequency.MONTHLY, date(2025, 1, 1), date(2025, 12, 31)
        ) == []

    def test_datetimes_are_treated_as_days(self):
        dates = occurrences(
            datetime(2025, 1, 1, 9, 30), RecurringFrequency.WEEKLY,
            datetime(2025, 1, 1, 23, 0), date(2025, 1, 8),
        )
        assert dates == [date(2025, 1, 1), date(2025, 1, 8)]

    @pytest.mark.parametrize("frequency", list(RecurringFrequency))
    def test_ascending_and_within_range(self, frequency):
        start, end = date(2024, 2, 10), date(2026, 8, 20)
        dates = occurrences(date(2023, 11, 30), frequency, start, end)
        assert dates
        assert all(start <= d <= end for d in dates)
        assert all(a < b for a, b in zip(dates, dates[1:]))

    def test_is_lazy_iterator(self):
        it = get_occurrences(
            date(2025, 1, 1), RecurringFrequency.WEEKLY, date(2025, 1, 1), date(2025, 12, 31)
        )
        assert next(it) == date(2025, 1, 1)
        assert next(it) == date(2025, 1, 8)

    def test_unknown_frequency_rejected(self):
        with pytest.raises(InvalidArgumentError):
            get_occurrences(date(2025, 1, 1), "fortnightly", date(2025, 1, 1), date(2025, 2, 1))


class TestExpansionHelpers:

    def test_expand_contributions(self):
        contributions = expand_contributions(
            500.0, RecurringFrequency.MONTHLY, date(2025, 1, 15), date(2025, 1, 1), date(2025, 3, 31)
        )
        assert [c.date for c in contributions] == [
            date(2025, 1, 15), date(2025, 2, 15), date(2025, 3, 15)
        ]
        assert all(c.amount == 500.0 for c in contributions)

    def test_expand_income_carries_description(self):
        income = expand_income(
            5000.0, RecurringFrequency.MONTHLY, date(2025, 1, 15), "Salary",
            date(2025, 1, 1), date(2025, 3, 31),
        )
        assert len(income) == 3
        assert income[0].description == "Salary"
        assert income[0].amount == 5000.0

    def test_negative_amount_rejected(self):
        with pytest.raises(InvalidArgumentError):
            expand_contributions(
                -1.0, RecurringFrequency.MONTHLY, date(2025, 1, 1), date(2025, 1, 1), date(2025, 2, 1)
            )

    def test_expand_minimum_payments(self):
        debts = [
            DebtAccount("Card", 1000.0, 0.2, minimum_payment=25.0),
            DebtAccount("Loan", 5000.0, 0.05, minimum_payment=100.0),
            DebtAccount("Paid", 0.0, 0.1, minimum_payment=0.0),
        ]
        events = expand_minimum_payments(debts, date(2025, 1, 1), date(2025, 3, 15))

        assert len(events) == 6
        assert all(e.type == SimulationEventType.DEBT_PAYMENT for e in events)
        assert [e.related_debt_name for e in events[:2]] == ["Card", "Loan"]
        assert [e.date for e in events[::2]] == [date(2025, 1, 1), date(2025, 2, 1), date(2025, 3, 1)]
        assert events[1].amount == 100.0
