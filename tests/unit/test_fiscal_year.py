"""Unit tests for fiscal year resolution"""

from datetime import date
from coop_ledger.domain.fiscal import CalendarFiscalYearClock
from coop_ledger.utils.date_utils import fiscal_year_for


def test_fiscal_year_starts_in_october():
    assert fiscal_year_for(date(2025, 10, 1)) == 2025
    assert fiscal_year_for(date(2025, 12, 31)) == 2025


def test_fiscal_year_before_october_belongs_to_previous_year():
    assert fiscal_year_for(date(2026, 1, 1)) == 2025
    assert fiscal_year_for(date(2026, 9, 30)) == 2025


def test_fiscal_year_custom_start_month():
    assert fiscal_year_for(date(2025, 3, 1), start_month=1) == 2025
    assert fiscal_year_for(date(2025, 2, 28), start_month=3) == 2024


def test_clock_uses_injected_today():
    clock = CalendarFiscalYearClock(today=lambda: date(2026, 2, 10))

    assert clock.today() == date(2026, 2, 10)
    assert clock.current_fiscal_year() == 2025
