"""Date manipulation utilities"""

from datetime import date


def fiscal_year_for(on_date: date, start_month: int = 10) -> int:
    """
    Fiscal year a date belongs to.

    A fiscal year is named after the calendar year it starts in: with the
    default October start, 2025-10-01 through 2026-09-30 is fiscal year 2025.
    """
    return on_date.year if on_date.month >= start_month else on_date.year - 1
