"""Fiscal year clock used to scope periods and transactions"""

from datetime import date
from typing import Callable, Protocol

from coop_ledger.config import settings
from coop_ledger.utils.date_utils import fiscal_year_for


class FiscalYearClock(Protocol):
    def today(self) -> date: ...

    def current_fiscal_year(self) -> int: ...


class CalendarFiscalYearClock:
    """Derives the current fiscal year from the calendar date"""

    def __init__(self, today: Callable[[], date] | None = None, start_month: int | None = None):
        self._today = today or date.today
        self.start_month = start_month or settings.fiscal_year_start_month

    def today(self) -> date:
        return self._today()

    def current_fiscal_year(self) -> int:
        return fiscal_year_for(self._today(), self.start_month)
