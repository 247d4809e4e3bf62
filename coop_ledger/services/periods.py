"""Period catalog: the fixed tract schedule a member must satisfy each fiscal year"""

import logging
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from coop_ledger.config import settings
from coop_ledger.domain.exceptions import DuplicateEntryError, ValidationError
from coop_ledger.domain.fiscal import CalendarFiscalYearClock, FiscalYearClock
from coop_ledger.domain.models import ContributionPeriod, PeriodSchedule, TractDefinition
from coop_ledger.domain.tracts import to_money
from coop_ledger.infrastructure.database.repositories import PeriodRepository, period_from_record
from coop_ledger.infrastructure.database.session import unit_of_work
from coop_ledger.infrastructure.observability.metrics import periods_created_counter

logger = logging.getLogger(__name__)


def parse_required_amount(value, tract_number: int) -> Decimal:
    """Required amount of a tract definition; missing means the configured default"""
    if value is None:
        return to_money(settings.default_required_amount)
    try:
        amount = to_money(value)
    except (InvalidOperation, ValueError, TypeError) as e:
        raise ValidationError(f"Tract {tract_number}: requiredAmount must be a decimal number") from e
    if amount <= 0:
        raise ValidationError(f"Tract {tract_number}: requiredAmount must be greater than zero")
    return amount


def validate_fiscal_year(fiscal_year: int) -> None:
    if not isinstance(fiscal_year, int) or not settings.min_fiscal_year <= fiscal_year <= settings.max_fiscal_year:
        raise ValidationError("Invalid fiscal year")


class PeriodCatalog:
    """Defines and retrieves each fiscal year's contribution periods"""

    def __init__(self, db: Session, clock: FiscalYearClock | None = None):
        self.db = db
        self.clock = clock or CalendarFiscalYearClock()
        self.periods = PeriodRepository(db)

    def schedule(self, cooperative_id: int, fiscal_year: int) -> PeriodSchedule:
        """Periods of a fiscal year read through the current session, no error wrapping"""
        rows = self.periods.get_periods(cooperative_id, fiscal_year)
        return PeriodSchedule(fiscal_year=fiscal_year, periods=[period_from_record(r) for r in rows])

    def get_periods(self, cooperative_id: int, fiscal_year: Optional[int] = None) -> PeriodSchedule:
        """Periods ordered by tract number; an undefined year yields an empty schedule"""
        with unit_of_work(self.db, "getting contribution periods", commit=False):
            year = fiscal_year or self.clock.current_fiscal_year()
            return self.schedule(cooperative_id, year)

    def create_periods(
        self,
        cooperative_id: int,
        fiscal_year: int,
        tracts: Sequence[TractDefinition],
    ) -> List[ContributionPeriod]:
        """
        Create every tract of a fiscal year in one all-or-nothing step.

        Raises:
            ValidationError: Wrong tract count, bad amounts or dates, fiscal year out of range
            DuplicateEntryError: The fiscal year already has periods
        """
        expected = settings.tracts_per_year
        if not tracts or len(tracts) != expected:
            raise ValidationError(f"Exactly {expected} tracts must be provided")
        validate_fiscal_year(fiscal_year)

        amounts = []
        for number, tract in enumerate(tracts, start=1):
            if tract.start_date is None or tract.end_date is None:
                raise ValidationError(f"Tract {number}: startDate and endDate are required")
            if tract.end_date <= tract.start_date:
                raise ValidationError(f"Tract {number}: endDate must be after startDate")
            amounts.append(parse_required_amount(tract.required_amount, number))

        with unit_of_work(self.db, "creating contribution periods"):
            if self.periods.get_periods(cooperative_id, fiscal_year):
                raise DuplicateEntryError()

            created = []
            for number, (tract, amount) in enumerate(zip(tracts, amounts), start=1):
                row = self.periods.create_period(
                    cooperative_id=cooperative_id,
                    fiscal_year=fiscal_year,
                    tract_number=number,
                    start_date=tract.start_date,
                    end_date=tract.end_date,
                    required_amount=amount,
                )
                created.append(period_from_record(row))

        periods_created_counter.inc(len(created))
        logger.info(
            "Contribution periods created",
            extra={"cooperative_id": cooperative_id, "fiscal_year": fiscal_year, "count": len(created)},
        )
        return created
