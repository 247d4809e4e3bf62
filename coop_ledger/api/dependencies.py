"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from coop_ledger.domain.fiscal import CalendarFiscalYearClock, FiscalYearClock
from coop_ledger.infrastructure.database.session import get_db
from coop_ledger.services.periods import PeriodCatalog
from coop_ledger.services.registrar import ContributionRegistrar
from coop_ledger.services.reporting import ContributionReports


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_clock() -> FiscalYearClock:
    """Provide the fiscal year clock"""
    return CalendarFiscalYearClock()


def get_period_catalog(db: Session = Depends(get_db), clock: FiscalYearClock = Depends(get_clock)) -> PeriodCatalog:
    return PeriodCatalog(db, clock)


def get_registrar(db: Session = Depends(get_db), clock: FiscalYearClock = Depends(get_clock)) -> ContributionRegistrar:
    return ContributionRegistrar(db, clock=clock)


def get_reports(db: Session = Depends(get_db), clock: FiscalYearClock = Depends(get_clock)) -> ContributionReports:
    return ContributionReports(db, clock)
