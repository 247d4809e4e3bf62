"""Pytest fixtures for testing"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from datetime import date
from decimal import Decimal
from typing import Callable, Generator
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session
from coop_ledger.api.main import create_app
from coop_ledger.api.dependencies import get_clock
from coop_ledger.domain.fiscal import CalendarFiscalYearClock
from coop_ledger.domain.models import ContributionPeriod, TractDefinition
from coop_ledger.infrastructure.database.models import AccountRecord, Base, MemberRecord
from coop_ledger.infrastructure.database.session import engine, get_db
from coop_ledger.services.periods import PeriodCatalog


# Test database
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# 2025-11-15 falls in fiscal year 2025 (Oct 2025 - Sep 2026)
TODAY = date(2025, 11, 15)
FISCAL_YEAR = 2025
COOPERATIVE_ID = 1


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def clock() -> CalendarFiscalYearClock:
    """Clock pinned to a date inside fiscal year 2025"""
    return CalendarFiscalYearClock(today=lambda: TODAY)


@pytest.fixture
def client(db: Session, clock: CalendarFiscalYearClock) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    return TestClient(app)


@pytest.fixture
def make_member(db: Session) -> Callable[..., MemberRecord]:
    """Insert a member, with a contributions account unless told otherwise"""
    counter = {"n": 0}

    def _make(
        full_name: str = "Ana Mora",
        is_active: bool = True,
        with_account: bool = True,
        cooperative_id: int = COOPERATIVE_ID,
    ) -> MemberRecord:
        counter["n"] += 1
        member = MemberRecord(
            cooperative_id=cooperative_id,
            full_name=full_name,
            identification=f"1-{counter['n']:04d}-0001",
            member_code=f"M{counter['n']:04d}",
            quality_name="Student",
            level_name="Seventh",
            is_active=is_active,
        )
        db.add(member)
        db.flush()
        if with_account:
            db.add(
                AccountRecord(
                    member_id=member.member_id,
                    cooperative_id=cooperative_id,
                    account_type="contributions",
                    current_balance=Decimal("0.00"),
                )
            )
        db.commit()
        return member

    return _make


@pytest.fixture
def tract_definitions() -> list[TractDefinition]:
    """Three ₡300 tracts covering Jan-Sep"""
    return [
        TractDefinition(date(2026, 1, 1), date(2026, 3, 31), Decimal("300.00")),
        TractDefinition(date(2026, 4, 1), date(2026, 6, 30), Decimal("300.00")),
        TractDefinition(date(2026, 7, 1), date(2026, 9, 30), Decimal("300.00")),
    ]


@pytest.fixture
def periods(db: Session, clock, tract_definitions) -> list[ContributionPeriod]:
    """Fiscal year 2025 catalog for the default cooperative"""
    return PeriodCatalog(db, clock).create_periods(COOPERATIVE_ID, FISCAL_YEAR, tract_definitions)
