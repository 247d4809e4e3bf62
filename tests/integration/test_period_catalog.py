"""Integration tests for the contribution period catalog"""

import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import patch
from sqlalchemy.exc import OperationalError
from coop_ledger.domain.exceptions import DuplicateEntryError, ErrorKind, InternalError, ValidationError
from coop_ledger.domain.models import TractDefinition
from coop_ledger.infrastructure.database.models import ContributionPeriodRecord
from coop_ledger.infrastructure.database.repositories import PeriodRepository
from coop_ledger.services.periods import PeriodCatalog


def count_periods(db, fiscal_year: int = 2025) -> int:
    return db.query(ContributionPeriodRecord).filter(ContributionPeriodRecord.fiscal_year == fiscal_year).count()


def test_create_periods_numbers_tracts_in_order(db, clock, tract_definitions):
    """Scenario A: three periods persisted as tracts 1, 2, 3"""
    created = PeriodCatalog(db, clock).create_periods(1, 2025, tract_definitions)

    assert [p.tract_number for p in created] == [1, 2, 3]
    assert [p.start_date for p in created] == [date(2026, 1, 1), date(2026, 4, 1), date(2026, 7, 1)]
    assert all(p.required_amount == Decimal("300.00") for p in created)
    assert count_periods(db) == 3


def test_create_periods_defaults_required_amount(db, clock):
    tracts = [
        TractDefinition(date(2026, 1, 1), date(2026, 3, 31)),
        TractDefinition(date(2026, 4, 1), date(2026, 6, 30), Decimal("250")),
        TractDefinition(date(2026, 7, 1), date(2026, 9, 30)),
    ]

    created = PeriodCatalog(db, clock).create_periods(1, 2025, tracts)

    assert [p.required_amount for p in created] == [Decimal("300.00"), Decimal("250.00"), Decimal("300.00")]


def test_create_periods_twice_is_duplicate(db, clock, tract_definitions):
    """Scenario E: second creation for the same year fails and adds nothing"""
    catalog = PeriodCatalog(db, clock)
    catalog.create_periods(1, 2025, tract_definitions)

    with pytest.raises(DuplicateEntryError) as exc_info:
        catalog.create_periods(1, 2025, tract_definitions)

    assert exc_info.value.kind == ErrorKind.DUPLICATE_ENTRY
    assert count_periods(db) == 3


def test_create_periods_same_year_other_cooperative(db, clock, tract_definitions):
    catalog = PeriodCatalog(db, clock)
    catalog.create_periods(1, 2025, tract_definitions)
    catalog.create_periods(2, 2025, tract_definitions)

    assert len(catalog.get_periods(2, 2025).periods) == 3


@pytest.mark.parametrize("count", [0, 1, 2, 4])
def test_create_periods_rejects_wrong_tract_count(db, clock, tract_definitions, count):
    tracts = (tract_definitions * 2)[:count]

    with pytest.raises(ValidationError):
        PeriodCatalog(db, clock).create_periods(1, 2025, tracts)

    assert count_periods(db) == 0


@pytest.mark.parametrize("fiscal_year", [1999, 2101])
def test_create_periods_rejects_fiscal_year_out_of_range(db, clock, tract_definitions, fiscal_year):
    with pytest.raises(ValidationError, match="Invalid fiscal year"):
        PeriodCatalog(db, clock).create_periods(1, fiscal_year, tract_definitions)


@pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-5"), "abc"])
def test_create_periods_rejects_bad_required_amount(db, clock, tract_definitions, amount):
    tract_definitions[2].required_amount = amount

    with pytest.raises(ValidationError, match="Tract 3"):
        PeriodCatalog(db, clock).create_periods(1, 2025, tract_definitions)

    assert count_periods(db) == 0


def test_create_periods_rejects_inverted_dates(db, clock, tract_definitions):
    tract_definitions[1] = TractDefinition(date(2026, 6, 30), date(2026, 4, 1))

    with pytest.raises(ValidationError, match="Tract 2"):
        PeriodCatalog(db, clock).create_periods(1, 2025, tract_definitions)


def test_create_periods_rolls_back_on_persistence_failure(db, clock, tract_definitions):
    """A failure on the third insert leaves no periods and surfaces as InternalError"""
    original = PeriodRepository.create_period
    calls = {"n": 0}

    def failing_third_insert(self, **kwargs):
        calls["n"] += 1
        if calls["n"] == 3:
            raise OperationalError("INSERT INTO contribution_periods", {}, Exception("disk I/O error"))
        return original(self, **kwargs)

    with patch.object(PeriodRepository, "create_period", failing_third_insert):
        with pytest.raises(InternalError) as exc_info:
            PeriodCatalog(db, clock).create_periods(1, 2025, tract_definitions)

    assert "disk I/O error" not in exc_info.value.message
    assert isinstance(exc_info.value.__cause__, OperationalError)
    assert count_periods(db) == 0


def test_get_periods_defaults_to_current_fiscal_year(db, clock, periods):
    schedule = PeriodCatalog(db, clock).get_periods(1)

    assert schedule.fiscal_year == 2025
    assert [p.tract_number for p in schedule.periods] == [1, 2, 3]
    assert schedule.required_total == Decimal("900.00")


def test_get_periods_undefined_year_is_empty(db, clock):
    schedule = PeriodCatalog(db, clock).get_periods(1, 2030)

    assert schedule.fiscal_year == 2030
    assert schedule.periods == []
