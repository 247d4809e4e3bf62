"""GET/POST /v1/contributions/periods - Contribution period catalog"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from coop_ledger.api.v1.schemas import CreatePeriodsRequest, PeriodSchema, PeriodsResponse
from coop_ledger.api.dependencies import get_period_catalog
from coop_ledger.config import settings
from coop_ledger.domain.models import TractDefinition
from coop_ledger.services.periods import PeriodCatalog

router = APIRouter()


@router.get("/contributions/periods", response_model=PeriodsResponse)
def get_periods(
    cooperative_id: Optional[int] = Query(None, description="Defaults to the configured cooperative"),
    fiscal_year: Optional[int] = Query(None, description="Defaults to the current fiscal year"),
    catalog: PeriodCatalog = Depends(get_period_catalog),
):
    """
    Retrieve the tract schedule of a fiscal year.

    Returns:
        Resolved fiscal year and its periods ordered by tract number (empty if not defined)
    """
    schedule = catalog.get_periods(cooperative_id or settings.default_cooperative_id, fiscal_year)
    return PeriodsResponse(
        fiscal_year=schedule.fiscal_year,
        periods=[PeriodSchema.model_validate(p) for p in schedule.periods],
    )


@router.post("/contributions/periods", response_model=List[PeriodSchema], status_code=status.HTTP_201_CREATED)
def create_periods(
    request_body: CreatePeriodsRequest,
    catalog: PeriodCatalog = Depends(get_period_catalog),
):
    """Create the tracts of a fiscal year; fails if the year already has periods"""
    periods = catalog.create_periods(
        cooperative_id=request_body.cooperative_id or settings.default_cooperative_id,
        fiscal_year=request_body.fiscal_year,
        tracts=[
            TractDefinition(start_date=t.start_date, end_date=t.end_date, required_amount=t.required_amount)
            for t in request_body.tracts
        ],
    )
    return [PeriodSchema.model_validate(p) for p in periods]
