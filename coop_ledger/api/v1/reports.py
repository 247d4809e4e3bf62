"""GET /v1/contributions/report - Cooperative-wide contribution report"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from coop_ledger.api.v1.schemas import CooperativeReportResponse
from coop_ledger.api.dependencies import get_reports
from coop_ledger.config import settings
from coop_ledger.services.reporting import ContributionReports

router = APIRouter()


@router.get("/contributions/report", response_model=CooperativeReportResponse)
def get_contributions_report(
    cooperative_id: Optional[int] = Query(None, description="Defaults to the configured cooperative"),
    fiscal_year: Optional[int] = Query(None, description="Defaults to the current fiscal year"),
    reports: ContributionReports = Depends(get_reports),
):
    """
    Completion status of every active member for a fiscal year.

    Returns:
        Per-member totals plus total collected, members completed and completion rate
    """
    report = reports.get_cooperative_report(cooperative_id or settings.default_cooperative_id, fiscal_year)
    return CooperativeReportResponse.model_validate(report)
