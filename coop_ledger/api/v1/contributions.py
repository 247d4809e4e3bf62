"""POST /v1/contributions/register and GET /v1/contributions/{member_id}"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status

from coop_ledger.api.v1.schemas import (
    FullPaymentResponse,
    MemberStatusResponse,
    RegisterContributionRequest,
    RegistrationResponse,
    SingleTractResponse,
)
from coop_ledger.api.dependencies import get_registrar, get_reports, get_request_id
from coop_ledger.domain.models import ContributionRequest
from coop_ledger.services.registrar import ContributionRegistrar
from coop_ledger.services.reporting import ContributionReports

router = APIRouter()


@router.post("/contributions/register", response_model=RegistrationResponse, status_code=status.HTTP_201_CREATED)
def register_contribution(
    request_body: RegisterContributionRequest,
    request: Request,
    registrar: ContributionRegistrar = Depends(get_registrar),
):
    """
    Register a contribution payment.

    With a tract_number the amount is posted to that tract. Without one, an
    amount covering the fiscal year's required total is split across all tracts.
    """
    result = registrar.register_contribution(
        ContributionRequest(
            member_id=request_body.member_id,
            tract_number=request_body.tract_number,
            amount=request_body.amount,
            transaction_date=request_body.transaction_date,
            description=request_body.description,
            created_by=request_body.created_by,
        ),
        request_id=get_request_id(request),
    )

    if result.is_full_payment:
        return FullPaymentResponse.model_validate(result)
    return SingleTractResponse.model_validate(result)


@router.get("/contributions/{member_id}", response_model=MemberStatusResponse)
def get_member_contributions(
    member_id: int,
    fiscal_year: Optional[int] = Query(None, description="Defaults to the current fiscal year"),
    reports: ContributionReports = Depends(get_reports),
):
    """Member's periods, payments and completion summary for a fiscal year"""
    return MemberStatusResponse.model_validate(reports.get_member_status(member_id, fiscal_year))
