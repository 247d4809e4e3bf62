"""Pydantic schemas for API request/response validation"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class TractSchema(BaseModel):
    """One tract definition in POST /v1/contributions/periods"""

    start_date: date
    end_date: date
    required_amount: Optional[Decimal] = Field(None, description="Defaults to the configured tract amount")


class CreatePeriodsRequest(BaseModel):
    """Request body for POST /v1/contributions/periods"""

    cooperative_id: Optional[int] = Field(None, description="Defaults to the configured cooperative")
    fiscal_year: int
    tracts: List[TractSchema]


class PeriodSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    period_id: int
    cooperative_id: int
    fiscal_year: int
    tract_number: int
    start_date: date
    end_date: date
    required_amount: Decimal


class PeriodsResponse(BaseModel):
    """Response for GET /v1/contributions/periods"""

    fiscal_year: int
    periods: List[PeriodSchema]


class RegisterContributionRequest(BaseModel):
    """Request body for POST /v1/contributions/register"""

    member_id: int = Field(..., gt=0)
    tract_number: Optional[int] = Field(None, description="Omit to register a full payment")
    amount: Decimal = Field(..., gt=0, description="Amount paid")
    transaction_date: Optional[date] = None
    description: Optional[str] = None
    created_by: int = Field(..., description="User registering the payment")


class MemberSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    member_id: int
    full_name: str
    identification: str
    member_code: Optional[str] = None
    quality_name: Optional[str] = None
    level_name: Optional[str] = None


class TransactionSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    transaction_id: int
    account_id: int
    transaction_type: str
    amount: Decimal
    transaction_date: date
    fiscal_year: int
    receipt_number: Optional[str] = None
    description: Optional[str] = None
    status: str
    created_by: int
    created_at: Optional[datetime] = None


class TractPostingSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    tract_number: int
    amount: Decimal
    transaction: TransactionSchema


class SingleTractResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    transaction: TransactionSchema
    member: MemberSchema
    period: PeriodSchema
    new_balance: Decimal
    receipt_number: str
    is_full_payment: bool = False


class FullPaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    member: MemberSchema
    transactions: List[TractPostingSchema]
    total_amount: Decimal
    new_balance: Decimal
    receipt_number: str
    is_full_payment: bool = True


RegistrationResponse = Union[FullPaymentResponse, SingleTractResponse]


class AccountSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    account_id: int
    current_balance: Decimal


class SummarySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_contributed: Decimal
    required_total: Decimal
    payment_count: int
    tracts_required: int
    is_complete: bool


class MemberStatusResponse(BaseModel):
    """Response for GET /v1/contributions/{member_id}"""

    model_config = ConfigDict(from_attributes=True)

    member: MemberSchema
    fiscal_year: int
    account: AccountSchema
    periods: List[PeriodSchema]
    transactions: List[TransactionSchema]
    summary: SummarySchema


class ReportMemberSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    member: MemberSchema
    account_id: int
    current_balance: Decimal
    total_contributed: Decimal
    payment_count: int
    is_complete: bool


class ReportSummarySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_members: int
    members_completed: int
    required_per_member: Decimal
    total_collected: Decimal
    completion_rate: Decimal


class CooperativeReportResponse(BaseModel):
    """Response for GET /v1/contributions/report"""

    model_config = ConfigDict(from_attributes=True)

    fiscal_year: int
    members: List[ReportMemberSchema]
    periods: List[PeriodSchema]
    summary: ReportSummarySchema


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    message: str
