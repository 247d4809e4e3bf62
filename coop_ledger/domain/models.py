"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

ACCOUNT_TYPE_CONTRIBUTIONS = "contributions"
TRANSACTION_TYPE_DEPOSIT = "deposit"
STATUS_COMPLETED = "completed"


@dataclass
class Member:
    """Cooperative member as seen by the ledger (read-only)"""

    member_id: int
    cooperative_id: int
    full_name: str
    identification: str
    member_code: Optional[str]
    is_active: bool
    quality_name: Optional[str] = None
    level_name: Optional[str] = None


@dataclass
class TractDefinition:
    """Caller-supplied definition of one tract when creating a fiscal year's periods"""

    start_date: date
    end_date: date
    required_amount: Optional[Decimal] = None


@dataclass
class ContributionPeriod:
    """Date window and required amount of one tract in a fiscal year"""

    period_id: int
    cooperative_id: int
    fiscal_year: int
    tract_number: int
    start_date: date
    end_date: date
    required_amount: Decimal


@dataclass
class PeriodSchedule:
    fiscal_year: int
    periods: List[ContributionPeriod]

    @property
    def required_total(self) -> Decimal:
        return sum((p.required_amount for p in self.periods), Decimal("0.00"))

    def period_for(self, tract_number: int) -> Optional[ContributionPeriod]:
        return next((p for p in self.periods if p.tract_number == tract_number), None)

    def tract_count(self, tracts_per_year: int) -> int:
        """Tracts a member owes; missing periods still count toward it"""
        return max([tracts_per_year] + [p.tract_number for p in self.periods])


@dataclass
class Account:
    """Per-member, per-purpose balance ledger"""

    account_id: int
    member_id: int
    cooperative_id: int
    account_type: str
    current_balance: Decimal
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class LedgerTransaction:
    """Immutable ledger entry"""

    transaction_id: int
    account_id: int
    transaction_type: str
    amount: Decimal
    transaction_date: date
    fiscal_year: int
    description: Optional[str]
    status: str
    created_by: int
    receipt_number: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass
class ContributionRequest:
    """Payment intent submitted to the registrar"""

    member_id: int
    amount: Decimal
    created_by: int
    tract_number: Optional[int] = None
    transaction_date: Optional[date] = None
    description: Optional[str] = None


@dataclass
class TractAllocation:
    """Share of a lump payment assigned to one tract"""

    tract_number: int
    amount: Decimal


@dataclass
class TractPosting:
    tract_number: int
    amount: Decimal
    transaction: LedgerTransaction


@dataclass
class SingleTractRegistration:
    transaction: LedgerTransaction
    member: Member
    period: ContributionPeriod
    new_balance: Decimal
    receipt_number: str
    is_full_payment: bool = False


@dataclass
class FullPaymentRegistration:
    member: Member
    transactions: List[TractPosting]
    total_amount: Decimal
    new_balance: Decimal
    receipt_number: str
    is_full_payment: bool = True


@dataclass
class ContributionSummary:
    total_contributed: Decimal
    required_total: Decimal
    payment_count: int
    tracts_required: int
    is_complete: bool


@dataclass
class MemberContributionStatus:
    member: Member
    fiscal_year: int
    account: Account
    periods: List[ContributionPeriod]
    transactions: List[LedgerTransaction]
    summary: ContributionSummary


@dataclass
class MemberReportRow:
    """One member's line in the cooperative report"""

    member: Member
    account_id: int
    current_balance: Decimal
    total_contributed: Decimal
    payment_count: int
    is_complete: bool


@dataclass
class ReportSummary:
    total_members: int
    members_completed: int
    required_per_member: Decimal
    total_collected: Decimal
    completion_rate: Decimal


@dataclass
class CooperativeReport:
    fiscal_year: int
    members: List[MemberReportRow]
    periods: List[ContributionPeriod]
    summary: ReportSummary
