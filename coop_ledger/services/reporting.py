"""Read-only contribution status and cooperative-wide reports"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from sqlalchemy.orm import Session

from coop_ledger.domain.exceptions import MemberNotFoundError
from coop_ledger.domain.fiscal import CalendarFiscalYearClock, FiscalYearClock
from coop_ledger.domain.models import (
    ContributionSummary,
    CooperativeReport,
    MemberContributionStatus,
    MemberReportRow,
    ReportSummary,
)
from coop_ledger.domain.tracts import to_money
from coop_ledger.infrastructure.database.repositories import (
    MemberRepository,
    ReportRepository,
    member_from_record,
)
from coop_ledger.infrastructure.database.session import unit_of_work
from coop_ledger.services.ledger import AccountLedger
from coop_ledger.services.periods import PeriodCatalog

ZERO = Decimal("0.00")


def completion_rate(members_completed: int, total_members: int) -> Decimal:
    """Percentage of members that completed, 2 places; 0 with no members"""
    if total_members == 0:
        return ZERO
    rate = Decimal(members_completed) * 100 / Decimal(total_members)
    return rate.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


class ContributionReports:
    """Projections over periods, accounts and transactions; never writes"""

    def __init__(self, db: Session, clock: FiscalYearClock | None = None):
        self.db = db
        self.clock = clock or CalendarFiscalYearClock()
        self.members = MemberRepository(db)
        self.ledger = AccountLedger(db)
        self.catalog = PeriodCatalog(db, self.clock)
        self.reports = ReportRepository(db)

    def get_member_status(self, member_id: int, fiscal_year: Optional[int] = None) -> MemberContributionStatus:
        """
        A member's contribution standing for one fiscal year.

        Raises:
            MemberNotFoundError: Unknown member
            AccountNotFoundError: Member has no contributions account
        """
        with unit_of_work(self.db, "getting member contributions", commit=False):
            member = self.members.find_by_id(member_id)
            if member is None:
                raise MemberNotFoundError()

            year = fiscal_year or self.clock.current_fiscal_year()
            account = self.ledger.get_account(member.member_id)
            schedule = self.catalog.schedule(member.cooperative_id, year)
            transactions = self.ledger.list_transactions(account.account_id, year)

        total_contributed = sum((t.amount for t in transactions), ZERO)
        required_total = schedule.required_total

        return MemberContributionStatus(
            member=member,
            fiscal_year=year,
            account=account,
            periods=schedule.periods,
            transactions=transactions,
            summary=ContributionSummary(
                total_contributed=total_contributed,
                required_total=required_total,
                payment_count=len(transactions),
                tracts_required=len(schedule.periods),
                is_complete=total_contributed >= required_total,
            ),
        )

    def get_cooperative_report(self, cooperative_id: int, fiscal_year: Optional[int] = None) -> CooperativeReport:
        """Per-member totals for every active member with a contributions account, plus cooperative totals"""
        with unit_of_work(self.db, "getting contributions report", commit=False):
            year = fiscal_year or self.clock.current_fiscal_year()
            schedule = self.catalog.schedule(cooperative_id, year)
            rows = self.reports.contributions_by_member(cooperative_id, year)

        required_total = schedule.required_total
        members = []
        for member_row, account_id, current_balance, total_contributed, payment_count in rows:
            total = to_money(total_contributed)
            members.append(
                MemberReportRow(
                    member=member_from_record(member_row),
                    account_id=account_id,
                    current_balance=to_money(current_balance),
                    total_contributed=total,
                    payment_count=payment_count,
                    is_complete=total >= required_total,
                )
            )

        members_completed = sum(1 for m in members if m.is_complete)

        return CooperativeReport(
            fiscal_year=year,
            members=members,
            periods=schedule.periods,
            summary=ReportSummary(
                total_members=len(members),
                members_completed=members_completed,
                required_per_member=required_total,
                total_collected=sum((m.total_contributed for m in members), ZERO),
                completion_rate=completion_rate(members_completed, len(members)),
            ),
        )
