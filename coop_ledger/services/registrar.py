"""Contribution registrar: turns a payment intent into ledger entries"""

import logging
from decimal import Decimal
from typing import Optional, Protocol, Union

from sqlalchemy.orm import Session

from coop_ledger.config import settings
from coop_ledger.domain.exceptions import (
    LedgerError,
    MemberInactiveError,
    MemberNotFoundError,
    PeriodNotFoundError,
    ValidationError,
)
from coop_ledger.domain.fiscal import CalendarFiscalYearClock, FiscalYearClock
from coop_ledger.domain.models import (
    Account,
    ContributionRequest,
    FullPaymentRegistration,
    Member,
    PeriodSchedule,
    SingleTractRegistration,
    TractPosting,
)
from coop_ledger.domain.tracts import is_full_payment, split_full_payment, to_money
from coop_ledger.infrastructure.database.repositories import MemberRepository
from coop_ledger.infrastructure.database.session import unit_of_work
from coop_ledger.infrastructure.observability.logging import log_registration
from coop_ledger.infrastructure.observability.metrics import record_registration, record_registration_failure
from coop_ledger.services.ledger import AccountLedger
from coop_ledger.services.periods import PeriodCatalog

logger = logging.getLogger(__name__)

Registration = Union[SingleTractRegistration, FullPaymentRegistration]


class MemberDirectory(Protocol):
    def find_by_id(self, member_id: int) -> Optional[Member]: ...


class ContributionRegistrar:
    """Validates payments against the period catalog and posts them to the contributions ledger"""

    def __init__(
        self,
        db: Session,
        members: MemberDirectory | None = None,
        clock: FiscalYearClock | None = None,
    ):
        self.db = db
        self.members = members or MemberRepository(db)
        self.clock = clock or CalendarFiscalYearClock()
        self.ledger = AccountLedger(db)
        self.catalog = PeriodCatalog(db, self.clock)

    def register_contribution(self, request: ContributionRequest, request_id: str | None = None) -> Registration:
        """
        Register a contribution payment as one atomic unit of work.

        Flow:
        1. Resolve the member; inactive members cannot transact
        2. Lock the member's contributions account
        3. Resolve the current fiscal year and its period catalog
        4. Post either one tract, or a full payment split across every tract
        5. Commit; any failure rolls back every entry of this call

        Raises:
            ValidationError: Non-positive amount, or no usable tract number
            MemberNotFoundError / MemberInactiveError / AccountNotFoundError / PeriodNotFoundError
            InternalError: Persistence failure
        """
        try:
            with unit_of_work(self.db, "registering contribution"):
                result, fiscal_year = self._register(request)
        except LedgerError as e:
            record_registration_failure(e.kind.value)
            logger.warning(
                f"Contribution rejected: {e.message}",
                extra={"request_id": request_id, "member_id": request.member_id, "kind": e.kind.value},
            )
            raise

        amount = result.total_amount if result.is_full_payment else result.transaction.amount
        record_registration(result.is_full_payment, amount)
        log_registration(
            member_id=request.member_id,
            fiscal_year=fiscal_year,
            amount=amount,
            receipt_number=result.receipt_number,
            tract_number=None if result.is_full_payment else result.period.tract_number,
            is_full_payment=result.is_full_payment,
            request_id=request_id,
        )
        return result

    def _register(self, request: ContributionRequest) -> tuple[Registration, int]:
        amount = to_money(request.amount)
        if amount <= 0:
            raise ValidationError("Amount must be greater than zero")

        member = self.members.find_by_id(request.member_id)
        if member is None:
            raise MemberNotFoundError()
        if not member.is_active:
            raise MemberInactiveError()

        account = self.ledger.get_account(member.member_id, for_update=True)

        fiscal_year = self.clock.current_fiscal_year()
        schedule = self.catalog.schedule(member.cooperative_id, fiscal_year)
        receipt_number = self.ledger.issue_receipt(
            cooperative_id=member.cooperative_id,
            member_id=member.member_id,
            total_amount=amount,
            on_date=self.clock.today(),
            created_by=request.created_by,
        )

        if is_full_payment(amount, schedule.required_total, request.tract_number):
            result = self._post_full_payment(request, member, account, schedule, amount, receipt_number)
        else:
            result = self._post_single_tract(request, member, account, schedule, amount, receipt_number)
        return result, fiscal_year

    def _post_full_payment(
        self,
        request: ContributionRequest,
        member: Member,
        account: Account,
        schedule: PeriodSchedule,
        amount: Decimal,
        receipt_number: str,
    ) -> FullPaymentRegistration:
        transaction_date = request.transaction_date or self.clock.today()
        postings = []
        new_balance = account.current_balance

        # Tracts are posted in ascending order; a missing period aborts the whole payment
        for allocation in split_full_payment(amount, schedule.tract_count(settings.tracts_per_year)):
            if schedule.period_for(allocation.tract_number) is None:
                raise PeriodNotFoundError(f"Period not found for tract {allocation.tract_number}")

            transaction, new_balance = self.ledger.append_transaction(
                account_id=account.account_id,
                amount=allocation.amount,
                transaction_date=transaction_date,
                fiscal_year=schedule.fiscal_year,
                description=f"Contribution Tract {allocation.tract_number} (full payment) - {member.full_name}",
                created_by=request.created_by,
                receipt_number=receipt_number,
            )
            postings.append(
                TractPosting(tract_number=allocation.tract_number, amount=allocation.amount, transaction=transaction)
            )

        return FullPaymentRegistration(
            member=member,
            transactions=postings,
            total_amount=amount,
            new_balance=new_balance,
            receipt_number=receipt_number,
        )

    def _post_single_tract(
        self,
        request: ContributionRequest,
        member: Member,
        account: Account,
        schedule: PeriodSchedule,
        amount: Decimal,
        receipt_number: str,
    ) -> SingleTractRegistration:
        num_tracts = schedule.tract_count(settings.tracts_per_year)
        tract_number = request.tract_number
        if tract_number is None or not 1 <= tract_number <= num_tracts:
            full_amount = f" ({schedule.required_total})" if schedule.required_total else ""
            raise ValidationError(
                f"Tract number must be between 1 and {num_tracts}, or pay the full amount{full_amount}"
            )

        period = schedule.period_for(tract_number)
        if period is None:
            raise PeriodNotFoundError()

        transaction, new_balance = self.ledger.append_transaction(
            account_id=account.account_id,
            amount=amount,
            transaction_date=request.transaction_date or self.clock.today(),
            fiscal_year=schedule.fiscal_year,
            description=request.description or f"Contribution Tract {tract_number} - {member.full_name}",
            created_by=request.created_by,
            receipt_number=receipt_number,
        )

        return SingleTractRegistration(
            transaction=transaction,
            member=member,
            period=period,
            new_balance=new_balance,
            receipt_number=receipt_number,
        )
