"""Data access layer for ledger entities"""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import and_, func
from sqlalchemy.orm import Session

from coop_ledger.domain.models import (
    ACCOUNT_TYPE_CONTRIBUTIONS,
    STATUS_COMPLETED,
    TRANSACTION_TYPE_DEPOSIT,
    Account,
    ContributionPeriod,
    LedgerTransaction,
    Member,
)
from coop_ledger.infrastructure.database.models import (
    AccountRecord,
    ContributionPeriodRecord,
    MemberRecord,
    ReceiptRecord,
    ReceiptSequenceRecord,
    TransactionRecord,
)


def member_from_record(row: MemberRecord) -> Member:
    return Member(
        member_id=row.member_id,
        cooperative_id=row.cooperative_id,
        full_name=row.full_name,
        identification=row.identification,
        member_code=row.member_code,
        is_active=row.is_active,
        quality_name=row.quality_name,
        level_name=row.level_name,
    )


def account_from_record(row: AccountRecord) -> Account:
    return Account(
        account_id=row.account_id,
        member_id=row.member_id,
        cooperative_id=row.cooperative_id,
        account_type=row.account_type,
        current_balance=Decimal(row.current_balance),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def transaction_from_record(row: TransactionRecord) -> LedgerTransaction:
    return LedgerTransaction(
        transaction_id=row.transaction_id,
        account_id=row.account_id,
        transaction_type=row.transaction_type,
        amount=Decimal(row.amount),
        transaction_date=row.transaction_date,
        fiscal_year=row.fiscal_year,
        description=row.description,
        status=row.status,
        created_by=row.created_by,
        receipt_number=row.receipt_number,
        created_at=row.created_at,
    )


def period_from_record(row: ContributionPeriodRecord) -> ContributionPeriod:
    return ContributionPeriod(
        period_id=row.period_id,
        cooperative_id=row.cooperative_id,
        fiscal_year=row.fiscal_year,
        tract_number=row.tract_number,
        start_date=row.start_date,
        end_date=row.end_date,
        required_amount=Decimal(row.required_amount),
    )


class MemberRepository:
    """Member directory backed by the members table"""

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, member_id: int) -> Optional[Member]:
        row = self.db.get(MemberRecord, member_id)
        return member_from_record(row) if row else None


class AccountRepository:
    """Repository for member accounts"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_member(
        self,
        member_id: int,
        account_type: str = ACCOUNT_TYPE_CONTRIBUTIONS,
        for_update: bool = False,
    ) -> Optional[AccountRecord]:
        """Fetch a member's account, optionally locking the row for the rest of the transaction"""
        query = self.db.query(AccountRecord).filter(
            AccountRecord.member_id == member_id,
            AccountRecord.account_type == account_type,
        )
        if for_update:
            # SQLite ignores FOR UPDATE; PostgreSQL holds the row lock until commit
            query = query.with_for_update()
        return query.first()

    def get_by_id(self, account_id: int) -> Optional[AccountRecord]:
        return self.db.get(AccountRecord, account_id)

    def increment_balance(self, account: AccountRecord, amount: Decimal) -> Decimal:
        """Apply current_balance = current_balance + amount on the row and return the new balance"""
        account.current_balance = AccountRecord.current_balance + amount
        account.updated_at = func.now()
        self.db.flush()
        self.db.refresh(account, ["current_balance", "updated_at"])
        return Decimal(account.current_balance)


class TransactionRepository:
    """Repository for ledger transactions"""

    def __init__(self, db: Session):
        self.db = db

    def create_deposit(
        self,
        account_id: int,
        amount: Decimal,
        transaction_date: date,
        fiscal_year: int,
        description: Optional[str],
        created_by: int,
        receipt_number: Optional[str] = None,
    ) -> TransactionRecord:
        """Insert a completed deposit"""
        row = TransactionRecord(
            account_id=account_id,
            transaction_type=TRANSACTION_TYPE_DEPOSIT,
            amount=amount,
            transaction_date=transaction_date,
            fiscal_year=fiscal_year,
            receipt_number=receipt_number,
            description=description,
            status=STATUS_COMPLETED,
            created_by=created_by,
        )
        self.db.add(row)
        self.db.flush()  # Get ID without committing
        self.db.refresh(row, ["created_at"])
        return row

    def list_completed(self, account_id: int, fiscal_year: int) -> List[TransactionRecord]:
        """Completed transactions for an account in a fiscal year, newest first"""
        return (
            self.db.query(TransactionRecord)
            .filter(
                TransactionRecord.account_id == account_id,
                TransactionRecord.fiscal_year == fiscal_year,
                TransactionRecord.status == STATUS_COMPLETED,
            )
            .order_by(TransactionRecord.transaction_date.desc(), TransactionRecord.transaction_id.desc())
            .all()
        )

    def sum_completed(self, account_id: int) -> Decimal:
        """Sum of every completed transaction on an account, across fiscal years"""
        total = (
            self.db.query(func.coalesce(func.sum(TransactionRecord.amount), 0))
            .filter(
                TransactionRecord.account_id == account_id,
                TransactionRecord.status == STATUS_COMPLETED,
            )
            .scalar()
        )
        return Decimal(total)


class ReceiptRepository:
    """Repository for receipts and their per-cooperative sequence"""

    def __init__(self, db: Session):
        self.db = db

    def next_sequence(self, cooperative_id: int, year: int) -> int:
        """Advance the cooperative's sequence for a year, holding its row lock until commit"""
        sequence = (
            self.db.query(ReceiptSequenceRecord)
            .filter(
                ReceiptSequenceRecord.cooperative_id == cooperative_id,
                ReceiptSequenceRecord.year == year,
            )
            .with_for_update()
            .first()
        )
        if sequence is None:
            sequence = ReceiptSequenceRecord(cooperative_id=cooperative_id, year=year, last_number=0)
            self.db.add(sequence)
            self.db.flush()

        sequence.last_number = ReceiptSequenceRecord.last_number + 1
        self.db.flush()
        self.db.refresh(sequence, ["last_number"])
        return sequence.last_number

    def create_receipt(
        self,
        cooperative_id: int,
        receipt_number: str,
        member_id: int,
        total_amount: Decimal,
        issued_on: date,
        created_by: int,
    ) -> ReceiptRecord:
        row = ReceiptRecord(
            cooperative_id=cooperative_id,
            receipt_number=receipt_number,
            member_id=member_id,
            total_amount=total_amount,
            issued_on=issued_on,
            created_by=created_by,
        )
        self.db.add(row)
        self.db.flush()
        return row


class PeriodRepository:
    """Repository for contribution periods"""

    def __init__(self, db: Session):
        self.db = db

    def get_periods(self, cooperative_id: int, fiscal_year: int) -> List[ContributionPeriodRecord]:
        return (
            self.db.query(ContributionPeriodRecord)
            .filter(
                ContributionPeriodRecord.cooperative_id == cooperative_id,
                ContributionPeriodRecord.fiscal_year == fiscal_year,
            )
            .order_by(ContributionPeriodRecord.tract_number)
            .all()
        )

    def create_period(
        self,
        cooperative_id: int,
        fiscal_year: int,
        tract_number: int,
        start_date: date,
        end_date: date,
        required_amount: Decimal,
    ) -> ContributionPeriodRecord:
        row = ContributionPeriodRecord(
            cooperative_id=cooperative_id,
            fiscal_year=fiscal_year,
            tract_number=tract_number,
            start_date=start_date,
            end_date=end_date,
            required_amount=required_amount,
        )
        self.db.add(row)
        self.db.flush()
        return row


class ReportRepository:
    """Aggregations for cooperative-wide contribution reports"""

    def __init__(self, db: Session):
        self.db = db

    def contributions_by_member(self, cooperative_id: int, fiscal_year: int) -> list:
        """
        Per-member contribution totals for one fiscal year.

        Only active members holding a contributions account are included;
        members with no payments in the year report a zero total.

        Returns:
            Rows of (MemberRecord, account_id, current_balance, total_contributed, payment_count)
            ordered by member name
        """
        total_contributed = func.coalesce(func.sum(TransactionRecord.amount), 0)
        payment_count = func.count(TransactionRecord.transaction_id)

        return (
            self.db.query(
                MemberRecord,
                AccountRecord.account_id,
                AccountRecord.current_balance,
                total_contributed.label("total_contributed"),
                payment_count.label("payment_count"),
            )
            .join(AccountRecord, AccountRecord.member_id == MemberRecord.member_id)
            .outerjoin(
                TransactionRecord,
                and_(
                    TransactionRecord.account_id == AccountRecord.account_id,
                    TransactionRecord.status == STATUS_COMPLETED,
                    TransactionRecord.fiscal_year == fiscal_year,
                ),
            )
            .filter(
                MemberRecord.cooperative_id == cooperative_id,
                MemberRecord.is_active.is_(True),
                AccountRecord.account_type == ACCOUNT_TYPE_CONTRIBUTIONS,
            )
            .group_by(MemberRecord.member_id, AccountRecord.account_id, AccountRecord.current_balance)
            .order_by(MemberRecord.full_name, MemberRecord.member_id)
            .all()
        )
