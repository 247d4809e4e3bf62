"""Account ledger: append-only transactions with a materialized running balance"""

import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from coop_ledger.domain.exceptions import AccountNotFoundError, ValidationError
from coop_ledger.domain.models import ACCOUNT_TYPE_CONTRIBUTIONS, Account, LedgerTransaction
from coop_ledger.domain.tracts import to_money
from coop_ledger.infrastructure.database.repositories import (
    AccountRepository,
    ReceiptRepository,
    TransactionRepository,
    account_from_record,
    transaction_from_record,
)

logger = logging.getLogger(__name__)


class AccountLedger:
    """
    Ledger primitives bound to one session.

    Nothing here commits: every call joins the session's open transaction, so
    the caller's unit of work decides whether the writes become visible.
    append_transaction is the only operation that changes a balance.
    """

    def __init__(self, db: Session):
        self.db = db
        self.accounts = AccountRepository(db)
        self.transactions = TransactionRepository(db)
        self.receipts = ReceiptRepository(db)

    def get_account(
        self,
        member_id: int,
        account_type: str = ACCOUNT_TYPE_CONTRIBUTIONS,
        for_update: bool = False,
    ) -> Account:
        """
        Fetch a member's account.

        Raises:
            AccountNotFoundError: The member has no account of this type
        """
        row = self.accounts.get_by_member(member_id, account_type, for_update=for_update)
        if row is None:
            raise AccountNotFoundError()
        return account_from_record(row)

    def append_transaction(
        self,
        account_id: int,
        amount: Decimal,
        transaction_date: date,
        fiscal_year: int,
        description: Optional[str],
        created_by: int,
        receipt_number: Optional[str] = None,
    ) -> Tuple[LedgerTransaction, Decimal]:
        """
        Post a completed deposit and bump the account balance by the same amount.

        Returns:
            The inserted transaction and the account's new balance
        """
        amount = to_money(amount)
        if amount <= 0:
            raise ValidationError("Amount must be greater than zero")

        account = self.accounts.get_by_id(account_id)
        if account is None:
            raise AccountNotFoundError()

        row = self.transactions.create_deposit(
            account_id=account_id,
            amount=amount,
            transaction_date=transaction_date,
            fiscal_year=fiscal_year,
            description=description,
            created_by=created_by,
            receipt_number=receipt_number,
        )
        new_balance = to_money(self.accounts.increment_balance(account, amount))

        logger.debug(
            "Ledger entry appended",
            extra={"account_id": account_id, "transaction_id": row.transaction_id, "amount": str(amount)},
        )
        return transaction_from_record(row), new_balance

    def list_transactions(self, account_id: int, fiscal_year: int) -> List[LedgerTransaction]:
        """Completed transactions of a fiscal year, most recent transaction date first"""
        return [transaction_from_record(row) for row in self.transactions.list_completed(account_id, fiscal_year)]

    def recomputed_balance(self, account_id: int) -> Decimal:
        """Balance rebuilt from the transaction log, for reconciling against the cached balance"""
        return to_money(self.transactions.sum_completed(account_id))

    def issue_receipt(
        self,
        cooperative_id: int,
        member_id: int,
        total_amount: Decimal,
        on_date: date,
        created_by: int,
    ) -> str:
        """
        Issue the cooperative's next receipt, formatted YYYY-NNNN.

        The sequence row stays locked until the caller's transaction ends, so
        concurrent registrations in one cooperative draw distinct numbers.
        """
        sequence = self.receipts.next_sequence(cooperative_id, on_date.year)
        receipt_number = f"{on_date.year}-{sequence:04d}"
        self.receipts.create_receipt(
            cooperative_id=cooperative_id,
            receipt_number=receipt_number,
            member_id=member_id,
            total_amount=to_money(total_amount),
            issued_on=on_date,
            created_by=created_by,
        )
        return receipt_number
