"""Integration tests for ledger primitives"""

import pytest
from datetime import date
from decimal import Decimal
from sqlalchemy.exc import IntegrityError
from coop_ledger.domain.exceptions import AccountNotFoundError, ValidationError
from coop_ledger.infrastructure.database.models import ReceiptRecord
from coop_ledger.services.ledger import AccountLedger


def test_get_account_not_found(db, make_member):
    member = make_member(with_account=False)

    with pytest.raises(AccountNotFoundError):
        AccountLedger(db).get_account(member.member_id)


def test_append_transaction_updates_balance(db, make_member):
    member = make_member()
    ledger = AccountLedger(db)
    account = ledger.get_account(member.member_id)

    transaction, new_balance = ledger.append_transaction(
        account_id=account.account_id,
        amount=Decimal("150.50"),
        transaction_date=date(2025, 11, 15),
        fiscal_year=2025,
        description="Deposit",
        created_by=7,
    )
    db.commit()

    assert transaction.status == "completed"
    assert transaction.transaction_type == "deposit"
    assert transaction.amount == Decimal("150.50")
    assert new_balance == Decimal("150.50")
    assert ledger.get_account(member.member_id).current_balance == Decimal("150.50")


@pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-10.00")])
def test_append_transaction_rejects_non_positive_amount(db, make_member, amount):
    member = make_member()
    ledger = AccountLedger(db)
    account = ledger.get_account(member.member_id)

    with pytest.raises(ValidationError):
        ledger.append_transaction(account.account_id, amount, date(2025, 11, 15), 2025, None, 7)


def test_list_transactions_newest_first_and_scoped_to_year(db, make_member):
    member = make_member()
    ledger = AccountLedger(db)
    account_id = ledger.get_account(member.member_id).account_id

    ledger.append_transaction(account_id, Decimal("100"), date(2025, 11, 1), 2025, "first", 7)
    ledger.append_transaction(account_id, Decimal("100"), date(2026, 2, 1), 2025, "second", 7)
    ledger.append_transaction(account_id, Decimal("100"), date(2024, 11, 1), 2024, "older year", 7)
    db.commit()

    transactions = ledger.list_transactions(account_id, 2025)

    assert [t.description for t in transactions] == ["second", "first"]


def test_receipt_numbers_are_sequential_per_year(db, make_member):
    member = make_member()
    other = make_member(cooperative_id=2)
    ledger = AccountLedger(db)

    issued = [
        ledger.issue_receipt(1, member.member_id, Decimal("300.00"), date(2025, 11, 15), 7),
        ledger.issue_receipt(1, member.member_id, Decimal("600.00"), date(2025, 12, 1), 7),
        ledger.issue_receipt(1, member.member_id, Decimal("300.00"), date(2026, 1, 5), 7),
        ledger.issue_receipt(2, other.member_id, Decimal("300.00"), date(2025, 12, 1), 7),
        ledger.issue_receipt(1, member.member_id, Decimal("300.00"), date(2025, 12, 20), 7),
    ]
    db.commit()

    assert issued == ["2025-0001", "2025-0002", "2026-0001", "2025-0001", "2025-0003"]
    assert db.query(ReceiptRecord).count() == 5


def test_receipt_number_is_unique_per_cooperative(db, make_member):
    member = make_member()
    ledger = AccountLedger(db)
    ledger.issue_receipt(1, member.member_id, Decimal("300.00"), date(2025, 11, 15), 7)
    db.commit()

    db.add(
        ReceiptRecord(
            cooperative_id=1,
            receipt_number="2025-0001",
            member_id=member.member_id,
            total_amount=Decimal("300.00"),
            issued_on=date(2025, 11, 15),
            created_by=7,
        )
    )
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()

    assert [r.receipt_number for r in db.query(ReceiptRecord).all()] == ["2025-0001"]


def test_recomputed_balance_matches_cached_balance(db, make_member):
    member = make_member()
    ledger = AccountLedger(db)
    account_id = ledger.get_account(member.member_id).account_id

    for amount in ("300.00", "125.25", "74.75"):
        ledger.append_transaction(account_id, Decimal(amount), date(2025, 11, 15), 2025, None, 7)
    db.commit()

    assert ledger.recomputed_balance(account_id) == Decimal("500.00")
    assert ledger.get_account(member.member_id).current_balance == Decimal("500.00")
