"""SQLAlchemy ORM models for the contribution ledger"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()

Money = Numeric(12, 2)


class MemberRecord(Base):
    """Cooperative member; owned by the member registry, read-only here"""

    __tablename__ = "members"

    member_id = Column(Integer, primary_key=True, autoincrement=True)
    cooperative_id = Column(Integer, nullable=False, index=True)
    full_name = Column(String(100), nullable=False)
    identification = Column(String(20), nullable=False, unique=True)
    member_code = Column(String(20), nullable=True, unique=True)
    quality_name = Column(String(50), nullable=True)
    level_name = Column(String(50), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    accounts = relationship("AccountRecord", back_populates="member")


class AccountRecord(Base):
    """Per-member balance ledger; current_balance caches the sum of completed transactions"""

    __tablename__ = "accounts"
    __table_args__ = (
        UniqueConstraint("member_id", "account_type", name="unique_member_account_type"),
        CheckConstraint("current_balance >= 0", name="chk_balance_non_negative"),
    )

    account_id = Column(Integer, primary_key=True, autoincrement=True)
    member_id = Column(Integer, ForeignKey("members.member_id", ondelete="RESTRICT"), nullable=False)
    cooperative_id = Column(Integer, nullable=False)
    account_type = Column(String(20), nullable=False)
    current_balance = Column(Money, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    member = relationship("MemberRecord", back_populates="accounts")
    transactions = relationship("TransactionRecord", back_populates="account")


class TransactionRecord(Base):
    """Append-only ledger entry"""

    __tablename__ = "transactions"
    __table_args__ = (CheckConstraint("amount > 0", name="chk_amount_positive"),)

    transaction_id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(Integer, ForeignKey("accounts.account_id", ondelete="RESTRICT"), nullable=False, index=True)
    transaction_type = Column(String(30), nullable=False, default="deposit")
    amount = Column(Money, nullable=False)
    transaction_date = Column(Date, nullable=False)
    fiscal_year = Column(Integer, nullable=False, index=True)
    receipt_number = Column(String(50), nullable=True, index=True)
    description = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="completed")
    created_by = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    account = relationship("AccountRecord", back_populates="transactions")


class ReceiptRecord(Base):
    """One receipt per registration; every tract posting of a payment shares it"""

    __tablename__ = "receipts"
    __table_args__ = (
        UniqueConstraint("cooperative_id", "receipt_number", name="unique_cooperative_receipt"),
        CheckConstraint("total_amount > 0", name="chk_receipt_amount_positive"),
    )

    receipt_id = Column(Integer, primary_key=True, autoincrement=True)
    cooperative_id = Column(Integer, nullable=False)
    receipt_number = Column(String(50), nullable=False)
    member_id = Column(Integer, ForeignKey("members.member_id", ondelete="RESTRICT"), nullable=False)
    total_amount = Column(Money, nullable=False)
    issued_on = Column(Date, nullable=False)
    created_by = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class ReceiptSequenceRecord(Base):
    """Last receipt sequence issued per cooperative and calendar year"""

    __tablename__ = "receipt_sequences"

    cooperative_id = Column(Integer, primary_key=True)
    year = Column(Integer, primary_key=True)
    last_number = Column(Integer, nullable=False, default=0)


class ContributionPeriodRecord(Base):
    """One tract's date window and required amount within a fiscal year"""

    __tablename__ = "contribution_periods"
    __table_args__ = (
        UniqueConstraint("cooperative_id", "fiscal_year", "tract_number", name="unique_fiscal_year_tract"),
        CheckConstraint("end_date > start_date", name="chk_date_range"),
        CheckConstraint("required_amount > 0", name="chk_required_amount_positive"),
    )

    period_id = Column(Integer, primary_key=True, autoincrement=True)
    cooperative_id = Column(Integer, nullable=False)
    fiscal_year = Column(Integer, nullable=False)
    tract_number = Column(Integer, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    required_amount = Column(Money, nullable=False, default=300)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
