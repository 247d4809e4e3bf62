"""Domain-specific exceptions"""

from enum import Enum


class ErrorKind(str, Enum):
    """Machine-readable failure kinds surfaced to callers"""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"
    MEMBER_NOT_FOUND = "MEMBER_NOT_FOUND"
    ACCOUNT_NOT_FOUND = "ACCOUNT_NOT_FOUND"
    PERIOD_NOT_FOUND = "PERIOD_NOT_FOUND"
    MEMBER_INACTIVE = "MEMBER_INACTIVE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class LedgerError(DomainException):
    """Operational error carrying a kind and a caller-facing message"""

    kind: ErrorKind = ErrorKind.INTERNAL_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(LedgerError):
    """Caller input is malformed or out of range"""

    kind = ErrorKind.VALIDATION_ERROR
    default_message = "Invalid input"


class DuplicateEntryError(LedgerError):
    """Periods already exist for the requested fiscal year"""

    kind = ErrorKind.DUPLICATE_ENTRY
    default_message = "Contribution periods already exist for this fiscal year"


class MemberNotFoundError(LedgerError):
    kind = ErrorKind.MEMBER_NOT_FOUND
    default_message = "Member not found"


class AccountNotFoundError(LedgerError):
    kind = ErrorKind.ACCOUNT_NOT_FOUND
    default_message = "Contributions account not found for this member"


class PeriodNotFoundError(LedgerError):
    kind = ErrorKind.PERIOD_NOT_FOUND
    default_message = "Contribution period not found for this tract"


class MemberInactiveError(LedgerError):
    """Deactivated members cannot transact"""

    kind = ErrorKind.MEMBER_INACTIVE
    default_message = "Member is inactive"


class InternalError(LedgerError):
    """Persistence or unexpected failure; the cause is logged, never exposed"""

    kind = ErrorKind.INTERNAL_ERROR
