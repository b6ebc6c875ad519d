"""Global enums: must match DB CHECK constraints exactly."""

from enum import Enum


class Role(str, Enum):
    ADMIN = "admin"
    BUYER = "buyer"
    WORKER = "worker"


class SubmissionStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ReviewDecision(str, Enum):
    """Terminal states a buyer may move a pending submission into."""
    APPROVED = "approved"
    REJECTED = "rejected"


class WithdrawalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"


class SettleDecision(str, Enum):
    APPROVED = "approved"
    DENIED = "denied"


class LedgerEntryType(str, Enum):
    # External credits
    SIGNUP_BONUS = "SIGNUP_BONUS"
    PAYMENT = "PAYMENT"
    # Task reservation (buyer side)
    TASK_RESERVE = "TASK_RESERVE"
    TASK_REFUND = "TASK_REFUND"
    # Approved submission (worker side)
    SUBMISSION_PAYOUT = "SUBMISSION_PAYOUT"
    # External debits
    WITHDRAWAL = "WITHDRAWAL"
    ACCOUNT_CLOSURE = "ACCOUNT_CLOSURE"


# Entry types that move coins across the system boundary. Everything else is
# an internal transfer between a balance and a task reservation.
EXTERNAL_CREDIT_TYPES = frozenset({LedgerEntryType.SIGNUP_BONUS, LedgerEntryType.PAYMENT})
EXTERNAL_DEBIT_TYPES = frozenset(
    {LedgerEntryType.WITHDRAWAL, LedgerEntryType.ACCOUNT_CLOSURE}
)
