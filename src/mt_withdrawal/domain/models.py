"""Domain models for mt_withdrawal: pure dataclasses."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Withdrawal:
    id: str
    worker_email: str
    worker_name: str
    withdrawal_coin: int
    withdrawal_amount_cents: int  # payout in real money, fixed at request time
    payment_system: str
    account_number: str
    status: str                  # WithdrawalStatus value
    requested_at: datetime | None = None
    settled_at: datetime | None = None
