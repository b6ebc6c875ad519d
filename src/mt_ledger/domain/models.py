"""Domain models for mt_ledger: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class LedgerEntry:
    id: int                          # BIGSERIAL
    user_email: str
    entry_type: str                  # LedgerEntryType value
    amount: int                      # coins, positive=credit negative=debit
    balance_after: int               # coins, balance snapshot after the adjustment
    reference_type: str | None = None
    reference_id: str | None = None
    description: str | None = None
    created_at: datetime | None = None
