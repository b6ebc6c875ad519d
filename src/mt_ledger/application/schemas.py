"""Pydantic schemas and cursor utilities for mt_ledger API."""

import base64
import json

from pydantic import BaseModel

from src.mt_common.datetime_utils import to_iso
from src.mt_ledger.domain.models import LedgerEntry

# ---------------------------------------------------------------------------
# Cursor-based pagination utilities
# ---------------------------------------------------------------------------


def cursor_encode(last_id: int) -> str:
    """Encode a BIGINT primary key into an opaque Base64 cursor string."""
    payload = json.dumps({"id": last_id})
    return base64.b64encode(payload.encode()).decode()


def cursor_decode(cursor: str | None) -> int | None:
    """Decode a cursor string back to the last seen id. Returns None on error."""
    if cursor is None:
        return None
    try:
        payload = json.loads(base64.b64decode(cursor.encode()).decode())
        return int(payload["id"])
    except (ValueError, KeyError, TypeError):
        return None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BalanceResponse(BaseModel):
    email: str
    coins: int


class LedgerEntryItem(BaseModel):
    id: int
    entry_type: str
    amount: int
    balance_after: int
    reference_type: str | None
    reference_id: str | None
    description: str | None
    created_at: str | None

    @classmethod
    def from_domain(cls, entry: LedgerEntry) -> "LedgerEntryItem":
        return cls(
            id=entry.id,
            entry_type=entry.entry_type,
            amount=entry.amount,
            balance_after=entry.balance_after,
            reference_type=entry.reference_type,
            reference_id=entry.reference_id,
            description=entry.description,
            created_at=to_iso(entry.created_at),
        )


class LedgerResponse(BaseModel):
    items: list[LedgerEntryItem]
    next_cursor: str | None
    has_more: bool
