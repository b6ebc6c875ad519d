"""Repository Protocol: dependency inversion for testability.

Unit tests inject a mock or in-memory fake that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.mt_ledger.domain.models import LedgerEntry


class LedgerRepositoryProtocol(Protocol):
    async def apply_delta(
        self, db: AsyncSession, email: str, delta: int
    ) -> int | None:
        """Add `delta` to the balance iff the result stays >= 0.

        Returns the new balance, or None when no row matched (unknown user
        or the bounds check failed).
        """
        ...

    async def get_balance(self, db: AsyncSession, email: str) -> int | None: ...

    async def insert_entry(
        self,
        db: AsyncSession,
        email: str,
        entry_type: str,
        amount: int,
        balance_after: int,
        reference_type: str | None,
        reference_id: str | None,
        description: str | None,
    ) -> LedgerEntry: ...

    async def list_entries(
        self,
        db: AsyncSession,
        email: str,
        cursor_id: int | None,
        limit: int,
        entry_type: str | None,
    ) -> list[LedgerEntry]: ...
