"""LedgerApplicationService: read side of the ledger.

Balance writes never enter through here; they happen inside other services'
transactions via LedgerStore.adjust.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.mt_ledger.application.schemas import (
    BalanceResponse,
    LedgerEntryItem,
    LedgerResponse,
    cursor_decode,
    cursor_encode,
)
from src.mt_ledger.domain.repository import LedgerRepositoryProtocol
from src.mt_ledger.domain.store import LedgerStore
from src.mt_ledger.infrastructure.persistence import LedgerRepository


class LedgerApplicationService:
    def __init__(self, repo: LedgerRepositoryProtocol | None = None) -> None:
        self._repo: LedgerRepositoryProtocol = repo or LedgerRepository()
        self._store = LedgerStore(self._repo)

    async def get_balance(self, db: AsyncSession, email: str) -> BalanceResponse:
        coins = await self._store.read(db, email)
        return BalanceResponse(email=email, coins=coins)

    async def list_ledger(
        self,
        db: AsyncSession,
        email: str,
        cursor: str | None,
        limit: int,
        entry_type: str | None,
    ) -> LedgerResponse:
        cursor_id = cursor_decode(cursor)
        # Fetch limit+1 to detect has_more without a COUNT(*) query
        entries = await self._repo.list_entries(db, email, cursor_id, limit + 1, entry_type)
        has_more = len(entries) > limit
        page = entries[:limit]

        next_cursor = cursor_encode(page[-1].id) if has_more and page else None
        return LedgerResponse(
            items=[LedgerEntryItem.from_domain(e) for e in page],
            next_cursor=next_cursor,
            has_more=has_more,
        )
