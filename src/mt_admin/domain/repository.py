"""Repository Protocol for admin read queries."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.mt_admin.domain.models import (
    BalanceDrift,
    BuyerStats,
    LedgerTotals,
    PlatformStats,
    WorkerStats,
)


class AdminRepositoryProtocol(Protocol):
    async def platform_stats(self, db: AsyncSession) -> PlatformStats: ...

    async def buyer_stats(self, db: AsyncSession, buyer_email: str) -> BuyerStats: ...

    async def worker_stats(self, db: AsyncSession, worker_email: str) -> WorkerStats: ...

    async def ledger_totals(self, db: AsyncSession) -> LedgerTotals: ...

    async def balance_drift(self, db: AsyncSession) -> list[BalanceDrift]:
        """Users whose coins differ from the sum of their ledger entries."""
        ...

    async def count_negative_balances(self, db: AsyncSession) -> int: ...
