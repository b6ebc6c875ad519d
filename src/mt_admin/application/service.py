"""Admin application service: dashboards and ledger verification."""

from dataclasses import asdict
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from src.mt_admin.domain.invariants import (
    check_balance_drift,
    check_conservation,
    check_non_negative,
)
from src.mt_admin.domain.repository import AdminRepositoryProtocol
from src.mt_admin.infrastructure.persistence import AdminRepository


class AdminService:
    def __init__(self, repo: AdminRepositoryProtocol | None = None) -> None:
        self._repo: AdminRepositoryProtocol = repo or AdminRepository()

    async def platform_stats(self, db: AsyncSession) -> dict[str, Any]:
        return asdict(await self._repo.platform_stats(db))

    async def buyer_stats(self, db: AsyncSession, buyer_email: str) -> dict[str, Any]:
        return asdict(await self._repo.buyer_stats(db, buyer_email))

    async def worker_stats(self, db: AsyncSession, worker_email: str) -> dict[str, Any]:
        return asdict(await self._repo.worker_stats(db, worker_email))

    async def verify_ledger(self, db: AsyncSession) -> dict[str, object]:
        """Run the per-user, non-negative and conservation checks."""
        totals = await self._repo.ledger_totals(db)
        violations: list[str] = []
        violations.extend(check_non_negative(await self._repo.count_negative_balances(db)))
        violations.extend(check_balance_drift(await self._repo.balance_drift(db)))
        violations.extend(check_conservation(totals))
        return {"ok": len(violations) == 0, "violations": violations, "totals": asdict(totals)}
