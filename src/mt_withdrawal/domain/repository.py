"""Repository Protocol for withdrawals."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.mt_withdrawal.domain.models import Withdrawal


class WithdrawalRepositoryProtocol(Protocol):
    async def insert_withdrawal(
        self, db: AsyncSession, withdrawal: Withdrawal
    ) -> Withdrawal: ...

    async def get_withdrawal(
        self, db: AsyncSession, withdrawal_id: str
    ) -> Withdrawal | None: ...

    async def transition_from_pending(
        self, db: AsyncSession, withdrawal_id: str, status: str
    ) -> Withdrawal | None: ...

    async def list_pending(self, db: AsyncSession) -> list[Withdrawal]: ...

    async def list_for_worker(
        self, db: AsyncSession, worker_email: str
    ) -> list[Withdrawal]: ...
