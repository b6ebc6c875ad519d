"""Repository Protocol for coin purchase records."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.mt_payment.domain.models import Payment


class PaymentRepositoryProtocol(Protocol):
    async def insert_if_absent(
        self, db: AsyncSession, payment: Payment
    ) -> Payment | None:
        """Insert unless the transaction id is already recorded. None on conflict."""
        ...

    async def get_by_transaction_id(
        self, db: AsyncSession, transaction_id: str
    ) -> Payment | None: ...

    async def list_for_buyer(
        self, db: AsyncSession, buyer_email: str
    ) -> list[Payment]: ...
