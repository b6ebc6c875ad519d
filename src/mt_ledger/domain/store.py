"""LedgerStore: the single authority over coin balances.

Every component that moves coins (tasks, submissions, withdrawals, payments,
sign-up) calls `adjust`; nothing else writes users.coins. The store never
commits: it runs inside the caller's transaction, so a failure later in the
same operation rolls the adjustment and its ledger entry back together.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.mt_common.enums import LedgerEntryType
from src.mt_common.errors import InsufficientFundsError, UserNotFoundError
from src.mt_ledger.domain.repository import LedgerRepositoryProtocol
from src.mt_ledger.infrastructure.persistence import LedgerRepository

logger = logging.getLogger(__name__)


class LedgerStore:
    def __init__(self, repo: LedgerRepositoryProtocol | None = None) -> None:
        self._repo: LedgerRepositoryProtocol = repo or LedgerRepository()

    async def adjust(
        self,
        db: AsyncSession,
        email: str,
        delta: int,
        entry_type: LedgerEntryType,
        reference_type: str | None = None,
        reference_id: str | None = None,
        description: str | None = None,
    ) -> int:
        """Apply a signed coin delta and record it. Returns the new balance.

        Raises:
            UserNotFoundError: no user with this email.
            InsufficientFundsError: the balance would go negative. Nothing
                is written in that case.
        """
        if delta == 0:
            raise ValueError("Ledger adjustments must be non-zero")

        new_balance = await self._repo.apply_delta(db, email, delta)
        if new_balance is None:
            available = await self._repo.get_balance(db, email)
            if available is None:
                raise UserNotFoundError(email)
            raise InsufficientFundsError(required=-delta, available=available)

        await self._repo.insert_entry(
            db,
            email,
            entry_type.value,
            delta,
            new_balance,
            reference_type,
            reference_id,
            description,
        )
        logger.debug(
            "ledger %s %s %+d -> %d (%s:%s)",
            entry_type.value, email, delta, new_balance, reference_type, reference_id,
        )
        return new_balance

    async def read(self, db: AsyncSession, email: str) -> int:
        balance = await self._repo.get_balance(db, email)
        if balance is None:
            raise UserNotFoundError(email)
        return balance
