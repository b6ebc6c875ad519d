"""WithdrawalApplicationService: worker payout requests and admin settlement.

No coins are held when a withdrawal is requested; the balance is checked
atomically when an admin approves. If the debit fails the whole settlement
transaction rolls back and the withdrawal stays pending.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.mt_common.enums import LedgerEntryType, SettleDecision, WithdrawalStatus
from src.mt_common.errors import WithdrawalAlreadySettledError, WithdrawalNotFoundError
from src.mt_common.id_generator import generate_id
from src.mt_ledger.domain.store import LedgerStore
from src.mt_notification.domain.sink import WORKER_HOME, NotificationSink
from src.mt_withdrawal.application.schemas import (
    SettleWithdrawalResponse,
    WithdrawalRequest,
    WithdrawalResponse,
)
from src.mt_withdrawal.domain.models import Withdrawal
from src.mt_withdrawal.domain.repository import WithdrawalRepositoryProtocol
from src.mt_withdrawal.infrastructure.persistence import WithdrawalRepository

logger = logging.getLogger(__name__)


def payout_cents(coins: int) -> int:
    """Real-money value of a coin amount, rounded down to the cent."""
    return coins * 100 // settings.COINS_PER_DOLLAR


class WithdrawalApplicationService:
    def __init__(
        self,
        repo: WithdrawalRepositoryProtocol | None = None,
        ledger: LedgerStore | None = None,
        notifier: NotificationSink | None = None,
    ) -> None:
        self._repo: WithdrawalRepositoryProtocol = repo or WithdrawalRepository()
        self._ledger = ledger or LedgerStore()
        self._notifier = notifier or NotificationSink()

    async def request_withdrawal(
        self,
        db: AsyncSession,
        worker_email: str,
        worker_name: str,
        req: WithdrawalRequest,
    ) -> WithdrawalResponse:
        try:
            withdrawal = await self._repo.insert_withdrawal(
                db,
                Withdrawal(
                    id=generate_id("wd"),
                    worker_email=worker_email,
                    worker_name=worker_name,
                    withdrawal_coin=req.withdrawal_coin,
                    withdrawal_amount_cents=payout_cents(req.withdrawal_coin),
                    payment_system=req.payment_system,
                    account_number=req.account_number,
                    status=WithdrawalStatus.PENDING.value,
                ),
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Withdrawal %s requested by %s for %d coins",
            withdrawal.id, worker_email, req.withdrawal_coin,
        )
        return WithdrawalResponse.from_domain(withdrawal)

    async def settle(
        self,
        db: AsyncSession,
        withdrawal_id: str,
        decision: SettleDecision,
        approver_email: str,
    ) -> SettleWithdrawalResponse:
        worker_balance: int | None = None
        try:
            settled = await self._repo.transition_from_pending(
                db, withdrawal_id, decision.value
            )
            if settled is None:
                current = await self._repo.get_withdrawal(db, withdrawal_id)
                if current is None:
                    raise WithdrawalNotFoundError(withdrawal_id)
                raise WithdrawalAlreadySettledError(withdrawal_id, current.status)

            if decision is SettleDecision.APPROVED:
                worker_balance = await self._ledger.adjust(
                    db,
                    settled.worker_email,
                    -settled.withdrawal_coin,
                    LedgerEntryType.WITHDRAWAL,
                    reference_type="WITHDRAWAL",
                    reference_id=settled.id,
                    description=f"Payout via {settled.payment_system}",
                )
                message = (
                    f"Admin approved your withdrawal request of "
                    f"{settled.withdrawal_coin} coins"
                )
            else:
                message = (
                    f"Admin denied your withdrawal request of "
                    f"{settled.withdrawal_coin} coins"
                )

            await self._notifier.emit(db, settled.worker_email, message, WORKER_HOME)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info("Withdrawal %s %s by %s", withdrawal_id, decision.value, approver_email)
        return SettleWithdrawalResponse(
            withdrawal=WithdrawalResponse.from_domain(settled),
            worker_balance=worker_balance,
        )

    async def list_pending(self, db: AsyncSession) -> list[WithdrawalResponse]:
        rows = await self._repo.list_pending(db)
        return [WithdrawalResponse.from_domain(w) for w in rows]

    async def list_for_worker(
        self, db: AsyncSession, worker_email: str
    ) -> list[WithdrawalResponse]:
        rows = await self._repo.list_for_worker(db, worker_email)
        return [WithdrawalResponse.from_domain(w) for w in rows]
