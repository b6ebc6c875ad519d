"""PaymentApplicationService: records coin purchases and credits the buyer.

The gateway itself is out of scope: a payment arrives as an already-settled
purchase carrying the gateway's transaction id. Replaying the same purchase
returns the original record without crediting twice; reusing a transaction
id for a different purchase is rejected.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.mt_common.enums import LedgerEntryType
from src.mt_common.errors import DuplicatePaymentError, InternalError
from src.mt_common.id_generator import generate_id
from src.mt_ledger.domain.store import LedgerStore
from src.mt_payment.application.schemas import (
    PaymentResponse,
    RecordPaymentRequest,
    RecordPaymentResponse,
)
from src.mt_payment.domain.models import Payment
from src.mt_payment.domain.repository import PaymentRepositoryProtocol
from src.mt_payment.infrastructure.persistence import PaymentRepository

logger = logging.getLogger(__name__)


class PaymentApplicationService:
    def __init__(
        self,
        repo: PaymentRepositoryProtocol | None = None,
        ledger: LedgerStore | None = None,
    ) -> None:
        self._repo: PaymentRepositoryProtocol = repo or PaymentRepository()
        self._ledger = ledger or LedgerStore()

    async def record_payment(
        self, db: AsyncSession, buyer_email: str, req: RecordPaymentRequest
    ) -> RecordPaymentResponse:
        candidate = Payment(
            id=generate_id("pay"),
            buyer_email=buyer_email,
            coins=req.coins,
            price_cents=req.price_cents,
            transaction_id=req.transaction_id,
        )
        try:
            payment = await self._repo.insert_if_absent(db, candidate)
            if payment is None:
                existing = await self._repo.get_by_transaction_id(db, req.transaction_id)
                if existing is None:
                    raise InternalError("Payment conflict without an existing row")
                if not existing.same_purchase(candidate):
                    raise DuplicatePaymentError(req.transaction_id)
                balance = await self._ledger.read(db, buyer_email)
                await db.commit()
                logger.info("Payment %s replayed for %s", req.transaction_id, buyer_email)
                return RecordPaymentResponse(
                    payment=PaymentResponse.from_domain(existing),
                    buyer_balance=balance,
                    replayed=True,
                )

            balance = await self._ledger.adjust(
                db,
                buyer_email,
                payment.coins,
                LedgerEntryType.PAYMENT,
                reference_type="PAYMENT",
                reference_id=payment.id,
                description=f"Coin purchase {payment.transaction_id}",
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info("Payment %s credited %d coins to %s", payment.id, payment.coins, buyer_email)
        return RecordPaymentResponse(
            payment=PaymentResponse.from_domain(payment),
            buyer_balance=balance,
        )

    async def list_for_buyer(
        self, db: AsyncSession, buyer_email: str
    ) -> list[PaymentResponse]:
        rows = await self._repo.list_for_buyer(db, buyer_email)
        return [PaymentResponse.from_domain(p) for p in rows]
