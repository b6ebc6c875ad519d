"""PaymentRepository: raw text() SQL.

The unique index on transaction_id is the idempotency key; inserts use
ON CONFLICT DO NOTHING so a replayed gateway callback is detected without
raising inside the transaction.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.mt_payment.domain.models import Payment

_COLUMNS = "id, buyer_email, coins, price_cents, transaction_id, created_at"

_INSERT_SQL = text(f"""
    INSERT INTO payments (id, buyer_email, coins, price_cents, transaction_id)
    VALUES (:id, :buyer_email, :coins, :price_cents, :transaction_id)
    ON CONFLICT (transaction_id) DO NOTHING
    RETURNING {_COLUMNS}
""")

_GET_BY_TXN_SQL = text(
    f"SELECT {_COLUMNS} FROM payments WHERE transaction_id = :transaction_id"
)

_LIST_FOR_BUYER_SQL = text(f"""
    SELECT {_COLUMNS} FROM payments
    WHERE buyer_email = :buyer_email
    ORDER BY created_at DESC, id DESC
""")


def _row_to_payment(row: object) -> Payment:
    return Payment(
        id=row.id,  # type: ignore[attr-defined]
        buyer_email=row.buyer_email,  # type: ignore[attr-defined]
        coins=row.coins,  # type: ignore[attr-defined]
        price_cents=row.price_cents,  # type: ignore[attr-defined]
        transaction_id=row.transaction_id,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class PaymentRepository:
    async def insert_if_absent(
        self, db: AsyncSession, payment: Payment
    ) -> Payment | None:
        result = await db.execute(
            _INSERT_SQL,
            {
                "id": payment.id,
                "buyer_email": payment.buyer_email,
                "coins": payment.coins,
                "price_cents": payment.price_cents,
                "transaction_id": payment.transaction_id,
            },
        )
        row = result.fetchone()
        return _row_to_payment(row) if row else None

    async def get_by_transaction_id(
        self, db: AsyncSession, transaction_id: str
    ) -> Payment | None:
        result = await db.execute(_GET_BY_TXN_SQL, {"transaction_id": transaction_id})
        row = result.fetchone()
        return _row_to_payment(row) if row else None

    async def list_for_buyer(
        self, db: AsyncSession, buyer_email: str
    ) -> list[Payment]:
        result = await db.execute(_LIST_FOR_BUYER_SQL, {"buyer_email": buyer_email})
        return [_row_to_payment(row) for row in result.fetchall()]
