"""WithdrawalRepository: raw text() SQL.

transition_from_pending only matches 'pending' rows, making approval and
denial one-shot under concurrent admins.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.mt_common.errors import InternalError
from src.mt_withdrawal.domain.models import Withdrawal

_COLUMNS = """
    id, worker_email, worker_name, withdrawal_coin, withdrawal_amount_cents,
    payment_system, account_number, status, requested_at, settled_at
"""

_INSERT_SQL = text(f"""
    INSERT INTO withdrawals
        (id, worker_email, worker_name, withdrawal_coin, withdrawal_amount_cents,
         payment_system, account_number, status)
    VALUES
        (:id, :worker_email, :worker_name, :withdrawal_coin, :withdrawal_amount_cents,
         :payment_system, :account_number, :status)
    RETURNING {_COLUMNS}
""")

_GET_SQL = text(f"SELECT {_COLUMNS} FROM withdrawals WHERE id = :withdrawal_id")

_TRANSITION_SQL = text(f"""
    UPDATE withdrawals
    SET status = :status,
        settled_at = NOW()
    WHERE id = :withdrawal_id AND status = 'pending'
    RETURNING {_COLUMNS}
""")

_LIST_PENDING_SQL = text(f"""
    SELECT {_COLUMNS} FROM withdrawals
    WHERE status = 'pending'
    ORDER BY requested_at ASC, id ASC
""")

_LIST_FOR_WORKER_SQL = text(f"""
    SELECT {_COLUMNS} FROM withdrawals
    WHERE worker_email = :worker_email
    ORDER BY requested_at DESC, id DESC
""")


def _row_to_withdrawal(row: object) -> Withdrawal:
    return Withdrawal(
        id=row.id,  # type: ignore[attr-defined]
        worker_email=row.worker_email,  # type: ignore[attr-defined]
        worker_name=row.worker_name,  # type: ignore[attr-defined]
        withdrawal_coin=row.withdrawal_coin,  # type: ignore[attr-defined]
        withdrawal_amount_cents=row.withdrawal_amount_cents,  # type: ignore[attr-defined]
        payment_system=row.payment_system,  # type: ignore[attr-defined]
        account_number=row.account_number,  # type: ignore[attr-defined]
        status=row.status,  # type: ignore[attr-defined]
        requested_at=row.requested_at,  # type: ignore[attr-defined]
        settled_at=row.settled_at,  # type: ignore[attr-defined]
    )


class WithdrawalRepository:
    async def insert_withdrawal(
        self, db: AsyncSession, withdrawal: Withdrawal
    ) -> Withdrawal:
        result = await db.execute(
            _INSERT_SQL,
            {
                "id": withdrawal.id,
                "worker_email": withdrawal.worker_email,
                "worker_name": withdrawal.worker_name,
                "withdrawal_coin": withdrawal.withdrawal_coin,
                "withdrawal_amount_cents": withdrawal.withdrawal_amount_cents,
                "payment_system": withdrawal.payment_system,
                "account_number": withdrawal.account_number,
                "status": withdrawal.status,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Withdrawal insert returned no rows")
        return _row_to_withdrawal(row)

    async def get_withdrawal(
        self, db: AsyncSession, withdrawal_id: str
    ) -> Withdrawal | None:
        result = await db.execute(_GET_SQL, {"withdrawal_id": withdrawal_id})
        row = result.fetchone()
        return _row_to_withdrawal(row) if row else None

    async def transition_from_pending(
        self, db: AsyncSession, withdrawal_id: str, status: str
    ) -> Withdrawal | None:
        result = await db.execute(
            _TRANSITION_SQL, {"withdrawal_id": withdrawal_id, "status": status}
        )
        row = result.fetchone()
        return _row_to_withdrawal(row) if row else None

    async def list_pending(self, db: AsyncSession) -> list[Withdrawal]:
        result = await db.execute(_LIST_PENDING_SQL)
        return [_row_to_withdrawal(row) for row in result.fetchall()]

    async def list_for_worker(
        self, db: AsyncSession, worker_email: str
    ) -> list[Withdrawal]:
        result = await db.execute(_LIST_FOR_WORKER_SQL, {"worker_email": worker_email})
        return [_row_to_withdrawal(row) for row in result.fetchall()]
