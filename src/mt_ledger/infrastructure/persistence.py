"""LedgerRepository: concrete implementation of LedgerRepositoryProtocol.

The balance lives in users.coins. The only write path is a single
conditional UPDATE ... RETURNING whose WHERE clause carries the bounds check,
so concurrent adjustments on one user serialize on the row lock and none can
drive the balance negative. A result of 0 rows means the user is unknown or
the check failed; the caller distinguishes the two.

Transaction ownership: the CALLER (application service) commits or rolls back.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.mt_common.errors import InternalError
from src.mt_ledger.domain.models import LedgerEntry

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_APPLY_DELTA_SQL = text("""
    UPDATE users
    SET coins = coins + :delta,
        updated_at = NOW()
    WHERE email = :email AND coins + :delta >= 0
    RETURNING coins
""")

_GET_BALANCE_SQL = text("""
    SELECT coins FROM users WHERE email = :email
""")

_INSERT_LEDGER_SQL = text("""
    INSERT INTO ledger_entries
        (user_email, entry_type, amount, balance_after,
         reference_type, reference_id, description)
    VALUES
        (:user_email, :entry_type, :amount, :balance_after,
         :reference_type, :reference_id, :description)
    RETURNING id, user_email, entry_type, amount, balance_after,
              reference_type, reference_id, description, created_at
""")

_LIST_LEDGER_SQL = text("""
    SELECT id, user_email, entry_type, amount, balance_after,
           reference_type, reference_id, description, created_at
    FROM ledger_entries
    WHERE user_email = :user_email
      AND (CAST(:cursor_id AS BIGINT) IS NULL OR id < CAST(:cursor_id AS BIGINT))
      AND (CAST(:entry_type AS TEXT) IS NULL OR entry_type = CAST(:entry_type AS TEXT))
    ORDER BY id DESC
    LIMIT :limit
""")


def _row_to_ledger(row: object) -> LedgerEntry:
    return LedgerEntry(
        id=row.id,  # type: ignore[attr-defined]
        user_email=row.user_email,  # type: ignore[attr-defined]
        entry_type=row.entry_type,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        balance_after=row.balance_after,  # type: ignore[attr-defined]
        reference_type=row.reference_type,  # type: ignore[attr-defined]
        reference_id=row.reference_id,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class LedgerRepository:
    """Concrete repository: all balance writes atomic at the SQL level."""

    async def apply_delta(
        self, db: AsyncSession, email: str, delta: int
    ) -> int | None:
        result = await db.execute(_APPLY_DELTA_SQL, {"email": email, "delta": delta})
        row = result.fetchone()
        return int(row.coins) if row else None

    async def get_balance(self, db: AsyncSession, email: str) -> int | None:
        result = await db.execute(_GET_BALANCE_SQL, {"email": email})
        row = result.fetchone()
        return int(row.coins) if row else None

    async def insert_entry(
        self,
        db: AsyncSession,
        email: str,
        entry_type: str,
        amount: int,
        balance_after: int,
        reference_type: str | None,
        reference_id: str | None,
        description: str | None,
    ) -> LedgerEntry:
        result = await db.execute(
            _INSERT_LEDGER_SQL,
            {
                "user_email": email,
                "entry_type": entry_type,
                "amount": amount,
                "balance_after": balance_after,
                "reference_type": reference_type,
                "reference_id": reference_id,
                "description": description,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Ledger insert returned no rows")
        return _row_to_ledger(row)

    async def list_entries(
        self,
        db: AsyncSession,
        email: str,
        cursor_id: int | None,
        limit: int,
        entry_type: str | None,
    ) -> list[LedgerEntry]:
        result = await db.execute(
            _LIST_LEDGER_SQL,
            {
                "user_email": email,
                "cursor_id": cursor_id,
                "entry_type": entry_type,
                "limit": limit,
            },
        )
        return [_row_to_ledger(row) for row in result.fetchall()]
