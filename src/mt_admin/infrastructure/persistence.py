"""AdminRepository: aggregate read queries, raw text() SQL."""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.mt_admin.domain.models import (
    BalanceDrift,
    BuyerStats,
    LedgerTotals,
    PlatformStats,
    WorkerStats,
)

_PLATFORM_STATS_SQL = text("""
    SELECT
        (SELECT COUNT(*) FROM users WHERE role = 'worker') AS total_workers,
        (SELECT COUNT(*) FROM users WHERE role = 'buyer') AS total_buyers,
        (SELECT COALESCE(SUM(coins), 0) FROM users) AS total_available_coins,
        (SELECT COALESCE(SUM(withdrawal_coin), 0) FROM withdrawals
            WHERE status = 'approved') AS total_withdrawn_coins,
        (SELECT COALESCE(SUM(coins), 0) FROM payments) AS total_purchased_coins,
        (SELECT COALESCE(SUM(withdrawal_amount_cents), 0) FROM withdrawals
            WHERE status = 'approved') AS total_payout_cents
""")

_BUYER_STATS_SQL = text("""
    SELECT
        (SELECT COUNT(*) FROM tasks WHERE buyer_email = :email) AS total_task_count,
        (SELECT COALESCE(SUM(required_workers), 0) FROM tasks
            WHERE buyer_email = :email) AS pending_task_count,
        (SELECT COALESCE(SUM(payable_amount), 0) FROM submissions
            WHERE buyer_email = :email AND status = 'approved') AS total_payment_paid
""")

_WORKER_STATS_SQL = text("""
    SELECT
        COUNT(*) AS total_submission,
        COUNT(*) FILTER (WHERE status = 'pending') AS pending_submission,
        COALESCE(SUM(payable_amount) FILTER (WHERE status = 'approved'), 0)
            AS total_earning
    FROM submissions
    WHERE worker_email = :email
""")

_LEDGER_TOTALS_SQL = text("""
    SELECT
        (SELECT COALESCE(SUM(coins), 0) FROM users) AS user_balances,
        (SELECT COALESCE(SUM(
            (t.required_workers + (
                SELECT COUNT(*) FROM submissions s
                WHERE s.task_id = t.id AND s.status = 'pending'
            )) * t.payable_amount), 0)
         FROM tasks t) AS reserved_coins,
        (SELECT COALESCE(SUM(amount), 0) FROM ledger_entries
            WHERE entry_type IN ('SIGNUP_BONUS', 'PAYMENT')) AS external_credits,
        (SELECT COALESCE(-SUM(amount), 0) FROM ledger_entries
            WHERE entry_type IN ('WITHDRAWAL', 'ACCOUNT_CLOSURE')) AS external_debits
""")

_BALANCE_DRIFT_SQL = text("""
    SELECT u.email, u.coins, COALESCE(l.ledger_sum, 0) AS ledger_sum
    FROM users u
    LEFT JOIN (
        SELECT user_email, SUM(amount) AS ledger_sum
        FROM ledger_entries
        GROUP BY user_email
    ) l ON l.user_email = u.email
    WHERE u.coins <> COALESCE(l.ledger_sum, 0)
    ORDER BY u.email
""")

_NEGATIVE_BALANCES_SQL = text("SELECT COUNT(*) FROM users WHERE coins < 0")


class AdminRepository:
    async def platform_stats(self, db: AsyncSession) -> PlatformStats:
        row = (await db.execute(_PLATFORM_STATS_SQL)).one()
        return PlatformStats(
            total_workers=int(row.total_workers),
            total_buyers=int(row.total_buyers),
            total_available_coins=int(row.total_available_coins),
            total_withdrawn_coins=int(row.total_withdrawn_coins),
            total_purchased_coins=int(row.total_purchased_coins),
            total_payout_cents=int(row.total_payout_cents),
        )

    async def buyer_stats(self, db: AsyncSession, buyer_email: str) -> BuyerStats:
        row = (await db.execute(_BUYER_STATS_SQL, {"email": buyer_email})).one()
        return BuyerStats(
            total_task_count=int(row.total_task_count),
            pending_task_count=int(row.pending_task_count),
            total_payment_paid=int(row.total_payment_paid),
        )

    async def worker_stats(self, db: AsyncSession, worker_email: str) -> WorkerStats:
        row = (await db.execute(_WORKER_STATS_SQL, {"email": worker_email})).one()
        return WorkerStats(
            total_submission=int(row.total_submission),
            pending_submission=int(row.pending_submission),
            total_earning=int(row.total_earning),
        )

    async def ledger_totals(self, db: AsyncSession) -> LedgerTotals:
        row = (await db.execute(_LEDGER_TOTALS_SQL)).one()
        return LedgerTotals(
            user_balances=int(row.user_balances),
            reserved_coins=int(row.reserved_coins),
            external_credits=int(row.external_credits),
            external_debits=int(row.external_debits),
        )

    async def balance_drift(self, db: AsyncSession) -> list[BalanceDrift]:
        rows = (await db.execute(_BALANCE_DRIFT_SQL)).fetchall()
        return [
            BalanceDrift(email=r.email, coins=int(r.coins), ledger_sum=int(r.ledger_sum))
            for r in rows
        ]

    async def count_negative_balances(self, db: AsyncSession) -> int:
        return int((await db.execute(_NEGATIVE_BALANCES_SQL)).scalar_one())
