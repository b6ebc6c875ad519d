"""Unit tests for admin dashboards and ledger invariant checks."""

from unittest.mock import AsyncMock, MagicMock

from src.mt_admin.application.service import AdminService
from src.mt_admin.domain.invariants import (
    check_balance_drift,
    check_conservation,
    check_non_negative,
)
from src.mt_admin.domain.models import BalanceDrift, BuyerStats, LedgerTotals, PlatformStats


def _totals(
    balances: int = 1000, reserved: int = 200, credits: int = 1300, debits: int = 100
) -> LedgerTotals:
    return LedgerTotals(
        user_balances=balances, reserved_coins=reserved,
        external_credits=credits, external_debits=debits,
    )


class TestConservation:
    def test_balanced(self) -> None:
        # 1000 + 200 == 1300 - 100
        assert check_conservation(_totals()) == []

    def test_imbalanced(self) -> None:
        violations = check_conservation(_totals(credits=1350))
        assert len(violations) == 1
        assert "Conservation violated" in violations[0]

    def test_drift_reported_per_user(self) -> None:
        violations = check_balance_drift(
            [BalanceDrift("a@x.io", 10, 0), BalanceDrift("b@x.io", 5, 6)]
        )
        assert len(violations) == 2
        assert "a@x.io" in violations[0]

    def test_negative_balances(self) -> None:
        assert check_non_negative(0) == []
        assert len(check_non_negative(2)) == 1


class TestAdminService:
    async def test_verify_ledger_ok(self) -> None:
        repo = AsyncMock()
        repo.ledger_totals.return_value = _totals()
        repo.balance_drift.return_value = []
        repo.count_negative_balances.return_value = 0

        report = await AdminService(repo=repo).verify_ledger(MagicMock())

        assert report["ok"] is True
        assert report["violations"] == []
        assert report["totals"]["reserved_coins"] == 200

    async def test_verify_ledger_collects_all_violations(self) -> None:
        repo = AsyncMock()
        repo.ledger_totals.return_value = _totals(balances=999)
        repo.balance_drift.return_value = [BalanceDrift("a@x.io", 10, 0)]
        repo.count_negative_balances.return_value = 0

        report = await AdminService(repo=repo).verify_ledger(MagicMock())

        assert report["ok"] is False
        assert len(report["violations"]) == 2

    async def test_stats_are_plain_dicts(self) -> None:
        repo = AsyncMock()
        repo.platform_stats.return_value = PlatformStats(3, 2, 500, 40, 100, 200)
        repo.buyer_stats.return_value = BuyerStats(4, 7, 90)
        svc = AdminService(repo=repo)

        platform = await svc.platform_stats(MagicMock())
        buyer = await svc.buyer_stats(MagicMock(), "bea@example.com")

        assert platform["total_workers"] == 3
        assert platform["total_withdrawn_coins"] == 40
        assert platform["total_payout_cents"] == 200
        assert buyer == {"total_task_count": 4, "pending_task_count": 7, "total_payment_paid": 90}
