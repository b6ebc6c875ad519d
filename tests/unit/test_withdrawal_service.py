"""Unit tests for WithdrawalApplicationService with mock repositories."""

from unittest.mock import AsyncMock

import pytest

from src.mt_common.enums import LedgerEntryType, SettleDecision
from src.mt_common.errors import (
    InsufficientFundsError,
    WithdrawalAlreadySettledError,
    WithdrawalNotFoundError,
)
from src.mt_withdrawal.application.schemas import WithdrawalRequest
from src.mt_withdrawal.application.service import WithdrawalApplicationService, payout_cents
from src.mt_withdrawal.domain.models import Withdrawal


def _withdrawal(status: str = "pending", coins: int = 50) -> Withdrawal:
    return Withdrawal(
        id="wd_1", worker_email="wes@example.com", worker_name="Wes",
        withdrawal_coin=coins, withdrawal_amount_cents=coins * 5,
        payment_system="bkash", account_number="017",
        status=status,
    )


@pytest.fixture
def repo() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def ledger() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def notifier() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def svc(repo: AsyncMock, ledger: AsyncMock, notifier: AsyncMock) -> WithdrawalApplicationService:
    return WithdrawalApplicationService(repo=repo, ledger=ledger, notifier=notifier)


class TestPayoutCents:
    def test_rate_and_rounding(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("src.mt_withdrawal.application.service.settings.COINS_PER_DOLLAR", 20)
        assert payout_cents(200) == 1000
        assert payout_cents(7) == 35
        monkeypatch.setattr("src.mt_withdrawal.application.service.settings.COINS_PER_DOLLAR", 30)
        assert payout_cents(1) == 3


class TestRequest:
    async def test_creates_pending_without_hold(
        self, svc: WithdrawalApplicationService, repo: AsyncMock, ledger: AsyncMock
    ) -> None:
        repo.insert_withdrawal.return_value = _withdrawal()
        db = AsyncMock()

        result = await svc.request_withdrawal(
            db, "wes@example.com", "Wes",
            WithdrawalRequest(withdrawal_coin=50, payment_system="bkash", account_number="017"),
        )

        assert result.status == "pending"
        inserted = repo.insert_withdrawal.await_args.args[1]
        assert inserted.id.startswith("wd_")
        assert inserted.withdrawal_amount_cents == payout_cents(50)
        ledger.adjust.assert_not_awaited()
        db.commit.assert_awaited_once()


class TestSettle:
    async def test_approve_debits_and_notifies(
        self, svc: WithdrawalApplicationService, repo: AsyncMock,
        ledger: AsyncMock, notifier: AsyncMock,
    ) -> None:
        repo.transition_from_pending.return_value = _withdrawal("approved")
        ledger.adjust.return_value = 10
        db = AsyncMock()

        result = await svc.settle(db, "wd_1", SettleDecision.APPROVED, "admin@example.com")

        assert result.worker_balance == 10
        assert ledger.adjust.await_args.args[1:4] == (
            "wes@example.com", -50, LedgerEntryType.WITHDRAWAL,
        )
        notifier.emit.assert_awaited_once_with(
            db, "wes@example.com", "Admin approved your withdrawal request of 50 coins",
            "/dashboard/worker-home",
        )
        db.commit.assert_awaited_once()

    async def test_deny_has_no_ledger_effect(
        self, svc: WithdrawalApplicationService, repo: AsyncMock,
        ledger: AsyncMock, notifier: AsyncMock,
    ) -> None:
        repo.transition_from_pending.return_value = _withdrawal("denied")

        result = await svc.settle(AsyncMock(), "wd_1", SettleDecision.DENIED, "admin@example.com")

        assert result.worker_balance is None
        assert result.withdrawal.status == "denied"
        ledger.adjust.assert_not_awaited()
        assert "denied" in notifier.emit.await_args.args[2]

    async def test_insufficient_funds_rolls_back(
        self, svc: WithdrawalApplicationService, repo: AsyncMock,
        ledger: AsyncMock, notifier: AsyncMock,
    ) -> None:
        repo.transition_from_pending.return_value = _withdrawal("approved")
        ledger.adjust.side_effect = InsufficientFundsError(50, 30)
        db = AsyncMock()

        with pytest.raises(InsufficientFundsError):
            await svc.settle(db, "wd_1", SettleDecision.APPROVED, "admin@example.com")

        db.rollback.assert_awaited_once()
        db.commit.assert_not_awaited()
        notifier.emit.assert_not_awaited()

    async def test_already_settled(
        self, svc: WithdrawalApplicationService, repo: AsyncMock, ledger: AsyncMock
    ) -> None:
        repo.transition_from_pending.return_value = None
        repo.get_withdrawal.return_value = _withdrawal("approved")

        with pytest.raises(WithdrawalAlreadySettledError):
            await svc.settle(AsyncMock(), "wd_1", SettleDecision.APPROVED, "admin@example.com")
        ledger.adjust.assert_not_awaited()

    async def test_not_found(self, svc: WithdrawalApplicationService, repo: AsyncMock) -> None:
        repo.transition_from_pending.return_value = None
        repo.get_withdrawal.return_value = None

        with pytest.raises(WithdrawalNotFoundError):
            await svc.settle(AsyncMock(), "wd_x", SettleDecision.DENIED, "admin@example.com")
