"""Unit tests for TaskApplicationService with mock repositories."""

from datetime import UTC, date, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.mt_common.enums import LedgerEntryType
from src.mt_common.errors import ForbiddenError, InsufficientFundsError, TaskNotFoundError
from src.mt_task.application.schemas import CreateTaskRequest
from src.mt_task.application.service import TaskApplicationService
from src.mt_task.domain.models import Task


def _task(required: int = 2, payable: int = 30, buyer: str = "bea@example.com") -> Task:
    return Task(
        id="task_1",
        buyer_email=buyer,
        buyer_name="Bea",
        title="Label images",
        detail="Boxes around cats",
        submission_info="Link",
        image_url=None,
        payable_amount=payable,
        required_workers=required,
        completion_date=date(2030, 1, 1),
        created_at=datetime.now(UTC),
    )


def _request() -> CreateTaskRequest:
    return CreateTaskRequest(
        title="Label images",
        detail="Boxes around cats",
        required_workers=2,
        payable_amount=30,
        completion_date=date(2030, 1, 1),
    )


@pytest.fixture
def db() -> AsyncMock:
    return AsyncMock()


class TestCreateTask:
    async def test_reserves_then_inserts(self, db: AsyncMock) -> None:
        repo, ledger = AsyncMock(), AsyncMock()
        ledger.adjust.return_value = 40
        repo.insert_task.return_value = _task()
        svc = TaskApplicationService(repo=repo, submission_repo=AsyncMock(), ledger=ledger)

        result = await svc.create_task(db, "bea@example.com", "Bea", _request())

        assert result.buyer_balance == 40
        assert result.reserved_coins == 60
        args = ledger.adjust.await_args.args
        assert args[1:4] == ("bea@example.com", -60, LedgerEntryType.TASK_RESERVE)
        db.commit.assert_awaited_once()

    async def test_insufficient_funds_inserts_nothing(self, db: AsyncMock) -> None:
        repo, ledger = AsyncMock(), AsyncMock()
        ledger.adjust.side_effect = InsufficientFundsError(60, 10)
        svc = TaskApplicationService(repo=repo, submission_repo=AsyncMock(), ledger=ledger)

        with pytest.raises(InsufficientFundsError):
            await svc.create_task(db, "bea@example.com", "Bea", _request())

        repo.insert_task.assert_not_awaited()
        db.rollback.assert_awaited_once()
        db.commit.assert_not_awaited()

    async def test_insert_failure_rolls_back_reservation(self, db: AsyncMock) -> None:
        repo, ledger = AsyncMock(), AsyncMock()
        ledger.adjust.return_value = 40
        repo.insert_task.side_effect = RuntimeError("db down")
        svc = TaskApplicationService(repo=repo, submission_repo=AsyncMock(), ledger=ledger)

        with pytest.raises(RuntimeError):
            await svc.create_task(db, "bea@example.com", "Bea", _request())

        db.rollback.assert_awaited_once()


class TestDeleteTask:
    async def test_refunds_open_and_pending(self, db: AsyncMock) -> None:
        repo, subs, ledger = AsyncMock(), AsyncMock(), AsyncMock()
        repo.get_task.return_value = _task(required=1, payable=30)
        subs.count_pending_for_task.return_value = 2
        subs.delete_for_task.return_value = 3
        ledger.adjust.return_value = 130
        svc = TaskApplicationService(repo=repo, submission_repo=subs, ledger=ledger)

        result = await svc.delete_task(db, "task_1", "bea@example.com")

        assert result.refunded_coins == 90
        assert result.deleted_submissions == 3
        assert result.buyer_balance == 130
        repo.get_task.assert_awaited_once_with(db, "task_1", for_update=True)
        assert ledger.adjust.await_args.args[2:4] == (90, LedgerEntryType.TASK_REFUND)
        repo.delete_task.assert_awaited_once_with(db, "task_1")

    async def test_nothing_to_refund_reads_balance(self, db: AsyncMock) -> None:
        repo, subs, ledger = AsyncMock(), AsyncMock(), AsyncMock()
        repo.get_task.return_value = _task(required=0)
        subs.count_pending_for_task.return_value = 0
        ledger.read.return_value = 40
        svc = TaskApplicationService(repo=repo, submission_repo=subs, ledger=ledger)

        result = await svc.delete_task(db, "task_1", "bea@example.com")

        assert result.refunded_coins == 0
        assert result.buyer_balance == 40
        ledger.adjust.assert_not_awaited()

    async def test_missing_task(self, db: AsyncMock) -> None:
        repo = AsyncMock()
        repo.get_task.return_value = None
        svc = TaskApplicationService(repo=repo, submission_repo=AsyncMock(), ledger=AsyncMock())

        with pytest.raises(TaskNotFoundError):
            await svc.delete_task(db, "task_x", "bea@example.com")
        db.rollback.assert_awaited_once()

    async def test_only_owner_may_delete(self, db: AsyncMock) -> None:
        repo, ledger = AsyncMock(), AsyncMock()
        repo.get_task.return_value = _task(buyer="other@example.com")
        svc = TaskApplicationService(repo=repo, submission_repo=AsyncMock(), ledger=ledger)

        with pytest.raises(ForbiddenError):
            await svc.delete_task(db, "task_1", "bea@example.com")
        ledger.adjust.assert_not_awaited()


class TestReads:
    async def test_get_task_not_found(self) -> None:
        repo = AsyncMock()
        repo.get_task.return_value = None
        svc = TaskApplicationService(repo=repo, submission_repo=AsyncMock(), ledger=AsyncMock())
        with pytest.raises(TaskNotFoundError):
            await svc.get_task(MagicMock(), "task_x")

    async def test_list_open_tasks(self) -> None:
        repo = AsyncMock()
        repo.list_open_tasks.return_value = [_task()]
        svc = TaskApplicationService(repo=repo, submission_repo=AsyncMock(), ledger=AsyncMock())
        result = await svc.list_open_tasks(MagicMock())
        assert [t.id for t in result] == ["task_1"]
        assert result[0].completion_date == "2030-01-01"
