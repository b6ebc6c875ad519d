"""End-to-end coin flows over the in-memory fakes.

Each test drives the real application services; only persistence is faked.
"""

from datetime import date

import pytest

from src.mt_common.enums import ReviewDecision, SettleDecision
from src.mt_common.errors import (
    InsufficientFundsError,
    NoSlotsAvailableError,
    SubmissionAlreadyReviewedError,
)
from src.mt_submission.application.schemas import SubmitWorkRequest
from src.mt_task.application.schemas import CreateTaskRequest
from src.mt_withdrawal.application.schemas import WithdrawalRequest
from tests.fakes import FakeSession, Services, seed_user

BUYER = "buyer@example.com"
WORKER = "worker@example.com"


def _task(required: int = 2, payable: int = 30) -> CreateTaskRequest:
    return CreateTaskRequest(
        title="Label 10 images",
        detail="Draw boxes around cats",
        submission_info="Link to the labelled set",
        required_workers=required,
        payable_amount=payable,
        completion_date=date(2030, 1, 1),
    )


@pytest.fixture
async def funded(session: FakeSession, services: Services) -> FakeSession:
    await seed_user(session, services, BUYER, "buyer", coins=100, name="Bea")
    await seed_user(session, services, WORKER, "worker", name="Wes")
    return session


async def _balance(session: FakeSession, email: str) -> int:
    return session.state.users[email].coins


async def _assert_conserved(session: FakeSession, services: Services) -> None:
    report = await services.admin.verify_ledger(session)
    assert report["ok"], report["violations"]


class TestTaskReserveAndReview:
    async def test_create_task_reserves_coins(
        self, funded: FakeSession, services: Services
    ) -> None:
        created = await services.tasks.create_task(funded, BUYER, "Bea", _task())

        assert created.buyer_balance == 40
        assert created.reserved_coins == 60
        assert created.task.required_workers == 2
        assert await _balance(funded, BUYER) == 40
        await _assert_conserved(funded, services)

    async def test_submit_takes_a_slot(self, funded: FakeSession, services: Services) -> None:
        created = await services.tasks.create_task(funded, BUYER, "Bea", _task())

        result = await services.submissions.submit(
            funded, WORKER, "Wes", SubmitWorkRequest(task_id=created.task.id, submission_details="done")
        )

        assert result.task_required_workers == 1
        assert result.submission.status == "pending"
        assert funded.state.tasks[created.task.id].required_workers == 1
        buyer_feed = [n for n in funded.state.notifications if n.to_email == BUYER]
        assert buyer_feed[0].message == "Wes has submitted work for Label 10 images"
        assert buyer_feed[0].action_route == "/dashboard/buyer-home"
        await _assert_conserved(funded, services)

    async def test_approve_pays_worker_once(self, funded: FakeSession, services: Services) -> None:
        created = await services.tasks.create_task(funded, BUYER, "Bea", _task())
        sub = await services.submissions.submit(
            funded, WORKER, "Wes", SubmitWorkRequest(task_id=created.task.id, submission_details="done")
        )

        reviewed = await services.submissions.review(
            funded, sub.submission.id, ReviewDecision.APPROVED, BUYER
        )
        assert reviewed.worker_balance == 30
        assert reviewed.submission.status == "approved"

        ledger_before = len(funded.state.ledger)
        notes_before = len(funded.state.notifications)
        with pytest.raises(SubmissionAlreadyReviewedError):
            await services.submissions.review(
                funded, sub.submission.id, ReviewDecision.APPROVED, BUYER
            )

        assert await _balance(funded, WORKER) == 30
        assert len(funded.state.ledger) == ledger_before
        assert len(funded.state.notifications) == notes_before
        await _assert_conserved(funded, services)

    async def test_reject_reopens_slot_without_payment(
        self, funded: FakeSession, services: Services
    ) -> None:
        created = await services.tasks.create_task(funded, BUYER, "Bea", _task())
        sub = await services.submissions.submit(
            funded, WORKER, "Wes", SubmitWorkRequest(task_id=created.task.id, submission_details="meh")
        )

        reviewed = await services.submissions.review(
            funded, sub.submission.id, ReviewDecision.REJECTED, BUYER
        )

        assert reviewed.task_required_workers == 2
        assert reviewed.worker_balance is None
        assert await _balance(funded, WORKER) == 0
        worker_feed = [n for n in funded.state.notifications if n.to_email == WORKER]
        assert worker_feed[-1].message == "Your submission for Label 10 images was rejected by Bea"
        await _assert_conserved(funded, services)

    async def test_delete_refunds_open_slots_and_drops_submissions(
        self, funded: FakeSession, services: Services
    ) -> None:
        created = await services.tasks.create_task(funded, BUYER, "Bea", _task())
        sub = await services.submissions.submit(
            funded, WORKER, "Wes", SubmitWorkRequest(task_id=created.task.id, submission_details="done")
        )
        await services.submissions.review(funded, sub.submission.id, ReviewDecision.APPROVED, BUYER)

        deleted = await services.tasks.delete_task(funded, created.task.id, BUYER)

        assert deleted.refunded_coins == 30
        assert deleted.buyer_balance == 70
        assert deleted.deleted_submissions == 1
        assert funded.state.submissions == {}
        assert created.task.id not in funded.state.tasks
        await _assert_conserved(funded, services)

    async def test_delete_refunds_pending_submissions_too(
        self, funded: FakeSession, services: Services
    ) -> None:
        created = await services.tasks.create_task(funded, BUYER, "Bea", _task())
        await services.submissions.submit(
            funded, WORKER, "Wes", SubmitWorkRequest(task_id=created.task.id, submission_details="done")
        )

        deleted = await services.tasks.delete_task(funded, created.task.id, BUYER)

        assert deleted.refunded_coins == 60
        assert await _balance(funded, BUYER) == 100
        await _assert_conserved(funded, services)


class TestGuards:
    async def test_insufficient_funds_creates_no_task(
        self, funded: FakeSession, services: Services
    ) -> None:
        with pytest.raises(InsufficientFundsError):
            await services.tasks.create_task(funded, BUYER, "Bea", _task(required=5, payable=30))

        assert funded.state.tasks == {}
        assert await _balance(funded, BUYER) == 100
        assert funded.rollbacks == 1

    async def test_no_oversubscription(self, funded: FakeSession, services: Services) -> None:
        await seed_user(funded, services, "second@example.com", "worker")
        created = await services.tasks.create_task(funded, BUYER, "Bea", _task(required=1))
        await services.submissions.submit(
            funded, WORKER, "Wes", SubmitWorkRequest(task_id=created.task.id, submission_details="a")
        )

        with pytest.raises(NoSlotsAvailableError):
            await services.submissions.submit(
                funded, "second@example.com", "Sam",
                SubmitWorkRequest(task_id=created.task.id, submission_details="b"),
            )

        assert funded.state.tasks[created.task.id].required_workers == 0
        assert len(funded.state.submissions) == 1

    async def test_withdrawal_over_balance_stays_pending(
        self, funded: FakeSession, services: Services
    ) -> None:
        created = await services.tasks.create_task(funded, BUYER, "Bea", _task())
        sub = await services.submissions.submit(
            funded, WORKER, "Wes", SubmitWorkRequest(task_id=created.task.id, submission_details="done")
        )
        await services.submissions.review(funded, sub.submission.id, ReviewDecision.APPROVED, BUYER)
        wd = await services.withdrawals.request_withdrawal(
            funded, WORKER, "Wes",
            WithdrawalRequest(withdrawal_coin=50, payment_system="bkash", account_number="017"),
        )

        with pytest.raises(InsufficientFundsError):
            await services.withdrawals.settle(funded, wd.id, SettleDecision.APPROVED, "admin@example.com")

        assert funded.state.withdrawals[wd.id].status == "pending"
        assert await _balance(funded, WORKER) == 30
        await _assert_conserved(funded, services)

    async def test_withdrawal_approval_debits_worker(
        self, funded: FakeSession, services: Services
    ) -> None:
        await seed_user(funded, services, "rich@example.com", "worker", coins=80)
        wd = await services.withdrawals.request_withdrawal(
            funded, "rich@example.com", "Rich",
            WithdrawalRequest(withdrawal_coin=50, payment_system="stripe", account_number="acct"),
        )

        settled = await services.withdrawals.settle(
            funded, wd.id, SettleDecision.APPROVED, "admin@example.com"
        )

        assert settled.worker_balance == 30
        assert settled.withdrawal.status == "approved"
        feed = [n for n in funded.state.notifications if n.to_email == "rich@example.com"]
        assert feed[-1].message == "Admin approved your withdrawal request of 50 coins"
        stats = await services.admin.platform_stats(funded)
        assert stats["total_withdrawn_coins"] == 50
        assert stats["total_payout_cents"] == settled.withdrawal.withdrawal_amount_cents
        await _assert_conserved(funded, services)
