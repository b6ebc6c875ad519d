"""SubmissionApplicationService: worker submissions and buyer review.

submit:  take one slot (compare-and-decrement) → insert pending submission →
         notify buyer.
review:  lock parent task → pending-only status transition → pay worker
         (approved) or reopen the slot (rejected) → notify worker.

Each runs as one transaction; any failure rolls back every step, so a status
flip without its ledger/slot effect is never visible.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.mt_common.enums import LedgerEntryType, ReviewDecision, SubmissionStatus
from src.mt_common.errors import (
    ForbiddenError,
    NoSlotsAvailableError,
    SubmissionAlreadyReviewedError,
    SubmissionNotFoundError,
    TaskNotFoundError,
)
from src.mt_common.id_generator import generate_id
from src.mt_ledger.domain.store import LedgerStore
from src.mt_notification.domain.sink import BUYER_HOME, WORKER_HOME, NotificationSink
from src.mt_submission.application.schemas import (
    ReviewResponse,
    SubmissionResponse,
    SubmitWorkRequest,
    SubmitWorkResponse,
    WorkerSubmissionsPage,
)
from src.mt_submission.domain.models import Submission
from src.mt_submission.domain.repository import SubmissionRepositoryProtocol
from src.mt_submission.infrastructure.persistence import SubmissionRepository
from src.mt_task.domain.repository import TaskRepositoryProtocol
from src.mt_task.infrastructure.persistence import TaskRepository

logger = logging.getLogger(__name__)


class SubmissionApplicationService:
    def __init__(
        self,
        repo: SubmissionRepositoryProtocol | None = None,
        task_repo: TaskRepositoryProtocol | None = None,
        ledger: LedgerStore | None = None,
        notifier: NotificationSink | None = None,
    ) -> None:
        self._repo: SubmissionRepositoryProtocol = repo or SubmissionRepository()
        self._tasks: TaskRepositoryProtocol = task_repo or TaskRepository()
        self._ledger = ledger or LedgerStore()
        self._notifier = notifier or NotificationSink()

    async def submit(
        self,
        db: AsyncSession,
        worker_email: str,
        worker_name: str,
        req: SubmitWorkRequest,
    ) -> SubmitWorkResponse:
        try:
            task = await self._tasks.take_slot(db, req.task_id)
            if task is None:
                if await self._tasks.get_task(db, req.task_id) is None:
                    raise TaskNotFoundError(req.task_id)
                raise NoSlotsAvailableError(req.task_id)

            submission = await self._repo.insert_submission(
                db,
                Submission(
                    id=generate_id("sub"),
                    task_id=task.id,
                    task_title=task.title,
                    payable_amount=task.payable_amount,
                    worker_email=worker_email,
                    worker_name=worker_name,
                    buyer_email=task.buyer_email,
                    buyer_name=task.buyer_name,
                    submission_details=req.submission_details,
                    status=SubmissionStatus.PENDING.value,
                ),
            )
            await self._notifier.emit(
                db,
                task.buyer_email,
                f"{worker_name} has submitted work for {task.title}",
                BUYER_HOME,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Submission %s by %s on task %s (%d slots left)",
            submission.id, worker_email, task.id, task.required_workers,
        )
        return SubmitWorkResponse(
            submission=SubmissionResponse.from_domain(submission),
            task_required_workers=task.required_workers,
        )

    async def review(
        self,
        db: AsyncSession,
        submission_id: str,
        decision: ReviewDecision,
        reviewer_email: str,
    ) -> ReviewResponse:
        worker_balance: int | None = None
        required_workers: int | None = None
        try:
            submission = await self._repo.get_submission(db, submission_id)
            if submission is None:
                raise SubmissionNotFoundError(submission_id)
            if submission.buyer_email != reviewer_email:
                raise ForbiddenError("Only the buyer who owns the task can review its submissions")

            # Serializes with delete_task, which locks the same row.
            task = await self._tasks.get_task(db, submission.task_id, for_update=True)
            if task is None:
                raise TaskNotFoundError(submission.task_id)

            reviewed = await self._repo.transition_from_pending(
                db, submission_id, decision.value
            )
            if reviewed is None:
                current = await self._repo.get_submission(db, submission_id)
                raise SubmissionAlreadyReviewedError(
                    submission_id, current.status if current else "deleted"
                )

            if decision is ReviewDecision.APPROVED:
                worker_balance = await self._ledger.adjust(
                    db,
                    reviewed.worker_email,
                    reviewed.payable_amount,
                    LedgerEntryType.SUBMISSION_PAYOUT,
                    reference_type="SUBMISSION",
                    reference_id=reviewed.id,
                    description=f"Approved by {reviewed.buyer_name} for {reviewed.task_title}",
                )
                message = (
                    f"You have earned {reviewed.payable_amount} coins from "
                    f"{reviewed.buyer_name} for completing {reviewed.task_title}"
                )
            else:
                restored = await self._tasks.release_slot(db, reviewed.task_id)
                if restored is None:
                    raise TaskNotFoundError(reviewed.task_id)
                required_workers = restored.required_workers
                message = (
                    f"Your submission for {reviewed.task_title} was rejected by "
                    f"{reviewed.buyer_name}"
                )

            await self._notifier.emit(db, reviewed.worker_email, message, WORKER_HOME)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info("Submission %s %s by %s", submission_id, decision.value, reviewer_email)
        return ReviewResponse(
            submission=SubmissionResponse.from_domain(reviewed),
            worker_balance=worker_balance,
            task_required_workers=required_workers,
        )

    async def list_for_worker(
        self, db: AsyncSession, worker_email: str, page: int, size: int
    ) -> WorkerSubmissionsPage:
        total = await self._repo.count_for_worker(db, worker_email)
        rows = await self._repo.list_for_worker(db, worker_email, (page - 1) * size, size)
        return WorkerSubmissionsPage(
            total=total,
            page=page,
            size=size,
            items=[SubmissionResponse.from_domain(s) for s in rows],
        )

    async def list_to_review(
        self, db: AsyncSession, buyer_email: str
    ) -> list[SubmissionResponse]:
        rows = await self._repo.list_pending_for_buyer(db, buyer_email)
        return [SubmissionResponse.from_domain(s) for s in rows]
