"""TaskApplicationService: task lifecycle and the coins it reserves.

create_task and delete_task each run as one transaction owned by this
service: the ledger adjustment and the task/submission writes commit together
or are rolled back together. Read operations run without an explicit
transaction.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.mt_common.enums import LedgerEntryType
from src.mt_common.errors import ForbiddenError, TaskNotFoundError
from src.mt_common.id_generator import generate_id
from src.mt_ledger.domain.store import LedgerStore
from src.mt_submission.domain.repository import SubmissionRepositoryProtocol
from src.mt_submission.infrastructure.persistence import SubmissionRepository
from src.mt_task.application.schemas import (
    CreateTaskRequest,
    CreateTaskResponse,
    DeleteTaskResponse,
    TaskResponse,
)
from src.mt_task.domain.models import Task
from src.mt_task.domain.repository import TaskRepositoryProtocol
from src.mt_task.infrastructure.persistence import TaskRepository

logger = logging.getLogger(__name__)


class TaskApplicationService:
    def __init__(
        self,
        repo: TaskRepositoryProtocol | None = None,
        submission_repo: SubmissionRepositoryProtocol | None = None,
        ledger: LedgerStore | None = None,
    ) -> None:
        self._repo: TaskRepositoryProtocol = repo or TaskRepository()
        self._submissions: SubmissionRepositoryProtocol = (
            submission_repo or SubmissionRepository()
        )
        self._ledger = ledger or LedgerStore()

    async def create_task(
        self,
        db: AsyncSession,
        buyer_email: str,
        buyer_name: str,
        req: CreateTaskRequest,
    ) -> CreateTaskResponse:
        """Reserve required_workers * payable_amount from the buyer, then persist.

        InsufficientFundsError propagates with nothing written.
        """
        task_id = generate_id("task")
        total_cost = req.required_workers * req.payable_amount
        try:
            balance = await self._ledger.adjust(
                db,
                buyer_email,
                -total_cost,
                LedgerEntryType.TASK_RESERVE,
                reference_type="TASK",
                reference_id=task_id,
                description=(
                    f"Reserved {req.required_workers} x {req.payable_amount} for {req.title}"
                ),
            )
            task = await self._repo.insert_task(
                db,
                Task(
                    id=task_id,
                    buyer_email=buyer_email,
                    buyer_name=buyer_name,
                    title=req.title,
                    detail=req.detail,
                    submission_info=req.submission_info,
                    image_url=req.image_url,
                    payable_amount=req.payable_amount,
                    required_workers=req.required_workers,
                    completion_date=req.completion_date,
                ),
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info("Task %s created by %s, reserved %d coins", task_id, buyer_email, total_cost)
        return CreateTaskResponse(
            task=TaskResponse.from_domain(task),
            reserved_coins=total_cost,
            buyer_balance=balance,
        )

    async def delete_task(
        self, db: AsyncSession, task_id: str, requester_email: str
    ) -> DeleteTaskResponse:
        """Refund open slots and pending submissions, then drop the task.

        The task row is locked first so a concurrent review of one of its
        submissions cannot be counted as pending and paid out at the same time.
        """
        try:
            task = await self._repo.get_task(db, task_id, for_update=True)
            if task is None:
                raise TaskNotFoundError(task_id)
            if task.buyer_email != requester_email:
                raise ForbiddenError("Only the buyer who posted a task can delete it")

            pending = await self._submissions.count_pending_for_task(db, task_id)
            refill = (task.required_workers + pending) * task.payable_amount
            if refill > 0:
                balance = await self._ledger.adjust(
                    db,
                    task.buyer_email,
                    refill,
                    LedgerEntryType.TASK_REFUND,
                    reference_type="TASK",
                    reference_id=task_id,
                    description=(
                        f"Refund {task.required_workers} open + {pending} pending "
                        f"x {task.payable_amount} for {task.title}"
                    ),
                )
            else:
                balance = await self._ledger.read(db, task.buyer_email)

            removed = await self._submissions.delete_for_task(db, task_id)
            await self._repo.delete_task(db, task_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Task %s deleted by %s, refunded %d coins, removed %d submissions",
            task_id, requester_email, refill, removed,
        )
        return DeleteTaskResponse(
            task_id=task_id,
            refunded_coins=refill,
            deleted_submissions=removed,
            buyer_balance=balance,
        )

    async def list_open_tasks(self, db: AsyncSession) -> list[TaskResponse]:
        tasks = await self._repo.list_open_tasks(db)
        return [TaskResponse.from_domain(t) for t in tasks]

    async def get_task(self, db: AsyncSession, task_id: str) -> TaskResponse:
        task = await self._repo.get_task(db, task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return TaskResponse.from_domain(task)

    async def list_tasks_by_buyer(
        self, db: AsyncSession, buyer_email: str
    ) -> list[TaskResponse]:
        tasks = await self._repo.list_by_buyer(db, buyer_email)
        return [TaskResponse.from_domain(t) for t in tasks]
