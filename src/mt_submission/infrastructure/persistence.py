"""SubmissionRepository: concrete implementation of SubmissionRepositoryProtocol.

transition_from_pending is the review state-machine guard: the UPDATE only
matches rows still in 'pending', so of two concurrent decisions exactly one
gets a row back.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.mt_common.errors import InternalError
from src.mt_submission.domain.models import Submission

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_COLUMNS = """
    id, task_id, task_title, payable_amount, worker_email, worker_name,
    buyer_email, buyer_name, submission_details, status, submitted_at, reviewed_at
"""

_INSERT_SQL = text(f"""
    INSERT INTO submissions
        (id, task_id, task_title, payable_amount, worker_email, worker_name,
         buyer_email, buyer_name, submission_details, status)
    VALUES
        (:id, :task_id, :task_title, :payable_amount, :worker_email, :worker_name,
         :buyer_email, :buyer_name, :submission_details, :status)
    RETURNING {_COLUMNS}
""")

_GET_SQL = text(f"SELECT {_COLUMNS} FROM submissions WHERE id = :submission_id")

_TRANSITION_SQL = text(f"""
    UPDATE submissions
    SET status = :status,
        reviewed_at = NOW()
    WHERE id = :submission_id AND status = 'pending'
    RETURNING {_COLUMNS}
""")

_COUNT_PENDING_FOR_TASK_SQL = text("""
    SELECT COUNT(*) FROM submissions
    WHERE task_id = :task_id AND status = 'pending'
""")

_DELETE_FOR_TASK_SQL = text("DELETE FROM submissions WHERE task_id = :task_id")

_LIST_FOR_WORKER_SQL = text(f"""
    SELECT {_COLUMNS} FROM submissions
    WHERE worker_email = :worker_email
    ORDER BY submitted_at DESC, id DESC
    OFFSET :offset
    LIMIT :limit
""")

_COUNT_FOR_WORKER_SQL = text(
    "SELECT COUNT(*) FROM submissions WHERE worker_email = :worker_email"
)

_LIST_PENDING_FOR_BUYER_SQL = text(f"""
    SELECT {_COLUMNS} FROM submissions
    WHERE buyer_email = :buyer_email AND status = 'pending'
    ORDER BY submitted_at ASC, id ASC
""")


def _row_to_submission(row: object) -> Submission:
    return Submission(
        id=row.id,  # type: ignore[attr-defined]
        task_id=row.task_id,  # type: ignore[attr-defined]
        task_title=row.task_title,  # type: ignore[attr-defined]
        payable_amount=row.payable_amount,  # type: ignore[attr-defined]
        worker_email=row.worker_email,  # type: ignore[attr-defined]
        worker_name=row.worker_name,  # type: ignore[attr-defined]
        buyer_email=row.buyer_email,  # type: ignore[attr-defined]
        buyer_name=row.buyer_name,  # type: ignore[attr-defined]
        submission_details=row.submission_details,  # type: ignore[attr-defined]
        status=row.status,  # type: ignore[attr-defined]
        submitted_at=row.submitted_at,  # type: ignore[attr-defined]
        reviewed_at=row.reviewed_at,  # type: ignore[attr-defined]
    )


class SubmissionRepository:
    async def insert_submission(
        self, db: AsyncSession, submission: Submission
    ) -> Submission:
        result = await db.execute(
            _INSERT_SQL,
            {
                "id": submission.id,
                "task_id": submission.task_id,
                "task_title": submission.task_title,
                "payable_amount": submission.payable_amount,
                "worker_email": submission.worker_email,
                "worker_name": submission.worker_name,
                "buyer_email": submission.buyer_email,
                "buyer_name": submission.buyer_name,
                "submission_details": submission.submission_details,
                "status": submission.status,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Submission insert returned no rows")
        return _row_to_submission(row)

    async def get_submission(
        self, db: AsyncSession, submission_id: str
    ) -> Submission | None:
        result = await db.execute(_GET_SQL, {"submission_id": submission_id})
        row = result.fetchone()
        return _row_to_submission(row) if row else None

    async def transition_from_pending(
        self, db: AsyncSession, submission_id: str, status: str
    ) -> Submission | None:
        result = await db.execute(
            _TRANSITION_SQL, {"submission_id": submission_id, "status": status}
        )
        row = result.fetchone()
        return _row_to_submission(row) if row else None

    async def count_pending_for_task(self, db: AsyncSession, task_id: str) -> int:
        result = await db.execute(_COUNT_PENDING_FOR_TASK_SQL, {"task_id": task_id})
        return int(result.scalar_one())

    async def delete_for_task(self, db: AsyncSession, task_id: str) -> int:
        result = await db.execute(_DELETE_FOR_TASK_SQL, {"task_id": task_id})
        return int(result.rowcount or 0)  # type: ignore[attr-defined]

    async def list_for_worker(
        self, db: AsyncSession, worker_email: str, offset: int, limit: int
    ) -> list[Submission]:
        result = await db.execute(
            _LIST_FOR_WORKER_SQL,
            {"worker_email": worker_email, "offset": offset, "limit": limit},
        )
        return [_row_to_submission(row) for row in result.fetchall()]

    async def count_for_worker(self, db: AsyncSession, worker_email: str) -> int:
        result = await db.execute(_COUNT_FOR_WORKER_SQL, {"worker_email": worker_email})
        return int(result.scalar_one())

    async def list_pending_for_buyer(
        self, db: AsyncSession, buyer_email: str
    ) -> list[Submission]:
        result = await db.execute(_LIST_PENDING_FOR_BUYER_SQL, {"buyer_email": buyer_email})
        return [_row_to_submission(row) for row in result.fetchall()]
