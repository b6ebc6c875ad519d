"""TaskRepository: concrete implementation of TaskRepositoryProtocol.

Slot accounting is done with single conditional UPDATE ... RETURNING
statements: take_slot only matches while required_workers > 0, so concurrent
submitters can never oversubscribe a task (backed by the
ck_tasks_required_workers_gte_0 CHECK constraint).
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.mt_common.errors import InternalError
from src.mt_task.domain.models import Task

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_COLUMNS = """
    id, buyer_email, buyer_name, title, detail, submission_info, image_url,
    payable_amount, required_workers, completion_date, created_at, updated_at
"""

_INSERT_TASK_SQL = text(f"""
    INSERT INTO tasks
        (id, buyer_email, buyer_name, title, detail, submission_info, image_url,
         payable_amount, required_workers, completion_date)
    VALUES
        (:id, :buyer_email, :buyer_name, :title, :detail, :submission_info, :image_url,
         :payable_amount, :required_workers, :completion_date)
    RETURNING {_COLUMNS}
""")

_GET_TASK_SQL = text(f"SELECT {_COLUMNS} FROM tasks WHERE id = :task_id")

_GET_TASK_FOR_UPDATE_SQL = text(f"SELECT {_COLUMNS} FROM tasks WHERE id = :task_id FOR UPDATE")

_LIST_OPEN_SQL = text(f"""
    SELECT {_COLUMNS} FROM tasks
    WHERE required_workers > 0
    ORDER BY created_at DESC, id DESC
""")

_LIST_BY_BUYER_SQL = text(f"""
    SELECT {_COLUMNS} FROM tasks
    WHERE buyer_email = :buyer_email
    ORDER BY completion_date DESC, id DESC
""")

_DELETE_TASK_SQL = text("DELETE FROM tasks WHERE id = :task_id RETURNING id")

_TAKE_SLOT_SQL = text(f"""
    UPDATE tasks
    SET required_workers = required_workers - 1,
        updated_at = NOW()
    WHERE id = :task_id AND required_workers > 0
    RETURNING {_COLUMNS}
""")

_RELEASE_SLOT_SQL = text(f"""
    UPDATE tasks
    SET required_workers = required_workers + 1,
        updated_at = NOW()
    WHERE id = :task_id
    RETURNING {_COLUMNS}
""")


def _row_to_task(row: object) -> Task:
    return Task(
        id=row.id,  # type: ignore[attr-defined]
        buyer_email=row.buyer_email,  # type: ignore[attr-defined]
        buyer_name=row.buyer_name,  # type: ignore[attr-defined]
        title=row.title,  # type: ignore[attr-defined]
        detail=row.detail,  # type: ignore[attr-defined]
        submission_info=row.submission_info,  # type: ignore[attr-defined]
        image_url=row.image_url,  # type: ignore[attr-defined]
        payable_amount=row.payable_amount,  # type: ignore[attr-defined]
        required_workers=row.required_workers,  # type: ignore[attr-defined]
        completion_date=row.completion_date,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


class TaskRepository:
    async def insert_task(self, db: AsyncSession, task: Task) -> Task:
        result = await db.execute(
            _INSERT_TASK_SQL,
            {
                "id": task.id,
                "buyer_email": task.buyer_email,
                "buyer_name": task.buyer_name,
                "title": task.title,
                "detail": task.detail,
                "submission_info": task.submission_info,
                "image_url": task.image_url,
                "payable_amount": task.payable_amount,
                "required_workers": task.required_workers,
                "completion_date": task.completion_date,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Task insert returned no rows")
        return _row_to_task(row)

    async def get_task(
        self, db: AsyncSession, task_id: str, for_update: bool = False
    ) -> Task | None:
        sql = _GET_TASK_FOR_UPDATE_SQL if for_update else _GET_TASK_SQL
        result = await db.execute(sql, {"task_id": task_id})
        row = result.fetchone()
        return _row_to_task(row) if row else None

    async def list_open_tasks(self, db: AsyncSession) -> list[Task]:
        result = await db.execute(_LIST_OPEN_SQL)
        return [_row_to_task(row) for row in result.fetchall()]

    async def list_by_buyer(self, db: AsyncSession, buyer_email: str) -> list[Task]:
        result = await db.execute(_LIST_BY_BUYER_SQL, {"buyer_email": buyer_email})
        return [_row_to_task(row) for row in result.fetchall()]

    async def delete_task(self, db: AsyncSession, task_id: str) -> bool:
        result = await db.execute(_DELETE_TASK_SQL, {"task_id": task_id})
        return result.fetchone() is not None

    async def take_slot(self, db: AsyncSession, task_id: str) -> Task | None:
        result = await db.execute(_TAKE_SLOT_SQL, {"task_id": task_id})
        row = result.fetchone()
        return _row_to_task(row) if row else None

    async def release_slot(self, db: AsyncSession, task_id: str) -> Task | None:
        result = await db.execute(_RELEASE_SLOT_SQL, {"task_id": task_id})
        row = result.fetchone()
        return _row_to_task(row) if row else None
