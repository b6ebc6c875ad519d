"""Repository Protocol: dependency inversion for testability.

Unit tests inject a mock or in-memory fake that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.mt_task.domain.models import Task


class TaskRepositoryProtocol(Protocol):
    async def insert_task(self, db: AsyncSession, task: Task) -> Task: ...

    async def get_task(
        self, db: AsyncSession, task_id: str, for_update: bool = False
    ) -> Task | None: ...

    async def list_open_tasks(self, db: AsyncSession) -> list[Task]: ...

    async def list_by_buyer(self, db: AsyncSession, buyer_email: str) -> list[Task]: ...

    async def delete_task(self, db: AsyncSession, task_id: str) -> bool: ...

    async def take_slot(self, db: AsyncSession, task_id: str) -> Task | None:
        """Compare-and-decrement required_workers. None if the task is missing or full."""
        ...

    async def release_slot(self, db: AsyncSession, task_id: str) -> Task | None: ...
