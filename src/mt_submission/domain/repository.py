"""Repository Protocol: dependency inversion for testability.

Unit tests inject a mock or in-memory fake that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.mt_submission.domain.models import Submission


class SubmissionRepositoryProtocol(Protocol):
    async def insert_submission(
        self, db: AsyncSession, submission: Submission
    ) -> Submission: ...

    async def get_submission(
        self, db: AsyncSession, submission_id: str
    ) -> Submission | None: ...

    async def transition_from_pending(
        self, db: AsyncSession, submission_id: str, status: str
    ) -> Submission | None:
        """Set a terminal status iff currently pending. None otherwise."""
        ...

    async def count_pending_for_task(self, db: AsyncSession, task_id: str) -> int: ...

    async def delete_for_task(self, db: AsyncSession, task_id: str) -> int: ...

    async def list_for_worker(
        self, db: AsyncSession, worker_email: str, offset: int, limit: int
    ) -> list[Submission]: ...

    async def count_for_worker(self, db: AsyncSession, worker_email: str) -> int: ...

    async def list_pending_for_buyer(
        self, db: AsyncSession, buyer_email: str
    ) -> list[Submission]: ...
