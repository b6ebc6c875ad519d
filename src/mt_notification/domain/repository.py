"""Repository Protocol for notifications."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.mt_notification.domain.models import Notification


class NotificationRepositoryProtocol(Protocol):
    async def insert_notification(
        self, db: AsyncSession, notification: Notification
    ) -> Notification: ...

    async def list_for_recipient(
        self, db: AsyncSession, to_email: str
    ) -> list[Notification]: ...
