"""Read side of the notification feed."""

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from src.mt_common.datetime_utils import to_iso
from src.mt_notification.domain.repository import NotificationRepositoryProtocol
from src.mt_notification.infrastructure.persistence import NotificationRepository


class NotificationItem(BaseModel):
    id: str
    message: str
    to_email: str
    action_route: str
    is_read: bool
    time: str | None


class NotificationApplicationService:
    def __init__(self, repo: NotificationRepositoryProtocol | None = None) -> None:
        self._repo: NotificationRepositoryProtocol = repo or NotificationRepository()

    async def list_for_recipient(
        self, db: AsyncSession, to_email: str
    ) -> list[NotificationItem]:
        rows = await self._repo.list_for_recipient(db, to_email)
        return [
            NotificationItem(
                id=n.id,
                message=n.message,
                to_email=n.to_email,
                action_route=n.action_route,
                is_read=n.is_read,
                time=to_iso(n.created_at),
            )
            for n in rows
        ]
