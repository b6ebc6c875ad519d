"""NotificationSink: write-only event output used by the ledger flows.

`emit` inserts within the caller's transaction: a review or settlement that
rolls back leaves no notification behind, and a repeated decision that is
refused never emits one. Delivery to the user (polling the feed) is outside
this module.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.mt_common.id_generator import generate_id
from src.mt_notification.domain.models import Notification
from src.mt_notification.domain.repository import NotificationRepositoryProtocol
from src.mt_notification.infrastructure.persistence import NotificationRepository

BUYER_HOME = "/dashboard/buyer-home"
WORKER_HOME = "/dashboard/worker-home"


class NotificationSink:
    def __init__(self, repo: NotificationRepositoryProtocol | None = None) -> None:
        self._repo: NotificationRepositoryProtocol = repo or NotificationRepository()

    async def emit(
        self, db: AsyncSession, to_email: str, message: str, action_route: str
    ) -> Notification:
        notification = Notification(
            id=generate_id("ntf"),
            to_email=to_email,
            message=message,
            action_route=action_route,
        )
        return await self._repo.insert_notification(db, notification)
