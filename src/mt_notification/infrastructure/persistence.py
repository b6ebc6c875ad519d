"""NotificationRepository: raw text() SQL, append-only."""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.mt_common.errors import InternalError
from src.mt_notification.domain.models import Notification

_INSERT_SQL = text("""
    INSERT INTO notifications (id, to_email, message, action_route, is_read)
    VALUES (:id, :to_email, :message, :action_route, :is_read)
    RETURNING id, to_email, message, action_route, is_read, created_at
""")

_LIST_FOR_RECIPIENT_SQL = text("""
    SELECT id, to_email, message, action_route, is_read, created_at
    FROM notifications
    WHERE to_email = :to_email
    ORDER BY created_at DESC, id DESC
""")


def _row_to_notification(row: object) -> Notification:
    return Notification(
        id=row.id,  # type: ignore[attr-defined]
        to_email=row.to_email,  # type: ignore[attr-defined]
        message=row.message,  # type: ignore[attr-defined]
        action_route=row.action_route,  # type: ignore[attr-defined]
        is_read=row.is_read,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class NotificationRepository:
    async def insert_notification(
        self, db: AsyncSession, notification: Notification
    ) -> Notification:
        result = await db.execute(
            _INSERT_SQL,
            {
                "id": notification.id,
                "to_email": notification.to_email,
                "message": notification.message,
                "action_route": notification.action_route,
                "is_read": notification.is_read,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Notification insert returned no rows")
        return _row_to_notification(row)

    async def list_for_recipient(
        self, db: AsyncSession, to_email: str
    ) -> list[Notification]:
        result = await db.execute(_LIST_FOR_RECIPIENT_SQL, {"to_email": to_email})
        return [_row_to_notification(row) for row in result.fetchall()]
