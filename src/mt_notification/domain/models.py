"""Domain models for mt_notification: pure dataclasses, no business logic."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Notification:
    id: str
    to_email: str
    message: str
    action_route: str
    is_read: bool = False
    created_at: datetime | None = None
