"""Domain models for mt_task: pure dataclasses, no business logic."""

from dataclasses import dataclass
from datetime import date, datetime


@dataclass
class Task:
    id: str
    buyer_email: str
    buyer_name: str
    title: str
    detail: str
    submission_info: str
    image_url: str | None
    payable_amount: int       # coins per approved submission
    required_workers: int     # open slots; never negative
    completion_date: date
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def reserved_coins(self) -> int:
        """Coins still held for the open slots (pending submissions excluded)."""
        return self.required_workers * self.payable_amount
