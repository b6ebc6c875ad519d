"""Domain models for mt_submission: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime

from src.mt_common.enums import SubmissionStatus


@dataclass
class Submission:
    id: str
    task_id: str
    task_title: str
    payable_amount: int          # denormalized from the task at submit time
    worker_email: str
    worker_name: str
    buyer_email: str             # denormalized; the only allowed reviewer
    buyer_name: str
    submission_details: str
    status: str                  # SubmissionStatus value
    submitted_at: datetime | None = None
    reviewed_at: datetime | None = None

    @property
    def is_pending(self) -> bool:
        return self.status == SubmissionStatus.PENDING.value
