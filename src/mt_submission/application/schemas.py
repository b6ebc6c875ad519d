"""Pydantic request/response schemas for mt_submission."""

from pydantic import BaseModel, Field

from src.mt_common.datetime_utils import to_iso
from src.mt_common.enums import ReviewDecision
from src.mt_submission.domain.models import Submission


class SubmitWorkRequest(BaseModel):
    task_id: str = Field(..., min_length=1, max_length=64)
    submission_details: str = Field(..., min_length=1, max_length=5000)


class ReviewSubmissionRequest(BaseModel):
    status: ReviewDecision


class SubmissionResponse(BaseModel):
    id: str
    task_id: str
    task_title: str
    payable_amount: int
    worker_email: str
    worker_name: str
    buyer_email: str
    buyer_name: str
    submission_details: str
    status: str
    submitted_at: str | None
    reviewed_at: str | None

    @classmethod
    def from_domain(cls, s: Submission) -> "SubmissionResponse":
        return cls(
            id=s.id,
            task_id=s.task_id,
            task_title=s.task_title,
            payable_amount=s.payable_amount,
            worker_email=s.worker_email,
            worker_name=s.worker_name,
            buyer_email=s.buyer_email,
            buyer_name=s.buyer_name,
            submission_details=s.submission_details,
            status=s.status,
            submitted_at=to_iso(s.submitted_at),
            reviewed_at=to_iso(s.reviewed_at),
        )


class SubmitWorkResponse(BaseModel):
    submission: SubmissionResponse
    task_required_workers: int


class ReviewResponse(BaseModel):
    submission: SubmissionResponse
    worker_balance: int | None       # set when approved
    task_required_workers: int | None  # set when rejected (slot restored)


class WorkerSubmissionsPage(BaseModel):
    total: int
    page: int
    size: int
    items: list[SubmissionResponse]
