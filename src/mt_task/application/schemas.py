"""Pydantic request/response schemas for mt_task."""

from datetime import date

from pydantic import BaseModel, Field

from src.mt_common.datetime_utils import to_iso
from src.mt_task.domain.models import Task

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class CreateTaskRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    detail: str = Field(..., min_length=1, max_length=5000)
    submission_info: str = Field("", max_length=2000, description="What workers must submit")
    image_url: str | None = Field(None, max_length=1024)
    required_workers: int = Field(..., gt=0, le=10_000)
    payable_amount: int = Field(..., gt=0, le=1_000_000, description="Coins per worker")
    completion_date: date


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class TaskResponse(BaseModel):
    id: str
    buyer_email: str
    buyer_name: str
    title: str
    detail: str
    submission_info: str
    image_url: str | None
    payable_amount: int
    required_workers: int
    completion_date: str
    created_at: str | None

    @classmethod
    def from_domain(cls, task: Task) -> "TaskResponse":
        return cls(
            id=task.id,
            buyer_email=task.buyer_email,
            buyer_name=task.buyer_name,
            title=task.title,
            detail=task.detail,
            submission_info=task.submission_info,
            image_url=task.image_url,
            payable_amount=task.payable_amount,
            required_workers=task.required_workers,
            completion_date=task.completion_date.isoformat(),
            created_at=to_iso(task.created_at),
        )


class CreateTaskResponse(BaseModel):
    task: TaskResponse
    reserved_coins: int
    buyer_balance: int


class DeleteTaskResponse(BaseModel):
    task_id: str
    refunded_coins: int
    deleted_submissions: int
    buyer_balance: int
