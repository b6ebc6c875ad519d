"""mt_submission REST endpoints.

POST  /submissions                       submit work against a task (worker)
GET   /my-submissions?email&page&size    worker's submissions, paginated
PATCH /submissions/{submission_id}       approve or reject (owning buyer)
GET   /submissions/to-review/{email}     pending submissions for a buyer
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.mt_common.database import get_db_session
from src.mt_common.response import ApiResponse, respond
from src.mt_gateway.auth.dependencies import ensure_self, require_buyer, require_worker
from src.mt_gateway.user.db_models import UserModel
from src.mt_submission.application.schemas import ReviewSubmissionRequest, SubmitWorkRequest
from src.mt_submission.application.service import SubmissionApplicationService

router = APIRouter(tags=["submissions"])

_service = SubmissionApplicationService()


@router.post("/submissions", status_code=status.HTTP_201_CREATED)
async def submit_work(
    body: SubmitWorkRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(require_worker)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.submit(db, current_user.email, current_user.name, body)
    return respond(request, data.model_dump(), message="Submission received")


@router.get("/my-submissions")
async def list_my_submissions(
    request: Request,
    current_user: Annotated[UserModel, Depends(require_worker)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    email: str = Query(...),
    page: int = Query(1, ge=1),
    size: int = Query(10, ge=1, le=100),
) -> ApiResponse:
    email = ensure_self(current_user, email)
    data = await _service.list_for_worker(db, email, page, size)
    return respond(request, data.model_dump())


@router.patch("/submissions/{submission_id}")
async def review_submission(
    submission_id: str,
    body: ReviewSubmissionRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(require_buyer)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.review(db, submission_id, body.status, current_user.email)
    return respond(request, data.model_dump(), message=f"Submission {body.status.value}")


@router.get("/submissions/to-review/{email}")
async def list_to_review(
    email: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(require_buyer)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    email = ensure_self(current_user, email)
    rows = await _service.list_to_review(db, email)
    return respond(request, [s.model_dump() for s in rows])
