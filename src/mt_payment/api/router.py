"""mt_payment REST endpoints.

POST /payments            record a coin purchase (buyer)
GET  /payments/{email}    buyer's purchase history
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.mt_common.database import get_db_session
from src.mt_common.response import ApiResponse, respond
from src.mt_gateway.auth.dependencies import ensure_self, require_buyer
from src.mt_gateway.user.db_models import UserModel
from src.mt_payment.application.schemas import RecordPaymentRequest
from src.mt_payment.application.service import PaymentApplicationService

router = APIRouter(tags=["payments"])

_service = PaymentApplicationService()


@router.post("/payments", status_code=status.HTTP_201_CREATED)
async def record_payment(
    body: RecordPaymentRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(require_buyer)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.record_payment(db, current_user.email, body)
    return respond(request, data.model_dump(), message="Payment recorded")


@router.get("/payments/{email}")
async def list_payments(
    email: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(require_buyer)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    email = ensure_self(current_user, email)
    rows = await _service.list_for_buyer(db, email)
    return respond(request, [p.model_dump() for p in rows])
