"""mt_withdrawal REST endpoints.

POST  /withdrawals                    request a payout (worker)
GET   /my-withdrawals/{email}         worker's own requests
GET   /withdrawals/pending            pending queue (admin)
PATCH /withdrawals/{withdrawal_id}    approve or deny (admin)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.mt_common.database import get_db_session
from src.mt_common.response import ApiResponse, respond
from src.mt_gateway.auth.dependencies import ensure_self, require_admin, require_worker
from src.mt_gateway.user.db_models import UserModel
from src.mt_withdrawal.application.schemas import SettleWithdrawalRequest, WithdrawalRequest
from src.mt_withdrawal.application.service import WithdrawalApplicationService

router = APIRouter(tags=["withdrawals"])

_service = WithdrawalApplicationService()


@router.post("/withdrawals", status_code=status.HTTP_201_CREATED)
async def request_withdrawal(
    body: WithdrawalRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(require_worker)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.request_withdrawal(db, current_user.email, current_user.name, body)
    return respond(request, data.model_dump(), message="Withdrawal requested")


@router.get("/my-withdrawals/{email}")
async def list_my_withdrawals(
    email: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(require_worker)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    email = ensure_self(current_user, email)
    rows = await _service.list_for_worker(db, email)
    return respond(request, [w.model_dump() for w in rows])


@router.get("/withdrawals/pending")
async def list_pending_withdrawals(
    request: Request,
    current_user: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    rows = await _service.list_pending(db)
    return respond(request, [w.model_dump() for w in rows])


@router.patch("/withdrawals/{withdrawal_id}")
async def settle_withdrawal(
    withdrawal_id: str,
    body: SettleWithdrawalRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.settle(db, withdrawal_id, body.status, current_user.email)
    return respond(request, data.model_dump(), message=f"Withdrawal {body.status.value}")
