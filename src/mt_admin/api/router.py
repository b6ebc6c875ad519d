"""Admin and dashboard REST API.

GET  /admin-stats              platform totals (admin)
POST /admin/verify-ledger      run ledger invariant checks (admin)
GET  /buyer-stats/{email}      buyer dashboard
GET  /worker-stats/{email}     worker dashboard
"""
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.mt_admin.application.service import AdminService
from src.mt_common.database import get_db_session
from src.mt_common.response import ApiResponse, respond
from src.mt_gateway.auth.dependencies import (
    ensure_self,
    require_admin,
    require_buyer,
    require_worker,
)
from src.mt_gateway.user.db_models import UserModel

router = APIRouter(tags=["admin"])
_service = AdminService()


@router.get("/admin-stats")
async def admin_stats(
    request: Request,
    current_user: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    return respond(request, await _service.platform_stats(db))


@router.post("/admin/verify-ledger")
async def verify_ledger(
    request: Request,
    current_user: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    return respond(request, await _service.verify_ledger(db))


@router.get("/buyer-stats/{email}")
async def buyer_stats(
    email: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(require_buyer)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    email = ensure_self(current_user, email)
    return respond(request, await _service.buyer_stats(db, email))


@router.get("/worker-stats/{email}")
async def worker_stats(
    email: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(require_worker)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    email = ensure_self(current_user, email)
    return respond(request, await _service.worker_stats(db, email))
