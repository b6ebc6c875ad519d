"""mt_ledger REST API: caller's own balance and audit history."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.mt_common.database import get_db_session
from src.mt_common.enums import LedgerEntryType
from src.mt_common.response import ApiResponse, respond
from src.mt_gateway.auth.dependencies import get_current_user
from src.mt_gateway.user.db_models import UserModel
from src.mt_ledger.application.service import LedgerApplicationService

router = APIRouter(prefix="/ledger", tags=["ledger"])

_service = LedgerApplicationService()


@router.get("/balance")
async def get_balance(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.get_balance(db, current_user.email)
    return respond(request, data.model_dump())


@router.get("")
async def list_ledger(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    cursor: str | None = Query(None, description="Pagination cursor (opaque Base64)"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
    entry_type: LedgerEntryType | None = Query(None, description="Filter by LedgerEntryType"),
) -> ApiResponse:
    data = await _service.list_ledger(
        db,
        current_user.email,
        cursor,
        limit,
        entry_type.value if entry_type else None,
    )
    return respond(request, data.model_dump())
