"""Notification feed endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.mt_common.database import get_db_session
from src.mt_common.response import ApiResponse, respond
from src.mt_gateway.auth.dependencies import ensure_self, get_current_user
from src.mt_gateway.user.db_models import UserModel
from src.mt_notification.application.service import NotificationApplicationService

router = APIRouter(prefix="/notifications", tags=["notifications"])

_service = NotificationApplicationService()


@router.get("/{email}")
async def list_notifications(
    email: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    email = ensure_self(current_user, email)
    items = await _service.list_for_recipient(db, email)
    return respond(request, [i.model_dump() for i in items])
