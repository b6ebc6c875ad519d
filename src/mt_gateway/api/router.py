"""Gateway API router: token issuance and the user directory.

All endpoints return ApiResponse. request_id is read from request.state
(injected by RequestLogMiddleware).

POST   /jwt                   issue an access token for a registered email
POST   /users                 first sign-in upsert (public)
GET    /users/role/{email}    role and coin balance (public)
GET    /top-workers           richest workers (public)
GET    /users                 all users (admin)
PATCH  /users/role/{id}       change role (admin)
DELETE /users/{id}            remove user (admin)
"""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.mt_common.database import get_db_session
from src.mt_common.response import ApiResponse, respond
from src.mt_gateway.auth.dependencies import require_admin
from src.mt_gateway.user.db_models import UserModel
from src.mt_gateway.user.schemas import RegisterUserRequest, TokenRequest, UpdateRoleRequest
from src.mt_gateway.user.service import UserService

router = APIRouter(tags=["users"])
_service = UserService()


@router.post("/jwt", summary="Issue access token")
async def issue_token(
    request: Request,
    body: TokenRequest,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse:
    data = await _service.issue_token(db, body.email)
    return respond(request, data.model_dump(), message="Token issued")


@router.post("/users", summary="Sign-in upsert")
async def register_user(
    request: Request,
    body: RegisterUserRequest,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse:
    data = await _service.register(db, body)
    message = "User registered successfully" if data.created else "User already exists"
    return respond(request, data.model_dump(), message=message)


@router.get("/users/role/{email}")
async def get_user_role(
    email: str,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse:
    data = await _service.get_role(db, email)
    return respond(request, data.model_dump())


@router.get("/top-workers")
async def top_workers(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse:
    rows = await _service.top_workers(db)
    return respond(request, [w.model_dump() for w in rows])


@router.get("/users")
async def list_users(
    request: Request,
    current_user: Annotated[UserModel, Depends(require_admin)],
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse:
    rows = await _service.list_users(db)
    return respond(request, [u.model_dump() for u in rows])


@router.patch("/users/role/{user_id}")
async def update_user_role(
    user_id: uuid.UUID,
    body: UpdateRoleRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(require_admin)],
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse:
    data = await _service.update_role(db, user_id, body.role)
    return respond(request, data.model_dump(), message="Role updated")


@router.delete("/users/{user_id}", status_code=status.HTTP_200_OK)
async def delete_user(
    user_id: uuid.UUID,
    request: Request,
    current_user: Annotated[UserModel, Depends(require_admin)],
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse:
    await _service.delete_user(db, user_id)
    return respond(request, {"user_id": str(user_id)}, message="User deleted")
