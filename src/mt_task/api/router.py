"""mt_task REST endpoints.

GET    /tasks                 open tasks (required_workers > 0)
GET    /tasks/{task_id}       single task
GET    /my-tasks/{email}      buyer's own tasks
POST   /tasks                 create task, reserving coins (buyer)
DELETE /tasks/{task_id}       delete own task, refunding reserved coins
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.mt_common.database import get_db_session
from src.mt_common.response import ApiResponse, respond
from src.mt_gateway.auth.dependencies import ensure_self, get_current_user, require_buyer
from src.mt_gateway.user.db_models import UserModel
from src.mt_task.application.schemas import CreateTaskRequest
from src.mt_task.application.service import TaskApplicationService

router = APIRouter(tags=["tasks"])

_service = TaskApplicationService()


@router.get("/tasks")
async def list_open_tasks(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    tasks = await _service.list_open_tasks(db)
    return respond(request, [t.model_dump() for t in tasks])


@router.get("/tasks/{task_id}")
async def get_task(
    task_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    task = await _service.get_task(db, task_id)
    return respond(request, task.model_dump())


@router.get("/my-tasks/{email}")
async def list_my_tasks(
    email: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(require_buyer)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    email = ensure_self(current_user, email)
    tasks = await _service.list_tasks_by_buyer(db, email)
    return respond(request, [t.model_dump() for t in tasks])


@router.post("/tasks", status_code=status.HTTP_201_CREATED)
async def create_task(
    body: CreateTaskRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(require_buyer)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.create_task(db, current_user.email, current_user.name, body)
    return respond(request, data.model_dump(), message="Task created")


@router.delete("/tasks/{task_id}")
async def delete_task(
    task_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.delete_task(db, task_id, current_user.email)
    return respond(request, data.model_dump(), message="Task deleted")
