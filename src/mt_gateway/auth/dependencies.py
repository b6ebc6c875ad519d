"""FastAPI dependencies: get_current_user and role guards.

Usage in any protected router:
    from src.mt_gateway.auth.dependencies import get_current_user, require_buyer

    @router.post("/tasks")
    async def create(user: UserModel = Depends(require_buyer)):
        ...
"""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.mt_common.database import get_db_session
from src.mt_common.enums import Role
from src.mt_common.errors import ForbiddenError, UnauthenticatedError
from src.mt_common.identity import normalize_email
from src.mt_gateway.auth.jwt_handler import decode_token
from src.mt_gateway.user.db_models import UserModel

# auto_error=False: a missing header must surface as our 401 envelope,
# not FastAPI's default 403.
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> UserModel:
    """Validate the Bearer token and return the user it names.

    Raises UnauthenticatedError (401) if the header is missing, the token is
    invalid or expired, or the subject is no longer in the user directory.
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise UnauthenticatedError()

    payload = decode_token(credentials.credentials)

    result = await db.execute(select(UserModel).where(UserModel.email == payload["sub"]))
    user = result.scalar_one_or_none()
    if user is None:
        raise UnauthenticatedError()
    return user


class RequireRole:
    """Dependency that admits only users whose directory role equals `role`."""

    def __init__(self, role: Role) -> None:
        self.role = role

    async def __call__(
        self, current_user: UserModel = Depends(get_current_user)
    ) -> UserModel:
        if current_user.role != self.role.value:
            raise ForbiddenError()
        return current_user


require_admin = RequireRole(Role.ADMIN)
require_buyer = RequireRole(Role.BUYER)
require_worker = RequireRole(Role.WORKER)


def ensure_self(current_user: UserModel, email: str) -> str:
    """Endpoints keyed by {email} only serve the caller's own records.

    Returns the address in its stored, lowercased form.
    """
    email = normalize_email(email)
    if current_user.email != email:
        raise ForbiddenError()
    return email
