"""User directory service: sign-in upsert, token issuance, admin management.

Every write runs in one transaction owned by this service; the sign-up bonus
is credited through the LedgerStore in the same transaction as the user row.
"""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.mt_common.enums import LedgerEntryType, Role
from src.mt_common.errors import UserNotFoundError
from src.mt_common.identity import normalize_email
from src.mt_gateway.auth.jwt_handler import create_access_token
from src.mt_gateway.user.db_models import UserModel
from src.mt_gateway.user.schemas import (
    RegisterUserRequest,
    RegisterUserResponse,
    RoleResponse,
    TokenResponse,
    TopWorkerResponse,
    UserResponse,
)
from src.mt_ledger.domain.store import LedgerStore

logger = logging.getLogger(__name__)


def signup_bonus(role: str) -> int:
    if role == Role.BUYER.value:
        return settings.BUYER_SIGNUP_COINS
    if role == Role.WORKER.value:
        return settings.WORKER_SIGNUP_COINS
    return 0


class UserService:
    """Stateless service; instantiate once, reuse across requests."""

    def __init__(self, ledger: LedgerStore | None = None) -> None:
        self._ledger = ledger or LedgerStore()

    async def _find_by_email(self, db: AsyncSession, email: str) -> UserModel | None:
        result = await db.execute(select(UserModel).where(UserModel.email == email))
        return result.scalar_one_or_none()

    async def _find_by_id(self, db: AsyncSession, user_id: uuid.UUID) -> UserModel | None:
        result = await db.execute(select(UserModel).where(UserModel.id == user_id))
        return result.scalar_one_or_none()

    async def register(
        self, db: AsyncSession, req: RegisterUserRequest
    ) -> RegisterUserResponse:
        """Create the user on first sign-in; later sign-ins return the existing row.

        The requested role and profile fields are ignored for an existing user.
        """
        existing = await self._find_by_email(db, req.email)
        if existing is not None:
            return RegisterUserResponse(user=UserResponse.from_model(existing), created=False)

        try:
            user = UserModel(
                email=req.email,
                name=req.name,
                photo_url=req.photo_url,
                role=req.role,
                coins=0,
            )
            db.add(user)
            await db.flush()  # the ledger UPDATE needs the row
            await db.refresh(user)  # load server defaults (id, created_at)

            balance = 0
            bonus = signup_bonus(req.role)
            if bonus > 0:
                balance = await self._ledger.adjust(
                    db,
                    user.email,
                    bonus,
                    LedgerEntryType.SIGNUP_BONUS,
                    reference_type="USER",
                    reference_id=str(user.id),
                    description=f"Sign-up bonus ({req.role})",
                )
            data = UserResponse.from_model(user, coins=balance)
            await db.commit()
        except IntegrityError:
            # Lost a race against a concurrent first sign-in for the same email.
            await db.rollback()
            winner = await self._find_by_email(db, req.email)
            if winner is None:
                raise
            return RegisterUserResponse(user=UserResponse.from_model(winner), created=False)
        except Exception:
            await db.rollback()
            raise

        logger.info("Registered %s as %s with %d coins", req.email, req.role, balance)
        return RegisterUserResponse(user=data, created=True)

    async def issue_token(self, db: AsyncSession, email: str) -> TokenResponse:
        user = await self._find_by_email(db, email)
        if user is None:
            raise UserNotFoundError(email)
        return TokenResponse(
            token=create_access_token(user.email),
            expires_in=settings.JWT_EXPIRE_MINUTES * 60,
        )

    async def get_role(self, db: AsyncSession, email: str) -> RoleResponse:
        email = normalize_email(email)
        user = await self._find_by_email(db, email)
        if user is None:
            raise UserNotFoundError(email)
        return RoleResponse(role=user.role, coins=user.coins)

    async def list_users(self, db: AsyncSession) -> list[UserResponse]:
        result = await db.execute(select(UserModel).order_by(UserModel.created_at.desc()))
        return [UserResponse.from_model(u) for u in result.scalars().all()]

    async def update_role(
        self, db: AsyncSession, user_id: uuid.UUID, role: Role
    ) -> UserResponse:
        try:
            user = await self._find_by_id(db, user_id)
            if user is None:
                raise UserNotFoundError(str(user_id))
            user.role = role.value
            await db.flush()
            data = UserResponse.from_model(user)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("User %s role set to %s", user_id, role.value)
        return data

    async def delete_user(self, db: AsyncSession, user_id: uuid.UUID) -> None:
        """Remove the directory entry. Ledger history and authored records stay.

        A remaining balance is closed out with an ACCOUNT_CLOSURE entry first,
        so the email's ledger sums to zero and may be registered again.
        """
        try:
            result = await db.execute(
                select(UserModel).where(UserModel.id == user_id).with_for_update()
            )
            user = result.scalar_one_or_none()
            if user is None:
                raise UserNotFoundError(str(user_id))
            email = user.email
            coins = await self._ledger.read(db, email)
            if coins > 0:
                await self._ledger.adjust(
                    db,
                    email,
                    -coins,
                    LedgerEntryType.ACCOUNT_CLOSURE,
                    reference_type="USER",
                    reference_id=str(user_id),
                    description="Account deleted by admin",
                )
            await db.delete(user)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.warning("Deleted user %s (%s), closing out %d coins", user_id, email, coins)

    async def top_workers(
        self, db: AsyncSession, limit: int | None = None
    ) -> list[TopWorkerResponse]:
        result = await db.execute(
            select(UserModel)
            .where(UserModel.role == Role.WORKER.value)
            .order_by(UserModel.coins.desc(), UserModel.created_at.asc())
            .limit(limit or settings.TOP_WORKERS_LIMIT)
        )
        return [
            TopWorkerResponse(name=u.name, email=u.email, photo_url=u.photo_url, coins=u.coins)
            for u in result.scalars().all()
        ]
