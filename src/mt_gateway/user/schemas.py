"""Pydantic request/response schemas for mt_gateway.

All responses are wrapped in ApiResponse at the router layer.
"""

from typing import Literal

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.mt_common.datetime_utils import to_iso
from src.mt_common.enums import Role
from src.mt_common.identity import normalize_email
from src.mt_gateway.user.db_models import UserModel


class RegisterUserRequest(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=128)
    photo_url: str | None = Field(default=None, max_length=1024)
    # Admins are only ever appointed through PATCH /users/role/{id}.
    role: Literal["buyer", "worker"]

    @field_validator("email")
    @classmethod
    def canonical_email(cls, value: str) -> str:
        return normalize_email(value)


class TokenRequest(BaseModel):
    email: EmailStr

    @field_validator("email")
    @classmethod
    def canonical_email(cls, value: str) -> str:
        return normalize_email(value)


class UpdateRoleRequest(BaseModel):
    role: Role


class UserResponse(BaseModel):
    id: str
    email: str
    name: str
    photo_url: str | None
    role: str
    coins: int
    created_at: str | None

    @classmethod
    def from_model(cls, user: UserModel, coins: int | None = None) -> "UserResponse":
        return cls(
            id=str(user.id),
            email=user.email,
            name=user.name,
            photo_url=user.photo_url,
            role=user.role,
            coins=user.coins if coins is None else coins,
            created_at=to_iso(user.created_at),
        )


class RegisterUserResponse(BaseModel):
    user: UserResponse
    created: bool


class TokenResponse(BaseModel):
    token: str
    token_type: str = "Bearer"
    expires_in: int


class RoleResponse(BaseModel):
    role: str
    coins: int


class TopWorkerResponse(BaseModel):
    name: str
    email: str
    photo_url: str | None
    coins: int
