"""User models for identity and authorization."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from backend.models.base import WireModel

UserRole = Literal["user", "admin"]


class User(WireModel):
    """Core user model. Represents a row in the users table."""

    id: int
    open_id: str
    name: str | None = None
    email: str | None = None
    login_method: str | None = None
    role: UserRole = "user"
    created_at: datetime
    updated_at: datetime
    last_signed_in: datetime


class UserPublic(WireModel):
    """What GET /api/auth/me returns."""

    id: int
    name: str | None
    email: str | None
    role: UserRole
    last_signed_in: datetime

    @classmethod
    def from_user(cls, user: User) -> UserPublic:
        """Convert internal User model to public API response."""
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            role=user.role,
            last_signed_in=user.last_signed_in,
        )


class LogoutResponse(WireModel):
    success: bool = True
