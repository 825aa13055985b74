"""Session routes. Sign-in itself happens at the identity provider."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from backend import config
from backend.auth import get_optional_user
from backend.models.user import LogoutResponse, User, UserPublic

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.get("/me", status_code=200)
async def get_me(user: User | None = Depends(get_optional_user)) -> UserPublic | None:
    """The signed-in user, or null."""
    return UserPublic.from_user(user) if user else None


@router.post("/logout", status_code=200)
async def logout(response: Response) -> LogoutResponse:
    """Clear the session cookie."""
    response.delete_cookie(
        key=config.settings.SESSION_COOKIE,
        path="/",
        secure=config.settings.ENVIRONMENT != "development",
        httponly=True,
        samesite="lax",
    )
    return LogoutResponse()
