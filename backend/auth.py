"""
Authentication for Waypoint.

Sessions are issued by the external identity provider as HS256 JWTs
(`sub` = open id, optional `name`, `email`, `loginMethod`). We only verify
them and upsert the user the first time an identity shows up.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Annotated

import jwt
from fastapi import Cookie, Header, HTTPException, status

from backend import config
from backend.models.user import User
from backend.repos.user_repo import UserRepo

user_repo = UserRepo()


def create_jwt(open_id: str, name: str | None = None, email: str | None = None, hours: int = 24) -> str:
    """
    Sign a session token the way the identity provider does.
    Used by scripts and tests; production tokens come from the provider.

    Args:
        open_id: Identity provider subject
        name: Optional display name claim
        email: Optional email claim
        hours: Lifetime

    Returns:
        Signed JWT string
    """
    now = datetime.now(UTC)
    payload = {"sub": open_id, "iat": now, "exp": now + timedelta(hours=hours)}
    if name:
        payload["name"] = name
    if email:
        payload["email"] = email
    return jwt.encode(payload, config.settings.JWT_SECRET, algorithm=config.settings.JWT_ALGORITHM)


def decode_jwt(token: str) -> dict:
    """
    Decode and verify a JWT.

    Args:
        token: JWT string to decode

    Returns:
        Decoded payload

    Raises:
        HTTPException: If token is invalid or expired
    """
    try:
        return jwt.decode(token, config.settings.JWT_SECRET, algorithms=[config.settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session expired. Please sign in again.",
        ) from e
    except jwt.InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid session token. Please sign in again.",
        ) from e


def _extract_token(session: str | None, authorization: str | None) -> str | None:
    # Bearer header wins over the cookie
    if authorization and authorization.startswith("Bearer "):
        return authorization.removeprefix("Bearer ").strip() or None
    return session or None


async def _user_from_token(token: str) -> User:
    payload = decode_jwt(token)
    open_id = payload.get("sub")
    if not open_id or not isinstance(open_id, str):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid session token. Please sign in again.",
        )
    return await user_repo.upsert(
        open_id,
        name=payload.get("name"),
        email=payload.get("email"),
        login_method=payload.get("loginMethod"),
    )


async def get_optional_user(
    session: Annotated[str | None, Cookie()] = None,
    authorization: Annotated[str | None, Header()] = None,
) -> User | None:
    """
    FastAPI dependency: the current user, or None when no token was sent.

    A token that is present but invalid still raises 401.
    """
    token = _extract_token(session, authorization)
    if token is None:
        return None
    return await _user_from_token(token)


async def get_current_user(
    session: Annotated[str | None, Cookie()] = None,
    authorization: Annotated[str | None, Header()] = None,
) -> User:
    """
    FastAPI dependency to get the current authenticated user.

    Raises:
        HTTPException: 401 if no token or the token is invalid
    """
    token = _extract_token(session, authorization)
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated. Please sign in.",
        )
    return await _user_from_token(token)
