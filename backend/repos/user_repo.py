"""Repository for user operations."""

from __future__ import annotations

import asyncpg

from backend.config import settings
from backend.db import transaction
from backend.models.user import User


def _row_to_user(row: asyncpg.Record) -> User:
    """Convert a database row to a User model."""
    return User(
        id=row["id"],
        open_id=row["open_id"],
        name=row["name"],
        email=row["email"],
        login_method=row["login_method"],
        role=row["role"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        last_signed_in=row["last_signed_in"],
    )


class UserRepo:
    """All user-related database operations."""

    async def upsert(
        self,
        open_id: str,
        name: str | None = None,
        email: str | None = None,
        login_method: str | None = None,
    ) -> User:
        """
        Create the user on first sight, otherwise refresh profile fields and last_signed_in.
        The configured owner always ends up with the admin role.

        Args:
            open_id: Identity provider subject
            name: Display name (kept when None)
            email: Email address (kept when None)
            login_method: How the user signed in (kept when None)

        Returns:
            The stored User
        """
        if not open_id:
            raise ValueError("open_id is required for upsert")

        role = "admin" if settings.OWNER_OPEN_ID and open_id == settings.OWNER_OPEN_ID else None

        async with transaction() as conn:
            row = await conn.fetchrow(
                """
                INSERT INTO users (open_id, name, email, login_method, role)
                VALUES ($1, $2, $3, $4, COALESCE($5, 'user'))
                ON CONFLICT (open_id) DO UPDATE SET
                    name = COALESCE(EXCLUDED.name, users.name),
                    email = COALESCE(EXCLUDED.email, users.email),
                    login_method = COALESCE(EXCLUDED.login_method, users.login_method),
                    role = COALESCE($5, users.role),
                    last_signed_in = now(),
                    updated_at = now()
                RETURNING *
                """,
                open_id,
                name,
                email,
                login_method,
                role,
            )
            return _row_to_user(row)

    async def get_by_open_id(self, open_id: str) -> User | None:
        """
        Get a user by identity provider subject.

        Args:
            open_id: Identity provider subject

        Returns:
            User if found, None otherwise
        """
        async with transaction() as conn:
            row = await conn.fetchrow("SELECT * FROM users WHERE open_id = $1", open_id)
            return _row_to_user(row) if row else None

    async def get(self, user_id: int) -> User | None:
        async with transaction() as conn:
            row = await conn.fetchrow("SELECT * FROM users WHERE id = $1", user_id)
            return _row_to_user(row) if row else None
