"""Row updates that merge-patch JSON payload columns under a row lock."""

from __future__ import annotations

from typing import Any

import asyncpg

from backend.utils.merge_patch import merge_patch


async def update_row(
    conn: asyncpg.Connection,
    table: str,
    row_id: int,
    fields: dict[str, Any],
    patches: dict[str, dict[str, Any]],
    touch: bool = True,
) -> asyncpg.Record | None:
    """
    Update one row: plain column values plus JSON merge patches.

    The row is locked with SELECT ... FOR UPDATE so two concurrent patches
    to the same payload cannot lose each other's keys. Must be called
    inside a transaction.

    Args:
        conn: Connection inside an open transaction
        table: Table name (a constant from the calling repo, never user input)
        row_id: Primary key
        fields: Column -> new value for plain columns
        patches: JSON column -> merge patch
        touch: Bump updated_at

    Returns:
        The updated row, or None if it does not exist
    """
    # S608/B608: table and column names come from the repos, not from clients
    current = await conn.fetchrow(f"SELECT * FROM {table} WHERE id = $1 FOR UPDATE", row_id)  # nosec B608
    if current is None:
        return None

    updates = dict(fields)
    for column, patch in patches.items():
        updates[column] = merge_patch(current[column] or {}, patch)

    if not updates:
        return current

    set_clause = ", ".join(f"{k} = ${i + 2}" for i, k in enumerate(updates))
    if touch:
        set_clause += ", updated_at = now()"
    return await conn.fetchrow(
        f"""
        UPDATE {table}
        SET {set_clause}
        WHERE id = $1
        RETURNING *
        """,  # nosec B608
        row_id,
        *updates.values(),
    )
