"""
Persistent storage for remembered display names, keyed by (user, guild).
"""

from __future__ import annotations

import aiosqlite


class NameOverrideRepo:
    """Low-level CRUD for the ``name_overrides`` table."""

    @staticmethod
    async def get(conn: aiosqlite.Connection, user_id: int, guild_id: int) -> str | None:
        cursor = await conn.execute(
            "SELECT name FROM name_overrides WHERE user_id = ? AND guild_id = ?",
            (int(user_id), int(guild_id)),
        )
        row = await cursor.fetchone()
        return None if row is None else str(row[0])

    @staticmethod
    async def upsert(conn: aiosqlite.Connection, user_id: int, guild_id: int, name: str) -> None:
        await conn.execute(
            """
            INSERT INTO name_overrides (user_id, guild_id, name)
            VALUES (?, ?, ?)
            ON CONFLICT(user_id, guild_id) DO UPDATE SET name = excluded.name
            """,
            (int(user_id), int(guild_id), name),
        )
