"""
Persistent storage for trigger opt-outs ("don't remind me again").
"""

from __future__ import annotations

import aiosqlite


class OptOutRepo:
    """Low-level CRUD for the ``trigger_opt_outs`` table."""

    @staticmethod
    async def add(conn: aiosqlite.Connection, guild_id: int, user_id: int, trigger_id: str) -> None:
        await conn.execute(
            """
            INSERT OR IGNORE INTO trigger_opt_outs (guild_id, user_id, trigger_id)
            VALUES (?, ?, ?)
            """,
            (int(guild_id), int(user_id), str(trigger_id)),
        )

    @staticmethod
    async def remove(conn: aiosqlite.Connection, guild_id: int, user_id: int, trigger_id: str) -> None:
        await conn.execute(
            "DELETE FROM trigger_opt_outs WHERE guild_id = ? AND user_id = ? AND trigger_id = ?",
            (int(guild_id), int(user_id), str(trigger_id)),
        )

    @staticmethod
    async def exists(conn: aiosqlite.Connection, guild_id: int, user_id: int, trigger_id: str) -> bool:
        """Return True if the user opted out of the trigger in this guild."""
        cursor = await conn.execute(
            """
            SELECT 1 FROM trigger_opt_outs
            WHERE guild_id = ? AND user_id = ? AND trigger_id = ? LIMIT 1
            """,
            (int(guild_id), int(user_id), str(trigger_id)),
        )
        return await cursor.fetchone() is not None
