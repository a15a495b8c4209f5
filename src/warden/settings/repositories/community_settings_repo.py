"""
Repository for the core community_settings table.

Handles only the community_settings row itself; related tables have their
own repositories.
"""

from __future__ import annotations

import aiosqlite


class CommunitySettingsRepository:
    """CRUD for the community_settings table only."""

    async def ensure(self, conn: aiosqlite.Connection, guild_id: int) -> bool:
        """Insert the row with column defaults if missing. Returns True when created."""
        cursor = await conn.execute(
            "INSERT OR IGNORE INTO community_settings (guild_id) VALUES (?)",
            (int(guild_id),),
        )
        return cursor.rowcount > 0

    async def delete(self, conn: aiosqlite.Connection, guild_id: int) -> None:
        """Delete a community row (CASCADE removes related rows)."""
        await conn.execute(
            "DELETE FROM community_settings WHERE guild_id = ?",
            (int(guild_id),),
        )
