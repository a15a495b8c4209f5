"""Repository for the link_permissions allow-list table."""

from __future__ import annotations

from typing import Dict, Set

import aiosqlite

from warden.datatypes.community_settings import LinkPermissionSet

LINK_PERMISSION_KINDS = ("role", "user", "channel")


class LinkPermissionsRepository:
    """Reads and replaces the link allow-list of a guild."""

    async def get_for_guild(self, conn: aiosqlite.Connection, guild_id: int) -> LinkPermissionSet:
        grouped: Dict[str, Set[int]] = {kind: set() for kind in LINK_PERMISSION_KINDS}
        async with conn.execute(
            "SELECT kind, target_id FROM link_permissions WHERE guild_id = ?",
            (int(guild_id),),
        ) as cursor:
            rows = await cursor.fetchall()

        for kind, target_id in rows:
            if kind in grouped:
                grouped[kind].add(int(target_id))

        return LinkPermissionSet(
            allowed_role_ids=frozenset(grouped["role"]),
            allowed_user_ids=frozenset(grouped["user"]),
            exempt_channel_ids=frozenset(grouped["channel"]),
        )

    async def replace(
        self, conn: aiosqlite.Connection, guild_id: int, permissions: LinkPermissionSet
    ) -> None:
        await conn.execute(
            "DELETE FROM link_permissions WHERE guild_id = ?",
            (int(guild_id),),
        )
        rows = (
            [(int(guild_id), "role", role_id) for role_id in permissions.allowed_role_ids]
            + [(int(guild_id), "user", user_id) for user_id in permissions.allowed_user_ids]
            + [(int(guild_id), "channel", channel_id) for channel_id in permissions.exempt_channel_ids]
        )
        await conn.executemany(
            "INSERT INTO link_permissions (guild_id, kind, target_id) VALUES (?, ?, ?)",
            rows,
        )
