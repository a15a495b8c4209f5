"""Repository for the community_roles table (role references per kind)."""

from __future__ import annotations

from typing import Dict, FrozenSet, Iterable, Set

import aiosqlite

ROLE_KINDS = ("mentor", "helper", "moderator", "ignored")


class CommunityRolesRepository:
    """Reads and replaces the role ids a guild assigns to each kind."""

    async def get_for_guild(
        self, conn: aiosqlite.Connection, guild_id: int
    ) -> Dict[str, FrozenSet[int]]:
        """Return ``{kind: frozenset(role_ids)}`` with every kind present."""
        grouped: Dict[str, Set[int]] = {kind: set() for kind in ROLE_KINDS}
        async with conn.execute(
            "SELECT kind, role_id FROM community_roles WHERE guild_id = ?",
            (int(guild_id),),
        ) as cursor:
            rows = await cursor.fetchall()

        for kind, role_id in rows:
            grouped.setdefault(kind, set()).add(int(role_id))
        return {kind: frozenset(ids) for kind, ids in grouped.items()}

    async def replace(
        self, conn: aiosqlite.Connection, guild_id: int, kind: str, role_ids: Iterable[int]
    ) -> None:
        """Delete-then-insert the role ids of one kind."""
        if kind not in ROLE_KINDS:
            raise ValueError(f"Unknown role kind: {kind}")

        await conn.execute(
            "DELETE FROM community_roles WHERE guild_id = ? AND kind = ?",
            (int(guild_id), kind),
        )
        await conn.executemany(
            "INSERT INTO community_roles (guild_id, kind, role_id) VALUES (?, ?, ?)",
            [(int(guild_id), kind, int(role_id)) for role_id in set(role_ids)],
        )
