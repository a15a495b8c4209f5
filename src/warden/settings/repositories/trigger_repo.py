"""
Repository for the triggers table.

Keyword groups and the reply template are stored as JSON text columns.
"""

from __future__ import annotations

import json
from typing import List

import aiosqlite

from warden.datatypes.community_settings import Trigger, TriggerMessage
from warden.util.logger import get_logger

logger = get_logger("trigger_repo")


def _decode_keywords(raw: str) -> tuple:
    groups = json.loads(raw or "[]")
    return tuple(
        tuple(str(keyword) for keyword in group)
        for group in groups
        if isinstance(group, list)
    )


class TriggerRepository:
    """CRUD for the triggers table."""

    async def get_for_guild(self, conn: aiosqlite.Connection, guild_id: int) -> List[Trigger]:
        """Return the guild's triggers in evaluation order."""
        async with conn.execute(
            """
            SELECT trigger_id, keywords, message, cooldown_seconds, enabled
            FROM triggers
            WHERE guild_id = ?
            ORDER BY position, trigger_id
            """,
            (int(guild_id),),
        ) as cursor:
            rows = await cursor.fetchall()

        triggers: List[Trigger] = []
        for row in rows:
            try:
                triggers.append(
                    Trigger(
                        trigger_id=str(row[0]),
                        keywords=_decode_keywords(row[1]),
                        message=TriggerMessage.from_dict(json.loads(row[2] or "{}")),
                        cooldown_seconds=int(row[3]),
                        enabled=bool(row[4]),
                    )
                )
            except (ValueError, TypeError):
                logger.warning("[TRIGGER REPO] Skipping malformed trigger %s in guild %s", row[0], guild_id)
        return triggers

    async def upsert(
        self, conn: aiosqlite.Connection, guild_id: int, trigger: Trigger, position: int = 0
    ) -> None:
        await conn.execute(
            """
            INSERT INTO triggers (trigger_id, guild_id, position, keywords, message, cooldown_seconds, enabled)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(trigger_id) DO UPDATE SET
                guild_id         = excluded.guild_id,
                position         = excluded.position,
                keywords         = excluded.keywords,
                message          = excluded.message,
                cooldown_seconds = excluded.cooldown_seconds,
                enabled          = excluded.enabled
            """,
            (
                trigger.trigger_id,
                int(guild_id),
                position,
                json.dumps([list(group) for group in trigger.keywords]),
                json.dumps(trigger.message.to_dict()),
                int(trigger.cooldown_seconds),
                1 if trigger.enabled else 0,
            ),
        )

    async def delete(self, conn: aiosqlite.Connection, trigger_id: str) -> None:
        await conn.execute("DELETE FROM triggers WHERE trigger_id = ?", (trigger_id,))
