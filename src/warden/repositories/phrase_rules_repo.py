"""
Persistent storage for banned-phrase rules.

Rules with a NULL guild_id apply to every guild.
"""

from __future__ import annotations

from typing import List

import aiosqlite

from warden.datatypes.moderation_datatypes import PhraseRule


class PhraseRulesRepo:
    """Low-level CRUD for the ``phrase_rules`` table."""

    @staticmethod
    async def get_for_guild(conn: aiosqlite.Connection, guild_id: int) -> List[PhraseRule]:
        """Return the guild's own rules followed by the global ones."""
        cursor = await conn.execute(
            """
            SELECT rule_id, guild_id, phrase, match_threshold, log_channel_id
            FROM phrase_rules
            WHERE guild_id = ? OR guild_id IS NULL
            ORDER BY guild_id IS NULL, rule_id
            """,
            (int(guild_id),),
        )
        rows = await cursor.fetchall()
        return [
            PhraseRule(
                rule_id=row[0],
                guild_id=row[1],
                phrase=row[2],
                match_threshold=float(row[3]),
                log_channel_id=int(row[4]),
            )
            for row in rows
        ]

    @staticmethod
    async def insert(conn: aiosqlite.Connection, rule: PhraseRule) -> int:
        """Insert a rule and return its id."""
        cursor = await conn.execute(
            """
            INSERT INTO phrase_rules (guild_id, phrase, match_threshold, log_channel_id)
            VALUES (?, ?, ?, ?)
            """,
            (rule.guild_id, rule.phrase, float(rule.match_threshold), int(rule.log_channel_id)),
        )
        return int(cursor.lastrowid)

    @staticmethod
    async def delete(conn: aiosqlite.Connection, rule_id: int) -> None:
        await conn.execute("DELETE FROM phrase_rules WHERE rule_id = ?", (int(rule_id),))
