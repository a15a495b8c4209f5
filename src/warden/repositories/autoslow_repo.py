"""
Persistent storage for per-channel auto slow-mode configuration.
"""

from __future__ import annotations

import aiosqlite

from warden.datatypes.moderation_datatypes import AutoSlowConfig


class AutoSlowRepo:
    """Low-level CRUD for the ``autoslow_configs`` table."""

    @staticmethod
    async def upsert(conn: aiosqlite.Connection, config: AutoSlowConfig) -> None:
        """Insert or replace the config row (primary key = channel_id)."""
        await conn.execute(
            """
            INSERT INTO autoslow_configs (
                channel_id, min_delay, max_delay, target_msgs_per_sec,
                min_change, min_change_rate, enabled
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(channel_id) DO UPDATE SET
                min_delay           = excluded.min_delay,
                max_delay           = excluded.max_delay,
                target_msgs_per_sec = excluded.target_msgs_per_sec,
                min_change          = excluded.min_change,
                min_change_rate     = excluded.min_change_rate,
                enabled             = excluded.enabled
            """,
            (
                int(config.channel_id),
                int(config.min_delay),
                int(config.max_delay),
                float(config.target_msgs_per_sec),
                int(config.min_change),
                float(config.min_change_rate),
                1 if config.enabled else 0,
            ),
        )

    @staticmethod
    async def delete(conn: aiosqlite.Connection, channel_id: int) -> None:
        await conn.execute(
            "DELETE FROM autoslow_configs WHERE channel_id = ?",
            (int(channel_id),),
        )

    @staticmethod
    async def get(conn: aiosqlite.Connection, channel_id: int) -> AutoSlowConfig | None:
        cursor = await conn.execute(
            """
            SELECT channel_id, min_delay, max_delay, target_msgs_per_sec,
                   min_change, min_change_rate, enabled
            FROM autoslow_configs WHERE channel_id = ?
            """,
            (int(channel_id),),
        )
        row = await cursor.fetchone()
        if row is None:
            return None

        return AutoSlowConfig(
            channel_id=int(row[0]),
            min_delay=int(row[1]),
            max_delay=int(row[2]),
            target_msgs_per_sec=float(row[3]),
            min_change=int(row[4]),
            min_change_rate=float(row[5]),
            enabled=bool(row[6]),
        )
