"""
Database schema initialization and version tracking.

Each entity of the pipeline lives in its own table and is accessed by key:
community settings and their role/link references, triggers, phrase rules,
auto slow-mode configs, trigger opt-outs and name overrides.
"""

import aiosqlite
from warden.util.logger import get_logger

logger = get_logger("database_schema")

SCHEMA_VERSION = 1


class SchemaManager:
    """Creates tables and indexes and records the schema version."""

    @staticmethod
    async def initialize_schema(db: aiosqlite.Connection) -> None:
        """
        Create or update all database tables and indexes.

        Args:
            db: Open database connection
        """
        await SchemaManager._create_tables(db)
        await SchemaManager._create_indexes(db)
        await SchemaManager._update_schema_version(db)
        await db.commit()
        logger.info("[SCHEMA] Database schema initialized")

    @staticmethod
    async def _create_tables(db: aiosqlite.Connection) -> None:
        await db.execute("""
            CREATE TABLE IF NOT EXISTS community_settings (
                guild_id INTEGER PRIMARY KEY,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        # kind: mentor | helper | moderator | ignored
        await db.execute("""
            CREATE TABLE IF NOT EXISTS community_roles (
                guild_id INTEGER NOT NULL,
                kind TEXT NOT NULL,
                role_id INTEGER NOT NULL,
                PRIMARY KEY (guild_id, kind, role_id),
                FOREIGN KEY (guild_id) REFERENCES community_settings(guild_id) ON DELETE CASCADE
            )
        """)

        # kind: role | user | channel
        await db.execute("""
            CREATE TABLE IF NOT EXISTS link_permissions (
                guild_id INTEGER NOT NULL,
                kind TEXT NOT NULL,
                target_id INTEGER NOT NULL,
                PRIMARY KEY (guild_id, kind, target_id),
                FOREIGN KEY (guild_id) REFERENCES community_settings(guild_id) ON DELETE CASCADE
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS triggers (
                trigger_id TEXT PRIMARY KEY,
                guild_id INTEGER NOT NULL,
                position INTEGER NOT NULL DEFAULT 0,
                keywords TEXT NOT NULL DEFAULT '[]',
                message TEXT NOT NULL DEFAULT '{}',
                cooldown_seconds INTEGER NOT NULL DEFAULT 0,
                enabled INTEGER NOT NULL DEFAULT 1,
                FOREIGN KEY (guild_id) REFERENCES community_settings(guild_id) ON DELETE CASCADE
            )
        """)

        # guild_id NULL marks a global rule
        await db.execute("""
            CREATE TABLE IF NOT EXISTS phrase_rules (
                rule_id INTEGER PRIMARY KEY AUTOINCREMENT,
                guild_id INTEGER,
                phrase TEXT NOT NULL,
                match_threshold REAL NOT NULL DEFAULT 100,
                log_channel_id INTEGER NOT NULL
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS autoslow_configs (
                channel_id INTEGER PRIMARY KEY,
                min_delay INTEGER NOT NULL,
                max_delay INTEGER NOT NULL,
                target_msgs_per_sec REAL NOT NULL,
                min_change INTEGER NOT NULL DEFAULT 0,
                min_change_rate REAL NOT NULL DEFAULT 0,
                enabled INTEGER NOT NULL DEFAULT 1
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS trigger_opt_outs (
                guild_id INTEGER NOT NULL,
                user_id INTEGER NOT NULL,
                trigger_id TEXT NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                PRIMARY KEY (guild_id, user_id, trigger_id)
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS name_overrides (
                user_id INTEGER NOT NULL,
                guild_id INTEGER NOT NULL,
                name TEXT NOT NULL,
                PRIMARY KEY (user_id, guild_id)
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS schema_version (
                version INTEGER PRIMARY KEY,
                applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

    @staticmethod
    async def _create_indexes(db: aiosqlite.Connection) -> None:
        await db.execute(
            "CREATE INDEX IF NOT EXISTS idx_triggers_guild ON triggers(guild_id, position)"
        )
        await db.execute(
            "CREATE INDEX IF NOT EXISTS idx_phrase_rules_guild ON phrase_rules(guild_id)"
        )

    @staticmethod
    async def _update_schema_version(db: aiosqlite.Connection) -> None:
        await db.execute(
            "INSERT OR IGNORE INTO schema_version (version) VALUES (?)",
            (SCHEMA_VERSION,),
        )
