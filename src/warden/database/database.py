"""
Database lifecycle: opens the shared connection and prepares the schema.
"""

from __future__ import annotations

from pathlib import Path

from warden.database.db_connection import ConnectionManager
from warden.database.db_schema import SchemaManager
from warden.util.logger import get_logger

logger = get_logger("database")


class Database:
    """
    Coordinator for the SQLite store.

    Lifecycle:
        1. ``await initialize()`` at startup (opens the connection, creates schema)
        2. hand ``connection`` to the repository-backed services
        3. ``await shutdown()`` at exit
    """

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self.connection = ConnectionManager()
        self._initialized = False

    async def initialize(self) -> bool:
        """
        Open the connection and create the schema.

        Returns:
            True if initialization succeeded, False otherwise
        """
        if self._initialized:
            logger.debug("[DATABASE] Already initialized, skipping")
            return True

        try:
            await self.connection.open(self.db_path)
            await SchemaManager.initialize_schema(self.connection.connection)
            self._initialized = True
            logger.info("[DATABASE] Database initialized at %s", self.db_path)
            return True
        except Exception as e:
            logger.error("[DATABASE] Database initialization failed: %s", e)
            return False

    async def shutdown(self) -> None:
        if not self._initialized:
            return

        await self.connection.close()
        self._initialized = False
        logger.info("[DATABASE] Database shutdown complete")
