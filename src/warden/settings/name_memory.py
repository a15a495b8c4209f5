"""
Remembered display names.

Stores the name a member should be shown under in a guild, typically the
ASCII rendition of a username that uses decorative unicode.
"""

from __future__ import annotations

from warden.database.db_connection import ConnectionManager, STORE_ERRORS
from warden.errors import StorageUnavailable
from warden.repositories.name_override_repo import NameOverrideRepo
from warden.util.format_utils import unicode_to_ascii
from warden.util.logger import get_logger

logger = get_logger("name_memory")


class NameMemory:
    def __init__(self, connection: ConnectionManager) -> None:
        self._connection = connection

    async def get_name(self, user_id: int, guild_id: int) -> str:
        """Remembered name, or an empty string when none is stored."""
        try:
            async with self._connection.read() as conn:
                return await NameOverrideRepo.get(conn, user_id, guild_id) or ""
        except STORE_ERRORS as exc:
            raise StorageUnavailable(f"name lookup for user {user_id}") from exc

    async def set_name(self, user_id: int, guild_id: int, name: str) -> None:
        try:
            async with self._connection.transaction() as conn:
                await NameOverrideRepo.upsert(conn, user_id, guild_id, name)
        except STORE_ERRORS as exc:
            raise StorageUnavailable(f"name write for user {user_id}") from exc
        logger.debug("[NAME MEMORY] Stored name for user %s in guild %s", user_id, guild_id)

    async def remember_ascii_name(self, user_id: int, guild_id: int, username: str) -> str:
        """
        Store the ASCII form of ``username`` and return it. Nothing is
        written when that name is already the one remembered.

        Returns an empty string (and stores nothing) when fewer than three
        ASCII characters survive the conversion.
        """
        name = unicode_to_ascii(username)
        if name and name != await self.get_name(user_id, guild_id):
            await self.set_name(user_id, guild_id, name)
        return name
