"""
CommunitySettingsService: orchestrates multi-repository settings persistence.

Responsibilities:
- Upsert-and-populate: create a guild's row with defaults if missing and read
  back the full settings (roles, link allow-list, triggers) in one transaction
- Replace role references, link permissions and triggers
- Delete all guild data
- Notify change listeners (the settings cache) after every successful write

All raw DB access is delegated to the repositories. The service never does SQL
itself. Store failures surface as :class:`StorageUnavailable`.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Dict, Iterable, List

from warden.database.db_connection import ConnectionManager, STORE_ERRORS
from warden.datatypes.community_settings import CommunitySettings, LinkPermissionSet, Trigger
from warden.errors import StorageUnavailable
from warden.settings.repositories import (
    CommunityRolesRepository,
    CommunitySettingsRepository,
    LinkPermissionsRepository,
    TriggerRepository,
)
from warden.util.logger import get_logger

logger = get_logger("community_settings_service")


class CommunitySettingsService:
    """
    Persistence of community settings across the four settings repositories.

    - No SQL here, only repository calls, transactions and locks.
    - Per-guild locks serialise writes for one guild while different guilds
      proceed concurrently.
    """

    def __init__(self, connection: ConnectionManager) -> None:
        self._connection = connection
        self._settings_repo = CommunitySettingsRepository()
        self._roles_repo = CommunityRolesRepository()
        self._link_repo = LinkPermissionsRepository()
        self._trigger_repo = TriggerRepository()
        self._per_guild_locks: Dict[int, asyncio.Lock] = {}
        self._change_listeners: List[Callable[[int], object]] = []

    def add_change_listener(self, listener: Callable[[int], object]) -> None:
        """Call ``listener(guild_id)`` after each committed settings write."""
        self._change_listeners.append(listener)

    def _lock_for(self, guild_id: int) -> asyncio.Lock:
        if guild_id not in self._per_guild_locks:
            self._per_guild_locks[guild_id] = asyncio.Lock()
        return self._per_guild_locks[guild_id]

    # ------------------------------------------------------------------
    # Load
    # ------------------------------------------------------------------

    async def load_or_create(self, guild_id: int) -> CommunitySettings:
        """
        Create the guild's settings row with defaults if needed and return the
        populated settings.

        Raises:
            StorageUnavailable: The store could not be read or written.
        """
        try:
            async with self._connection.transaction() as conn:
                created = await self._settings_repo.ensure(conn, guild_id)
                roles = await self._roles_repo.get_for_guild(conn, guild_id)
                link_permissions = await self._link_repo.get_for_guild(conn, guild_id)
                triggers = await self._trigger_repo.get_for_guild(conn, guild_id)
        except STORE_ERRORS as exc:
            logger.error("[COMMUNITY SETTINGS SERVICE] Failed to load guild %s: %s", guild_id, exc)
            raise StorageUnavailable(f"settings for guild {guild_id}") from exc

        if created:
            logger.info("[COMMUNITY SETTINGS SERVICE] Created default settings for guild %s", guild_id)

        return CommunitySettings(
            guild_id=guild_id,
            triggers=triggers,
            mentor_role_ids=roles["mentor"],
            helper_role_ids=roles["helper"],
            moderator_role_ids=roles["moderator"],
            ignored_role_ids=roles["ignored"],
            link_permissions=link_permissions,
        )

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    async def set_roles(self, guild_id: int, kind: str, role_ids: Iterable[int]) -> None:
        """Replace the role ids of one kind (mentor, helper, moderator, ignored)."""
        async with self._lock_for(guild_id):
            await self._write(guild_id, "roles", lambda conn: self._roles_repo.replace(conn, guild_id, kind, role_ids))

    async def set_link_permissions(self, guild_id: int, permissions: LinkPermissionSet) -> None:
        async with self._lock_for(guild_id):
            await self._write(guild_id, "link permissions", lambda conn: self._link_repo.replace(conn, guild_id, permissions))

    async def save_trigger(self, guild_id: int, trigger: Trigger, position: int = 0) -> None:
        async with self._lock_for(guild_id):
            await self._write(guild_id, "trigger", lambda conn: self._trigger_repo.upsert(conn, guild_id, trigger, position))

    async def delete_trigger(self, guild_id: int, trigger_id: str) -> None:
        async with self._lock_for(guild_id):
            await self._write(guild_id, "trigger delete", lambda conn: self._trigger_repo.delete(conn, trigger_id))

    async def delete(self, guild_id: int) -> None:
        """Delete all settings for a guild (related tables via CASCADE)."""
        async with self._lock_for(guild_id):
            await self._write(guild_id, "delete", lambda conn: self._settings_repo.delete(conn, guild_id))

    async def _write(self, guild_id: int, what: str, operation) -> None:
        try:
            async with self._connection.transaction() as conn:
                await self._settings_repo.ensure(conn, guild_id)
                await operation(conn)
        except STORE_ERRORS as exc:
            logger.exception("[COMMUNITY SETTINGS SERVICE] Failed to persist %s for guild %s", what, guild_id)
            raise StorageUnavailable(f"{what} for guild {guild_id}") from exc

        logger.debug("[COMMUNITY SETTINGS SERVICE] Persisted %s for guild %s", what, guild_id)
        for listener in self._change_listeners:
            listener(guild_id)
