"""
Process-lifetime cache of community settings.

A miss performs one upsert-and-populate load through
:class:`CommunitySettingsService`; concurrent misses for the same guild await
the same in-flight load instead of issuing duplicate store calls. Hits are
served from memory without I/O. Every settings write made through the service
invalidates the guild's entry, and a load that was in flight at that moment is
not cached.
"""

from __future__ import annotations

import asyncio
from typing import Dict, List

from warden.datatypes.community_settings import CommunitySettings
from warden.settings.community_settings_service import CommunitySettingsService
from warden.util.logger import get_logger

logger = get_logger("settings_cache")


class SettingsCache:
    """Lazy load-or-create cache keyed by guild id."""

    def __init__(self, service: CommunitySettingsService) -> None:
        self._service = service
        self._settings: Dict[int, CommunitySettings] = {}
        self._in_flight: Dict[int, asyncio.Task] = {}
        service.add_change_listener(self.invalidate)

    def get(self, guild_id: int) -> CommunitySettings | None:
        """Cached settings for the guild, or None. Never touches the store."""
        return self._settings.get(guild_id)

    def cached_ids(self) -> List[int]:
        return list(self._settings.keys())

    async def resolve(self, guild_id: int) -> CommunitySettings:
        """
        Return the guild's settings, loading (and creating) them on first use.

        Raises:
            StorageUnavailable: The load failed. Nothing is cached in that case.
        """
        cached = self._settings.get(guild_id)
        if cached is not None:
            return cached

        task = self._in_flight.get(guild_id)
        if task is None:
            task = asyncio.get_running_loop().create_task(self._load(guild_id))
            self._in_flight[guild_id] = task

        # shield: a cancelled waiter must not cancel the load other waiters share
        return await asyncio.shield(task)

    async def _load(self, guild_id: int) -> CommunitySettings:
        try:
            settings = await self._service.load_or_create(guild_id)
            if self._in_flight.get(guild_id) is asyncio.current_task():
                self._settings[guild_id] = settings
                logger.info("[SETTINGS CACHE] Setting sync: store -> cache (%s)", guild_id)
            return settings
        finally:
            if self._in_flight.get(guild_id) is asyncio.current_task():
                del self._in_flight[guild_id]

    def invalidate(self, guild_id: int) -> bool:
        """Drop the cached entry so the next resolve reloads it. Returns True if one existed."""
        # a load already running may have read the old rows
        self._in_flight.pop(guild_id, None)
        removed = self._settings.pop(guild_id, None) is not None
        if removed:
            logger.debug("[SETTINGS CACHE] Invalidated settings for guild %s", guild_id)
        return removed

    def clear(self) -> None:
        self._settings.clear()
