"""
Link posting policy.

Detects URLs in message text and checks whether the author may post them in
the channel: an allowed role, an allowed user, or an exempt channel is
enough. Enforcement (deleting the message) is left to the pipeline, which
also exempts moderators.
"""

from __future__ import annotations

import re
from typing import List, Sequence

from warden.datatypes.moderation_datatypes import LinkScan
from warden.settings.settings_cache import SettingsCache

URL_PATTERN = re.compile(
    r"(?:https?://|www\.)[^\s<>]+"
    r"|\b(?:[a-z0-9-]+\.)+(?:com|net|org|gg|io|co|me|ly|xyz|app|dev|tv|link|gift)\b(?:/[^\s<>]*)?",
    re.IGNORECASE,
)


def detect(text: str) -> LinkScan:
    urls = tuple(match.group(0) for match in URL_PATTERN.finditer(text or ""))
    return LinkScan(has_urls=bool(urls), urls=urls)


class LinkPolicyGate:
    """Answers whether a member may post links in a channel."""

    def __init__(self, settings_cache: SettingsCache) -> None:
        self._settings_cache = settings_cache

    @staticmethod
    def detect(text: str) -> LinkScan:
        return detect(text)

    async def permitted(
        self,
        guild_id: int,
        channel_id: int,
        user_id: int,
        role_ids: Sequence[int] | List[int],
    ) -> bool:
        """
        Raises:
            StorageUnavailable: The guild's settings could not be resolved.
        """
        settings = await self._settings_cache.resolve(guild_id)
        return settings.link_permissions.allows(channel_id, user_id, tuple(role_ids))
