"""
Invite link previews.

Every ``discord.gg/<code>`` in a message is looked up in its own detached
task and answered with a short summary of the target guild, or a generic
notice when the lookup fails. Lookups are never retried.
"""

from __future__ import annotations

import re
from typing import List

import discord

from warden.errors import ResolutionFailure
from warden.util.background import BackgroundTasks
from warden.util.discord_utils import safe_reply
from warden.util.embeds import EmbedFactory
from warden.util.logger import get_logger

logger = get_logger("invite_resolver")

DEFAULT_INVITE_PATTERN = r"discord\.gg/([a-zA-Z0-9]+)"


class InviteResolver:
    """Resolves invite codes posted in messages."""

    def __init__(
        self,
        bot: discord.Client,
        background: BackgroundTasks,
        embeds: EmbedFactory,
        pattern: str = DEFAULT_INVITE_PATTERN,
    ) -> None:
        self._bot = bot
        self._background = background
        self._embeds = embeds
        self._pattern = re.compile(pattern)

    def extract_codes(self, text: str) -> List[str]:
        """Invite codes in order of appearance, duplicates included."""
        return [match.group(1) for match in self._pattern.finditer(text or "")]

    def dispatch(self, message: discord.Message) -> int:
        """Spawn one lookup per invite code in ``message``; returns how many were spawned."""
        codes = self.extract_codes(message.content)
        for index, code in enumerate(codes):
            self._background.spawn(
                self.resolve_one(message, code),
                name=f"invite-{message.id}-{index}",
            )
        return len(codes)

    async def fetch_guild(self, code: str) -> discord.Invite:
        """
        Raises:
            ResolutionFailure: The invite could not be fetched.
        """
        try:
            return await self._bot.fetch_invite(code)
        except Exception as exc:
            raise ResolutionFailure(code, exc) from exc

    def build_resolved_embed(self, guild) -> discord.Embed:
        nsfw_level = getattr(guild, "nsfw_level", None)
        return self._embeds.generate(
            "success",
            title="Resolved guild",
            description=f"Name: {guild.name}",
            fields=[("NSFW Level", getattr(nsfw_level, "name", str(nsfw_level)))],
        )

    def build_failure_embed(self) -> discord.Embed:
        return self._embeds.generate(
            "error",
            title="Failed to resolve guild",
            description="Guild may be banned, deleted, or the invite expired.",
        )

    async def resolve_one(self, message: discord.Message, code: str) -> bool:
        """Look up ``code`` and reply with the result. Returns True when a summary was posted."""
        logger.debug("[INVITE RESOLVER] Resolving discord.gg/%s", code)
        try:
            invite = await self.fetch_guild(code)
        except ResolutionFailure as exc:
            logger.debug("[INVITE RESOLVER] %s", exc)
            await safe_reply(message, embed=self.build_failure_embed())
            return False

        guild = invite.guild
        if guild is None:
            return False

        summary = await safe_reply(message, embed=self.build_resolved_embed(guild))
        if summary is None:
            return False

        icon = getattr(guild, "icon", None)
        icon_url = icon.url if icon is not None else None
        await safe_reply(summary, content=f"Server avatar: ||{icon_url}||")
        return True
