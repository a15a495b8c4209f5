"""
Per-message policy pipeline.

Stages run in a fixed order and any of them may end processing early:

1. guard: bot authors, direct messages and non text/voice channels are ignored
2. community settings are resolved (created on first sight)
3. the author's permission level is computed
4. auto slow-mode observes the message (regular members in text channels)
5. members with an ignored role stop here
6. unpermitted links are deleted, which ends processing
7. banned phrases are scanned and reported
8. keyword triggers are evaluated
9. invite links are resolved

A :class:`ConfigUnavailable` from any stage drops the message and is logged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List

import discord

from warden.datatypes.community_settings import CommunitySettings
from warden.datatypes.moderation_datatypes import MessageContext, PhraseMatch, TriggerFire
from warden.errors import ConfigUnavailable
from warden.moderation.autoslow_controller import AutoSlowController
from warden.moderation.invite_resolver import InviteResolver
from warden.moderation.link_policy_gate import LinkPolicyGate
from warden.moderation.phrase_moderation_engine import PhraseModerationEngine
from warden.moderation.trigger_engine import TriggerEngine
from warden.settings.settings_cache import SettingsCache
from warden.util import permissions
from warden.util.discord_utils import is_ignored_author, is_pipeline_channel, safe_delete_message
from warden.util.logger import get_logger

logger = get_logger("message_pipeline")


@dataclass(slots=True)
class PipelineOutcome:
    """What happened to one message. ``stopped_at`` names the stage that ended it, if any."""
    stopped_at: str | None = None
    permission_level: int | None = None
    slowmode_applied: int | None = None
    link_deleted: bool = False
    phrase_matches: List[PhraseMatch] = field(default_factory=list)
    trigger_fire: TriggerFire | None = None
    invites_dispatched: int = 0


class MessagePipeline:
    """Runs every guild message through the moderation stages."""

    def __init__(
        self,
        settings_cache: SettingsCache,
        autoslow: AutoSlowController,
        link_gate: LinkPolicyGate,
        phrases: PhraseModerationEngine,
        triggers: TriggerEngine,
        invites: InviteResolver,
        moderator_level: int = permissions.MODERATOR,
        autoslow_max_level: int = permissions.MENTOR,
        permission_level: Callable[[object, CommunitySettings], int] = permissions.permission_level,
    ) -> None:
        self.settings_cache = settings_cache
        self.autoslow = autoslow
        self.link_gate = link_gate
        self.phrases = phrases
        self.triggers = triggers
        self.invites = invites
        self.moderator_level = moderator_level
        self.autoslow_max_level = autoslow_max_level
        self._permission_level = permission_level

    @staticmethod
    def should_process(message: discord.Message) -> bool:
        if is_ignored_author(message.author):
            return False
        if message.guild is None:
            return False
        return is_pipeline_channel(message.channel)

    async def handle(self, message: discord.Message) -> PipelineOutcome:
        """
        Process one message. Never raises for configuration failures.
        """
        outcome = PipelineOutcome()
        if not self.should_process(message):
            outcome.stopped_at = "guard"
            return outcome

        try:
            await self._run(message, outcome)
        except ConfigUnavailable as exc:
            outcome.stopped_at = "config"
            logger.error(
                "[PIPELINE] Dropping message %s in guild %s: %s",
                message.id, message.guild.id, exc,
            )
        return outcome

    async def _run(self, message: discord.Message, outcome: PipelineOutcome) -> None:
        settings = await self.settings_cache.resolve(message.guild.id)
        level = self._permission_level(message.author, settings)
        outcome.permission_level = level
        context = MessageContext(message=message, settings=settings, permission_level=level)

        if level < self.autoslow_max_level and isinstance(message.channel, discord.TextChannel):
            outcome.slowmode_applied = await self.autoslow.on_message(message.channel)

        if level == permissions.IGNORED:
            outcome.stopped_at = "ignored"
            return

        scan = self.link_gate.detect(context.content)
        if scan.has_urls and level < self.moderator_level:
            allowed = await self.link_gate.permitted(
                context.guild_id,
                message.channel.id,
                context.author_id,
                permissions.member_role_ids(message.author),
            )
            if not allowed:
                outcome.link_deleted = await safe_delete_message(message)
                outcome.stopped_at = "links"
                logger.debug(
                    "[PIPELINE] Link from %s in channel %s not permitted (%s)",
                    context.author_id, message.channel.id, ", ".join(scan.urls),
                )
                return

        outcome.phrase_matches = await self.phrases.process(context)
        outcome.trigger_fire = await self.triggers.evaluate(context)
        outcome.invites_dispatched = self.invites.dispatch(message)
