"""
Keyword reminders.

A trigger matches when every keyword group matches the message; a group
matches when any of its alternatives occurs in the text (case-insensitive,
alternatives are literal text). Messages containing a custom emoji token
never match, so emoji names are not mistaken for keywords.

Matching is gated by the :class:`CooldownCache`: the first match of an idle
trigger only arms it, a match while armed replies, and matches while cooling
are ignored. Only one trigger replies per message.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Any, Dict, Tuple

import discord

from warden.datatypes.community_settings import Trigger
from warden.datatypes.moderation_datatypes import MessageContext, TriggerFire
from warden.moderation.cooldown_cache import CooldownCache, CooldownPhase
from warden.settings.opt_out_store import OptOutStore
from warden.util.discord_utils import safe_reply
from warden.util.embeds import EmbedFactory, resolve_colour
from warden.util.logger import get_logger

logger = get_logger("trigger_engine")

CUSTOM_EMOJI = re.compile(r"<a?:.+?:\d+>")
OPT_OUT_PREFIX = "trigger-optout:"
# the events listener answers the button; the view only needs to outlive the reply briefly
OPT_OUT_VIEW_TIMEOUT = 600


@lru_cache(maxsize=4096)
def keyword_pattern(keyword: str) -> re.Pattern:
    return re.compile(re.escape(keyword), re.IGNORECASE)


def match_keywords(text: str, keywords: Tuple[Tuple[str, ...], ...]) -> Tuple[str, ...] | None:
    """
    Match keyword groups against ``text``.

    Returns:
        The literal substring matched for each group, or None when any group
        fails, there are no groups, or the text contains a custom emoji.
    """
    if not keywords or CUSTOM_EMOJI.search(text):
        return None

    matched = []
    for group in keywords:
        hit = None
        for alternative in group:
            if not alternative:
                continue
            found = keyword_pattern(alternative).search(text)
            if found:
                hit = found.group(0)
                break
        if hit is None:
            return None
        matched.append(hit)
    return tuple(matched)


def opt_out_custom_id(trigger_id: str) -> str:
    return f"{OPT_OUT_PREFIX}{trigger_id}"


class TriggerEngine:
    """Evaluates a guild's triggers against a message and sends the reminder."""

    def __init__(
        self,
        opt_outs: OptOutStore,
        cooldowns: CooldownCache,
        embeds: EmbedFactory,
        opt_out_label: str = "Don't remind me again",
        fire_on_first_match: bool = False,
    ) -> None:
        self._opt_outs = opt_outs
        self._cooldowns = cooldowns
        self._embeds = embeds
        self._opt_out_label = opt_out_label
        self._fire_on_first_match = fire_on_first_match

    def build_view(self, trigger: Trigger) -> discord.ui.View:
        view = discord.ui.View(timeout=OPT_OUT_VIEW_TIMEOUT)
        view.add_item(
            discord.ui.Button(
                label=self._opt_out_label,
                style=discord.ButtonStyle.primary,
                custom_id=opt_out_custom_id(trigger.trigger_id),
            )
        )
        return view

    def build_reply(self, trigger: Trigger, matched: Tuple[str, ...]) -> Dict[str, Any]:
        """Keyword arguments for ``message.reply``."""
        template = trigger.message
        view = self.build_view(trigger)

        if not template.embed:
            return {"content": template.content, "view": view}

        embed = discord.Embed(
            title=template.title or None,
            description=template.description or None,
            color=resolve_colour(template.color) or self._embeds.colour("warning"),
        )
        embed.set_footer(text="Matched: " + ", ".join(f'"{m}"' for m in matched))
        return {"embed": embed, "view": view}

    async def evaluate(self, context: MessageContext) -> TriggerFire | None:
        """Reply with the first armed trigger that fully matches, if any."""
        text = context.content
        if CUSTOM_EMOJI.search(text):
            return None

        for trigger in context.settings.enabled_triggers():
            matched = match_keywords(text, trigger.keywords)
            if matched is None:
                continue

            if await self._opt_outs.is_opted_out(context.guild_id, context.author_id, trigger.trigger_id):
                continue

            key = trigger.cooldown_key
            phase = self._cooldowns.phase(key)
            if phase is CooldownPhase.COOLING:
                continue
            if phase is None and not self._fire_on_first_match:
                self._cooldowns.arm(key, trigger.cooldown_seconds)
                continue

            reply = await safe_reply(context.message, **self.build_reply(trigger, matched))
            if reply is None:
                logger.debug("[TRIGGER ENGINE] Reminder for trigger %s not delivered", trigger.trigger_id)
                return None

            self._cooldowns.cool(key, trigger.cooldown_seconds)
            logger.info(
                "[TRIGGER ENGINE] Trigger %s fired on message %s in guild %s",
                trigger.trigger_id, context.message.id, context.guild_id,
            )
            return TriggerFire(trigger=trigger, matched=matched, reply=reply)

        return None
