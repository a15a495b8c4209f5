"""
Banned-phrase detection.

Every eligible message is compared against the phrase rules of its guild
plus the global rules, fetched fresh from the store on each scan so rule
edits apply immediately. Matches are reported to each rule's log channel as
detached best-effort sends.
"""

from __future__ import annotations

from typing import Iterable, List

import discord

from warden.database.db_connection import ConnectionManager, STORE_ERRORS
from warden.datatypes.moderation_datatypes import MessageContext, PhraseMatch, PhraseRule
from warden.errors import ConfigUnavailable
from warden.moderation.approximate_matcher import similarity
from warden.repositories.phrase_rules_repo import PhraseRulesRepo
from warden.util.background import BackgroundTasks
from warden.util.discord_utils import is_loggable_channel, safe_send
from warden.util.format_utils import truncate
from warden.util.logger import get_logger

logger = get_logger("phrase_moderation_engine")


def scan(message_text: str, rules: Iterable[PhraseRule]) -> List[PhraseMatch]:
    """Rules whose similarity score reaches their threshold, in rule order."""
    matches: List[PhraseMatch] = []
    for rule in rules:
        score = similarity(message_text, rule.phrase)
        if score >= rule.match_threshold:
            matches.append(PhraseMatch(rule=rule, score=score))
    return matches


def build_match_embed(message: discord.Message, match: PhraseMatch) -> discord.Embed:
    embed = discord.Embed(
        title="Matched message",
        description=f"[Jump to message]({message.jump_url})",
        color=discord.Colour.green() if match.score == 100 else discord.Colour.yellow(),
    )
    embed.add_field(name="Message", value=truncate(message.content or "-"), inline=False)
    embed.add_field(name="Phrase", value=truncate(match.rule.phrase or "-"), inline=False)
    embed.add_field(name="Author", value=str(message.author.id), inline=False)
    embed.add_field(name="Threshold match (%)", value=f"{round(match.score)}%", inline=False)
    return embed


class PhraseModerationEngine:
    """Loads rules, scans messages and reports matches."""

    def __init__(self, connection: ConnectionManager, background: BackgroundTasks) -> None:
        self._connection = connection
        self._background = background

    async def load_rules(self, guild_id: int) -> List[PhraseRule]:
        """
        Raises:
            ConfigUnavailable: The rules could not be read.
        """
        try:
            async with self._connection.read() as conn:
                return await PhraseRulesRepo.get_for_guild(conn, guild_id)
        except STORE_ERRORS as exc:
            raise ConfigUnavailable(f"phrase rules for guild {guild_id}") from exc

    async def process(self, context: MessageContext) -> List[PhraseMatch]:
        rules = await self.load_rules(context.guild_id)
        if not rules:
            return []

        matches = scan(context.content, rules)
        for match in matches:
            logger.debug(
                "[PHRASE ENGINE] Message %s matched %r at %.1f%%",
                context.message.id, match.rule.phrase, match.score,
            )
            self._background.spawn(
                self.report(context.message, match),
                name=f"phrase-log-{context.message.id}-{match.rule.rule_id}",
            )
        return matches

    async def report(self, message: discord.Message, match: PhraseMatch) -> bool:
        """Send the match report. Best effort: returns False if it was not delivered."""
        guild = message.guild
        channel = guild.get_channel_or_thread(match.rule.log_channel_id) if guild is not None else None
        if channel is None or not is_loggable_channel(channel):
            logger.debug("[PHRASE ENGINE] Log channel %s unavailable", match.rule.log_channel_id)
            return False

        return await safe_send(channel, embed=build_match_embed(message, match)) is not None
