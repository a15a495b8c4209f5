"""
Value types exchanged between the pipeline stages.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import discord

from warden.datatypes.community_settings import CommunitySettings, Trigger


@dataclass(frozen=True, slots=True)
class PhraseRule:
    """A banned phrase and where to report near matches.

    Attributes:
        phrase: Text compared against every message
        match_threshold: Minimum similarity (0-100) that counts as a match
        log_channel_id: Channel receiving the match report
        guild_id: Owning guild, or None for a rule applied everywhere
    """
    phrase: str
    match_threshold: float
    log_channel_id: int
    guild_id: int | None = None
    rule_id: int | None = None


@dataclass(frozen=True, slots=True)
class PhraseMatch:
    rule: PhraseRule
    score: float


@dataclass(frozen=True, slots=True)
class AutoSlowConfig:
    """Auto slow-mode parameters of one channel. Delays are in seconds."""
    channel_id: int
    min_delay: int
    max_delay: int
    target_msgs_per_sec: float
    min_change: int = 0
    min_change_rate: float = 0.0
    enabled: bool = True

    def clamp(self, delay: int) -> int:
        return max(self.min_delay, min(self.max_delay, delay))


@dataclass(frozen=True, slots=True)
class LinkScan:
    has_urls: bool
    urls: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class TriggerFire:
    """A trigger that matched and replied to a message."""
    trigger: Trigger
    matched: Tuple[str, ...]
    reply: discord.Message


@dataclass(frozen=True, slots=True)
class MessageContext:
    """The message being processed together with what was resolved for it."""
    message: discord.Message
    settings: CommunitySettings
    permission_level: int

    @property
    def guild_id(self) -> int:
        return self.settings.guild_id

    @property
    def author_id(self) -> int:
        return self.message.author.id

    @property
    def content(self) -> str:
        return self.message.content or ""
