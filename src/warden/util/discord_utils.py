"""
discord_utils.py
================

Low-level Discord helpers for Warden.

Stateless, best-effort wrappers around message deletion, replies and channel
sends. Delivery failures are logged and reported through the return value;
they are never retried.
"""

from __future__ import annotations

from typing import Any, Union

import discord

from warden.errors import ActionDeliveryFailure
from warden.util.logger import get_logger

logger = get_logger("discord_utils")


def is_ignored_author(author: Union[discord.User, discord.Member]) -> bool:
    """Bots never go through the pipeline."""
    return bool(getattr(author, "bot", False))


def is_pipeline_channel(channel: Any) -> bool:
    """Only guild text and voice channels are processed."""
    return isinstance(channel, (discord.TextChannel, discord.VoiceChannel))


def is_loggable_channel(channel: Any) -> bool:
    """Text channels and threads can receive log embeds."""
    return isinstance(channel, (discord.TextChannel, discord.Thread))


async def safe_delete_message(message: discord.Message) -> bool:
    """
    Attempt to delete a Discord message, suppressing recoverable errors.

    Args:
        message (discord.Message): The message to delete.

    Returns:
        bool: True if deletion succeeded, False otherwise.
    """
    try:
        await message.delete()
        return True
    except discord.NotFound:
        return False
    except discord.Forbidden:
        logger.warning("No permission to delete message %s", message.id)
    except Exception as exc:
        logger.error("Error deleting message %s: %s", message.id, exc)
    return False


async def reply_or_raise(message: discord.Message, **kwargs: Any) -> discord.Message:
    """
    Reply to ``message``.

    Raises:
        ActionDeliveryFailure: The reply could not be sent.
    """
    try:
        return await message.reply(**kwargs)
    except Exception as exc:
        raise ActionDeliveryFailure("reply", getattr(message, "id", None), exc) from exc


async def safe_reply(message: discord.Message, **kwargs: Any) -> discord.Message | None:
    """Best-effort reply. Returns the sent message, or None on failure."""
    try:
        return await reply_or_raise(message, **kwargs)
    except ActionDeliveryFailure as exc:
        logger.debug("Reply to message %s not delivered: %s", exc.target, exc.cause)
        return None


async def safe_send(channel: discord.abc.Messageable, **kwargs: Any) -> discord.Message | None:
    """Best-effort channel send. Returns the sent message, or None on failure."""
    try:
        return await channel.send(**kwargs)
    except Exception as exc:
        logger.debug("Send to channel %s not delivered: %s", getattr(channel, "id", None), exc)
        return None
