"""Tests for best-effort Discord helpers."""

from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from conftest import make_member, make_text_channel
from warden.errors import ActionDeliveryFailure
from warden.util.discord_utils import (
    is_ignored_author,
    is_loggable_channel,
    is_pipeline_channel,
    reply_or_raise,
    safe_delete_message,
    safe_reply,
    safe_send,
)


def http_error(cls, status):
    response = MagicMock()
    response.status = status
    response.reason = "error"
    return cls(response, "error")


class TestSafeDeleteMessage:
    """Tests for safe_delete_message async function."""

    @pytest.mark.asyncio
    async def test_safe_delete_success(self):
        message = AsyncMock()
        assert await safe_delete_message(message) is True
        message.delete.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_safe_delete_not_found(self):
        message = AsyncMock()
        message.delete.side_effect = http_error(discord.NotFound, 404)
        assert await safe_delete_message(message) is False

    @pytest.mark.asyncio
    async def test_safe_delete_forbidden(self):
        message = AsyncMock()
        message.delete.side_effect = http_error(discord.Forbidden, 403)
        assert await safe_delete_message(message) is False


class TestReplies:
    """Tests for reply and send helpers."""

    @pytest.mark.asyncio
    async def test_reply_or_raise_wraps_failure(self):
        message = AsyncMock()
        message.id = 5
        message.reply.side_effect = http_error(discord.Forbidden, 403)

        with pytest.raises(ActionDeliveryFailure) as excinfo:
            await reply_or_raise(message, content="hi")

        assert excinfo.value.action == "reply"
        assert excinfo.value.target == 5

    @pytest.mark.asyncio
    async def test_safe_reply_returns_none_on_failure(self):
        message = AsyncMock()
        message.reply.side_effect = RuntimeError("nope")
        assert await safe_reply(message, content="hi") is None

    @pytest.mark.asyncio
    async def test_safe_reply_returns_sent_message(self):
        message = AsyncMock()
        sent = MagicMock()
        message.reply.return_value = sent
        assert await safe_reply(message, content="hi") is sent

    @pytest.mark.asyncio
    async def test_safe_send(self):
        channel = make_text_channel()
        channel.send.side_effect = RuntimeError("nope")
        assert await safe_send(channel, content="hi") is None


def test_channel_and_author_checks():
    assert is_pipeline_channel(make_text_channel())
    assert is_pipeline_channel(MagicMock(spec=discord.VoiceChannel))
    assert not is_pipeline_channel(MagicMock(spec=discord.Thread))
    assert not is_pipeline_channel(MagicMock(spec=discord.DMChannel))

    assert is_loggable_channel(MagicMock(spec=discord.Thread))
    assert not is_loggable_channel(MagicMock(spec=discord.VoiceChannel))

    assert is_ignored_author(make_member(bot=True))
    assert not is_ignored_author(make_member())
