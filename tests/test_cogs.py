"""Tests for the Discord cogs."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from conftest import make_member, make_message, make_settings
from warden.bot.cogs import events_listener, message_listener, name_cmds
from warden.bot.cogs.events_listener import EventsListenerCog, parse_opt_out_id
from warden.bot.cogs.message_listener import MessageListenerCog
from warden.bot.cogs.name_cmds import NameCommandsCog
from warden.errors import StorageUnavailable


def make_interaction(custom_id="trigger-optout:abc", guild_id=1, kind=discord.InteractionType.component):
    interaction = MagicMock()
    interaction.type = kind
    interaction.data = {"custom_id": custom_id}
    interaction.guild_id = guild_id
    interaction.user.id = 42
    interaction.response.send_message = AsyncMock()
    interaction.followup.send = AsyncMock()
    return interaction


@pytest.fixture
def opt_outs():
    store = MagicMock()
    store.opt_out = AsyncMock()
    return store


@pytest.fixture
def events_cog(opt_outs):
    return EventsListenerCog(MagicMock(), MagicMock(), opt_outs)


def test_parse_opt_out_id():
    assert parse_opt_out_id("trigger-optout:abc") == "abc"
    assert parse_opt_out_id("trigger-optout:") is None
    assert parse_opt_out_id("other:abc") is None
    assert parse_opt_out_id(None) is None


class TestEventsListener:
    """Tests for the opt-out button and guild removal."""

    @pytest.mark.asyncio
    async def test_opt_out_button(self, events_cog, opt_outs):
        interaction = make_interaction()
        await events_cog.on_interaction(interaction)

        opt_outs.opt_out.assert_awaited_once_with(1, 42, "abc")
        args, kwargs = interaction.response.send_message.call_args
        assert kwargs["ephemeral"] is True

    @pytest.mark.asyncio
    async def test_unrelated_component_ignored(self, events_cog, opt_outs):
        await events_cog.on_interaction(make_interaction(custom_id="something-else"))
        opt_outs.opt_out.assert_not_called()

    @pytest.mark.asyncio
    async def test_slash_command_interaction_ignored(self, events_cog, opt_outs):
        await events_cog.on_interaction(make_interaction(kind=discord.InteractionType.application_command))
        opt_outs.opt_out.assert_not_called()

    @pytest.mark.asyncio
    async def test_storage_failure_still_answers(self, events_cog, opt_outs):
        opt_outs.opt_out.side_effect = StorageUnavailable("down")
        interaction = make_interaction()

        await events_cog.on_interaction(interaction)

        interaction.response.send_message.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_guild_remove_invalidates_settings(self, events_cog):
        guild = MagicMock()
        guild.id = 77
        await events_cog.on_guild_remove(guild)
        events_cog.settings_cache.invalidate.assert_called_once_with(77)


class TestMessageListener:
    """Tests for handing messages to the pipeline."""

    @pytest.mark.asyncio
    async def test_on_message_runs_pipeline(self):
        pipeline = MagicMock()
        pipeline.handle = AsyncMock()
        cog = MessageListenerCog(MagicMock(), pipeline)

        message = make_message("hello")
        await cog.on_message(message)

        pipeline.handle.assert_awaited_once_with(message)

    @pytest.mark.asyncio
    async def test_unexpected_error_is_contained(self):
        pipeline = MagicMock()
        pipeline.handle = AsyncMock(side_effect=RuntimeError("boom"))
        cog = MessageListenerCog(MagicMock(), pipeline)

        await cog.on_message(make_message("hello"))

    def test_setup_without_add_cog(self):
        cog = message_listener.setup(SimpleNamespace(), MagicMock())
        assert isinstance(cog, MessageListenerCog)

    def test_setup_registers_cogs(self):
        bot = MagicMock()
        message_listener.setup(bot, MagicMock())
        events_listener.setup(bot, MagicMock(), MagicMock())
        name_cmds.setup(bot, MagicMock(), MagicMock())
        assert bot.add_cog.call_count == 3


class TestNameCommands:
    """Tests for the ASCII name command."""

    def make_cog(self, settings=None, remembered="Johnny"):
        cache = MagicMock()
        cache.resolve = AsyncMock(return_value=settings or make_settings())
        names = MagicMock()
        names.remember_ascii_name = AsyncMock(return_value=remembered)
        return NameCommandsCog(MagicMock(), cache, names)

    @pytest.mark.asyncio
    async def test_renames_member(self):
        cog = self.make_cog()
        member = make_member()
        member.edit = AsyncMock()

        assert await cog.ascii_name(member) == "User renamed successfully"
        member.edit.assert_awaited_once_with(nick="Johnny")

    @pytest.mark.asyncio
    async def test_helpers_are_not_renamed(self):
        cog = self.make_cog(settings=make_settings(helper_role_ids=frozenset({2})))
        member = make_member(role_ids=[2])
        member.edit = AsyncMock()

        assert await cog.ascii_name(member) == "Helper and above cannot be nicknamed"
        member.edit.assert_not_called()

    @pytest.mark.asyncio
    async def test_unconvertible_name(self):
        cog = self.make_cog(remembered="")
        member = make_member()
        member.edit = AsyncMock()

        assert await cog.ascii_name(member) == "Name couldn't be converted to ASCII"
        member.edit.assert_not_called()
