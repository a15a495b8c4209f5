"""
Pytest configuration and fixtures for Warden tests.
"""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest
import pytest_asyncio

# Add src directory to path so imports work
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from warden.database.database import Database  # noqa: E402
from warden.datatypes.community_settings import CommunitySettings  # noqa: E402


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest_asyncio.fixture
async def database(tmp_path):
    """An initialized database in a temporary directory."""
    db = Database(tmp_path / "test.db")
    assert await db.initialize()
    yield db
    await db.shutdown()


@pytest.fixture
def connection(database):
    return database.connection


def make_permissions(administrator=False, manage_guild=False, moderate_members=False):
    permissions = MagicMock()
    permissions.administrator = administrator
    permissions.manage_guild = manage_guild
    permissions.moderate_members = moderate_members
    return permissions


def make_member(user_id=100, role_ids=(), bot=False, **permission_flags):
    member = MagicMock(spec=discord.Member)
    member.id = user_id
    member.bot = bot
    member.name = f"user{user_id}"
    member.roles = [MagicMock(id=role_id) for role_id in role_ids]
    member.guild_permissions = make_permissions(**permission_flags)
    return member


def make_text_channel(channel_id=10, slowmode_delay=0):
    channel = MagicMock(spec=discord.TextChannel)
    channel.id = channel_id
    channel.slowmode_delay = slowmode_delay
    channel.edit = AsyncMock()
    channel.send = AsyncMock()
    return channel


def make_message(content="", guild_id=1, channel=None, author=None, message_id=555):
    message = MagicMock(spec=discord.Message)
    message.id = message_id
    message.content = content
    message.jump_url = f"https://discord.com/channels/{guild_id}/10/{message_id}"
    message.author = author if author is not None else make_member()
    message.channel = channel if channel is not None else make_text_channel()
    message.guild = MagicMock(spec=discord.Guild)
    message.guild.id = guild_id
    message.reply = AsyncMock()
    message.delete = AsyncMock()
    return message


def make_settings(guild_id=1, **kwargs):
    return CommunitySettings(guild_id=guild_id, **kwargs)
