"""Tests for URL detection and link permissions."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from conftest import make_settings
from warden.datatypes.community_settings import LinkPermissionSet
from warden.moderation.link_policy_gate import LinkPolicyGate, detect


@pytest.mark.parametrize(
    "text",
    [
        "see https://example.com/page",
        "http://foo.bar",
        "www.example.org",
        "join discord.gg/abc123",
        "check example.com",
    ],
)
def test_detect_finds_urls(text):
    scan = detect(text)
    assert scan.has_urls
    assert scan.urls


@pytest.mark.parametrize("text", ["", "hello there", "version 1.2.3", "end of sentence.next"])
def test_detect_ignores_plain_text(text):
    assert detect(text).has_urls is False


def test_detect_collects_every_url():
    scan = detect("https://a.com and https://b.com")
    assert scan.urls == ("https://a.com", "https://b.com")


@pytest.fixture
def gate():
    settings = make_settings(
        link_permissions=LinkPermissionSet(
            allowed_role_ids=frozenset({500}),
            allowed_user_ids=frozenset({42}),
            exempt_channel_ids=frozenset({7}),
        )
    )
    cache = MagicMock()
    cache.resolve = AsyncMock(return_value=settings)
    return LinkPolicyGate(cache)


class TestPermitted:
    """Tests for allow-list checks."""

    @pytest.mark.asyncio
    async def test_allowed_role(self, gate):
        assert await gate.permitted(1, 10, 100, [500])

    @pytest.mark.asyncio
    async def test_allowed_user(self, gate):
        assert await gate.permitted(1, 10, 42, [])

    @pytest.mark.asyncio
    async def test_exempt_channel(self, gate):
        assert await gate.permitted(1, 7, 100, [])

    @pytest.mark.asyncio
    async def test_everyone_else_denied(self, gate):
        assert not await gate.permitted(1, 10, 100, [501])
