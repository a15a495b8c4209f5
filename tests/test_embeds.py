"""Tests for embed helpers and color validation."""

import discord
import pytest

from warden.util.embeds import EmbedFactory, is_colour, resolve_colour


@pytest.mark.parametrize(
    "value, expected",
    [
        ("Red", discord.Colour.red()),
        ("DarkGold", discord.Colour.dark_gold()),
        ("dark gold", discord.Colour.dark_gold()),
        ("#ff0000", discord.Colour(0xFF0000)),
        ("#F00", discord.Colour(0xFF0000)),
        (0x00FF00, discord.Colour(0x00FF00)),
        ([0, 0, 255], discord.Colour(0x0000FF)),
    ],
)
def test_resolve_colour_accepts(value, expected):
    assert resolve_colour(value) == expected


@pytest.mark.parametrize("value", [None, True, "", "#12345", "#gggggg", "NotAColour", -1, 0x1000000, [1, 2], [0, 0, 300]])
def test_resolve_colour_rejects(value):
    assert resolve_colour(value) is None
    assert not is_colour(value)


def test_factory_uses_configured_palette():
    factory = EmbedFactory({"success": "#010203", "primary": "Blurple"})

    assert factory.colour("success") == discord.Colour(0x010203)
    assert factory.colour("general") == discord.Colour.blurple()
    assert factory.colour("error") == discord.Colour.red()


def test_factory_ignores_invalid_configured_colour():
    assert EmbedFactory({"warning": "nope"}).colour("warning") == discord.Colour.yellow()


def test_generate_builds_fields():
    embed = EmbedFactory({}).generate("error", title="T", description="D", fields=[("a", "1"), ("b", "2")])

    assert embed.title == "T"
    assert embed.description == "D"
    assert embed.colour == discord.Colour.red()
    assert [(f.name, f.value) for f in embed.fields] == [("a", "1"), ("b", "2")]


def test_generate_unknown_kind_falls_back_to_general():
    factory = EmbedFactory({})
    assert factory.generate("mystery", title="x").colour == factory.colour("general")
