"""
Embed construction helpers and color validation.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Iterable, Mapping, Tuple

import discord

from warden.util.logger import get_logger

logger = get_logger("embeds")

EMBED_KINDS = ("success", "warning", "error", "general")

_HEX_COLOUR = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")
_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")

# Named factories on discord.Colour, e.g. "red", "dark_gold", "blurple", "random"
NAMED_COLOURS = frozenset(
    name
    for name, value in vars(discord.Colour).items()
    if isinstance(value, classmethod) and not name.startswith("from_")
)


def _colour_name(value: str) -> str:
    """``"DarkRed"`` / ``"dark red"`` / ``"dark_red"`` -> ``"dark_red"``."""
    if " " in value or "_" in value:
        return re.sub(r"[\s_]+", "_", value.strip()).lower()
    return _CAMEL_BOUNDARY.sub("_", value.strip()).lower()


def resolve_colour(value: Any) -> discord.Colour | None:
    """Turn a user-authored color into a :class:`discord.Colour`.

    Accepted forms: a named color (``"Red"``, ``"DarkGold"``, ``"Random"``),
    ``#RRGGBB`` / ``#RGB`` hex, an integer, or an ``[r, g, b]`` triple.

    Returns:
        The colour, or None when the value is not a recognized color.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, discord.Colour):
        return value

    if isinstance(value, int):
        return discord.Colour(value) if 0 <= value <= 0xFFFFFF else None

    if isinstance(value, (list, tuple)):
        if len(value) == 3 and all(isinstance(part, int) and 0 <= part <= 255 for part in value):
            return discord.Colour.from_rgb(*value)
        return None

    if not isinstance(value, str) or not value.strip():
        return None

    if _HEX_COLOUR.match(value):
        digits = value[1:]
        if len(digits) == 3:
            digits = "".join(char * 2 for char in digits)
        return discord.Colour(int(digits, 16))

    name = _colour_name(value)
    if name in NAMED_COLOURS:
        return getattr(discord.Colour, name)()
    return None


def is_colour(value: Any) -> bool:
    return resolve_colour(value) is not None


class EmbedFactory:
    """Builds embeds in the configured palette."""

    def __init__(self, colors: Mapping[str, str]) -> None:
        self._palette: Dict[str, discord.Colour] = {}
        for kind, fallback in (
            ("success", discord.Colour.green()),
            ("warning", discord.Colour.yellow()),
            ("error", discord.Colour.red()),
            ("general", discord.Colour.blurple()),
        ):
            configured = colors.get("primary" if kind == "general" else kind)
            self._palette[kind] = resolve_colour(configured) or fallback

    def colour(self, kind: str) -> discord.Colour:
        return self._palette.get(kind, self._palette["general"])

    def generate(
        self,
        kind: str,
        title: str = "",
        description: str = "",
        fields: Iterable[Tuple[str, str]] = (),
    ) -> discord.Embed:
        """Embed colored for ``kind`` (success, warning, error or general)."""
        if kind not in EMBED_KINDS:
            logger.warning("[EMBEDS] Unknown embed kind %r, using general", kind)
        embed = discord.Embed(title=title or None, description=description or None, color=self.colour(kind))
        for name, value in fields:
            embed.add_field(name=name, value=value, inline=False)
        return embed
