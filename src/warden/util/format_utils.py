import re
import unicodedata


_COMBINING_MARKS = re.compile("[\\u0300-\\u036f]")


def eliminate_unicode(name: str) -> str:
    """Drop every character outside the ASCII range."""
    return "".join(char for char in name if ord(char) < 128)


def unicode_to_ascii(name: str) -> str:
    """Return an ASCII rendition of ``name``.

    Compatibility-decomposes the text (so fancy letters fold to their plain
    form), strips combining accents and drops what is left outside ASCII.

    Args:
        name: Display name or username to convert.

    Returns:
        The converted name, or an empty string when fewer than three
        characters survive.
    """
    decomposed = _COMBINING_MARKS.sub("", unicodedata.normalize("NFKD", name))
    ascii_name = eliminate_unicode(decomposed)
    return ascii_name if len(ascii_name) > 2 else ""


def truncate(text: str, limit: int = 1024) -> str:
    """Shorten ``text`` to fit an embed field."""
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."
