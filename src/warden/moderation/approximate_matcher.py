"""
Approximate phrase matching.

``similarity(message, phrase)`` scores how closely ``phrase`` appears in
``message`` on a 0-100 scale using a weighted edit distance in which common
look-alike substitutions ("0" for "o", "rn" for "m", ...) cost half an edit.

When the phrase occurs verbatim inside the message the score is the fraction
of the message it covers. Short exact hits inside long messages therefore
score low, while obfuscated spellings of a phrase score high.
"""

from __future__ import annotations

from typing import FrozenSet, List, Tuple

CONFUSABLE_PAIRS: Tuple[Tuple[str, str], ...] = (
    ("rn", "m"),
    ("0", "o"),
    ("1", "l"),
    ("5", "s"),
    ("2", "z"),
    ("ph", "f"),
    ("c", "k"),
    ("v", "w"),
    ("u", "v"),
    ("3", "e"),
    ("4", "a"),
)

CONFUSABLE_COST = 0.5


def _single_char_pairs(pairs) -> FrozenSet[Tuple[str, str]]:
    found = set()
    for left, right in pairs:
        if len(left) == 1 and len(right) == 1:
            found.add((left, right))
            found.add((right, left))
    return frozenset(found)


def _sequence_pairs(pairs) -> Tuple[Tuple[str, str], ...]:
    found: List[Tuple[str, str]] = []
    for left, right in pairs:
        if len(left) > 1 or len(right) > 1:
            found.append((left, right))
            found.append((right, left))
    return tuple(found)


_CHAR_CONFUSABLES = _single_char_pairs(CONFUSABLE_PAIRS)
_SEQUENCE_CONFUSABLES = _sequence_pairs(CONFUSABLE_PAIRS)


def is_confusable(a: str, b: str) -> bool:
    """True when ``a`` and ``b`` form a confusable pair, in either order."""
    if len(a) == 1 and len(b) == 1:
        return (a, b) in _CHAR_CONFUSABLES
    return (a, b) in _SEQUENCE_CONFUSABLES


def substitution_cost(a: str, b: str) -> float:
    if a == b:
        return 0.0
    if (a, b) in _CHAR_CONFUSABLES:
        return CONFUSABLE_COST
    return 1.0


def weighted_edit_distance(a: str, b: str) -> float:
    """Edit distance with unit insert/delete and weighted substitutions.

    Multi-character confusables (``rn``/``m``, ``ph``/``f``) are a single
    transition that consumes the whole sequence on each side.
    """
    len_a, len_b = len(a), len(b)
    dp = [[0.0] * (len_b + 1) for _ in range(len_a + 1)]
    for i in range(1, len_a + 1):
        dp[i][0] = float(i)
    for j in range(1, len_b + 1):
        dp[0][j] = float(j)

    for i in range(1, len_a + 1):
        for j in range(1, len_b + 1):
            best = min(
                dp[i - 1][j] + 1,
                dp[i][j - 1] + 1,
                dp[i - 1][j - 1] + substitution_cost(a[i - 1], b[j - 1]),
            )
            for left, right in _SEQUENCE_CONFUSABLES:
                span_a, span_b = len(left), len(right)
                if span_a <= i and span_b <= j and a[i - span_a:i] == left and b[j - span_b:j] == right:
                    best = min(best, dp[i - span_a][j - span_b] + CONFUSABLE_COST)
            dp[i][j] = best

    return dp[len_a][len_b]


def similarity(a: str, b: str) -> float:
    """Similarity of ``b`` (the phrase) to ``a`` (the message), 0-100.

    Both inputs are case-folded. An empty input scores 100 only against
    another empty input. When ``b`` occurs inside ``a`` the score is
    ``len(b) / len(a) * 100``.
    """
    message = a.casefold()
    phrase = b.casefold()
    len_a, len_b = len(message), len(phrase)

    if len_a == 0 or len_b == 0:
        return 100.0 if len_a == len_b else 0.0

    if phrase in message:
        return len_b / len_a * 100

    distance = weighted_edit_distance(message, phrase)
    max_len = max(len_a, len_b)
    return max(0.0, (max_len - distance) / max_len * 100)
