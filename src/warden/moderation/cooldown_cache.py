"""
Cooldown windows of keyword triggers.

Keys are global (``trigger:<id>``), not per user. An entry is in one of two
phases:

``ARMED``
    the trigger has been seen and may reply to the next qualifying message.
``COOLING``
    the trigger just replied; qualifying messages are ignored.

Arming lasts one cooldown duration. Cooling lasts one cooldown duration and
is followed by one more armed window, so a trigger that keeps being hit
replies at most once per cooldown. Entries expire lazily on access and never
outlive their configured phase durations.

Every operation is synchronous, which makes it atomic on the event loop.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict

from warden.util.logger import get_logger

logger = get_logger("cooldown_cache")


class CooldownPhase(Enum):
    ARMED = "armed"
    COOLING = "cooling"

    def __str__(self) -> str:
        return self.value


@dataclass(slots=True)
class CooldownEntry:
    phase: CooldownPhase
    expires_at: float
    # end of the armed window that follows a COOLING phase
    rearm_until: float | None = None


class CooldownCache:
    """Process-wide ``key -> CooldownEntry`` map with lazy expiry."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: Dict[str, CooldownEntry] = {}

    def __len__(self) -> int:
        self.purge_expired()
        return len(self._entries)

    def _current(self, key: str) -> CooldownEntry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None

        now = self._clock()
        if now < entry.expires_at:
            return entry

        if entry.phase is CooldownPhase.COOLING and entry.rearm_until is not None and now < entry.rearm_until:
            entry = CooldownEntry(CooldownPhase.ARMED, entry.rearm_until)
            self._entries[key] = entry
            return entry

        del self._entries[key]
        return None

    def phase(self, key: str) -> CooldownPhase | None:
        """Phase of the live entry for ``key``, or None when there is none."""
        entry = self._current(key)
        return entry.phase if entry is not None else None

    def has(self, key: str) -> bool:
        return self._current(key) is not None

    def remaining(self, key: str) -> float:
        """Seconds left in the current phase (0 when there is no live entry)."""
        entry = self._current(key)
        if entry is None:
            return 0.0
        return max(0.0, entry.expires_at - self._clock())

    def arm(self, key: str, seconds: float) -> None:
        """Open an armed window of ``seconds``. Non-positive durations store nothing."""
        if seconds <= 0:
            self._entries.pop(key, None)
            return
        self._entries[key] = CooldownEntry(CooldownPhase.ARMED, self._clock() + seconds)
        logger.debug("[COOLDOWN] Armed %s for %.0fs", key, seconds)

    def cool(self, key: str, seconds: float) -> None:
        """Start (or refresh) a cooling phase of ``seconds`` followed by an armed window."""
        if seconds <= 0:
            self._entries.pop(key, None)
            return
        now = self._clock()
        self._entries[key] = CooldownEntry(CooldownPhase.COOLING, now + seconds, now + 2 * seconds)
        logger.debug("[COOLDOWN] Cooling %s for %.0fs", key, seconds)

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def purge_expired(self) -> int:
        """Drop every expired entry; returns how many were removed."""
        before = len(self._entries)
        for key in list(self._entries):
            self._current(key)
        return before - len(self._entries)
