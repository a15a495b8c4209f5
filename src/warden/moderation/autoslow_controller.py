"""
Adaptive channel slow-mode.

Each configured channel keeps a rolling window of message timestamps. The
observed rate (messages in the window / window width) is compared with the
channel's target rate and the slow-mode delay is scaled by their ratio:
a busier channel gets a longer delay, a quieter one a shorter delay, always
clamped to the configured bounds. A new delay is only pushed to Discord when
it differs enough from the last one (absolute ``min_change`` or relative
``min_change_rate``), which keeps noisy rates from churning API calls.

Configurations are persisted in ``autoslow_configs`` and mirrored in memory.
"""

from __future__ import annotations

import asyncio
import math
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Deque, Dict, Set

import discord

from warden.database.db_connection import ConnectionManager, STORE_ERRORS
from warden.datatypes.moderation_datatypes import AutoSlowConfig
from warden.errors import StorageUnavailable
from warden.repositories.autoslow_repo import AutoSlowRepo
from warden.util.logger import get_logger

logger = get_logger("autoslow_controller")

# Discord's upper bound for slowmode_delay
MAX_SLOWMODE_SECONDS = 21600


@dataclass(slots=True)
class AutoSlowState:
    """Runtime mirror of a channel's config plus what the controller observed."""
    config: AutoSlowConfig
    timestamps: Deque[float] = field(default_factory=deque)
    last_delay: int | None = None


def validate_config(config: AutoSlowConfig) -> None:
    """
    Raises:
        ValueError: The parameters cannot describe a working controller.
    """
    if config.min_delay < 0 or config.max_delay > MAX_SLOWMODE_SECONDS:
        raise ValueError(f"Delays must be within 0..{MAX_SLOWMODE_SECONDS} seconds")
    if config.min_delay > config.max_delay:
        raise ValueError("min_delay must not exceed max_delay")
    if config.target_msgs_per_sec <= 0:
        raise ValueError("target_msgs_per_sec must be positive")
    if config.min_change < 0 or config.min_change_rate < 0:
        raise ValueError("min_change and min_change_rate must not be negative")


def should_apply(last: int, candidate: int, config: AutoSlowConfig) -> bool:
    """Hysteresis: apply when the absolute or the relative change is large enough."""
    change = abs(candidate - last)
    if change == 0:
        return False
    relative = change / last if last > 0 else math.inf
    return change > config.min_change or relative > config.min_change_rate


class AutoSlowController:
    """Per-channel auto slow-mode: config CRUD, rate tracking and delay updates."""

    def __init__(
        self,
        connection: ConnectionManager,
        observation_interval: float = 10.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._connection = connection
        self._interval = observation_interval
        self._clock = clock
        self._states: Dict[int, AutoSlowState] = {}
        # channels known to have no config, until add() says otherwise
        self._missing: Set[int] = set()
        self._locks: Dict[int, asyncio.Lock] = {}

    def _lock_for(self, channel_id: int) -> asyncio.Lock:
        if channel_id not in self._locks:
            self._locks[channel_id] = asyncio.Lock()
        return self._locks[channel_id]

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    async def add(self, channel_id: int, **params) -> AutoSlowConfig:
        """
        Create or update a channel's config, persist it and mirror it in memory.

        An existing runtime window is kept so re-enabling starts warm.

        Raises:
            ValueError: Invalid parameters.
            StorageUnavailable: The config could not be persisted.
        """
        config = AutoSlowConfig(channel_id=channel_id, **params)
        validate_config(config)

        try:
            async with self._connection.transaction() as conn:
                await AutoSlowRepo.upsert(conn, config)
        except STORE_ERRORS as exc:
            raise StorageUnavailable(f"autoslow config for channel {channel_id}") from exc

        async with self._lock_for(channel_id):
            state = self._states.get(channel_id)
            if state is None:
                self._states[channel_id] = AutoSlowState(config=config)
            else:
                state.config = config
            self._missing.discard(channel_id)

        logger.info("[AUTOSLOW] Configured channel %s: %s", channel_id, config)
        return config

    async def remove(self, channel_id: int) -> None:
        async with self._lock_for(channel_id):
            self._states.pop(channel_id, None)
            self._missing.add(channel_id)

        try:
            async with self._connection.transaction() as conn:
                await AutoSlowRepo.delete(conn, channel_id)
        except STORE_ERRORS as exc:
            raise StorageUnavailable(f"autoslow config for channel {channel_id}") from exc

        logger.info("[AUTOSLOW] Removed channel %s", channel_id)

    async def get(self, channel_id: int) -> AutoSlowConfig | None:
        state = await self.get_state(channel_id)
        return state.config if state is not None else None

    async def get_state(self, channel_id: int) -> AutoSlowState | None:
        """Runtime state, rehydrated from the store on first use."""
        state = self._states.get(channel_id)
        if state is not None or channel_id in self._missing:
            return state

        async with self._lock_for(channel_id):
            state = self._states.get(channel_id)
            if state is not None or channel_id in self._missing:
                return state

            try:
                async with self._connection.read() as conn:
                    config = await AutoSlowRepo.get(conn, channel_id)
            except STORE_ERRORS as exc:
                raise StorageUnavailable(f"autoslow config for channel {channel_id}") from exc

            if config is None:
                self._missing.add(channel_id)
                return None

            state = AutoSlowState(config=config)
            self._states[channel_id] = state
            logger.debug("[AUTOSLOW] Rehydrated config for channel %s", channel_id)
            return state

    # ------------------------------------------------------------------
    # Rate tracking
    # ------------------------------------------------------------------

    def record_message(self, channel_id: int) -> int:
        """Add a timestamp to the channel's window; returns the window size."""
        state = self._states.get(channel_id)
        if state is None:
            return 0

        now = self._clock()
        state.timestamps.append(now)
        self._evict(state, now)
        return len(state.timestamps)

    def _evict(self, state: AutoSlowState, now: float) -> None:
        cutoff = now - self._interval
        while state.timestamps and state.timestamps[0] <= cutoff:
            state.timestamps.popleft()

    def current_rate(self, channel_id: int) -> float:
        """Observed messages per second over the observation interval."""
        state = self._states.get(channel_id)
        if state is None:
            return 0.0
        self._evict(state, self._clock())
        return len(state.timestamps) / self._interval

    def candidate_delay(self, state: AutoSlowState, last: int) -> int:
        rate = len(state.timestamps) / self._interval
        scaled = max(last, 1) * rate / state.config.target_msgs_per_sec
        return state.config.clamp(round(scaled))

    # ------------------------------------------------------------------
    # Applying
    # ------------------------------------------------------------------

    def _decide(self, state: AutoSlowState, channel: discord.TextChannel) -> int | None:
        """Pick the next delay; None when the hysteresis keeps the current one."""
        if not state.config.enabled:
            return None

        self._evict(state, self._clock())
        if state.last_delay is None:
            state.last_delay = int(getattr(channel, "slowmode_delay", 0) or 0)
        candidate = self.candidate_delay(state, state.last_delay)

        if not should_apply(state.last_delay, candidate, state.config):
            return None
        return candidate

    async def _apply(self, state: AutoSlowState, channel: discord.TextChannel, candidate: int) -> int | None:
        try:
            await channel.edit(slowmode_delay=candidate)
        except Exception as exc:
            logger.warning("[AUTOSLOW] Failed to set slow mode on channel %s: %s", channel.id, exc)
            return None

        state.last_delay = candidate
        logger.debug("[AUTOSLOW] Channel %s slow mode set to %ss", channel.id, candidate)
        return candidate

    async def recompute_and_apply(self, channel: discord.TextChannel) -> int | None:
        """
        Push a new slow-mode delay to ``channel`` if the hysteresis allows it.

        Returns:
            The delay that was applied, or None when nothing was sent.
        """
        state = self._states.get(channel.id)
        if state is None:
            return None

        async with self._lock_for(channel.id):
            candidate = self._decide(state, channel)
            if candidate is None:
                return None
            return await self._apply(state, channel, candidate)

    async def on_message(self, channel: discord.TextChannel) -> int | None:
        """Record a message in ``channel`` and update its delay."""
        state = await self.get_state(channel.id)
        if state is None:
            return None

        # the edit stays under the lock so last_delay always matches the channel
        async with self._lock_for(channel.id):
            self.record_message(channel.id)
            candidate = self._decide(state, channel)
            if candidate is None:
                return None
            return await self._apply(state, channel, candidate)
