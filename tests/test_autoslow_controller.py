"""Tests for adaptive slow-mode."""

import asyncio

import pytest

from conftest import make_text_channel
from warden.datatypes.moderation_datatypes import AutoSlowConfig
from warden.moderation.autoslow_controller import AutoSlowController, should_apply
from warden.repositories.autoslow_repo import AutoSlowRepo

BOUNDS = dict(min_delay=5, max_delay=30, target_msgs_per_sec=0.5)


@pytest.fixture
def controller(connection, clock):
    return AutoSlowController(connection, observation_interval=10.0, clock=clock)


def applied_delays(channel):
    return [call.kwargs["slowmode_delay"] for call in channel.edit.await_args_list]


class TestConvergence:
    """Tests for the delay bounds under sustained traffic."""

    @pytest.mark.asyncio
    async def test_busy_channel_converges_to_max(self, controller, clock):
        channel = make_text_channel()
        await controller.add(channel.id, **BOUNDS)

        for _ in range(100):
            await controller.on_message(channel)
            clock.advance(0.1)

        delays = applied_delays(channel)
        assert delays
        assert delays[-1] == 30
        assert all(5 <= delay <= 30 for delay in delays)

    @pytest.mark.asyncio
    async def test_quiet_channel_converges_to_min(self, controller, clock):
        channel = make_text_channel(slowmode_delay=30)
        await controller.add(channel.id, **BOUNDS)

        for _ in range(5):
            await controller.on_message(channel)
            clock.advance(60)

        delays = applied_delays(channel)
        assert delays[-1] == 5
        assert all(5 <= delay <= 30 for delay in delays)


class TestHysteresis:
    """Tests for the minimum change thresholds."""

    @pytest.mark.asyncio
    async def test_small_change_is_not_applied(self, controller):
        channel = make_text_channel(slowmode_delay=20)
        await controller.add(
            channel.id, min_delay=5, max_delay=30, target_msgs_per_sec=1.0, min_change=5, min_change_rate=0.5
        )

        for _ in range(11):
            controller.record_message(channel.id)

        assert await controller.recompute_and_apply(channel) is None
        channel.edit.assert_not_called()
        state = await controller.get_state(channel.id)
        assert state.last_delay == 20

    def test_should_apply(self):
        config = AutoSlowConfig(1, 0, 100, 1.0, min_change=5, min_change_rate=0.5)
        assert not should_apply(20, 22, config)
        assert should_apply(20, 26, config)
        assert should_apply(2, 4, config)
        assert should_apply(0, 1, config)
        assert not should_apply(10, 10, config)


class TestApply:
    """Tests for edit calls."""

    @pytest.mark.asyncio
    async def test_disabled_config_records_only(self, controller):
        channel = make_text_channel()
        await controller.add(channel.id, enabled=False, **BOUNDS)

        await controller.on_message(channel)

        channel.edit.assert_not_called()
        assert controller.current_rate(channel.id) == pytest.approx(0.1)

    @pytest.mark.asyncio
    async def test_failed_edit_keeps_last_delay(self, controller):
        channel = make_text_channel(slowmode_delay=0)
        channel.edit.side_effect = RuntimeError("forbidden")
        await controller.add(channel.id, **BOUNDS)

        assert await controller.on_message(channel) is None
        state = await controller.get_state(channel.id)
        assert state.last_delay == 0

    @pytest.mark.asyncio
    async def test_overlapping_messages_keep_delay_in_sync(self, controller):
        channel = make_text_channel(slowmode_delay=0)
        await controller.add(channel.id, **BOUNDS)
        for _ in range(20):
            controller.record_message(channel.id)

        release = asyncio.Event()
        calls = []

        async def edit(*, slowmode_delay):
            calls.append(slowmode_delay)
            if len(calls) == 1:
                await release.wait()
            channel.slowmode_delay = slowmode_delay

        channel.edit.side_effect = edit

        first = asyncio.create_task(controller.on_message(channel))
        while not calls:
            await asyncio.sleep(0)
        second = asyncio.create_task(controller.on_message(channel))
        await asyncio.sleep(0)
        assert calls == [5]

        release.set()
        await asyncio.gather(first, second)

        state = await controller.get_state(channel.id)
        assert calls == [5, 22]
        assert channel.slowmode_delay == state.last_delay == 22

    @pytest.mark.asyncio
    async def test_unconfigured_channel_is_ignored(self, controller):
        channel = make_text_channel()
        assert await controller.on_message(channel) is None
        channel.edit.assert_not_called()

    @pytest.mark.asyncio
    async def test_window_evicts_old_messages(self, controller, clock):
        channel = make_text_channel()
        await controller.add(channel.id, enabled=False, **BOUNDS)

        controller.record_message(channel.id)
        clock.advance(11)
        controller.record_message(channel.id)

        assert controller.current_rate(channel.id) == pytest.approx(0.1)


class TestConfiguration:
    """Tests for add/remove/get."""

    @pytest.mark.asyncio
    async def test_add_persists(self, controller, connection):
        await controller.add(10, **BOUNDS)

        async with connection.read() as conn:
            stored = await AutoSlowRepo.get(conn, 10)
        assert stored == AutoSlowConfig(channel_id=10, **BOUNDS)

    @pytest.mark.asyncio
    async def test_get_rehydrates_from_store(self, connection, clock):
        async with connection.transaction() as conn:
            await AutoSlowRepo.upsert(conn, AutoSlowConfig(channel_id=10, **BOUNDS))

        controller = AutoSlowController(connection, clock=clock)
        assert (await controller.get(10)).max_delay == 30

    @pytest.mark.asyncio
    async def test_miss_is_remembered_until_add(self, controller, connection):
        assert await controller.get(10) is None

        async with connection.transaction() as conn:
            await AutoSlowRepo.upsert(conn, AutoSlowConfig(channel_id=10, **BOUNDS))
        assert await controller.get(10) is None

        await controller.add(10, **BOUNDS)
        assert await controller.get(10) is not None

    @pytest.mark.asyncio
    async def test_add_keeps_warm_window(self, controller):
        await controller.add(10, enabled=False, **BOUNDS)
        controller.record_message(10)

        await controller.add(10, **BOUNDS)
        assert controller.current_rate(10) == pytest.approx(0.1)

    @pytest.mark.asyncio
    async def test_remove(self, controller, connection):
        await controller.add(10, **BOUNDS)
        await controller.remove(10)

        assert await controller.get(10) is None
        async with connection.read() as conn:
            assert await AutoSlowRepo.get(conn, 10) is None

    @pytest.mark.asyncio
    async def test_invalid_bounds_rejected(self, controller):
        with pytest.raises(ValueError):
            await controller.add(10, min_delay=30, max_delay=5, target_msgs_per_sec=1.0)
        with pytest.raises(ValueError):
            await controller.add(10, min_delay=0, max_delay=5, target_msgs_per_sec=0)
