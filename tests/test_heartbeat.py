"""Tests for the heartbeat scheduler."""

from __future__ import annotations

import asyncio

import pytest

from custom_components.yale_sync.accessory import (
    CONTACT_SENSOR_STATE,
    CURRENT_STATE,
    MOTION_DETECTED,
    TARGET_STATE,
    WriteOrigin,
)
from custom_components.yale_sync.api import SensorSnapshot
from custom_components.yale_sync.errors import AuthFailure, RemoteUnavailable
from custom_components.yale_sync.translator import (
    BridgeCurrentState,
    BridgeTargetState,
    ContactSensorValue,
    ContactState,
    MotionState,
    VendorPanelState,
)

from .conftest import PANEL_ID, build_engine


def _parking_sleep(limit: int, done: asyncio.Event, on_sleep=None):
    """Return a sleep that counts calls and parks forever after ``limit``."""
    calls = {"count": 0}

    async def _sleep(interval: float) -> None:
        calls["count"] += 1
        if on_sleep is not None:
            on_sleep(calls["count"])
        if calls["count"] > limit:
            done.set()
            await asyncio.Event().wait()

    return _sleep, calls


@pytest.mark.asyncio
async def test_cycle_registers_and_pushes_state(engine, fake_client):
    fake_client.mode = VendorPanelState.HOME
    fake_client.motion["pir-1"] = SensorSnapshot("pir-1", "Hallway", MotionState.TRIGGERED)
    fake_client.contact["dc-1"] = SensorSnapshot("dc-1", "Front Door", ContactState.OPEN)

    inventory = await engine.heartbeat.run_cycle()

    assert inventory is not None
    panel = engine.registry.lookup(PANEL_ID).accessory
    assert panel.characteristic(CURRENT_STATE).value == BridgeCurrentState.NIGHT_ARM
    assert panel.characteristic(TARGET_STATE).value == BridgeTargetState.NIGHT_ARM
    motion = engine.registry.lookup("pir-1").accessory
    assert motion.characteristic(MOTION_DETECTED).value is True
    contact = engine.registry.lookup("dc-1").accessory
    assert (
        contact.characteristic(CONTACT_SENSOR_STATE).value
        == ContactSensorValue.CONTACT_NOT_DETECTED
    )
    assert engine.heartbeat.cycles == 1


@pytest.mark.asyncio
async def test_heartbeat_push_does_not_reissue_command(engine, fake_client):
    await engine.heartbeat.run_cycle()
    target = engine.registry.lookup(PANEL_ID).accessory.characteristic(TARGET_STATE)
    seen = []
    target.subscribe(lambda value, origin: seen.append(origin))

    fake_client.mode = VendorPanelState.ARMED
    await engine.heartbeat.run_cycle()
    fake_client.mode = VendorPanelState.HOME
    await engine.heartbeat.run_cycle()

    assert fake_client.set_panel_state.await_count == 0
    assert "set_panel_state" not in fake_client.calls
    assert seen == [WriteOrigin.HEARTBEAT_PUSH, WriteOrigin.HEARTBEAT_PUSH]
    assert target.value == BridgeTargetState.NIGHT_ARM


@pytest.mark.asyncio
async def test_user_write_still_reaches_remote(engine, fake_client):
    await engine.heartbeat.run_cycle()
    target = engine.registry.lookup(PANEL_ID).accessory.characteristic(TARGET_STATE)

    await target.push_value(BridgeTargetState.AWAY_ARM, WriteOrigin.HEARTBEAT_PUSH)
    assert fake_client.set_panel_state.await_count == 0

    await target.write(BridgeTargetState.AWAY_ARM)
    fake_client.set_panel_state.assert_awaited_once_with(
        "token", VendorPanelState.ARMED
    )


@pytest.mark.asyncio
async def test_vanished_sensor_keeps_record_and_last_value(engine, fake_client):
    fake_client.motion["pir-1"] = SensorSnapshot("pir-1", "Hallway", MotionState.TRIGGERED)
    await engine.heartbeat.run_cycle()

    del fake_client.motion["pir-1"]
    await engine.heartbeat.run_cycle()

    record = engine.registry.lookup("pir-1")
    assert record is not None
    assert record.accessory.characteristic(MOTION_DETECTED).value is True


@pytest.mark.asyncio
async def test_failed_cycle_is_absorbed(engine, fake_client, caplog):
    fake_client.failures["refresh"] = RemoteUnavailable("gateway timeout")

    assert await engine.heartbeat.run_cycle() is None
    assert await engine.heartbeat.run_cycle() is None
    assert engine.heartbeat.cycles == 0
    assert caplog.text.count("Yale cloud unavailable") == 1

    fake_client.failures.clear()
    caplog.set_level("INFO")
    assert await engine.heartbeat.run_cycle() is not None
    assert "connection restored" in caplog.text


@pytest.mark.asyncio
async def test_auth_failure_is_absorbed(engine, fake_client):
    fake_client.failures["authenticate"] = AuthFailure("bad password")

    assert await engine.heartbeat.run_cycle() is None
    assert len(engine.registry) == 0


@pytest.mark.asyncio
async def test_on_cycle_receives_inventory(fake_client, hub, registry):
    received = []
    engine = build_engine(fake_client, hub, registry, on_cycle=received.append)

    inventory = await engine.heartbeat.run_cycle()

    assert received == [inventory]


@pytest.mark.asyncio
async def test_zero_interval_never_starts(fake_client, hub, registry):
    engine = build_engine(fake_client, hub, registry, interval=0)

    assert engine.heartbeat.enabled is False
    assert engine.heartbeat.start() is False
    await asyncio.sleep(0)

    assert engine.heartbeat.is_running is False
    assert fake_client.calls == []

    await engine.handler.get_panel_current_state()
    assert fake_client.calls == ["authenticate", "refresh", "get_panel_state"]


@pytest.mark.asyncio
async def test_fractional_interval_below_one_never_starts(fake_client, hub, registry):
    engine = build_engine(fake_client, hub, registry, interval=0.5)

    assert engine.heartbeat.start() is False


@pytest.mark.asyncio
async def test_loop_survives_failures(fake_client, hub, registry):
    done = asyncio.Event()
    fake_client.failures["refresh"] = RemoteUnavailable("down")

    def _recover(count: int) -> None:
        if count == 2:
            fake_client.failures.clear()

    sleep, calls = _parking_sleep(3, done, _recover)
    engine = build_engine(fake_client, hub, registry, interval=5, sleep=sleep)

    assert engine.heartbeat.start() is True
    assert engine.heartbeat.start() is True
    await asyncio.wait_for(done.wait(), timeout=1)

    assert calls["count"] == 4
    assert engine.heartbeat.cycles == 2
    assert engine.heartbeat.is_running is True
    await engine.heartbeat.async_stop()
    assert engine.heartbeat.is_running is False


@pytest.mark.asyncio
async def test_cycles_never_overlap(fake_client, hub, registry):
    done = asyncio.Event()
    sleep, _ = _parking_sleep(3, done)
    engine = build_engine(fake_client, hub, registry, interval=5, sleep=sleep)
    fetch = hub.async_fetch_inventory
    in_flight = 0
    max_in_flight = 0

    async def _slow_fetch():
        nonlocal in_flight, max_in_flight
        in_flight += 1
        max_in_flight = max(max_in_flight, in_flight)
        try:
            await asyncio.sleep(0.01)
            return await fetch()
        finally:
            in_flight -= 1

    hub.async_fetch_inventory = _slow_fetch
    engine.heartbeat.start()
    await asyncio.wait_for(done.wait(), timeout=1)
    await engine.heartbeat.async_stop()

    assert max_in_flight == 1
    assert engine.heartbeat.cycles == 3


@pytest.mark.asyncio
async def test_loop_survives_failing_listener(fake_client, hub, registry, caplog):
    done = asyncio.Event()
    sleep, _ = _parking_sleep(3, done)

    def _broken_listener(inventory) -> None:
        raise RuntimeError("listener failure")

    engine = build_engine(
        fake_client, hub, registry, interval=5, sleep=sleep, on_cycle=_broken_listener
    )

    engine.heartbeat.start()
    await asyncio.wait_for(done.wait(), timeout=1)

    assert engine.heartbeat.is_running is True
    assert engine.heartbeat.cycles == 3
    assert caplog.text.count("Error notifying heartbeat listeners") == 3
    await engine.heartbeat.async_stop()
