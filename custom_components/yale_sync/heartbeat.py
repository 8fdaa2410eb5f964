"""Periodic background refresh of mirrored device state."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Coroutine
import contextlib
import logging
from typing import Any

from .accessory import (
    CONTACT_SENSOR_STATE,
    CURRENT_STATE,
    MOTION_DETECTED,
    TARGET_STATE,
    WriteOrigin,
)
from .discovery import DiscoveryCoordinator
from .errors import YaleSyncError
from .hub import RemoteInventory, YaleSyncHub
from .registry import AccessoryRecord, AccessoryRegistry, DeviceKind
from .translator import (
    ContactState,
    MotionState,
    to_bridge_current,
    to_bridge_target,
    to_contact_state,
    to_motion_detected,
)

_LOGGER = logging.getLogger(__name__)

# Intervals below this disable the heartbeat entirely.
MIN_INTERVAL = 1

type CycleCallback = Callable[[RemoteInventory], None]
type TaskFactory = Callable[[Coroutine[Any, Any, None]], asyncio.Task[None]]


class HeartbeatScheduler:
    """Fetch remote state on a fixed interval and push it to accessories.

    One cycle is sleep, fetch, reconcile, apply. The next sleep starts only
    after the previous apply finished, so cycles never overlap. A failing
    cycle is logged and the loop carries on.
    """

    def __init__(
        self,
        hub: YaleSyncHub,
        registry: AccessoryRegistry,
        discovery: DiscoveryCoordinator,
        interval: float,
        *,
        on_cycle: CycleCallback | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._hub = hub
        self._registry = registry
        self._discovery = discovery
        self._interval = interval
        self._on_cycle = on_cycle
        self._sleep = sleep
        self._task: asyncio.Task[None] | None = None
        self._unavailable_logged = False
        self._cycles = 0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def enabled(self) -> bool:
        """Return if the configured interval allows the heartbeat to run."""
        return self._interval >= MIN_INTERVAL

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def cycles(self) -> int:
        """Return the number of completed cycles."""
        return self._cycles

    def start(self, task_factory: TaskFactory | None = None) -> bool:
        """Start the heartbeat once; return whether it is running."""
        if self._task is not None:
            return self.is_running
        if not self.enabled:
            _LOGGER.debug(
                "Heartbeat disabled (refresh interval %s < %s)",
                self._interval,
                MIN_INTERVAL,
            )
            return False
        factory = task_factory or asyncio.create_task
        self._task = factory(self._async_run())
        _LOGGER.debug("Heartbeat started with %ss interval", self._interval)
        return True

    async def async_stop(self) -> None:
        """Stop the loop when the host tears the integration down."""
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    async def _async_run(self) -> None:
        while True:
            await self._sleep(self._interval)
            await self.run_cycle()

    async def run_cycle(self) -> RemoteInventory | None:
        """Run one fetch/apply cycle; failures are logged, never raised."""
        try:
            inventory = await self._hub.async_fetch_inventory()
        except YaleSyncError as err:
            self._log_unavailable(err)
            return None
        except Exception:  # noqa: BLE001
            _LOGGER.exception("Unexpected error fetching Yale state")
            return None
        self._log_available()
        try:
            self._discovery.reconcile(inventory)
            await self.apply(inventory)
        except Exception:  # noqa: BLE001
            _LOGGER.exception("Unexpected error applying Yale state")
            return None
        self._cycles += 1
        if self._on_cycle is not None:
            try:
                self._on_cycle(inventory)
            except Exception:  # noqa: BLE001
                _LOGGER.exception("Error notifying heartbeat listeners")
        return inventory

    async def apply(self, inventory: RemoteInventory) -> None:
        """Push fresh state to every registered accessory that has some."""
        for record in self._registry.all():
            await self._apply_record(record, inventory)

    async def _apply_record(
        self, record: AccessoryRecord, inventory: RemoteInventory
    ) -> None:
        accessory = record.accessory
        if record.kind is DeviceKind.PANEL:
            panel = inventory.panel
            if panel is None or panel.identifier != record.identifier:
                return
            await accessory.characteristic(CURRENT_STATE).push_value(
                to_bridge_current(panel.state), WriteOrigin.HEARTBEAT_PUSH
            )
            await accessory.characteristic(TARGET_STATE).push_value(
                to_bridge_target(panel.state), WriteOrigin.HEARTBEAT_PUSH
            )
            return

        sensors = inventory.sensors(record.kind)
        if not sensors or record.identifier not in sensors:
            return
        state = sensors[record.identifier].state
        if record.kind is DeviceKind.MOTION_SENSOR:
            await accessory.characteristic(MOTION_DETECTED).push_value(
                to_motion_detected(MotionState(state)), WriteOrigin.HEARTBEAT_PUSH
            )
        else:
            await accessory.characteristic(CONTACT_SENSOR_STATE).push_value(
                to_contact_state(ContactState(state)), WriteOrigin.HEARTBEAT_PUSH
            )

    def _log_unavailable(self, err: Exception) -> None:
        if self._unavailable_logged:
            _LOGGER.debug("Heartbeat fetch failed: %s", err)
            return
        _LOGGER.warning("Yale cloud unavailable; retrying next cycle: %s", err)
        self._unavailable_logged = True

    def _log_available(self) -> None:
        if self._unavailable_logged:
            _LOGGER.info("Yale cloud connection restored")
            self._unavailable_logged = False
