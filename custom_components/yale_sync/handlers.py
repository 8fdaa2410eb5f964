"""On-demand reads and commands issued by the bridge."""

from __future__ import annotations

import logging
from typing import Any

from .accessory import (
    CONTACT_SENSOR_STATE,
    CURRENT_STATE,
    MOTION_DETECTED,
    TARGET_STATE,
    WriteOrigin,
)
from .hub import YaleSyncHub
from .registry import AccessoryRecord, AccessoryRegistry, DeviceKind
from .translator import (
    BridgeCurrentState,
    BridgeTargetState,
    ContactSensorValue,
    ContactState,
    MotionState,
    to_bridge_current,
    to_bridge_target,
    to_contact_state,
    to_motion_detected,
    to_vendor_target,
)

_LOGGER = logging.getLogger(__name__)


class OnDemandHandler:
    """Serve bridge reads and panel commands against the Yale cloud.

    Calls are independent of each other and of the heartbeat; nothing here
    serializes them, so the last completed write to a characteristic wins.
    """

    def __init__(self, hub: YaleSyncHub, registry: AccessoryRegistry) -> None:
        self._hub = hub
        self._registry = registry

    def bind(self, record: AccessoryRecord) -> None:
        """Attach read and write handlers to a record's characteristics."""
        accessory = record.accessory
        identifier = record.identifier
        if record.kind is DeviceKind.PANEL:
            accessory.characteristic(CURRENT_STATE).on_read(
                self.get_panel_current_state
            )
            target = accessory.characteristic(TARGET_STATE)
            target.on_read(self.get_panel_target_state)
            target.on_write(self._handle_target_write)
        elif record.kind is DeviceKind.MOTION_SENSOR:

            async def _read_motion() -> bool:
                return to_motion_detected(
                    MotionState(await self.get_sensor_state(identifier))
                )

            accessory.characteristic(MOTION_DETECTED).on_read(_read_motion)
        elif record.kind is DeviceKind.CONTACT_SENSOR:

            async def _read_contact() -> ContactSensorValue:
                return to_contact_state(
                    ContactState(await self.get_sensor_state(identifier))
                )

            accessory.characteristic(CONTACT_SENSOR_STATE).on_read(_read_contact)

    async def get_panel_current_state(self) -> BridgeCurrentState:
        """Fetch the panel mode and return it as a bridge current state."""
        state = await self._hub.async_get_panel_state()
        current = to_bridge_current(state)
        _LOGGER.debug("Reporting current state as %s", current.name)
        return current

    async def get_panel_target_state(self) -> BridgeTargetState:
        """Fetch the panel mode and return it as a bridge target state."""
        state = await self._hub.async_get_panel_state()
        target = to_bridge_target(state)
        _LOGGER.debug("Reporting target state as %s", target.name)
        return target

    async def set_panel_target_state(
        self, target: BridgeTargetState
    ) -> BridgeCurrentState:
        """Command the panel and return the state it confirms."""
        requested = to_vendor_target(target)
        _LOGGER.info("Set alarm state to %s", requested)
        confirmed = await self._hub.async_set_panel_state(requested)
        current = to_bridge_current(confirmed)
        record = self._registry.lookup(self._hub.panel_identifier)
        if record is not None:
            await record.accessory.characteristic(CURRENT_STATE).push_value(
                current, WriteOrigin.COMMAND_RESPONSE
            )
        return current

    async def get_sensor_state(self, identifier: str) -> MotionState | ContactState:
        """Fetch the fresh state of one sensor."""
        sensor = await self._hub.async_get_sensor(identifier)
        return sensor.state

    async def _handle_target_write(
        self, value: Any, origin: WriteOrigin
    ) -> BridgeCurrentState | None:
        if origin is not WriteOrigin.USER_COMMAND:
            return None
        return await self.set_panel_target_state(BridgeTargetState(value))
