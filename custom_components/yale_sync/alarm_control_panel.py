"""Alarm control panel platform for the Yale Sync panel."""

from __future__ import annotations

import logging
from typing import Any

from homeassistant.components.alarm_control_panel import (
    AlarmControlPanelEntity,
    AlarmControlPanelEntityFeature,
    AlarmControlPanelState,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, callback
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.entity_platform import AddConfigEntryEntitiesCallback

from .accessory import TARGET_STATE
from .const import DATA_COORDINATOR, DOMAIN
from .coordinator import YaleSyncDataUpdateCoordinator
from .entity import YaleSyncAccessoryEntity
from .errors import YaleSyncError
from .registry import AccessoryRecord, DeviceKind
from .translator import BridgeCurrentState, BridgeTargetState

_LOGGER = logging.getLogger(__name__)

_HA_STATE_BY_CURRENT: dict[BridgeCurrentState, AlarmControlPanelState] = {
    BridgeCurrentState.STAY_ARM: AlarmControlPanelState.ARMED_HOME,
    BridgeCurrentState.AWAY_ARM: AlarmControlPanelState.ARMED_AWAY,
    BridgeCurrentState.NIGHT_ARM: AlarmControlPanelState.ARMED_NIGHT,
    BridgeCurrentState.DISARMED: AlarmControlPanelState.DISARMED,
    BridgeCurrentState.TRIGGERED: AlarmControlPanelState.TRIGGERED,
}


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddConfigEntryEntitiesCallback,
) -> None:
    """Set up the Yale Sync alarm panel from a config entry."""
    coordinator: YaleSyncDataUpdateCoordinator = hass.data[DOMAIN][entry.entry_id][
        DATA_COORDINATOR
    ]
    known_ids: set[str] = set()

    @callback
    def _async_add_panels() -> None:
        entities: list[YaleSyncAlarmControlPanel] = []
        for record in coordinator.registry.of_kind(DeviceKind.PANEL):
            if record.identifier in known_ids:
                continue
            known_ids.add(record.identifier)
            entities.append(YaleSyncAlarmControlPanel(coordinator, entry, record))
        if entities:
            _LOGGER.debug("Adding %s panel entities", len(entities))
            async_add_entities(entities)

    _async_add_panels()
    entry.async_on_unload(coordinator.async_add_listener(_async_add_panels))


class YaleSyncAlarmControlPanel(YaleSyncAccessoryEntity, AlarmControlPanelEntity):
    """Representation of the Yale Sync panel."""

    _attr_code_arm_required = False
    _attr_supported_features = (
        AlarmControlPanelEntityFeature.ARM_AWAY
        | AlarmControlPanelEntityFeature.ARM_HOME
        | AlarmControlPanelEntityFeature.ARM_NIGHT
    )

    def __init__(
        self,
        coordinator: YaleSyncDataUpdateCoordinator,
        entry: ConfigEntry,
        record: AccessoryRecord,
    ) -> None:
        """Initialize the panel entity."""
        super().__init__(coordinator, entry, record)
        self._target = record.accessory.characteristic(TARGET_STATE)

    @property
    def alarm_state(self) -> AlarmControlPanelState | None:
        """Return the current state."""
        return current_to_alarm_state(self.value)

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Return additional state attributes."""
        target = self._target.value
        return {
            **super().extra_state_attributes,
            "target_state": BridgeTargetState(target).name.lower()
            if target is not None
            else None,
        }

    async def async_alarm_arm_away(self, code: str | None = None) -> None:
        """Arm the panel in away mode."""
        await self._async_set_target(BridgeTargetState.AWAY_ARM)

    async def async_alarm_arm_home(self, code: str | None = None) -> None:
        """Arm the panel in home (stay) mode."""
        await self._async_set_target(BridgeTargetState.STAY_ARM)

    async def async_alarm_arm_night(self, code: str | None = None) -> None:
        """Arm the panel in night mode."""
        await self._async_set_target(BridgeTargetState.NIGHT_ARM)

    async def async_alarm_disarm(self, code: str | None = None) -> None:
        """Disarm the panel."""
        await self._async_set_target(BridgeTargetState.DISARM)

    async def _async_set_target(self, target: BridgeTargetState) -> None:
        """Send a user command through the target state characteristic."""
        try:
            await self._target.write(target)
        except YaleSyncError as err:
            _LOGGER.warning("Setting panel to %s failed: %s", target.name, err)
            raise HomeAssistantError(f"Unable to change panel mode: {err}") from err


def current_to_alarm_state(value: Any) -> AlarmControlPanelState | None:
    """Map a bridge current state to the Home Assistant alarm state."""
    if value is None:
        return None
    return _HA_STATE_BY_CURRENT.get(BridgeCurrentState(value))
