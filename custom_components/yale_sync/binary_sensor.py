"""Binary sensors for Yale Sync motion and contact sensors."""

from __future__ import annotations

import logging

from homeassistant.components.binary_sensor import (
    BinarySensorDeviceClass,
    BinarySensorEntity,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.entity_platform import AddConfigEntryEntitiesCallback

from .const import DATA_COORDINATOR, DOMAIN
from .coordinator import YaleSyncDataUpdateCoordinator
from .entity import YaleSyncAccessoryEntity
from .registry import AccessoryRecord, DeviceKind
from .translator import ContactSensorValue

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddConfigEntryEntitiesCallback,
) -> None:
    """Set up Yale Sync sensors from a config entry."""
    coordinator: YaleSyncDataUpdateCoordinator = hass.data[DOMAIN][entry.entry_id][
        DATA_COORDINATOR
    ]
    known_ids: set[str] = set()

    @callback
    def _async_add_sensors() -> None:
        entities: list[YaleSyncBinarySensor] = []
        for record in coordinator.registry.all():
            if record.kind is DeviceKind.PANEL or record.identifier in known_ids:
                continue
            known_ids.add(record.identifier)
            entities.append(_sensor_for_record(coordinator, entry, record))
        if entities:
            _LOGGER.debug("Adding %s sensor entities", len(entities))
            async_add_entities(entities)

    _async_add_sensors()
    entry.async_on_unload(coordinator.async_add_listener(_async_add_sensors))


class YaleSyncBinarySensor(YaleSyncAccessoryEntity, BinarySensorEntity):
    """Base class for Yale Sync sensors."""


class YaleSyncMotionSensor(YaleSyncBinarySensor):
    """Representation of a Yale PIR motion sensor."""

    _attr_device_class = BinarySensorDeviceClass.MOTION

    @property
    def is_on(self) -> bool | None:
        """Return if motion is detected."""
        value = self.value
        return bool(value) if value is not None else None


class YaleSyncContactSensor(YaleSyncBinarySensor):
    """Representation of a Yale door/window contact."""

    _attr_device_class = BinarySensorDeviceClass.DOOR

    @property
    def is_on(self) -> bool | None:
        """Return if the contact is open."""
        value = self.value
        if value is None:
            return None
        return ContactSensorValue(value) is ContactSensorValue.CONTACT_NOT_DETECTED


def _sensor_for_record(
    coordinator: YaleSyncDataUpdateCoordinator,
    entry: ConfigEntry,
    record: AccessoryRecord,
) -> YaleSyncBinarySensor:
    if record.kind is DeviceKind.MOTION_SENSOR:
        return YaleSyncMotionSensor(coordinator, entry, record)
    return YaleSyncContactSensor(coordinator, entry, record)
