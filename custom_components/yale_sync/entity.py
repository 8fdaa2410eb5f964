"""Shared entity helpers for the Yale Sync integration."""

from __future__ import annotations

import logging
from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_USERNAME
from homeassistant.core import callback
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.entity import Entity

from .accessory import PRIMARY_CHARACTERISTIC, WriteOrigin
from .const import DOMAIN
from .coordinator import YaleSyncDataUpdateCoordinator
from .errors import YaleSyncError
from .registry import AccessoryRecord, DeviceKind

_LOGGER = logging.getLogger(__name__)


def unique_base(entry: ConfigEntry) -> str:
    """Return the stable unique ID base for this config entry."""
    if entry.unique_id:
        return entry.unique_id
    return str(entry.data[CONF_USERNAME]).lower()


def build_unique_id(base: str, kind: DeviceKind, identifier: str) -> str:
    """Build a stable unique ID in <base>:<kind>:<identifier> format."""
    return f"{base}:{kind}:{identifier}"


def parse_unique_id(base: str, unique_id: str) -> tuple[DeviceKind, str] | None:
    """Return the device kind and identifier encoded in a unique ID."""
    prefix = f"{base}:"
    if not unique_id.startswith(prefix):
        return None
    kind, sep, identifier = unique_id[len(prefix) :].partition(":")
    if not sep or not identifier:
        return None
    try:
        return DeviceKind(kind), identifier
    except ValueError:
        return None


def device_info_for_record(record: AccessoryRecord) -> DeviceInfo:
    """Build device info for an accessory record."""
    info = record.accessory.information
    return DeviceInfo(
        identifiers={(DOMAIN, str(record.uuid))},
        name=info.name,
        manufacturer=info.manufacturer,
        model=info.model,
        serial_number=info.serial_number,
    )


class YaleSyncAccessoryEntity(Entity):
    """Entity mirroring the primary characteristic of one accessory."""

    _attr_has_entity_name = True
    _attr_name = None

    def __init__(
        self,
        coordinator: YaleSyncDataUpdateCoordinator,
        entry: ConfigEntry,
        record: AccessoryRecord,
    ) -> None:
        """Initialize the accessory entity."""
        self.coordinator = coordinator
        self._record = record
        self._characteristic = record.accessory.characteristic(
            PRIMARY_CHARACTERISTIC[record.kind]
        )
        self._attr_unique_id = build_unique_id(
            unique_base(entry), record.kind, record.identifier
        )
        self._attr_device_info = device_info_for_record(record)
        self._unavailable_logged = False

    @property
    def should_poll(self) -> bool:
        """Poll on demand only while the heartbeat is off."""
        return not self.coordinator.heartbeat.enabled

    @property
    def record(self) -> AccessoryRecord:
        return self._record

    @property
    def value(self) -> Any:
        """Return the last value pushed to the primary characteristic."""
        return self._characteristic.value

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Return additional state attributes."""
        return {"identifier": self._record.identifier}

    async def async_added_to_hass(self) -> None:
        """Follow characteristic pushes once the entity is in Home Assistant."""
        await super().async_added_to_hass()
        self.async_on_remove(self._characteristic.subscribe(self._handle_value))

    async def async_update(self) -> None:
        """Read fresh state on demand."""
        try:
            await self._characteristic.read()
        except YaleSyncError as err:
            if not self._unavailable_logged:
                _LOGGER.warning(
                    "Reading %s failed: %s", self._record.accessory.display_name, err
                )
                self._unavailable_logged = True
            self._attr_available = False
            return
        self._mark_available()

    @callback
    def _handle_value(self, value: Any, origin: WriteOrigin) -> None:
        _LOGGER.debug(
            "%s <- %s (%s)", self._record.accessory.display_name, value, origin
        )
        self._mark_available()
        self.async_write_ha_state()

    def _mark_available(self) -> None:
        if self._unavailable_logged:
            _LOGGER.info("%s is available again", self._record.accessory.display_name)
            self._unavailable_logged = False
        self._attr_available = True
