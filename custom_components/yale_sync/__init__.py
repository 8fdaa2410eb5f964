"""Set up the Yale Sync integration."""

from __future__ import annotations

import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import Platform
from homeassistant.core import HomeAssistant
from homeassistant.helpers import device_registry as dr, entity_registry as er
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from .api import YaleSyncClient
from .config import validate_config
from .const import DATA_COORDINATOR, DATA_HUB, DOMAIN
from .coordinator import YaleSyncDataUpdateCoordinator
from .entity import parse_unique_id, unique_base
from .errors import ConfigInvalid
from .hub import YaleSyncHub

_LOGGER = logging.getLogger(__name__)

PLATFORMS: list[Platform] = [
    Platform.ALARM_CONTROL_PANEL,
    Platform.BINARY_SENSOR,
]


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up Yale Sync from a config entry."""
    try:
        config = validate_config({**entry.data, **entry.options})
    except ConfigInvalid as err:
        _LOGGER.error("Yale Sync not started: %s", err)
        return False

    client = YaleSyncClient(
        async_get_clientsession(hass), config.username, config.password
    )
    hub = YaleSyncHub(client, config.username, config.name)
    coordinator = YaleSyncDataUpdateCoordinator(hass, hub, entry, config)
    _async_restore_accessories(hass, entry, coordinator)

    _LOGGER.debug("Searching for devices")
    await coordinator.async_config_entry_first_refresh()

    hass.data.setdefault(DOMAIN, {})[entry.entry_id] = {
        DATA_HUB: hub,
        DATA_COORDINATOR: coordinator,
    }
    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    coordinator.async_start()
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a Yale Sync config entry."""
    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    data = hass.data.get(DOMAIN, {}).pop(entry.entry_id, None)
    if data is not None:
        coordinator: YaleSyncDataUpdateCoordinator | None = data.get(DATA_COORDINATOR)
        if coordinator is not None:
            await coordinator.async_stop()
    return unload_ok


def _async_restore_accessories(
    hass: HomeAssistant,
    entry: ConfigEntry,
    coordinator: YaleSyncDataUpdateCoordinator,
) -> None:
    """Register accessories remembered in the entity registry."""
    registry = er.async_get(hass)
    devices = dr.async_get(hass)
    base = unique_base(entry)
    restored = 0
    for entity in er.async_entries_for_config_entry(registry, entry.entry_id):
        if entity.platform != DOMAIN:
            continue
        parsed = parse_unique_id(base, entity.unique_id)
        if parsed is None:
            _LOGGER.debug("Ignoring unrecognised unique ID %s", entity.unique_id)
            continue
        kind, identifier = parsed
        device = devices.async_get(entity.device_id) if entity.device_id else None
        name = (device.name if device is not None else None) or identifier
        coordinator.restore(identifier, kind, name)
        restored += 1
    if restored:
        _LOGGER.debug("Restored %s cached accessories", restored)
