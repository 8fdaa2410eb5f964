"""Diagnostics support for Yale Sync."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import fields, is_dataclass
import enum
from typing import Any

from homeassistant.components.diagnostics import async_redact_data
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_PASSWORD, CONF_USERNAME
from homeassistant.core import HomeAssistant

from .const import DATA_COORDINATOR, DOMAIN
from .coordinator import YaleSyncDataUpdateCoordinator

TO_REDACT = {CONF_PASSWORD, CONF_USERNAME, "identifier", "serial_number"}


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant, entry: ConfigEntry
) -> dict[str, Any]:
    """Return diagnostics for a config entry."""
    data = hass.data.get(DOMAIN, {}).get(entry.entry_id)
    coordinator: YaleSyncDataUpdateCoordinator | None = (
        data.get(DATA_COORDINATOR) if data else None
    )
    accessories: list[dict[str, Any]] = []
    heartbeat: dict[str, Any] = {}
    if coordinator is not None:
        for record in coordinator.registry.all():
            accessory = record.accessory
            accessories.append(
                {
                    "kind": record.kind.value,
                    "uuid": str(record.uuid),
                    "identifier": record.identifier,
                    "information": _to_jsonable(accessory.information),
                    "characteristics": {
                        char.name: _to_jsonable(char.value)
                        for char in accessory.characteristics
                    },
                }
            )
        heartbeat = {
            "interval": coordinator.heartbeat.interval,
            "enabled": coordinator.heartbeat.enabled,
            "running": coordinator.heartbeat.is_running,
            "cycles": coordinator.heartbeat.cycles,
        }

    return {
        "entry_id": entry.entry_id,
        "entry_data": async_redact_data(dict(entry.data), TO_REDACT),
        "heartbeat": heartbeat,
        "accessories": async_redact_data(accessories, TO_REDACT),
    }


def _to_jsonable(value: Any) -> Any:
    """Normalize accessory values to JSON-safe types."""
    if value is None:
        return None
    if is_dataclass(value) and not isinstance(value, type):
        return {
            field.name: _to_jsonable(getattr(value, field.name))
            for field in fields(value)
        }
    if isinstance(value, Mapping):
        return {str(key): _to_jsonable(val) for key, val in value.items()}
    if isinstance(value, enum.Enum):
        return value.name
    if isinstance(value, (str, int, float, bool)):
        return value
    return str(value)
