"""Reconcile the remote device inventory against the accessory registry."""

from __future__ import annotations

from collections.abc import Callable, Sequence
import logging

from .accessory import BridgeAccessory, build_accessory
from .hub import RemoteInventory
from .registry import AccessoryRecord, AccessoryRegistry, DeviceKind

_LOGGER = logging.getLogger(__name__)

_SENSOR_KINDS = (DeviceKind.MOTION_SENSOR, DeviceKind.CONTACT_SENSOR)

type AccessoryBuilder = Callable[[DeviceKind, str, str], BridgeAccessory]
type NewRecordsCallback = Callable[[Sequence[AccessoryRecord]], None]


class DiscoveryCoordinator:
    """Register newly seen devices exactly once."""

    def __init__(
        self,
        registry: AccessoryRegistry,
        *,
        builder: AccessoryBuilder = build_accessory,
        on_new_records: NewRecordsCallback | None = None,
    ) -> None:
        self._registry = registry
        self._builder = builder
        self._on_new_records = on_new_records

    def restore(self, identifier: str, kind: DeviceKind, name: str) -> AccessoryRecord:
        """Register a device remembered from a previous run."""
        known = identifier in self._registry
        record = self._register(identifier, kind, name)
        if not known:
            _LOGGER.debug("Restored %s %s (%s)", kind, name, identifier)
        return record

    def reconcile(self, inventory: RemoteInventory) -> list[AccessoryRecord]:
        """Register devices from ``inventory`` and return the new records.

        The panel may be absent and any sensor category may have failed to
        fetch; whatever was reported is still reconciled.
        """
        created: list[AccessoryRecord] = []
        panel = inventory.panel
        if panel is None:
            _LOGGER.debug("No panel in remote inventory")
        else:
            self._reconcile_one(panel.identifier, DeviceKind.PANEL, panel.name, created)

        for kind in _SENSOR_KINDS:
            sensors = inventory.sensors(kind)
            if sensors is None:
                _LOGGER.debug("Skipping %s reconciliation; fetch failed", kind)
                continue
            for sensor in sensors.values():
                self._reconcile_one(sensor.identifier, kind, sensor.name, created)

        if created and self._on_new_records is not None:
            self._on_new_records(created)
        return created

    def _reconcile_one(
        self,
        identifier: str,
        kind: DeviceKind,
        name: str,
        created: list[AccessoryRecord],
    ) -> None:
        if identifier in self._registry:
            return
        record = self._register(identifier, kind, name)
        _LOGGER.info("Registering %s: %s", kind.replace("_", " "), name)
        created.append(record)

    def _register(self, identifier: str, kind: DeviceKind, name: str) -> AccessoryRecord:
        return self._registry.register(
            identifier, kind, lambda: self._builder(kind, identifier, name)
        )
