"""Accessory registry for the Yale Sync engine."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import StrEnum
import logging
from typing import TYPE_CHECKING
import uuid

from .const import DOMAIN, PLATFORM_NAME

if TYPE_CHECKING:
    from .accessory import BridgeAccessory

_LOGGER = logging.getLogger(__name__)


class DeviceKind(StrEnum):
    """Kinds of devices mirrored from the Yale cloud."""

    PANEL = "panel"
    MOTION_SENSOR = "motion_sensor"
    CONTACT_SENSOR = "contact_sensor"


def derive_uuid(kind: DeviceKind, identifier: str) -> uuid.UUID:
    """Return the deterministic, namespaced UUID for a device."""
    return uuid.uuid5(
        uuid.NAMESPACE_URL, f"{DOMAIN}.{PLATFORM_NAME}.{kind}.{identifier}"
    )


@dataclass(frozen=True, slots=True)
class AccessoryRecord:
    """A registered device and its bridge-side accessory."""

    identifier: str
    kind: DeviceKind
    accessory: BridgeAccessory

    @property
    def uuid(self) -> uuid.UUID:
        return self.accessory.uuid


class AccessoryRegistry:
    """Own the mapping from device identifier to accessory record.

    Registration is idempotent and records are never evicted; a device that
    vanishes from the remote inventory keeps its record and simply stops
    receiving fresh state.
    """

    def __init__(self) -> None:
        self._records: dict[str, AccessoryRecord] = {}

    def register(
        self,
        identifier: str,
        kind: DeviceKind,
        factory: Callable[[], BridgeAccessory],
    ) -> AccessoryRecord:
        """Return the record for ``identifier``, creating it on first sight."""
        record = self._records.get(identifier)
        if record is not None:
            if record.kind is not kind:
                _LOGGER.warning(
                    "Device %s already registered as %s; ignoring %s",
                    identifier,
                    record.kind,
                    kind,
                )
            return record
        record = AccessoryRecord(identifier, kind, factory())
        self._records[identifier] = record
        return record

    def lookup(self, identifier: str) -> AccessoryRecord | None:
        """Return the record for ``identifier`` if registered."""
        return self._records.get(identifier)

    def all(self) -> list[AccessoryRecord]:
        """Return every record in registration order."""
        return list(self._records.values())

    def of_kind(self, kind: DeviceKind) -> list[AccessoryRecord]:
        """Return the records of one device kind in registration order."""
        return [record for record in self._records.values() if record.kind is kind]

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._records

    def __iter__(self) -> Iterator[AccessoryRecord]:
        return iter(self.all())

    def __len__(self) -> int:
        return len(self._records)
