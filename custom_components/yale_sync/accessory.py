"""Bridge-side accessories and their characteristic sinks.

Every value written to a characteristic carries a ``WriteOrigin``. Write
handlers receive the origin alongside the value, so a handler that talks to
the Yale cloud can tell a user command from a heartbeat push and refuse to
re-issue the command for the latter.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from enum import StrEnum
import logging
from typing import Any
import uuid

from .const import (
    CONTACT_SENSOR_MODEL,
    MANUFACTURER,
    MOTION_SENSOR_MODEL,
    PANEL_MODEL,
)
from .registry import DeviceKind, derive_uuid

_LOGGER = logging.getLogger(__name__)

CURRENT_STATE = "SecuritySystemCurrentState"
TARGET_STATE = "SecuritySystemTargetState"
MOTION_DETECTED = "MotionDetected"
CONTACT_SENSOR_STATE = "ContactSensorState"


class WriteOrigin(StrEnum):
    """Where a characteristic write came from."""

    USER_COMMAND = "user_command"
    HEARTBEAT_PUSH = "heartbeat_push"
    COMMAND_RESPONSE = "command_response"


type ReadHandler = Callable[[], Awaitable[Any]]
type WriteHandler = Callable[[Any, WriteOrigin], Awaitable[Any]]
type ValueListener = Callable[[Any, WriteOrigin], None]


class Characteristic:
    """A single bridge-visible value with read/write hooks."""

    def __init__(self, name: str, value: Any = None) -> None:
        self._name = name
        self._value = value
        self._read_handler: ReadHandler | None = None
        self._write_handler: WriteHandler | None = None
        self._listeners: list[ValueListener] = []

    def __repr__(self) -> str:
        return f"Characteristic({self._name!r}, value={self._value!r})"

    @property
    def name(self) -> str:
        return self._name

    @property
    def value(self) -> Any:
        """Return the last known value without contacting the remote side."""
        return self._value

    def on_read(self, handler: ReadHandler) -> None:
        """Register the handler serving bridge reads."""
        self._read_handler = handler

    def on_write(self, handler: WriteHandler) -> None:
        """Register the handler receiving every write with its origin."""
        self._write_handler = handler

    def subscribe(self, listener: ValueListener) -> Callable[[], None]:
        """Call ``listener`` whenever the value changes hands."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    async def read(self) -> Any:
        """Serve a bridge read, refreshing the stored value on success."""
        if self._read_handler is None:
            return self._value
        value = await self._read_handler()
        self._store(value, WriteOrigin.COMMAND_RESPONSE)
        return value

    async def write(self, value: Any) -> Any:
        """Apply a bridge-issued command and return the acknowledged value.

        The value is stored only once the write handler accepts it; a failing
        handler leaves the previous value in place.
        """
        result = None
        if self._write_handler is not None:
            result = await self._write_handler(value, WriteOrigin.USER_COMMAND)
        self._store(value, WriteOrigin.USER_COMMAND)
        return value if result is None else result

    async def push_value(self, value: Any, origin: WriteOrigin) -> None:
        """Set the value out-of-band, tagged with its origin."""
        if origin is WriteOrigin.USER_COMMAND:
            raise ValueError("User commands must go through write()")
        self._store(value, origin)
        if self._write_handler is not None:
            await self._write_handler(value, origin)

    def _store(self, value: Any, origin: WriteOrigin) -> None:
        self._value = value
        for listener in list(self._listeners):
            listener(value, origin)


@dataclass(frozen=True, slots=True)
class AccessoryInformation:
    """Static accessory information shown by the bridge."""

    name: str
    manufacturer: str
    model: str
    serial_number: str


class BridgeAccessory:
    """A bridge-side accessory owning a fixed set of characteristics."""

    def __init__(
        self,
        kind: DeviceKind,
        identifier: str,
        information: AccessoryInformation,
        characteristics: Iterable[Characteristic],
    ) -> None:
        self.kind = kind
        self.uuid: uuid.UUID = derive_uuid(kind, identifier)
        self.information = information
        self._characteristics = {char.name: char for char in characteristics}

    def __repr__(self) -> str:
        return f"BridgeAccessory({self.kind}, {self.information.name!r}, {self.uuid})"

    @property
    def display_name(self) -> str:
        return self.information.name

    @property
    def characteristics(self) -> list[Characteristic]:
        return list(self._characteristics.values())

    def characteristic(self, name: str) -> Characteristic:
        """Return a characteristic by name; raises ``KeyError`` if absent."""
        return self._characteristics[name]


def build_panel_accessory(identifier: str, name: str) -> BridgeAccessory:
    """Build the security system accessory for the panel."""
    return BridgeAccessory(
        DeviceKind.PANEL,
        identifier,
        AccessoryInformation(name, MANUFACTURER, PANEL_MODEL, identifier),
        (Characteristic(CURRENT_STATE), Characteristic(TARGET_STATE)),
    )


def build_motion_accessory(identifier: str, name: str) -> BridgeAccessory:
    """Build a motion sensor accessory."""
    return BridgeAccessory(
        DeviceKind.MOTION_SENSOR,
        identifier,
        AccessoryInformation(name, MANUFACTURER, MOTION_SENSOR_MODEL, identifier),
        (Characteristic(MOTION_DETECTED),),
    )


def build_contact_accessory(identifier: str, name: str) -> BridgeAccessory:
    """Build a contact sensor accessory."""
    return BridgeAccessory(
        DeviceKind.CONTACT_SENSOR,
        identifier,
        AccessoryInformation(name, MANUFACTURER, CONTACT_SENSOR_MODEL, identifier),
        (Characteristic(CONTACT_SENSOR_STATE),),
    )


_BUILDERS: dict[DeviceKind, Callable[[str, str], BridgeAccessory]] = {
    DeviceKind.PANEL: build_panel_accessory,
    DeviceKind.MOTION_SENSOR: build_motion_accessory,
    DeviceKind.CONTACT_SENSOR: build_contact_accessory,
}

PRIMARY_CHARACTERISTIC: dict[DeviceKind, str] = {
    DeviceKind.PANEL: CURRENT_STATE,
    DeviceKind.MOTION_SENSOR: MOTION_DETECTED,
    DeviceKind.CONTACT_SENSOR: CONTACT_SENSOR_STATE,
}


def build_accessory(kind: DeviceKind, identifier: str, name: str) -> BridgeAccessory:
    """Build the accessory for ``kind``."""
    _LOGGER.debug("Building %s accessory %s (%s)", kind, name, identifier)
    return _BUILDERS[kind](identifier, name)
