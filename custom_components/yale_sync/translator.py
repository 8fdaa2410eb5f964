"""State translation between Yale vendor modes and bridge-exposed values.

The vendor panel reports three modes while the bridge expects the richer
HomeKit security-system vocabulary. The mapping is a fixed surjection:

    arm     <-> AWAY_ARM
    disarm  <-> DISARMED / DISARM
    home    <-  STAY_ARM, NIGHT_ARM
    home     -> NIGHT_ARM

Yale does not distinguish "stay" from "night", so ``home`` always reports
as NIGHT_ARM. A STAY_ARM target therefore comes back as NIGHT_ARM once the
panel confirms it.

No I/O and no logging here.
"""

from __future__ import annotations

from enum import IntEnum, StrEnum


class VendorPanelState(StrEnum):
    """Panel modes as reported by the Yale cloud."""

    ARMED = "arm"
    DISARMED = "disarm"
    HOME = "home"


class BridgeCurrentState(IntEnum):
    """Security system current state values exposed to the bridge."""

    STAY_ARM = 0
    AWAY_ARM = 1
    NIGHT_ARM = 2
    DISARMED = 3
    TRIGGERED = 4


class BridgeTargetState(IntEnum):
    """Security system target state values accepted from the bridge."""

    STAY_ARM = 0
    AWAY_ARM = 1
    NIGHT_ARM = 2
    DISARM = 3


class MotionState(StrEnum):
    """Motion sensor state."""

    IDLE = "idle"
    TRIGGERED = "triggered"


class ContactState(StrEnum):
    """Contact sensor state."""

    OPEN = "open"
    CLOSED = "closed"


class ContactSensorValue(IntEnum):
    """Contact sensor values exposed to the bridge."""

    CONTACT_DETECTED = 0
    CONTACT_NOT_DETECTED = 1


_CURRENT_BY_VENDOR: dict[VendorPanelState, BridgeCurrentState] = {
    VendorPanelState.ARMED: BridgeCurrentState.AWAY_ARM,
    VendorPanelState.DISARMED: BridgeCurrentState.DISARMED,
    VendorPanelState.HOME: BridgeCurrentState.NIGHT_ARM,
}

_TARGET_BY_VENDOR: dict[VendorPanelState, BridgeTargetState] = {
    VendorPanelState.ARMED: BridgeTargetState.AWAY_ARM,
    VendorPanelState.DISARMED: BridgeTargetState.DISARM,
    VendorPanelState.HOME: BridgeTargetState.NIGHT_ARM,
}

_VENDOR_BY_TARGET: dict[BridgeTargetState, VendorPanelState] = {
    BridgeTargetState.AWAY_ARM: VendorPanelState.ARMED,
    BridgeTargetState.DISARM: VendorPanelState.DISARMED,
    BridgeTargetState.STAY_ARM: VendorPanelState.HOME,
    BridgeTargetState.NIGHT_ARM: VendorPanelState.HOME,
}

_CONTACT_BY_STATE: dict[ContactState, ContactSensorValue] = {
    ContactState.CLOSED: ContactSensorValue.CONTACT_DETECTED,
    ContactState.OPEN: ContactSensorValue.CONTACT_NOT_DETECTED,
}


def to_bridge_current(state: VendorPanelState) -> BridgeCurrentState:
    """Return the bridge current state for a vendor panel mode."""
    return _CURRENT_BY_VENDOR[VendorPanelState(state)]


def to_bridge_target(state: VendorPanelState) -> BridgeTargetState:
    """Return the bridge target state mirroring a vendor panel mode."""
    return _TARGET_BY_VENDOR[VendorPanelState(state)]


def to_vendor_target(target: BridgeTargetState) -> VendorPanelState:
    """Return the vendor mode to request for a bridge target state."""
    return _VENDOR_BY_TARGET[BridgeTargetState(target)]


def to_motion_detected(state: MotionState) -> bool:
    """Return the bridge motion-detected flag."""
    return MotionState(state) is MotionState.TRIGGERED


def to_contact_state(state: ContactState) -> ContactSensorValue:
    """Return the bridge contact sensor value."""
    return _CONTACT_BY_STATE[ContactState(state)]


def parse_vendor_state(value: object) -> VendorPanelState:
    """Parse a raw panel mode from the Yale cloud.

    Raises ``ValueError`` for modes the panel is not known to report.
    """
    if isinstance(value, VendorPanelState):
        return value
    return VendorPanelState(str(value).strip().lower())
