"""Tests for vendor/bridge state translation."""

from __future__ import annotations

import pytest

from custom_components.yale_sync.translator import (
    BridgeCurrentState,
    BridgeTargetState,
    ContactSensorValue,
    ContactState,
    MotionState,
    VendorPanelState,
    parse_vendor_state,
    to_bridge_current,
    to_bridge_target,
    to_contact_state,
    to_motion_detected,
    to_vendor_target,
)


@pytest.mark.parametrize(
    ("vendor", "current"),
    [
        (VendorPanelState.ARMED, BridgeCurrentState.AWAY_ARM),
        (VendorPanelState.DISARMED, BridgeCurrentState.DISARMED),
        (VendorPanelState.HOME, BridgeCurrentState.NIGHT_ARM),
    ],
)
def test_current_state_mapping(vendor, current):
    assert to_bridge_current(vendor) == current
    assert to_bridge_current(vendor) == to_bridge_current(vendor)


@pytest.mark.parametrize(
    ("target", "vendor"),
    [
        (BridgeTargetState.AWAY_ARM, VendorPanelState.ARMED),
        (BridgeTargetState.DISARM, VendorPanelState.DISARMED),
        (BridgeTargetState.STAY_ARM, VendorPanelState.HOME),
        (BridgeTargetState.NIGHT_ARM, VendorPanelState.HOME),
    ],
)
def test_vendor_target_mapping(target, vendor):
    assert to_vendor_target(target) == vendor


def test_stay_and_night_collapse_to_home():
    assert (
        to_vendor_target(BridgeTargetState.STAY_ARM)
        == to_vendor_target(BridgeTargetState.NIGHT_ARM)
        == VendorPanelState.HOME
    )


def test_target_round_trip_is_idempotent_but_lossy():
    for target in BridgeTargetState:
        once = to_bridge_current(to_vendor_target(target))
        vendor_again = to_vendor_target(to_bridge_target(to_vendor_target(target)))
        assert to_bridge_current(vendor_again) == once
    assert (
        to_bridge_current(to_vendor_target(BridgeTargetState.STAY_ARM))
        == BridgeCurrentState.NIGHT_ARM
    )


def test_target_mirrors_current():
    assert to_bridge_target(VendorPanelState.ARMED) == BridgeTargetState.AWAY_ARM
    assert to_bridge_target(VendorPanelState.DISARMED) == BridgeTargetState.DISARM
    assert to_bridge_target(VendorPanelState.HOME) == BridgeTargetState.NIGHT_ARM


def test_raw_target_values_are_accepted():
    assert to_vendor_target(1) == VendorPanelState.ARMED
    assert to_vendor_target(3) == VendorPanelState.DISARMED


def test_sensor_mappings():
    assert to_motion_detected(MotionState.TRIGGERED) is True
    assert to_motion_detected(MotionState.IDLE) is False
    assert to_contact_state(ContactState.CLOSED) == ContactSensorValue.CONTACT_DETECTED
    assert (
        to_contact_state(ContactState.OPEN) == ContactSensorValue.CONTACT_NOT_DETECTED
    )


def test_parse_vendor_state():
    assert parse_vendor_state(" Home ") == VendorPanelState.HOME
    assert parse_vendor_state(VendorPanelState.ARMED) is VendorPanelState.ARMED
    with pytest.raises(ValueError):
        parse_vendor_state("partial")
