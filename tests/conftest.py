"""Fixtures for Yale Sync tests."""

from __future__ import annotations

from dataclasses import dataclass
from unittest.mock import AsyncMock

import pytest

from custom_components.yale_sync.api import SensorSnapshot
from custom_components.yale_sync.discovery import DiscoveryCoordinator
from custom_components.yale_sync.handlers import OnDemandHandler
from custom_components.yale_sync.heartbeat import HeartbeatScheduler
from custom_components.yale_sync.hub import YaleSyncHub
from custom_components.yale_sync.registry import AccessoryRegistry
from custom_components.yale_sync.translator import (
    ContactState,
    MotionState,
    VendorPanelState,
)

PANEL_ID = "owner@example.com"
PANEL_NAME = "Home Alarm"


class FakeYaleClient:
    """In-memory stand-in for the Yale cloud client."""

    def __init__(self) -> None:
        self.mode: VendorPanelState | None = VendorPanelState.DISARMED
        self.confirm_mode: VendorPanelState | None = None
        self.motion: dict[str, SensorSnapshot] = {
            "pir-1": SensorSnapshot("pir-1", "Hallway", MotionState.IDLE),
        }
        self.contact: dict[str, SensorSnapshot] = {
            "dc-1": SensorSnapshot("dc-1", "Front Door", ContactState.CLOSED),
        }
        self.calls: list[str] = []
        self.failures: dict[str, Exception] = {}
        self.set_panel_state = AsyncMock(side_effect=self._set_panel_state)

    def _check(self, name: str) -> None:
        self.calls.append(name)
        failure = self.failures.get(name)
        if failure is not None:
            raise failure

    async def authenticate(self, *, force: bool = False) -> str:
        self._check("authenticate")
        return "token"

    async def refresh(self, token: str) -> None:
        self._check("refresh")

    async def get_panel_state(self, token: str) -> VendorPanelState | None:
        self._check("get_panel_state")
        return self.mode

    async def _set_panel_state(
        self, token: str, state: VendorPanelState
    ) -> VendorPanelState:
        self._check("set_panel_state")
        self.mode = self.confirm_mode or state
        return self.mode

    async def list_motion_sensors(self, token: str) -> dict[str, SensorSnapshot]:
        self._check("list_motion_sensors")
        return dict(self.motion)

    async def list_contact_sensors(self, token: str) -> dict[str, SensorSnapshot]:
        self._check("list_contact_sensors")
        return dict(self.contact)


@dataclass
class Engine:
    client: FakeYaleClient
    hub: YaleSyncHub
    registry: AccessoryRegistry
    discovery: DiscoveryCoordinator
    handler: OnDemandHandler
    heartbeat: HeartbeatScheduler


@pytest.fixture
def fake_client() -> FakeYaleClient:
    return FakeYaleClient()


@pytest.fixture
def hub(fake_client: FakeYaleClient) -> YaleSyncHub:
    return YaleSyncHub(fake_client, PANEL_ID, PANEL_NAME)


@pytest.fixture
def registry() -> AccessoryRegistry:
    return AccessoryRegistry()


def build_engine(
    client: FakeYaleClient,
    hub: YaleSyncHub,
    registry: AccessoryRegistry,
    interval: float = 10,
    **heartbeat_kwargs,
) -> Engine:
    handler = OnDemandHandler(hub, registry)

    def _bind_all(records) -> None:
        for record in records:
            handler.bind(record)

    discovery = DiscoveryCoordinator(registry, on_new_records=_bind_all)
    heartbeat = HeartbeatScheduler(
        hub, registry, discovery, interval, **heartbeat_kwargs
    )
    return Engine(client, hub, registry, discovery, handler, heartbeat)


@pytest.fixture
def engine(
    fake_client: FakeYaleClient, hub: YaleSyncHub, registry: AccessoryRegistry
) -> Engine:
    return build_engine(fake_client, hub, registry)
