"""Hub wrapper around the Yale Sync client."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass
import logging
from typing import Any

from .api import SensorSnapshot, YaleSyncClient
from .errors import RemoteUnavailable, SensorNotFound
from .registry import DeviceKind
from .translator import VendorPanelState

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PanelSnapshot:
    """State of the panel as reported by the Yale cloud."""

    identifier: str
    name: str
    state: VendorPanelState


@dataclass(frozen=True, slots=True)
class RemoteInventory:
    """One batch of remote state.

    A category is ``None`` when its fetch failed in this batch; an empty
    mapping means the fetch succeeded and reported nothing.
    """

    panel: PanelSnapshot | None
    motion_sensors: Mapping[str, SensorSnapshot] | None
    contact_sensors: Mapping[str, SensorSnapshot] | None

    def sensors(self, kind: DeviceKind) -> Mapping[str, SensorSnapshot] | None:
        """Return the sensors of ``kind`` from this batch."""
        if kind is DeviceKind.MOTION_SENSOR:
            return self.motion_sensors
        if kind is DeviceKind.CONTACT_SENSOR:
            return self.contact_sensors
        return None


class YaleSyncHub:
    """Run credentialed calls against a single Yale Sync account."""

    def __init__(
        self,
        client: YaleSyncClient,
        panel_identifier: str,
        panel_name: str,
    ) -> None:
        """Initialize the hub wrapper."""
        self._client = client
        self._panel_identifier = panel_identifier
        self._panel_name = panel_name

    @property
    def panel_identifier(self) -> str:
        return self._panel_identifier

    async def async_get_panel_state(self) -> VendorPanelState:
        """Fetch the current panel mode."""
        token = await self._async_prepare()
        state = await self._client.get_panel_state(token)
        if state is None:
            raise RemoteUnavailable("No panel is reported for this account")
        _LOGGER.debug("Panel mode is %s", state)
        return state

    async def async_set_panel_state(self, state: VendorPanelState) -> VendorPanelState:
        """Request a panel mode and return the mode the panel confirms."""
        token = await self._client.authenticate()
        _LOGGER.debug("Requesting panel mode %s", state)
        confirmed = await self._client.set_panel_state(token, state)
        if confirmed is not state:
            _LOGGER.info(
                "Panel reported mode %s after requesting %s", confirmed, state
            )
        return confirmed

    async def async_get_sensor(self, identifier: str) -> SensorSnapshot:
        """Fetch the current state of one sensor."""
        token = await self._async_prepare()
        motion, contact = await asyncio.gather(
            self._client.list_motion_sensors(token),
            self._client.list_contact_sensors(token),
        )
        sensor = motion.get(identifier) or contact.get(identifier)
        if sensor is None:
            raise SensorNotFound(identifier)
        return sensor

    async def async_fetch_inventory(self) -> RemoteInventory:
        """Fetch panel and sensor state as one batch.

        Authentication and the cache refresh must succeed; after that each
        category is fetched concurrently and a failing category is reported
        as ``None`` without affecting the others.
        """
        token = await self._async_prepare()
        panel_result, motion_result, contact_result = await asyncio.gather(
            self._client.get_panel_state(token),
            self._client.list_motion_sensors(token),
            self._client.list_contact_sensors(token),
            return_exceptions=True,
        )
        panel_state = _category_result("panel", panel_result)
        panel = (
            PanelSnapshot(self._panel_identifier, self._panel_name, panel_state)
            if panel_state is not None
            else None
        )
        return RemoteInventory(
            panel=panel,
            motion_sensors=_category_result("motion sensor", motion_result),
            contact_sensors=_category_result("contact sensor", contact_result),
        )

    async def _async_prepare(self) -> str:
        token = await self._client.authenticate()
        await self._client.refresh(token)
        return token


def _category_result(category: str, result: Any) -> Any:
    if isinstance(result, BaseException):
        if not isinstance(result, Exception):
            raise result
        _LOGGER.warning("Fetching %s state failed: %s", category, result)
        return None
    return result
