"""Data update coordinator for the Yale Sync integration."""

from __future__ import annotations

from collections.abc import Sequence
import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, callback
from homeassistant.exceptions import ConfigEntryAuthFailed
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from .config import YaleSyncConfig
from .const import DOMAIN
from .discovery import DiscoveryCoordinator
from .errors import AuthFailure, YaleSyncError
from .handlers import OnDemandHandler
from .heartbeat import HeartbeatScheduler
from .hub import RemoteInventory, YaleSyncHub
from .registry import AccessoryRecord, AccessoryRegistry, DeviceKind

_LOGGER = logging.getLogger(__name__)


class YaleSyncDataUpdateCoordinator(DataUpdateCoordinator[RemoteInventory]):
    """Own the sync engine for one config entry and broadcast its cycles.

    Polling is driven by the heartbeat rather than by the coordinator's own
    interval; every completed cycle is published through
    ``async_set_updated_data`` so platforms can add newly discovered devices.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        hub: YaleSyncHub,
        entry: ConfigEntry,
        config: YaleSyncConfig,
    ) -> None:
        """Initialize the coordinator."""
        super().__init__(hass, _LOGGER, name=DOMAIN, config_entry=entry)
        self._hub = hub
        self.config = config
        self.registry = AccessoryRegistry()
        self.handler = OnDemandHandler(hub, self.registry)
        self.discovery = DiscoveryCoordinator(
            self.registry, on_new_records=self._handle_new_records
        )
        self.heartbeat = HeartbeatScheduler(
            hub,
            self.registry,
            self.discovery,
            config.refresh_interval,
            on_cycle=self._handle_cycle,
        )

    @property
    def hub(self) -> YaleSyncHub:
        return self._hub

    def restore(self, identifier: str, kind: DeviceKind, name: str) -> AccessoryRecord:
        """Register a device remembered from a previous run."""
        known = identifier in self.registry
        record = self.discovery.restore(identifier, kind, name)
        if not known:
            self.handler.bind(record)
        return record

    @callback
    def async_start(self) -> bool:
        """Start the heartbeat after the initial discovery."""
        started = self.heartbeat.start(
            lambda coro: self.hass.async_create_background_task(
                coro, f"{DOMAIN} heartbeat"
            )
        )
        if not started:
            _LOGGER.info(
                "Periodic refresh disabled; state is only fetched on demand"
            )
        return started

    async def async_stop(self) -> None:
        """Stop the heartbeat when the entry is unloaded."""
        await self.heartbeat.async_stop()

    async def _async_update_data(self) -> RemoteInventory:
        """Fetch one batch, register new devices and push their state."""
        try:
            inventory = await self._hub.async_fetch_inventory()
        except AuthFailure as err:
            raise ConfigEntryAuthFailed(str(err)) from err
        except YaleSyncError as err:
            raise UpdateFailed(str(err)) from err
        self.discovery.reconcile(inventory)
        await self.heartbeat.apply(inventory)
        return inventory

    def _handle_new_records(self, records: Sequence[AccessoryRecord]) -> None:
        for record in records:
            self.handler.bind(record)

    @callback
    def _handle_cycle(self, inventory: RemoteInventory) -> None:
        self.async_set_updated_data(inventory)
