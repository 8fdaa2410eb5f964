"""Error taxonomy for the Yale Sync engine."""

from __future__ import annotations


class YaleSyncError(Exception):
    """Base class for Yale Sync failures."""


class ConfigInvalid(YaleSyncError):
    """The configuration is malformed or missing required options."""


class AuthFailure(YaleSyncError):
    """The Yale cloud rejected the configured credentials."""


class RemoteUnavailable(YaleSyncError):
    """The Yale cloud could not be reached or returned an unusable reply."""


class SensorNotFound(YaleSyncError):
    """A sensor identifier is absent from the latest remote inventory."""

    def __init__(self, identifier: str) -> None:
        super().__init__(f"Sensor {identifier} is not reported by the panel")
        self.identifier = identifier
