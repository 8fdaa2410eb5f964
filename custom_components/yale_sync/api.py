"""Async REST client for the Yale Sync cloud."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass
import logging
from time import monotonic as time_mod
from typing import Any

import aiohttp

from .const import (
    API_BASE,
    BASIC_AUTH_B64,
    DEVICE_STATUS_CONTACT_CLOSED,
    DEVICE_STATUS_CONTACT_OPEN,
    DEVICE_STATUS_MOTION_TRIGGERED,
    DEVICE_STATUS_PATH,
    DEVICE_TYPE_CONTACT,
    DEVICE_TYPE_MOTION,
    PANEL_AREA,
    PANEL_CYCLE_PATH,
    PANEL_MODE_PATH,
    REQUEST_TIMEOUT,
    TOKEN_PATH,
)
from .errors import AuthFailure, RemoteUnavailable
from .translator import ContactState, MotionState, VendorPanelState, parse_vendor_state

_LOGGER = logging.getLogger(__name__)

# Tokens are refreshed this many seconds before the server-side expiry.
TOKEN_EXPIRY_MARGIN = 60


@dataclass(frozen=True, slots=True)
class SensorSnapshot:
    """State of one sensor as reported by the device status endpoint."""

    identifier: str
    name: str
    state: MotionState | ContactState


class YaleSyncClient:
    """Thin async client for the Yale Sync cloud (HA-safe)."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        username: str,
        password: str,
        *,
        api_base: str = API_BASE,
        basic_auth_b64: str = BASIC_AUTH_B64,
    ) -> None:
        """Initialise the client with authentication context."""
        self._session = session
        self._username = username
        self._password = password
        self._api_base = api_base.rstrip("/") if api_base else API_BASE
        self._basic_auth_b64 = basic_auth_b64 or BASIC_AUTH_B64
        self._access_token: str | None = None
        self._token_expiry_monotonic: float = 0.0
        self._lock = asyncio.Lock()

    async def authenticate(self, *, force: bool = False) -> str:
        """Return a bearer token, fetching a new one when missing or stale."""
        if not force and self._token_valid():
            return self._access_token  # type: ignore[return-value]

        async with self._lock:
            if not force and self._token_valid():
                return self._access_token  # type: ignore[return-value]

            data = {
                "grant_type": "password",
                "username": self._username,
                "password": self._password,
            }
            headers = {
                "Authorization": f"Basic {self._basic_auth_b64}",
                "Content-Type": "application/x-www-form-urlencoded; charset=UTF-8",
                "Accept": "application/json",
            }
            url = f"{self._api_base}{TOKEN_PATH}"
            _LOGGER.debug(
                "Token POST %s for user domain=%s",
                url,
                (
                    self._username.split("@")[-1]
                    if "@" in self._username
                    else "<no-domain>"
                ),
            )
            try:
                async with self._session.post(
                    url,
                    data=data,
                    headers=headers,
                    timeout=aiohttp.ClientTimeout(total=REQUEST_TIMEOUT),
                ) as resp:
                    _LOGGER.debug("Token resp status=%s", resp.status)
                    if resp.status in (400, 401, 403):
                        raise AuthFailure("Invalid Yale credentials")
                    if resp.status >= 400:
                        raise RemoteUnavailable(
                            f"Token request failed with HTTP {resp.status}"
                        )
                    payload = await resp.json(content_type=None)
            except (aiohttp.ClientError, TimeoutError, ValueError) as err:
                raise RemoteUnavailable(f"Token request failed: {err}") from err

            token = payload.get("access_token") if isinstance(payload, Mapping) else None
            if not isinstance(token, str) or not token:
                raise RemoteUnavailable("Token response did not include a token")
            expires_in = _as_float(payload.get("expires_in"), 3600.0)
            self._access_token = token
            self._token_expiry_monotonic = (
                time_mod() + max(expires_in - TOKEN_EXPIRY_MARGIN, 0.0)
            )
            return token

    def invalidate_token(self) -> None:
        """Forget the cached token so the next call re-authenticates."""
        self._access_token = None
        self._token_expiry_monotonic = 0.0

    async def refresh(self, token: str) -> None:
        """Ask the panel to refresh the cloud-side status cache."""
        await self._request("GET", PANEL_CYCLE_PATH, token)

    async def get_panel_state(self, token: str) -> VendorPanelState | None:
        """Return the panel mode, or ``None`` when no panel is reported."""
        payload = await self._request("GET", PANEL_MODE_PATH, token)
        return parse_panel_state(payload)

    async def set_panel_state(
        self, token: str, state: VendorPanelState
    ) -> VendorPanelState:
        """Request a panel mode and return the mode the panel confirms."""
        await self._request(
            "POST",
            PANEL_MODE_PATH,
            token,
            data={"area": PANEL_AREA, "mode": str(state)},
        )
        await self.refresh(token)
        confirmed = await self.get_panel_state(token)
        if confirmed is None:
            raise RemoteUnavailable("Panel did not report a mode after the change")
        return confirmed

    async def list_motion_sensors(self, token: str) -> dict[str, SensorSnapshot]:
        """Return motion sensors keyed by device identifier."""
        payload = await self._request("GET", DEVICE_STATUS_PATH, token)
        return parse_sensors(payload, DEVICE_TYPE_MOTION)

    async def list_contact_sensors(self, token: str) -> dict[str, SensorSnapshot]:
        """Return contact sensors keyed by device identifier."""
        payload = await self._request("GET", DEVICE_STATUS_PATH, token)
        return parse_sensors(payload, DEVICE_TYPE_CONTACT)

    def _token_valid(self) -> bool:
        return bool(self._access_token) and time_mod() < self._token_expiry_monotonic

    async def _request(
        self,
        method: str,
        path: str,
        token: str,
        **kwargs: Any,
    ) -> Any:
        """Perform an authorised request and return the decoded JSON body."""
        headers = {"Authorization": f"Bearer {token}", "Accept": "application/json"}
        url = f"{self._api_base}{path}"
        _LOGGER.debug("HTTP %s %s", method, url)
        try:
            async with self._session.request(
                method,
                url,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=REQUEST_TIMEOUT),
                **kwargs,
            ) as resp:
                _LOGGER.debug("HTTP %s -> %s", url, resp.status)
                if resp.status == 401:
                    self.invalidate_token()
                    raise RemoteUnavailable("Access token rejected")
                if resp.status >= 400:
                    raise RemoteUnavailable(
                        f"HTTP {resp.status} from {method} {path}"
                    )
                return await resp.json(content_type=None)
        except (aiohttp.ClientError, TimeoutError, ValueError) as err:
            raise RemoteUnavailable(f"Request {method} {path} failed: {err}") from err


def parse_panel_state(payload: Any) -> VendorPanelState | None:
    """Extract the panel mode from a mode response."""
    entries = _data_entries(payload)
    if not entries:
        return None
    mode = entries[0].get("mode")
    try:
        return parse_vendor_state(mode)
    except ValueError as err:
        raise RemoteUnavailable(f"Unknown panel mode {mode!r}") from err


def parse_sensors(payload: Any, device_type: str) -> dict[str, SensorSnapshot]:
    """Extract sensors of one device type from a device status response."""
    sensors: dict[str, SensorSnapshot] = {}
    for entry in _data_entries(payload):
        if entry.get("type") != device_type:
            continue
        identifier = entry.get("device_id")
        if identifier in (None, ""):
            _LOGGER.debug("Skipping %s entry without device_id", device_type)
            continue
        identifier = str(identifier)
        name = str(entry.get("name") or identifier)
        status = str(entry.get("status1") or "")
        if device_type == DEVICE_TYPE_MOTION:
            state: MotionState | ContactState = (
                MotionState.TRIGGERED
                if DEVICE_STATUS_MOTION_TRIGGERED in status
                else MotionState.IDLE
            )
        elif DEVICE_STATUS_CONTACT_OPEN in status:
            state = ContactState.OPEN
        elif DEVICE_STATUS_CONTACT_CLOSED in status:
            state = ContactState.CLOSED
        else:
            _LOGGER.debug(
                "Contact sensor %s reported unknown status %r", identifier, status
            )
            continue
        sensors[identifier] = SensorSnapshot(identifier, name, state)
    return sensors


def _data_entries(payload: Any) -> list[Mapping[str, Any]]:
    if not isinstance(payload, Mapping):
        raise RemoteUnavailable("Unexpected response payload")
    data = payload.get("data")
    if data is None:
        return []
    if isinstance(data, Mapping):
        data = [data]
    if not isinstance(data, list):
        raise RemoteUnavailable("Unexpected response payload")
    return [entry for entry in data if isinstance(entry, Mapping)]


def _as_float(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default
