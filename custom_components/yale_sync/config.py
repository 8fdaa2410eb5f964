"""Configuration surface for the Yale Sync integration."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import voluptuous as vol

from homeassistant.const import CONF_NAME, CONF_PASSWORD, CONF_USERNAME
from homeassistant.helpers import config_validation as cv

from .const import CONF_REFRESH_INTERVAL, DEFAULT_NAME, DEFAULT_REFRESH_INTERVAL
from .errors import ConfigInvalid

CONFIG_SCHEMA = vol.Schema(
    {
        vol.Optional(CONF_NAME, default=DEFAULT_NAME): cv.string,
        vol.Required(CONF_USERNAME): vol.All(cv.string, vol.Length(min=1)),
        vol.Required(CONF_PASSWORD): vol.All(cv.string, vol.Length(min=1)),
        vol.Optional(
            CONF_REFRESH_INTERVAL, default=DEFAULT_REFRESH_INTERVAL
        ): vol.Coerce(float),
    },
    extra=vol.REMOVE_EXTRA,
)


@dataclass(frozen=True, slots=True)
class YaleSyncConfig:
    """Validated integration options."""

    name: str
    username: str
    password: str
    refresh_interval: float


def validate_config(data: Mapping[str, Any]) -> YaleSyncConfig:
    """Validate raw options, raising ``ConfigInvalid`` on bad input."""
    try:
        validated = CONFIG_SCHEMA(dict(data))
    except vol.Invalid as err:
        raise ConfigInvalid(f"Invalid Yale Sync configuration: {err}") from err
    return YaleSyncConfig(
        name=validated[CONF_NAME],
        username=validated[CONF_USERNAME],
        password=validated[CONF_PASSWORD],
        refresh_interval=validated[CONF_REFRESH_INTERVAL],
    )
