"""Config flow for the Yale Sync integration."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any

import voluptuous as vol

from homeassistant.config_entries import ConfigFlow, ConfigFlowResult
from homeassistant.const import CONF_NAME, CONF_PASSWORD, CONF_USERNAME
from homeassistant.helpers import config_validation as cv
from homeassistant.helpers.aiohttp_client import async_get_clientsession
from homeassistant.helpers.selector import selector

from .api import YaleSyncClient
from .config import YaleSyncConfig, validate_config
from .const import (
    CONF_REFRESH_INTERVAL,
    DEFAULT_NAME,
    DEFAULT_REFRESH_INTERVAL,
    DOMAIN,
)
from .errors import AuthFailure, ConfigInvalid, RemoteUnavailable

_LOGGER = logging.getLogger(__name__)

STEP_USER_DATA_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_NAME, default=DEFAULT_NAME): cv.string,
        vol.Required(CONF_USERNAME): cv.string,
        vol.Required(CONF_PASSWORD): selector({"text": {"type": "password"}}),
        vol.Required(
            CONF_REFRESH_INTERVAL, default=DEFAULT_REFRESH_INTERVAL
        ): vol.Coerce(float),
    }
)

STEP_REAUTH_DATA_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_PASSWORD): selector({"text": {"type": "password"}}),
    }
)


class YaleSyncConfigFlow(ConfigFlow, domain=DOMAIN):
    """Handle a config flow for Yale Sync."""

    VERSION = 1
    MINOR_VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Handle the initial step."""
        errors: dict[str, str] = {}
        if user_input is not None:
            config = await self._async_validate(user_input, errors)
            if config is not None:
                await self.async_set_unique_id(config.username.lower())
                self._abort_if_unique_id_configured()
                return self.async_create_entry(
                    title=config.name,
                    data={
                        CONF_NAME: config.name,
                        CONF_USERNAME: config.username,
                        CONF_PASSWORD: config.password,
                        CONF_REFRESH_INTERVAL: config.refresh_interval,
                    },
                )

        return self.async_show_form(
            step_id="user",
            data_schema=self.add_suggested_values_to_schema(
                STEP_USER_DATA_SCHEMA, user_input
            ),
            errors=errors,
        )

    async def async_step_reauth(
        self, entry_data: Mapping[str, Any]
    ) -> ConfigFlowResult:
        """Handle reauth when the stored credentials stop working."""
        return await self.async_step_reauth_confirm()

    async def async_step_reauth_confirm(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Ask for a new password."""
        errors: dict[str, str] = {}
        entry = self._get_reauth_entry()
        if user_input is not None:
            config = await self._async_validate(
                {**entry.data, CONF_PASSWORD: user_input[CONF_PASSWORD]}, errors
            )
            if config is not None:
                return self.async_update_reload_and_abort(
                    entry, data_updates={CONF_PASSWORD: config.password}
                )

        return self.async_show_form(
            step_id="reauth_confirm",
            data_schema=STEP_REAUTH_DATA_SCHEMA,
            description_placeholders={CONF_USERNAME: entry.data[CONF_USERNAME]},
            errors=errors,
        )

    async def _async_validate(
        self, user_input: Mapping[str, Any], errors: dict[str, str]
    ) -> YaleSyncConfig | None:
        """Validate the options and check the credentials against the cloud."""
        try:
            config = validate_config(user_input)
        except ConfigInvalid as err:
            _LOGGER.debug("Rejected configuration: %s", err)
            errors["base"] = "invalid_config"
            return None
        client = YaleSyncClient(
            async_get_clientsession(self.hass), config.username, config.password
        )
        try:
            await client.authenticate()
        except AuthFailure:
            errors["base"] = "invalid_auth"
        except RemoteUnavailable:
            errors["base"] = "cannot_connect"
        if errors:
            return None
        return config
