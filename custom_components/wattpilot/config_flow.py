"""Config flow for Wattpilot integration."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

import voluptuous as schemas
from homeassistant import config_entries
from homeassistant.config_entries import ConfigEntry, ConfigFlowResult
from homeassistant.const import CONF_HOST, CONF_PASSWORD

from .const import CONNECT_TIMEOUT, DOMAIN
from .core.client import WattpilotClient
from .core.exceptions import AuthenticationFailedError, WattpilotError
from .core.models import DeviceIdentity
from .ws_client import WattpilotHAWebSocketClient

_LOGGER = logging.getLogger(__name__)

STEP_USER_SCHEMA = schemas.Schema(
    {
        schemas.Required(CONF_HOST): str,
        schemas.Required(CONF_PASSWORD): str,
    }
)

STEP_REAUTH_SCHEMA = schemas.Schema(
    {
        schemas.Required(CONF_PASSWORD): str,
    }
)


class WattpilotConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    """Handle a config flow for Wattpilot."""

    VERSION = 1

    _reauth_entry: ConfigEntry | None = None

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Handle the initial step."""
        errors: dict[str, str] = {}
        if user_input is not None:
            host = user_input[CONF_HOST].strip()
            identity = await self._async_try_connect(
                host, user_input[CONF_PASSWORD], errors
            )
            if identity is not None:
                await self.async_set_unique_id(identity.serial)
                self._abort_if_unique_id_configured(updates={CONF_HOST: host})
                return self.async_create_entry(
                    title=identity.name or f"Wattpilot {identity.serial}",
                    data={CONF_HOST: host, CONF_PASSWORD: user_input[CONF_PASSWORD]},
                )

        return self.async_show_form(
            step_id="user",
            data_schema=self.add_suggested_values_to_schema(
                STEP_USER_SCHEMA, user_input
            ),
            errors=errors,
        )

    async def async_step_reauth(
        self, entry_data: Mapping[str, Any]
    ) -> ConfigFlowResult:
        """Start reauthentication after the charger rejected the password."""
        self._reauth_entry = self.hass.config_entries.async_get_entry(
            self.context["entry_id"]
        )
        return await self.async_step_reauth_confirm()

    async def async_step_reauth_confirm(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Ask for the new password of a configured charger."""
        assert self._reauth_entry is not None
        errors: dict[str, str] = {}
        if user_input is not None:
            entry = self._reauth_entry
            identity = await self._async_try_connect(
                entry.data[CONF_HOST], user_input[CONF_PASSWORD], errors
            )
            if identity is not None:
                if identity.serial != entry.unique_id:
                    return self.async_abort(reason="wrong_device")
                return self.async_update_reload_and_abort(
                    entry,
                    data={**entry.data, CONF_PASSWORD: user_input[CONF_PASSWORD]},
                )

        return self.async_show_form(
            step_id="reauth_confirm",
            data_schema=STEP_REAUTH_SCHEMA,
            description_placeholders={"host": self._reauth_entry.data[CONF_HOST]},
            errors=errors,
        )

    async def _async_try_connect(
        self, host: str, password: str, errors: dict[str, str]
    ) -> DeviceIdentity | None:
        """Validate the credentials, recording a form error on failure."""
        try:
            return await self._async_validate(host, password)
        except AuthenticationFailedError:
            errors["base"] = "invalid_auth"
        except (TimeoutError, WattpilotError) as err:
            _LOGGER.debug("Cannot connect to %s: %s", host, err)
            errors["base"] = "cannot_connect"
        except Exception:  # pylint: disable=broad-except
            _LOGGER.exception("Unexpected error validating Wattpilot at %s", host)
            errors["base"] = "unknown"
        return None

    async def _async_validate(self, host: str, password: str) -> DeviceIdentity:
        """Connect once to check the credentials and learn the serial."""
        client = WattpilotClient(WattpilotHAWebSocketClient(self.hass))
        try:
            async with asyncio.timeout(CONNECT_TIMEOUT):
                await client.connect(host, password)
            identity = client.identity
            assert identity is not None
            return identity
        finally:
            await client.disconnect()
