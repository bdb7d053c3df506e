"""The Wattpilot integration."""

from __future__ import annotations

import asyncio
import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_HOST, CONF_PASSWORD, Platform
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryAuthFailed, ConfigEntryNotReady

from .const import CONNECT_TIMEOUT, DOMAIN
from .coordinator import WattpilotDataUpdateCoordinator
from .core.client import WattpilotClient
from .core.exceptions import AuthenticationFailedError, WattpilotError
from .ws_client import WattpilotHAWebSocketClient

_LOGGER = logging.getLogger(__name__)

PLATFORMS: list[Platform] = [
    Platform.BINARY_SENSOR,
    Platform.SENSOR,
    Platform.SWITCH,
]


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up Wattpilot from a config entry."""
    host = entry.data[CONF_HOST]
    client = WattpilotClient(WattpilotHAWebSocketClient(hass))

    try:
        async with asyncio.timeout(CONNECT_TIMEOUT):
            await client.connect(host, entry.data[CONF_PASSWORD])
    except AuthenticationFailedError as err:
        raise ConfigEntryAuthFailed(str(err)) from err
    except (TimeoutError, WattpilotError) as err:
        raise ConfigEntryNotReady(f"Could not connect to Wattpilot at {host}: {err}") from err

    coordinator = WattpilotDataUpdateCoordinator(hass, client, host)
    try:
        await coordinator.async_config_entry_first_refresh()
    except ConfigEntryNotReady:
        await coordinator.async_shutdown()
        raise

    hass.data.setdefault(DOMAIN, {})[entry.entry_id] = coordinator

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)

    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    if unload_ok := await hass.config_entries.async_unload_platforms(entry, PLATFORMS):
        coordinator: WattpilotDataUpdateCoordinator = hass.data[DOMAIN].pop(
            entry.entry_id
        )
        await coordinator.async_shutdown()

    return unload_ok
