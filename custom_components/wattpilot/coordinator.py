"""DataUpdateCoordinator for Wattpilot integration."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any

from homeassistant.core import HomeAssistant, callback
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from .const import UPDATE_INTERVAL
from .core.client import WattpilotClient
from .core.exceptions import WattpilotError

_LOGGER = logging.getLogger(__name__)


class WattpilotDataUpdateCoordinator(DataUpdateCoordinator[dict[str, Any]]):
    """Class to publish the Wattpilot status document to entities.

    The charger pushes every change over the socket, so updates arrive through
    the client listener. The periodic refresh only checks the connection.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        client: WattpilotClient,
        host: str,
    ) -> None:
        """Initialize the coordinator."""
        super().__init__(
            hass,
            _LOGGER,
            name=f"Wattpilot {host}",
            update_interval=timedelta(seconds=UPDATE_INTERVAL),
        )
        self.client = client
        self.host = host
        self._remove_listener = client.add_listener(self._handle_status_update)

    async def _async_update_data(self) -> dict[str, Any]:
        """Return the current status snapshot."""
        if not self.client.is_connected:
            raise UpdateFailed(f"Connection to Wattpilot at {self.host} lost")

        try:
            return self.client.status()
        except WattpilotError as err:
            raise UpdateFailed(f"Status of Wattpilot at {self.host} unavailable: {err}") from err

    @callback
    def _handle_status_update(self) -> None:
        """Handle a status update pushed by the charger."""
        if not self.client.is_ready:
            return
        self.async_set_updated_data(self.client.status())

    async def async_set_property(self, key: str, value: Any) -> None:
        """Change a property on the charger."""
        _LOGGER.debug("Setting %s to %s", key, value)
        try:
            await self.client.set_property(key, value)
        except WattpilotError as err:
            raise HomeAssistantError(f"Could not set {key}: {err}") from err

    async def async_shutdown(self) -> None:
        """Stop listening and close the connection."""
        self._remove_listener()
        await super().async_shutdown()
        await self.client.disconnect()
