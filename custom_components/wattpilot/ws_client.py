"""Home Assistant WebSocket client implementation for Wattpilot."""

import logging

import aiohttp
from homeassistant.core import HomeAssistant
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from .core.exceptions import TransportError
from .core.ws_interface import WattpilotTransport

_LOGGER = logging.getLogger(__name__)

_CLOSED_TYPES = (
    aiohttp.WSMsgType.CLOSE,
    aiohttp.WSMsgType.CLOSING,
    aiohttp.WSMsgType.CLOSED,
)


class WattpilotHAWebSocketClient(WattpilotTransport):
    """Home Assistant concrete implementation of WattpilotTransport.

    This client uses the shared aiohttp session of Home Assistant so that the
    connection pool and SSL context are managed by the core.
    """

    def __init__(self, hass: HomeAssistant) -> None:
        """Initialize the WebSocket client.

        Args:
            hass: The Home Assistant instance.
        """
        self._hass = hass
        self._ws: aiohttp.ClientWebSocketResponse | None = None
        self._url: str | None = None

    @property
    def is_connected(self) -> bool:
        """Check if the socket is open."""
        return self._ws is not None and not self._ws.closed

    async def connect(self, url: str) -> None:
        """Open the WebSocket to the charger.

        Args:
            url: The ws:// URL of the charger.
        """
        self._url = url
        _LOGGER.debug("Attempting to connect to Wattpilot at %s", url)

        session = async_get_clientsession(self._hass)
        try:
            self._ws = await session.ws_connect(url)
        except (aiohttp.ClientError, OSError) as err:
            raise TransportError(f"Error connecting to {url}: {err}") from err
        _LOGGER.info("Successfully connected to Wattpilot at %s", url)

    async def close(self) -> None:
        """Close the socket with a normal closure frame."""
        if self._ws is None:
            return
        _LOGGER.debug("Disconnecting from Wattpilot at %s", self._url)
        try:
            await self._ws.close(code=aiohttp.WSCloseCode.OK)
        except (aiohttp.ClientError, OSError) as err:
            raise TransportError(f"Error closing {self._url}: {err}") from err

    async def send_str(self, data: str) -> None:
        """Send a text frame.

        Args:
            data: The JSON text to send.
        """
        if not self.is_connected or not self._ws:
            raise TransportError("Cannot write: not connected to Wattpilot")

        try:
            await self._ws.send_str(data)
        except (aiohttp.ClientError, ConnectionResetError) as err:
            raise TransportError(f"Error writing to {self._url}: {err}") from err

    async def receive(self) -> str | None:
        """Wait for the next text frame, skipping control frames."""
        if self._ws is None:
            return None

        while True:
            msg = await self._ws.receive()
            if msg.type == aiohttp.WSMsgType.TEXT:
                return msg.data
            if msg.type == aiohttp.WSMsgType.BINARY:
                return msg.data.decode("utf-8", errors="replace")
            if msg.type in _CLOSED_TYPES:
                return None
            if msg.type == aiohttp.WSMsgType.ERROR:
                raise TransportError(
                    f"Error reading from {self._url}: {self._ws.exception()}"
                )
            _LOGGER.debug("Skipping %s frame", msg.type)
