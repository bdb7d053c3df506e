"""Interface for the Wattpilot WebSocket transport."""

from abc import ABC, abstractmethod
from typing import Final

WS_PATH: Final = "/ws"


def build_url(host: str) -> str:
    """Return the WebSocket URL of the charger at host."""
    return f"ws://{host}{WS_PATH}"


class WattpilotTransport(ABC):
    """Abstract base class for Wattpilot WebSocket clients."""

    @abstractmethod
    async def connect(self, url: str) -> None:
        """Open the WebSocket.

        Args:
            url: The ws:// URL of the charger.

        Raises:
            TransportError: The connection could not be established.
        """

    @abstractmethod
    async def close(self) -> None:
        """Send a normal closure close frame and release the socket."""

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """Check if the socket is open."""

    @abstractmethod
    async def send_str(self, data: str) -> None:
        """Send a UTF-8 text frame.

        Args:
            data: The JSON text to send.

        Raises:
            TransportError: The frame could not be written.
        """

    @abstractmethod
    async def receive(self) -> str | None:
        """Wait for the next text frame.

        Returns:
            The frame payload, or None once the socket is closed.

        Raises:
            TransportError: Reading from the socket failed.
        """
