"""Exceptions raised by the Wattpilot core library."""


class WattpilotError(Exception):
    """Base class for all Wattpilot errors."""


class TransportError(WattpilotError):
    """The WebSocket could not be opened, read or written."""


class DecodeFault(WattpilotError):
    """An inbound message is malformed or misses a required field."""


class AuthenticationFailedError(WattpilotError):
    """The charger rejected the password."""


class NotReadyError(WattpilotError):
    """The status document has not completed its first full sync."""


class PropertyNotFoundError(WattpilotError, KeyError):
    """The requested property is unknown to the status document."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Could not find {key}")
        self.key = key

    def __str__(self) -> str:
        return f"Could not find {self.key}"


class AlreadyConnectedError(WattpilotError):
    """connect() was called on a client that already has a session."""
