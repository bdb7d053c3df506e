"""Shared fixtures for the Wattpilot core tests."""

from __future__ import annotations

import asyncio
import json
from typing import Any

import pytest

from custom_components.wattpilot.core.exceptions import TransportError
from custom_components.wattpilot.core.ws_interface import WattpilotTransport


class FakeTransport(WattpilotTransport):
    """In-memory WebSocket: the test plays the charger through push()."""

    def __init__(self, close_ack: bool = True) -> None:
        self.inbound: asyncio.Queue[str | BaseException | None] = asyncio.Queue()
        self.sent: list[dict[str, Any]] = []
        self.url: str | None = None
        self.close_calls = 0
        self.connect_error: BaseException | None = None
        self._connected = False
        self._close_ack = close_ack

    @property
    def is_connected(self) -> bool:
        return self._connected

    async def connect(self, url: str) -> None:
        if self.connect_error is not None:
            raise self.connect_error
        self.url = url
        self._connected = True

    async def close(self) -> None:
        self.close_calls += 1
        if self._connected:
            self._connected = False
            if self._close_ack:
                self.inbound.put_nowait(None)

    async def send_str(self, data: str) -> None:
        if not self._connected:
            raise TransportError("not connected")
        self.sent.append(json.loads(data))

    async def receive(self) -> str | None:
        item = await self.inbound.get()
        if isinstance(item, BaseException):
            raise item
        return item

    def push(self, message: dict[str, Any] | str | BaseException | None) -> None:
        """Queue a frame as if the charger had sent it."""
        if isinstance(message, dict):
            message = json.dumps(message)
        self.inbound.put_nowait(message)


HELLO = {
    "type": "hello",
    "hostname": "Wattpilot_S1",
    "friendly_name": "Garage",
    "serial": "S1",
    "version": "38.5",
    "manufacturer": "M",
    "devicetype": "D",
    "protocol": 2.0,
    "secured": False,
}
AUTH_REQUIRED = {"type": "authRequired", "token1": "t1", "token2": "t2"}
AUTH_SUCCESS = {"type": "authSuccess"}
AUTH_ERROR = {"type": "authError"}


def full_status(status: dict[str, Any], partial: bool = False) -> dict[str, Any]:
    return {"type": "fullStatus", "partial": partial, "status": status}


def delta_status(status: Any) -> dict[str, Any]:
    return {"type": "deltaStatus", "status": status}


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def fast_secret(monkeypatch: pytest.MonkeyPatch) -> str:
    """Replace the slow PBKDF2 derivation with a fixed secret."""
    secret = "x" * 32
    monkeypatch.setattr(
        "custom_components.wattpilot.core.session_manager.derive_session_secret",
        lambda password, serial: secret,
    )
    return secret
