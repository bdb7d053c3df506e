from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import IntEnum
from typing import Any

from pydantic import BaseModel

from .crypto import derive_auth_response, derive_session_secret
from .exceptions import AlreadyConnectedError, DecodeFault
from .models import (
    AuthMessage,
    AuthRequiredMessage,
    DeltaStatusMessage,
    DeviceIdentity,
    FullStatusMessage,
    HelloMessage,
)
from .protocol import MessageType, parse_message
from .status import StatusDocument

_LOGGER = logging.getLogger(__name__)

SendCallback = Callable[[BaseModel], Awaitable[None]]
_Handler = Callable[[MessageType, dict[str, Any]], Awaitable[None]]


class SessionState(IntEnum):
    """Progress of a session through the handshake."""

    CONNECTING = 0
    AWAITING_HELLO = 1
    AWAITING_AUTH_OUTCOME = 2
    AUTHENTICATED = 3
    READY = 4
    FAILED = 5
    CLOSED = 6


class WattpilotSession:
    """State of one connection to a Wattpilot.

    Messages must be fed in arrival order through handle_message. Two one-shot
    gates report progress to the connecting caller: "authenticated" resolves
    to True or False on the auth outcome, "initialized" resolves once the
    first complete full status has been merged.
    """

    def __init__(self, password: str, send: SendCallback) -> None:
        """Initialize the session. Must run inside the event loop.

        Args:
            password: The charger password, used to derive the session secret.
            send: Coroutine function writing an outbound message to the socket.
        """
        loop = asyncio.get_running_loop()
        self._password = password
        self._send = send
        self._state = SessionState.CONNECTING
        self._identity: DeviceIdentity | None = None
        self._secret: str | None = None
        self._request_id = 0
        self._status = StatusDocument()

        self._authenticated: asyncio.Future[bool] = loop.create_future()
        self._initialized: asyncio.Future[None] = loop.create_future()
        self._authenticated_consumed = False
        self._initialized_consumed = False
        self._abort_error: BaseException | None = None

        self._handlers: dict[MessageType, _Handler] = {
            MessageType.HELLO: self._on_hello,
            MessageType.AUTH_REQUIRED: self._on_auth_required,
            MessageType.AUTH_SUCCESS: self._on_auth_success,
            MessageType.AUTH_ERROR: self._on_auth_error,
            MessageType.FULL_STATUS: self._on_full_status,
            MessageType.DELTA_STATUS: self._on_delta_status,
            MessageType.RESPONSE: self._on_response,
            MessageType.CLEAR_INVERTERS: self._on_inverter_event,
            MessageType.UPDATE_INVERTER: self._on_inverter_event,
            MessageType.AUTH: self._on_outbound_only,
            MessageType.SET_VALUE: self._on_outbound_only,
        }

    @property
    def state(self) -> SessionState:
        """Current handshake state."""
        return self._state

    @property
    def identity(self) -> DeviceIdentity | None:
        """Device identity, available once hello was received."""
        return self._identity

    @property
    def status(self) -> StatusDocument:
        """The replicated status document."""
        return self._status

    @property
    def is_ready(self) -> bool:
        """Check if the first full status has been received."""
        return self._state == SessionState.READY

    @property
    def is_authenticated(self) -> bool:
        """Check if the charger accepted our credentials."""
        return self._state in (SessionState.AUTHENTICATED, SessionState.READY)

    def start(self) -> None:
        """Mark the socket as open; the charger greets with hello next."""
        self._state = SessionState.AWAITING_HELLO

    def next_request_id(self) -> int:
        """Allocate the correlation id for an outgoing request."""
        current = self._request_id
        self._request_id += 1
        return current

    async def wait_authenticated(self) -> bool:
        """Wait for the authentication outcome. May only be awaited once."""
        if self._authenticated_consumed:
            raise AlreadyConnectedError("Authentication outcome already consumed")
        self._authenticated_consumed = True
        return await self._wait_gate(self._authenticated)

    async def wait_initialized(self) -> None:
        """Wait for the first complete full status. May only be awaited once."""
        if self._initialized_consumed:
            raise AlreadyConnectedError("Initialization already consumed")
        self._initialized_consumed = True
        await self._wait_gate(self._initialized)

    def abort(self, exc: BaseException, closed: bool = False) -> None:
        """End the session; pending and future gate waits raise exc.

        Args:
            exc: The error to report to the connecting caller.
            closed: True if the connection was closed on purpose.
        """
        if self._state not in (SessionState.FAILED, SessionState.CLOSED):
            self._state = SessionState.CLOSED if closed else SessionState.FAILED
        if self._abort_error is None:
            self._abort_error = exc

        for gate in (self._authenticated, self._initialized):
            if not gate.done():
                gate.cancel()

    async def _wait_gate(self, gate: asyncio.Future[Any]) -> Any:
        try:
            return await gate
        except asyncio.CancelledError:
            # cancelled by abort(), not by our caller
            if self._abort_error is None or not gate.cancelled():
                raise
            raise self._abort_error from None

    async def handle_message(
        self, msg_type: MessageType, message: dict[str, Any]
    ) -> None:
        """Apply one inbound message.

        Raises:
            DecodeFault: A load-bearing field is missing or ill-typed.
        """
        if self._state in (SessionState.FAILED, SessionState.CLOSED):
            _LOGGER.debug("Session ended, dropping %s", msg_type)
            return
        _LOGGER.debug("Calling %s", msg_type)
        await self._handlers[msg_type](msg_type, message)

    async def _on_hello(self, msg_type: MessageType, message: dict[str, Any]) -> None:
        if self._state != SessionState.AWAITING_HELLO:
            _LOGGER.warning("Ignoring hello in state %s", self._state.name)
            return

        hello = parse_message(HelloMessage, message)
        self._identity = DeviceIdentity.from_hello(hello)
        _LOGGER.info(
            "Connected to Wattpilot %s, serial %s",
            self._identity.name,
            self._identity.serial,
        )

        # key derivation stays off the event loop
        loop = asyncio.get_running_loop()
        self._secret = await loop.run_in_executor(
            None, derive_session_secret, self._password, hello.serial
        )
        self._state = SessionState.AWAITING_AUTH_OUTCOME

    async def _on_auth_required(
        self, msg_type: MessageType, message: dict[str, Any]
    ) -> None:
        if self._secret is None:
            raise DecodeFault("authRequired received before hello")

        challenge = parse_message(AuthRequiredMessage, message)
        token3, hash_ = derive_auth_response(
            challenge.token1, challenge.token2, self._secret
        )
        await self._send(AuthMessage(token3=token3, hash=hash_))

    async def _on_auth_success(
        self, msg_type: MessageType, message: dict[str, Any]
    ) -> None:
        if self._authenticated.done():
            _LOGGER.warning("Ignoring repeated authentication outcome")
            return
        _LOGGER.info("Authenticated")
        self._state = SessionState.AUTHENTICATED
        self._authenticated.set_result(True)

    async def _on_auth_error(
        self, msg_type: MessageType, message: dict[str, Any]
    ) -> None:
        if self._authenticated.done():
            _LOGGER.warning("Ignoring repeated authentication outcome")
            return
        _LOGGER.error("Authentication error")
        self._state = SessionState.FAILED
        self._authenticated.set_result(False)

    async def _on_full_status(
        self, msg_type: MessageType, message: dict[str, Any]
    ) -> None:
        if not self.is_authenticated:
            _LOGGER.warning("Ignoring fullStatus before authentication")
            return

        full_status = parse_message(FullStatusMessage, message)
        self._status.merge(full_status.status)
        if full_status.partial or self._initialized.done():
            return

        self._status.mark_initialized()
        self._state = SessionState.READY
        self._initialized.set_result(None)
        _LOGGER.info("Status initialized with %d properties", len(full_status.status))

    async def _on_delta_status(
        self, msg_type: MessageType, message: dict[str, Any]
    ) -> None:
        if not self.is_authenticated:
            _LOGGER.warning("Ignoring deltaStatus before authentication")
            return

        delta = parse_message(DeltaStatusMessage, message)
        self._status.merge(delta.status)

    async def _on_response(
        self, msg_type: MessageType, message: dict[str, Any]
    ) -> None:
        """Acknowledgement of a setValue; request ids are not correlated yet."""

    async def _on_inverter_event(
        self, msg_type: MessageType, message: dict[str, Any]
    ) -> None:
        _LOGGER.debug("%s: %s", msg_type, message)

    async def _on_outbound_only(
        self, msg_type: MessageType, message: dict[str, Any]
    ) -> None:
        _LOGGER.debug("Ignoring client-side message type %s from device", msg_type)
