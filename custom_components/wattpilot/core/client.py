from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any, Final

from pydantic import BaseModel

from .exceptions import (
    AlreadyConnectedError,
    AuthenticationFailedError,
    DecodeFault,
    NotReadyError,
    TransportError,
)
from .models import DeviceIdentity, SetValueMessage
from .protocol import MessageType, decode_frame, encode_message
from .session_manager import WattpilotSession
from .ws_interface import WattpilotTransport, build_url

_LOGGER = logging.getLogger(__name__)

CLOSE_TIMEOUT: Final = 1.0  # seconds

StatusListener = Callable[[], None]

_STATUS_MESSAGES: Final = (MessageType.FULL_STATUS, MessageType.DELTA_STATUS)


class WattpilotClient:
    """Connect to a Wattpilot and read or write its status properties."""

    def __init__(self, transport: WattpilotTransport) -> None:
        """Initialize the client.

        Args:
            transport: The WebSocket implementation to talk through.
        """
        self._transport = transport
        self._session: WattpilotSession | None = None
        self._receive_task: asyncio.Task[None] | None = None
        self._closing = asyncio.Event()
        self._listeners: list[StatusListener] = []

    @property
    def identity(self) -> DeviceIdentity | None:
        """Identity of the connected charger."""
        return self._session.identity if self._session else None

    @property
    def is_ready(self) -> bool:
        """Check if the status document is synchronized."""
        return self._session is not None and self._session.is_ready

    @property
    def is_connected(self) -> bool:
        """Check if the socket is open and the receive loop running."""
        return (
            self._transport.is_connected
            and self._receive_task is not None
            and not self._receive_task.done()
        )

    async def connect(self, host: str, password: str) -> WattpilotClient:
        """Connect and wait until the status document is synchronized.

        Waits first for the authentication outcome and then for the first
        complete full status. On any failure the socket is closed again.

        Args:
            host: Host name or IP address of the charger.
            password: The charger password.

        Returns:
            This client, ready for property access.

        Raises:
            AlreadyConnectedError: connect() was already called.
            TransportError: The socket could not be opened or broke down.
            DecodeFault: The charger sent a malformed handshake message.
            AuthenticationFailedError: The charger rejected the password.
        """
        if self._session is not None:
            raise AlreadyConnectedError("Client is already connected")

        session = WattpilotSession(password, self._send_message)
        self._session = session

        url = build_url(host)
        _LOGGER.debug("Connecting to %s", url)
        try:
            await self._transport.connect(url)
            session.start()
            self._receive_task = asyncio.create_task(
                self._receive_loop(session, self._closing),
                name=f"wattpilot receive {host}",
            )

            if not await session.wait_authenticated():
                raise AuthenticationFailedError(f"Authentication to {host} failed")
            _LOGGER.debug("Waiting for configuration...")
            await session.wait_initialized()
        except BaseException:
            await self.disconnect()
            raise

        return self

    def get_property(self, name: str) -> Any:
        """Return the current value of a status property.

        Raises:
            NotReadyError: The status document is not synchronized yet.
            PropertyNotFoundError: The charger has no such property.
        """
        return self._require_session().status.get(name)

    async def set_property(self, name: str, value: Any) -> None:
        """Change a status property on the charger.

        The value is committed locally as soon as the request is sent; a later
        status update from the charger overrides it.

        Raises:
            NotReadyError: The status document is not synchronized yet.
            PropertyNotFoundError: The charger has no such property.
            TransportError: The request could not be sent.
        """
        session = self._require_session()
        session.status.get(name)

        message = SetValueMessage(
            request_id=session.next_request_id(), key=name, value=value
        )
        await self._send_message(message)
        session.status.set(name, value)
        self._notify_listeners()

    def status(self) -> dict[str, Any]:
        """Return a snapshot of the status document."""
        return self._require_session().status.snapshot()

    def add_listener(self, listener: StatusListener) -> Callable[[], None]:
        """Register a callback run after every status update once ready.

        Returns:
            A function removing the listener again.
        """
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    async def disconnect(self) -> None:
        """Close the socket and wait briefly for the receive loop to end."""
        self._closing.set()
        task = self._receive_task
        try:
            async with asyncio.timeout(CLOSE_TIMEOUT):
                try:
                    await self._transport.close()
                except TransportError as err:
                    _LOGGER.warning("Error during closing websocket: %s", err)
                if task is not None:
                    await task
        except TimeoutError:
            _LOGGER.warning("Timeout in closing receive loop")
            if task is not None:
                task.cancel()
                await asyncio.wait([task])
        else:
            _LOGGER.debug("Receive loop closed")

        if self._session is not None:
            self._session.abort(TransportError("Connection closed"), closed=True)

    def _require_session(self) -> WattpilotSession:
        if self._session is None:
            raise NotReadyError("Connection is not valid")
        return self._session

    async def _send_message(self, message: BaseModel) -> None:
        data = encode_message(message)
        _LOGGER.debug("Sending %s", message.__class__.__name__)
        await self._transport.send_str(data)

    async def _receive_loop(
        self, session: WattpilotSession, closing: asyncio.Event
    ) -> None:
        """Feed inbound frames to the session, one at a time and in order."""
        while True:
            try:
                data = await self._transport.receive()
            except TransportError as err:
                _LOGGER.error("Error in receive: %s", err)
                session.abort(err)
                return

            if data is None:
                if closing.is_set():
                    _LOGGER.debug("Connection closed")
                    session.abort(TransportError("Connection closed"), closed=True)
                else:
                    _LOGGER.warning("Connection closed by the charger")
                    session.abort(TransportError("Connection closed by the charger"))
                return

            _LOGGER.debug("Received: %s", data)
            msg_type, message = decode_frame(data)
            if msg_type is None:
                continue

            try:
                await session.handle_message(msg_type, message)
            except DecodeFault as err:
                if session.is_ready:
                    _LOGGER.warning("Skipping malformed %s: %s", msg_type, err)
                    continue
                _LOGGER.error("Handshake failed: %s", err)
                session.abort(err)
                return
            except TransportError as err:
                _LOGGER.error("Error during writing to websocket: %s", err)
                session.abort(err)
                return
            except Exception as err:  # pylint: disable=broad-except
                _LOGGER.exception("Unexpected error handling %s", msg_type)
                session.abort(err)
                return

            if msg_type in _STATUS_MESSAGES and session.is_ready:
                self._notify_listeners()

    def _notify_listeners(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:  # pylint: disable=broad-except
                _LOGGER.exception("Error in status listener %s", listener)
