from __future__ import annotations

import json
import logging
from enum import StrEnum
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from .exceptions import DecodeFault
from .models import InboundMessage

_LOGGER = logging.getLogger(__name__)

_MessageT = TypeVar("_MessageT", bound=InboundMessage)


class MessageType(StrEnum):
    """Closed set of message type tags used on the Wattpilot socket."""

    HELLO = "hello"
    AUTH_REQUIRED = "authRequired"
    AUTH = "auth"
    AUTH_SUCCESS = "authSuccess"
    AUTH_ERROR = "authError"
    FULL_STATUS = "fullStatus"
    DELTA_STATUS = "deltaStatus"
    SET_VALUE = "setValue"
    CLEAR_INVERTERS = "clearInverters"
    UPDATE_INVERTER = "updateInverter"
    RESPONSE = "response"


def decode_frame(data: str | bytes) -> tuple[MessageType | None, dict[str, Any]]:
    """Parse a text frame into its type tag and JSON object.

    Frames that are not JSON objects, have no string type or have an unknown
    type come back with a None tag. The caller ignores them so that protocol
    extensions do not break the session.

    Args:
        data: The raw frame payload.

    Returns:
        The message type, or None, and the decoded object.
    """
    try:
        message = json.loads(data)
    except ValueError:
        _LOGGER.debug("Ignoring frame that is not JSON: %.100r", data)
        return None, {}

    if not isinstance(message, dict):
        _LOGGER.debug("Ignoring frame that is not a JSON object")
        return None, {}

    raw_type = message.get("type")
    if not isinstance(raw_type, str):
        _LOGGER.debug("Ignoring message without type")
        return None, message

    try:
        return MessageType(raw_type), message
    except ValueError:
        _LOGGER.debug("Ignoring unknown message type %s", raw_type)
        return None, message


def parse_message(model: type[_MessageT], message: dict[str, Any]) -> _MessageT:
    """Validate an inbound message against its model.

    Raises:
        DecodeFault: A required field is missing or has the wrong type.
    """
    try:
        return model.model_validate(message)
    except ValidationError as err:
        raise DecodeFault(
            f"Malformed {message.get('type')} message: {err.error_count()} invalid field(s)"
        ) from err


def encode_message(message: BaseModel) -> str:
    """Serialize an outbound message to JSON text."""
    return message.model_dump_json(by_alias=True)
