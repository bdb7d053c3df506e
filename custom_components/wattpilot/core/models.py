"""
Wire message models for the Wattpilot WebSocket API.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class InboundMessage(BaseModel):
    """Base for messages received from the charger.

    Strict mode: a field of the wrong JSON type is a decode fault, not a coercion.
    """

    model_config = ConfigDict(strict=True, extra="ignore")


class HelloMessage(InboundMessage):
    """First message after the socket opens, announcing the device."""

    hostname: str | None = None
    friendly_name: str | None = None
    serial: str
    version: str | None = None
    manufacturer: str
    devicetype: str
    protocol: float
    secured: bool | None = None


class AuthRequiredMessage(InboundMessage):
    """Authentication challenge."""

    token1: str
    token2: str


class FullStatusMessage(InboundMessage):
    """Complete or staged (partial) status snapshot."""

    partial: bool
    status: dict[str, Any]


class DeltaStatusMessage(InboundMessage):
    """Incremental status update."""

    status: dict[str, Any]


class AuthMessage(BaseModel):
    """Answer to an authRequired challenge."""

    type: Literal["auth"] = "auth"
    token3: str
    hash: str


class SetValueMessage(BaseModel):
    """Request to change a single status property."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["setValue"] = "setValue"
    request_id: int = Field(alias="requestId")
    key: str
    value: Any


class DeviceIdentity(BaseModel):
    """
    Immutable description of the connected charger, learned from hello.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    hostname: str
    serial: str
    version: str
    manufacturer: str
    devicetype: str
    protocol: float
    secured: bool = False

    @classmethod
    def from_hello(cls, hello: HelloMessage) -> DeviceIdentity:
        """Build the identity, naming the device after its hostname if unnamed."""
        hostname = hello.hostname or ""
        return cls(
            name=hello.friendly_name or hostname,
            hostname=hostname,
            serial=hello.serial,
            version=hello.version or "",
            manufacturer=hello.manufacturer,
            devicetype=hello.devicetype,
            protocol=hello.protocol,
            secured=bool(hello.secured),
        )
