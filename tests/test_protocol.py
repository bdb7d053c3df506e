"""Unit tests for frame decoding and message models."""

import json

import pytest

from custom_components.wattpilot.core.exceptions import DecodeFault
from custom_components.wattpilot.core.models import (
    AuthMessage,
    DeviceIdentity,
    FullStatusMessage,
    HelloMessage,
    SetValueMessage,
)
from custom_components.wattpilot.core.protocol import (
    MessageType,
    decode_frame,
    encode_message,
    parse_message,
)


@pytest.mark.parametrize(
    "frame",
    [
        "not json",
        "[1, 2]",
        '"hello"',
        '{"serial": "S1"}',
        '{"type": 5}',
        '{"type": "somethingNew"}',
    ],
)
def test_decode_frame_ignores_unusable_frames(frame):
    msg_type, _ = decode_frame(frame)
    assert msg_type is None


def test_decode_frame_known_type():
    msg_type, message = decode_frame('{"type": "deltaStatus", "status": {"amp": 6}}')

    assert msg_type is MessageType.DELTA_STATUS
    assert message["status"] == {"amp": 6}


def test_parse_hello_accepts_integer_protocol():
    hello = parse_message(
        HelloMessage,
        {"type": "hello", "serial": "S1", "manufacturer": "M", "devicetype": "D", "protocol": 2},
    )
    assert hello.protocol == 2.0
    assert hello.secured is None


@pytest.mark.parametrize(
    "message",
    [
        {"type": "hello", "manufacturer": "M", "devicetype": "D", "protocol": 2},
        {"type": "hello", "serial": 1234, "manufacturer": "M", "devicetype": "D", "protocol": 2},
        {"type": "hello", "serial": "S1", "manufacturer": "M", "devicetype": "D", "protocol": "2"},
        {
            "type": "hello",
            "serial": "S1",
            "manufacturer": "M",
            "devicetype": "D",
            "protocol": 2,
            "secured": "yes",
        },
    ],
)
def test_parse_hello_rejects_bad_fields(message):
    with pytest.raises(DecodeFault):
        parse_message(HelloMessage, message)


def test_parse_full_status_requires_object_status():
    with pytest.raises(DecodeFault):
        parse_message(FullStatusMessage, {"type": "fullStatus", "partial": False, "status": []})


def test_identity_name_falls_back_to_hostname():
    hello = HelloMessage(
        hostname="Wattpilot_1", serial="S1", manufacturer="M", devicetype="D", protocol=2.0
    )

    identity = DeviceIdentity.from_hello(hello)

    assert identity.name == "Wattpilot_1"
    assert identity.secured is False


def test_encode_set_value():
    data = json.loads(encode_message(SetValueMessage(request_id=3, key="amp", value=10)))

    assert data == {"type": "setValue", "requestId": 3, "key": "amp", "value": 10}


def test_encode_auth():
    data = json.loads(encode_message(AuthMessage(token3="a" * 32, hash="b" * 64)))

    assert data == {"type": "auth", "token3": "a" * 32, "hash": "b" * 64}
