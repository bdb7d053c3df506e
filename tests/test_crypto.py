"""Unit tests for the Wattpilot crypto module."""

import base64
import hashlib
import re

from custom_components.wattpilot.core import crypto


def test_derive_session_secret():
    """Test the secret is deterministic and 32 characters long."""
    secret1 = crypto.derive_session_secret("password", "12345678")
    secret2 = crypto.derive_session_secret("password", "12345678")

    assert len(secret1) == 32
    assert secret1 == secret2

    # Different serial should give a different secret
    assert crypto.derive_session_secret("password", "87654321") != secret1


def test_derive_session_secret_matches_pbkdf2():
    """Test against hashlib's independent PBKDF2 implementation."""
    expected = base64.b64encode(
        hashlib.pbkdf2_hmac("sha512", b"pw", b"S1", 100_000, 256)
    ).decode()[:32]

    assert crypto.derive_session_secret("pw", "S1") == expected


def test_derive_session_secret_opaque_serial():
    """Serial content is salt only and never parsed."""
    secret = crypto.derive_session_secret("", "ä/€ {}\n")
    assert len(secret) == 32


def test_sha256_hex():
    """Test the hex digest helper."""
    assert crypto.sha256_hex("") == hashlib.sha256(b"").hexdigest()


def test_auth_response_fixed_nonce():
    """Test the response hash for an injected token3."""
    secret = "s" * 32
    token3 = "0123456789abcdef0123456789abcdef"

    result_token3, hash_ = crypto.derive_auth_response("t1", "t2", secret, token3)

    hash1 = hashlib.sha256(("t1" + secret).encode()).hexdigest()
    expected = hashlib.sha256((token3 + "t2" + hash1).encode()).hexdigest()
    assert result_token3 == token3
    assert hash_ == expected

    # Same nonce, same hash
    assert crypto.derive_auth_response("t1", "t2", secret, token3)[1] == hash_


def test_auth_response_fresh_nonce():
    """Test every handshake gets a new 32 hex character nonce."""
    token3_a, hash_a = crypto.derive_auth_response("t1", "t2", "secret")
    token3_b, hash_b = crypto.derive_auth_response("t1", "t2", "secret")

    assert re.fullmatch(r"[0-9a-f]{32}", token3_a)
    assert re.fullmatch(r"[0-9a-f]{64}", hash_a)
    assert token3_a != token3_b
    assert hash_a != hash_b
