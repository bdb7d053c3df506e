from __future__ import annotations

import base64
import logging
import secrets
from typing import Final

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

_LOGGER = logging.getLogger(__name__)

PBKDF2_ITERATIONS: Final = 100_000
PBKDF2_LENGTH: Final = 256  # bytes of derived key material
SECRET_LENGTH: Final = 32  # characters kept from the base64 encoding
TOKEN3_LENGTH: Final = 32  # hex characters


def derive_session_secret(password: str, serial: str) -> str:
    """Derive the session secret from the user password and device serial.

    Args:
        password: The password configured on the charger.
        serial: The serial number announced in the hello message.

    Returns:
        The first 32 characters of the base64 encoded PBKDF2-HMAC-SHA512 output.
    """
    _LOGGER.debug("Deriving session secret for serial %s", serial)
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA512(),
        length=PBKDF2_LENGTH,
        salt=serial.encode("utf-8"),
        iterations=PBKDF2_ITERATIONS,
    )
    key = kdf.derive(password.encode("utf-8"))
    return base64.b64encode(key).decode("ascii")[:SECRET_LENGTH]


def sha256_hex(data: str) -> str:
    """Return the lowercase hex SHA-256 digest of a UTF-8 string."""
    digest = hashes.Hash(hashes.SHA256())
    digest.update(data.encode("utf-8"))
    return digest.finalize().hex()


def generate_token3() -> str:
    """Generate a fresh 32 character hex nonce for one handshake."""
    return secrets.token_hex(TOKEN3_LENGTH // 2)


def derive_auth_response(
    token1: str, token2: str, secret: str, token3: str | None = None
) -> tuple[str, str]:
    """Compute the answer to an authRequired challenge.

    Args:
        token1: First challenge token sent by the charger.
        token2: Second challenge token sent by the charger.
        secret: The session secret from derive_session_secret.
        token3: Client nonce. A new random one is generated when omitted.

    Returns:
        A tuple of the client nonce and the hex encoded response hash.
    """
    if token3 is None:
        token3 = generate_token3()
    hash1 = sha256_hex(token1 + secret)
    return token3, sha256_hex(token3 + token2 + hash1)
