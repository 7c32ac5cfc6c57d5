"""Request signing for the Kalshi trade API.

Market-data reads work unsigned. When a key is configured, every request carries three
`KALSHI-ACCESS-*` headers whose signature covers the millisecond timestamp, the
HTTP method and the `/trade-api/v2/...` path without its query string.
"""

from __future__ import annotations

import base64
import binascii
import time
from pathlib import Path
from typing import TYPE_CHECKING

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

if TYPE_CHECKING:
    from collections.abc import Callable

_PSS = padding.PSS(mgf=padding.MGF1(hashes.SHA256()), salt_length=padding.PSS.DIGEST_LENGTH)


def signing_payload(timestamp_ms: str, method: str, path: str) -> str:
    """The exact text Kalshi expects to be signed for one request."""
    return timestamp_ms + method.upper() + path.split("?", 1)[0]


def load_private_key(
    *, private_key_path: str | None = None, private_key_b64: str | None = None
) -> rsa.RSAPrivateKey:
    """Read an unencrypted RSA key from a base64-encoded PEM (preferred) or a PEM file."""
    if private_key_b64:
        try:
            pem_bytes = base64.b64decode(private_key_b64.strip())
        except (binascii.Error, ValueError) as e:
            raise ValueError("Invalid base64 private key") from e
    elif private_key_path:
        pem_bytes = Path(private_key_path).read_bytes()
    else:
        raise ValueError("private_key_path or private_key_b64 is required")

    key = serialization.load_pem_private_key(pem_bytes, password=None)
    if not isinstance(key, rsa.RSAPrivateKey):
        raise ValueError("Invalid key type: expected RSA private key")
    return key


class KalshiAuth:
    """Signs Kalshi requests with an API key id and its RSA private key."""

    def __init__(
        self,
        key_id: str,
        private_key_path: str | None = None,
        private_key_b64: str | None = None,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.key_id = key_id
        self.private_key = load_private_key(
            private_key_path=private_key_path, private_key_b64=private_key_b64
        )
        self._clock = clock

    def sign_pss_text(self, text: str) -> str:
        """RSA-PSS/SHA-256 signature of `text`, base64-encoded."""
        try:
            signature = self.private_key.sign(text.encode("utf-8"), _PSS, hashes.SHA256())
        except InvalidSignature as e:
            raise ValueError("RSA signing failed") from e
        return base64.b64encode(signature).decode("utf-8")

    def get_headers(self, method: str, path: str) -> dict[str, str]:
        """Auth headers for one request; `path` is the full `/trade-api/v2/...` path."""
        timestamp_ms = str(int(self._clock() * 1000))
        return {
            "KALSHI-ACCESS-KEY": self.key_id,
            "KALSHI-ACCESS-SIGNATURE": self.sign_pss_text(
                signing_payload(timestamp_ms, method, path)
            ),
            "KALSHI-ACCESS-TIMESTAMP": timestamp_ms,
        }
