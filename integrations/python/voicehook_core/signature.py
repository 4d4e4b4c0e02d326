"""Request signing and verification (HMAC-SHA1, base64)."""

from __future__ import annotations

import base64
import binascii
import hmac
from hashlib import sha1
from typing import Sequence, Union

from .canonicalization import CanonicalMessage
from .errors import AuthenticationError

SIGNATURE_HEADER = "X-Twilio-Signature"

Message = Union[CanonicalMessage, str]


def _message_bytes(message: Message) -> bytes:
    if isinstance(message, CanonicalMessage):
        return message.encode()
    return message.encode("utf-8")


class RequestSigner:
    """Computes provider-style signatures with a shared auth token."""

    def __init__(self, secret: Union[str, bytes]):
        self._secret = secret.encode("utf-8") if isinstance(secret, str) else secret

    def __repr__(self) -> str:
        return "RequestSigner(secret=<redacted>)"

    def digest(self, message: Message) -> bytes:
        return hmac.new(self._secret, _message_bytes(message), sha1).digest()

    def sign(self, message: Message) -> str:
        return base64.b64encode(self.digest(message)).decode("ascii")

    def verify(self, message: Message, signature: str) -> bool:
        """Return True when ``signature`` matches, comparing in constant time."""

        try:
            provided = base64.b64decode(signature.encode("ascii"), validate=True)
        except (UnicodeEncodeError, binascii.Error):
            return False
        return hmac.compare_digest(self.digest(message), provided)


def verify_signature(
    *,
    message: Message,
    secret: Union[str, bytes],
    header_values: Sequence[str],
) -> None:
    """Check the signature header values against ``message``.

    Raises :class:`AuthenticationError` unless exactly one header value is
    present and it matches.
    """

    if not header_values:
        raise AuthenticationError(f"missing {SIGNATURE_HEADER} header")
    if len(header_values) > 1:
        raise AuthenticationError(f"{SIGNATURE_HEADER} header supplied {len(header_values)} times")
    if not RequestSigner(secret).verify(message, header_values[0]):
        raise AuthenticationError(f"{SIGNATURE_HEADER} does not match the request")
