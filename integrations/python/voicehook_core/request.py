"""Framework-neutral request primitives.

Adapters build an :class:`IncomingRequest` from whatever their framework hands
them; the pipeline only ever sees this shape. Headers are kept as a multimap so
a repeated signature header can be told apart from a single one.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Mapping, MutableMapping, Optional, Tuple
from urllib.parse import parse_qsl

from .errors import DecodeError

HeaderItems = Iterable[Tuple[str, str]]
FormFields = Mapping[str, Tuple[str, ...]]

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


@dataclass(frozen=True)
class IncomingRequest:
    """An undecoded provider callback."""

    method: str
    path: str
    headers: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    body: bytes = b""
    content_type: Optional[str] = FORM_CONTENT_TYPE

    @classmethod
    def build(
        cls,
        *,
        method: str,
        path: str,
        headers: HeaderItems = (),
        body: bytes = b"",
        content_type: Optional[str] = None,
    ) -> "IncomingRequest":
        """Normalise raw request primitives into an :class:`IncomingRequest`.

        ``content_type`` falls back to the ``Content-Type`` header when omitted.
        """

        normalized = normalize_headers(headers)
        if content_type is None:
            content_type = normalized.get("content-type", (None,))[0]
        return cls(
            method=method.upper(),
            path=path,
            headers=normalized,
            body=body,
            content_type=content_type,
        )

    def header_values(self, name: str) -> Tuple[str, ...]:
        return self.headers.get(name.lower(), ())


def normalize_headers(headers: HeaderItems) -> Mapping[str, Tuple[str, ...]]:
    collected: MutableMapping[str, list[str]] = {}
    for name, value in headers:
        collected.setdefault(name.lower(), []).append(str(value))
    # Values keep arrival order; only names are folded
    return {key: tuple(values) for key, values in sorted(collected.items())}


def decode_form(body: bytes, content_type: Optional[str]) -> FormFields:
    """Decode a urlencoded body into a name-sorted multimap.

    Raises :class:`DecodeError` for unsupported content types, invalid percent
    escapes and bodies that are not UTF-8.
    """

    media_type = (content_type or FORM_CONTENT_TYPE).split(";", 1)[0].strip().lower()
    if media_type != FORM_CONTENT_TYPE:
        raise DecodeError(f"unsupported content type {media_type!r}")

    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodeError("form body is not valid UTF-8") from exc

    if _BAD_ESCAPE.search(text):
        raise DecodeError("form body contains an invalid percent escape")

    try:
        pairs = parse_qsl(text, keep_blank_values=True, errors="strict")
    except ValueError as exc:
        raise DecodeError(f"malformed form body: {exc}") from exc

    collected: MutableMapping[str, list[str]] = {}
    for name, value in pairs:
        collected.setdefault(name, []).append(value)
    return {name: tuple(values) for name, values in sorted(collected.items())}


def first_value(values: Tuple[str, ...]) -> Optional[str]:
    """Return the significant value of a field, ``None`` if it has none."""

    return values[0] if values else None
