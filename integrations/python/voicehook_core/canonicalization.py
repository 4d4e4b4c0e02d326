"""Canonical message construction for provider signatures.

The provider signs the publicly visible URL of the callback followed by every
POST field. Canonicalization follows these rules:

1. Start from ``origin + path``, where ``origin`` is the externally known
   ``scheme://host`` prefix and ``path`` includes the query string.
2. Field names are sorted by code point.
3. For each name append the name, then its first value (nothing if the field
   carries no values).
4. No separators are inserted anywhere.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence, Tuple

FormItems = Mapping[str, Sequence[str]]


@dataclass(frozen=True)
class CanonicalMessage:
    """The exact payload covered by a request signature."""

    url: str
    fields: Tuple[Tuple[str, str], ...]

    @property
    def text(self) -> str:
        return self.url + "".join(name + value for name, value in self.fields)

    def encode(self) -> bytes:
        return self.text.encode("utf-8")

    def __str__(self) -> str:
        return self.text


def canonicalize_request(*, origin: str, path: str, form: FormItems) -> CanonicalMessage:
    """Build the canonical message for a callback."""

    fields = tuple(
        (name, form[name][0] if form[name] else "")
        for name in sorted(form)
    )
    return CanonicalMessage(url=origin + path, fields=fields)
