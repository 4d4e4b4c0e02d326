"""Validated callback values handed to business logic."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from email.utils import parsedate_to_datetime
from types import MappingProxyType
from typing import Iterator, Mapping, Optional

from .endpoint import EndpointParser, ParsedEndpoint, default_parser


class RequestValues(Mapping[str, str]):
    """Read-only field values of an authenticated callback.

    Only the first value of each form field is kept. Accessors parse the
    common voice callback fields on demand.
    """

    def __init__(self, values: Mapping[str, str], *, parser: Optional[EndpointParser] = None):
        self._values: Mapping[str, str] = MappingProxyType(dict(values))
        self._parser = parser or default_parser()

    def __getitem__(self, name: str) -> str:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"RequestValues({dict(self._values)!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Mapping):
            return dict(self._values) == dict(other)
        return NotImplemented

    def _int(self, name: str) -> int:
        raw = self._values.get(name, "")
        if not raw:
            return 0
        try:
            return int(raw)
        except ValueError as exc:
            raise ValueError(f"invalid {name} value {raw!r}") from exc

    def call_duration(self) -> timedelta:
        return timedelta(seconds=self._int("CallDuration"))

    def sequence_number(self) -> int:
        return self._int("SequenceNumber")

    def timestamp_or_now(self, *, now: Optional[datetime] = None) -> datetime:
        """Return ``Timestamp`` (RFC 1123 with numeric zone) or the current time."""

        raw = self._values.get("Timestamp", "")
        try:
            parsed = parsedate_to_datetime(raw)
        except (TypeError, ValueError, IndexError):
            parsed = None
        if parsed is None or parsed.tzinfo is None:
            return now or datetime.now(timezone.utc)
        return parsed

    def from_endpoint(self) -> ParsedEndpoint:
        return self._parser.parse(self._values.get("From", ""))

    def to_endpoint(self) -> ParsedEndpoint:
        return self._parser.parse(self._values.get("To", ""))
