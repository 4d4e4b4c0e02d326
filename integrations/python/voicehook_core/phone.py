"""Phone number capability used by the endpoint parser.

The core never parses international numbers itself; it delegates to a
:class:`PhoneNumberService`. The default implementation is backed by the
``phonenumbers`` package.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol

import phonenumbers

from .errors import PhoneNumberError

DEFAULT_REGION = "US"


class PhoneNumberService(Protocol):
    def parse(self, raw: str, region: str) -> Any:
        ...

    def is_valid(self, number: Any) -> bool:
        ...

    def format_e164(self, number: Any) -> str:
        ...


class LibPhoneNumberService:
    """:class:`PhoneNumberService` backed by libphonenumber metadata."""

    def parse(self, raw: str, region: str) -> phonenumbers.PhoneNumber:
        try:
            return phonenumbers.parse(raw, region)
        except phonenumbers.NumberParseException as exc:
            raise PhoneNumberError(f"invalid phone number: {exc}") from exc

    def is_valid(self, number: phonenumbers.PhoneNumber) -> bool:
        return phonenumbers.is_valid_number(number)

    def format_e164(self, number: phonenumbers.PhoneNumber) -> str:
        return phonenumbers.format_number(number, phonenumbers.PhoneNumberFormat.E164)


_default_service = LibPhoneNumberService()


def default_service() -> PhoneNumberService:
    return _default_service


def validate_number(
    raw: str,
    *,
    region: str = DEFAULT_REGION,
    service: Optional[PhoneNumberService] = None,
) -> Any:
    """Parse ``raw`` and return the service's number object if it is dialable."""

    service = service or _default_service
    number = service.parse(raw, region)
    if not service.is_valid(number):
        raise PhoneNumberError("invalid phone number")
    return number


def is_valid_number(
    raw: str,
    *,
    region: str = DEFAULT_REGION,
    service: Optional[PhoneNumberService] = None,
) -> bool:
    try:
        validate_number(raw, region=region, service=service)
    except PhoneNumberError:
        return False
    return True


def format_number(
    raw: str,
    *,
    region: str = DEFAULT_REGION,
    service: Optional[PhoneNumberService] = None,
) -> str:
    """Format ``raw`` as E.164, raising :class:`PhoneNumberError` when invalid."""

    service = service or _default_service
    number = validate_number(raw, region=region, service=service)
    return service.format_e164(number)
