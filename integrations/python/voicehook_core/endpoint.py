"""Classification of caller/callee identities.

An identity is either a dialable phone number or a SIP URI pointing at one of
the provider's voice-routing domains, e.g.::

    sips:8005642365@tenant.sip.us1.twilio.com:5061

The host of a routing URI carries meaning by label position: the labels before
the routing marker name the tenant domain, the marker names the region, and
the last two labels are the provider's public suffix.

:func:`parse_routing_uri` is the strict grammar and raises
:class:`~voicehook_core.errors.FormatError`. :meth:`EndpointParser.parse`
describes an identity and never raises; an unrecognised value comes back with
``valid=False``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Tuple
from urllib.parse import urlsplit

from .errors import FormatError, PhoneNumberError
from .phone import DEFAULT_REGION, PhoneNumberService, default_service, validate_number

SIP_SCHEMES = ("sip", "sips")
DOMAIN_SUFFIX = "twilio.com"
ROUTING_MARKER = "sip"

_URI_CHARACTERS = re.compile(r"(?:[a-z0-9\-._~!$&'()*+,;=:@\[\]]|%[0-9a-f]{2})*")


@dataclass(frozen=True)
class RoutingURI:
    """The parts of a structurally valid SIP URI."""

    scheme: str
    user: str
    host: str
    port: Optional[int]

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(self.host.split("."))


def parse_routing_uri(raw: str) -> RoutingURI:
    """Parse ``raw`` as a SIP URI, raising :class:`FormatError` when malformed.

    Only URI characters are accepted: control characters, spaces and
    anything else outside the unreserved, sub-delimiter, ``:``, ``@`` and
    percent-escape sets are rejected before the authority is split. A port
    is any run of digits.
    """

    uri = raw.lower()
    if not _URI_CHARACTERS.fullmatch(uri):
        raise FormatError("invalid SIP URI: invalid character")
    for scheme in SIP_SCHEMES:
        if uri.startswith(scheme + ":"):
            # Give the authority a "//" marker so it is not read as a path
            uri = scheme + "://" + uri[len(scheme) + 1:]
            break
    else:
        raise FormatError("invalid SIP URI: unrecognised scheme")

    try:
        parts = urlsplit(uri)
    except ValueError as exc:
        raise FormatError(f"invalid SIP URI: {exc}") from exc

    if parts.scheme not in SIP_SCHEMES:
        raise FormatError("invalid SIP URI: unrecognised scheme")
    if parts.path:
        raise FormatError("invalid SIP URI: unexpected path")

    userinfo, _, hostport = parts.netloc.rpartition("@")
    if not hostport:
        raise FormatError("invalid SIP URI: missing host")
    if not userinfo:
        raise FormatError("invalid SIP URI: missing user")

    port_text = ""
    if ":" in hostport.rpartition("]")[2]:
        hostport, _, port_text = hostport.rpartition(":")
        if port_text and not port_text.isdigit():
            raise FormatError(f"invalid SIP URI: invalid port {port_text!r}")
    if not hostport:
        raise FormatError("invalid SIP URI: missing host")

    return RoutingURI(
        scheme=parts.scheme,
        user=parts.username or "",
        host=parts.hostname or "",
        port=int(port_text) if port_text else None,
    )


@dataclass(frozen=True)
class ParsedEndpoint:
    """Result of classifying a raw identity string."""

    raw: str
    valid: bool = False
    normalized_number: str = ""
    is_routing_uri: bool = False
    routing_domain: str = ""
    region: str = ""

    def as_dict(self) -> dict:
        return {
            "raw": self.raw,
            "valid": self.valid,
            "normalized_number": self.normalized_number,
            "is_routing_uri": self.is_routing_uri,
            "routing_domain": self.routing_domain,
            "region": self.region,
        }


class EndpointParser:
    """Classify identities as phone numbers or provider routing URIs."""

    def __init__(
        self,
        *,
        region: str = DEFAULT_REGION,
        domain_suffix: str = DOMAIN_SUFFIX,
        routing_marker: str = ROUTING_MARKER,
        phone_service: Optional[PhoneNumberService] = None,
    ):
        self.region = region
        self.domain_suffix = domain_suffix.lower()
        self.routing_marker = routing_marker.lower()
        self.phone_service = phone_service or default_service()

    def is_phone_number(self, raw: str) -> bool:
        try:
            validate_number(raw, region=self.region, service=self.phone_service)
        except PhoneNumberError:
            return False
        return True

    def format_number(self, raw: str) -> str:
        number = validate_number(raw, region=self.region, service=self.phone_service)
        return self.phone_service.format_e164(number)

    def parse(self, raw: str) -> ParsedEndpoint:
        if self.is_phone_number(raw):
            return ParsedEndpoint(raw=raw, valid=True, normalized_number=raw)

        unrecognised = ParsedEndpoint(raw=raw, normalized_number=raw)
        try:
            uri = parse_routing_uri(raw)
        except FormatError:
            return unrecognised

        labels = uri.labels
        count = len(labels)
        if (
            count < 5
            or ".".join(labels[-2:]) != self.domain_suffix
            or labels[-4] != self.routing_marker
        ):
            return unrecognised

        try:
            number = self.format_number(uri.user)
        except PhoneNumberError:
            return unrecognised

        return ParsedEndpoint(
            raw=raw,
            valid=True,
            normalized_number=number,
            is_routing_uri=True,
            routing_domain=".".join(labels[: count - 4]),
            region=labels[-4],
        )


_default_parser = EndpointParser()


def default_parser() -> EndpointParser:
    return _default_parser


def parse_endpoint(raw: str) -> ParsedEndpoint:
    """Classify ``raw`` with the provider's default routing domain."""

    return _default_parser.parse(raw)
