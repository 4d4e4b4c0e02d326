"""Voicehook core SDK for Python frameworks.

This package authenticates provider voice callbacks, validates their identity
and keypad fields, and builds TwiML responses. Framework adapters import from
here to avoid duplicating logic.
"""

from .canonicalization import CanonicalMessage, canonicalize_request
from .config import Settings
from .endpoint import EndpointParser, ParsedEndpoint, RoutingURI, parse_endpoint, parse_routing_uri
from .errors import (
    AuthenticationError,
    CharacterError,
    DecodeError,
    FieldError,
    FieldValueError,
    FormatError,
    MethodError,
    PhoneNumberError,
    RequiredError,
    VoicehookError,
)
from .phone import LibPhoneNumberService, PhoneNumberService, format_number, is_valid_number
from .pipeline import RequestValidator
from .request import IncomingRequest, decode_form
from .signature import SIGNATURE_HEADER, RequestSigner, verify_signature
from .validators import (
    ALLOW_EMPTY,
    DEFAULT_REGISTRY,
    FieldRule,
    FieldValidatorRegistry,
    build_default_registry,
    validate_keypad_entry,
    validate_routing_uri,
)
from .values import RequestValues

__all__ = [
    "ALLOW_EMPTY",
    "AuthenticationError",
    "CanonicalMessage",
    "canonicalize_request",
    "CharacterError",
    "DecodeError",
    "decode_form",
    "DEFAULT_REGISTRY",
    "build_default_registry",
    "EndpointParser",
    "FieldError",
    "FieldRule",
    "FieldValidatorRegistry",
    "FieldValueError",
    "format_number",
    "FormatError",
    "IncomingRequest",
    "is_valid_number",
    "LibPhoneNumberService",
    "MethodError",
    "ParsedEndpoint",
    "parse_endpoint",
    "parse_routing_uri",
    "PhoneNumberError",
    "PhoneNumberService",
    "RequestSigner",
    "RequestValidator",
    "RequestValues",
    "RequiredError",
    "RoutingURI",
    "Settings",
    "SIGNATURE_HEADER",
    "validate_keypad_entry",
    "validate_routing_uri",
    "verify_signature",
    "VoicehookError",
]
