"""Per-field validation rules.

A validator is a callable ``(value, param) -> None`` raising a
:class:`~voicehook_core.errors.FieldValueError` subclass on failure. ``value``
is ``None`` when the field was sent without any value and a string otherwise;
both ``None`` and ``""`` are rejected unless ``param`` is ``"allow-empty"``.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Iterator, Mapping, Optional

from .endpoint import EndpointParser, default_parser, parse_routing_uri
from .errors import CharacterError, FieldValueError, PhoneNumberError, RequiredError

ALLOW_EMPTY = "allow-empty"
KEYPAD_CHARACTERS = "0123456789#*"

Validator = Callable[[Optional[str], str], None]


def present(value: Optional[str], param: str) -> bool:
    """Return True when ``value`` needs checking, False when it may be skipped."""

    if value:
        return True
    if param == ALLOW_EMPTY:
        return False
    raise RequiredError()


def check_characters(value: str, allowed: str) -> None:
    for character in value:
        if character not in allowed:
            raise CharacterError(character)


def validate_keypad_entry(value: Optional[str], param: str = "") -> None:
    if present(value, param):
        check_characters(value, KEYPAD_CHARACTERS)


def validate_routing_uri(value: Optional[str], param: str = "") -> None:
    if present(value, param):
        parse_routing_uri(value)


def phone_number_validator(parser: EndpointParser) -> Validator:
    def validate_phone_number(value: Optional[str], param: str = "") -> None:
        if present(value, param) and not parser.is_phone_number(value):
            raise PhoneNumberError("invalid phone number")

    return validate_phone_number


def identity_validator(parser: EndpointParser) -> Validator:
    """Accept a valid phone number or, failing that, a valid SIP URI."""

    validate_phone_number = phone_number_validator(parser)

    def validate_identity(value: Optional[str], param: str = "") -> None:
        try:
            validate_phone_number(value, param)
        except FieldValueError as phone_error:
            try:
                validate_routing_uri(value, param)
            except FieldValueError:
                raise phone_error from None

    return validate_identity


@dataclass(frozen=True)
class FieldRule:
    validator: Validator
    param: str = ""

    def check(self, value: Optional[str]) -> None:
        self.validator(value, self.param)


class FieldValidatorRegistry(Mapping[str, FieldRule]):
    """Read-only table of field name to :class:`FieldRule`.

    Instances never change after construction; :meth:`with_rule` and
    :meth:`without_rule` return new registries.
    """

    def __init__(self, rules: Optional[Mapping[str, FieldRule]] = None):
        self._rules: Mapping[str, FieldRule] = MappingProxyType(dict(rules or {}))

    def __getitem__(self, name: str) -> FieldRule:
        return self._rules[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"FieldValidatorRegistry({sorted(self._rules)!r})"

    def with_rule(self, name: str, validator: Validator, param: str = "") -> "FieldValidatorRegistry":
        rules = dict(self._rules)
        rules[name] = FieldRule(validator=validator, param=param)
        return FieldValidatorRegistry(rules)

    def without_rule(self, name: str) -> "FieldValidatorRegistry":
        rules = {key: rule for key, rule in self._rules.items() if key != name}
        return FieldValidatorRegistry(rules)


def build_default_registry(parser: Optional[EndpointParser] = None) -> FieldValidatorRegistry:
    """Rules for the identity and keypad fields of voice callbacks."""

    validate_identity = identity_validator(parser or default_parser())
    return FieldValidatorRegistry(
        {
            "From": FieldRule(validate_identity),
            "To": FieldRule(validate_identity),
            "Digits": FieldRule(validate_keypad_entry),
        }
    )


DEFAULT_REGISTRY = build_default_registry()
