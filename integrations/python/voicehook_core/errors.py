"""Error taxonomy for webhook validation.

Every failure raised by the pipeline derives from :class:`VoicehookError` and
carries an ``http_status`` hint so adapters can answer without inspecting the
concrete type. Messages never include the auth token or signature values.
"""

from __future__ import annotations


class VoicehookError(Exception):
    """Base class for all validation failures."""

    http_status = 400


class MethodError(VoicehookError):
    """The callback did not use the expected HTTP method."""

    http_status = 405

    def __init__(self, method: str, expected: str = "POST"):
        super().__init__(f"expected a {expected} request, received {method}")
        self.method = method
        self.expected = expected


class DecodeError(VoicehookError):
    """The form body could not be decoded."""


class AuthenticationError(VoicehookError):
    """The request signature header is missing, repeated or does not match."""

    http_status = 403


class FieldValueError(VoicehookError):
    """Base class for failures of a single field value."""


class RequiredError(FieldValueError):
    def __init__(self, message: str = "required"):
        super().__init__(message)


class FormatError(FieldValueError):
    """The value is structurally invalid."""


class PhoneNumberError(FormatError):
    """The value is not a valid, dialable phone number."""


class CharacterError(FieldValueError):
    """The value contains a character outside the allowed set."""

    def __init__(self, character: str):
        super().__init__(f"invalid: character '{character}' is not allowed")
        self.character = character


class FieldError(VoicehookError):
    """Wraps a :class:`FieldValueError` with the offending form field name."""

    def __init__(self, field: str, cause: FieldValueError):
        super().__init__(f"invalid form value {field}: {cause}")
        self.field = field
        self.cause = cause
