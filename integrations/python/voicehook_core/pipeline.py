"""Authenticate and validate a provider callback.

:class:`RequestValidator` runs four steps in order and stops at the first
failure:

1. method check (POST only),
2. form decoding,
3. signature check over the canonical message,
4. per-field validation against the injected registry.

Values are only returned once every step has passed.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Union

from .canonicalization import canonicalize_request
from .endpoint import EndpointParser, default_parser
from .errors import AuthenticationError, DecodeError, FieldError, FieldValueError, MethodError
from .request import IncomingRequest, decode_form, first_value
from .signature import SIGNATURE_HEADER, verify_signature
from .validators import FieldValidatorRegistry, build_default_registry
from .values import RequestValues

log = logging.getLogger(__name__)

EXPECTED_METHOD = "POST"


class RequestValidator:
    """Validates callbacks signed with one auth token.

    ``origin`` is the public ``scheme://host`` the provider was configured to
    call, which may differ from the address the application listens on.
    """

    def __init__(
        self,
        *,
        auth_token: Union[str, bytes],
        origin: str,
        registry: Optional[FieldValidatorRegistry] = None,
        endpoint_parser: Optional[EndpointParser] = None,
    ):
        self._auth_token = auth_token
        self.origin = origin
        self.endpoint_parser = endpoint_parser or default_parser()
        self.registry = registry if registry is not None else build_default_registry(self.endpoint_parser)

    def __repr__(self) -> str:
        return f"RequestValidator(origin={self.origin!r}, registry={self.registry!r})"

    def validate(self, request: IncomingRequest) -> RequestValues:
        if request.method.upper() != EXPECTED_METHOD:
            log.warning("rejected %s callback to %s: wrong method", request.method, request.path)
            raise MethodError(request.method, EXPECTED_METHOD)

        try:
            form = decode_form(request.body, request.content_type)
        except DecodeError:
            log.warning("rejected callback to %s: undecodable form body", request.path)
            raise

        message = canonicalize_request(origin=self.origin, path=request.path, form=form)
        try:
            verify_signature(
                message=message,
                secret=self._auth_token,
                header_values=request.header_values(SIGNATURE_HEADER),
            )
        except AuthenticationError:
            log.warning("rejected callback to %s: signature check failed", message.url)
            raise

        values: Dict[str, str] = {}
        for name, field_values in form.items():
            value = first_value(field_values)
            rule = self.registry.get(name)
            if rule is not None:
                try:
                    rule.check(value)
                except FieldValueError as exc:
                    log.warning("rejected callback to %s: field %s invalid (%s)", message.url, name, type(exc).__name__)
                    raise FieldError(name, exc) from exc
            values[name] = value or ""

        log.debug("validated callback to %s with %d fields", message.url, len(values))
        return RequestValues(values, parser=self.endpoint_parser)
