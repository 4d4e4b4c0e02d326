"""Django integration: a view decorator for provider callbacks."""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable

from voicehook_core import IncomingRequest, RequestValidator, VoicehookError
from voicehook_core.twiml import Response as TwimlResponse


class DjangoAdapter:
    """Wrap Django views so they only run for authenticated callbacks."""

    def __init__(self, *, validator: RequestValidator):
        self.validator = validator

    def protect(self, view: Callable[..., Any]) -> Callable[..., Any]:
        validator = self.validator

        @wraps(view)
        def wrapped(request: Any, *args: Any, **kwargs: Any):
            from django.http import HttpResponse  # deferred import

            try:
                values = validator.validate(incoming_request(request))
            except VoicehookError as exc:
                return HttpResponse(status=exc.http_status)
            setattr(request, "voicehook_values", values)
            result = view(request, *args, **kwargs)
            if isinstance(result, TwimlResponse):
                return HttpResponse(result.render(), content_type="application/xml")
            return result

        # The provider cannot send a CSRF token
        setattr(wrapped, "csrf_exempt", True)
        return wrapped


def incoming_request(request: Any) -> IncomingRequest:
    """Build an :class:`IncomingRequest` from a Django ``HttpRequest``."""

    return IncomingRequest.build(
        method=request.method,
        path=request.get_full_path(),
        headers=request.headers.items(),
        body=request.body,
        content_type=request.META.get("CONTENT_TYPE"),
    )
