"""Flask integration for Voicehook callback validation."""

from __future__ import annotations

from typing import Any, Callable
from urllib.parse import quote, urlsplit, urlunsplit

from voicehook_core import IncomingRequest, RequestValidator, VoicehookError
from voicehook_core.twiml import Response as TwimlResponse

ENVIRON_KEY = "voicehook.values"


class FlaskAdapter:
    """Register Flask routes that only run for authenticated callbacks."""

    def __init__(self, app: Any, *, validator: RequestValidator):
        self.app = app
        self.validator = validator

    def register(
        self,
        rule: str,
        *,
        handler: Callable[..., Any],
        endpoint: str | None = None,
    ) -> None:
        endpoint = endpoint or handler.__name__

        def wrapped(*args: Any, **kwargs: Any):
            from flask import Response, abort  # deferred import
            from flask import request as flask_request

            try:
                values = self.validator.validate(incoming_request(flask_request))
            except VoicehookError as exc:
                abort(exc.http_status)
            flask_request.environ[ENVIRON_KEY] = values
            result = handler(values, *args, **kwargs)
            if isinstance(result, TwimlResponse):
                return Response(result.render(), mimetype="application/xml")
            return result

        # GET is routed too and answered with 405 by the validator
        self.app.add_url_rule(rule, endpoint, wrapped, methods=["GET", "POST"])


def incoming_request(request: Any) -> IncomingRequest:
    """Build an :class:`IncomingRequest` from a Flask/Werkzeug request.

    WSGI folds repeated headers into one comma-joined value, which never
    decodes as a signature, so duplicates still fail closed.
    """

    return IncomingRequest.build(
        method=request.method,
        path=raw_path(request),
        headers=request.headers.items(),
        body=request.get_data(cache=True),
        content_type=request.content_type,
    )


def raw_path(request: Any) -> str:
    """Return the path and query as the client sent them, escapes intact.

    ``request.path`` is percent-decoded, while the provider signs the URL as
    configured.
    """

    environ = getattr(request, "environ", {})
    raw = environ.get("RAW_URI") or environ.get("REQUEST_URI")
    if raw:
        if not raw.startswith("/"):
            # absolute-form request target
            parts = urlsplit(raw)
            raw = urlunsplit(("", "", parts.path or "/", parts.query, ""))
        return raw
    path = quote(request.path, safe="/:@!$&'()*+,;=~")
    if request.query_string:
        path = f"{path}?{request.query_string.decode('latin-1')}"
    return path
