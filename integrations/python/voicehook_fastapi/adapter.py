"""FastAPI adapter that gates routes behind callback validation."""

from __future__ import annotations

from typing import Any, Callable, Iterable, Optional

from fastapi import Depends, HTTPException, Request

from voicehook_core import IncomingRequest, RequestValidator, RequestValues, VoicehookError

HeaderItems = Iterable[tuple[str, str]]


class FastAPIAdapter:
    """Validate provider callbacks for FastAPI routes.

    ``on_request`` doubles as a dependency::

        adapter = FastAPIAdapter(app=app, validator=validator)

        @app.post("/voice")
        async def voice(values: RequestValues = Depends(adapter.on_request)):
            ...
    """

    def __init__(self, *, app: Any, validator: RequestValidator):
        self.app = app
        self.validator = validator

    def register(
        self,
        path: str,
        *,
        handler: Callable[..., Any],
        name: Optional[str] = None,
    ) -> None:
        self.app.add_api_route(
            path,
            handler,
            methods=["POST"],
            name=name,
            dependencies=[Depends(self.on_request)],
        )

    async def on_request(self, request: Request) -> RequestValues:
        body = await request.body()
        try:
            values = self.validator.validate(incoming_request(request, body))
        except VoicehookError as exc:
            raise HTTPException(status_code=exc.http_status, detail=type(exc).__name__) from exc
        state = getattr(request, "state", None)
        if state is not None:
            setattr(state, "voicehook_values", values)
        return values


def incoming_request(request: Any, body: bytes) -> IncomingRequest:
    """Build an :class:`IncomingRequest` from a Starlette request and its body.

    The path comes from the ASGI ``raw_path`` so percent-escapes match the
    URL the provider signed; ``request.url.path`` is decoded.
    """

    raw = getattr(request, "scope", {}).get("raw_path")
    path = raw.split(b"?", 1)[0].decode("latin-1") if raw else request.url.path
    if request.url.query:
        path = f"{path}?{request.url.query}"
    return IncomingRequest.build(
        method=request.method,
        path=path,
        headers=_iter_headers(request.headers),
        body=body,
    )


def _iter_headers(headers: Any) -> HeaderItems:
    if hasattr(headers, "multi_items"):
        return headers.multi_items()
    return headers.items()
