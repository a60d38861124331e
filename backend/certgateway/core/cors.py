"""
CORS with a hard origin allow-list.

Starlette's CORSMiddleware only omits headers for unknown origins; here a
request carrying a non-empty Origin that is not listed is rejected before it
reaches any route. Requests without Origin (server-to-server, curl, Postman)
always pass. Origins are compared exactly, as CORSMiddleware does.
"""

import logging
from collections.abc import Awaitable, Callable, Iterable

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.cors import SAFELISTED_HEADERS, CORSMiddleware

_logger = logging.getLogger(__name__)

CORS_REJECTED_MESSAGE = "No permitido por CORS"
ALLOWED_METHODS = ["GET"]
ALLOWED_HEADERS = ["Content-Type", "x-api-key"]

_PREFLIGHT_HEADERS = frozenset(h.lower() for h in (*SAFELISTED_HEADERS, *ALLOWED_HEADERS))


def origin_is_allowed(origin: str | None, allowed: Iterable[str]) -> bool:
    if not origin:
        return True
    return origin in set(allowed)


def preflight_failures(method: str, requested_headers: str | None) -> list[str]:
    """What a preflight asks for beyond ALLOWED_METHODS / ALLOWED_HEADERS."""
    failures = []
    if method not in ALLOWED_METHODS:
        failures.append("method")
    if requested_headers is not None:
        names = (h.strip().lower() for h in requested_headers.split(","))
        if any(name not in _PREFLIGHT_HEADERS for name in names):
            failures.append("headers")
    return failures


def install_cors(app: FastAPI, allowed_origins: list[str]) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=ALLOWED_METHODS,
        allow_headers=ALLOWED_HEADERS,
    )

    # Registered after CORSMiddleware, so it wraps it and runs first.
    @app.middleware("http")
    async def reject_disallowed_origin(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        origin = request.headers.get("origin")
        if not origin_is_allowed(origin, allowed_origins):
            _logger.warning("CORS blocked request from origin: %s", origin)
            return JSONResponse(
                status_code=403, content={"error": CORS_REJECTED_MESSAGE}
            )
        requested_method = request.headers.get("access-control-request-method")
        if origin and request.method == "OPTIONS" and requested_method is not None:
            failures = preflight_failures(
                requested_method, request.headers.get("access-control-request-headers")
            )
            if failures:
                _logger.warning(
                    "CORS preflight from %s refused: %s", origin, ", ".join(failures)
                )
                return JSONResponse(
                    status_code=400,
                    content={"error": "Disallowed CORS " + ", ".join(failures)},
                )
        return await call_next(request)
