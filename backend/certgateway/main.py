import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from certgateway.api.main import api_router
from certgateway.core.config import settings
from certgateway.core.cors import install_cors
from certgateway.core.errors import AuthError
from certgateway.core.health import check_database
from certgateway.core.pool import KeepAliveProber, get_pool_manager, get_query_executor

_logger = logging.getLogger(__name__)


if settings.SENTRY_DSN and settings.ENVIRONMENT != "local":
    sentry_sdk.init(dsn=str(settings.SENTRY_DSN), enable_tracing=True)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    executor = get_query_executor()
    await asyncio.to_thread(check_database, executor)

    prober = KeepAliveProber(executor, interval=settings.DB_KEEPALIVE_INTERVAL_SECONDS)
    prober.start()
    app.state.keepalive = prober
    try:
        yield
    finally:
        await prober.stop()
        _logger.info("Closing MySQL pool")
        await asyncio.to_thread(
            get_pool_manager().shutdown, settings.DB_POOL_CLOSE_TIMEOUT
        )


app = FastAPI(
    title=settings.PROJECT_NAME,
    lifespan=lifespan,
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)


# ---------------------------------------------------------------------------
# Exception handlers: every response carries a JSON body
# ---------------------------------------------------------------------------


@app.exception_handler(AuthError)
async def auth_exception_handler(request: Request, exc: AuthError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """Catch-all for unhandled exceptions: log and return 500 with safe message."""
    _logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    error = "Internal server error"
    if settings.ENVIRONMENT == "local":
        error = f"Internal server error: {exc}"
    return JSONResponse(status_code=500, content={"error": error})


install_cors(app, settings.all_cors_origins)

app.include_router(api_router)
