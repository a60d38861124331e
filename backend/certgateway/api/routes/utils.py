import asyncio
import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from certgateway.api.deps import ApiKeyDep, ExecutorDep
from certgateway.core.errors import QueryError
from certgateway.core.health import liveness_check, ping_database
from certgateway.core.serialize import make_json_safe

_logger = logging.getLogger(__name__)

router = APIRouter(tags=["utils"])


def utc_timestamp() -> str:
    """Current UTC time as ISO 8601 with millisecond precision and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@router.get("/healthz")
async def healthz() -> dict[str, Any]:
    """
    Liveness probe: is the process alive and responsive?

    No auth and no DB I/O.
    """
    ok, _ = liveness_check()
    return {"ok": ok, "ts": utc_timestamp()}


@router.get("/__debug/db-ping", dependencies=[ApiKeyDep], response_model=None)
async def db_ping(executor: ExecutorDep) -> dict[str, Any] | JSONResponse:
    """Run SELECT 1 AS ok through the pool (with the dead-connection retry)."""
    try:
        rows = await asyncio.to_thread(ping_database, executor)
    except QueryError as e:
        _logger.error(
            "DB ping failed: %s %s (pool %s)",
            e.code,
            e.message,
            executor.manager.current_pool().stats(),
        )
        return JSONResponse(
            status_code=500,
            content={"error": "DB_CONN_ERROR", **e.to_dict()},
        )
    _logger.info("DB ping ok (pool %s)", executor.manager.current_pool().stats())
    return {"ok": True, "rows": make_json_safe(rows)}
