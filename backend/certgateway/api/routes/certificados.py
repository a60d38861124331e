"""
Certificate tables: one GET route per table, each returning every row.

The front-end filters by CURP/folio client-side.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from certgateway.api.deps import ApiKeyDep, ExecutorDep
from certgateway.core.errors import QueryError
from certgateway.core.serialize import make_json_safe

_logger = logging.getLogger(__name__)

QUERY_ERROR_MESSAGE = "Error en la consulta"

# route path / table name -> short label used in logs
CERTIFICATE_TABLES: dict[str, str] = {
    "certificadosAPS": "APS",
    "certificadosFONE": "FONE",
    "certificadosCECAP": "CECAP",
}

router = APIRouter(tags=["certificados"], dependencies=[ApiKeyDep])


def select_all_sql(table: str) -> str:
    if table not in CERTIFICATE_TABLES:
        raise ValueError(f"Unknown certificate table: {table}")
    return f"SELECT * FROM `{table}`"


def _make_endpoint(
    table: str, label: str
) -> Callable[..., Awaitable[JSONResponse]]:
    sql = select_all_sql(table)

    async def list_certificates(executor: ExecutorDep) -> JSONResponse:
        try:
            rows = await asyncio.to_thread(executor.execute, sql)
        except QueryError as e:
            _logger.error("Error %s: %s %s", label, e.code, e.message)
            return JSONResponse(
                status_code=500,
                content={"error": QUERY_ERROR_MESSAGE, **e.to_dict()},
            )
        return JSONResponse(content=make_json_safe(rows))

    list_certificates.__name__ = f"list_{table}"
    return list_certificates


for _table, _label in CERTIFICATE_TABLES.items():
    router.add_api_route(
        f"/{_table}",
        _make_endpoint(_table, _label),
        methods=["GET"],
        name=f"list_{_table}",
        response_model=None,
    )
