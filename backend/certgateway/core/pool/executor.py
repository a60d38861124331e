"""
Run a query against the current pool, retrying once on a dead connection.

A connection-dead failure replaces the pool and reissues the identical query
exactly once; whatever that second attempt does is final. Any other failure
is raised straight away without touching the pool.
"""

import logging
import threading
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from certgateway.core.config import settings
from certgateway.core.errors import DB_ERRORS, QueryError, error_code, error_message

from .classify import is_connection_dead
from .connect import cursor_to_dicts, execute
from .manager import PoolManager, get_pool_manager
from .pool import ConnectionPool

_log = logging.getLogger(__name__)

QueryResult = list[dict[str, Any]]


@dataclass(frozen=True)
class QueryRequest:
    sql: str
    params: tuple[Any, ...] = field(default_factory=tuple)


class QueryExecutor:
    def __init__(
        self,
        manager: PoolManager,
        transient_codes: Iterable[int] | None = None,
    ) -> None:
        self._manager = manager
        self._transient_codes = (
            frozenset(transient_codes) if transient_codes is not None else None
        )

    @property
    def manager(self) -> PoolManager:
        return self._manager

    def execute(self, sql: str, params: Sequence[Any] = ()) -> QueryResult:
        """Return rows for *sql*; raise QueryError when the query fails for good."""
        request = QueryRequest(sql, tuple(params))
        pool = self._manager.current_pool()
        try:
            return self._run(pool, request)
        except DB_ERRORS as e:
            if not is_connection_dead(e, self._transient_codes):
                raise QueryError.from_exception(e) from e
            _log.warning(
                "Connection closed (%s: %s): recreating pool and retrying once",
                error_code(e),
                error_message(e),
            )

        pool = self._manager.replace_pool(pool)
        try:
            return self._run(pool, request)
        except DB_ERRORS as e:
            raise QueryError.from_exception(e) from e

    @staticmethod
    def _run(pool: ConnectionPool, request: QueryRequest) -> QueryResult:
        with pool.connection() as conn:
            cur = execute(conn, request.sql, request.params)
            try:
                return cursor_to_dicts(cur)
            finally:
                cur.close()


_executor: QueryExecutor | None = None
_executor_lock = threading.Lock()


def get_query_executor() -> QueryExecutor:
    """Return the singleton QueryExecutor bound to get_pool_manager()."""
    global _executor
    if _executor is None:
        with _executor_lock:
            if _executor is None:
                _executor = QueryExecutor(
                    get_pool_manager(), settings.transient_error_codes
                )
    return _executor
