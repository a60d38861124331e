"""
Health-check helpers.

Liveness: is the process alive and responsive?  (cheap, no I/O)
Database: can the pool run a trivial query?  (startup check and debug ping)
"""

import logging

from certgateway.core.errors import QueryError
from certgateway.core.pool import QueryExecutor, QueryResult

logger = logging.getLogger(__name__)

PING_QUERY = "SELECT 1 AS ok"


def ping_database(executor: QueryExecutor) -> QueryResult:
    """Run SELECT 1 AS ok through the executor. Raises QueryError."""
    return executor.execute(PING_QUERY)


def check_database(executor: QueryExecutor) -> bool:
    """Startup check: log whether MySQL answers. Never raises."""
    try:
        ping_database(executor)
    except QueryError as e:
        logger.error("Error connecting to MySQL: %s %s", e.code, e.message)
        return False
    logger.info("Connected to MySQL (pool active)")
    return True


def liveness_check() -> tuple[bool, list[str]]:
    """
    Lightweight liveness probe, just confirms the Python process is responsive.
    No I/O, no DB calls.
    """
    return (True, [])
