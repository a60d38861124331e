"""
MySQL connection pool, pool lifecycle, retrying query executor and keep-alive probe.
"""

from .classify import ErrorClass, TransientErrorCode, classify_error, is_connection_dead
from .connect import connect, cursor_to_dicts, execute
from .executor import QueryExecutor, QueryRequest, QueryResult, get_query_executor
from .keepalive import KeepAliveProber
from .manager import PoolManager, create_pool, get_pool_manager
from .pool import ConnectionPool

__all__ = [
    "ConnectionPool",
    "ErrorClass",
    "KeepAliveProber",
    "PoolManager",
    "QueryExecutor",
    "QueryRequest",
    "QueryResult",
    "TransientErrorCode",
    "classify_error",
    "connect",
    "create_pool",
    "cursor_to_dicts",
    "execute",
    "get_pool_manager",
    "get_query_executor",
    "is_connection_dead",
]
