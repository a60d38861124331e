"""
Error taxonomy for the gateway.

AuthError and QueryError are turned into JSON responses by the handlers in
certgateway.main; PoolClosedError is raised by a pool that has been replaced
or shut down and is always treated as a dead connection.
"""

import errno
from typing import Any

import pymysql

AUTH_ERROR_MESSAGE = "Acceso no autorizado"


class AuthError(Exception):
    """Missing or invalid x-api-key."""

    status_code = 403

    def __init__(self, message: str = AUTH_ERROR_MESSAGE) -> None:
        super().__init__(message)
        self.message = message


class PoolError(Exception):
    """Base class for errors raised by ConnectionPool itself."""

    code = "POOL_ERROR"


class PoolClosedError(PoolError):
    code = "POOL_CLOSED"

    def __init__(self, pool_id: int | None = None) -> None:
        super().__init__(f"Pool {pool_id} is in closed state")
        self.pool_id = pool_id


# Exceptions a query attempt may raise that are database/link failures rather
# than bugs in our code.
DB_ERRORS: tuple[type[BaseException], ...] = (pymysql.err.MySQLError, OSError, PoolError)


def error_code(exc: BaseException) -> int | str | None:
    """Driver error code, errno name, or pool code for *exc*."""
    if isinstance(exc, PoolError):
        return exc.code
    if isinstance(exc, pymysql.err.MySQLError):
        if exc.args and isinstance(exc.args[0], int):
            return exc.args[0]
        return None
    if isinstance(exc, OSError) and exc.errno is not None:
        return errno.errorcode.get(exc.errno, exc.errno)
    return None


def error_message(exc: BaseException) -> str:
    if isinstance(exc, pymysql.err.MySQLError) and len(exc.args) >= 2:
        # closed connection: InterfaceError(0, "")
        return str(exc.args[1]) or exc.__class__.__name__
    if isinstance(exc, OSError) and exc.strerror:
        return exc.strerror
    return str(exc) or exc.__class__.__name__


class QueryError(Exception):
    """A query that failed for good (non-transient, or its single retry failed)."""

    def __init__(self, code: int | str | None, message: str) -> None:
        super().__init__(f"({code}) {message}")
        self.code = code
        self.message = message

    @classmethod
    def from_exception(cls, exc: BaseException) -> "QueryError":
        return cls(error_code(exc), error_message(exc))

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message}
