"""
Classify a failed query attempt as "connection dead" (retry on a new pool) or
anything else (surface immediately).

Pure function of the exception type and driver error code. SQL errors
(ProgrammingError), constraint violations (IntegrityError) and server-side
errors outside the transient set are never treated as connection-dead.
"""

import enum
from collections.abc import Iterable

import pymysql
from pymysql.constants import CR

from certgateway.core.errors import PoolClosedError


class TransientErrorCode(enum.IntEnum):
    CONNECTION_ERROR = CR.CR_CONNECTION_ERROR  # 2002, local socket
    CONN_HOST_ERROR = CR.CR_CONN_HOST_ERROR  # 2003, connection refused / unreachable
    SERVER_GONE = CR.CR_SERVER_GONE_ERROR  # 2006, write on a dead link
    SERVER_LOST = CR.CR_SERVER_LOST  # 2013, reset or read timeout
    SERVER_LOST_EXTENDED = 2055  # lost connection, with system error detail
    CLIENT_INTERACTION_TIMEOUT = 4031  # server dropped an idle client (MySQL 8.0.24+)


DEFAULT_TRANSIENT_CODES = frozenset(int(c) for c in TransientErrorCode)


class ErrorClass(enum.Enum):
    CONNECTION_DEAD = "connection_dead"
    OTHER = "other"


def classify_error(
    exc: BaseException, transient_codes: Iterable[int] | None = None
) -> ErrorClass:
    codes = DEFAULT_TRANSIENT_CODES if transient_codes is None else frozenset(transient_codes)

    if isinstance(exc, PoolClosedError):
        return ErrorClass.CONNECTION_DEAD
    # pymysql raises InterfaceError when the connection is already closed
    if isinstance(exc, pymysql.err.InterfaceError):
        return ErrorClass.CONNECTION_DEAD
    if isinstance(exc, pymysql.err.OperationalError):
        code = exc.args[0] if exc.args else None
        if isinstance(code, int) and code in codes:
            return ErrorClass.CONNECTION_DEAD
        return ErrorClass.OTHER
    # reset, refused, aborted, broken pipe
    if isinstance(exc, ConnectionError):
        return ErrorClass.CONNECTION_DEAD
    return ErrorClass.OTHER


def is_connection_dead(
    exc: BaseException, transient_codes: Iterable[int] | None = None
) -> bool:
    return classify_error(exc, transient_codes) is ErrorClass.CONNECTION_DEAD
