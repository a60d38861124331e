"""
MySQL connection helpers.

One physical connection per call to connect(); ConnectionPool calls it when
it has no idle connection to hand out. Session timeouts are extended once per
physical connection, not per query.
"""

import logging
import socket
from typing import Any

import pymysql

from certgateway.core.config import Settings, settings

_log = logging.getLogger(__name__)

SESSION_TIMEOUT_STATEMENTS = (
    "SET SESSION wait_timeout = %s",
    "SET SESSION interactive_timeout = %s",
)


def connect(config: Settings | None = None) -> pymysql.connections.Connection:
    """
    Open a connection to the configured MySQL server.

    autocommit is on: every query is an independent read. read/write timeouts
    bound how long a query can hang on a half-dead socket.
    """
    cfg = config or settings
    conn = pymysql.connect(
        host=cfg.DB_HOST,
        port=int(cfg.DB_PORT),
        user=cfg.DB_USER,
        password=cfg.DB_PASSWORD or "",
        database=cfg.DB_NAME or None,
        charset="utf8mb4",
        autocommit=True,
        connect_timeout=cfg.DB_CONNECT_TIMEOUT,
        read_timeout=cfg.DB_READ_TIMEOUT or None,
        write_timeout=cfg.DB_WRITE_TIMEOUT or None,
    )
    if cfg.DB_TCP_KEEPALIVE:
        enable_tcp_keepalive(conn)
    configure_session(conn, cfg.DB_SESSION_TIMEOUT)
    return conn


def enable_tcp_keepalive(conn: Any) -> bool:
    """Turn on SO_KEEPALIVE for the connection's socket. Returns False if not possible."""
    sock = getattr(conn, "_sock", None)
    if sock is None:
        return False
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1)
    except OSError as e:
        _log.debug("Could not enable TCP keep-alive: %s", e)
        return False
    return True


def configure_session(conn: Any, timeout_sec: int) -> None:
    """Extend idle/interactive session timeouts. Failures are logged, never raised."""
    for stmt in SESSION_TIMEOUT_STATEMENTS:
        cur = None
        try:
            cur = conn.cursor()
            cur.execute(stmt, (int(timeout_sec),))
        except pymysql.err.MySQLError as e:
            _log.warning("Session setup failed (%s): %s", stmt, e)
        finally:
            if cur is not None:
                try:
                    cur.close()
                except pymysql.err.MySQLError:
                    pass


def execute(conn: Any, sql: str, params: tuple | list | None = None) -> Any:
    """Execute SQL and return the cursor. Caller uses cursor_to_dicts(cursor) and closes it."""
    cur = conn.cursor()
    try:
        if params:
            cur.execute(sql, params)
        else:
            cur.execute(sql)
    except BaseException:
        try:
            cur.close()
        except Exception:
            pass
        raise
    return cur


def cursor_to_dicts(cursor: Any) -> list[dict[str, Any]]:
    """Convert cursor result to list of dicts, keeping column order."""
    desc = cursor.description
    if not desc:
        return []
    names = [d[0] for d in desc]
    return [dict(zip(names, row, strict=True)) for row in cursor.fetchall()]
