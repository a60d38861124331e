"""
Bounded connection pool for a single MySQL target.

Idle connections are reused; a connection that comes back closed (the driver
drops its socket on network errors) is discarded. Borrowers block while all
``size`` connections are checked out.
"""

import itertools
import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from certgateway.core.errors import PoolClosedError

_log = logging.getLogger(__name__)

_pool_ids = itertools.count(1)


class ConnectionPool:
    """At most ``size`` physical connections created by ``connect_fn``."""

    def __init__(self, connect_fn: Callable[[], Any], *, size: int = 10) -> None:
        if size < 1:
            raise ValueError("pool size must be >= 1")
        self.pool_id = next(_pool_ids)
        self.size = size
        self._connect = connect_fn
        self._idle: list[Any] = []
        self._in_use = 0
        self._closed = False
        self._lock = threading.Lock()
        self._slots = threading.BoundedSemaphore(size)

    @property
    def closed(self) -> bool:
        return self._closed

    @contextmanager
    def connection(self) -> Iterator[Any]:
        """Borrow a connection; it goes back to the pool (or is closed) on exit."""
        if self._closed:
            raise PoolClosedError(self.pool_id)
        self._slots.acquire()
        conn = None
        try:
            conn = self._checkout()
            yield conn
        finally:
            if conn is not None:
                self._checkin(conn)
            self._slots.release()

    def close(self) -> None:
        """Refuse new borrowers and close idle connections. In-use ones close on return."""
        with self._lock:
            self._closed = True
            idle, self._idle = self._idle, []
        for conn in idle:
            self._close_quiet(conn)
        _log.info("Pool %s closed (%d idle connections dropped)", self.pool_id, len(idle))

    def stats(self) -> dict[str, Any]:
        """Return pool statistics for monitoring."""
        with self._lock:
            return {
                "pool_id": self.pool_id,
                "size": self.size,
                "idle_connections": len(self._idle),
                "in_use": self._in_use,
                "closed": self._closed,
            }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _checkout(self) -> Any:
        while True:
            with self._lock:
                if self._closed:
                    raise PoolClosedError(self.pool_id)
                conn = self._idle.pop() if self._idle else None
                if conn is not None:
                    self._in_use += 1
            if conn is None:
                break
            if self._is_open(conn):
                return conn
            with self._lock:
                self._in_use -= 1
            self._close_quiet(conn)

        conn = self._connect()
        with self._lock:
            self._in_use += 1
        _log.debug("Pool %s opened a new connection", self.pool_id)
        return conn

    def _checkin(self, conn: Any) -> None:
        with self._lock:
            self._in_use -= 1
            if not self._closed and self._is_open(conn):
                self._idle.append(conn)
                return
        self._close_quiet(conn)

    @staticmethod
    def _is_open(conn: Any) -> bool:
        return bool(getattr(conn, "open", True))

    def _close_quiet(self, conn: Any) -> None:
        if not self._is_open(conn):
            return
        try:
            conn.close()
        except Exception as e:
            _log.warning("Pool %s error while closing connection: %r", self.pool_id, e)
