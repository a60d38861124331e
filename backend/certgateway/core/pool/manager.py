"""
Pool lifecycle: owns the single current ConnectionPool.

Only PoolManager swaps the reference. Queries that already hold the old pool
finish (or fail) against it; the old pool is closed in the background so a
hung socket teardown never delays the swap.
"""

import functools
import logging
import threading
from collections.abc import Callable

from certgateway.core.config import Settings, settings

from .connect import connect
from .pool import ConnectionPool

_log = logging.getLogger(__name__)


def create_pool(config: Settings | None = None) -> ConnectionPool:
    """New pool bound to the configured MySQL target and connection limit."""
    cfg = config or settings
    pool = ConnectionPool(functools.partial(connect, cfg), size=cfg.DB_POOL_SIZE)
    _log.info(
        "Created MySQL pool %s (%s@%s:%s/%s, limit=%d)",
        pool.pool_id,
        cfg.DB_USER,
        cfg.DB_HOST,
        cfg.DB_PORT,
        cfg.DB_NAME,
        cfg.DB_POOL_SIZE,
    )
    return pool


class PoolManager:
    """Single-owner, atomically swappable handle to the current pool."""

    def __init__(
        self,
        factory: Callable[[], ConnectionPool] | None = None,
    ) -> None:
        self._factory = factory or create_pool
        self._lock = threading.Lock()
        self._pool = self._factory()
        self._replacements = 0
        self._shut_down = False

    @property
    def replacements(self) -> int:
        return self._replacements

    @property
    def shut_down(self) -> bool:
        return self._shut_down

    def current_pool(self) -> ConnectionPool:
        return self._pool

    def replace_pool(self, stale: ConnectionPool | None = None) -> ConnectionPool:
        """
        Swap in a fresh pool and close the old one best-effort.

        When *stale* is given and is no longer current, another caller already
        replaced it: return the current pool without creating a new one. After
        shutdown the closed pool is returned as is.
        """
        with self._lock:
            old = self._pool
            if self._shut_down:
                _log.warning("MySQL pool %s not replaced: shutting down", old.pool_id)
                return old
            if stale is not None and stale is not old:
                return old
            self._pool = self._factory()
            self._replacements += 1
            new = self._pool
        _log.warning("Replaced MySQL pool %s with pool %s", old.pool_id, new.pool_id)
        self._close_in_background(old)
        return new

    def shutdown(self, timeout: float | None = None) -> bool:
        """
        Close the current pool, waiting at most *timeout* seconds.

        Returns False when the close did not finish in time.
        """
        with self._lock:
            self._shut_down = True
            pool = self._pool
        t = self._close_in_background(pool)
        t.join(timeout if timeout is not None else settings.DB_POOL_CLOSE_TIMEOUT)
        if t.is_alive():
            _log.warning("Timed out closing MySQL pool %s", pool.pool_id)
            return False
        return True

    @staticmethod
    def _close_in_background(pool: ConnectionPool) -> threading.Thread:
        t = threading.Thread(
            target=_close_pool_quiet,
            args=(pool,),
            name=f"pool-close-{pool.pool_id}",
            daemon=True,
        )
        t.start()
        return t


def _close_pool_quiet(pool: ConnectionPool) -> None:
    try:
        pool.close()
    except Exception:
        _log.exception("Error closing MySQL pool %s", pool.pool_id)


_pool_manager: PoolManager | None = None
_pool_lock = threading.Lock()


def get_pool_manager() -> PoolManager:
    """Return the singleton PoolManager (thread-safe double-checked locking)."""
    global _pool_manager
    if _pool_manager is None:
        with _pool_lock:
            if _pool_manager is None:
                _pool_manager = PoolManager()
    return _pool_manager
