"""
Periodic ``SELECT 1`` so network intermediaries do not tear down idle
connections (cloud load balancers and NATs typically drop them after 5-15
minutes). Runs through the QueryExecutor, so a dead pool gets replaced.
Failures are logged and otherwise ignored.
"""

import asyncio
import contextlib
import logging

from certgateway.core.errors import QueryError

from .executor import QueryExecutor

_log = logging.getLogger(__name__)

KEEPALIVE_QUERY = "SELECT 1"


class KeepAliveProber:
    def __init__(
        self,
        executor: QueryExecutor,
        interval: float = 240.0,
        query: str = KEEPALIVE_QUERY,
    ) -> None:
        self.executor = executor
        self.interval = interval
        self.query = query
        self.probes = 0
        self.failures = 0
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the probe loop on the running event loop. No-op if interval <= 0."""
        if self.interval <= 0 or self.running:
            return
        self._task = asyncio.create_task(self._run(), name="db-keepalive")

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def probe(self) -> bool:
        """Run one probe. Returns True on success; never raises."""
        self.probes += 1
        try:
            await asyncio.to_thread(self.executor.execute, self.query)
        except QueryError as e:
            self.failures += 1
            _log.warning("Keep-alive ping error: %s %s", e.code, e.message)
            return False
        except Exception:
            self.failures += 1
            _log.exception("Keep-alive ping failed unexpectedly")
            return False
        return True

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            await self.probe()
