"""Unit tests for core.pool.keepalive.KeepAliveProber."""

import asyncio
import logging
from unittest.mock import MagicMock

import pytest

from certgateway.core.config import Settings
from certgateway.core.errors import QueryError
from certgateway.core.pool import KeepAliveProber, PoolManager, QueryExecutor
from tests.utils.fake_db import FakeDatabase, connection_lost, syntax_error


def _run_for(prober: KeepAliveProber, seconds: float) -> None:
    async def scenario() -> None:
        prober.start()
        assert prober.running
        await asyncio.sleep(seconds)
        await prober.stop()
        assert not prober.running

    asyncio.run(scenario())


def test_default_interval_is_four_minutes() -> None:
    assert Settings(_env_file=None).DB_KEEPALIVE_INTERVAL_SECONDS * 1000 == 240000
    assert KeepAliveProber(MagicMock()).interval == 240.0


def test_three_healthy_intervals_log_nothing(
    db: FakeDatabase, executor: QueryExecutor, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.WARNING)
    prober = KeepAliveProber(executor, interval=0.03)

    _run_for(prober, 0.2)

    assert prober.probes >= 3
    assert prober.failures == 0
    assert db.queries.count("SELECT 1") == prober.probes
    assert caplog.records == []


def test_probe_failure_is_logged_and_ignored(
    db: FakeDatabase, executor: QueryExecutor, caplog: pytest.LogCaptureFixture
) -> None:
    db.fail_next(syntax_error())
    prober = KeepAliveProber(executor, interval=1)

    ok = asyncio.run(prober.probe())

    assert ok is False
    assert prober.failures == 1
    assert "Keep-alive ping error: 1064" in caplog.text
    # next probe works
    assert asyncio.run(prober.probe()) is True


def test_probe_routes_through_executor_retry(
    db: FakeDatabase, manager: PoolManager, executor: QueryExecutor
) -> None:
    """A probe hitting a dead connection gets the pool replaced like any query."""
    db.fail_next(connection_lost())
    prober = KeepAliveProber(executor, interval=1)

    assert asyncio.run(prober.probe()) is True
    assert manager.replacements == 1


def test_unexpected_exception_never_escapes(caplog: pytest.LogCaptureFixture) -> None:
    executor = MagicMock()
    executor.execute.side_effect = RuntimeError("driver bug")
    prober = KeepAliveProber(executor, interval=0.02)

    _run_for(prober, 0.1)

    assert prober.failures >= 1
    assert "Keep-alive ping failed unexpectedly" in caplog.text


def test_loop_survives_failures() -> None:
    executor = MagicMock()
    executor.execute.side_effect = QueryError(2003, "Can't connect to MySQL server")
    prober = KeepAliveProber(executor, interval=0.02)

    _run_for(prober, 0.15)

    assert prober.probes >= 3
    assert prober.failures == prober.probes


def test_zero_interval_disables() -> None:
    async def scenario() -> bool:
        prober = KeepAliveProber(MagicMock(), interval=0)
        prober.start()
        running = prober.running
        await prober.stop()
        return running

    assert asyncio.run(scenario()) is False
