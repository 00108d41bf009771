"""Tests for cache sweeps on startup and on client initialize."""

import os
import time

import pytest

from pydocs_mcp.cache import GCReport
from pydocs_mcp.lifecycle import CacheSweepMiddleware, sweep_cache


def _expire(path) -> None:
    past = time.time() - 7200
    os.utime(path, (past, past))


def test_sweep_cache_returns_report(service) -> None:
    fresh = service.cache.doc_key("3.14", "library/json")
    stale = service.cache.doc_key("3.14", "library/csv")
    service.cache.write(fresh, {})
    service.cache.write(stale, {})
    _expire(stale)

    report = sweep_cache("startup", service)

    assert report == GCReport(scanned=2, deleted=1, errors=0)
    assert fresh.exists()
    assert not stale.exists()


def test_sweep_cache_logs_instead_of_raising(service, monkeypatch, caplog) -> None:
    def broken():
        raise PermissionError("cache root not readable")

    monkeypatch.setattr(service, "collect_garbage", broken)

    with caplog.at_level("WARNING", logger="pydocs-mcp.lifecycle"):
        assert sweep_cache("startup", service) is None

    assert "cache root not readable" in caplog.text


@pytest.mark.asyncio
async def test_initialize_middleware_sweeps_then_continues(installed_service) -> None:
    stale = installed_service.cache.index_key("3.13")
    installed_service.cache.write(stale, {"entries": []})
    _expire(stale)
    seen = []

    async def call_next(context):
        seen.append(context)
        return "initialized"

    context = object()
    result = await CacheSweepMiddleware().on_initialize(context, call_next)

    assert result == "initialized"
    assert seen == [context]
    assert not stale.exists()
