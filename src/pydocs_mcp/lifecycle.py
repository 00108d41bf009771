"""Cache maintenance triggers: process start and client (re)connects."""

from __future__ import annotations

import logging
from typing import Any

from fastmcp.server.middleware import Middleware, MiddlewareContext

from pydocs_mcp.cache import GCReport
from pydocs_mcp.docs.service import DocService, get_doc_service

logger = logging.getLogger("pydocs-mcp.lifecycle")


def sweep_cache(trigger: str, service: DocService | None = None) -> GCReport | None:
    """Run cache garbage collection, logging instead of raising on failure."""
    service = service or get_doc_service()
    try:
        report = service.collect_garbage()
    except OSError as exc:
        logger.warning("Cache GC on %s failed: %s", trigger, exc)
        return None
    logger.debug("Cache GC on %s finished: %s", trigger, report.as_dict())
    return report


class CacheSweepMiddleware(Middleware):
    """Sweep expired cache entries whenever a client initializes a session."""

    async def on_initialize(self, context: MiddlewareContext, call_next) -> Any:
        sweep_cache("client initialize")
        return await call_next(context)
