"""Filesystem cache for documentation indexes and pages."""

from pydocs_mcp.cache.store import CacheRead, CacheStore, GCReport

__all__ = ["CacheStore", "CacheRead", "GCReport"]
