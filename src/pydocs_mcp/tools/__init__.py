"""pydocs-mcp tool implementations."""

from . import fetch_doc, search_docs, suggest_types

__all__ = [
    "fetch_doc",
    "search_docs",
    "suggest_types",
]
