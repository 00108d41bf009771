"""DevDocs index/page models, HTTP source, conversion and the DocService."""

from pydocs_mcp.docs.models import (
    Anchor,
    AnchorIndex,
    CachedDoc,
    DocEntry,
    DocIndex,
    FetchedDoc,
)

__all__ = [
    "Anchor",
    "AnchorIndex",
    "CachedDoc",
    "DocEntry",
    "DocIndex",
    "FetchedDoc",
]
