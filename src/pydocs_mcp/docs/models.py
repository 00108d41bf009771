"""Documentation index and page models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# Bump whenever the persisted CachedDoc shape changes; older payloads are
# refetched instead of being read.
CACHE_SCHEMA_VERSION = 3


class DocEntry(BaseModel):
    """One documentation page descriptor from the DevDocs index."""

    model_config = ConfigDict(frozen=True)

    name: str
    path: str
    type: str


class DocIndex(BaseModel):
    """Full entry list for one documentation version.

    Extra keys in the upstream JSON (``types`` etc.) are ignored.
    """

    entries: list[DocEntry] = Field(default_factory=list)


class Anchor(BaseModel):
    """A heading within a Markdown document and the span it covers."""

    name: str
    heading: str
    level: int
    start_offset: int
    end_offset: int
    parent_anchor: str | None = None


class AnchorIndex(BaseModel):
    anchors: list[Anchor] = Field(default_factory=list)
    total_length: int = 0

    def find(self, name: str) -> Anchor | None:
        for anchor in self.anchors:
            if anchor.name == name:
                return anchor
        return None


class CachedDoc(BaseModel):
    """Converted document as stored on disk."""

    schema_version: int = CACHE_SCHEMA_VERSION
    markdown: str
    anchor_index: AnchorIndex
    fetched_at: float


class FetchedDoc(CachedDoc):
    """Document returned to callers, tagged with where it came from."""

    from_cache: bool
    path: str
