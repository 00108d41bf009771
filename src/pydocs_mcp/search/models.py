"""Search index and type inference models.

These are persisted to the cache as JSON, so they are pydantic models rather
than plain dataclasses.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class KeywordMapping(BaseModel):
    """A keyword seen in entry names and the documentation types it points to."""

    keyword: str
    types: list[str] = Field(description="Types ranked by occurrence count, at most 5")
    sample_entries: list[str] = Field(default_factory=list, description="Up to 3 '<name> (<type>)' samples")
    score: int = Field(description="Total occurrences of the keyword across all entries")


class SearchIndex(BaseModel):
    """Keyword to type mappings derived from one documentation index."""

    version: str
    generated_at: str
    total_entries: int
    type_stats: dict[str, int] = Field(default_factory=dict)
    keyword_mappings: list[KeywordMapping] = Field(default_factory=list)


class TypeInferenceResult(BaseModel):
    query: str
    inferred_types: list[str] = Field(default_factory=list)
    alternative_types: list[str] = Field(default_factory=list)
    confidence: float = 0.0
    matching_keywords: list[str] = Field(default_factory=list)
