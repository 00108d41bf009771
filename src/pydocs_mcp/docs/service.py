"""Documentation service: cached index/page access and search.

Ties together the CacheStore, the DevDocs HTTP source, the HTML converter and
the search index. Cache reads never fail a request; fetch failures propagate
as DocFetchError.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import math
import time

from pydantic import ValidationError

from pydocs_mcp.cache import CacheStore, GCReport
from pydocs_mcp.config import DocsConfig, get_docs_config
from pydocs_mcp.docs.converter import html_to_markdown
from pydocs_mcp.docs.models import CACHE_SCHEMA_VERSION, CachedDoc, DocEntry, DocIndex, FetchedDoc
from pydocs_mcp.docs.source import DocFetchError, DocSource
from pydocs_mcp.search import SearchIndex, TypeInferenceResult, create_search_index, infer_types_for_query

logger = logging.getLogger("pydocs-mcp.service")

PAGE_SUFFIX = ".html"
FALLBACK_INFERRED_TYPES = 2


@dataclass
class SearchOutcome:
    results: list[DocEntry]
    fallback_used: bool = False
    type_inference: TypeInferenceResult | None = None


def normalize_doc_path(path: str) -> str:
    """Strip the page suffix so 'library/json.html' and 'library/json' share a key."""
    path = path.strip()
    if path.endswith(PAGE_SUFFIX):
        return path[: -len(PAGE_SUFFIX)]
    return path


class DocService:
    """Cache-or-fetch access to DevDocs indexes and pages."""

    def __init__(
        self,
        cache: CacheStore,
        source: DocSource,
        config: DocsConfig,
        log: logging.Logger | None = None,
    ) -> None:
        self.cache = cache
        self.source = source
        self.config = config
        self.log = log or logger

    # -- index -------------------------------------------------------------

    async def get_index(self, version: str) -> DocIndex:
        """Return the entry index for version, fetching it when stale.

        Raises:
            DocFetchError: If the index cannot be fetched or is not valid JSON.
        """
        key = self.cache.index_key(version)
        if self.cache.is_valid(key, self.config.index_ttl_s):
            cached = self.cache.read(key)
            if cached is not None:
                try:
                    return DocIndex.model_validate(cached)
                except ValidationError as exc:
                    self.log.debug("Discarding malformed cached index %s: %s", key, exc)

        url = self.source.index_url(version)
        text = await self.source.fetch_text(url)
        try:
            index = DocIndex.model_validate_json(text)
        except ValidationError as exc:
            error = DocFetchError(url, f"malformed index: {exc.error_count()} validation error(s)")
            self.log.error("%s", error)
            raise error from exc

        self._persist(key, index.model_dump(mode="json"))
        return index

    async def get_search_index(self, version: str) -> SearchIndex:
        """Return the search index for version, rebuilding it from the entry index."""
        key = self.cache.search_index_key(version)
        if self.cache.is_valid(key, self.config.index_ttl_s):
            cached = self.cache.read(key)
            if cached is not None:
                try:
                    return SearchIndex.model_validate(cached)
                except ValidationError as exc:
                    self.log.debug("Discarding malformed cached search index %s: %s", key, exc)

        index = await self.get_index(version)
        search_index = create_search_index(index, version)
        self.log.info(
            "Built search index for %s %s: %d entries, %d keywords",
            self.config.product,
            version,
            search_index.total_entries,
            len(search_index.keyword_mappings),
        )
        self._persist(key, search_index.model_dump(mode="json"))
        return search_index

    # -- documents ---------------------------------------------------------

    async def get_doc(self, version: str, path: str) -> FetchedDoc:
        """Return a converted page, from cache when fresh and current.

        Cached payloads written under an older schema (or missing the anchor
        index) count as misses and are refetched.

        Raises:
            DocFetchError: If the page has to be fetched and the fetch fails.
        """
        normalized = normalize_doc_path(path)
        key = self.cache.doc_key(version, normalized)

        if self.cache.is_valid(key, self.config.doc_ttl_s):
            cached = self._load_cached_doc(key)
            if cached is not None:
                return FetchedDoc(**cached.model_dump(), from_cache=True, path=normalized)

        html = await self.source.fetch_doc_html(version, normalized)
        converted = html_to_markdown(html)
        payload = CachedDoc(
            schema_version=CACHE_SCHEMA_VERSION,
            markdown=converted.markdown,
            anchor_index=converted.anchor_index,
            fetched_at=time.time(),
        )
        self._persist(key, payload.model_dump(mode="json"))
        return FetchedDoc(**payload.model_dump(), from_cache=False, path=normalized)

    def _load_cached_doc(self, key) -> CachedDoc | None:
        result = self.cache.load(key)
        if not result.hit:
            return None
        value = result.value
        if not isinstance(value, dict) or value.get("schema_version") != CACHE_SCHEMA_VERSION:
            self.log.debug("Cached doc %s has an outdated schema, refetching", key)
            return None
        try:
            return CachedDoc.model_validate(value)
        except ValidationError as exc:
            self.log.debug("Cached doc %s failed validation, refetching: %s", key, exc)
            return None

    def _persist(self, key, value) -> None:
        try:
            self.cache.write(key, value)
        except OSError as exc:
            self.log.warning("Failed to cache %s: %s", key, exc)

    # -- search ------------------------------------------------------------

    def search(
        self,
        index: DocIndex,
        query: str,
        type: str | None = None,
        limit: int | None = None,
    ) -> list[DocEntry]:
        """Case-insensitive substring search over entry names, in index order.

        When type is given, only entries whose type equals it (ignoring case)
        qualify. Scanning stops as soon as limit matches are collected.
        """
        max_results = self.config.default_limit if limit is None else limit
        query_lower = query.lower()
        type_lower = type.lower() if type else None

        results: list[DocEntry] = []
        if max_results <= 0:
            return results
        for entry in index.entries:
            if query_lower not in entry.name.lower():
                continue
            if type_lower is not None and entry.type.lower() != type_lower:
                continue
            results.append(entry)
            if len(results) >= max_results:
                break
        return results

    def search_with_fallback(
        self,
        index: DocIndex,
        search_index: SearchIndex,
        query: str,
        type: str | None = None,
        limit: int | None = None,
    ) -> SearchOutcome:
        """Search, retrying with inferred types when a type filter finds nothing.

        Fallback ordering: hits for the top inferred types come first, then
        unfiltered substring hits; duplicates by path keep their first
        position and the merged list is cut to limit.
        """
        max_results = self.config.default_limit if limit is None else limit
        results = self.search(index, query, type, max_results)
        if results or not type:
            return SearchOutcome(results=results)

        inference = infer_types_for_query(query, search_index)
        self.log.info(
            "No results for %r with type %r, falling back to inferred types %s",
            query,
            type,
            inference.inferred_types,
        )

        per_type_limit = math.ceil(max_results / 2)
        candidates: list[DocEntry] = []
        for inferred_type in inference.inferred_types[:FALLBACK_INFERRED_TYPES]:
            candidates.extend(self.search(index, query, inferred_type, per_type_limit))
        candidates.extend(self.search(index, query, None, max_results))

        merged: list[DocEntry] = []
        seen_paths: set[str] = set()
        for entry in candidates:
            if entry.path in seen_paths:
                continue
            seen_paths.add(entry.path)
            merged.append(entry)
            if len(merged) >= max_results:
                break

        return SearchOutcome(results=merged, fallback_used=True, type_inference=inference)

    def suggest_types(self, search_index: SearchIndex, query: str) -> TypeInferenceResult:
        return infer_types_for_query(query, search_index)

    # -- maintenance -------------------------------------------------------

    def collect_garbage(self) -> GCReport:
        """Sweep expired cache entries using the configured TTLs."""
        report = self.cache.run_garbage_collection(self.config.index_ttl_s, self.config.doc_ttl_s)
        self.log.info(
            "Cache GC: scanned=%d deleted=%d errors=%d",
            report.scanned,
            report.deleted,
            report.errors,
        )
        return report


def create_doc_service(config: DocsConfig | None = None) -> DocService:
    """Build a DocService wired to the filesystem cache and DevDocs."""
    config = config or get_docs_config()
    return DocService(
        cache=CacheStore(config.cache_root, product=config.product),
        source=DocSource(config.base_url, config.product, config.fetch_timeout_s),
        config=config,
    )


_service: DocService | None = None


def get_doc_service() -> DocService:
    """Return the process-wide DocService with lazy initialization."""
    global _service
    if _service is None:
        _service = create_doc_service()
    return _service


def set_doc_service(service: DocService | None) -> None:
    """Replace the process-wide DocService (None resets to lazy creation)."""
    global _service
    _service = service
