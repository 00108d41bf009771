"""File-based TTL cache for documentation indexes and pages.

Layout under the cache root:

    <root>/<product>-<version>.json                 documentation index
    <root>/<product>-<version>.search-index.json    derived search index
    <root>/docs/<version>/<sha256(path)>.json       converted documents

Every file is a complete JSON snapshot of its in-memory counterpart and is
replaced wholesale on write. Freshness is the file's modification time.
"""

from __future__ import annotations

from dataclasses import dataclass
import hashlib
import json
import logging
import os
from pathlib import Path
import time
from typing import Any, Literal

logger = logging.getLogger("pydocs-mcp.cache")

DOCS_DIRNAME = "docs"
TEMP_SUFFIX = ".tmp"
# Snapshots plus temp files a crashed write left behind
SWEPT_SUFFIXES = (".json", TEMP_SUFFIX)

CacheStatus = Literal["hit", "missing", "unreadable"]


@dataclass(frozen=True)
class CacheRead:
    """Outcome of reading one cache key."""

    status: CacheStatus
    value: Any = None
    error: str | None = None

    @property
    def hit(self) -> bool:
        return self.status == "hit"


@dataclass(frozen=True)
class GCReport:
    scanned: int = 0
    deleted: int = 0
    errors: int = 0

    def as_dict(self) -> dict[str, int]:
        return {"scanned": self.scanned, "deleted": self.deleted, "errors": self.errors}


def _hash(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


class CacheStore:
    """Content-addressed JSON files with mtime-based TTL checks.

    The root directory is created on first write, so constructing a store
    never touches the filesystem.
    """

    def __init__(self, root: Path, product: str = "python") -> None:
        self.root = Path(root)
        self.product = product

    @property
    def docs_root(self) -> Path:
        return self.root / DOCS_DIRNAME

    # -- key derivation ----------------------------------------------------

    def index_key(self, version: str) -> Path:
        return self.root / f"{self.product}-{version}.json"

    def search_index_key(self, version: str) -> Path:
        return self.root / f"{self.product}-{version}.search-index.json"

    def doc_key(self, version: str, doc_path: str) -> Path:
        return self.docs_root / version / f"{_hash(doc_path)}.json"

    # -- access ------------------------------------------------------------

    def is_valid(self, key: Path, ttl_s: float) -> bool:
        """Return True if the entry exists and was written less than ttl_s ago."""
        try:
            mtime = key.stat().st_mtime
        except OSError:
            return False
        return time.time() - mtime < ttl_s

    def load(self, key: Path) -> CacheRead:
        """Read and parse a cache entry, reporting why it is absent if so."""
        try:
            with open(key, encoding="utf-8") as f:
                return CacheRead("hit", json.load(f))
        except FileNotFoundError:
            return CacheRead("missing")
        except (OSError, ValueError) as exc:
            logger.debug("Unreadable cache entry %s: %s", key, exc)
            return CacheRead("unreadable", error=str(exc))

    def read(self, key: Path) -> Any | None:
        """Return the cached value, or None when missing or unreadable."""
        result = self.load(key)
        return result.value if result.hit else None

    def write(self, key: Path, value: Any) -> None:
        """Serialize value to key, replacing any previous snapshot.

        Raises:
            OSError: If the directory or file cannot be written.
        """
        key.parent.mkdir(parents=True, exist_ok=True)
        temp_path = key.with_name(key.name + TEMP_SUFFIX)
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(value, f, ensure_ascii=False)
            os.replace(temp_path, key)
        except OSError:
            temp_path.unlink(missing_ok=True)
            raise

    # -- garbage collection ------------------------------------------------

    def run_garbage_collection(self, index_ttl_s: float, doc_ttl_s: float) -> GCReport:
        """Delete expired index files and documents.

        Top-level ``*.json`` files and orphaned ``*.tmp`` files are checked
        against ``index_ttl_s``; every file under ``docs/<version>/``
        (temp files included) against ``doc_ttl_s``. Failures are counted,
        never raised.
        """
        scanned = deleted = errors = 0

        def sweep(path: Path, ttl_s: float) -> None:
            nonlocal scanned, deleted, errors
            scanned += 1
            if self.is_valid(path, ttl_s):
                return
            try:
                path.unlink()
                deleted += 1
            except OSError as exc:
                logger.debug("Failed to delete %s: %s", path, exc)
                errors += 1

        if self.root.is_dir():
            try:
                top_level = sorted(
                    p for p in self.root.iterdir() if p.suffix in SWEPT_SUFFIXES and p.is_file()
                )
            except OSError as exc:
                logger.debug("Failed to list %s: %s", self.root, exc)
                top_level = []
                errors += 1
            for path in top_level:
                sweep(path, index_ttl_s)

        if self.docs_root.is_dir():
            try:
                version_dirs = sorted(self.docs_root.iterdir())
            except OSError as exc:
                logger.debug("Failed to list %s: %s", self.docs_root, exc)
                version_dirs = []
                errors += 1
            for version_dir in version_dirs:
                try:
                    doc_files = sorted(version_dir.iterdir())
                except OSError as exc:
                    logger.debug("Failed to list %s: %s", version_dir, exc)
                    errors += 1
                    continue
                for path in doc_files:
                    sweep(path, doc_ttl_s)

        return GCReport(scanned=scanned, deleted=deleted, errors=errors)
