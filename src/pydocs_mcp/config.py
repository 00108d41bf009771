"""Runtime configuration for pydocs-mcp."""

from dataclasses import dataclass
import os
from pathlib import Path

SUPPORTED_VERSIONS = ("3.14", "3.13", "3.12", "3.11", "3.10", "3.9")
DEFAULT_VERSION = "3.14"


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    value = os.getenv(name)
    if not value:
        return default
    return Path(value).expanduser()


@dataclass(frozen=True)
class DocsConfig:
    base_url: str
    product: str
    cache_root: Path
    index_ttl_s: float
    doc_ttl_s: float
    fetch_timeout_s: float
    max_window: int
    default_limit: int
    default_version: str


def get_docs_config() -> DocsConfig:
    """Load documentation config from environment variables."""
    default_version = os.getenv("PYDOCS_MCP_DEFAULT_VERSION", DEFAULT_VERSION)
    if default_version not in SUPPORTED_VERSIONS:
        default_version = DEFAULT_VERSION
    return DocsConfig(
        base_url=os.getenv("PYDOCS_MCP_BASE_URL", "https://documents.devdocs.io").rstrip("/"),
        product=os.getenv("PYDOCS_MCP_PRODUCT", "python"),
        cache_root=_env_path("PYDOCS_MCP_CACHE_DIR", Path.home() / ".cache" / "pydocs-mcp"),
        index_ttl_s=max(0.0, _env_float("PYDOCS_MCP_INDEX_TTL_S", 24 * 60 * 60)),
        doc_ttl_s=max(0.0, _env_float("PYDOCS_MCP_DOC_TTL_S", 7 * 24 * 60 * 60)),
        fetch_timeout_s=max(1.0, _env_float("PYDOCS_MCP_FETCH_TIMEOUT_S", 30.0)),
        max_window=max(1, _env_int("PYDOCS_MCP_MAX_WINDOW", 12_000)),
        default_limit=max(1, _env_int("PYDOCS_MCP_DEFAULT_LIMIT", 20)),
        default_version=default_version,
    )
