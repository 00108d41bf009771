"""Text rendering for search results and documents, plus fetch error envelopes."""

from __future__ import annotations

from typing import Any

from pydocs_mcp.contracts import build_error
from pydocs_mcp.docs.models import AnchorIndex, DocEntry
from pydocs_mcp.docs.source import DocFetchError
from pydocs_mcp.search import TypeInferenceResult

# =============================================================================
# Search results
# =============================================================================


def format_search_results(
    results: list[DocEntry],
    query: str,
    version: str,
    fallback_used: bool = False,
    type_inference: TypeInferenceResult | None = None,
) -> str:
    """Render search results as a short listing."""
    if not results:
        lines = [f'No results found for "{query}" in Python {version} docs.']
        if type_inference and type_inference.inferred_types:
            lines.append("")
            lines.append(f"Suggested types: {', '.join(type_inference.inferred_types)}")
            lines.append("Try a broader query, or search with one of these types.")
        return "\n".join(lines)

    lines = [f'Found {len(results)} result(s) for "{query}" in Python {version} docs.']
    if fallback_used:
        note = "No exact matches for the requested type"
        if type_inference and type_inference.inferred_types:
            note += f"; showing results for inferred types: {', '.join(type_inference.inferred_types)}"
        lines.append(f"({note}.)")
    lines.append("")
    lines.extend(f"- {entry.name} [{entry.type}] -> {entry.path}" for entry in results)
    lines.append("")
    lines.append("Use fetch_python_doc with the path to get the full documentation.")
    return "\n".join(lines)


def format_type_suggestions(inference: TypeInferenceResult, version: str) -> str:
    lines = [f'Type suggestions for "{inference.query}" in Python {version}:', ""]

    if inference.inferred_types:
        lines.append("Recommended types (highest confidence):")
        lines.extend(
            f"  - {type_name} (confidence: {round(inference.confidence)}%)"
            for type_name in inference.inferred_types
        )

    if inference.alternative_types:
        lines.append("")
        lines.append("Alternative types:")
        lines.extend(f"  - {type_name}" for type_name in inference.alternative_types)

    if inference.matching_keywords:
        lines.append("")
        lines.append(f"Matching keywords: {', '.join(inference.matching_keywords)}")

    if not inference.inferred_types:
        lines.append("No type suggestions available for this query.")
        lines.append("Try searching without a type filter.")

    example_type = inference.inferred_types[0] if inference.inferred_types else "Language Reference"
    lines.append("")
    lines.append("Example usage:")
    lines.append(f'python_docs(query="{inference.query}", type="{example_type}")')
    return "\n".join(lines)


# =============================================================================
# Documents
# =============================================================================


def format_document(
    markdown: str,
    path: str,
    version: str,
    from_cache: bool,
    offset: int,
    limit: int,
    anchor_index: AnchorIndex,
    anchor: str | None = None,
) -> str:
    """Render one window of a document.

    With an anchor that exists, only that section is returned. An unknown
    anchor yields a warning, the list of available anchors, and the regular
    offset/limit window. A continuation hint is appended whenever content
    remains past the window.
    """
    header = f"# Python {version}: {path} {'(cached)' if from_cache else '(fetched)'}\n\n"

    if anchor:
        found = anchor_index.find(anchor)
        if found is not None:
            section = markdown[found.start_offset:found.end_offset]
            return f"{header}**Section:** {anchor}\n\n{section}"

        available = "\n".join(f"  - {a.name}: {a.heading}" for a in anchor_index.anchors)
        return (
            f'{header}⚠️ **Anchor "{anchor}" not found.**\n\n'
            f"Available anchors:\n{available or '  (none)'}\n\n"
            f"{markdown[offset:offset + limit]}"
        )

    end = min(offset + limit, len(markdown))
    content = markdown[offset:end]
    if end < anchor_index.total_length:
        return f"{header}{content}\n\n---\nMore content available. Use offset={end} to continue reading."
    return f"{header}{content}"


# =============================================================================
# Fetch error formatting
# =============================================================================


def _summarize_fetch_error(exc: DocFetchError) -> str:
    lowered = exc.reason.lower()
    if "timed out" in lowered:
        return "documentation server did not respond in time"
    if lowered.startswith("http 404"):
        return "document not found"
    if lowered.startswith("http "):
        return f"documentation server returned {exc.reason}"
    if lowered.startswith("malformed"):
        return "documentation index could not be parsed"
    return exc.reason.splitlines()[0] if exc.reason else "unknown fetch error"


def build_fetch_error(exc: DocFetchError, **details: Any) -> dict[str, Any]:
    """Build a unified error envelope for documentation fetch failures."""
    payload: dict[str, Any] = {
        "url": exc.url,
        "reason": _summarize_fetch_error(exc),
        "action": "check the path/version with python_docs, then retry",
    }
    payload.update({k: v for k, v in details.items() if v is not None})
    return build_error("fetch_failed", "Documentation fetch failed", payload)
