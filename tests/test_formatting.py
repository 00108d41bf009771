"""Tests for search result, type suggestion and document rendering."""

from pydocs_mcp.docs.models import Anchor, AnchorIndex, DocEntry
from pydocs_mcp.docs.source import DocFetchError
from pydocs_mcp.formatting import (
    build_fetch_error,
    format_document,
    format_search_results,
    format_type_suggestions,
)
from pydocs_mcp.search import TypeInferenceResult

EMPTY_ANCHORS = AnchorIndex(anchors=[], total_length=0)


def _entry(name: str, path: str, type: str = "Asynchronous I/O") -> DocEntry:
    return DocEntry(name=name, path=path, type=type)


def _inference(query: str, inferred=(), alternative=(), confidence=0.0, keywords=()) -> TypeInferenceResult:
    return TypeInferenceResult(
        query=query,
        inferred_types=list(inferred),
        alternative_types=list(alternative),
        confidence=confidence,
        matching_keywords=list(keywords),
    )


# ── format_search_results ────────────────────────────────


def test_no_results_message() -> None:
    assert format_search_results([], "asyncio", "3.14") == 'No results found for "asyncio" in Python 3.14 docs.'


def test_no_results_with_suggested_types() -> None:
    text = format_search_results([], "asyncio", "3.14", type_inference=_inference("asyncio", ["Asynchronous I/O"]))

    assert text.startswith('No results found for "asyncio"')
    assert "Suggested types: Asynchronous I/O" in text


def test_single_result() -> None:
    text = format_search_results([_entry("asyncio", "library/asyncio")], "asyncio", "3.14")

    assert 'Found 1 result(s) for "asyncio" in Python 3.14 docs.' in text
    assert "- asyncio [Asynchronous I/O] -> library/asyncio" in text
    assert "Use fetch_python_doc" in text


def test_multiple_results_keep_order() -> None:
    results = [
        _entry("asyncio", "library/asyncio"),
        _entry("asyncio.run", "library/asyncio#asyncio.run"),
        _entry("asyncio.Task", "library/asyncio-task"),
    ]

    text = format_search_results(results, "asyncio", "3.12")

    assert 'Found 3 result(s) for "asyncio" in Python 3.12 docs.' in text
    lines = [line for line in text.splitlines() if line.startswith("- ")]
    assert lines == [
        "- asyncio [Asynchronous I/O] -> library/asyncio",
        "- asyncio.run [Asynchronous I/O] -> library/asyncio#asyncio.run",
        "- asyncio.Task [Asynchronous I/O] -> library/asyncio-task",
    ]


def test_fallback_note() -> None:
    text = format_search_results(
        [_entry("asyncio", "library/asyncio")],
        "asyncio",
        "3.14",
        fallback_used=True,
        type_inference=_inference("asyncio", ["Asynchronous I/O"]),
    )

    assert "showing results for inferred types: Asynchronous I/O" in text


def test_version_in_header() -> None:
    results = [_entry("pathlib", "library/pathlib", "File & Directory Access")]

    assert "Python 3.9" in format_search_results(results, "pathlib", "3.9")
    assert "Python 3.14" in format_search_results(results, "pathlib", "3.14")


# ── format_type_suggestions ──────────────────────────────


def test_type_suggestions() -> None:
    inference = _inference(
        "asyncio queue",
        inferred=["Asynchronous I/O", "Concurrent Execution"],
        alternative=["Tutorial"],
        confidence=42.4,
        keywords=["asyncio", "queue"],
    )

    text = format_type_suggestions(inference, "3.14")

    assert 'Type suggestions for "asyncio queue" in Python 3.14:' in text
    assert "  - Asynchronous I/O (confidence: 42%)" in text
    assert "Alternative types:\n  - Tutorial" in text
    assert "Matching keywords: asyncio, queue" in text
    assert 'python_docs(query="asyncio queue", type="Asynchronous I/O")' in text


def test_type_suggestions_without_matches() -> None:
    text = format_type_suggestions(_inference("zzz"), "3.13")

    assert "No type suggestions available for this query." in text
    assert "Recommended types" not in text
    assert 'python_docs(query="zzz", type="Language Reference")' in text


# ── format_document ──────────────────────────────────────


def test_document_header() -> None:
    fetched = format_document("content", "library/asyncio", "3.14", False, 0, 10_000, EMPTY_ANCHORS)
    cached = format_document("content", "library/asyncio", "3.14", True, 0, 10_000, EMPTY_ANCHORS)

    assert fetched.startswith("# Python 3.14: library/asyncio (fetched)\n\n")
    assert "(cached)" not in fetched
    assert cached.startswith("# Python 3.14: library/asyncio (cached)\n\n")


def test_full_content_without_hint() -> None:
    content = "This is the full documentation content."
    anchors = AnchorIndex(total_length=len(content))

    text = format_document(content, "library/test", "3.14", True, 0, 10_000, anchors)

    assert text.endswith(content)
    assert "More content available" not in text


def test_pagination_hint() -> None:
    content = "A" * 1000
    anchors = AnchorIndex(total_length=len(content))

    text = format_document(content, "library/test", "3.14", True, 0, 100, anchors)

    assert len(text) < len(content) + 200
    assert "More content available. Use offset=100 to continue reading." in text


def test_window_is_exactly_limit_characters() -> None:
    content = "ABCDEFGHIJ"
    anchors = AnchorIndex(total_length=len(content))

    text = format_document(content, "library/test", "3.14", True, 0, 5, anchors)

    assert "ABCDE" in text
    assert "FGHIJ" not in text
    assert "offset=5" in text


def test_offset_window() -> None:
    content = "ABCDEFGHIJ"
    anchors = AnchorIndex(total_length=len(content))

    text = format_document(content, "library/test", "3.14", True, 5, 100, anchors)

    assert text.endswith("FGHIJ")
    assert "ABCDE" not in text
    assert "More content available" not in text


def test_offset_past_end_returns_header_only() -> None:
    content = "ABCDEFGHIJ"
    anchors = AnchorIndex(total_length=len(content))

    text = format_document(content, "library/test", "3.14", True, 50, 100, anchors)

    assert text == "# Python 3.14: library/test (cached)\n\n"


SECTIONED = "# Title\n\n## Section 1\n\nContent 1\n\n## Section 2\n\nContent 2"


def _sectioned_anchors() -> AnchorIndex:
    first = SECTIONED.index("## Section 1")
    second = SECTIONED.index("## Section 2")
    return AnchorIndex(
        anchors=[
            Anchor(name="section-1", heading="Section 1", level=2, start_offset=first, end_offset=second),
            Anchor(
                name="section-2",
                heading="Section 2",
                level=2,
                start_offset=second,
                end_offset=len(SECTIONED),
            ),
        ],
        total_length=len(SECTIONED),
    )


def test_anchor_returns_only_that_section() -> None:
    text = format_document(SECTIONED, "library/test", "3.14", True, 0, 100, _sectioned_anchors(), "section-1")

    assert "**Section:** section-1" in text
    assert "Content 1" in text
    assert "Content 2" not in text
    assert "More content available" not in text


def test_unknown_anchor_lists_available_anchors() -> None:
    text = format_document(SECTIONED, "library/test", "3.14", True, 0, 100, _sectioned_anchors(), "nonexistent")

    assert '⚠️ **Anchor "nonexistent" not found.**' in text
    assert "Available anchors:\n  - section-1: Section 1\n  - section-2: Section 2" in text
    assert text.endswith(SECTIONED)


def test_unknown_anchor_without_any_anchors() -> None:
    text = format_document("body", "library/test", "3.14", False, 0, 100, EMPTY_ANCHORS, "missing")

    assert "Available anchors:\n  (none)" in text


# ── build_fetch_error ────────────────────────────────────


def test_fetch_error_envelope() -> None:
    exc = DocFetchError("https://devdocs.test/python~3.14/library/nope.html", "HTTP 404")

    payload = build_fetch_error(exc, version="3.14", path="library/nope", anchor=None)

    assert payload["ok"] is False
    assert payload["error"]["code"] == "fetch_failed"
    details = payload["error"]["details"]
    assert details["reason"] == "document not found"
    assert details["url"].endswith("library/nope.html")
    assert details["version"] == "3.14"
    assert "anchor" not in details


def test_fetch_error_reasons() -> None:
    url = "https://devdocs.test/python~3.14/index.json"

    def reason(text: str) -> str:
        return build_fetch_error(DocFetchError(url, text))["error"]["details"]["reason"]

    assert reason("timed out after 30s") == "documentation server did not respond in time"
    assert reason("HTTP 503") == "documentation server returned HTTP 503"
    assert reason("malformed index: 2 validation error(s)") == "documentation index could not be parsed"
    assert reason("connection refused\nmore") == "connection refused"
