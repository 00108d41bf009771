"""Python docs search tool - substring search with type inference fallback."""

from typing import Any

from fastmcp import FastMCP

from pydocs_mcp.contracts import build_docs_data, build_ok
from pydocs_mcp.docs.service import get_doc_service
from pydocs_mcp.docs.source import DocFetchError
from pydocs_mcp.formatting import build_fetch_error, format_search_results
from pydocs_mcp.search import get_available_types
from pydocs_mcp.utils import DocsQuery, DocType, DocVersion, SearchLimit, normalize_input

MAX_TYPE_HINTS = 12


def register(mcp: FastMCP) -> None:
    """Register python_docs tool with the MCP server."""

    @mcp.tool()
    async def python_docs(
        query: DocsQuery,
        version: DocVersion = None,
        type: DocType = None,
        limit: SearchLimit = None,
    ) -> dict[str, Any]:
        """Search Python docs with automatic type inference.

        Returns entries as: name [type] -> document_path. Use fetch_python_doc
        with a path to read the page; do not use a generic web fetch.

        If a type filter matches nothing, the tool infers the best matching
        documentation types from the query and retries, so a type is never
        required. Common types: "Language Reference", "Built-in Functions",
        "Library", "Tutorial", "Python/C API".

        Related tools:
        - fetch_python_doc: Read a documentation page by path
        - suggest_python_doc_types: Preview type inference for a query
        """
        service = get_doc_service()
        version = version or service.config.default_version
        type_filter = normalize_input(type) or None

        try:
            index = await service.get_index(version)
            search_index = await service.get_search_index(version)
        except DocFetchError as exc:
            return build_fetch_error(exc, version=version)

        outcome = service.search_with_fallback(index, search_index, query, type_filter, limit)

        summary: dict[str, Any] = {
            "count": len(outcome.results),
            "query": query,
            "version": version,
            "type": type_filter,
            "fallback_used": outcome.fallback_used,
            "message": format_search_results(
                outcome.results,
                query,
                version,
                outcome.fallback_used,
                outcome.type_inference,
            ),
        }
        if outcome.type_inference is not None:
            summary["type_inference"] = outcome.type_inference.model_dump()
        if not outcome.results:
            summary["hints"] = [
                "Try a shorter query (for example: a module name such as 'asyncio').",
                "Omit the type filter to search every documentation type.",
            ]
            summary["available_types"] = get_available_types(search_index)[:MAX_TYPE_HINTS]

        payload = build_docs_data(
            source="index",
            action="search",
            entries=[entry.model_dump() for entry in outcome.results],
            summary={k: v for k, v in summary.items() if v is not None},
        )
        return build_ok(payload)
