"""Type suggestion tool - preview of the search fallback's type inference."""

from typing import Any

from fastmcp import FastMCP

from pydocs_mcp.contracts import build_docs_data, build_ok
from pydocs_mcp.docs.service import get_doc_service
from pydocs_mcp.docs.source import DocFetchError
from pydocs_mcp.formatting import build_fetch_error, format_type_suggestions
from pydocs_mcp.utils import DocsQuery, DocVersion


def register(mcp: FastMCP) -> None:
    """Register suggest_python_doc_types tool with the MCP server."""

    @mcp.tool()
    async def suggest_python_doc_types(
        query: DocsQuery,
        version: DocVersion = None,
    ) -> dict[str, Any]:
        """Preview which documentation types would be searched for a query.

        Optional debugging aid: python_docs already applies this inference
        when a type filter finds nothing. Use it to see why certain results
        were returned or to pick a type before searching.
        """
        service = get_doc_service()
        version = version or service.config.default_version

        try:
            search_index = await service.get_search_index(version)
        except DocFetchError as exc:
            return build_fetch_error(exc, version=version)

        inference = service.suggest_types(search_index, query)
        entries = [
            {"type": type_name, "tier": "inferred"} for type_name in inference.inferred_types
        ] + [
            {"type": type_name, "tier": "alternative"} for type_name in inference.alternative_types
        ]

        payload = build_docs_data(
            source="types",
            action="suggest",
            entries=entries,
            summary={
                "count": len(entries),
                "version": version,
                "confidence": inference.confidence,
                "matching_keywords": inference.matching_keywords,
                "message": format_type_suggestions(inference, version),
            },
        )
        return build_ok(payload)
