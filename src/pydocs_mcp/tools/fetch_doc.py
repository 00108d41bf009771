"""Python docs fetch tool - paginated Markdown rendering of one page."""

from typing import Any

from fastmcp import FastMCP

from pydocs_mcp.contracts import build_docs_data, build_ok
from pydocs_mcp.docs.service import get_doc_service
from pydocs_mcp.docs.source import DocFetchError
from pydocs_mcp.formatting import build_fetch_error, format_document
from pydocs_mcp.utils import AnchorName, CharOffset, DocPath, DocVersion, WindowLimit, split_fragment


def register(mcp: FastMCP) -> None:
    """Register fetch_python_doc tool with the MCP server."""

    @mcp.tool()
    async def fetch_python_doc(
        path: DocPath,
        version: DocVersion = None,
        anchor: AnchorName = None,
        offset: CharOffset = 0,
        limit: WindowLimit = None,
    ) -> dict[str, Any]:
        """Fetch Python documentation content from DevDocs as Markdown.

        Use this for paths returned by python_docs. Long pages are paginated:
        pass the offset from the "More content available" hint to continue.
        A path fragment ("library/asyncio-task#asyncio.run") selects that
        section when the page has one; otherwise the page is read from the top.
        An explicit anchor that does not exist returns the available anchors.

        Related tools:
        - python_docs: Find document paths by keyword
        """
        service = get_doc_service()
        version = version or service.config.default_version
        window = limit or service.config.max_window
        page_path, fragment = split_fragment(path)

        try:
            doc = await service.get_doc(version, page_path)
        except DocFetchError as exc:
            return build_fetch_error(exc, path=page_path, version=version)

        # An index fragment with no matching section reads the page from the top
        if not anchor and fragment and doc.anchor_index.find(fragment) is not None:
            anchor = fragment

        content = format_document(
            doc.markdown,
            doc.path,
            version,
            doc.from_cache,
            offset,
            window,
            doc.anchor_index,
            anchor,
        )

        end = min(offset + window, len(doc.markdown))
        section = doc.anchor_index.find(anchor) if anchor else None
        returned = section.end_offset - section.start_offset if section else max(0, end - offset)
        payload = build_docs_data(
            source="document",
            action="fetch",
            entries=[
                {
                    "path": doc.path,
                    "version": version,
                    "from_cache": doc.from_cache,
                    "content": content,
                }
            ],
            summary={
                "total_length": doc.anchor_index.total_length,
                "offset": offset,
                "returned": returned,
                "next_offset": end if section is None and end < doc.anchor_index.total_length else None,
                "anchor": anchor,
                "anchors": [a.name for a in doc.anchor_index.anchors],
            },
        )
        return build_ok(payload)
