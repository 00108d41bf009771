"""pydocs-mcp Server - Python documentation lookup exposed over MCP."""

import argparse
import logging
import os

from fastmcp import FastMCP

from pydocs_mcp import __version__
from pydocs_mcp.lifecycle import CacheSweepMiddleware, sweep_cache
from pydocs_mcp.tools import fetch_doc, search_docs, suggest_types

mcp = FastMCP(
    "Python Docs MCP Server",
    instructions=(
        "Python documentation lookup server backed by DevDocs. "
        "Use python_docs to find documentation paths by keyword (type filters are "
        "self-correcting), fetch_python_doc to read a page as paginated Markdown, and "
        "suggest_python_doc_types to preview type inference for a query."
    ),
)

logger = logging.getLogger("pydocs-mcp.server")

mcp.add_middleware(CacheSweepMiddleware())

# Register documentation tools
search_docs.register(mcp)
fetch_doc.register(mcp)
suggest_types.register(mcp)


def main():
    """Entry point for the pydocs-mcp server."""
    parser = argparse.ArgumentParser(
        prog="pydocs-mcp",
        description="Python documentation lookup tools exposed over MCP",
    )
    parser.add_argument("--version", "-v", action="version", version=f"pydocs-mcp {__version__}")
    parser.add_argument(
        "--transport",
        choices=["stdio", "http", "sse"],
        default="stdio",
        help="Transport protocol (default: stdio)",
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind when using http/sse transport (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to bind when using http/sse transport (default: 8000)",
    )
    parser.add_argument(
        "--cache-dir",
        default=None,
        help="Cache directory (default: $PYDOCS_MCP_CACHE_DIR or ~/.cache/pydocs-mcp)",
    )
    args = parser.parse_args()

    if args.cache_dir:
        os.environ["PYDOCS_MCP_CACHE_DIR"] = args.cache_dir

    run_kwargs: dict = {"transport": args.transport, "show_banner": False}
    if args.transport in ("http", "sse"):
        run_kwargs["host"] = args.host
        run_kwargs["port"] = args.port

    # Suppress noisy uvicorn shutdown messages (e.g. "Cancel N running task(s)")
    logging.getLogger("uvicorn.error").setLevel(logging.CRITICAL)

    sweep_cache("startup")
    logger.info("Starting pydocs-mcp %s (transport=%s)", __version__, args.transport)

    try:
        mcp.run(**run_kwargs)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
