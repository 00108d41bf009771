"""pydocs-mcp: Python documentation lookup tools exposed over MCP."""

__version__ = "0.1.0"
