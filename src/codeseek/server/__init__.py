"""MCP server exposing the search engine."""

from codeseek.server.mcp_server import create_mcp_server

__all__ = ["create_mcp_server"]
