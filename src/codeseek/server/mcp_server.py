"""FastMCP server implementation for codeseek."""

from mcp.server.fastmcp import FastMCP

from codeseek.engine import SemanticSearchEngine
from codeseek.formatting import format_hits, format_stats, format_status
from codeseek.models import SearchRequest


def create_mcp_server(engine: SemanticSearchEngine | None = None) -> FastMCP:
    """Create an MCP server backed by a search engine.

    One engine serves every workspace the client asks about; indexes are
    built on first use and refreshed when files change.

    Args:
        engine: Engine to serve (a default-configured one if omitted)

    Returns:
        Configured FastMCP server instance
    """
    mcp = FastMCP(
        name="codeseek",
    )
    engine = engine or SemanticSearchEngine()

    @mcp.tool()
    async def index_status(workspace_path: str) -> str:
        """Show whether a workspace is indexed.

        Args:
            workspace_path: Absolute path to the workspace root

        Returns:
            Index location, file and chunk counts, and the last build error
        """
        return format_status(await engine.get_status(workspace_path))

    @mcp.tool()
    async def index_workspace(workspace_path: str) -> str:
        """Build or refresh the search index of a workspace.

        Unchanged files are reused from the previous index.

        Args:
            workspace_path: Absolute path to the workspace root

        Returns:
            Build statistics
        """
        return format_stats(await engine.index_workspace(workspace_path))

    @mcp.tool()
    async def search(
        workspace_path: str,
        query: str,
        limit: int = 8,
        min_score: float = 0.2,
        mode: str = "smart",
    ) -> str:
        """Search code in a workspace.

        "semantic" mode ranks chunks by token similarity; "smart" mode also
        merges exact line matches from ripgrep.

        Args:
            workspace_path: Absolute path to the workspace root
            query: Identifiers or a short description of what you're looking for
            limit: Maximum number of results (1-20, default: 8)
            min_score: Minimum similarity for semantic results (default: 0.2)
            mode: "smart" (default) or "semantic"

        Returns:
            Ranked list of locations with scores and snippets
        """
        response = await engine.search(
            SearchRequest(
                workspace_path=workspace_path,
                query=query,
                limit=limit,
                min_score=min_score,
                mode=mode,  # type: ignore[arg-type]
            )
        )
        return format_hits(response)

    return mcp
