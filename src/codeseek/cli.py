"""CLI entry point for codeseek."""

import argparse
import asyncio
import json
import logging
import sys
from typing import Literal, cast

from codeseek.config import SearchConfig
from codeseek.engine import SemanticSearchEngine
from codeseek.errors import CodeSeekError
from codeseek.formatting import format_hits, format_stats, format_status
from codeseek.models import SearchRequest

logger = logging.getLogger(__name__)


def build_engine(cache_dir: str | None = None) -> SemanticSearchEngine:
    """Create an engine from environment configuration and CLI overrides."""
    return SemanticSearchEngine(SearchConfig.from_env(cache_dir=cache_dir))


def emit(data: dict, text: str, as_json: bool) -> None:
    if as_json:
        print(json.dumps(data, indent=2))
    else:
        print(text)


def index(engine: SemanticSearchEngine, workspace: str, as_json: bool = False) -> None:
    """Build or refresh the index of a workspace.

    Args:
        engine: Search engine to use
        workspace: Path to the workspace root
        as_json: Print machine-readable output
    """
    logger.info(f"Indexing {workspace}...")
    stats = asyncio.run(engine.index_workspace(workspace))
    emit(stats.to_dict(), format_stats(stats), as_json)


def search(
    engine: SemanticSearchEngine,
    workspace: str,
    query: str,
    limit: int | None = None,
    min_score: float | None = None,
    mode: str = "smart",
    as_json: bool = False,
) -> None:
    """Search a workspace, building its index first if needed."""
    request = SearchRequest(
        workspace_path=workspace,
        query=query,
        limit=limit,
        min_score=min_score,
        mode=cast(Literal["semantic", "smart"], mode),
    )
    response = asyncio.run(engine.search(request))
    if not as_json:
        refreshed = " (index refreshed)" if response.auto_refreshed else ""
        logger.info(f"{len(response.hits)} hits in {response.took_ms} ms{refreshed}")
    emit(response.to_dict(), format_hits(response), as_json)


def status(engine: SemanticSearchEngine, workspace: str, as_json: bool = False) -> None:
    """Show the index status of a workspace."""
    result = asyncio.run(engine.get_status(workspace))
    emit(result.to_dict(), format_status(result), as_json)


def serve(engine: SemanticSearchEngine, transport: str = "stdio") -> None:
    """Start the MCP server.

    Args:
        engine: Search engine to serve
        transport: Transport protocol (stdio or sse)
    """
    # Import here to avoid loading MCP unless needed
    from codeseek.server import create_mcp_server

    logger.info(f"Serving codeseek via {transport}")
    mcp = create_mcp_server(engine)
    mcp.run(transport=cast(Literal["stdio", "sse", "streamable-http"], transport))


def deck(engine: SemanticSearchEngine, workspace: str | None = None) -> None:
    """Launch the Search Deck TUI."""
    from codeseek.search_deck import main as search_deck_main

    search_deck_main(engine, workspace)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="codeseek",
        description="codeseek - offline code search for local workspaces",
    )
    parser.add_argument(
        "--cache-dir",
        default=None,
        help="Directory holding index files (default: ~/.codeseek/semantic)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print machine-readable JSON output",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # index command
    index_parser = subparsers.add_parser(
        "index",
        help="Build or refresh the index of a workspace",
    )
    index_parser.add_argument("workspace", help="Workspace root directory")

    # search command
    search_parser = subparsers.add_parser(
        "search",
        help="Search a workspace",
    )
    search_parser.add_argument("workspace", help="Workspace root directory")
    search_parser.add_argument("query", help="Search query")
    search_parser.add_argument(
        "-n",
        "--limit",
        type=int,
        default=None,
        help="Maximum number of hits (default: 8, max: 20)",
    )
    search_parser.add_argument(
        "--min-score",
        type=float,
        default=None,
        help="Minimum semantic score (default: 0.2)",
    )
    search_parser.add_argument(
        "--mode",
        choices=["smart", "semantic"],
        default="smart",
        help="smart merges ripgrep matches, semantic does not (default: smart)",
    )

    # status command
    status_parser = subparsers.add_parser(
        "status",
        help="Show index status of a workspace",
    )
    status_parser.add_argument("workspace", help="Workspace root directory")

    # serve command
    serve_parser = subparsers.add_parser(
        "serve",
        help="Start MCP server",
    )
    serve_parser.add_argument(
        "--transport",
        choices=["stdio", "sse"],
        default="stdio",
        help="Transport protocol (default: stdio)",
    )

    # deck command
    deck_parser = subparsers.add_parser(
        "deck",
        help="Launch Search Deck TUI for interactive searching",
    )
    deck_parser.add_argument("workspace", nargs="?", default=None, help="Initial workspace")

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
        # stdout carries results (and the MCP stdio transport)
        stream=sys.stderr,
    )

    try:
        engine = build_engine(args.cache_dir)

        if args.command == "index":
            index(engine, args.workspace, args.json)
        elif args.command == "search":
            search(
                engine,
                args.workspace,
                args.query,
                limit=args.limit,
                min_score=args.min_score,
                mode=args.mode,
                as_json=args.json,
            )
        elif args.command == "status":
            status(engine, args.workspace, args.json)
        elif args.command == "serve":
            serve(engine, args.transport)
        elif args.command == "deck":
            deck(engine, args.workspace)
    except (CodeSeekError, OSError, ValueError) as e:
        logger.error(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
