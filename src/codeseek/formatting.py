"""Plain-text rendering of engine results."""

from datetime import datetime

from codeseek.models import IndexStats, IndexStatus, SearchResponse

MAX_SNIPPET_PREVIEW = 200


def format_status(status: IndexStatus) -> str:
    """Render an index status as text."""
    lines = [
        f"Workspace: {status.workspace_path}",
        f"  Index: {status.index_path}",
        f"  Indexed: {'yes' if status.exists else 'no'}",
        f"  Indexing now: {'yes' if status.indexing else 'no'}",
    ]
    if status.exists:
        indexed_at = datetime.fromtimestamp(status.indexed_at).isoformat(timespec="seconds")
        lines.append(f"  Files: {status.total_files}")
        lines.append(f"  Chunks: {status.total_chunks}")
        lines.append(f"  Indexed at: {indexed_at}")
    if status.last_error:
        lines.append(f"  Last error: {status.last_error}")
    return "\n".join(lines)


def format_stats(stats: IndexStats) -> str:
    """Render build statistics as text."""
    return (
        f"Indexed {stats.total_files} files, {stats.total_chunks} chunks "
        f"in {stats.duration_ms} ms\n"
        f"  Reused: {stats.reused_files}\n"
        f"  Updated: {stats.updated_files}\n"
        f"  Removed: {stats.removed_files}\n"
        f"  Index: {stats.index_path}"
    )


def format_hits(response: SearchResponse) -> str:
    """Render ranked hits as a numbered list with snippet previews."""
    if not response.hits:
        return f"No results found for: {response.query}"

    lines = []
    for i, hit in enumerate(response.hits, 1):
        # Truncate long snippets
        text = hit.snippet[:MAX_SNIPPET_PREVIEW].replace("\n", " ")
        if len(hit.snippet) > MAX_SNIPPET_PREVIEW:
            text += "..."

        lines.append(
            f"{i}. [{hit.score:.3f}] [{hit.source}] {hit.path}:{hit.start_line}-{hit.end_line}"
        )
        lines.append(f"   {text}")
        lines.append("")

    return "\n".join(lines)
