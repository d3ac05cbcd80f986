"""Protocol for literal (grep-style) search collaborators."""

from typing import Protocol, runtime_checkable

from codeseek.models import SearchHit


@runtime_checkable
class LiteralSearcher(Protocol):
    """External line-matching search used by smart mode.

    Failures must not raise: a searcher that cannot run returns no hits.
    """

    async def search(self, workspace_path: str, query: str, limit: int) -> list[SearchHit]:
        """Return at most ``limit`` single-line hits for the query."""
        ...
