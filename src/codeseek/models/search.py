"""Search request and result models."""

from dataclasses import dataclass, field
from typing import Literal, Optional

SearchMode = Literal["semantic", "smart"]
HitSource = Literal["semantic", "rg", "hybrid"]


@dataclass(frozen=True)
class SearchRequest:
    """A query against one workspace."""

    workspace_path: str
    query: str
    limit: Optional[int] = None
    min_score: Optional[float] = None
    mode: SearchMode = "smart"


@dataclass
class SearchHit:
    """A ranked location in the workspace."""

    id: str
    source: HitSource
    score: float
    path: str
    absolute_path: str
    start_line: int
    end_line: int
    language: str
    snippet: str

    @property
    def location(self) -> tuple[str, int, int]:
        """Key used to fuse hits from different sources."""
        return (self.path, self.start_line, self.end_line)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "source": self.source,
            "score": self.score,
            "path": self.path,
            "absolutePath": self.absolute_path,
            "startLine": self.start_line,
            "endLine": self.end_line,
            "language": self.language,
            "snippet": self.snippet,
        }


@dataclass
class SearchResponse:
    """Ranked hits for a query plus timing information."""

    query: str
    mode: SearchMode
    took_ms: int
    from_index: bool
    auto_refreshed: bool
    hits: list[SearchHit] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "query": self.query,
            "mode": self.mode,
            "tookMs": self.took_ms,
            "fromIndex": self.from_index,
            "autoRefreshed": self.auto_refreshed,
            "hits": [hit.to_dict() for hit in self.hits],
        }
