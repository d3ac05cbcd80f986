"""codeseek - offline lexical code search for local workspaces."""

from codeseek.config import SearchConfig
from codeseek.engine import SemanticSearchEngine
from codeseek.errors import CodeSeekError, IndexingInProgressError, IndexUnavailableError
from codeseek.models import IndexStats, IndexStatus, SearchHit, SearchRequest, SearchResponse

__version__ = "0.1.0"

__all__ = [
    "CodeSeekError",
    "IndexStats",
    "IndexStatus",
    "IndexUnavailableError",
    "IndexingInProgressError",
    "SearchConfig",
    "SearchHit",
    "SearchRequest",
    "SearchResponse",
    "SemanticSearchEngine",
]
