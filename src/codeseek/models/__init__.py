"""Data models for codeseek."""

from codeseek.models.index import (
    Chunk,
    FileEntry,
    FileMeta,
    IndexStats,
    IndexStatus,
    WorkspaceIndex,
)
from codeseek.models.search import (
    HitSource,
    SearchHit,
    SearchMode,
    SearchRequest,
    SearchResponse,
)

__all__ = [
    "Chunk",
    "FileEntry",
    "FileMeta",
    "HitSource",
    "IndexStats",
    "IndexStatus",
    "SearchHit",
    "SearchMode",
    "SearchRequest",
    "SearchResponse",
    "WorkspaceIndex",
]
