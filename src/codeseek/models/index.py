"""Core data models for the workspace index."""

from dataclasses import dataclass, field
from functools import cached_property
from typing import Optional

import numpy as np


@dataclass(frozen=True)
class FileMeta:
    """Metadata for an eligible workspace file."""

    absolute_path: str
    relative_path: str
    size: int
    mtime_ns: int


@dataclass
class FileEntry:
    """Fingerprint of an indexed file and the ids of its chunks."""

    size: int
    mtime_ns: int
    chunk_ids: list[str] = field(default_factory=list)

    def matches(self, meta: FileMeta) -> bool:
        """Check whether the file on disk still has this fingerprint."""
        return self.size == meta.size and self.mtime_ns == meta.mtime_ns


@dataclass
class Chunk:
    """A contiguous line range of a file, the unit of retrieval."""

    id: str
    path: str
    start_line: int
    end_line: int
    language: str
    content: str
    tokens: list[str]
    vector: Optional[np.ndarray] = field(default=None, compare=False, repr=False)


@dataclass
class WorkspaceIndex:
    """A complete, versioned index document for one workspace."""

    version: int
    workspace_path: str
    indexed_at: int
    total_files: int
    total_chunks: int
    dimension: int
    idf: dict[str, float]
    files: dict[str, FileEntry]
    chunks: list[Chunk]
    vectorizer: str = ""

    @cached_property
    def matrix(self) -> np.ndarray:
        """Chunk vectors stacked in chunk order, shape (total_chunks, dimension)."""
        if not self.chunks:
            return np.zeros((0, self.dimension), dtype=np.float32)
        return np.vstack([chunk.vector for chunk in self.chunks])

    def chunk_map(self) -> dict[str, Chunk]:
        return {chunk.id: chunk for chunk in self.chunks}


@dataclass
class IndexStats:
    """Statistics of one index build."""

    workspace_path: str
    index_path: str
    total_files: int
    total_chunks: int
    indexed_at: int
    duration_ms: int
    reused_files: int
    updated_files: int
    removed_files: int

    def to_dict(self) -> dict:
        return {
            "workspacePath": self.workspace_path,
            "indexPath": self.index_path,
            "totalFiles": self.total_files,
            "totalChunks": self.total_chunks,
            "indexedAt": self.indexed_at,
            "durationMs": self.duration_ms,
            "reusedFiles": self.reused_files,
            "updatedFiles": self.updated_files,
            "removedFiles": self.removed_files,
        }


@dataclass
class IndexStatus:
    """Current state of a workspace index."""

    workspace_path: str
    index_path: str
    exists: bool = False
    indexing: bool = False
    total_files: Optional[int] = None
    total_chunks: Optional[int] = None
    indexed_at: Optional[int] = None
    last_error: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "workspacePath": self.workspace_path,
            "indexPath": self.index_path,
            "exists": self.exists,
            "indexing": self.indexing,
            "lastError": self.last_error,
        }
        if self.exists:
            data["totalFiles"] = self.total_files
            data["totalChunks"] = self.total_chunks
            data["indexedAt"] = self.indexed_at
        return data
