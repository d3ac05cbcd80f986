"""Incremental index builder."""

import dataclasses
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from codeseek.config import INDEX_VERSION
from codeseek.models import Chunk, FileEntry, FileMeta, WorkspaceIndex
from codeseek.protocols import ChunkingStrategy, FileCollector, Vectorizer
from codeseek.utils import read_text_file

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """A freshly built index plus how each file was handled."""

    index: WorkspaceIndex
    reused_files: int
    updated_files: int
    removed_files: int


class IndexBuilder:
    """Builds a new WorkspaceIndex, reusing unchanged files of a previous one.

    Files whose (size, mtime) fingerprint is unchanged keep their chunks
    verbatim; everything else is read and re-chunked. IDF and all vectors
    are then recomputed over the whole resulting corpus.
    """

    def __init__(
        self,
        collector: FileCollector,
        chunker: ChunkingStrategy,
        vectorizer: Vectorizer,
    ):
        self.collector = collector
        self.chunker = chunker
        self.vectorizer = vectorizer

    def build(self, workspace_path: str, previous: Optional[WorkspaceIndex] = None) -> BuildResult:
        """Build the index of a workspace.

        Args:
            workspace_path: Canonical absolute workspace root
            previous: Last persisted index, if any

        Returns:
            BuildResult with the new index and reuse counters
        """
        previous_files = previous.files if previous else {}
        previous_chunks = previous.chunk_map() if previous else {}

        files = self.collector.collect(Path(workspace_path))
        chunks: list[Chunk] = []
        next_files: dict[str, FileEntry] = {}
        reused_files = 0
        updated_files = 0

        for meta in files:
            entry = previous_files.get(meta.relative_path)
            if entry is not None and entry.matches(meta):
                reused = self._reuse(entry, previous_chunks)
                if reused is not None:
                    chunks.extend(reused)
                    next_files[meta.relative_path] = FileEntry(
                        size=meta.size,
                        mtime_ns=meta.mtime_ns,
                        chunk_ids=list(entry.chunk_ids),
                    )
                    reused_files += 1
                    continue

            updated_files += 1
            file_chunks = self._chunk_file(meta)
            chunks.extend(file_chunks)
            next_files[meta.relative_path] = FileEntry(
                size=meta.size,
                mtime_ns=meta.mtime_ns,
                chunk_ids=[chunk.id for chunk in file_chunks],
            )

        removed_files = sum(1 for path in previous_files if path not in next_files)

        token_lists = [chunk.tokens for chunk in chunks]
        idf = self.vectorizer.compute_idf(token_lists)
        vectors = self.vectorizer.embed(token_lists, idf)
        chunks = [
            dataclasses.replace(chunk, vector=vector)
            for chunk, vector in zip(chunks, vectors)
        ]

        index = WorkspaceIndex(
            version=INDEX_VERSION,
            workspace_path=workspace_path,
            indexed_at=int(time.time()),
            total_files=len(files),
            total_chunks=len(chunks),
            dimension=self.vectorizer.dimension,
            idf=idf,
            files=next_files,
            chunks=chunks,
            vectorizer=self.vectorizer.model_name,
        )
        return BuildResult(
            index=index,
            reused_files=reused_files,
            updated_files=updated_files,
            removed_files=removed_files,
        )

    @staticmethod
    def _reuse(entry: FileEntry, previous_chunks: dict[str, Chunk]) -> Optional[list[Chunk]]:
        """Previous chunks of a file, or None if any of them is missing."""
        reused = []
        for chunk_id in entry.chunk_ids:
            existing = previous_chunks.get(chunk_id)
            if existing is None or not isinstance(existing.tokens, list):
                return None
            reused.append(dataclasses.replace(existing, tokens=list(existing.tokens)))
        return reused

    def _chunk_file(self, meta: FileMeta) -> list[Chunk]:
        text = read_text_file(meta.absolute_path)
        if text is None:
            logger.debug(f"Skipping unreadable or binary file: {meta.relative_path}")
            return []
        return self.chunker.chunk(text, meta.relative_path)
