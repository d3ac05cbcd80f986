"""Semantic search engine: index lifecycle, freshness and query execution."""

import asyncio
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from codeseek.chunkers import LineChunker
from codeseek.collectors import WorkspaceCollector
from codeseek.config import SearchConfig
from codeseek.embedders import HashingVectorizer
from codeseek.errors import IndexingInProgressError, IndexUnavailableError
from codeseek.models import (
    IndexStats,
    IndexStatus,
    SearchRequest,
    SearchResponse,
    WorkspaceIndex,
)
from codeseek.protocols import ChunkingStrategy, FileCollector, LiteralSearcher, Vectorizer
from codeseek.search import RipgrepSearcher, merge_smart_results, semantic_search
from codeseek.storage import BuildResult, IndexBuilder, IndexStore
from codeseek.utils import resolve_workspace, tokenize

logger = logging.getLogger(__name__)


@dataclass
class CachedIndex:
    """An index held in memory with the document version it was read from."""

    index_path: str
    mtime_ns: int
    index: WorkspaceIndex


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


class SemanticSearchEngine:
    """Builds, refreshes and queries workspace indexes.

    All per-workspace state lives on the instance and is only touched from
    the event loop that awaits its coroutines; blocking filesystem work
    runs in worker threads, one call at a time per rebuild.
    """

    def __init__(
        self,
        config: Optional[SearchConfig] = None,
        *,
        store: Optional[IndexStore] = None,
        collector: Optional[FileCollector] = None,
        chunker: Optional[ChunkingStrategy] = None,
        vectorizer: Optional[Vectorizer] = None,
        literal_searcher: Optional[LiteralSearcher] = None,
    ):
        self.config = config or SearchConfig.from_env()
        self.store = store or IndexStore(self.config.cache_dir)
        self.collector = collector or WorkspaceCollector(max_file_bytes=self.config.max_file_bytes)
        self.chunker = chunker or LineChunker(
            max_chunk_chars=self.config.max_chunk_chars,
            line_overlap=self.config.chunk_line_overlap,
        )
        self.vectorizer = vectorizer or HashingVectorizer(self.config.dimension)
        self.literal_searcher = literal_searcher or RipgrepSearcher(
            self.config.rg_path, timeout=self.config.rg_timeout
        )
        self.builder = IndexBuilder(self.collector, self.chunker, self.vectorizer)

        self._cache: dict[str, CachedIndex] = {}
        self._builds: dict[str, asyncio.Event] = {}
        self._last_error: dict[str, str] = {}
        self._last_probe: dict[str, float] = {}

    def is_indexing(self, workspace_path: str) -> bool:
        return resolve_workspace(workspace_path) in self._builds

    # Index lifecycle

    async def _read_index(self, workspace: str) -> Optional[WorkspaceIndex]:
        """Return the persisted index, served from memory while unchanged on disk."""
        mtime_ns = self.store.document_mtime(workspace)
        if mtime_ns is None:
            self._cache.pop(workspace, None)
            return None

        index_path = str(self.store.index_path(workspace))
        cached = self._cache.get(workspace)
        if cached and cached.index_path == index_path and cached.mtime_ns == mtime_ns:
            return cached.index

        index = await asyncio.to_thread(self.store.load, workspace)
        if index is None:
            return None
        if (
            index.dimension != self.vectorizer.dimension
            or index.vectorizer != self.vectorizer.model_name
        ):
            # Vectors from another scheme cannot be compared with query vectors
            logger.warning(
                f"Ignoring index of {workspace} built with {index.vectorizer or 'unknown'} "
                f"({index.dimension} dims), expected {self.vectorizer.model_name}"
            )
            self._cache.pop(workspace, None)
            return None

        self._cache[workspace] = CachedIndex(index_path, mtime_ns, index)
        return index

    async def get_status(self, workspace_path: str) -> IndexStatus:
        """Report whether a workspace is indexed and whether a build is running."""
        workspace = resolve_workspace(workspace_path)
        status = IndexStatus(
            workspace_path=workspace,
            index_path=str(self.store.index_path(workspace)),
            indexing=workspace in self._builds,
            last_error=self._last_error.get(workspace),
        )

        index = await self._read_index(workspace)
        if index is None:
            return status

        status.exists = True
        status.total_files = index.total_files
        status.total_chunks = index.total_chunks
        status.indexed_at = index.indexed_at
        return status

    async def index_workspace(self, workspace_path: str) -> IndexStats:
        """Rebuild the index of a workspace, reusing unchanged files.

        Raises:
            IndexingInProgressError: If a rebuild of this workspace is running
        """
        workspace = resolve_workspace(workspace_path)
        if workspace in self._builds:
            raise IndexingInProgressError(workspace)

        started = time.monotonic()
        done = asyncio.Event()
        self._builds[workspace] = done
        self._last_error.pop(workspace, None)

        try:
            previous = await self._read_index(workspace)
        except asyncio.CancelledError:
            self._release_build(workspace, done)
            raise
        except Exception as e:
            self._last_error[workspace] = str(e) or type(e).__name__
            self._release_build(workspace, done)
            raise

        # A worker thread cannot be interrupted, so the build outlives a
        # cancelled caller and keeps the workspace guarded until it ends.
        build = asyncio.ensure_future(
            asyncio.to_thread(self._build_and_save, workspace, previous)
        )
        build.add_done_callback(
            lambda future: self._finish_build(workspace, done, future)
        )
        result, index_path = await asyncio.shield(build)

        stats = IndexStats(
            workspace_path=workspace,
            index_path=str(index_path),
            total_files=result.index.total_files,
            total_chunks=result.index.total_chunks,
            indexed_at=result.index.indexed_at,
            duration_ms=_elapsed_ms(started),
            reused_files=result.reused_files,
            updated_files=result.updated_files,
            removed_files=result.removed_files,
        )
        logger.info(
            f"Indexed {workspace}: {stats.total_files} files, {stats.total_chunks} chunks "
            f"(reused {stats.reused_files}, updated {stats.updated_files}, "
            f"removed {stats.removed_files}) in {stats.duration_ms} ms"
        )
        return stats

    def _finish_build(
        self,
        workspace: str,
        done: asyncio.Event,
        build: "asyncio.Future[tuple[BuildResult, Path]]",
    ) -> None:
        """Record the outcome of a finished build and release its guard."""
        try:
            if build.cancelled():
                return
            error = build.exception()
            if error is not None:
                self._last_error[workspace] = str(error) or type(error).__name__
                return

            result, index_path = build.result()
            mtime_ns = self.store.document_mtime(workspace)
            if mtime_ns is not None:
                self._cache[workspace] = CachedIndex(str(index_path), mtime_ns, result.index)
            self._last_probe[workspace] = time.monotonic()
        finally:
            self._release_build(workspace, done)

    def _release_build(self, workspace: str, done: asyncio.Event) -> None:
        del self._builds[workspace]
        done.set()

    async def wait_for_build(self, workspace_path: str) -> None:
        """Wait until no rebuild of the workspace is running."""
        pending = self._builds.get(resolve_workspace(workspace_path))
        if pending is not None:
            await pending.wait()

    def _build_and_save(
        self, workspace: str, previous: Optional[WorkspaceIndex]
    ) -> tuple[BuildResult, Path]:
        result = self.builder.build(workspace, previous)
        return result, self.store.save(result.index)

    def _workspace_changed(self, workspace: str, index: WorkspaceIndex) -> bool:
        """Compare the files on disk with the fingerprints of an index."""
        files = self.collector.collect(Path(workspace))
        if len(files) != index.total_files:
            return True

        for meta in files:
            entry = index.files.get(meta.relative_path)
            if entry is None or not entry.matches(meta):
                return True
        return False

    def _probe_due(self, workspace: str) -> bool:
        last_probe = self._last_probe.get(workspace)
        if last_probe is None:
            return True
        return time.monotonic() - last_probe >= self.config.refresh_interval

    async def ensure_index(self, workspace_path: str) -> tuple[WorkspaceIndex, bool]:
        """Return a usable index, building or refreshing it when needed.

        Returns:
            The index and whether a freshness probe triggered a rebuild

        Raises:
            IndexUnavailableError: If no index exists after building
        """
        workspace = resolve_workspace(workspace_path)
        existing = await self._read_index(workspace)

        if existing is None:
            if workspace in self._builds:
                await self.wait_for_build(workspace)
            else:
                await self.index_workspace(workspace)

            built = await self._read_index(workspace)
            if built is None:
                reason = self._last_error.get(workspace) or "Semantic index unavailable after indexing."
                raise IndexUnavailableError(reason)
            return built, False

        if workspace not in self._builds and self._probe_due(workspace):
            self._last_probe[workspace] = time.monotonic()
            try:
                changed = await asyncio.to_thread(self._workspace_changed, workspace, existing)
                if changed:
                    logger.debug(f"Workspace changed since last index: {workspace}")
                    await self.index_workspace(workspace)
                    refreshed = await self._read_index(workspace)
                    if refreshed is not None:
                        return refreshed, True
            except Exception as e:
                # Freshness is best effort; keep serving the last good index
                logger.debug(f"Freshness check failed for {workspace}: {e}")

        return existing, False

    # Queries

    async def search(self, request: SearchRequest) -> SearchResponse:
        """Run a semantic or smart (semantic + ripgrep) query.

        Raises:
            ValueError: If the mode is not "semantic" or "smart"
        """
        started = time.monotonic()
        mode = request.mode or "smart"
        if mode not in ("semantic", "smart"):
            raise ValueError(f"Unknown search mode: {mode!r}")

        limit = max(1, min(self.config.max_limit, request.limit or self.config.default_limit))
        min_score = self.config.default_min_score if request.min_score is None else request.min_score
        min_score = min(0.95, max(0.01, min_score))
        workspace = resolve_workspace(request.workspace_path)
        query = (request.query or "").strip()

        if not query:
            return SearchResponse(
                query=query,
                mode=mode,
                took_ms=_elapsed_ms(started),
                from_index=False,
                auto_refreshed=False,
            )

        index, auto_refreshed = await self.ensure_index(workspace)

        hits = []
        query_tokens = tokenize(query)
        if query_tokens and index.chunks:
            query_vector = self.vectorizer.embed([query_tokens], index.idf)[0]
            hits = semantic_search(index, query_vector, limit, min_score)

        if mode == "smart":
            rg_hits = await self.literal_searcher.search(workspace, query, limit)
            hits = merge_smart_results(hits, rg_hits, limit)

        return SearchResponse(
            query=query,
            mode=mode,
            took_ms=_elapsed_ms(started),
            from_index=True,
            auto_refreshed=auto_refreshed,
            hits=hits,
        )
