from __future__ import annotations

import asyncio
import dataclasses
import threading
from pathlib import Path
from typing import Optional

import pytest

from codeseek.collectors import WorkspaceCollector
from codeseek.config import SearchConfig
from codeseek.engine import SemanticSearchEngine
from codeseek.errors import IndexingInProgressError, IndexUnavailableError
from codeseek.models import FileMeta, SearchRequest


class GatedCollector:
    """Workspace collector that can be paused or made to fail."""

    def __init__(self) -> None:
        self.inner = WorkspaceCollector()
        self.gate = threading.Event()
        self.gate.set()
        self.error: Optional[Exception] = None

    def collect(self, workspace: Path) -> list[FileMeta]:
        assert self.gate.wait(timeout=10)
        if self.error is not None:
            raise self.error
        return self.inner.collect(workspace)


@pytest.fixture
def collector() -> GatedCollector:
    return GatedCollector()


@pytest.fixture
def gated_engine(config: SearchConfig, collector: GatedCollector, substring_searcher) -> SemanticSearchEngine:
    return SemanticSearchEngine(config, collector=collector, literal_searcher=substring_searcher)


def _semantic(workspace: Path, query: str) -> SearchRequest:
    return SearchRequest(workspace_path=str(workspace), query=query, mode="semantic")


@pytest.mark.asyncio
async def test_index_workspace_reports_stats(
    engine: SemanticSearchEngine, workspace: Path, config: SearchConfig
) -> None:
    stats = await engine.index_workspace(str(workspace))

    assert stats.workspace_path == str(workspace.resolve())
    assert stats.total_files == 3
    assert stats.total_chunks == 3
    assert (stats.reused_files, stats.updated_files, stats.removed_files) == (0, 3, 0)
    assert Path(stats.index_path).parent == config.cache_dir
    assert Path(stats.index_path).is_file()
    assert stats.duration_ms >= 0


@pytest.mark.asyncio
async def test_reindex_reuses_unchanged_files(
    engine: SemanticSearchEngine, workspace: Path, touch
) -> None:
    await engine.index_workspace(str(workspace))
    (workspace / "notes.md").write_text("Rain expected tomorrow.\n", encoding="utf-8")
    touch(workspace / "notes.md")
    (workspace / "a.ts").unlink()

    stats = await engine.index_workspace(str(workspace))

    assert (stats.reused_files, stats.updated_files, stats.removed_files) == (1, 1, 1)
    assert stats.total_files == 2


@pytest.mark.asyncio
async def test_status_before_and_after_indexing(
    engine: SemanticSearchEngine, workspace: Path
) -> None:
    before = await engine.get_status(str(workspace))

    assert before.exists is False
    assert before.indexing is False
    assert before.total_files is None
    assert before.index_path.endswith(".sqlite")
    assert "totalFiles" not in before.to_dict()

    stats = await engine.index_workspace(str(workspace))
    after = await engine.get_status(str(workspace))

    assert after.exists is True
    assert (after.total_files, after.total_chunks) == (3, 3)
    assert after.indexed_at == stats.indexed_at
    assert after.index_path == stats.index_path
    assert after.to_dict()["totalChunks"] == 3


@pytest.mark.asyncio
async def test_index_written_by_another_engine_is_picked_up(
    config: SearchConfig, workspace: Path, substring_searcher
) -> None:
    writer = SemanticSearchEngine(config, literal_searcher=substring_searcher)
    reader = SemanticSearchEngine(config, literal_searcher=substring_searcher)

    await writer.index_workspace(str(workspace))

    status = await reader.get_status(str(workspace))
    assert status.exists is True
    assert status.total_files == 3


@pytest.mark.asyncio
async def test_second_concurrent_rebuild_is_rejected(
    engine: SemanticSearchEngine, workspace: Path
) -> None:
    first = asyncio.create_task(engine.index_workspace(str(workspace)))
    await asyncio.sleep(0)

    assert engine.is_indexing(str(workspace))
    assert (await engine.get_status(str(workspace))).indexing is True
    with pytest.raises(IndexingInProgressError, match="already in progress"):
        await engine.index_workspace(str(workspace))

    stats = await first
    assert stats.total_files == 3
    assert not engine.is_indexing(str(workspace))


@pytest.mark.asyncio
async def test_first_search_waits_for_pending_build(
    gated_engine: SemanticSearchEngine, collector: GatedCollector, workspace: Path
) -> None:
    collector.gate.clear()
    build = asyncio.create_task(gated_engine.index_workspace(str(workspace)))
    await asyncio.sleep(0)
    search = asyncio.create_task(gated_engine.search(_semantic(workspace, "weather")))
    await asyncio.sleep(0)

    assert not search.done()
    collector.gate.set()

    await build
    response = await search
    assert response.from_index is True
    assert "notes.md" in {hit.path for hit in response.hits}


@pytest.mark.asyncio
async def test_search_during_rebuild_uses_previous_index(
    gated_engine: SemanticSearchEngine, collector: GatedCollector, workspace: Path
) -> None:
    await gated_engine.index_workspace(str(workspace))
    (workspace / "widget.ts").write_text("export const blueWidget = 1;\n", encoding="utf-8")

    collector.gate.clear()
    build = asyncio.create_task(gated_engine.index_workspace(str(workspace)))
    await asyncio.sleep(0)

    during = await gated_engine.search(_semantic(workspace, "blueWidget"))
    assert all(hit.path != "widget.ts" for hit in during.hits)
    assert during.auto_refreshed is False

    collector.gate.set()
    await build

    after = await gated_engine.search(_semantic(workspace, "blueWidget"))
    assert after.hits[0].path == "widget.ts"


@pytest.mark.asyncio
async def test_failed_rebuild_records_error_and_keeps_index(
    gated_engine: SemanticSearchEngine, collector: GatedCollector, workspace: Path
) -> None:
    await gated_engine.index_workspace(str(workspace))
    collector.error = OSError("disk unplugged")

    with pytest.raises(OSError, match="disk unplugged"):
        await gated_engine.index_workspace(str(workspace))

    status = await gated_engine.get_status(str(workspace))
    assert status.exists is True
    assert status.total_files == 3
    assert status.indexing is False
    assert status.last_error == "disk unplugged"

    collector.error = None
    await gated_engine.index_workspace(str(workspace))
    assert (await gated_engine.get_status(str(workspace))).last_error is None


@pytest.mark.asyncio
async def test_waiter_sees_failed_first_build(
    gated_engine: SemanticSearchEngine, collector: GatedCollector, workspace: Path
) -> None:
    collector.gate.clear()
    collector.error = OSError("disk unplugged")
    build = asyncio.create_task(gated_engine.index_workspace(str(workspace)))
    await asyncio.sleep(0)
    search = asyncio.create_task(gated_engine.search(_semantic(workspace, "weather")))
    await asyncio.sleep(0)

    collector.gate.set()

    with pytest.raises(OSError):
        await build
    with pytest.raises(IndexUnavailableError, match="disk unplugged"):
        await search


@pytest.mark.asyncio
async def test_changed_workspace_is_refreshed_before_search(
    engine: SemanticSearchEngine, workspace: Path, touch
) -> None:
    await engine.index_workspace(str(workspace))
    unchanged = await engine.search(_semantic(workspace, "weather"))
    assert unchanged.auto_refreshed is False

    (workspace / "notes.md").write_text("Snowfall tonight in the mountains.\n", encoding="utf-8")
    touch(workspace / "notes.md")

    response = await engine.search(_semantic(workspace, "snowfall"))

    assert response.auto_refreshed is True
    assert "notes.md" in {hit.path for hit in response.hits}


@pytest.mark.asyncio
async def test_freshness_probe_is_throttled(
    config: SearchConfig, workspace: Path, substring_searcher
) -> None:
    engine = SemanticSearchEngine(
        dataclasses.replace(config, refresh_interval=3600.0),
        literal_searcher=substring_searcher,
    )
    await engine.index_workspace(str(workspace))

    (workspace / "notes.md").write_text("Snowfall tonight in the mountains.\n", encoding="utf-8")
    response = await engine.search(_semantic(workspace, "snowfall"))

    assert response.auto_refreshed is False
    assert all("Snowfall" not in hit.snippet for hit in response.hits)


@pytest.mark.asyncio
async def test_failing_probe_serves_last_index(
    gated_engine: SemanticSearchEngine, collector: GatedCollector, workspace: Path
) -> None:
    await gated_engine.index_workspace(str(workspace))
    collector.error = PermissionError("denied")

    response = await gated_engine.search(_semantic(workspace, "weather"))

    assert response.auto_refreshed is False
    assert "notes.md" in {hit.path for hit in response.hits}
    assert (await gated_engine.get_status(str(workspace))).last_error is None


@pytest.mark.asyncio
async def test_cancelled_rebuild_keeps_workspace_guarded(
    gated_engine: SemanticSearchEngine, collector: GatedCollector, workspace: Path
) -> None:
    collector.gate.clear()
    first = asyncio.create_task(gated_engine.index_workspace(str(workspace)))
    await asyncio.sleep(0)

    first.cancel()
    with pytest.raises(asyncio.CancelledError):
        await first

    assert gated_engine.is_indexing(str(workspace))
    with pytest.raises(IndexingInProgressError):
        await gated_engine.index_workspace(str(workspace))

    collector.gate.set()
    await asyncio.wait_for(gated_engine.wait_for_build(str(workspace)), timeout=10)

    status = await gated_engine.get_status(str(workspace))
    assert status.indexing is False
    assert status.exists is True
    assert status.total_files == 3
    assert status.last_error is None

    stats = await gated_engine.index_workspace(str(workspace))
    assert stats.reused_files == 3


@pytest.mark.asyncio
async def test_cancelled_rebuild_still_records_its_failure(
    gated_engine: SemanticSearchEngine, collector: GatedCollector, workspace: Path
) -> None:
    collector.gate.clear()
    collector.error = OSError("disk unplugged")
    first = asyncio.create_task(gated_engine.index_workspace(str(workspace)))
    await asyncio.sleep(0)

    first.cancel()
    with pytest.raises(asyncio.CancelledError):
        await first
    collector.gate.set()
    await asyncio.wait_for(gated_engine.wait_for_build(str(workspace)), timeout=10)

    status = await gated_engine.get_status(str(workspace))
    assert status.exists is False
    assert status.last_error == "disk unplugged"


@pytest.mark.asyncio
async def test_index_of_another_dimension_is_rebuilt(
    engine: SemanticSearchEngine, config: SearchConfig, workspace: Path, substring_searcher
) -> None:
    await engine.index_workspace(str(workspace))
    narrow = SemanticSearchEngine(
        dataclasses.replace(config, dimension=256), literal_searcher=substring_searcher
    )

    assert (await narrow.get_status(str(workspace))).exists is False

    response = await narrow.search(_semantic(workspace, "computeTotal"))

    assert {"a.ts", "b.ts"} <= {hit.path for hit in response.hits}
    rebuilt = narrow.store.load(str(workspace.resolve()))
    assert rebuilt is not None
    assert rebuilt.dimension == 256
    assert rebuilt.vectorizer == "hashing-fnv1a-256"


@pytest.mark.asyncio
async def test_index_of_another_vectorizer_is_ignored(
    engine: SemanticSearchEngine, workspace: Path
) -> None:
    await engine.index_workspace(str(workspace))
    stored = engine.store.load(str(workspace.resolve()))
    assert stored is not None
    engine.store.save(dataclasses.replace(stored, vectorizer="minhash-384"))

    assert (await engine.get_status(str(workspace))).exists is False

    stats = await engine.index_workspace(str(workspace))
    assert (stats.reused_files, stats.updated_files) == (0, 3)
    assert (await engine.get_status(str(workspace))).exists is True
