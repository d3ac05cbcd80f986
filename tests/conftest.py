from __future__ import annotations

import os
from pathlib import Path

import pytest

from codeseek.config import SearchConfig
from codeseek.engine import SemanticSearchEngine
from codeseek.models import SearchHit
from codeseek.search import parse_rg_output

A_TS = """export function computeTotal(values) {
  return values.reduce((acc, v) => acc + v, 0);
}
"""

B_TS = """import { computeTotal } from "./a";

// Shipping notes: parcels leave the warehouse every morning.
const x = [1, 2, 3];
console.log(computeTotal(x));
"""

NOTES_MD = "The weather today is sunny and warm.\n"


class SubstringSearcher:
    """Case-insensitive line search standing in for ripgrep."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, int]] = []

    async def search(self, workspace_path: str, query: str, limit: int) -> list[SearchHit]:
        self.calls.append((workspace_path, query, limit))
        root = Path(workspace_path)
        lines = []
        for path in sorted(root.rglob("*")):
            if not path.is_file():
                continue
            try:
                text = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError):
                continue
            for number, line in enumerate(text.splitlines(), 1):
                if query.lower() in line.lower():
                    lines.append(f"./{path.relative_to(root).as_posix()}:{number}:{line}")
        return parse_rg_output("\n".join(lines), workspace_path, limit)


def bump_mtime(path: Path, seconds: int = 10) -> None:
    """Move a file's mtime forward so fingerprint checks see a change."""
    st = path.stat()
    later = st.st_mtime_ns + seconds * 1_000_000_000
    os.utime(path, ns=(later, later))


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    root = tmp_path / "workspace"
    root.mkdir()
    (root / "a.ts").write_text(A_TS, encoding="utf-8")
    (root / "b.ts").write_text(B_TS, encoding="utf-8")
    (root / "notes.md").write_text(NOTES_MD, encoding="utf-8")
    return root


@pytest.fixture
def config(tmp_path: Path) -> SearchConfig:
    return SearchConfig(cache_dir=tmp_path / "cache", refresh_interval=0.0)


@pytest.fixture
def substring_searcher() -> SubstringSearcher:
    return SubstringSearcher()


@pytest.fixture
def engine(config: SearchConfig, substring_searcher: SubstringSearcher) -> SemanticSearchEngine:
    return SemanticSearchEngine(config, literal_searcher=substring_searcher)


@pytest.fixture
def touch():
    return bump_mtime
