from __future__ import annotations

import os
from pathlib import Path

import pytest

from codeseek.collectors import WorkspaceCollector


def _write(path: Path, content: str = "value = 1\n") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_collect_prunes_excluded_dirs_and_filters_extensions(tmp_path: Path) -> None:
    _write(tmp_path / "src" / "main.py")
    _write(tmp_path / "src" / "util.ts")
    _write(tmp_path / "README.md")
    _write(tmp_path / "image.png")
    _write(tmp_path / "node_modules" / "lib" / "index.js")
    _write(tmp_path / ".git" / "config.toml")
    _write(tmp_path / "pkg" / "__pycache__" / "mod.py")
    _write(tmp_path / "pkg" / "build" / "out.js")

    files = WorkspaceCollector().collect(tmp_path)

    assert [f.relative_path for f in files] == ["README.md", "src/main.py", "src/util.ts"]


def test_collect_is_sorted_and_carries_fingerprints(tmp_path: Path) -> None:
    for name in ["zeta.py", "alpha/beta.py", "alpha.py", "Mid.go"]:
        _write(tmp_path / name)

    files = WorkspaceCollector().collect(tmp_path)
    paths = [f.relative_path for f in files]

    assert paths == sorted(paths)
    for meta in files:
        st = os.stat(meta.absolute_path)
        assert meta.size == st.st_size
        assert meta.mtime_ns == st.st_mtime_ns


def test_collect_enforces_size_ceiling(tmp_path: Path) -> None:
    _write(tmp_path / "small.py", "a" * 100)
    _write(tmp_path / "exact.py", "a" * 512 * 1024)
    _write(tmp_path / "large.py", "a" * (512 * 1024 + 1))

    files = WorkspaceCollector().collect(tmp_path)

    assert [f.relative_path for f in files] == ["exact.py", "small.py"]


def test_collect_extension_match_is_case_insensitive(tmp_path: Path) -> None:
    _write(tmp_path / "Upper.PY")

    files = WorkspaceCollector().collect(tmp_path)

    assert [f.relative_path for f in files] == ["Upper.PY"]


def test_collect_skips_symlinked_files(tmp_path: Path) -> None:
    _write(tmp_path / "real.py")
    try:
        os.symlink(tmp_path / "real.py", tmp_path / "link.py")
    except (OSError, NotImplementedError):
        pytest.skip("symlinks not supported")

    files = WorkspaceCollector().collect(tmp_path)

    assert [f.relative_path for f in files] == ["real.py"]


def test_collect_missing_workspace_is_empty(tmp_path: Path) -> None:
    assert WorkspaceCollector().collect(tmp_path / "nope") == []
