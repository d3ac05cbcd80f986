from __future__ import annotations

from pathlib import Path

import pytest

from codeseek.config import SearchConfig, default_cache_dir


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "CODESEEK_CACHE_DIR",
        "CODESEEK_REFRESH_INTERVAL",
        "CODESEEK_RG_PATH",
        "CODESEEK_RG_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    config = SearchConfig.from_env()

    assert config.cache_dir == default_cache_dir()
    assert config.dimension == 384
    assert config.max_file_bytes == 512 * 1024
    assert config.max_chunk_chars == 1800
    assert config.chunk_line_overlap == 4
    assert (config.default_limit, config.max_limit) == (8, 20)
    assert config.default_min_score == 0.2
    assert config.refresh_interval == 2.5
    assert config.rg_path == "rg"


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("CODESEEK_CACHE_DIR", str(tmp_path / "idx"))
    monkeypatch.setenv("CODESEEK_REFRESH_INTERVAL", "0.5")
    monkeypatch.setenv("CODESEEK_RG_PATH", "/opt/bin/rg")
    monkeypatch.setenv("CODESEEK_RG_TIMEOUT", "3")

    config = SearchConfig.from_env()

    assert config.cache_dir == tmp_path / "idx"
    assert config.refresh_interval == 0.5
    assert config.rg_path == "/opt/bin/rg"
    assert config.rg_timeout == 3.0


def test_explicit_overrides_win_and_none_is_ignored(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("CODESEEK_CACHE_DIR", str(tmp_path / "env"))

    assert SearchConfig.from_env(cache_dir=str(tmp_path / "cli")).cache_dir == tmp_path / "cli"
    assert SearchConfig.from_env(cache_dir=None).cache_dir == tmp_path / "env"


def test_unparseable_number_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CODESEEK_REFRESH_INTERVAL", "soon")

    with pytest.raises(ValueError, match="CODESEEK_REFRESH_INTERVAL"):
        SearchConfig.from_env()


def test_config_is_frozen() -> None:
    config = SearchConfig()

    with pytest.raises(AttributeError):
        config.dimension = 10  # type: ignore[misc]
