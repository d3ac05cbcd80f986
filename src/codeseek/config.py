"""Engine configuration with environment overrides."""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path

INDEX_VERSION = 2
VECTOR_DIMENSION = 384
MAX_FILE_BYTES = 512 * 1024
MAX_CHUNK_CHARS = 1800
CHUNK_LINE_OVERLAP = 4
DEFAULT_LIMIT = 8
MAX_LIMIT = 20
DEFAULT_MIN_SCORE = 0.2
AUTO_REFRESH_INTERVAL = 2.5

EXCLUDED_DIR_NAMES = frozenset(
    {
        ".git",
        "node_modules",
        "dist",
        "build",
        "coverage",
        "target",
        "vendor",
        "__pycache__",
        ".next",
        ".nuxt",
        ".turbo",
        ".cache",
        ".idea",
        ".vscode",
    }
)

INCLUDED_EXTENSIONS = frozenset(
    {
        ".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs", ".json", ".md", ".mdx",
        ".py", ".rs", ".go", ".java", ".rb", ".php", ".c", ".h", ".cc",
        ".cpp", ".cxx", ".hpp", ".css", ".scss", ".html", ".xml", ".yaml",
        ".yml", ".toml", ".sh", ".sql",
    }
)


def default_cache_dir() -> Path:
    """Per-user directory holding one index document per workspace."""
    return Path.home() / ".codeseek" / "semantic"


@dataclass(frozen=True)
class SearchConfig:
    """Tunables for indexing and search."""

    cache_dir: Path = field(default_factory=default_cache_dir)
    dimension: int = VECTOR_DIMENSION
    max_file_bytes: int = MAX_FILE_BYTES
    max_chunk_chars: int = MAX_CHUNK_CHARS
    chunk_line_overlap: int = CHUNK_LINE_OVERLAP
    default_limit: int = DEFAULT_LIMIT
    max_limit: int = MAX_LIMIT
    default_min_score: float = DEFAULT_MIN_SCORE
    refresh_interval: float = AUTO_REFRESH_INTERVAL
    rg_path: str = "rg"
    rg_timeout: float = 10.0

    @classmethod
    def from_env(cls, **overrides) -> "SearchConfig":
        """Build a config from defaults, CODESEEK_* variables, then overrides.

        Raises:
            ValueError: If a numeric variable cannot be parsed
        """
        values: dict = {}
        env = os.environ

        if env.get("CODESEEK_CACHE_DIR"):
            values["cache_dir"] = Path(env["CODESEEK_CACHE_DIR"]).expanduser()
        if env.get("CODESEEK_RG_PATH"):
            values["rg_path"] = env["CODESEEK_RG_PATH"]
        for key, name in (
            ("refresh_interval", "CODESEEK_REFRESH_INTERVAL"),
            ("rg_timeout", "CODESEEK_RG_TIMEOUT"),
        ):
            raw = env.get(name)
            if raw:
                try:
                    values[key] = float(raw)
                except ValueError as e:
                    raise ValueError(f"{name} must be a number, got {raw!r}") from e

        values.update({k: v for k, v in overrides.items() if v is not None})
        if "cache_dir" in values:
            values["cache_dir"] = Path(values["cache_dir"]).expanduser()
        return replace(cls(), **values)
