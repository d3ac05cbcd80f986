"""Path helpers: workspace identity, chunk identity and languages."""

import hashlib
import os
from pathlib import Path, PurePosixPath

_LANGUAGES = {
    ".ts": "typescript",
    ".tsx": "typescript",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".py": "python",
    ".rs": "rust",
    ".go": "go",
    ".java": "java",
    ".rb": "ruby",
    ".md": "markdown",
    ".mdx": "markdown",
    ".json": "json",
    ".html": "html",
    ".css": "css",
    ".scss": "css",
    ".sql": "sql",
    ".yaml": "yaml",
    ".yml": "yaml",
}


def resolve_workspace(workspace_path: str | Path) -> str:
    """Return the absolute, canonical form of a workspace root."""
    return str(Path(workspace_path).expanduser().resolve())


def to_posix(path: str) -> str:
    """Normalize a relative path to forward slashes without a leading ./"""
    normalized = PurePosixPath(path.replace(os.sep, "/").replace("\\", "/"))
    return str(normalized).removeprefix("./")


def language_from_path(path: str | Path) -> str:
    return _LANGUAGES.get(Path(path).suffix.lower(), "text")


def project_id(workspace_path: str) -> str:
    """Stable identifier of a workspace, used as the index filename."""
    normalized = Path(workspace_path).resolve().as_posix()
    return hashlib.sha1(normalized.encode("utf-8")).hexdigest()[:20]


def chunk_id(relative_path: str, start_line: int, end_line: int) -> str:
    """Content-independent chunk identity derived from path and line span."""
    key = f"{relative_path}:{start_line}:{end_line}"
    return hashlib.sha1(key.encode("utf-8")).hexdigest()[:16]
