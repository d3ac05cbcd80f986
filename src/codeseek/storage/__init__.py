"""Persistence and incremental building of workspace indexes."""

from codeseek.storage.builder import BuildResult, IndexBuilder
from codeseek.storage.store import IndexStore, InvalidIndexError

__all__ = ["BuildResult", "IndexBuilder", "IndexStore", "InvalidIndexError"]
