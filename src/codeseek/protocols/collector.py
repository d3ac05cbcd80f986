"""Protocol for workspace file enumeration."""

from pathlib import Path
from typing import Protocol, runtime_checkable

from codeseek.models import FileMeta


@runtime_checkable
class FileCollector(Protocol):
    """Enumerates the files of a workspace eligible for indexing.

    Implementations must return entries sorted by relative path so that
    rebuilds are reproducible.
    """

    def collect(self, workspace: Path) -> list[FileMeta]:
        ...
