"""Collector for local workspace folders."""

import logging
import os
import stat
from pathlib import Path

from codeseek.config import EXCLUDED_DIR_NAMES, INCLUDED_EXTENSIONS, MAX_FILE_BYTES
from codeseek.models import FileMeta

logger = logging.getLogger(__name__)


class WorkspaceCollector:
    """Collects indexable source files from a workspace folder."""

    def __init__(
        self,
        max_file_bytes: int = MAX_FILE_BYTES,
        excluded_dirs: frozenset[str] = EXCLUDED_DIR_NAMES,
        extensions: frozenset[str] = INCLUDED_EXTENSIONS,
    ):
        self.max_file_bytes = max_file_bytes
        self.excluded_dirs = excluded_dirs
        self.extensions = extensions

    def collect(self, workspace: Path) -> list[FileMeta]:
        """List eligible files below a workspace root.

        Args:
            workspace: Absolute path to the workspace root

        Returns:
            FileMeta entries sorted by relative path
        """
        workspace = Path(workspace)
        files: list[FileMeta] = []

        for root, dirnames, filenames in os.walk(workspace):
            # Prune in place so os.walk never descends into excluded trees
            dirnames[:] = [d for d in dirnames if d not in self.excluded_dirs]

            for filename in filenames:
                if Path(filename).suffix.lower() not in self.extensions:
                    continue

                full_path = Path(root) / filename
                try:
                    st = os.lstat(full_path)
                except OSError:
                    logger.debug(f"Skipping vanished file: {full_path}")
                    continue

                if not stat.S_ISREG(st.st_mode) or st.st_size > self.max_file_bytes:
                    continue

                files.append(
                    FileMeta(
                        absolute_path=str(full_path),
                        relative_path=full_path.relative_to(workspace).as_posix(),
                        size=st.st_size,
                        mtime_ns=st.st_mtime_ns,
                    )
                )

        files.sort(key=lambda meta: meta.relative_path)
        return files
