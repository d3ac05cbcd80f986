"""Exceptions raised by the search engine."""


class CodeSeekError(Exception):
    """Base class for codeseek errors."""


class IndexingInProgressError(CodeSeekError):
    """A rebuild was requested while another one is running for the workspace."""

    def __init__(self, workspace_path: str):
        self.workspace_path = workspace_path
        super().__init__(
            f"Semantic indexing already in progress for this workspace: {workspace_path}"
        )


class IndexUnavailableError(CodeSeekError):
    """No usable index exists after a build was expected to produce one."""
