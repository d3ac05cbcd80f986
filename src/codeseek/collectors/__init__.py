"""Workspace file collectors."""

from codeseek.collectors.workspace_collector import WorkspaceCollector

__all__ = ["WorkspaceCollector"]
