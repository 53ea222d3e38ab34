# funcbind/workspace/__init__.py
"""
Workspace discovery and file watching.
"""
from .context import WorkspaceContext, LocalWorkspace
from .watcher import FileSystemWatcher, watch_for_new_file, await_new_file
from .project import is_project_open, resolve_project_context

__all__ = [
    'WorkspaceContext',
    'LocalWorkspace',
    'FileSystemWatcher',
    'watch_for_new_file',
    'await_new_file',
    'is_project_open',
    'resolve_project_context',
]
