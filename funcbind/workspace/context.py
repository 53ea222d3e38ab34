# funcbind/workspace/context.py
"""
Access to the open workspace: root folders, file search and file watching.
"""
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, List, Optional, Union

from funcbind.constants import DEFAULT_EXCLUDE_DIRS, DEFAULT_POLL_INTERVAL
from funcbind.workspace.watcher import FileSystemWatcher, iter_matching_files


class WorkspaceContext(ABC):
    """Workspace operations the generation flow depends on."""

    @property
    @abstractmethod
    def folders(self) -> List[Path]:
        """Open root folders, in order."""

    @abstractmethod
    async def find_files(self, pattern: str) -> List[Path]:
        """Find files matching a glob across all root folders."""

    @abstractmethod
    def create_file_watcher(self, root: Path, pattern: str) -> FileSystemWatcher:
        """Create an unstarted watcher for files created under ``root``."""


class LocalWorkspace(WorkspaceContext):
    """Workspace backed by directories on the local file system."""

    def __init__(
        self,
        folders: Iterable[Union[str, Path]],
        exclude_dirs: Optional[Iterable[str]] = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL
    ):
        self._folders = [Path(folder).resolve() for folder in folders]
        self._exclude_dirs = list(DEFAULT_EXCLUDE_DIRS if exclude_dirs is None else exclude_dirs)
        self._poll_interval = poll_interval

    @property
    def folders(self) -> List[Path]:
        return [folder for folder in self._folders if folder.is_dir()]

    async def find_files(self, pattern: str) -> List[Path]:
        matches = []
        for folder in self.folders:
            matches.extend(iter_matching_files(folder, pattern, self._exclude_dirs))
        return matches

    def create_file_watcher(self, root: Path, pattern: str) -> FileSystemWatcher:
        return FileSystemWatcher(
            root,
            pattern,
            poll_interval=self._poll_interval,
            exclude_dirs=self._exclude_dirs
        )
