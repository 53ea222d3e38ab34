# funcbind/workspace/watcher.py
"""
Polling file watcher and the one-shot wait for a newly created file.

Registration is synchronous so a caller can start watching before it
triggers whatever creates the file; an event can then never be missed.
"""
import asyncio
import fnmatch
import os
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING, Callable, Iterable, List, Optional, Set, Union

from funcbind.constants import DEFAULT_POLL_INTERVAL, WATCHED_SOURCE_GLOB
from funcbind.errors import FileWatchTimeoutError
from funcbind.utils.logging import get_logger

if TYPE_CHECKING:
    from funcbind.workspace.context import WorkspaceContext

logger = get_logger(__name__)


def _matches(relative: PurePosixPath, pattern: str) -> bool:
    # "**/name" matches at any depth, including directly under root
    if pattern.startswith("**/") and "/" not in pattern[3:]:
        return fnmatch.fnmatchcase(relative.name, pattern[3:])
    return fnmatch.fnmatchcase(relative.as_posix(), pattern)


def iter_matching_files(
    root: Path,
    pattern: str,
    exclude_dirs: Iterable[str] = ()
) -> List[Path]:
    """Find files under ``root`` matching ``pattern``, never descending into excluded directories."""
    excluded = set(exclude_dirs)
    matches = []
    for current, dirs, files in os.walk(root):
        dirs[:] = [d for d in dirs if d not in excluded]
        current_path = Path(current)
        for name in files:
            path = current_path / name
            if _matches(PurePosixPath(path.relative_to(root).as_posix()), pattern):
                matches.append(path)
    return sorted(matches)


class FileSystemWatcher:
    """Reports files created under a root directory that match a glob."""

    def __init__(
        self,
        root: Union[str, Path],
        pattern: str,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        exclude_dirs: Iterable[str] = ()
    ):
        self.root = Path(root)
        self.pattern = pattern
        self._poll_interval = poll_interval
        self._exclude_dirs = list(exclude_dirs)
        self._callbacks: List[Callable[[Path], None]] = []
        self._known: Set[Path] = set()
        self._task: Optional[asyncio.Task] = None
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def on_did_create(self, callback: Callable[[Path], None]) -> None:
        self._callbacks.append(callback)

    def start(self) -> None:
        """Snapshot existing files and begin polling. Needs a running event loop."""
        self._known = set(self._scan())
        self._task = asyncio.get_running_loop().create_task(self._poll())
        logger.debug(f"Watching {self.root} for {self.pattern}")

    def dispose(self) -> None:
        """Stop watching. Safe to call more than once."""
        if self._disposed:
            return
        self._disposed = True
        self._callbacks.clear()
        if self._task and not self._task.done() and self._task is not asyncio.current_task():
            self._task.cancel()
        logger.debug(f"Stopped watching {self.root}")

    def _scan(self) -> List[Path]:
        return iter_matching_files(self.root, self.pattern, self._exclude_dirs)

    def _fire(self, path: Path) -> None:
        for callback in list(self._callbacks):
            callback(path)

    async def _poll(self) -> None:
        while not self._disposed:
            await asyncio.sleep(self._poll_interval)
            try:
                paths = await asyncio.to_thread(self._scan)
            except Exception as e:
                logger.exception(f"Error scanning {self.root}: {str(e)}")
                continue
            for path in paths:
                if self._disposed:
                    return
                if path not in self._known:
                    self._known.add(path)
                    self._fire(path)


def watch_for_new_file(
    workspace: "WorkspaceContext",
    root: Union[str, Path],
    pattern: str = WATCHED_SOURCE_GLOB
) -> "asyncio.Future[Path]":
    """
    Start a one-shot watch for the next file created under ``root``.

    The watcher is disposed as soon as the first match arrives, or when the
    returned future is cancelled. There is no timeout; see await_new_file.

    Args:
        workspace: WorkspaceContext that creates the watcher.
        root: Directory to watch.
        pattern: Glob the created file must match.

    Returns:
        A future resolved with the path of the first created file.
    """
    future: asyncio.Future = asyncio.get_running_loop().create_future()
    watcher = workspace.create_file_watcher(Path(root), pattern)

    def _on_create(path: Path) -> None:
        if not future.done():
            logger.info(f"New file detected: {path}")
            future.set_result(Path(path))

    watcher.on_did_create(_on_create)
    # Sole teardown point, whether the future resolves or is cancelled
    future.add_done_callback(lambda _: watcher.dispose())
    watcher.start()
    return future


async def await_new_file(
    pending: "asyncio.Future[Path]",
    timeout: Optional[float] = None
) -> Path:
    """
    Wait for a pending watch to resolve.

    With no timeout this waits indefinitely. With a timeout the watch is
    disposed and FileWatchTimeoutError is raised once it elapses.
    """
    if timeout is None:
        return await pending
    try:
        return await asyncio.wait_for(pending, timeout)
    except asyncio.TimeoutError as e:
        raise FileWatchTimeoutError(
            f"No new file appeared within {timeout} seconds"
        ) from e
