"""
Tests for the file watcher and the one-shot new-file wait.
"""
import asyncio
import os
import pytest

from funcbind.errors import FileWatchTimeoutError
from funcbind.workspace.context import LocalWorkspace
from funcbind.workspace.watcher import (
    FileSystemWatcher, iter_matching_files, watch_for_new_file, await_new_file
)
from tests.conftest import FakeWorkspace


def test_iter_matching_files_skips_excluded(tmp_path):
    (tmp_path / "obj").mkdir()
    (tmp_path / "obj" / "Generated.cs").write_text("")
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "Function.cs").write_text("")
    (tmp_path / "Root.cs").write_text("")
    (tmp_path / "notes.txt").write_text("")

    matches = iter_matching_files(tmp_path, "**/*.cs", ["obj"])

    assert matches == [tmp_path / "Root.cs", tmp_path / "src" / "Function.cs"]


def test_iter_matching_files_never_enters_excluded(tmp_path, monkeypatch):
    nested = tmp_path / "node_modules" / "a" / "b"
    nested.mkdir(parents=True)
    (nested / "Vendored.cs").write_text("")
    (tmp_path / "Function.cs").write_text("")

    scanned = []
    real_scandir = os.scandir

    def recording_scandir(path="."):
        scanned.append(os.fspath(path))
        return real_scandir(path)

    monkeypatch.setattr(os, "scandir", recording_scandir)

    matches = iter_matching_files(tmp_path, "**/*.cs", ["node_modules"])

    assert matches == [tmp_path / "Function.cs"]
    assert scanned
    assert not [p for p in scanned if "node_modules" in p]


def test_iter_matching_files_matches_named_file_at_any_depth(tmp_path):
    (tmp_path / "host.json").write_text("{}")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "host.json").write_text("{}")
    (tmp_path / "sub" / "other.json").write_text("{}")

    matches = iter_matching_files(tmp_path, "**/host.json")

    assert matches == [tmp_path / "host.json", tmp_path / "sub" / "host.json"]


@pytest.mark.asyncio
async def test_watcher_reports_only_new_files(tmp_path):
    (tmp_path / "Existing.cs").write_text("")
    created = []

    watcher = FileSystemWatcher(tmp_path, "**/*.cs", poll_interval=0.01)
    watcher.on_did_create(created.append)
    watcher.start()
    try:
        (tmp_path / "New.cs").write_text("")
        (tmp_path / "ignored.txt").write_text("")
        for _ in range(100):
            if created:
                break
            await asyncio.sleep(0.01)
    finally:
        watcher.dispose()

    assert created == [tmp_path / "New.cs"]


@pytest.mark.asyncio
async def test_watcher_keeps_polling_after_scan_error(tmp_path):
    created = []
    watcher = FileSystemWatcher(tmp_path, "**/*.cs", poll_interval=0.01)
    watcher.on_did_create(created.append)
    watcher.start()

    real_scan = watcher._scan
    failures = []

    def flaky_scan():
        if not failures:
            failures.append(True)
            raise PermissionError("denied")
        return real_scan()

    watcher._scan = flaky_scan
    try:
        (tmp_path / "New.cs").write_text("")
        for _ in range(100):
            if created:
                break
            await asyncio.sleep(0.01)
    finally:
        watcher.dispose()

    assert failures
    assert created == [tmp_path / "New.cs"]


@pytest.mark.asyncio
async def test_dispose_is_idempotent(tmp_path):
    watcher = FileSystemWatcher(tmp_path, "**/*.cs", poll_interval=0.01)
    watcher.start()

    watcher.dispose()
    watcher.dispose()

    assert watcher.disposed
    await asyncio.sleep(0.02)
    assert watcher._task.done()


@pytest.mark.asyncio
async def test_watch_resolves_with_first_file_and_disposes_once(tmp_path):
    workspace = FakeWorkspace(folders=[tmp_path])

    pending = watch_for_new_file(workspace, tmp_path)
    watcher = workspace.watchers[0]
    assert watcher.started
    assert watcher.pattern == "**/*.cs"

    watcher.emit(tmp_path / "First.cs")
    watcher.emit(tmp_path / "Second.cs")

    assert await await_new_file(pending) == tmp_path / "First.cs"
    await asyncio.sleep(0)
    assert watcher.dispose_calls == 1
    # Events after the first match never reach the future
    assert pending.result() == tmp_path / "First.cs"


@pytest.mark.asyncio
async def test_watch_registered_before_trigger(tmp_path):
    """A file created right after registration is still observed."""
    workspace = LocalWorkspace([tmp_path], poll_interval=0.01)
    root = workspace.folders[0]

    pending = watch_for_new_file(workspace, root)
    (root / "Created.cs").write_text("")

    assert await await_new_file(pending, timeout=5) == root / "Created.cs"


@pytest.mark.asyncio
async def test_existing_files_do_not_resolve(tmp_path):
    (tmp_path / "Existing.cs").write_text("")
    workspace = LocalWorkspace([tmp_path], poll_interval=0.01)

    pending = watch_for_new_file(workspace, tmp_path)
    await asyncio.sleep(0.05)

    assert not pending.done()
    pending.cancel()
    await asyncio.sleep(0)


@pytest.mark.asyncio
async def test_timeout_disposes_watcher(tmp_path):
    workspace = FakeWorkspace(folders=[tmp_path])

    pending = watch_for_new_file(workspace, tmp_path)

    with pytest.raises(FileWatchTimeoutError):
        await await_new_file(pending, timeout=0.01)

    await asyncio.sleep(0)
    assert pending.cancelled()
    assert workspace.watchers[0].disposed


@pytest.mark.asyncio
async def test_cancel_disposes_watcher(tmp_path):
    workspace = FakeWorkspace(folders=[tmp_path])

    pending = watch_for_new_file(workspace, tmp_path)
    pending.cancel()
    await asyncio.sleep(0)

    assert workspace.watchers[0].disposed
