# tests/conftest.py
"""
Common test fixtures for funcbind.
"""
import json
import os
import pytest
import tempfile
import shutil
from pathlib import Path
from typing import Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

from funcbind.errors import ExtensionUnavailableError
from funcbind.toolchain.functions import ExtensionApiProvider, FunctionsApi
from funcbind.ui import Notifier
from funcbind.workspace.context import WorkspaceContext


HTTP_TRIGGER_TEMPLATE = """using System;
using System.IO;
using System.Threading.Tasks;
using Microsoft.AspNetCore.Mvc;
using Microsoft.Azure.WebJobs;
using Microsoft.Azure.WebJobs.Extensions.Http;
using Microsoft.AspNetCore.Http;
using Microsoft.Extensions.Logging;
using Newtonsoft.Json;

namespace Company.Function
{
    public static class __FUNCTION__
    {
        [FunctionName("__FUNCTION__")]
        public static async Task<IActionResult> Run(
            [HttpTrigger(AuthorizationLevel.Function, "get", "post", Route = null)] HttpRequest req,
            ILogger log)
        {
            log.LogInformation("C# HTTP trigger function processed a request.");

            string name = req.Query["name"];

            string requestBody = await new StreamReader(req.Body).ReadToEndAsync();
            dynamic data = JsonConvert.DeserializeObject(requestBody);
            name = name ?? data?.name;

            string responseMessage = string.IsNullOrEmpty(name)
                ? "This HTTP triggered function executed successfully. Pass a name in the query string or in the request body for a personalized response."
                : $"Hello, {name}. This HTTP triggered function executed successfully.";

            return new OkObjectResult(responseMessage);
        }
    }
}
"""


def http_trigger_source(function_name: str = "HttpTrigger1") -> str:
    """Source emitted by the HttpTrigger template for ``function_name``."""
    return HTTP_TRIGGER_TEMPLATE.replace("__FUNCTION__", function_name)


class FakeWatcher:
    """Watcher whose events are fired by the test."""

    def __init__(self, root: Path, pattern: str):
        self.root = root
        self.pattern = pattern
        self.started = False
        self.dispose_calls = 0
        self._callbacks = []

    @property
    def disposed(self) -> bool:
        return self.dispose_calls > 0

    def on_did_create(self, callback):
        self._callbacks.append(callback)

    def start(self):
        self.started = True

    def dispose(self):
        self.dispose_calls += 1

    def emit(self, path: Path):
        if not self.disposed:
            for callback in list(self._callbacks):
                callback(path)


class FakeWorkspace(WorkspaceContext):
    """In-memory workspace: folders and search results are set by the test."""

    def __init__(self, folders: Optional[List[Path]] = None, files: Optional[Dict[str, List[Path]]] = None):
        self._folders = list(folders or [])
        self.files = dict(files or {})
        self.searches: List[str] = []
        self.watchers: List[FakeWatcher] = []

    @property
    def folders(self) -> List[Path]:
        return list(self._folders)

    async def find_files(self, pattern: str) -> List[Path]:
        self.searches.append(pattern)
        return list(self.files.get(pattern, []))

    def create_file_watcher(self, root: Path, pattern: str) -> FakeWatcher:
        watcher = FakeWatcher(root, pattern)
        self.watchers.append(watcher)
        return watcher


class FakeFunctionsApi(FunctionsApi):
    """Writes the template file for the requested function and reports its creation."""

    def __init__(self, workspace: FakeWorkspace, target_dir: Path):
        self.workspace = workspace
        self.target_dir = target_dir
        self.requests = []

    async def create_function(self, request):
        self.requests.append(request)
        path = self.target_dir / f"{request.function_name}.cs"
        path.write_text(http_trigger_source(request.function_name), encoding="utf-8")
        for watcher in self.workspace.watchers:
            watcher.emit(path)


class FakeProvider(ExtensionApiProvider):
    def __init__(self, api: Optional[FunctionsApi]):
        self.api = api
        self.calls = 0

    async def get_functions_api(self):
        self.calls += 1
        if self.api is None:
            raise ExtensionUnavailableError("functions tooling not installed")
        return self.api


class RecordingNotifier(Notifier):
    """Collects user-facing messages."""

    def __init__(self):
        self.errors: List[str] = []

    def show_error(self, message: str) -> None:
        self.errors.append(message)


@pytest.fixture
def temp_project_dir():
    """Create a temporary directory for project testing."""
    temp_dir = tempfile.mkdtemp()
    old_dir = os.getcwd()
    os.chdir(temp_dir)
    yield Path(temp_dir).resolve()
    os.chdir(old_dir)
    shutil.rmtree(temp_dir)


@pytest.fixture
def functions_project(temp_project_dir):
    """Create a minimal Azure Functions C# project."""
    (temp_project_dir / "FunctionApp.csproj").write_text(
        '<Project Sdk="Microsoft.NET.Sdk">\n</Project>\n'
    )
    (temp_project_dir / "host.json").write_text('{\n  "version": "2.0"\n}')
    (temp_project_dir / "local.settings.json").write_text(json.dumps({
        "IsEncrypted": False,
        "Values": {
            "AzureWebJobsStorage": "UseDevelopmentStorage=true",
            "FUNCTIONS_WORKER_RUNTIME": "dotnet"
        }
    }, indent=2))
    return temp_project_dir


@pytest.fixture
def fake_workspace(functions_project):
    """FakeWorkspace pointing at the files of ``functions_project``."""
    return FakeWorkspace(
        folders=[functions_project],
        files={
            "**/*.csproj": [functions_project / "FunctionApp.csproj"],
            "**/host.json": [functions_project / "host.json"],
            "**/local.settings.json": [functions_project / "local.settings.json"],
        }
    )


@pytest.fixture
def mock_execution_engine():
    """Execution engine whose commands all succeed with empty output."""
    engine = MagicMock()
    engine.execute_command = AsyncMock(return_value="")
    return engine


@pytest.fixture
def notifier():
    return RecordingNotifier()
