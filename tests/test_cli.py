"""
Tests for the command-line interface.
"""
import os
from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from funcbind import __version__
from funcbind.cli import app
from funcbind.config import AppConfig
from funcbind.errors import ProcessExecutionError
from funcbind.models import GenerationResult, ProjectContext
from tests.conftest import http_trigger_source

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_config():
    """Keep CLI runs away from the user's config and log directories."""
    with patch("funcbind.cli.setup_logging"), \
            patch("funcbind.cli.config_manager.load_config"), \
            patch("funcbind.cli.config_manager._config", AppConfig()):
        yield


def test_version():
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_status(functions_project):
    result = runner.invoke(app, ["status", "--workspace", str(functions_project)])

    assert result.exit_code == 0
    assert "FunctionApp.csproj" in result.stdout
    assert "host.json" in result.stdout


def test_status_without_project(tmp_path):
    result = runner.invoke(app, ["status", "--workspace", str(tmp_path)])

    assert result.exit_code == 1
    assert "No Azure Functions project found" in result.stdout


def test_rewrite(tmp_path):
    path = tmp_path / "HttpTrigger1.cs"
    path.write_text(http_trigger_source())

    result = runner.invoke(app, ["rewrite", str(path)])

    assert result.exit_code == 0
    assert path.read_text().startswith("using System.Collections.Generic;" + os.linesep)


def test_create_requires_connection_string(functions_project):
    result = runner.invoke(app, ["create", "--table", "Products", "--workspace", str(functions_project)])

    assert result.exit_code == 1
    assert "connection string is required" in result.stdout


def test_create_success(functions_project):
    generated = GenerationResult(
        function_name="GetProducts",
        function_file=functions_project / "GetProducts.cs",
        project=ProjectContext(
            project_file=functions_project / "FunctionApp.csproj",
            host_file_path=functions_project / "host.json",
            settings_file_path=functions_project / "local.settings.json"
        ),
        settings_updated=True
    )

    with patch("funcbind.cli.FunctionProjectService.create_function", new=AsyncMock(return_value=generated)) as create:
        result = runner.invoke(app, [
            "create",
            "--table", "Products",
            "--connection-string", "Server=db;",
            "--function-name", "GetProducts",
            "--workspace", str(functions_project),
        ])

    assert result.exit_code == 0
    assert "Function created" in result.stdout
    assert "dbo.Products" in result.stdout
    request = create.await_args.args[0]
    assert request.schema_name == "dbo"
    assert request.table == "Products"
    assert request.connection_string == "Server=db;"


def test_create_failure_exits_nonzero(functions_project):
    error = ProcessExecutionError("dotnet failed", "dotnet add package", 1)

    with patch("funcbind.cli.FunctionProjectService.create_function", new=AsyncMock(side_effect=error)):
        result = runner.invoke(app, [
            "create",
            "--table", "Products",
            "--connection-string", "Server=db;",
            "--function-name", "GetProducts",
            "--workspace", str(functions_project),
        ])

    assert result.exit_code == 1
    assert "dotnet failed" in result.stdout


def test_create_aborted_exits_nonzero(functions_project):
    with patch("funcbind.cli.FunctionProjectService.create_function", new=AsyncMock(return_value=None)):
        result = runner.invoke(app, [
            "create",
            "--table", "Products",
            "--connection-string", "Server=db;",
            "--workspace", str(functions_project),
        ])

    assert result.exit_code == 1


@pytest.mark.parametrize("option", ["--table", "--schema"])
def test_create_rejects_empty_names(functions_project, option):
    args = ["create", "--table", "Products", "--connection-string", "Server=db;",
            "--workspace", str(functions_project)]
    args += [option, ""]

    with patch("funcbind.cli.FunctionProjectService.create_function", new=AsyncMock()) as create:
        result = runner.invoke(app, args)

    assert result.exit_code == 1
    assert f"{option.lstrip('-')} must not be empty" in result.stdout
    assert result.exception is None or isinstance(result.exception, SystemExit)
    create.assert_not_awaited()
