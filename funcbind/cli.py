# funcbind/cli.py
"""
Command-line interface for funcbind.
"""
import asyncio
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from funcbind import __version__
from funcbind.config import config_manager
from funcbind.errors import FuncBindError
from funcbind.execution.engine import ExecutionEngine
from funcbind.generation.binding import SqlBindingInjector
from funcbind.generation.rewriter import rewrite_function_file
from funcbind.models import GenerationRequest
from funcbind.orchestrator import FunctionProjectService
from funcbind.toolchain.functions import CoreToolsProvider
from funcbind.toolchain.package_managers import DotnetPackageManager
from funcbind.ui import ConsoleNotifier, FunctionNamePrompt, FixedFunctionName
from funcbind.workspace.context import LocalWorkspace
from funcbind.workspace.project import resolve_project_context
from funcbind.utils.logging import setup_logging, get_logger

app = typer.Typer(help="funcbind: scaffold Azure Functions with SQL bindings")
logger = get_logger(__name__)
console = Console()


def version_callback(value: bool):
    """Display version information and exit."""
    if value:
        console.print(f"funcbind version: {__version__}")
        raise typer.Exit()


def _workspace(folders: Optional[List[Path]]) -> LocalWorkspace:
    settings = config_manager.config.workspace
    return LocalWorkspace(
        folders or [Path.cwd()],
        exclude_dirs=settings.exclude_dirs,
        poll_interval=settings.poll_interval
    )


def build_service(
    workspace: LocalWorkspace,
    function_name: Optional[str] = None
) -> FunctionProjectService:
    """Wire the generation flow to the local tooling."""
    config = config_manager.config
    engine = ExecutionEngine(max_buffer=config.execution.max_buffer)
    prompt = FixedFunctionName(function_name) if function_name else FunctionNamePrompt(console)

    return FunctionProjectService(
        workspace=workspace,
        extension_provider=CoreToolsProvider(workspace, engine, config.execution.func_executable),
        binding_service=SqlBindingInjector(),
        package_manager=DotnetPackageManager(
            engine,
            source=config.package.source,
            package_name=config.package.name,
            package_version=config.package.version
        ),
        prompt_function_name=prompt,
        notifier=ConsoleNotifier(console),
        language=config.function.language,
        template_id=config.function.template_id,
        default_function_name=config.function.default_name,
        watch_timeout=config.workspace.watch_timeout
    )


@app.callback()
def main(
    debug: bool = typer.Option(
        False, "--debug", "-d", help="Enable debug mode"
    ),
    version: bool = typer.Option(
        False, "--version", "-v", callback=version_callback, is_eager=True, help="Show version and exit"
    ),
):
    """funcbind: scaffold Azure Functions with SQL bindings"""
    config_manager.load_config()
    debug = debug or config_manager.config.debug
    config_manager.config.debug = debug
    setup_logging(debug=debug)


@app.command()
def create(
    table: str = typer.Option(..., "--table", "-t", help="Table to bind."),
    schema: str = typer.Option("dbo", "--schema", "-s", help="Schema of the table."),
    connection_string: Optional[str] = typer.Option(
        None, "--connection-string", "-c",
        help="SQL connection string. Defaults to SQL_CONNECTION_STRING."
    ),
    function_name: Optional[str] = typer.Option(
        None, "--function-name", "-n", help="Function name. Prompted for when omitted."
    ),
    workspace: Optional[List[Path]] = typer.Option(
        None, "--workspace", "-w", help="Workspace folder (repeatable). Defaults to the current directory."
    ),
):
    """Create an Azure Function with a SQL input binding."""
    connection_string = connection_string or config_manager.config.connection_string
    if not connection_string:
        console.print("[bold red]A connection string is required (--connection-string or SQL_CONNECTION_STRING).[/bold red]")
        raise typer.Exit(code=1)

    try:
        request = GenerationRequest(connection_string=connection_string, schema=schema, table=table)
    except ValidationError as e:
        fields = ", ".join(str(error["loc"][0]) for error in e.errors())
        console.print(f"[bold red]Invalid generation request: {fields} must not be empty.[/bold red]")
        raise typer.Exit(code=1)

    service = build_service(_workspace(workspace), function_name)

    try:
        result = asyncio.run(service.create_function(request))
    except FuncBindError as e:
        logger.error(f"Function creation failed: {str(e)}")
        console.print(Panel(str(e), title="Function creation failed", border_style="red", expand=False))
        raise typer.Exit(code=1)

    if result is None:
        raise typer.Exit(code=1)

    lines = [
        f"[bold]Function:[/bold] {result.function_name}",
        f"[bold]File:[/bold] {result.function_file}",
        f"[bold]Binding:[/bold] {request.object_name}",
        f"[bold]Settings:[/bold] {'connection string added' if result.settings_updated else 'connection string already present'}",
    ]
    console.print(Panel("\n".join(lines), title="Function created", border_style="green", expand=False))


@app.command()
def status(
    workspace: Optional[List[Path]] = typer.Option(
        None, "--workspace", "-w", help="Workspace folder (repeatable). Defaults to the current directory."
    ),
):
    """Show the Azure Functions project found in the workspace."""
    project = asyncio.run(resolve_project_context(_workspace(workspace)))
    if project is None:
        console.print("[yellow]No Azure Functions project found.[/yellow]")
        raise typer.Exit(code=1)

    table = Table(title="Azure Functions project")
    table.add_column("Item", style="bold")
    table.add_column("Path")
    table.add_row("Project directory", str(project.project_file_dir))
    table.add_row("Project file", str(project.project_file))
    table.add_row("Host file", str(project.host_file_path))
    table.add_row("Settings file", str(project.settings_file_path) if project.settings_file_path else "[red]missing[/red]")
    console.print(table)


@app.command()
def rewrite(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Generated function file."),
):
    """Replace the HttpTrigger template body with the SQL binding result."""
    try:
        rewrite_function_file(file)
    except OSError as e:
        console.print(f"[bold red]Could not rewrite {file}: {e}[/bold red]")
        raise typer.Exit(code=1)
    console.print(f"[green]Rewrote {file}[/green]")
