# funcbind/toolchain/package_managers.py
"""
NuGet package reference management through the dotnet CLI.
"""
import shlex
from pathlib import Path
from typing import Union

from funcbind.constants import (
    SQL_BINDING_NUGET_SOURCE, SQL_BINDING_PACKAGE_NAME, SQL_BINDING_PACKAGE_VERSION
)
from funcbind.execution.engine import ExecutionEngine
from funcbind.utils.logging import get_logger

logger = get_logger(__name__)


class DotnetPackageManager:
    """
    Adds package references to .NET projects.
    """

    def __init__(
        self,
        execution_engine: ExecutionEngine,
        source: str = SQL_BINDING_NUGET_SOURCE,
        package_name: str = SQL_BINDING_PACKAGE_NAME,
        package_version: str = SQL_BINDING_PACKAGE_VERSION
    ):
        self._engine = execution_engine
        self._logger = logger
        self.source = source
        self.package_name = package_name
        self.package_version = package_version

    async def ensure_source(self, source_url: str) -> bool:
        """
        Register a NuGet source unless it is already listed.

        Returns:
            True if the source was added.
        """
        current_sources = await self._engine.execute_command("dotnet nuget list source")
        if source_url in current_sources:
            self._logger.debug(f"NuGet source already registered: {source_url}")
            return False

        self._logger.info(f"Registering NuGet source {source_url}")
        await self._engine.execute_command(f"dotnet nuget add source {shlex.quote(source_url)}")
        return True

    async def add_package(
        self,
        project_dir: Union[str, Path],
        name: str,
        version: str
    ) -> None:
        """Add a package reference to the project in ``project_dir``."""
        self._logger.info(f"Adding package {name} {version} in {project_dir}")
        await self._engine.execute_command(
            f"dotnet add package {shlex.quote(name)} --version {shlex.quote(version)}",
            cwd=project_dir
        )

    async def add_sql_binding_reference(self, project_file: Union[str, Path]) -> bool:
        """
        Make sure the SQL binding source is registered, then reference the
        package from the project that owns ``project_file``.

        Returns:
            True if the NuGet source had to be added.
        """
        source_added = await self.ensure_source(self.source)
        await self.add_package(Path(project_file).parent, self.package_name, self.package_version)
        return source_added
