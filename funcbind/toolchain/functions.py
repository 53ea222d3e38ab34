# funcbind/toolchain/functions.py
"""
Azure Functions scaffolding.

The generation flow only needs ``create_function``; where it comes from is
decided by an ExtensionApiProvider so tests can substitute their own.
"""
import shlex
import shutil
from abc import ABC, abstractmethod

from funcbind.constants import FUNC_EXECUTABLE
from funcbind.errors import ExtensionUnavailableError, ProjectNotOpenError
from funcbind.execution.engine import ExecutionEngine
from funcbind.models import FunctionCreationRequest
from funcbind.workspace.context import WorkspaceContext
from funcbind.workspace.project import get_project_file
from funcbind.utils.logging import get_logger

logger = get_logger(__name__)


class FunctionsApi(ABC):
    """Creates new functions inside the open project."""

    @abstractmethod
    async def create_function(self, request: FunctionCreationRequest) -> None:
        ...


class ExtensionApiProvider(ABC):
    """Resolves the functions tooling."""

    @abstractmethod
    async def get_functions_api(self) -> FunctionsApi:
        """
        Return the functions API.

        Raises:
            ExtensionUnavailableError: If the tooling is not installed.
        """


class CoreToolsApi(FunctionsApi):
    """Creates functions with ``func new`` from Azure Functions Core Tools."""

    def __init__(
        self,
        workspace: WorkspaceContext,
        execution_engine: ExecutionEngine,
        executable: str = FUNC_EXECUTABLE
    ):
        self._workspace = workspace
        self._engine = execution_engine
        self._executable = executable

    async def create_function(self, request: FunctionCreationRequest) -> None:
        project_file = await get_project_file(self._workspace)
        if project_file is None:
            raise ProjectNotOpenError("No Azure Functions project file found in the workspace")

        command = " ".join([
            shlex.quote(self._executable),
            "new",
            "--language", shlex.quote(request.language),
            "--template", shlex.quote(request.template_id),
            "--name", shlex.quote(request.function_name),
        ])
        logger.info(f"Creating function {request.function_name} from template {request.template_id}")
        await self._engine.execute_command(command, cwd=project_file.parent)


class CoreToolsProvider(ExtensionApiProvider):
    """Provides CoreToolsApi when the ``func`` executable is on PATH."""

    def __init__(
        self,
        workspace: WorkspaceContext,
        execution_engine: ExecutionEngine,
        executable: str = FUNC_EXECUTABLE
    ):
        self._workspace = workspace
        self._engine = execution_engine
        self._executable = executable

    async def get_functions_api(self) -> FunctionsApi:
        resolved = shutil.which(self._executable)
        if resolved is None:
            raise ExtensionUnavailableError(
                f"Azure Functions Core Tools executable '{self._executable}' not found on PATH"
            )
        return CoreToolsApi(self._workspace, self._engine, resolved)
