# funcbind/orchestrator.py
"""
Orchestrates creating an Azure Function with a SQL input binding.

Steps, in order: resolve the functions tooling, check that a project is
open, start watching for the generated file, ask for the function name,
scaffold the function, reference the SQL binding package, store the
connection string, wait for the generated file, inject the binding and
rewrite the generated body.

Nothing is rolled back when a later step fails: a package reference or
setting added earlier stays in place.
"""
from typing import Awaitable, Callable, Optional

from funcbind.constants import (
    DEFAULT_FUNCTION_LANGUAGE, DEFAULT_FUNCTION_TEMPLATE, DEFAULT_FUNCTION_NAME,
    SQL_CONNECTION_STRING_SETTING, WATCHED_SOURCE_GLOB,
    FUNCTIONS_TOOLING_NOT_INSTALLED, FUNCTIONS_PROJECT_MUST_BE_OPENED
)
from funcbind.errors import (
    ExtensionUnavailableError, MalformedSettingsError, ProjectNotOpenError
)
from funcbind.generation.binding import BindingService
from funcbind.generation.rewriter import rewrite_function_file
from funcbind.generation.settings import merge_connection_string
from funcbind.models import (
    BindingType, FunctionCreationRequest, GenerationRequest, GenerationResult
)
from funcbind.toolchain.functions import ExtensionApiProvider
from funcbind.toolchain.package_managers import DotnetPackageManager
from funcbind.ui import Notifier
from funcbind.workspace.context import WorkspaceContext
from funcbind.workspace.project import is_project_open, resolve_project_context
from funcbind.workspace.watcher import watch_for_new_file, await_new_file
from funcbind.utils.logging import get_logger

logger = get_logger(__name__)

FunctionNamePrompter = Callable[[str], Awaitable[Optional[str]]]


class FunctionProjectService:
    """Creates SQL-bound functions in the open Azure Functions project."""

    def __init__(
        self,
        workspace: WorkspaceContext,
        extension_provider: ExtensionApiProvider,
        binding_service: BindingService,
        package_manager: DotnetPackageManager,
        prompt_function_name: FunctionNamePrompter,
        notifier: Notifier,
        language: str = DEFAULT_FUNCTION_LANGUAGE,
        template_id: str = DEFAULT_FUNCTION_TEMPLATE,
        default_function_name: str = DEFAULT_FUNCTION_NAME,
        watch_timeout: Optional[float] = None
    ):
        self._workspace = workspace
        self._extension_provider = extension_provider
        self._binding_service = binding_service
        self._package_manager = package_manager
        self._prompt_function_name = prompt_function_name
        self._notifier = notifier
        self._language = language
        self._template_id = template_id
        self._default_function_name = default_function_name
        self._watch_timeout = watch_timeout

    async def create_function(self, request: GenerationRequest) -> Optional[GenerationResult]:
        """
        Create a new function bound to ``request.object_name``.

        Returns:
            The result, or None when the tooling is missing, no project is
            open or no function name was given. Later failures propagate.
        """
        try:
            functions_api = await self._extension_provider.get_functions_api()
        except ExtensionUnavailableError as e:
            logger.warning(f"Functions tooling unavailable: {str(e)}")
            self._notifier.show_error(FUNCTIONS_TOOLING_NOT_INSTALLED)
            return None

        if not await is_project_open(self._workspace):
            self._notifier.show_error(FUNCTIONS_PROJECT_MUST_BE_OPENED)
            return None

        # Watch before scaffolding, or the creation event could be missed
        new_file = watch_for_new_file(self._workspace, self._workspace.folders[0], WATCHED_SOURCE_GLOB)
        try:
            function_name = await self._prompt_function_name(self._default_function_name)
            if not function_name or not function_name.strip():
                self._notifier.show_error("A function name is required.")
                return None
            function_name = function_name.strip()
            run_logger = logger.with_context(function=function_name, table=request.object_name)

            run_logger.info("Scaffolding function")
            await functions_api.create_function(FunctionCreationRequest(
                language=self._language,
                template_id=self._template_id,
                function_name=function_name
            ))

            project = await resolve_project_context(self._workspace)
            if project is None:
                raise ProjectNotOpenError("The Azure Functions project is no longer open")
            source_added = await self._package_manager.add_sql_binding_reference(project.project_file)

            if project.settings_file_path is None:
                raise MalformedSettingsError("No local.settings.json found in the workspace")
            settings_updated = merge_connection_string(
                project.settings_file_path,
                SQL_CONNECTION_STRING_SETTING,
                request.connection_string
            )

            function_file = await await_new_file(new_file, self._watch_timeout)
        finally:
            if not new_file.done():
                new_file.cancel()

        run_logger.info(f"Injecting SQL binding into {function_file}")
        await self._binding_service.add_sql_binding(
            BindingType.INPUT,
            function_file,
            function_name,
            request.object_name,
            SQL_CONNECTION_STRING_SETTING
        )

        rewrite_function_file(function_file)
        run_logger.info("Function created")

        return GenerationResult(
            function_name=function_name,
            function_file=function_file,
            project=project,
            settings_updated=settings_updated,
            source_added=source_added
        )
