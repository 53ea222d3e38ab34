# funcbind/workspace/project.py
"""
Azure Functions project discovery.

Paths are looked up fresh on every call; nothing is cached between runs.
"""
from pathlib import Path
from typing import Optional

from funcbind.constants import PROJECT_FILE_GLOB, HOST_FILE_GLOB, SETTINGS_FILE_GLOB
from funcbind.models import ProjectContext
from funcbind.workspace.context import WorkspaceContext
from funcbind.utils.logging import get_logger

logger = get_logger(__name__)


async def _first_match(workspace: WorkspaceContext, pattern: str) -> Optional[Path]:
    matches = await workspace.find_files(pattern)
    if len(matches) > 1:
        logger.warning(f"Found {len(matches)} files matching {pattern}, using {matches[0]}")
    return matches[0] if matches else None


async def get_project_file(workspace: WorkspaceContext) -> Optional[Path]:
    return await _first_match(workspace, PROJECT_FILE_GLOB)


async def get_host_file(workspace: WorkspaceContext) -> Optional[Path]:
    return await _first_match(workspace, HOST_FILE_GLOB)


async def get_settings_file(workspace: WorkspaceContext) -> Optional[Path]:
    return await _first_match(workspace, SETTINGS_FILE_GLOB)


async def is_project_open(workspace: WorkspaceContext) -> bool:
    """True when a root folder is open and both a project file and host.json exist."""
    if not workspace.folders:
        return False
    project_file = await get_project_file(workspace)
    host_file = await get_host_file(workspace)
    return project_file is not None and host_file is not None


async def resolve_project_context(workspace: WorkspaceContext) -> Optional[ProjectContext]:
    """Resolve the project paths, or None when no project is open."""
    if not workspace.folders:
        return None
    project_file = await get_project_file(workspace)
    host_file = await get_host_file(workspace)
    if project_file is None or host_file is None:
        return None
    return ProjectContext(
        project_file=project_file,
        host_file_path=host_file,
        settings_file_path=await get_settings_file(workspace)
    )
