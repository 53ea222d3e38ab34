# funcbind/models.py
"""
Data models for a single function generation run.
"""
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from funcbind.constants import (
    DEFAULT_FUNCTION_LANGUAGE, DEFAULT_FUNCTION_TEMPLATE
)


class BindingType(str, Enum):
    """Direction of a SQL binding."""
    INPUT = "input"
    OUTPUT = "output"


class GenerationRequest(BaseModel):
    """What the caller wants bound into the new function."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    connection_string: str = Field(..., min_length=1, description="SQL connection string")
    schema_name: str = Field(..., alias="schema", min_length=1, description="Database schema")
    table: str = Field(..., min_length=1, description="Table to bind")

    @property
    def object_name(self) -> str:
        """Qualified table name as passed to the binding service."""
        return f"{self.schema_name}.{self.table}"


class ProjectContext(BaseModel):
    """Paths resolved from the open workspace."""
    model_config = ConfigDict(frozen=True)

    project_file: Path
    host_file_path: Path
    settings_file_path: Optional[Path] = None

    @property
    def project_file_dir(self) -> Path:
        return self.project_file.parent


class FunctionCreationRequest(BaseModel):
    """Arguments for the external function scaffolding call."""
    model_config = ConfigDict(frozen=True)

    language: str = DEFAULT_FUNCTION_LANGUAGE
    template_id: str = DEFAULT_FUNCTION_TEMPLATE
    function_name: str


class GenerationResult(BaseModel):
    """Outcome of a completed generation run."""
    function_name: str
    function_file: Path
    project: ProjectContext
    settings_updated: bool = Field(False, description="Whether the connection string setting was added")
    source_added: bool = Field(False, description="Whether the NuGet source was registered")
