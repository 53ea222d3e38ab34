# funcbind/config.py
"""
Configuration management for funcbind.
Uses TOML format for configuration files.
"""
import os
import tomllib
from pathlib import Path
from typing import List, Optional

import tomli_w
from pydantic import BaseModel, Field, ValidationError
from dotenv import load_dotenv

from funcbind.constants import (
    CONFIG_FILE, DEFAULT_EXCLUDE_DIRS, DEFAULT_POLL_INTERVAL, DEFAULT_MAX_BUFFER,
    FUNC_EXECUTABLE, DEFAULT_FUNCTION_LANGUAGE, DEFAULT_FUNCTION_TEMPLATE,
    DEFAULT_FUNCTION_NAME, SQL_BINDING_NUGET_SOURCE, SQL_BINDING_PACKAGE_NAME,
    SQL_BINDING_PACKAGE_VERSION
)
from funcbind.utils.logging import get_logger

logger = get_logger(__name__)


# --- Configuration Models ---

class WorkspaceConfig(BaseModel):
    """Workspace search and watch settings."""
    exclude_dirs: List[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDE_DIRS), description="Directory names skipped when searching")
    poll_interval: float = Field(DEFAULT_POLL_INTERVAL, gt=0, description="Seconds between file watcher scans")
    watch_timeout: Optional[float] = Field(None, gt=0, description="Give up waiting for the generated file after this many seconds")


class ExecutionConfig(BaseModel):
    """External command settings."""
    max_buffer: int = Field(DEFAULT_MAX_BUFFER, gt=0, description="Maximum bytes captured per output stream")
    func_executable: str = Field(FUNC_EXECUTABLE, description="Azure Functions Core Tools executable")


class PackageConfig(BaseModel):
    """SQL binding package reference."""
    source: str = Field(SQL_BINDING_NUGET_SOURCE, description="NuGet source hosting the SQL binding package")
    name: str = Field(SQL_BINDING_PACKAGE_NAME, description="SQL binding package name")
    version: str = Field(SQL_BINDING_PACKAGE_VERSION, description="SQL binding package version")


class FunctionConfig(BaseModel):
    """Defaults for the generated function."""
    language: str = Field(DEFAULT_FUNCTION_LANGUAGE, description="Function language")
    template_id: str = Field(DEFAULT_FUNCTION_TEMPLATE, description="Core Tools template")
    default_name: str = Field(DEFAULT_FUNCTION_NAME, description="Suggested function name")


class AppConfig(BaseModel):
    """Application configuration settings."""
    workspace: WorkspaceConfig = Field(default_factory=WorkspaceConfig)
    execution: ExecutionConfig = Field(default_factory=ExecutionConfig)
    package: PackageConfig = Field(default_factory=PackageConfig)
    function: FunctionConfig = Field(default_factory=FunctionConfig)
    connection_string: Optional[str] = Field(None, description="Default SQL connection string")
    debug: bool = Field(False, description="Enable debug mode")


# --- Configuration Manager ---

class ConfigManager:
    """Manages the configuration for funcbind using TOML."""

    def __init__(self, config_file: Path = CONFIG_FILE):
        self._config: AppConfig = AppConfig()
        self._config_file = Path(config_file)
        self._load_environment()

    def _load_environment(self) -> None:
        """Loads overrides from environment variables and .env file."""
        load_dotenv()
        connection_string = os.getenv("SQL_CONNECTION_STRING")
        if connection_string:
            self._config.connection_string = connection_string
        func_executable = os.getenv("FUNCBIND_FUNC_EXECUTABLE")
        if func_executable:
            self._config.execution.func_executable = func_executable

    def _reset(self) -> None:
        logger.error("Using default configuration and environment variables.")
        self._config = AppConfig()
        self._load_environment()

    def load_config(self) -> None:
        """Loads configuration from the TOML config file."""
        if not self._config_file.exists():
            logger.debug(f"Configuration file not found at '{self._config_file}'. Saving default configuration.")
            self.save_config()
            return

        try:
            logger.debug(f"Loading configuration from: {self._config_file}")
            with open(self._config_file, "rb") as f:
                config_data = tomllib.load(f)
            self._config = AppConfig(**config_data)
            self._load_environment()
        except tomllib.TOMLDecodeError as e:
            logger.error(f"Error decoding TOML configuration file ({self._config_file}): {e}")
            self._reset()
        except ValidationError as e:
            logger.error(f"Invalid configuration in {self._config_file}: {e}")
            self._reset()
        except OSError as e:
            logger.error(f"Error reading configuration file {self._config_file}: {e}")
            self._reset()

    def save_config(self) -> None:
        """Saves the current configuration to the config file (as TOML)."""
        # TOML has no null; unset optional values are left out
        config_dict = self._config.model_dump(exclude_none=True)
        config_dict.pop("connection_string", None)

        try:
            self._config_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self._config_file, "wb") as f:
                tomli_w.dump(config_dict, f)
            logger.debug(f"Configuration saved to {self._config_file}")
        except OSError as e:
            logger.error(f"Error saving TOML configuration to {self._config_file}: {e}")

    @property
    def config(self) -> AppConfig:
        """Provides access to the current application configuration."""
        return self._config

    @property
    def config_file(self) -> Path:
        return self._config_file


# Global instance; the CLI loads the file before running commands
config_manager = ConfigManager()
