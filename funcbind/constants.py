"""
Constants for funcbind.
"""
from pathlib import Path
import os

# Application information
APP_NAME = "funcbind"
APP_VERSION = "0.1.0"
APP_DESCRIPTION = "Scaffold Azure Functions projects with SQL bindings"

# Paths
CONFIG_DIR = Path(os.path.expanduser("~/.config/funcbind"))
CONFIG_FILE = CONFIG_DIR / "config.toml"
LOG_DIR = CONFIG_DIR / "logs"

# Logging
LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}"
LOG_ROTATION = "10 MB"
LOG_RETENTION = "10 days"

# Workspace search patterns
PROJECT_FILE_GLOB = "**/*.csproj"
HOST_FILE_GLOB = "**/host.json"
SETTINGS_FILE_GLOB = "**/local.settings.json"
WATCHED_SOURCE_GLOB = "**/*.cs"

# Directories never searched or watched
DEFAULT_EXCLUDE_DIRS = [".git", ".vs", ".vscode", "bin", "obj", "node_modules"]

# Polling interval for the file watcher (seconds)
DEFAULT_POLL_INTERVAL = 0.25

# Process output cap per stream (bytes)
DEFAULT_MAX_BUFFER = 500 * 1024

# Azure Functions tooling
FUNC_EXECUTABLE = "func"
DEFAULT_FUNCTION_LANGUAGE = "C#"
DEFAULT_FUNCTION_TEMPLATE = "HttpTrigger"
DEFAULT_FUNCTION_NAME = "HttpTrigger1"

# SQL binding package
SQL_BINDING_NUGET_SOURCE = "https://www.myget.org/F/azure-appservice/api/v3/index.json"
SQL_BINDING_PACKAGE_NAME = "Microsoft.Azure.WebJobs.Extensions.Sql"
SQL_BINDING_PACKAGE_VERSION = "1.0.0-preview3"
SQL_CONNECTION_STRING_SETTING = "SqlConnectionString"

# Generated HttpTrigger rewrite
GENERIC_COLLECTION_IMPORT = "using System.Collections.Generic;"

DEFAULT_HTTP_TRIGGER_LINES = frozenset([
    'log.LogInformation("C# HTTP trigger function processed a request.");',
    'string name = req.Query["name"];',
    'string requestBody = await new StreamReader(req.Body).ReadToEndAsync();',
    'dynamic data = JsonConvert.DeserializeObject(requestBody);',
    'name = name ?? data?.name;',
    'string responseMessage = string.IsNullOrEmpty(name)',
    '? "This HTTP triggered function executed successfully. Pass a name in the query string or in the request body for a personalized response."',
    ': $"Hello, {name}. This HTTP triggered function executed successfully.";',
])

DEFAULT_BINDING_RESULT = "return new OkObjectResult(responseMessage);"
SQL_BINDING_RESULT = "return new OkObjectResult(result);"

# User-facing messages
FUNCTIONS_TOOLING_NOT_INSTALLED = (
    "Azure Functions Core Tools must be installed to create an Azure Function with a SQL binding."
)
FUNCTIONS_PROJECT_MUST_BE_OPENED = (
    "An Azure Functions project must be opened to create an Azure Function with a SQL binding."
)
