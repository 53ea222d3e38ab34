# funcbind/generation/settings.py
"""
Connection string handling for local.settings.json.
"""
import json
from pathlib import Path
from typing import Union

from funcbind.errors import MalformedSettingsError
from funcbind.utils.logging import get_logger

logger = get_logger(__name__)


def merge_connection_string(
    settings_path: Union[str, Path],
    key: str,
    value: str
) -> bool:
    """
    Add a connection string to the Values section of a settings file.

    An existing key is never overwritten, whatever its value; in that case the
    file is left untouched.

    Args:
        settings_path: Path to local.settings.json.
        key: Setting name.
        value: Connection string.

    Returns:
        True if the key was added, False if it was already present.

    Raises:
        MalformedSettingsError: If the file is not JSON or has no Values object.
    """
    path_obj = Path(settings_path)
    content = path_obj.read_text(encoding="utf-8")

    try:
        config = json.loads(content)
    except json.JSONDecodeError as e:
        raise MalformedSettingsError(f"Could not parse {path_obj}: {e}") from e

    if not isinstance(config, dict) or not isinstance(config.get("Values"), dict):
        raise MalformedSettingsError(f"{path_obj} has no 'Values' section")

    if key in config["Values"]:
        logger.debug(f"Setting '{key}' already present in {path_obj}")
        return False

    config["Values"][key] = value
    path_obj.write_text(json.dumps(config, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info(f"Added setting '{key}' to {path_obj}")
    return True
