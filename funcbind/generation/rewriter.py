# funcbind/generation/rewriter.py
"""
Rewrites a generated HttpTrigger function so it returns the SQL binding result.

The Core Tools template emits a greeting function. Once the SQL input binding
has been injected into the signature, the request-parsing boilerplate is dead
code, so it is dropped and the return statement is pointed at the bound rows.
"""
import os
from pathlib import Path
from typing import AbstractSet, Union

from funcbind.constants import (
    GENERIC_COLLECTION_IMPORT, DEFAULT_HTTP_TRIGGER_LINES,
    DEFAULT_BINDING_RESULT, SQL_BINDING_RESULT
)
from funcbind.utils.logging import get_logger

logger = get_logger(__name__)


def rewrite_function_text(
    original_text: str,
    boilerplate_lines: AbstractSet[str],
    result_marker: str,
    replacement_line: str,
    import_line: str,
    line_separator: str = os.linesep
) -> str:
    """
    Rewrite generated function source.

    Lines are compared with leading whitespace stripped. Boilerplate lines are
    dropped, the result marker line is replaced in place (indentation kept),
    and every other line is passed through unchanged.

    Args:
        original_text: Full text of the generated source file.
        boilerplate_lines: Lines to remove.
        result_marker: Result declaration line to replace.
        replacement_line: Text substituted for the marker.
        import_line: Line prepended to the file.
        line_separator: Separator used to split and rejoin lines.

    Returns:
        The rewritten text.
    """
    lines = (import_line + line_separator + original_text).split(line_separator)

    rewritten = []
    for line in lines:
        stripped = line.lstrip()
        if stripped in boilerplate_lines:
            continue
        if stripped == result_marker:
            rewritten.append(line.replace(result_marker, replacement_line, 1))
        else:
            rewritten.append(line)

    return line_separator.join(rewritten)


def rewrite_function_file(
    file_path: Union[str, Path],
    boilerplate_lines: AbstractSet[str] = DEFAULT_HTTP_TRIGGER_LINES,
    result_marker: str = DEFAULT_BINDING_RESULT,
    replacement_line: str = SQL_BINDING_RESULT,
    import_line: str = GENERIC_COLLECTION_IMPORT
) -> str:
    """
    Apply rewrite_function_text to a file in place.

    Returns:
        The text written to the file.
    """
    path_obj = Path(file_path)
    logger.info(f"Rewriting generated function file {path_obj}")

    with open(path_obj, "r", encoding="utf-8", newline="") as f:
        original_text = f.read()

    # Split on the separator the file was written with, not the host's
    line_separator = "\r\n" if "\r\n" in original_text else "\n"

    new_text = rewrite_function_text(
        original_text,
        boilerplate_lines,
        result_marker,
        replacement_line,
        import_line,
        line_separator
    )

    with open(path_obj, "w", encoding="utf-8", newline="") as f:
        f.write(new_text)

    return new_text
