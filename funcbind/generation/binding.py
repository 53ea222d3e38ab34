# funcbind/generation/binding.py
"""
SQL binding injection for generated C# functions.

The injector adds a [Sql(...)] parameter to the signature of the function
carrying a matching [FunctionName] attribute. The new parameter goes right
after the trigger parameter, on its own line.
"""
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Tuple, Union

from funcbind.errors import BindingInjectionError
from funcbind.models import BindingType
from funcbind.utils.logging import get_logger

logger = get_logger(__name__)

_OPENERS = {"(": ")", "[": "]", "{": "}", "<": ">"}
_CLOSERS = {v: k for k, v in _OPENERS.items()}


class BindingService(ABC):
    """Adds a SQL binding to an existing function."""

    @abstractmethod
    async def add_sql_binding(
        self,
        binding_type: BindingType,
        file_path: Union[str, Path],
        function_name: str,
        object_name: str,
        connection_string_setting: str
    ) -> None:
        ...


def quote_object_name(object_name: str) -> str:
    """Turn ``schema.table`` into ``[schema].[table]``."""
    parts = object_name.split(".", 1)
    return ".".join(
        part if part.startswith("[") and part.endswith("]") else f"[{part}]"
        for part in parts
    )


def build_binding_parameter(
    binding_type: BindingType,
    object_name: str,
    connection_string_setting: str
) -> str:
    """Build the C# parameter declaration for a SQL binding."""
    quoted = quote_object_name(object_name)
    if binding_type == BindingType.INPUT:
        return (
            f'[Sql("select * from {quoted}", '
            f'CommandType = System.Data.CommandType.Text, '
            f'ConnectionStringSetting = "{connection_string_setting}")] '
            f'IEnumerable<Object> result'
        )
    return (
        f'[Sql("{quoted}", ConnectionStringSetting = "{connection_string_setting}")] '
        f'out Object output'
    )


def _skip_string(text: str, pos: int) -> int:
    """Return the index just past the string literal starting at pos."""
    verbatim = pos > 0 and text[pos - 1] == "@"
    i = pos + 1
    while i < len(text):
        ch = text[i]
        if verbatim:
            if ch == '"':
                if i + 1 < len(text) and text[i + 1] == '"':
                    i += 2
                    continue
                return i + 1
        elif ch == "\\":
            i += 2
            continue
        elif ch == '"':
            return i + 1
        i += 1
    raise BindingInjectionError("Unterminated string literal in function signature")


def _find_parameter_list(text: str, start: int) -> Tuple[int, int, Optional[int]]:
    """
    Locate the parameter list of the method declared after ``start``.

    Returns:
        (open paren index, close paren index, first top-level comma index or None)
    """
    i = start
    attribute_depth = 0
    while i < len(text):
        ch = text[i]
        if ch == '"':
            i = _skip_string(text, i)
            continue
        if ch == "[":
            attribute_depth += 1
        elif ch == "]":
            attribute_depth -= 1
        elif ch == "(" and attribute_depth == 0:
            break
        elif ch in "{;" and attribute_depth == 0:
            raise BindingInjectionError("Function declaration has no parameter list")
        i += 1
    else:
        raise BindingInjectionError("Function declaration has no parameter list")

    open_index = i
    stack = []
    first_comma = None
    i += 1
    while i < len(text):
        ch = text[i]
        if ch == '"':
            i = _skip_string(text, i)
            continue
        if ch in _OPENERS:
            stack.append(ch)
        elif ch == ">":
            # Without an open generic this is an operator such as "=>"
            if stack and stack[-1] == "<":
                stack.pop()
        elif ch in _CLOSERS:
            # An unclosed "<" was a comparison, not a generic
            while stack and stack[-1] == "<":
                stack.pop()
            if not stack:
                if ch == ")":
                    return open_index, i, first_comma
                raise BindingInjectionError("Unbalanced parameter list in function signature")
            stack.pop()
        elif ch == "," and first_comma is None and not stack:
            first_comma = i
        i += 1

    raise BindingInjectionError("Unbalanced parameter list in function signature")


def _line_indent(text: str, index: int) -> str:
    line_start = text.rfind("\n", 0, index) + 1
    line = text[line_start:index]
    return line[:len(line) - len(line.lstrip())]


def inject_binding_text(
    text: str,
    function_name: str,
    parameter: str
) -> str:
    """
    Insert a parameter after the trigger parameter of a function.

    Args:
        text: C# source text.
        function_name: Value of the [FunctionName] attribute to look for.
        parameter: Parameter declaration to insert.

    Returns:
        The updated source text.
    """
    match = re.search(
        r'\[\s*FunctionName\s*\(\s*"' + re.escape(function_name) + r'"\s*\)\s*\]',
        text
    )
    if not match:
        raise BindingInjectionError(f"No function named '{function_name}' found")

    open_index, close_index, first_comma = _find_parameter_list(text, match.end())
    newline = "\r\n" if "\r\n" in text else "\n"

    body = text[open_index + 1:close_index]
    if not body.strip():
        return text[:open_index + 1] + parameter + text[close_index:]

    # Indent like the first parameter when parameters sit on their own lines
    first_param_index = open_index + 1 + (len(body) - len(body.lstrip()))
    if "\n" in text[open_index:first_param_index]:
        indent = _line_indent(text, first_param_index)
    else:
        indent = _line_indent(text, open_index) + "    "

    insert_at = first_comma if first_comma is not None else close_index
    # Keep trailing whitespace of the trigger parameter out of the insertion point
    while insert_at > open_index + 1 and text[insert_at - 1] in " \t\r\n":
        insert_at -= 1

    return text[:insert_at] + "," + newline + indent + parameter + text[insert_at:]


class SqlBindingInjector(BindingService):
    """Edits generated C# files in place to add SQL bindings."""

    def __init__(self):
        self._logger = logger

    async def add_sql_binding(
        self,
        binding_type: BindingType,
        file_path: Union[str, Path],
        function_name: str,
        object_name: str,
        connection_string_setting: str
    ) -> None:
        path_obj = Path(file_path)
        self._logger.info(
            f"Adding {BindingType(binding_type).value} SQL binding for {object_name} to {function_name}",
            extra={"file": str(path_obj)}
        )

        with open(path_obj, "r", encoding="utf-8", newline="") as f:
            text = f.read()

        parameter = build_binding_parameter(binding_type, object_name, connection_string_setting)
        new_text = inject_binding_text(text, function_name, parameter)

        with open(path_obj, "w", encoding="utf-8", newline="") as f:
            f.write(new_text)
