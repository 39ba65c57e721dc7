"""Naming utilities for code generation."""

from __future__ import annotations

import keyword
import re
from functools import lru_cache

PYTHON_KEYWORDS: frozenset[str] = frozenset(keyword.kwlist)

_INVALID_IDENTIFIER_CHARS = re.compile(r"\W", re.ASCII)


@lru_cache(maxsize=1024)
def to_snake_case(value: str) -> str:
    """Convert a string to snake_case.

    Uses caching for repeated calls with the same input.

    Examples:
        >>> to_snake_case("HelloWorld")
        'hello_world'
        >>> to_snake_case("hello-world")
        'hello_world'
        >>> to_snake_case("UserRoles")
        'user_roles'
    """
    value = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", value)
    value = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", value)
    value = value.replace("-", "_")
    value = re.sub(r"_+", "_", value)
    return value.lower().strip("_")


@lru_cache(maxsize=1024)
def sanitize_identifier(value: str) -> str:
    """Sanitize a value for use as a Python identifier.

    Characters that are not valid in an identifier become underscores, a
    leading digit gets an underscore prefix and keywords get a trailing
    underscore.
    """
    sanitized = _INVALID_IDENTIFIER_CHARS.sub("_", value)
    if not sanitized:
        return "_"
    if sanitized[0].isdigit():
        sanitized = f"_{sanitized}"
    if sanitized in PYTHON_KEYWORDS:
        return f"{sanitized}_"
    return sanitized


@lru_cache(maxsize=1024)
def class_name_for_table(table_name: str) -> str:
    """Derive the generated type name for a table.

    Whitespace is removed and the remainder sanitized; case and plurality
    are left as they are in the database.
    """
    return sanitize_identifier("".join(table_name.split()))


@lru_cache(maxsize=1024)
def module_name_for_class(class_name: str) -> str:
    """Derive the module file stem for a generated type."""
    return sanitize_identifier(to_snake_case(class_name))


def is_dotted_identifier(value: str) -> bool:
    """Return True if value is a dotted Python package path like ``app.models``."""
    if not value:
        return False
    return all(
        part.isidentifier() and part not in PYTHON_KEYWORDS
        for part in value.split(".")
    )
