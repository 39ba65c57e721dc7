"""Shared utilities for the scaffolding tool."""

from .config import (
    ScaffoldConfig,
    load_config_file,
    resolve_config,
    require_connection_string,
)
from .naming import (
    to_snake_case,
    sanitize_identifier,
    class_name_for_table,
    module_name_for_class,
    is_dotted_identifier,
    PYTHON_KEYWORDS,
)
from .errors import (
    ScaffoldError,
    ConfigurationError,
    DatabaseConnectionError,
    TargetExistsError,
    UnmappedTypeWarning,
    ColumnNameWarning,
)

__all__ = [
    # Configuration
    "ScaffoldConfig",
    "load_config_file",
    "resolve_config",
    "require_connection_string",
    # Naming utilities
    "to_snake_case",
    "sanitize_identifier",
    "class_name_for_table",
    "module_name_for_class",
    "is_dotted_identifier",
    "PYTHON_KEYWORDS",
    # Errors
    "ScaffoldError",
    "ConfigurationError",
    "DatabaseConnectionError",
    "TargetExistsError",
    "UnmappedTypeWarning",
    "ColumnNameWarning",
]
