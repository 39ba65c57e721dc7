"""Custom exceptions for the scaffolding tool."""

from __future__ import annotations


class ScaffoldError(Exception):
    """Base exception for scaffolding errors."""

    def __init__(self, message: str, target: str | None = None) -> None:
        self.target = target
        full_message = f"{message}" if not target else f"[{target}] {message}"
        super().__init__(full_message)


class ConfigurationError(ScaffoldError):
    """Raised when no usable connection string, namespace or dialect is configured."""

    def __init__(
        self,
        message: str,
        config_path: str | None = None,
        option: str | None = None,
    ) -> None:
        self.option = option
        if option:
            message = f"Option '{option}': {message}"
        super().__init__(message, config_path)


class DatabaseConnectionError(ScaffoldError):
    """Raised when a metadata query against the database fails."""

    def __init__(self, message: str, table: str | None = None) -> None:
        self.table = table
        if table:
            message = f"Table '{table}': {message}"
        super().__init__(message)


class TargetExistsError(ScaffoldError):
    """Raised when a destination file exists and overwriting is disabled."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__("File already exists! Use -f to overwrite.", path)


class UnmappedTypeWarning(UserWarning):
    """Issued when a native column type has no known mapping."""


class ColumnNameWarning(UserWarning):
    """Issued when a column name is not usable as a Python identifier."""
