"""Configuration loading for the scaffolding tool."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from .errors import ConfigurationError

DEFAULT_CONFIG_FILE = "scaffold.yaml"
CONNECTION_STRING_ENV = "DB_SCAFFOLD_CONNECTION_STRING"
DEFAULT_NAMESPACE = "models"

_KNOWN_KEYS = frozenset({
    "connection_string",
    "dialect",
    "schema",
    "namespace",
    "path",
    "extensions_name",
})


@dataclass(frozen=True, slots=True)
class ScaffoldConfig:
    """Resolved settings for one generation run."""

    connection_string: str | None = None
    dialect: str | None = None
    schema: str | None = None
    namespace: str = DEFAULT_NAMESPACE
    path: Path | None = None
    extensions_name: str | None = None


def load_config_file(config_path: Path) -> dict[str, Any]:
    """Load settings from a YAML file.

    Args:
        config_path: Path to the configuration file.

    Returns:
        The parsed settings mapping.

    Raises:
        ConfigurationError: If the file cannot be read or parsed.
    """
    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Failed to read config file: {e}", str(config_path)) from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML: {e}", str(config_path)) from e

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigurationError("Config root must be a mapping", str(config_path))

    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        raise ConfigurationError(
            f"Unknown setting(s): {', '.join(unknown)}",
            str(config_path),
        )

    return data


def resolve_config(
    overrides: Mapping[str, Any],
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> ScaffoldConfig:
    """Merge CLI overrides, the config file and the environment.

    An explicit ``config_path`` must exist; otherwise ``scaffold.yaml`` in
    the working directory is used when present.
    """
    if environ is None:
        environ = os.environ

    if config_path is not None:
        file_settings = load_config_file(config_path)
    else:
        default_path = Path.cwd() / DEFAULT_CONFIG_FILE
        file_settings = load_config_file(default_path) if default_path.is_file() else {}

    def pick(key: str) -> Any:
        value = overrides.get(key)
        if value is None:
            value = file_settings.get(key)
        return value

    connection_string = pick("connection_string") or environ.get(CONNECTION_STRING_ENV)
    path = pick("path")

    return ScaffoldConfig(
        connection_string=connection_string,
        dialect=pick("dialect"),
        schema=pick("schema"),
        namespace=pick("namespace") or DEFAULT_NAMESPACE,
        path=Path(path) if path is not None else None,
        extensions_name=pick("extensions_name"),
    )


def require_connection_string(config: ScaffoldConfig) -> str:
    """Return the configured connection string or fail before any I/O."""
    if not config.connection_string or not config.connection_string.strip():
        raise ConfigurationError(
            "Please specify a connection string using the -c parameter, "
            f"the '{DEFAULT_CONFIG_FILE}' file or the {CONNECTION_STRING_ENV} variable",
            option="connection_string",
        )
    return config.connection_string
