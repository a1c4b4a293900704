"""Configuration file loading and typed access.

The configuration is a TOML file with two optional sections::

    [help]
    width = 100
    left_padding = 4
    desc_padding = 2

    [plugins]
    entry_point_group = "plugcli.plugins"
    modules = ["mypkg.cli_plugin"]
    disabled = ["noisy"]
    plugins_paths = ["~/my-plugins"]
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .constants import (
    CONFIG_DIR_NAME,
    CONFIG_ENV_VAR,
    CONFIG_FILE_NAME,
    DEFAULT_DESC_PADDING,
    DEFAULT_HELP_WIDTH,
    DEFAULT_LEFT_PADDING,
    ENTRY_POINT_GROUP,
)
from .models import ConfigError
from .validation import ConfigField, ConfigItems, ConfigValidator

if TYPE_CHECKING:
    import logging

__all__ = [
    "HELP_SCHEMA",
    "PLUGINS_SCHEMA",
    "Configuration",
    "default_config_path",
    "get_section",
    "load_config",
    "validate_config",
]

ConfigValueType = int | str | list


def _positive(value: int | str) -> list[str]:
    return [] if int(value) > 0 else [f"must be positive, got {value}"]


def _not_negative(value: int | str) -> list[str]:
    return [] if int(value) >= 0 else [f"must not be negative, got {value}"]


HELP_SCHEMA = ConfigItems(
    ConfigField("width", int, default=DEFAULT_HELP_WIDTH, description="Maximum width of help lines", validator=_positive),
    ConfigField("left_padding", int, default=DEFAULT_LEFT_PADDING, description="Spaces before option flags", validator=_not_negative),
    ConfigField("desc_padding", int, default=DEFAULT_DESC_PADDING, description="Spaces between flags and description", validator=_not_negative),
)

PLUGINS_SCHEMA = ConfigItems(
    ConfigField("entry_point_group", str, default=ENTRY_POINT_GROUP, description="Entry point group scanned for plugins"),
    ConfigField("modules", list, default=[], description="Python modules exposing a plugin"),
    ConfigField("disabled", list, default=[], description="Plugins never loaded"),
    ConfigField("plugins_paths", list, default=[], description="Extra directories added to the import path"),
)

SCHEMAS = {"help": HELP_SCHEMA, "plugins": PLUGINS_SCHEMA}


class Configuration(dict):
    """One configuration section with schema defaults and typed accessors."""

    def __init__(
        self,
        *args: Any,  # noqa: ANN401
        logger: logging.Logger,
        schema: ConfigItems | None = None,
        **kwargs: Any,  # noqa: ANN401
    ):
        """Initialize the configuration object.

        Args:
            *args: Arguments for dict
            logger: Logger instance to use for warnings
            schema: Optional list of ConfigField definitions for automatic defaults
            **kwargs: Keyword arguments for dict
        """
        super().__init__(*args, **kwargs)
        self.log = logger
        self._schema_defaults: dict[str, ConfigValueType] = {}
        if schema:
            self.set_schema(schema)

    def set_schema(self, schema: ConfigItems) -> None:
        """Set or update the schema for default value lookups."""
        self._schema_defaults = {field.name: field.default for field in schema if field.default is not None}

    def get(self, name: str, default: ConfigValueType | None = None) -> ConfigValueType | None:  # type: ignore[override]
        """Get a value with schema-aware defaults.

        Args:
            name: The configuration key
            default: Fallback if key is missing and not in schema defaults

        Returns:
            The value, schema default, or provided default
        """
        if name in self:
            return self[name]  # type: ignore[no-any-return]
        return self._schema_defaults.get(name, default)

    def get_int(self, name: str, default: int = 0) -> int:
        """Get an integer value.

        Args:
            name: The key name
            default: Default value if key is missing or invalid

        Returns:
            The integer value
        """
        value = self.get(name)
        if value is None:
            return default
        try:
            return int(value)  # type: ignore[arg-type]
        except (ValueError, TypeError):
            self.log.warning("Invalid integer value for %s: %s", name, value)
            return default

    def get_str(self, name: str, default: str = "") -> str:
        value = self.get(name)
        if value is None:
            return default
        return str(value)

    def get_list(self, name: str, default: list | None = None) -> list:
        """Get a list value, a single scalar is wrapped into a list.

        Args:
            name: The key name
            default: Default value if key is missing

        Returns:
            A new list
        """
        value = self.get(name)
        if value is None:
            return list(default or [])
        if isinstance(value, list | tuple):
            return list(value)
        return [value]


def default_config_path() -> Path:
    """Return the configuration file path: $PLUGCLI_CONFIG or $XDG_CONFIG_HOME/plugcli/config.toml."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(os.path.expandvars(override)).expanduser()
    config_home = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(config_home) / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def load_config(path: str | Path | None = None) -> dict[str, Any]:
    """Load the TOML configuration file.

    Args:
        path: configuration file, defaults to `default_config_path()`

    Returns:
        The raw configuration, empty when the file doesn't exist

    Raises:
        ConfigError: the file isn't valid TOML or can't be read
    """
    fname = default_config_path() if path is None else Path(os.path.expandvars(str(path))).expanduser()
    if not fname.exists():
        return {}
    try:
        with fname.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {fname}: {e}"
        raise ConfigError(msg) from e
    except OSError as e:
        msg = f"Can't read {fname}: {e}"
        raise ConfigError(msg) from e


def validate_config(config: dict[str, Any], logger: logging.Logger) -> list[str]:
    """Validate the known sections, log and return the problems found.

    Problems never stop the program, invalid values fall back to defaults.
    """
    errors: list[str] = []
    for section, schema in SCHEMAS.items():
        values = config.get(section, {})
        if not isinstance(values, dict):
            errors.append(f"[{section}] must be a section, got {type(values).__name__}")
            continue
        validator = ConfigValidator(values, section, logger)
        errors.extend(validator.validate(schema))
        validator.warn_unknown_keys(schema)
    for error in errors:
        logger.warning(error)
    return errors


def get_section(config: dict[str, Any], section: str, logger: logging.Logger) -> Configuration:
    """Return one section of `config` as a `Configuration` with its schema defaults.

    Fields failing validation are left out, so their schema default applies.
    """
    values = config.get(section)
    if not isinstance(values, dict):
        values = {}
    schema = SCHEMAS.get(section)
    if schema is not None:
        values = ConfigValidator(values, section, logger).valid_values(schema)
    return Configuration(values, logger=logger, schema=schema)
