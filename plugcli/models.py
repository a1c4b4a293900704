"""Command definitions, error types and exit codes."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING

from .constants import UNCATEGORIZED

if TYPE_CHECKING:
    from .options import OptionSpec, ParsedArguments

__all__ = [
    "CommandDefinition",
    "ConfigError",
    "DuplicatePluginError",
    "ExitCode",
    "Handler",
    "ParseError",
    "PlugcliError",
    "PluginLoadError",
]

Handler = Callable[["ParsedArguments"], None]


class PlugcliError(Exception):
    """Base class for every plugcli error."""


class ParseError(PlugcliError):
    """The option parser rejected an argument vector.

    The message is meant to be shown to the operator as is.
    """


class DuplicatePluginError(PlugcliError):
    """A plugin with the same name is already loaded."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Plugin already loaded: {name}")
        self.name = name


class PluginLoadError(PlugcliError):
    """An entry point or module could not be turned into a plugin."""


class ConfigError(PlugcliError):
    """The configuration file can't be read."""


class ExitCode(IntEnum):
    """Exit codes returned by `plugcli.app.Application.run`."""

    SUCCESS = 0
    USAGE_ERROR = 1  # No command, unknown command, invalid arguments
    CONFIG_ERROR = 2  # Unreadable configuration file, broken plugin
    COMMAND_ERROR = 4  # The command handler failed


@dataclass(frozen=True)
class CommandDefinition:
    """Immutable description of one command.

    Attributes:
        name: command name, unique key in the registry
        options: option schema used to parse the command's arguments
        description: human readable text, the first line is the summary
        category: listing group, `UNCATEGORIZED` when None or blank
        handler: called with the parsed arguments on execution (optional)
        plugin: name of the plugin owning this command, None for built-ins
    """

    name: str
    options: OptionSpec
    description: str | None = None
    category: str | None = None
    handler: Handler | None = None
    plugin: str | None = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            msg = "Command name must not be empty"
            raise ValueError(msg)
        if self.options is None:
            msg = f"Command {self.name!r} needs an option schema"
            raise ValueError(msg)
        if self.category is None or not self.category.strip():
            object.__setattr__(self, "category", UNCATEGORIZED)

    @property
    def summary(self) -> str:
        """First line of the description, empty if there is none."""
        if not self.description:
            return ""
        return self.description.split("\n", 1)[0]
