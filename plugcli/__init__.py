"""plugcli - a command registry and plugin layer for subcommand-style CLIs.

Applications register named commands (option schema, description, category,
handler) on a `CommandRegistry`, let a `PluginManager` load the commands
contributed by plugins, then dispatch argument vectors and render help.
"""

from .command_registry import CommandRegistry
from .help import HelpLayout, HelpRenderer, HelpSection, SectionKind
from .manager import PluginManager
from .models import CommandDefinition, ConfigError, DuplicatePluginError, ExitCode, ParseError, PlugcliError, PluginLoadError
from .options import Option, OptionSpec, ParsedArguments
from .plugins import PluginHandle

__all__ = [
    "CommandDefinition",
    "CommandRegistry",
    "ConfigError",
    "DuplicatePluginError",
    "ExitCode",
    "HelpLayout",
    "HelpRenderer",
    "HelpSection",
    "Option",
    "OptionSpec",
    "ParseError",
    "ParsedArguments",
    "PlugcliError",
    "PluginHandle",
    "PluginLoadError",
    "PluginManager",
    "SectionKind",
]
