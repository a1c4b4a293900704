"""Common plugin interface."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..constants import UNKNOWN_VERSION
from ..logging_setup import get_logger
from ..options import OptionSpec
from . import PluginHandle

if TYPE_CHECKING:
    from ..command_registry import CommandRegistry
    from ..models import CommandDefinition, Handler

__all__ = ["Plugin"]


class Plugin:
    """Base class for class-style plugins.

    Subclasses set `name` (and optionally `version`, `description`,
    `category`) and override `register_commands`, usually calling
    `add_command` for each command.
    """

    name: str = ""
    " the plugin name "

    version: str = UNKNOWN_VERSION

    description: str | None = None
    " one line description, shown by the `plugins` command "

    category: str | None = None
    " category given to the commands added with `add_command` "

    def __init__(self, name: str | None = None) -> None:
        """Create the plugin and the matching logger.

        Args:
            name: overrides the class level `name`
        """
        self.name = name or self.name or type(self).__name__.lower()
        self.log = get_logger(self.name)

    # Functions to override

    def register_commands(self, registry: CommandRegistry) -> None:
        """Add the plugin's commands to `registry`."""

    # Generic implementations

    def add_command(  # pylint: disable=too-many-arguments
        self,
        registry: CommandRegistry,
        name: str,
        options: OptionSpec | None = None,
        description: str | None = None,
        handler: Handler | None = None,
        category: str | None = None,
    ) -> CommandDefinition:
        """Add a command owned by this plugin, in the plugin's category unless `category` is given."""
        return registry.add(
            name,
            options if options is not None else OptionSpec(),
            description,
            category=category or self.category,
            handler=handler,
            plugin=self.name,
        )

    def handle(self) -> PluginHandle:
        """Return the `PluginHandle` describing this plugin."""
        return PluginHandle.from_object(self)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name} {self.version}>"
