"""Command registry - single source of truth for commands.

Holds every `CommandDefinition`, parses argument vectors against the
matching option schema, runs handlers and renders command listings.

The registry is an ordinary object owned by the application: no global
instance, no locking.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from types import MappingProxyType
from typing import TYPE_CHECKING, TextIO

from .constants import HELP_FLAGS, MIN_NAME_COLUMN, NAME_COLUMN_STEP, UNCATEGORIZED
from .help import HelpLayout, HelpRenderer
from .logging_setup import get_logger
from .models import CommandDefinition, Handler
from .options import Option, OptionSpec, ParsedArguments, as_tokens, help_option

if TYPE_CHECKING:
    from collections.abc import Mapping

__all__ = ["CommandRegistry", "pad_command_name"]


def pad_command_name(name: str) -> str:
    """Pad a command name for listings.

    Names shorter than 16 characters are padded to 16, longer ones to the
    next multiple of 4 (a name of 20 characters takes 24 columns).
    The width only depends on the name itself, rows are not aligned on
    the widest name.
    """
    if len(name) < MIN_NAME_COLUMN:
        return name.ljust(MIN_NAME_COLUMN)
    width = ((len(name) + NAME_COLUMN_STEP) // NAME_COLUMN_STEP) * NAME_COLUMN_STEP
    return name.ljust(width)


class CommandRegistry:
    """Registry of commands, dispatching parsing and execution."""

    def __init__(self, help_layout: HelpLayout | None = None) -> None:
        self._commands: dict[str, CommandDefinition] = {}
        self._category_descriptions: dict[str, str] = {}
        self.universal_options = OptionSpec(help_option())
        self.help_layout = help_layout
        self._given_command: str | None = None
        self._help_requested = False
        self.log = get_logger("plugcli.registry")

    # Registration

    def add_command(self, definition: CommandDefinition) -> None:
        """Insert or replace the command named `definition.name` (last write wins)."""
        previous = self._commands.get(definition.name)
        if previous is not None:
            self.log.debug("Command %s redefined (owner %s -> %s)", definition.name, previous.plugin, definition.plugin)
        self._commands[definition.name] = definition

    def add(  # pylint: disable=too-many-arguments
        self,
        name: str,
        options: OptionSpec | None = None,
        description: str | None = None,
        *,
        category: str | None = None,
        handler: Handler | None = None,
        plugin: str | None = None,
    ) -> CommandDefinition:
        """Build a `CommandDefinition` from the arguments and add it.

        Returns:
            The added definition
        """
        definition = CommandDefinition(
            name=name,
            options=OptionSpec() if options is None else options,
            description=description,
            category=category,
            handler=handler,
            plugin=plugin,
        )
        self.add_command(definition)
        return definition

    def remove_command(self, name: str) -> CommandDefinition | None:
        """Remove a command, returns the removed definition or None if it wasn't there."""
        return self._commands.pop(name, None)

    def remove_commands_by_plugin(self, plugin: str | None) -> int:
        """Remove every command owned by `plugin`.

        Returns:
            The number of removed commands (0 for an empty plugin name)
        """
        if not plugin:
            return 0
        names = self.plugin_commands(plugin)
        for name in names:
            del self._commands[name]
        return len(names)

    def plugin_commands(self, plugin: str) -> list[str]:
        """Names of the commands owned by `plugin`, sorted."""
        return sorted(name for name, definition in self._commands.items() if definition.plugin == plugin)

    def add_universal_option(self, option: Option) -> None:
        """Add an option understood when the command is unknown."""
        self.universal_options.add_option(option)

    def set_category_description(self, category: str, description: str) -> None:
        """Set the text shown under a category header (the category may have no command)."""
        self._category_descriptions[category] = description

    # Queries

    def has_command(self, name: str) -> bool:
        return name in self._commands

    def get_command(self, name: str) -> CommandDefinition | None:
        return self._commands.get(name)

    @property
    def commands(self) -> Mapping[str, CommandDefinition]:
        """Read-only view of the registered commands."""
        return MappingProxyType(self._commands)

    @property
    def category_descriptions(self) -> Mapping[str, str]:
        return MappingProxyType(self._category_descriptions)

    @property
    def given_command(self) -> str | None:
        """First token of the last non-empty argument vector given to `parse`."""
        return self._given_command

    @property
    def help_requested(self) -> bool:
        """True if the last non-empty argument vector given to `parse` contained -h or --help."""
        return self._help_requested

    def size(self) -> int:
        return len(self._commands)

    def __len__(self) -> int:
        return len(self._commands)

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    # Parsing & execution

    def parse(self, args: Sequence[str] | None) -> ParsedArguments | None:
        """Parse an argument vector, the first token being the command name.

        An empty vector returns None and leaves `given_command` and
        `help_requested` untouched.
        The help flag is recorded before parsing, so it is still set when
        parsing fails (eg: a required option is missing).
        Unknown commands are parsed against `universal_options`.

        Args:
            args: the argument vector

        Returns:
            The parsed arguments, or None if `args` is empty

        Raises:
            ParseError: the arguments don't match the option schema
        """
        tokens = as_tokens(args)
        if not tokens:
            return None

        self._help_requested = any(token in HELP_FLAGS for token in tokens)
        command = tokens[0]
        self._given_command = command

        definition = self._commands.get(command)
        options = definition.options if definition else self.universal_options
        return options.parse(tokens[1:], command=command)

    def execute(self, name: str, parsed: ParsedArguments | None) -> None:
        """Run the handler of a command, does nothing for unknown commands or commands without handler."""
        definition = self._commands.get(name)
        if definition is None or definition.handler is None:
            self.log.debug("Nothing to run for %s", name)
            return
        self.log.debug("Running %s%s", name, parsed.args if parsed else ())
        definition.handler(parsed)  # type: ignore[arg-type]

    # Help

    def get_help_renderer(self) -> HelpRenderer:
        """Renderer built from `help_layout`, or the default one."""
        if self.help_layout is not None:
            return self.help_layout.build()
        return HelpRenderer()

    def format_command_help(self, name: str) -> str | None:
        """Return the help of a command, None if the command doesn't exist."""
        definition = self._commands.get(name)
        if definition is None:
            return None
        return self.get_help_renderer().render(name, definition.options, definition.description)

    def print_command_help(self, name: str, file: TextIO | None = None) -> None:
        """Print the help of a command, nothing for unknown commands."""
        text = self.format_command_help(name)
        if text is None:
            return
        out = file or sys.stdout
        out.write(text)
        out.write("\n")

    def format_command_names(self, names: Sequence[str]) -> list[str]:
        """One listing row per name: padded name followed by the summary."""
        rows = []
        for name in names:
            definition = self._commands.get(name)
            summary = definition.summary if definition else ""
            rows.append(pad_command_name(name) + summary)
        return rows

    def format_command_list(self, synopsis: str) -> str:
        """Return the categorized list of commands.

        Categories are sorted by name, uncategorized commands come last,
        under "Commands" when there is no other category, else "Other Commands".
        """
        lines = ["", "## Usage", "", synopsis, ""]
        has_category = False
        for category, names in self._commands_by_category():
            if category == UNCATEGORIZED:
                title = "Other Commands" if has_category else "Commands"
            else:
                has_category = True
                title = category
            lines.extend(["", f"## {title}", ""])
            if category in self._category_descriptions:
                lines.append(self._category_descriptions[category])
            lines.extend(self.format_command_names(names))
            lines.append("")
        return "\n".join(lines) + "\n"

    def print_command_list(self, synopsis: str, file: TextIO | None = None) -> None:
        """Print the categorized list of commands."""
        (file or sys.stdout).write(self.format_command_list(synopsis))

    def _commands_by_category(self) -> list[tuple[str, list[str]]]:
        by_category: dict[str, list[str]] = {}
        for name, definition in self._commands.items():
            by_category.setdefault(definition.category, []).append(name)  # type: ignore[arg-type]
        return [(category, sorted(by_category[category])) for category in sorted(by_category, key=lambda c: (c == UNCATEGORIZED, c))]
