"""plugcli application - wires the registry, the plugins and the built-in commands."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import Any, TextIO

from .command_registry import CommandRegistry, pad_command_name
from .completions import generate
from .config import get_section, load_config, validate_config
from .constants import DEFAULT_DESC_PADDING, DEFAULT_HELP_WIDTH, DEFAULT_LEFT_PADDING, ENTRY_POINT_GROUP, SUPPORTED_SHELLS
from .help import HelpLayout
from .logging_setup import get_logger, init_logger, is_debug
from .manager import PluginManager
from .models import ExitCode, ParseError, PlugcliError
from .options import OptionSpec, ParsedArguments
from .plugins.discovery import ChainDiscovery, Discovery, EntryPointDiscovery, ModuleDiscovery

__all__ = ["BUILTINS_CATEGORY", "Application", "main"]

BUILTINS_CATEGORY = "Builtins"


class Application:  # pylint: disable=too-many-instance-attributes
    """A subcommand-style CLI: one registry, one plugin manager, no globals."""

    def __init__(  # pylint: disable=too-many-arguments
        self,
        prog: str,
        synopsis: str | None = None,
        config: dict[str, Any] | None = None,
        discovery: Discovery | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        """Create the application.

        Args:
            prog: program name
            synopsis: usage line shown on top of the command list
            config: raw configuration (see `plugcli.config`)
            discovery: plugin source, built from the configuration when not set
            stdout: output stream, defaults to sys.stdout
            stderr: error stream, defaults to sys.stderr
        """
        self.prog = prog
        self.synopsis = synopsis or f"{prog} <command> [options]"
        self.config = config or {}
        self._stdout = stdout
        self._stderr = stderr
        self.log = get_logger("plugcli.app")

        validate_config(self.config, self.log)
        help_conf = get_section(self.config, "help", self.log)
        plugins_conf = get_section(self.config, "plugins", self.log)

        layout = (
            HelpLayout()
            .width(help_conf.get_int("width", DEFAULT_HELP_WIDTH))
            .left_padding(help_conf.get_int("left_padding", DEFAULT_LEFT_PADDING))
            .desc_padding(help_conf.get_int("desc_padding", DEFAULT_DESC_PADDING))
        )
        self.registry = CommandRegistry(help_layout=layout)
        if discovery is None:
            entry_points = EntryPointDiscovery(plugins_conf.get_str("entry_point_group", ENTRY_POINT_GROUP))
            modules = plugins_conf.get_list("modules")
            if modules:
                discovery = ChainDiscovery(ModuleDiscovery(modules, plugins_conf.get_list("plugins_paths")), entry_points)
            else:
                discovery = entry_points
        self.plugins = PluginManager(self.registry, discovery, disabled=plugins_conf.get_list("disabled"))
        self._register_builtins()

    @classmethod
    def from_config(cls, prog: str, path: str | None = None, synopsis: str | None = None) -> Application:
        """Create the application from the configuration file.

        Raises:
            ConfigError: the configuration file is invalid
        """
        return cls(prog, synopsis, config=load_config(path))

    @property
    def stdout(self) -> TextIO:
        return self._stdout or sys.stdout

    @property
    def stderr(self) -> TextIO:
        return self._stderr or sys.stderr

    def load_plugins(self) -> int:
        """Load the discovered plugins, returns the number of newly loaded plugins."""
        return self.plugins.load_discovered()

    def run(self, argv: Sequence[str]) -> ExitCode:
        """Run the command line `argv` (without the program name).

        Returns:
            The exit code
        """
        registry = self.registry
        if not argv:
            registry.print_command_list(self.synopsis, file=self.stdout)
            return ExitCode.USAGE_ERROR

        try:
            parsed = registry.parse(argv)
        except ParseError as e:
            if registry.help_requested:
                self.show_help(registry.given_command)
                return ExitCode.SUCCESS
            print(e, file=self.stderr)
            self.show_help(registry.given_command, file=self.stderr)
            return ExitCode.USAGE_ERROR

        command = registry.given_command
        if registry.help_requested:
            self.show_help(command)
            return ExitCode.SUCCESS
        if command is None or not registry.has_command(command):
            print(f"Unknown command: {command}", file=self.stderr)
            registry.print_command_list(self.synopsis, file=self.stderr)
            return ExitCode.USAGE_ERROR

        try:
            registry.execute(command, parsed)
        except Exception as e:  # pylint: disable=broad-except
            self.log.error("Command %s failed: %s", command, e, exc_info=is_debug())
            return ExitCode.COMMAND_ERROR
        return ExitCode.SUCCESS

    def show_help(self, command: str | None, file: TextIO | None = None) -> None:
        """Print the help of `command`, or the command list when it is unknown."""
        out = file or self.stdout
        if command is not None and self.registry.has_command(command):
            self.registry.print_command_help(command, file=out)
        else:
            self.registry.print_command_list(self.synopsis, file=out)

    # Built-in commands

    def _register_builtins(self) -> None:
        self.registry.add(
            "help",
            OptionSpec(),
            "Show the command list, or the help of the given command\nUsage: help [command]",
            category=BUILTINS_CATEGORY,
            handler=self.cmd_help,
        )
        self.registry.add(
            "plugins",
            OptionSpec(),
            "List the loaded plugins",
            category=BUILTINS_CATEGORY,
            handler=self.cmd_plugins,
        )
        self.registry.add(
            "completions",
            OptionSpec(),
            f"Print the shell completion script\nUsage: completions <{'|'.join(SUPPORTED_SHELLS)}>",
            category=BUILTINS_CATEGORY,
            handler=self.cmd_completions,
        )

    def cmd_help(self, parsed: ParsedArguments) -> None:
        """[command] Show the command list, or the help of a command."""
        if not parsed.args:
            self.registry.print_command_list(self.synopsis, file=self.stdout)
            return
        name = parsed.args[0]
        if not self.registry.has_command(name):
            msg = f"Unknown command: {name}"
            raise PlugcliError(msg)
        self.registry.print_command_help(name, file=self.stdout)

    def cmd_plugins(self, _parsed: ParsedArguments) -> None:
        """List the loaded plugins with their version and description."""
        if not self.plugins.loaded_plugins:
            print("No plugin loaded", file=self.stdout)
            return
        for handle in self.plugins.loaded_plugins.values():
            print(f"{pad_command_name(handle.name)}{handle.version:<10}{handle.description}", file=self.stdout)

    def cmd_completions(self, parsed: ParsedArguments) -> None:
        """<shell> Print the completion script for bash, zsh or tcsh."""
        if not parsed.args:
            msg = f"Missing shell name, choose one of: {', '.join(SUPPORTED_SHELLS)}"
            raise PlugcliError(msg)
        self.stdout.write(generate(self.registry, parsed.args[0], self.prog))


def use_param(args: list[str], txt: str) -> str:
    """Check if parameter `txt` is in `args`.

    if found, removes it from `args` & returns the argument value
    """
    v = ""
    if txt in args:
        i = args.index(txt)
        if i + 1 < len(args):
            v = args[i + 1]
        del args[i : i + 2]
    return v


def main(argv: Sequence[str] | None = None) -> None:
    """Run the plugcli command."""
    args = list(sys.argv[1:] if argv is None else argv)
    debug_flag = use_param(args, "--debug")
    if debug_flag:
        init_logger(filename=debug_flag, force_debug=True)
    else:
        init_logger()
    log = get_logger("startup")
    config_override = use_param(args, "--config")

    try:
        app = Application.from_config("plugcli", config_override or None)
        app.load_plugins()
    except PlugcliError as e:
        log.critical("%s", e)
        sys.exit(ExitCode.CONFIG_ERROR)
    except Exception:  # pylint: disable=broad-except
        log.critical("Unable to load the plugins:", exc_info=True)
        sys.exit(ExitCode.CONFIG_ERROR)
    sys.exit(app.run(args))


if __name__ == "__main__":
    main()
