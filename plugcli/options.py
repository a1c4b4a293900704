"""Option schemas, backed by argparse.

`OptionSpec` is the only thing the registry knows about option parsing:
it turns a list of tokens into `ParsedArguments` or raises `ParseError`.
It can also describe itself for help output (usage line and option table).
"""

from __future__ import annotations

import argparse
import re
import textwrap
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, NoReturn

from .models import ParseError

__all__ = ["Option", "OptionSpec", "ParsedArguments", "ParseError"]

_DEFAULT_METAVAR = "arg"
_NEGATIVE_NUMBER = re.compile(r"^-\d+$|^-\d*\.\d+$")


def _looks_like_option(token: str) -> bool:
    """Tell if a token left over by argparse is an unknown option ("-", "-5" and "-.5" are positionals)."""
    return token.startswith("-") and token != "-" and not _NEGATIVE_NUMBER.match(token)


class _OptionParser(argparse.ArgumentParser):
    """ArgumentParser raising `ParseError` instead of exiting."""

    def error(self, message: str) -> NoReturn:
        raise ParseError(message)


@dataclass(frozen=True)
class Option:  # pylint: disable=too-many-instance-attributes
    """One command line option.

    Attributes:
        short: short name without the dash ("n" for -n)
        long: long name without the dashes ("name" for --name)
        help: description shown in the option table
        takes_value: True if the option expects a value, False for flags
        required: the parser fails when a required option is missing
        metavar: value placeholder shown in help, defaults to "arg"
        default: value used when a value option is not given
    """

    short: str | None = None
    long: str | None = None
    help: str = ""
    takes_value: bool = False
    required: bool = False
    metavar: str | None = None
    default: Any = None

    def __post_init__(self) -> None:
        if not self.short and not self.long:
            msg = "An option needs a short or a long name"
            raise ValueError(msg)

    @property
    def key(self) -> str:
        """Name used to look the option up: long name if any, else short name."""
        return self.long or self.short  # type: ignore[return-value]

    @property
    def dest(self) -> str:
        """Attribute name in the parsed values."""
        return self.key.replace("-", "_")

    @property
    def flags(self) -> list[str]:
        """Option strings as typed on the command line."""
        flags = []
        if self.short:
            flags.append(f"-{self.short}")
        if self.long:
            flags.append(f"--{self.long}")
        return flags

    @property
    def value_hint(self) -> str:
        """Placeholder for the value, empty for flags."""
        return f"<{self.metavar or _DEFAULT_METAVAR}>" if self.takes_value else ""


@dataclass(frozen=True)
class ParsedArguments:
    """Result of parsing an argument vector against an `OptionSpec`.

    Values are reachable using the short name, the long name or the dest
    of an option: `parsed.get("n") == parsed.get("name")`.
    `given` holds the dests of the options present on the command line,
    `values` also holds the defaults of the others.
    """

    command: str | None
    values: Mapping[str, Any] = field(default_factory=dict)
    args: tuple[str, ...] = ()
    given: frozenset[str] = frozenset()
    aliases: Mapping[str, str] = field(default_factory=dict, repr=False)

    def _resolve(self, key: str) -> str:
        key = key.lstrip("-")
        return self.aliases.get(key, key.replace("-", "_"))

    def get(self, key: str, default: Any = None) -> Any:  # noqa: ANN401
        """Return the value of an option, or `default` when it wasn't given."""
        value = self.values.get(self._resolve(key))
        return default if value is None else value

    def has(self, key: str) -> bool:
        """Tell if the option was given on the command line."""
        return self._resolve(key) in self.given

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    def __getitem__(self, key: str) -> Any:  # noqa: ANN401
        dest = self._resolve(key)
        if dest not in self.values:
            raise KeyError(key)
        return self.values[dest]


class OptionSpec:
    """Ordered set of options for one command.

    Options are unique by flag: adding an option sharing the short or the
    long name of an existing one replaces it.
    """

    def __init__(self, *options: Option) -> None:
        self._options: list[Option] = []
        for option in options:
            self.add_option(option)

    def add_option(self, option: Option) -> OptionSpec:
        """Add (or replace) an option, returns self for chaining."""
        self._options = [
            opt for opt in self._options if not ((option.short and opt.short == option.short) or (option.long and opt.long == option.long))
        ]
        self._options.append(option)
        return self

    def add(  # pylint: disable=too-many-arguments
        self,
        short: str | None = None,
        long: str | None = None,
        help: str = "",  # noqa: A002  pylint: disable=redefined-builtin
        *,
        takes_value: bool = False,
        required: bool = False,
        metavar: str | None = None,
        default: Any = None,  # noqa: ANN401
    ) -> OptionSpec:
        """Build and add an `Option`, returns self for chaining."""
        return self.add_option(Option(short, long, help, takes_value, required, metavar, default))

    def get(self, name: str) -> Option | None:
        """Find an option by short or long name (dashes are ignored)."""
        name = name.lstrip("-")
        for option in self._options:
            if name in (option.short, option.long):
                return option
        return None

    def copy(self) -> OptionSpec:
        """Return an independent copy."""
        return OptionSpec(*self._options)

    def __iter__(self) -> Iterator[Option]:
        return iter(self._options)

    def __len__(self) -> int:
        return len(self._options)

    def __repr__(self) -> str:
        return f"OptionSpec({', '.join('/'.join(opt.flags) for opt in self._options)})"

    def sorted(self) -> list[Option]:
        """Options in display order (by name, case insensitive)."""
        return sorted(self._options, key=lambda opt: (opt.short or opt.long or "").lower())

    # Parsing

    def add_arguments(self, parser: argparse.ArgumentParser, with_defaults: bool = True) -> None:
        """Declare every option on an argparse parser.

        Without defaults, the parser falls back to its `argument_default`.
        """
        for option in self._options:
            kwargs: dict[str, Any] = {"dest": option.dest, "required": option.required, "help": option.help or None}
            if option.takes_value:
                kwargs["metavar"] = option.metavar or _DEFAULT_METAVAR
                if with_defaults:
                    kwargs["default"] = option.default
            else:
                kwargs["action"] = "store_true"
            parser.add_argument(*option.flags, **kwargs)

    def build_parser(self, prog: str | None = None) -> argparse.ArgumentParser:
        """Return an argparse parser raising `ParseError` on bad input."""
        parser = _OptionParser(prog=prog, add_help=False, allow_abbrev=False)
        self.add_arguments(parser)
        return parser

    def parse(self, tokens: Iterable[str], command: str | None = None) -> ParsedArguments:
        """Parse `tokens` (the arguments following the command name).

        Args:
            tokens: arguments to parse
            command: command name, stored in the result

        Returns:
            The parsed arguments, positional leftovers end up in `args`

        Raises:
            ParseError: unknown option, missing required option, missing value
        """
        # SUPPRESS keeps absent options out of the namespace
        parser = _OptionParser(prog=command, add_help=False, allow_abbrev=False, argument_default=argparse.SUPPRESS)
        self.add_arguments(parser, with_defaults=False)
        namespace, extras = parser.parse_known_args(list(tokens))
        unknown = [token for token in extras if _looks_like_option(token)]
        if unknown:
            msg = f"Unrecognized option: {' '.join(unknown)}"
            raise ParseError(msg)
        given = vars(namespace)
        values = {option.dest: option.default if option.takes_value else False for option in self._options}
        values.update(given)
        aliases: dict[str, str] = {}
        for option in self._options:
            for name in (option.short, option.long, option.dest):
                if name:
                    aliases[name] = option.dest
        return ParsedArguments(command=command, values=values, args=tuple(extras), given=frozenset(given), aliases=aliases)

    # Help

    def usage(self, command: str) -> str:
        """One-line synopsis: `usage: greet [-h] -n <arg>`."""
        parts = [f"usage: {command}"]
        for option in self.sorted():
            text = f"-{option.short}" if option.short else f"--{option.long}"
            if option.takes_value:
                text = f"{text} {option.value_hint}"
            parts.append(text if option.required else f"[{text}]")
        return " ".join(parts)

    def format_table(self, width: int, left_padding: int, desc_padding: int) -> list[str]:
        """Render the option table, one or more lines per option.

        Args:
            width: maximum line width
            left_padding: spaces before the flags column
            desc_padding: spaces between the flags and the description

        Returns:
            The table lines
        """
        rows: list[tuple[str, str]] = []
        for option in self.sorted():
            flags = f"-{option.short}" if option.short else "   "
            if option.long:
                flags = f"{flags},--{option.long}" if option.short else f"{flags}--{option.long}"
            if option.takes_value:
                flags = f"{flags} {option.value_hint}"
            rows.append((flags, option.help))
        if not rows:
            return []

        flags_width = max(len(flags) for flags, _ in rows)
        indent = left_padding + flags_width + desc_padding
        text_width = max(width - indent, 10)
        lines = []
        for flags, text in rows:
            head = " " * left_padding + flags.ljust(flags_width)
            wrapped = textwrap.wrap(text, text_width) if text else []
            if not wrapped:
                lines.append(head.rstrip())
                continue
            lines.append(head + " " * desc_padding + wrapped[0])
            lines.extend(" " * indent + line for line in wrapped[1:])
        return lines


def help_option() -> Option:
    """The `-h/--help` flag every universal option schema carries."""
    return Option("h", "help", "Print help message")


def as_tokens(args: Sequence[str] | None) -> list[str]:
    """Copy an argument vector into a list (None is an empty vector)."""
    return list(args) if args else []
