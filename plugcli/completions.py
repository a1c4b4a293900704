"""Shell completion scripts for the registered commands, generated with shtab."""

from __future__ import annotations

import argparse
from typing import TYPE_CHECKING

import shtab

from .constants import SUPPORTED_SHELLS

if TYPE_CHECKING:
    from .command_registry import CommandRegistry

__all__ = ["build_parser", "generate"]


def build_parser(registry: CommandRegistry, prog: str) -> argparse.ArgumentParser:
    """Mirror the registry as an argparse tree: one subparser per command.

    The parser only describes the command line, it is never used to parse.
    """
    parser = argparse.ArgumentParser(prog=prog, add_help=False, allow_abbrev=False)
    for option in registry.universal_options:
        parser.add_argument(*option.flags, help=option.help or None, action="store_true")
    subparsers = parser.add_subparsers(dest="command")
    for name in sorted(registry.commands):
        definition = registry.commands[name]
        subparser = subparsers.add_parser(name, help=definition.summary or None, add_help=False)
        definition.options.add_arguments(subparser)
    return parser


def generate(registry: CommandRegistry, shell: str, prog: str) -> str:
    """Return the completion script of `prog` for `shell`.

    Raises:
        ValueError: the shell isn't supported
    """
    if shell not in SUPPORTED_SHELLS:
        msg = f"Unsupported shell {shell!r}, choose one of: {', '.join(SUPPORTED_SHELLS)}"
        raise ValueError(msg)
    return shtab.complete(build_parser(registry, prog), shell=shell)
