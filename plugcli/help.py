"""Structured help rendering for a single command.

Help is an ordered list of sections (usage line, option table, command
description, free text). `HelpLayout` collects the configuration,
`HelpRenderer` turns it into text for one command.
"""

from __future__ import annotations

import textwrap
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import Self, TextIO

from .constants import DEFAULT_DESC_PADDING, DEFAULT_HELP_WIDTH, DEFAULT_LEFT_PADDING
from .options import OptionSpec

__all__ = ["HelpLayout", "HelpRenderer", "HelpSection", "SectionKind", "normalize_line_endings"]


class SectionKind(StrEnum):
    """Kinds of help sections."""

    USAGE = "usage"
    OPTIONS = "options"
    DESCRIPTION = "description"
    CUSTOM = "custom"


@dataclass(frozen=True)
class HelpSection:
    """One help section: a kind, an optional heading and, for custom sections, text blocks."""

    kind: SectionKind
    heading: str | None = None
    lines: tuple[str, ...] = ()

    @classmethod
    def usage(cls, heading: str | None = "Usage") -> HelpSection:
        """Section holding the computed usage line."""
        return cls(SectionKind.USAGE, heading)

    @classmethod
    def options(cls, heading: str | None = "Options") -> HelpSection:
        """Section holding the option table."""
        return cls(SectionKind.OPTIONS, heading)

    @classmethod
    def description(cls, heading: str | None = "Description") -> HelpSection:
        """Section holding the command description."""
        return cls(SectionKind.DESCRIPTION, heading)

    @classmethod
    def custom(cls, heading: str | None, lines: Iterable[str] | None = None) -> HelpSection:
        """Free text section, each block may span several lines."""
        return cls(SectionKind.CUSTOM, heading, tuple(lines or ()))


def normalize_line_endings(text: str) -> str:
    """Convert CRLF and CR line endings to LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def _is_blank(text: str | None) -> bool:
    return text is None or not text.strip()


class HelpRenderer:
    """Renders the help of one command from an ordered list of sections."""

    def __init__(
        self,
        sections: Iterable[HelpSection] = (),
        width: int = DEFAULT_HELP_WIDTH,
        left_padding: int = DEFAULT_LEFT_PADDING,
        desc_padding: int = DEFAULT_DESC_PADDING,
    ) -> None:
        self.sections = tuple(sections)
        self.width = width
        self.left_padding = left_padding
        self.desc_padding = desc_padding

    def resolve_sections(self, description: str | None, has_options: bool) -> list[HelpSection]:
        """Compute the effective section list.

        - a usage section is prepended when none is configured
        - a description section is inserted second, only when *nothing* was
          configured and the description isn't blank
        - an options section is appended when there are options and none is configured

        Args:
            description: the command description
            has_options: True if the command has at least one option

        Returns:
            The sections to render, in order
        """
        kinds = {section.kind for section in self.sections}
        result = list(self.sections)
        if SectionKind.USAGE not in kinds:
            result.insert(0, HelpSection.usage("Usage"))
        if not self.sections and not _is_blank(description):
            result.insert(1, HelpSection.description("Description"))
        if has_options and SectionKind.OPTIONS not in kinds:
            result.append(HelpSection.options("Options"))
        return result

    def render(self, command: str | None, options: OptionSpec | None, description: str | None) -> str:
        """Return the help text of a command.

        Args:
            command: command name, used in the usage line
            options: the command's option schema
            description: the command's description

        Returns:
            The help text, sections separated by a blank line
        """
        options = options if options is not None else OptionSpec()
        command = command or ""
        blocks: list[list[str]] = []
        for section in self.resolve_sections(description, len(options) > 0):
            match section.kind:
                case SectionKind.USAGE:
                    lines = self._usage_lines(section.heading, command, options)
                case SectionKind.OPTIONS:
                    lines = self._options_lines(section.heading, options)
                case SectionKind.DESCRIPTION:
                    lines = self._description_lines(section.heading, description)
                case SectionKind.CUSTOM:
                    lines = self._custom_lines(section.heading, section.lines)
            if lines:
                blocks.append(lines)
        return "\n\n".join("\n".join(lines) for lines in blocks) + "\n" if blocks else ""

    def print_command_help(self, out: TextIO, command: str | None, options: OptionSpec | None, description: str | None) -> None:
        """Write the help text of a command to `out`."""
        out.write(self.render(command, options, description))
        out.flush()

    # Sections

    def _usage_lines(self, heading: str | None, command: str, options: OptionSpec) -> list[str]:
        if _is_blank(command):
            return []
        usage = options.usage(command)
        indent = " " * (len("usage: ") + len(command) + 1)
        wrapped = textwrap.wrap(usage, max(self.width - 2, 10), subsequent_indent=indent, break_on_hyphens=False)
        return self._heading(heading) + [f"  {line}" for line in wrapped]

    def _options_lines(self, heading: str | None, options: OptionSpec) -> list[str]:
        if not len(options):
            return []
        return self._heading(heading) + options.format_table(self.width, self.left_padding, self.desc_padding)

    def _description_lines(self, heading: str | None, description: str | None) -> list[str]:
        if _is_blank(description):
            return []
        return self._heading(heading) + self._multiline(description)  # type: ignore[arg-type]

    def _custom_lines(self, heading: str | None, blocks: tuple[str, ...]) -> list[str]:
        if _is_blank(heading) and all(_is_blank(block) for block in blocks):
            return []
        lines = self._heading(heading)
        for block in blocks:
            lines.extend(self._multiline(block))
        return lines

    def _heading(self, heading: str | None) -> list[str]:
        return [] if _is_blank(heading) else [f"{heading}:"]

    def _multiline(self, text: str) -> list[str]:
        lines: list[str] = []
        for line in normalize_line_endings(text).split("\n"):
            if not line.strip():
                lines.append("")
            else:
                lines.extend(textwrap.wrap(f"  {line}", self.width))
        return lines


class HelpLayout:
    """Mutable help configuration, materialized into a `HelpRenderer` with `build`.

    Width and paddings left unset keep the renderer defaults.
    """

    def __init__(self) -> None:
        self._sections: list[HelpSection] = []
        self._width: int | None = None
        self._left_padding: int | None = None
        self._desc_padding: int | None = None

    def width(self, value: int) -> Self:
        self._width = value
        return self

    def left_padding(self, value: int) -> Self:
        self._left_padding = value
        return self

    def desc_padding(self, value: int) -> Self:
        self._desc_padding = value
        return self

    def add_usage_section(self, heading: str | None = "Usage") -> Self:
        self._sections.append(HelpSection.usage(heading))
        return self

    def add_options_section(self, heading: str | None = "Options") -> Self:
        self._sections.append(HelpSection.options(heading))
        return self

    def add_description_section(self, heading: str | None = "Description") -> Self:
        self._sections.append(HelpSection.description(heading))
        return self

    def add_custom_section(self, heading: str | None, lines: Iterable[str]) -> Self:
        """Add free text, each element of `lines` may contain newlines."""
        self._sections.append(HelpSection.custom(heading, lines))
        return self

    def clear_sections(self) -> Self:
        self._sections.clear()
        return self

    def has_sections(self) -> bool:
        return bool(self._sections)

    @property
    def sections(self) -> tuple[HelpSection, ...]:
        return tuple(self._sections)

    def merge_from(self, other: HelpLayout | None) -> Self:
        """Take every setting `other` defines; its sections replace ours if it has any."""
        if other is None:
            return self
        if other._width is not None:
            self._width = other._width
        if other._left_padding is not None:
            self._left_padding = other._left_padding
        if other._desc_padding is not None:
            self._desc_padding = other._desc_padding
        if other._sections:
            self._sections = list(other._sections)
        return self

    def copy(self) -> HelpLayout:
        return HelpLayout().merge_from(self)

    def build(self) -> HelpRenderer:
        return HelpRenderer(
            self._sections,
            width=DEFAULT_HELP_WIDTH if self._width is None else self._width,
            left_padding=DEFAULT_LEFT_PADDING if self._left_padding is None else self._left_padding,
            desc_padding=DEFAULT_DESC_PADDING if self._desc_padding is None else self._desc_padding,
        )
