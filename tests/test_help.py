"""Tests for the help sections and renderer."""

from io import StringIO

from plugcli.help import HelpLayout, HelpRenderer, HelpSection, SectionKind, normalize_line_endings
from plugcli.options import OptionSpec


def kinds(sections):
    return [section.kind for section in sections]


class TestResolveSections:
    """Default sections insertion."""

    def test_nothing_configured(self):
        renderer = HelpRenderer()
        assert kinds(renderer.resolve_sections("desc", True)) == [SectionKind.USAGE, SectionKind.DESCRIPTION, SectionKind.OPTIONS]
        assert kinds(renderer.resolve_sections("  ", True)) == [SectionKind.USAGE, SectionKind.OPTIONS]
        assert kinds(renderer.resolve_sections(None, False)) == [SectionKind.USAGE]

    def test_configured_sections_are_kept(self):
        renderer = HelpRenderer([HelpSection.options("Flags"), HelpSection.usage("Synopsis")])
        sections = renderer.resolve_sections("desc", True)
        assert [s.heading for s in sections] == ["Flags", "Synopsis"]

    def test_no_description_when_configured(self):
        renderer = HelpRenderer([HelpSection.custom("Notes", ["x"])])
        assert kinds(renderer.resolve_sections("desc", False)) == [SectionKind.USAGE, SectionKind.CUSTOM]
        assert kinds(renderer.resolve_sections("desc", True)) == [SectionKind.USAGE, SectionKind.CUSTOM, SectionKind.OPTIONS]


class TestRender:
    """Rendered text."""

    def test_usage_only(self):
        assert HelpRenderer().render("status", OptionSpec(), None) == "Usage:\n  usage: status\n"

    def test_nothing_to_render(self):
        assert HelpRenderer().render("", OptionSpec(), "   ") == ""
        assert HelpRenderer().render(None, None, None) == ""

    def test_custom_section(self):
        renderer = HelpRenderer([HelpSection.usage(), HelpSection.custom("Notes", ["line1\r\nline2", "a\rb"])])
        assert renderer.render("cmd", OptionSpec(), "desc") == "Usage:\n  usage: cmd\n\nNotes:\n  line1\n  line2\n  a\n  b\n"

    def test_custom_section_without_heading(self):
        renderer = HelpRenderer([HelpSection.custom(None, ["first\n\nsecond"])])
        assert renderer.render("cmd", OptionSpec(), None) == "Usage:\n  usage: cmd\n\n  first\n\n  second\n"

    def test_blank_custom_section_is_skipped(self):
        renderer = HelpRenderer([HelpSection.custom(" ", ["", "  "])])
        assert renderer.render("cmd", OptionSpec(), None) == "Usage:\n  usage: cmd\n"

    def test_usage_without_heading(self):
        renderer = HelpRenderer([HelpSection.usage(None), HelpSection.description(None)])
        assert renderer.render("cmd", OptionSpec(), "Does things") == "  usage: cmd\n\n  Does things\n"

    def test_description_section_skipped_when_blank(self):
        renderer = HelpRenderer([HelpSection.usage(), HelpSection.description()])
        assert renderer.render("cmd", OptionSpec(), "") == "Usage:\n  usage: cmd\n"

    def test_description_wrapping(self):
        renderer = HelpRenderer(width=20)
        text = renderer.render("cmd", OptionSpec(), "one two three four five six seven")
        assert text == "Usage:\n  usage: cmd\n\nDescription:\n  one two three four\nfive six seven\n"

    def test_long_usage_is_wrapped(self, greet_options):
        for name in "abcdefghijklm":
            greet_options.add(name, f"opt-{name}", takes_value=True)
        text = HelpRenderer(width=40).render("greet", greet_options, None)
        usage_lines = text.split("\n\n")[0].split("\n")[1:]
        assert len(usage_lines) > 1
        assert usage_lines[0].startswith("  usage: greet ")
        assert all(len(line) <= 40 for line in usage_lines)

    def test_print_command_help(self, greet_options):
        out = StringIO()
        renderer = HelpRenderer()
        renderer.print_command_help(out, "greet", greet_options, "Greets")
        assert out.getvalue() == renderer.render("greet", greet_options, "Greets")


class TestLayout:
    """Fluent help configuration."""

    def test_build_defaults(self):
        renderer = HelpLayout().build()
        assert (renderer.width, renderer.left_padding, renderer.desc_padding) == (100, 4, 2)
        assert renderer.sections == ()

    def test_fluent_sections(self):
        layout = HelpLayout().add_usage_section().add_description_section("About").add_options_section().add_custom_section("See also", ["man"])
        assert layout.has_sections()
        assert [s.heading for s in layout.sections] == ["Usage", "About", "Options", "See also"]
        assert layout.sections[3].lines == ("man",)
        layout.clear_sections()
        assert not layout.has_sections()

    def test_merge_from(self):
        base = HelpLayout().width(80).left_padding(2).add_usage_section()
        other = HelpLayout().width(60)
        base.merge_from(other)
        renderer = base.build()
        assert (renderer.width, renderer.left_padding, renderer.desc_padding) == (60, 2, 2)
        assert kinds(renderer.sections) == [SectionKind.USAGE]

        base.merge_from(HelpLayout().add_options_section())
        assert kinds(base.sections) == [SectionKind.OPTIONS]
        assert base.merge_from(None) is base

    def test_copy_is_independent(self):
        layout = HelpLayout().desc_padding(5).add_usage_section()
        copy = layout.copy()
        copy.add_options_section().desc_padding(1)
        assert len(layout.sections) == 1
        assert layout.build().desc_padding == 5
        assert copy.build().desc_padding == 1


def test_normalize_line_endings():
    assert normalize_line_endings("a\r\nb\rc\n") == "a\nb\nc\n"
