"""Tests for the application: dispatch, built-in commands and configuration."""

from io import StringIO

import pytest

from plugcli.app import Application, main, use_param
from plugcli.models import ExitCode
from plugcli.options import OptionSpec
from plugcli.plugins.discovery import ChainDiscovery, EntryPointDiscovery, StaticDiscovery
from plugcli.plugins.interface import Plugin


class Greeter(Plugin):
    "Test plugin recording greetings"

    name = "greeter"
    version = "1.2"
    category = "Greetings"

    def __init__(self):
        super().__init__()
        self.greeted = []

    def register_commands(self, registry):
        registry.set_category_description(self.category, "Say hello")
        options = OptionSpec().add("n", "name", "Who to greet", takes_value=True, required=True).add("s", "shout", "Use capitals")
        self.add_command(registry, "greet", options, "Print a greeting\nThe name is mandatory.", self.run_greet)
        self.add_command(registry, "boom", None, "Always fails", self.run_boom)

    def run_greet(self, parsed):
        self.greeted.append(parsed.get("name"))

    def run_boom(self, _parsed):
        raise RuntimeError("boom")


@pytest.fixture
def greeter():
    return Greeter()


@pytest.fixture
def app(greeter):
    application = Application(
        "app",
        synopsis="app <command> [options]",
        discovery=StaticDiscovery([greeter.handle()]),
        stdout=StringIO(),
        stderr=StringIO(),
    )
    assert application.load_plugins() == 1
    return application


def test_builtins(app):
    for name in ("help", "plugins", "completions"):
        assert app.registry.get_command(name).category == "Builtins"
        assert app.registry.get_command(name).plugin is None


def test_no_arguments(app):
    assert app.run([]) == ExitCode.USAGE_ERROR
    out = app.stdout.getvalue()
    assert out.startswith("\n## Usage\n\napp <command> [options]\n")
    assert "## Builtins" in out
    assert "## Greetings\n\nSay hello\nboom            Always fails\ngreet           Print a greeting\n" in out


def test_run_command(app, greeter):
    assert app.run(["greet", "-n", "Bob"]) == ExitCode.SUCCESS
    assert greeter.greeted == ["Bob"]


def test_command_help(app, greeter):
    assert app.run(["greet", "--help"]) == ExitCode.SUCCESS
    assert app.stdout.getvalue().startswith("Usage:\n  usage: greet -n <arg> [-s]\n")
    assert greeter.greeted == []


def test_parse_error(app):
    assert app.run(["greet"]) == ExitCode.USAGE_ERROR
    err = app.stderr.getvalue()
    assert "the following arguments are required: -n/--name" in err
    assert "usage: greet -n <arg> [-s]" in err
    assert app.stdout.getvalue() == ""


def test_unknown_command(app):
    assert app.run(["nope"]) == ExitCode.USAGE_ERROR
    err = app.stderr.getvalue()
    assert err.startswith("Unknown command: nope\n")
    assert "## Builtins" in err


def test_unknown_command_with_bad_option(app):
    assert app.run(["nope", "--bogus"]) == ExitCode.USAGE_ERROR
    err = app.stderr.getvalue()
    assert "Unrecognized option: --bogus" in err
    assert "## Usage" in err


def test_unknown_command_help(app):
    assert app.run(["nope", "-h"]) == ExitCode.SUCCESS
    assert "## Greetings" in app.stdout.getvalue()


def test_failing_command(app):
    assert app.run(["boom"]) == ExitCode.COMMAND_ERROR


def test_help_command(app):
    assert app.run(["help"]) == ExitCode.SUCCESS
    assert "## Usage" in app.stdout.getvalue()


def test_help_command_with_name(app):
    assert app.run(["help", "greet"]) == ExitCode.SUCCESS
    assert "usage: greet -n <arg> [-s]" in app.stdout.getvalue()
    assert app.run(["help", "zzz"]) == ExitCode.COMMAND_ERROR


def test_plugins_command(app):
    assert app.run(["plugins"]) == ExitCode.SUCCESS
    assert app.stdout.getvalue() == "greeter         1.2       greeter CLI plugin\n"


def test_plugins_command_without_plugins():
    application = Application("app", discovery=StaticDiscovery(), stdout=StringIO())
    assert application.run(["plugins"]) == ExitCode.SUCCESS
    assert application.stdout.getvalue() == "No plugin loaded\n"


def test_completions_command(app):
    assert app.run(["completions", "bash"]) == ExitCode.SUCCESS
    assert "greet" in app.stdout.getvalue()
    assert app.run(["completions"]) == ExitCode.COMMAND_ERROR
    assert app.run(["completions", "fish"]) == ExitCode.COMMAND_ERROR


def test_default_synopsis():
    assert Application("tool", discovery=StaticDiscovery()).synopsis == "tool <command> [options]"


def test_help_config():
    application = Application("app", config={"help": {"width": 40, "left_padding": 0}}, discovery=StaticDiscovery())
    renderer = application.registry.help_layout.build()
    assert (renderer.width, renderer.left_padding, renderer.desc_padding) == (40, 0, 2)


@pytest.mark.parametrize("width", [0, -5, "wide"])
def test_invalid_help_width(width):
    stdout = StringIO()
    application = Application("app", config={"help": {"width": width}}, discovery=StaticDiscovery(), stdout=stdout, stderr=StringIO())
    assert application.registry.help_layout.build().width == 100
    assert application.run(["help", "help"]) == ExitCode.SUCCESS
    assert application.run(["plugins", "--help"]) == ExitCode.SUCCESS
    assert "usage: plugins" in stdout.getvalue()


def test_disabled_plugins(greeter):
    application = Application("app", config={"plugins": {"disabled": ["greeter"]}}, discovery=StaticDiscovery([greeter.handle()]))
    assert application.load_plugins() == 0
    assert not application.registry.has_command("greet")


def test_discovery_from_config():
    application = Application("app", config={"plugins": {"modules": ["a.b"], "entry_point_group": "my.group"}})
    discovery = application.plugins.discovery
    assert isinstance(discovery, ChainDiscovery)
    assert discovery.sources[0].modules == ["a.b"]
    assert discovery.sources[1].group == "my.group"
    assert isinstance(Application("app").plugins.discovery, EntryPointDiscovery)


def test_from_config(tmp_path, sample_extension):
    config = tmp_path / "config.toml"
    config.write_text(f'[plugins]\nmodules = ["plugcli_examples.greeter"]\nplugins_paths = ["{sample_extension}"]\n', encoding="utf-8")
    application = Application.from_config("app", str(config))
    application.plugins.discovery.sources[1].group = "plugcli.tests.none"
    assert application.load_plugins() == 1
    assert application.registry.get_command("greet").plugin == "greeter"


def test_use_param():
    args = ["--config", "x.toml", "status", "--debug"]
    assert use_param(args, "--config") == "x.toml"
    assert args == ["status", "--debug"]
    assert use_param(args, "--debug") == ""
    assert args == ["status"]
    assert use_param(args, "--missing") == ""


def test_main(tmp_path, mocker, capsys):
    mocker.patch("plugcli.app.init_logger")
    mocker.patch("plugcli.plugins.discovery.metadata.entry_points", return_value=[])
    config = tmp_path / "config.toml"
    config.write_text("[help]\nwidth = 80\n", encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        main(["--config", str(config), "plugins"])
    assert exc.value.code == ExitCode.SUCCESS
    assert "No plugin loaded" in capsys.readouterr().out


def test_main_bad_config(tmp_path, mocker):
    mocker.patch("plugcli.app.init_logger")
    config = tmp_path / "config.toml"
    config.write_text("[help", encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        main(["--config", str(config), "plugins"])
    assert exc.value.code == ExitCode.CONFIG_ERROR
