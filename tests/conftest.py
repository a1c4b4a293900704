" generic fixtures "
import logging
import sys
from pathlib import Path

import pytest

from plugcli.command_registry import CommandRegistry
from plugcli.manager import PluginManager
from plugcli.options import OptionSpec
from plugcli.plugins.discovery import StaticDiscovery

SAMPLE_EXTENSION = Path(__file__).parent.parent / "sample_extension"


def pytest_configure():
    "Runs once before all"
    from plugcli.logging_setup import init_logger

    init_logger("/dev/null", force_debug=True)


@pytest.fixture
def test_logger():
    "Logger for the configuration helpers"
    return logging.getLogger("plugcli.tests")


@pytest.fixture
def registry():
    "Empty registry"
    return CommandRegistry()


@pytest.fixture
def manager(registry):
    "Plugin manager bound to `registry`, discovering nothing"
    return PluginManager(registry, StaticDiscovery())


@pytest.fixture
def greet_options():
    "`-n/--name <arg>` (required) and `-s/--shout`"
    return OptionSpec().add("n", "name", "Who to greet", takes_value=True, required=True).add("s", "shout", "Use capitals")


@pytest.fixture
def sample_extension(monkeypatch):
    "Makes the sample plugins importable"
    monkeypatch.syspath_prepend(str(SAMPLE_EXTENSION))
    yield SAMPLE_EXTENSION
    for name in [mod for mod in sys.modules if mod.startswith("plugcli_examples")]:
        del sys.modules[name]
