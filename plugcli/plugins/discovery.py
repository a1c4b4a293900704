"""Plugin discovery sources.

Every source exposes `discover() -> list[PluginHandle]`. Sources never
raise for a single broken plugin: the failure is logged and the plugin
skipped.
"""

from __future__ import annotations

import importlib
import inspect
import sys
from collections.abc import Iterable
from importlib import metadata
from pathlib import Path
from types import ModuleType
from typing import Any, Protocol

from ..constants import ENTRY_POINT_GROUP
from ..logging_setup import get_logger
from ..models import PluginLoadError
from . import PluginHandle

__all__ = [
    "ChainDiscovery",
    "Discovery",
    "EntryPointDiscovery",
    "ModuleDiscovery",
    "StaticDiscovery",
    "coerce_plugin",
]

# Module attributes looked up, in order, to find the plugin of a module
MODULE_ATTRIBUTES = ("plugin", "Plugin")


class Discovery(Protocol):  # pragma: no cover
    """Source of plugin handles."""

    def discover(self) -> list[PluginHandle]: ...


def coerce_plugin(obj: Any, name: str) -> PluginHandle:  # noqa: ANN401
    """Turn a loaded object into a `PluginHandle`.

    Accepted objects:
    - a `PluginHandle`
    - a module exposing `plugin` or `Plugin`
    - a plugin class (instantiated without arguments)
    - an object with a `register_commands` method
    - a plain function, called with the registry, named after `name`

    Args:
        obj: the loaded object
        name: fallback plugin name (entry point or module name)

    Raises:
        PluginLoadError: the object can't be used as a plugin
    """
    if isinstance(obj, PluginHandle):
        return obj
    if isinstance(obj, ModuleType):
        for attribute in MODULE_ATTRIBUTES:
            if hasattr(obj, attribute):
                return coerce_plugin(getattr(obj, attribute), name)
        msg = f"Module {obj.__name__} exposes neither `plugin` nor `Plugin`"
        raise PluginLoadError(msg)
    if inspect.isclass(obj):
        try:
            instance = obj()
        except Exception as e:
            msg = f"Can't instantiate {obj.__name__}: {e}"
            raise PluginLoadError(msg) from e
        return PluginHandle.from_object(instance, name)
    if hasattr(obj, "register_commands"):
        return PluginHandle.from_object(obj, name)
    if callable(obj):
        return PluginHandle(name=name, register_commands=obj, description=inspect.getdoc(obj))
    msg = f"{obj!r} can't be used as a plugin"
    raise PluginLoadError(msg)


class StaticDiscovery:
    """Fixed table of plugins."""

    def __init__(self, handles: Iterable[PluginHandle] = ()) -> None:
        self.handles = list(handles)

    def discover(self) -> list[PluginHandle]:
        return list(self.handles)


class EntryPointDiscovery:
    """Plugins published by installed distributions, sorted by entry point name."""

    def __init__(self, group: str = ENTRY_POINT_GROUP) -> None:
        self.group = group
        self.log = get_logger("plugcli.discovery")

    def discover(self) -> list[PluginHandle]:
        handles = []
        for entry_point in sorted(metadata.entry_points(group=self.group), key=lambda ep: ep.name):
            try:
                handles.append(coerce_plugin(entry_point.load(), entry_point.name))
            except (ImportError, AttributeError) as e:
                self.log.warning("Unable to load plugin entry point %s (%s): %s", entry_point.name, entry_point.value, e)
            except PluginLoadError as e:
                self.log.warning("Invalid plugin entry point %s: %s", entry_point.name, e)
        self.log.debug("Found %d plugins in entry point group %s", len(handles), self.group)
        return handles


class ModuleDiscovery:
    """Plugins exposed by importable modules.

    A module exposes its plugin as a `plugin` attribute (handle, instance
    or function) or a `Plugin` class.
    """

    def __init__(self, modules: Iterable[str], paths: Iterable[str | Path] = ()) -> None:
        """Create the source.

        Args:
            modules: dotted module names
            paths: directories added to the import path before importing
        """
        self.modules = list(modules)
        self.paths = [str(Path(path).expanduser()) for path in paths]
        self.log = get_logger("plugcli.discovery")

    def discover(self) -> list[PluginHandle]:
        for path in self.paths:
            if path not in sys.path:
                sys.path.append(path)
        handles = []
        for modname in self.modules:
            try:
                module = importlib.import_module(modname)
            except ImportError:
                self.log.exception("Unable to locate plugin module '%s'", modname)
                continue
            try:
                handles.append(coerce_plugin(module, modname.rsplit(".", 1)[-1]))
            except PluginLoadError as e:
                self.log.warning("Invalid plugin module %s: %s", modname, e)
        return handles


class ChainDiscovery:
    """Concatenation of sources, the first plugin found under a name wins."""

    def __init__(self, *sources: Discovery) -> None:
        self.sources = list(sources)
        self.log = get_logger("plugcli.discovery")

    def discover(self) -> list[PluginHandle]:
        handles: dict[str, PluginHandle] = {}
        for source in self.sources:
            for handle in source.discover():
                if handle.name in handles:
                    self.log.debug("Plugin %s found again in %s, ignored", handle.name, type(source).__name__)
                    continue
                handles[handle.name] = handle
        return list(handles.values())
