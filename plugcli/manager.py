"""Plugin manager - loads and unloads plugin command sets."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from .command_registry import CommandRegistry
from .logging_setup import get_logger
from .models import DuplicatePluginError
from .plugins import PluginHandle
from .plugins.discovery import Discovery, EntryPointDiscovery

__all__ = ["PluginManager"]


class PluginManager:
    """Tracks the loaded plugins of one registry.

    A plugin is loaded at most once. Unloading a plugin removes it together
    with every command it owns.
    """

    def __init__(
        self,
        registry: CommandRegistry,
        discovery: Discovery | None = None,
        disabled: Iterable[str] = (),
    ) -> None:
        """Create the manager.

        Args:
            registry: the registry plugins add their commands to
            discovery: where `discover` looks, defaults to the entry points
            disabled: names of plugins `load_discovered` never loads
        """
        self.registry = registry
        self.discovery: Discovery = discovery if discovery is not None else EntryPointDiscovery()
        self.disabled = set(disabled)
        self._loaded: dict[str, PluginHandle] = {}
        self.log = get_logger("plugcli.manager")

    def discover(self) -> list[PluginHandle]:
        """Return the plugins available from the discovery source."""
        handles = self.discovery.discover()
        self.log.debug("Discovered plugins: %s", ", ".join(handle.name for handle in handles) or "none")
        return handles

    def load_discovered(self) -> int:
        """Load every discovered plugin that isn't loaded yet.

        Disabled plugins are skipped.

        Returns:
            The number of newly loaded plugins
        """
        count = 0
        for handle in self.discover():
            if handle.name in self._loaded:
                continue
            if handle.name in self.disabled:
                self.log.info("Skipping disabled plugin %s", handle.name)
                continue
            self.load_plugin(handle)
            count += 1
        return count

    def load_plugin(self, handle: PluginHandle) -> None:
        """Register the commands of a plugin and record it as loaded.

        When `register_commands` fails the plugin isn't recorded, but the
        commands it added before failing stay in the registry.

        Raises:
            DuplicatePluginError: a plugin with the same name is already loaded
        """
        if handle.name in self._loaded:
            raise DuplicatePluginError(handle.name)
        try:
            handle.register_commands(self.registry)
        except Exception:
            leftovers = self.registry.plugin_commands(handle.name)
            self.log.warning(
                "Plugin %s failed to register its commands, %d command(s) left behind: %s",
                handle.name,
                len(leftovers),
                ", ".join(leftovers),
            )
            raise
        self._loaded[handle.name] = handle
        self.log.debug("Loaded plugin %s %s", handle.name, handle.version)

    def unload_plugin(self, name: str) -> PluginHandle | None:
        """Forget a plugin and remove its commands.

        Returns:
            The unloaded plugin, None if it wasn't loaded
        """
        handle = self._loaded.pop(name, None)
        if handle is None:
            return None
        removed = self.registry.remove_commands_by_plugin(name)
        self.log.debug("Unloaded plugin %s (%d commands removed)", name, removed)
        return handle

    def reload_plugin(self, name: str) -> bool:
        """Unload then load again a plugin, using the same handle.

        Returns:
            False if the plugin wasn't loaded
        """
        handle = self.unload_plugin(name)
        if handle is None:
            return False
        self.load_plugin(handle)
        return True

    @property
    def loaded_plugins(self) -> Mapping[str, PluginHandle]:
        """Read-only view of the loaded plugins, in loading order."""
        return MappingProxyType(self._loaded)

    def get_plugin(self, name: str) -> PluginHandle | None:
        return self._loaded.get(name)

    def count(self) -> int:
        return len(self._loaded)

    def __len__(self) -> int:
        return len(self._loaded)

    def __contains__(self, name: object) -> bool:
        return name in self._loaded
