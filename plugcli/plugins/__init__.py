"""Plugin contract.

A plugin is whatever can be turned into a `PluginHandle`: a name, an
optional version and description, and a callback adding the plugin's
commands to a registry. Class-based plugins derive from
`plugcli.plugins.interface.Plugin`, discovery sources live in
`plugcli.plugins.discovery`.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..constants import UNKNOWN_VERSION
from ..models import PluginLoadError

if TYPE_CHECKING:
    from ..command_registry import CommandRegistry

__all__ = ["PluginHandle"]


@dataclass(frozen=True)
class PluginHandle:
    """Loadable unit of commands.

    Attributes:
        name: unique plugin name, commands registered by the plugin are tagged with it
        register_commands: adds the plugin's commands to the given registry
        version: free form version string
        description: one line description, defaults to "<name> CLI plugin"
    """

    name: str
    register_commands: Callable[[CommandRegistry], None]
    version: str = UNKNOWN_VERSION
    description: str | None = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            msg = "Plugin name must not be empty"
            raise ValueError(msg)
        if not self.description:
            object.__setattr__(self, "description", f"{self.name} CLI plugin")

    @classmethod
    def from_object(cls, obj: Any, name: str | None = None) -> PluginHandle:  # noqa: ANN401
        """Adapt a class-style plugin instance.

        Args:
            obj: object with a `name` attribute and a `register_commands` method,
                `version` and `description` are optional
            name: name used when the object doesn't provide one

        Raises:
            PluginLoadError: the object has no `register_commands` method or no name
        """
        register = getattr(obj, "register_commands", None)
        if not callable(register):
            msg = f"{obj!r} has no register_commands method"
            raise PluginLoadError(msg)
        plugin_name = getattr(obj, "name", None) or name
        if not plugin_name:
            msg = f"{obj!r} has no name"
            raise PluginLoadError(msg)
        return cls(
            name=plugin_name,
            register_commands=register,
            version=str(getattr(obj, "version", None) or UNKNOWN_VERSION),
            description=getattr(obj, "description", None),
        )
