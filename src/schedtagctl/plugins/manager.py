"""Plugin discovery and registry bring-up.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints.
Capabilities: contribute standalone and virtual resource-type handles.
"""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING

import pluggy

from schedtagctl.domain.registry import ResourceTypeHandle, ResourceTypeRegistry
from schedtagctl.plugins.hookspecs import SchedtagHookSpec

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from schedtagctl.config.models import RegistryConfig

PROJECT_NAME = "schedtagctl"
ENTRYPOINT_GROUP = "schedtagctl.plugins"

logger = logging.getLogger(__name__)

_ROLE_HOOKS = {
    "standalone": "standalone_resource_types",
    "virtual": "virtual_resource_types",
}


class PluginManager:
    """Manages plugin discovery, loading, and registry construction."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(SchedtagHookSpec)

    def discover_and_load(self) -> list[str]:
        """Load plugins from the ``schedtagctl.plugins`` entry point group.

        Returns a list of loaded plugin names.
        """
        self._pm.load_setuptools_entrypoints(ENTRYPOINT_GROUP)
        self._normalize_plugin_instances()
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly (e.g. built-in plugins)."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def list_plugin_names(self) -> list[str]:
        """Names of registered plugins, in registration order."""
        return [name for name, plugin in self._pm.list_name_plugin() if plugin is not None]

    def build_registry(self, engine: Engine, config: RegistryConfig) -> ResourceTypeRegistry:
        """Collect handles from every plugin, bind them, and freeze the registry.

        Plugins are consulted in registration order, so a later plugin's
        handle replaces an earlier one for the same keyword. A plugin that
        raises or returns something other than handles is skipped with a
        warning.
        """
        registry = ResourceTypeRegistry()
        for name, plugin in self._pm.list_name_plugin():
            if plugin is None:
                continue
            for role, hook_name in _ROLE_HOOKS.items():
                handles = self._collect(plugin, name, hook_name, engine, config)
                if role == "standalone":
                    registry.bind_standalone(*handles)
                else:
                    registry.bind_virtual(*handles)
        registry.freeze()
        logger.debug(
            "Registry frozen: standalone=%s virtual=%s",
            sorted(registry.standalone),
            sorted(registry.virtual),
        )
        return registry

    @staticmethod
    def _collect(
        plugin: object,
        plugin_name: str,
        hook_name: str,
        engine: Engine,
        config: RegistryConfig,
    ) -> list[ResourceTypeHandle]:
        hook = getattr(plugin, hook_name, None)
        if hook is None:
            return []
        try:
            handles = hook(engine=engine, config=config)
        except Exception:
            logger.warning(
                "Plugin %s failed in %s", plugin_name, hook_name, exc_info=True
            )
            return []
        if handles is None:
            return []
        if not isinstance(handles, (list, tuple)):
            logger.warning("Plugin %s returned non-list from %s", plugin_name, hook_name)
            return []

        valid: list[ResourceTypeHandle] = []
        for handle in handles:
            if not isinstance(handle, ResourceTypeHandle):
                logger.warning(
                    "Plugin %s returned a non-handle from %s: %r",
                    plugin_name,
                    hook_name,
                    handle,
                )
                continue
            valid.append(handle)
        return valid

    def _normalize_plugin_instances(self) -> None:
        """Replace registered plugin classes with instantiated objects.

        Entry-point loading may register a plugin class directly; hooks on
        a class object would be called unbound.
        """
        for plugin_name, plugin in list(self._pm.list_name_plugin()):
            if not inspect.isclass(plugin):
                continue
            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception:
                logger.warning(
                    "Failed to instantiate entry-point plugin %s",
                    plugin_name,
                    exc_info=True,
                )
                continue
            self._pm.register(instance, name=plugin_name)
            logger.debug("Instantiated entry-point plugin: %s", plugin_name)
