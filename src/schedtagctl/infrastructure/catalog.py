"""Catalog: the single dependency injected into every service.

The Catalog owns the database engine, the repositories, and the resource
type registry. Construction is the bring-up phase: the database is
initialized, plugins contribute their handles, and the registry is frozen
before any service can use it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from schedtagctl.infrastructure.database.engine import init_database
from schedtagctl.infrastructure.repositories.inventory import ResourceRepository
from schedtagctl.infrastructure.repositories.rules import RuleRepository, TagRepository

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from schedtagctl.config.settings import SchedtagSettings
    from schedtagctl.domain.registry import ResourceTypeRegistry
    from schedtagctl.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class Catalog:
    """Engine, repositories, and the frozen resource type registry."""

    def __init__(
        self,
        settings: SchedtagSettings,
        *,
        plugins: PluginManager | None = None,
    ) -> None:
        self._settings = settings
        self._engine = init_database(settings.db_path)
        self.tags = TagRepository(self._engine)
        self.rules = RuleRepository(self._engine)
        self.resources = ResourceRepository(self._engine)

        if plugins is None:
            plugins = self._default_plugins(settings)
        self._plugins = plugins
        self._registry = plugins.build_registry(self._engine, settings.registry)
        logger.debug("Catalog ready at %s", settings.db_path)

    @staticmethod
    def _default_plugins(settings: SchedtagSettings) -> PluginManager:
        from schedtagctl.plugins.builtins.inventory import InventoryPlugin
        from schedtagctl.plugins.manager import PluginManager

        pm = PluginManager()
        pm.register_plugin(InventoryPlugin(), name="inventory")
        if settings.plugins.entrypoints:
            pm.discover_and_load()
        return pm

    @property
    def settings(self) -> SchedtagSettings:
        return self._settings

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def registry(self) -> ResourceTypeRegistry:
        return self._registry

    @property
    def plugins(self) -> PluginManager:
        return self._plugins

    def close(self) -> None:
        """Dispose the engine's connection pool."""
        self._engine.dispose()
