"""Built-in plugin serving the configured keywords from the inventory table."""

from __future__ import annotations

from typing import TYPE_CHECKING

from schedtagctl.infrastructure.repositories.inventory import InventoryHandle, ResourceRepository
from schedtagctl.plugins.hookspecs import hookimpl

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from schedtagctl.config.models import RegistryConfig


class InventoryPlugin:
    """Binds one :class:`InventoryHandle` per configured keyword."""

    @hookimpl
    def standalone_resource_types(
        self, engine: Engine, config: RegistryConfig
    ) -> list[InventoryHandle]:
        repository = ResourceRepository(engine)
        return [InventoryHandle(keyword, repository) for keyword in config.standalone]

    @hookimpl
    def virtual_resource_types(
        self, engine: Engine, config: RegistryConfig
    ) -> list[InventoryHandle]:
        repository = ResourceRepository(engine)
        return [InventoryHandle(keyword, repository) for keyword in config.virtual]
