"""Pluggy hook specifications for resource-type registration.

Plugins contribute registry handles at bring-up, before the registry is
frozen. A handle for a keyword already bound replaces the earlier one.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from schedtagctl.config.models import RegistryConfig
    from schedtagctl.domain.registry import ResourceTypeHandle

hookspec = pluggy.HookspecMarker("schedtagctl")
hookimpl = pluggy.HookimplMarker("schedtagctl")


class SchedtagHookSpec:
    """Hook specifications for the schedtagctl plugin system."""

    @hookspec
    def standalone_resource_types(
        self,
        engine: Engine,
        config: RegistryConfig,
    ) -> list[ResourceTypeHandle] | None:
        """Return handles for resource types that receive tags (hosts, storage)."""

    @hookspec
    def virtual_resource_types(
        self,
        engine: Engine,
        config: RegistryConfig,
    ) -> list[ResourceTypeHandle] | None:
        """Return handles for resource types placed onto standalone resources."""
