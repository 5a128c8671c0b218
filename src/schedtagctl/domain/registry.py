"""Resource type registry: keyword -> live attribute provider.

Two independent mappings: *standalone* resource types (hosts, storage
pools) and *virtual* resource types (guests, disks placed on them). A
keyword may appear in both; lookups are always made in the mapping of the
role being evaluated.

INVARIANT: Bind during bring-up, then :meth:`ResourceTypeRegistry.freeze`.
After freezing the registry is read-only and safe to share across threads
without locking.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Protocol, runtime_checkable

from schedtagctl.domain.errors import RegistryFrozenError, ResourceTypeNotSupported

STANDALONE = "standalone"
VIRTUAL = "virtual"


@dataclass(frozen=True)
class ResourceRef:
    """A resolved resource instance."""

    keyword: str
    id: str
    name: str


@runtime_checkable
class ResourceTypeHandle(Protocol):
    """Contract every participating resource type implements."""

    @property
    def keyword(self) -> str: ...

    def lookup(self, id_or_name: str) -> ResourceRef | None:
        """Resolve *id_or_name* to a resource, or None if absent."""
        ...

    def snapshot(self, ref: ResourceRef) -> Mapping[str, Any]:
        """Flat field -> scalar mapping of the resource's current state."""
        ...


class ResourceTypeRegistry:
    """Standalone and virtual keyword -> handle mappings."""

    def __init__(self) -> None:
        self._standalone: dict[str, ResourceTypeHandle] = {}
        self._virtual: dict[str, ResourceTypeHandle] = {}
        self._frozen = False

    # ------------------------------------------------------------------
    # Bring-up
    # ------------------------------------------------------------------

    def bind_standalone(self, *handles: ResourceTypeHandle) -> None:
        """Bind handles by keyword; a later bind for a keyword replaces it."""
        self._bind(self._standalone, handles)

    def bind_virtual(self, *handles: ResourceTypeHandle) -> None:
        """Bind handles by keyword; a later bind for a keyword replaces it."""
        self._bind(self._virtual, handles)

    def _bind(
        self,
        store: dict[str, ResourceTypeHandle],
        handles: tuple[ResourceTypeHandle, ...],
    ) -> None:
        if self._frozen:
            msg = "Resource type registry is frozen; bind handles during bring-up"
            raise RegistryFrozenError(msg)
        for handle in handles:
            store[handle.keyword] = handle

    def freeze(self) -> None:
        """End bring-up. Further binds raise :class:`RegistryFrozenError`."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def resolve_standalone(self, keyword: str) -> ResourceTypeHandle | None:
        return self._standalone.get(keyword)

    def resolve_virtual(self, keyword: str) -> ResourceTypeHandle | None:
        return self._virtual.get(keyword)

    def require(self, keyword: str, role: str) -> ResourceTypeHandle:
        """Resolve *keyword* in the mapping for *role*.

        Raises:
            ResourceTypeNotSupported: If *keyword* is not bound for *role*.
        """
        store = self._standalone if role == STANDALONE else self._virtual
        handle = store.get(keyword)
        if handle is None:
            raise ResourceTypeNotSupported(keyword, role)
        return handle

    @property
    def standalone(self) -> Mapping[str, ResourceTypeHandle]:
        return MappingProxyType(self._standalone)

    @property
    def virtual(self) -> Mapping[str, ResourceTypeHandle]:
        return MappingProxyType(self._virtual)
