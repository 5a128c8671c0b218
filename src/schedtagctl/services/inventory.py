"""InventoryService: maintain the built-in resource inventory.

The inventory backs the default registry handles; its rows are what
``host.sys_load`` and friends resolve against.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from schedtagctl.services._helpers import new_id, now_iso
from schedtagctl.services.base import BaseService
from schedtagctl.services.result import ServiceResult

_SCALARS = (bool, int, float, str)


def _invalid_attributes(attributes: dict[str, Any]) -> list[str]:
    return [key for key, value in attributes.items() if not isinstance(value, _SCALARS)]


class InventoryService(BaseService):
    """Add, update, list, and remove inventory resources."""

    def _known_type(self, resource_type: str) -> bool:
        registry = self._catalog.registry
        return (
            registry.resolve_standalone(resource_type) is not None
            or registry.resolve_virtual(resource_type) is not None
        )

    def add_resource(
        self,
        resource_type: str,
        name: str,
        *,
        attributes: dict[str, Any] | None = None,
    ) -> ServiceResult:
        op = "add_resource"
        attributes = dict(attributes or {})
        bad = _invalid_attributes(attributes)
        if bad:
            return ServiceResult.failure(
                op, "INVALID_ATTRIBUTES", f"Non-scalar attribute values: {', '.join(bad)}"
            )
        now = now_iso()
        try:
            if self._catalog.resources.get(resource_type, name) is not None:
                return ServiceResult.failure(
                    op, "NAME_CONFLICT", f"{resource_type} {name!r} already exists"
                )
            row = self._catalog.resources.insert(
                {
                    "id": new_id(),
                    "resource_type": resource_type,
                    "name": name,
                    "attributes": attributes,
                    "created": now,
                    "modified": now,
                }
            )
        except SQLAlchemyError as exc:
            return self._store_failure(op, exc)

        warnings: list[str] = []
        if not self._known_type(resource_type):
            warnings.append(f"Resource type {resource_type!r} is not bound in the registry")
        return ServiceResult(ok=True, op=op, data=row, warnings=warnings)

    def update_resource(
        self,
        resource_type: str,
        resource: str,
        *,
        attributes: dict[str, Any],
        remove: list[str] | None = None,
    ) -> ServiceResult:
        """Merge *attributes* into a resource and drop the keys in *remove*."""
        op = "update_resource"
        bad = _invalid_attributes(attributes)
        if bad:
            return ServiceResult.failure(
                op, "INVALID_ATTRIBUTES", f"Non-scalar attribute values: {', '.join(bad)}"
            )
        try:
            row = self._catalog.resources.get(resource_type, resource)
            if row is None:
                return ServiceResult.failure(
                    op, "RESOURCE_NOT_FOUND", f"{resource_type} {resource} not found"
                )
            merged = {**row["attributes"], **attributes}
            for key in remove or []:
                merged.pop(key, None)
            modified = now_iso()
            self._catalog.resources.set_attributes(row["id"], merged, modified)
        except SQLAlchemyError as exc:
            return self._store_failure(op, exc)
        return ServiceResult(
            ok=True,
            op=op,
            data={**row, "attributes": merged, "modified": modified},
        )

    def list_resources(self, *, resource_type: str | None = None) -> ServiceResult:
        op = "list_resources"
        try:
            rows = self._catalog.resources.find(resource_type=resource_type)
        except SQLAlchemyError as exc:
            return self._store_failure(op, exc)
        return ServiceResult(ok=True, op=op, data={"items": rows, "count": len(rows)})

    def remove_resource(self, resource_type: str, resource: str) -> ServiceResult:
        op = "remove_resource"
        try:
            row = self._catalog.resources.get(resource_type, resource)
            if row is None:
                return ServiceResult.failure(
                    op, "RESOURCE_NOT_FOUND", f"{resource_type} {resource} not found"
                )
            self._catalog.resources.delete(row["id"])
        except SQLAlchemyError as exc:
            return self._store_failure(op, exc)
        return ServiceResult(ok=True, op=op, data={"id": row["id"], "name": row["name"]})
