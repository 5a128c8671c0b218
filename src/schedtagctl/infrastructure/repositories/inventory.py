"""Built-in resource inventory and the registry handles that read it.

Each inventory row holds a resource's scheduling-relevant attributes as a
flat JSON object. :class:`InventoryHandle` exposes one resource type of the
inventory through the :class:`~schedtagctl.domain.registry.ResourceTypeHandle`
contract.
"""

from __future__ import annotations

import json
from typing import Any

from sqlalchemy import delete, insert, or_, select, update
from sqlalchemy.engine import Engine

from schedtagctl.domain.errors import ResourceNotFound
from schedtagctl.domain.registry import ResourceRef
from schedtagctl.infrastructure.database.schema import resources


def _row_to_dict(row: Any) -> dict[str, Any]:
    return {
        "id": row["id"],
        "resource_type": row["resource_type"],
        "name": row["name"],
        "attributes": json.loads(row["attributes"] or "{}"),
        "created": row["created"],
        "modified": row["modified"],
    }


class ResourceRepository:
    """Encapsulates SQL for the ``resources`` table."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def insert(self, values: dict[str, Any]) -> dict[str, Any]:
        row = {**values, "attributes": json.dumps(values.get("attributes", {}), sort_keys=True)}
        with self._engine.begin() as conn:
            conn.execute(insert(resources).values(**row))
        return {**values, "attributes": dict(values.get("attributes", {}))}

    def get(self, resource_type: str, id_or_name: str) -> dict[str, Any] | None:
        """Fetch a resource of *resource_type* by id, falling back to name."""
        stmt = (
            select(resources)
            .where(
                resources.c.resource_type == resource_type,
                or_(resources.c.id == id_or_name, resources.c.name == id_or_name),
            )
            .order_by((resources.c.id == id_or_name).desc())
        )
        with self._engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
        return _row_to_dict(row) if row is not None else None

    def find(self, *, resource_type: str | None = None) -> list[dict[str, Any]]:
        stmt = select(resources).order_by(resources.c.resource_type, resources.c.name)
        if resource_type is not None:
            stmt = stmt.where(resources.c.resource_type == resource_type)
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [_row_to_dict(row) for row in rows]

    def set_attributes(self, resource_id: str, attributes: dict[str, Any], modified: str) -> None:
        with self._engine.begin() as conn:
            conn.execute(
                update(resources)
                .where(resources.c.id == resource_id)
                .values(attributes=json.dumps(attributes, sort_keys=True), modified=modified)
            )

    def delete(self, resource_id: str) -> None:
        with self._engine.begin() as conn:
            conn.execute(delete(resources).where(resources.c.id == resource_id))


class InventoryHandle:
    """Registry handle serving one resource type from the inventory table."""

    def __init__(self, keyword: str, repository: ResourceRepository) -> None:
        self._keyword = keyword
        self._repository = repository

    @property
    def keyword(self) -> str:
        return self._keyword

    def lookup(self, id_or_name: str) -> ResourceRef | None:
        row = self._repository.get(self._keyword, id_or_name)
        if row is None:
            return None
        return ResourceRef(keyword=self._keyword, id=row["id"], name=row["name"])

    def snapshot(self, ref: ResourceRef) -> dict[str, Any]:
        """Attributes plus ``id`` and ``name``; stored attributes win on conflict."""
        row = self._repository.get(self._keyword, ref.id)
        if row is None:
            raise ResourceNotFound(self._keyword, ref.id)
        return {"id": row["id"], "name": row["name"], **row["attributes"]}

    def __repr__(self) -> str:
        return f"InventoryHandle({self._keyword!r})"
