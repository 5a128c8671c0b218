"""Repositories for scheduling tags and dynamic tag rules."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, func, insert, or_, select, update
from sqlalchemy.engine import Engine

from schedtagctl.domain.rules import DynamicTagRule, Tag
from schedtagctl.infrastructure.database.schema import dynamic_schedtags, schedtags

if TYPE_CHECKING:
    from sqlalchemy import Connection


class TagRepository:
    """Encapsulates SQL for the ``schedtags`` table."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def insert(self, values: dict[str, Any]) -> Tag:
        with self._engine.begin() as conn:
            conn.execute(insert(schedtags).values(**values))
            row = conn.execute(select(schedtags).where(schedtags.c.id == values["id"])).mappings().one()
        return Tag.from_row(row)

    def get_by_id(self, tag_id: str) -> Tag | None:
        with self._engine.connect() as conn:
            row = conn.execute(select(schedtags).where(schedtags.c.id == tag_id)).mappings().first()
        return Tag.from_row(row) if row is not None else None

    def get(self, id_or_name: str) -> Tag | None:
        """Fetch by id, falling back to name."""
        stmt = (
            select(schedtags)
            .where(or_(schedtags.c.id == id_or_name, schedtags.c.name == id_or_name))
            .order_by((schedtags.c.id == id_or_name).desc())
        )
        with self._engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
        return Tag.from_row(row) if row is not None else None

    def find(self, *, resource_type: str | None = None) -> list[Tag]:
        stmt = select(schedtags).order_by(schedtags.c.name)
        if resource_type is not None:
            stmt = stmt.where(schedtags.c.resource_type == resource_type)
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [Tag.from_row(row) for row in rows]

    def get_many(self, tag_ids: list[str]) -> dict[str, Tag]:
        if not tag_ids:
            return {}
        with self._engine.connect() as conn:
            rows = conn.execute(select(schedtags).where(schedtags.c.id.in_(tag_ids))).mappings().all()
        return {str(row["id"]): Tag.from_row(row) for row in rows}

    def count_rules(self, tag_id: str) -> int:
        stmt = select(func.count(dynamic_schedtags.c.id)).where(
            dynamic_schedtags.c.schedtag_id == tag_id
        )
        with self._engine.connect() as conn:
            return int(conn.execute(stmt).scalar_one() or 0)

    def delete(self, tag_id: str) -> None:
        with self._engine.begin() as conn:
            conn.execute(delete(schedtags).where(schedtags.c.id == tag_id))


class RuleRepository:
    """Encapsulates SQL for the ``dynamic_schedtags`` table."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def _fetch(self, conn: Connection, rule_id: str) -> DynamicTagRule:
        stmt = select(dynamic_schedtags).where(dynamic_schedtags.c.id == rule_id)
        return DynamicTagRule.from_row(conn.execute(stmt).mappings().one())

    def insert(self, values: dict[str, Any]) -> DynamicTagRule:
        with self._engine.begin() as conn:
            conn.execute(insert(dynamic_schedtags).values(**values))
            return self._fetch(conn, values["id"])

    def update(self, rule_id: str, values: dict[str, Any]) -> DynamicTagRule:
        with self._engine.begin() as conn:
            conn.execute(
                update(dynamic_schedtags).where(dynamic_schedtags.c.id == rule_id).values(**values)
            )
            return self._fetch(conn, rule_id)

    def get(self, id_or_name: str) -> DynamicTagRule | None:
        """Fetch by id, falling back to name."""
        stmt = (
            select(dynamic_schedtags)
            .where(
                or_(
                    dynamic_schedtags.c.id == id_or_name,
                    dynamic_schedtags.c.name == id_or_name,
                )
            )
            .order_by((dynamic_schedtags.c.id == id_or_name).desc())
        )
        with self._engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
        return DynamicTagRule.from_row(row) if row is not None else None

    def delete(self, rule_id: str) -> None:
        with self._engine.begin() as conn:
            conn.execute(delete(dynamic_schedtags).where(dynamic_schedtags.c.id == rule_id))

    def find(
        self,
        *,
        enabled: bool | None = None,
        tag_id: str | None = None,
        resource_type: str | None = None,
    ) -> list[DynamicTagRule]:
        """List rules, optionally filtered by enabled flag, tag, or tag resource type."""
        stmt = select(dynamic_schedtags).order_by(dynamic_schedtags.c.name)
        if enabled is True:
            stmt = stmt.where(dynamic_schedtags.c.enabled == 1)
        elif enabled is False:
            stmt = stmt.where(dynamic_schedtags.c.enabled == 0)
        if tag_id is not None:
            stmt = stmt.where(dynamic_schedtags.c.schedtag_id == tag_id)
        if resource_type is not None:
            stmt = stmt.join(schedtags, dynamic_schedtags.c.schedtag_id == schedtags.c.id).where(
                schedtags.c.resource_type == resource_type
            )
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [DynamicTagRule.from_row(row) for row in rows]

    def list_enabled_by_resource_type(self, resource_type: str) -> list[DynamicTagRule]:
        """Enabled rules whose tag applies to *resource_type*, via a join on the tag.

        Order is unspecified. Store failures propagate as SQLAlchemy errors.
        """
        stmt = (
            select(dynamic_schedtags)
            .join(
                schedtags,
                (dynamic_schedtags.c.schedtag_id == schedtags.c.id)
                & (schedtags.c.resource_type == resource_type),
            )
            .where(dynamic_schedtags.c.enabled == 1)
        )
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [DynamicTagRule.from_row(row) for row in rows]
