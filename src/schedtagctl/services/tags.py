"""TagService: scheduling tag management."""

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

from schedtagctl.domain.rules import TagStrategy
from schedtagctl.services._helpers import new_id, now_iso
from schedtagctl.services.base import BaseService
from schedtagctl.services.result import ServiceResult


class TagService(BaseService):
    """Create, list, and delete scheduling tags."""

    def create_tag(
        self,
        name: str,
        resource_type: str,
        *,
        default_strategy: str = TagStrategy.PREFER.value,
        description: str | None = None,
    ) -> ServiceResult:
        """Create a tag applicable to *resource_type*."""
        op = "create_tag"
        name = name.strip()
        if not name:
            return ServiceResult.failure(op, "MISSING_PARAMETER", "Tag name is required")
        if not resource_type:
            return ServiceResult.failure(op, "MISSING_PARAMETER", "resource_type is required")
        if default_strategy not in {s.value for s in TagStrategy}:
            return ServiceResult.failure(
                op,
                "INVALID_STRATEGY",
                f"Unknown strategy {default_strategy!r}",
                allowed=[s.value for s in TagStrategy],
            )

        now = now_iso()
        try:
            if self._catalog.tags.get(name) is not None:
                return ServiceResult.failure(op, "NAME_CONFLICT", f"Tag {name!r} already exists")
            tag = self._catalog.tags.insert(
                {
                    "id": new_id(),
                    "name": name,
                    "resource_type": resource_type,
                    "default_strategy": default_strategy,
                    "description": description,
                    "created": now,
                    "modified": now,
                }
            )
        except SQLAlchemyError as exc:
            return self._store_failure(op, exc)

        warnings: list[str] = []
        registry = self._catalog.registry
        if registry.resolve_standalone(resource_type) is None:
            warnings.append(
                f"Resource type {resource_type!r} has no standalone handle; "
                "rules on this tag cannot be evaluated yet"
            )
        return ServiceResult(ok=True, op=op, data=tag.model_dump(), warnings=warnings)

    def list_tags(self, *, resource_type: str | None = None) -> ServiceResult:
        op = "list_tags"
        try:
            tags = self._catalog.tags.find(resource_type=resource_type)
        except SQLAlchemyError as exc:
            return self._store_failure(op, exc)
        return ServiceResult(
            ok=True,
            op=op,
            data={"items": [t.model_dump() for t in tags], "count": len(tags)},
        )

    def delete_tag(self, tag: str) -> ServiceResult:
        """Delete a tag. Refused while any rule still targets it."""
        op = "delete_tag"
        try:
            found = self._catalog.tags.get(tag)
            if found is None:
                return ServiceResult.failure(op, "TAG_NOT_FOUND", f"Tag {tag} not found")
            in_use = self._catalog.tags.count_rules(found.id)
            if in_use:
                return ServiceResult.failure(
                    op,
                    "TAG_IN_USE",
                    f"Tag {found.name} is targeted by {in_use} rule(s)",
                    rule_count=in_use,
                )
            self._catalog.tags.delete(found.id)
        except SQLAlchemyError as exc:
            return self._store_failure(op, exc)
        return ServiceResult(ok=True, op=op, data={"id": found.id, "name": found.name})
