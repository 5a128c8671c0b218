"""RuleService: dynamic tag rule validation, persistence, and queries.

Pipeline for writes: VALIDATE → RESOLVE TAG → PERSIST → RESPOND.
A rule is only stored when its condition parses and its tag exists.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from schedtagctl.domain.conditions import validate
from schedtagctl.domain.errors import ParseError
from schedtagctl.domain.rules import DynamicTagRule, Tag
from schedtagctl.services._helpers import new_id, now_iso
from schedtagctl.services.base import BaseService
from schedtagctl.services.result import ServiceResult


class RuleService(BaseService):
    """Handles dynamic tag rule lifecycle and the enabled-by-type query."""

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate_condition(self, condition: str) -> ServiceResult:
        """Parse-only check of *condition*."""
        op = "validate_condition"
        error = self._check_condition(op, condition)
        if error is not None:
            return error
        return ServiceResult(ok=True, op=op, data={"condition": condition, "valid": True})

    def _check_condition(self, op: str, condition: str) -> ServiceResult | None:
        error = self._check_length(op, condition)
        if error is not None:
            return error
        try:
            validate(condition)
        except ParseError as exc:
            return self._domain_failure(op, exc, position=exc.position)
        return None

    def _resolve_tag(
        self, op: str, tag: str, resource_type: str | None
    ) -> tuple[Tag | None, ServiceResult | None]:
        found = self._catalog.tags.get(tag)
        if found is None:
            return None, ServiceResult.failure(op, "TAG_NOT_FOUND", f"Tag {tag} not found")
        if resource_type is not None and found.resource_type != resource_type:
            return None, ServiceResult.failure(
                op,
                "RESOURCE_TYPE_MISMATCH",
                f"Tag {found.name} applies to {found.resource_type!r}, not {resource_type!r}",
                tag_resource_type=found.resource_type,
            )
        return found, None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_rule(
        self,
        name: str,
        *,
        tag: str | None,
        condition: str | None,
        enabled: bool | None = True,
        resource_type: str | None = None,
        description: str | None = None,
    ) -> ServiceResult:
        """Create a rule targeting *tag* (id or name).

        If *resource_type* is given it must equal the tag's resource type.
        """
        op = "create_rule"
        name = name.strip()
        if not name:
            return ServiceResult.failure(op, "MISSING_PARAMETER", "Rule name is required")
        if not condition:
            return ServiceResult.failure(op, "MISSING_PARAMETER", "condition is required")
        error = self._check_condition(op, condition)
        if error is not None:
            return error
        if not tag:
            return ServiceResult.failure(op, "MISSING_PARAMETER", "tag is required")

        now = now_iso()
        try:
            found, error = self._resolve_tag(op, tag, resource_type)
            if error is not None:
                return error
            assert found is not None
            if self._catalog.rules.get(name) is not None:
                return ServiceResult.failure(op, "NAME_CONFLICT", f"Rule {name!r} already exists")
            rule = self._catalog.rules.insert(
                {
                    "id": new_id(),
                    "name": name,
                    "schedtag_id": found.id,
                    "condition": condition,
                    "enabled": None if enabled is None else int(enabled),
                    "description": description,
                    "created": now,
                    "modified": now,
                }
            )
        except SQLAlchemyError as exc:
            return self._store_failure(op, exc)

        return ServiceResult(ok=True, op=op, data=_rule_data(rule, found))

    def update_rule(
        self,
        rule: str,
        *,
        condition: str | None = None,
        tag: str | None = None,
        enabled: bool | None = None,
        description: str | None = None,
    ) -> ServiceResult:
        """Update the given fields of a rule; omitted fields are unchanged."""
        op = "update_rule"
        changes: dict[str, Any] = {}
        if condition:
            error = self._check_condition(op, condition)
            if error is not None:
                return error
            changes["condition"] = condition
        if enabled is not None:
            changes["enabled"] = int(enabled)
        if description is not None:
            changes["description"] = description

        try:
            existing = self._catalog.rules.get(rule)
            if existing is None:
                return ServiceResult.failure(op, "RULE_NOT_FOUND", f"Rule {rule} not found")
            if tag:
                found, error = self._resolve_tag(op, tag, None)
                if error is not None:
                    return error
                assert found is not None
                changes["schedtag_id"] = found.id

            if not changes:
                return ServiceResult(
                    ok=True,
                    op=op,
                    data=_rule_data(existing, self._catalog.tags.get_by_id(existing.tag_id)),
                    warnings=["No changes requested"],
                )
            changes["modified"] = now_iso()
            updated = self._catalog.rules.update(existing.id, changes)
            target = self._catalog.tags.get_by_id(updated.tag_id)
        except SQLAlchemyError as exc:
            return self._store_failure(op, exc)

        data = _rule_data(updated, target)
        data["fields_changed"] = sorted(k for k in changes if k != "modified")
        return ServiceResult(ok=True, op=op, data=data)

    def delete_rule(self, rule: str) -> ServiceResult:
        op = "delete_rule"
        try:
            existing = self._catalog.rules.get(rule)
            if existing is None:
                return ServiceResult.failure(op, "RULE_NOT_FOUND", f"Rule {rule} not found")
            self._catalog.rules.delete(existing.id)
        except SQLAlchemyError as exc:
            return self._store_failure(op, exc)
        return ServiceResult(ok=True, op=op, data={"id": existing.id, "name": existing.name})

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_rule(self, rule: str) -> ServiceResult:
        op = "get_rule"
        try:
            existing = self._catalog.rules.get(rule)
            if existing is None:
                return ServiceResult.failure(op, "RULE_NOT_FOUND", f"Rule {rule} not found")
            target = self._catalog.tags.get_by_id(existing.tag_id)
        except SQLAlchemyError as exc:
            return self._store_failure(op, exc)
        return ServiceResult(ok=True, op=op, data=_rule_data(existing, target))

    def list_rules(
        self,
        *,
        enabled: bool | None = None,
        tag: str | None = None,
        resource_type: str | None = None,
    ) -> ServiceResult:
        """List rules filtered by enabled flag, tag (id or name), or resource type."""
        op = "list_rules"
        try:
            tag_id: str | None = None
            if tag:
                found = self._catalog.tags.get(tag)
                if found is None:
                    return ServiceResult.failure(op, "TAG_NOT_FOUND", f"Tag {tag} not found")
                tag_id = found.id
            rules = self._catalog.rules.find(
                enabled=enabled, tag_id=tag_id, resource_type=resource_type
            )
            tags = self._catalog.tags.get_many(sorted({r.tag_id for r in rules}))
        except SQLAlchemyError as exc:
            return self._store_failure(op, exc)

        items = [_rule_data(r, tags.get(r.tag_id)) for r in rules]
        return ServiceResult(ok=True, op=op, data={"items": items, "count": len(items)})

    def list_enabled_for_resource_type(self, resource_type: str) -> ServiceResult:
        """Every enabled rule whose tag applies to *resource_type*.

        A store failure is an error result, never an empty list.
        """
        op = "list_enabled_rules"
        try:
            rules = self._catalog.rules.list_enabled_by_resource_type(resource_type)
        except SQLAlchemyError as exc:
            return self._store_failure(op, exc)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "resource_type": resource_type,
                "items": [r.model_dump() for r in rules],
                "count": len(rules),
            },
        )


def _rule_data(rule: DynamicTagRule, tag: Tag | None) -> dict[str, Any]:
    data = rule.model_dump()
    data["tag"] = tag.name if tag is not None else None
    data["resource_type"] = tag.resource_type if tag is not None else None
    return data
