"""EvaluationService: single-rule evaluation and bulk tag matching.

Single evaluation returns the match together with the full environment
used, so a caller can see exactly which attribute values decided it.
Bulk matching evaluates every enabled rule for a resource type; a rule that
fails to evaluate is reported as skipped and never aborts the batch.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog
from sqlalchemy.exc import SQLAlchemyError

from schedtagctl.domain.errors import SchedtagError
from schedtagctl.domain.evaluation import build_environment, evaluate_pair, evaluate_rules
from schedtagctl.services.base import BaseService
from schedtagctl.services.result import ServiceResult

log = structlog.get_logger(__name__)


class EvaluationService(BaseService):
    """Evaluates rule conditions against standalone/virtual resource pairs."""

    def evaluate(
        self,
        condition: str,
        *,
        resource_type: str,
        object_id: str,
        virtual_resource_type: str,
        virtual_object_id: str,
    ) -> ServiceResult:
        """Evaluate *condition* against the named resource pair."""
        op = "evaluate"
        error = self._check_length(op, condition)
        if error is not None:
            return error
        return self._evaluate_pair(
            op,
            condition,
            resource_type=resource_type,
            object_id=object_id,
            virtual_resource_type=virtual_resource_type,
            virtual_object_id=virtual_object_id,
        )

    def _evaluate_pair(
        self,
        op: str,
        condition: str,
        *,
        resource_type: str,
        object_id: str,
        virtual_resource_type: str,
        virtual_object_id: str,
    ) -> ServiceResult:
        try:
            result = evaluate_pair(
                self._catalog.registry,
                resource_type,
                object_id,
                virtual_resource_type,
                virtual_object_id,
                condition,
            )
        except SchedtagError as exc:
            return self._domain_failure(op, exc)
        except SQLAlchemyError as exc:
            return self._store_failure(op, exc)

        log.debug(
            "condition.evaluated",
            condition=condition,
            matched=result.matched,
            environment=result.environment,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "condition": condition,
                "matched": result.matched,
                "environment": result.environment,
            },
        )

    def evaluate_rule(
        self,
        rule: str,
        *,
        resource_type: str,
        object_id: str,
        virtual_resource_type: str,
        virtual_object_id: str,
    ) -> ServiceResult:
        """Evaluate a stored rule (id or name) against the named resource pair."""
        op = "evaluate_rule"
        try:
            found = self._catalog.rules.get(rule)
        except SQLAlchemyError as exc:
            return self._store_failure(op, exc)
        if found is None:
            return ServiceResult.failure(op, "RULE_NOT_FOUND", f"Rule {rule} not found")

        # Stored conditions were length-checked when written.
        result = self._evaluate_pair(
            op,
            found.condition,
            resource_type=resource_type,
            object_id=object_id,
            virtual_resource_type=virtual_resource_type,
            virtual_object_id=virtual_object_id,
        )
        if not result.ok:
            return result
        data = {"rule_id": found.id, "rule": found.name, "enabled": found.enabled, **result.data}
        return ServiceResult(ok=True, op=op, data=data)

    def list_applicable_tags(
        self,
        resource_type: str,
        environment: Mapping[str, Mapping[str, Any]],
    ) -> ServiceResult:
        """Tags of every enabled rule for *resource_type* that matches *environment*.

        Rules that raise during evaluation are listed under ``skipped`` with
        their reason and repeated as warnings.
        """
        op = "list_applicable_tags"
        try:
            rules = self._catalog.rules.list_enabled_by_resource_type(resource_type)
        except SQLAlchemyError as exc:
            return self._store_failure(op, exc)

        outcomes = evaluate_rules(rules, environment)
        matched_tag_ids: list[str] = []
        matched_rules: list[dict[str, str]] = []
        skipped: list[dict[str, Any]] = []
        warnings: list[str] = []
        for outcome in outcomes:
            rule = outcome.rule
            if outcome.error is not None:
                reason = str(outcome.error)
                skipped.append(
                    {
                        "rule_id": rule.id,
                        "rule": rule.name,
                        "code": outcome.error.code,
                        "reason": reason,
                    }
                )
                warnings.append(f"Rule {rule.name} skipped: {reason}")
                log.warning("rule.skipped", rule=rule.name, code=outcome.error.code, reason=reason)
                continue
            log.debug("rule.evaluated", rule=rule.name, matched=outcome.matched)
            if outcome.matched:
                matched_rules.append({"rule_id": rule.id, "rule": rule.name})
                if rule.tag_id not in matched_tag_ids:
                    matched_tag_ids.append(rule.tag_id)

        try:
            tags = self._catalog.tags.get_many(matched_tag_ids)
        except SQLAlchemyError as exc:
            return self._store_failure(op, exc)

        items = [tags[tag_id].model_dump() for tag_id in matched_tag_ids if tag_id in tags]
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "resource_type": resource_type,
                "tags": items,
                "matched_rules": matched_rules,
                "skipped": skipped,
                "environment": {k: dict(v) for k, v in environment.items()},
            },
            warnings=warnings,
            meta={"evaluated": len(outcomes), "skipped": len(skipped)},
        )

    def match(
        self,
        *,
        resource_type: str,
        object_id: str,
        virtual_resource_type: str,
        virtual_object_id: str,
    ) -> ServiceResult:
        """Build the environment for a resource pair, then match all enabled rules."""
        op = "match"
        try:
            environment = build_environment(
                self._catalog.registry,
                resource_type,
                object_id,
                virtual_resource_type,
                virtual_object_id,
            )
        except SchedtagError as exc:
            return self._domain_failure(op, exc)
        except SQLAlchemyError as exc:
            return self._store_failure(op, exc)

        result = self.list_applicable_tags(resource_type, environment)
        return result.model_copy(update={"op": op})
