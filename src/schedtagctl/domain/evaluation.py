"""Evaluation protocol: resolve a resource pair, build the environment, evaluate.

Resource-type agnostic: everything type-specific sits behind the registry
handles. Each call allocates its own environment, so evaluation is safe to
run from many threads against a frozen registry.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from schedtagctl.domain.conditions import Environment, evaluate, parse
from schedtagctl.domain.errors import (
    EvaluationError,
    NamespaceConflictError,
    ParseError,
    ResourceNotFound,
)
from schedtagctl.domain.registry import (
    STANDALONE,
    VIRTUAL,
    ResourceRef,
    ResourceTypeHandle,
    ResourceTypeRegistry,
)
from schedtagctl.domain.rules import DynamicTagRule


@dataclass(frozen=True)
class EvaluationResult:
    """Outcome of a single condition plus the environment that produced it."""

    matched: bool
    environment: dict[str, dict[str, Any]]


@dataclass(frozen=True)
class RuleOutcome:
    """Per-rule result of a bulk evaluation. ``error`` set means skipped."""

    rule: DynamicTagRule
    matched: bool = False
    error: ParseError | EvaluationError | None = field(default=None)

    @property
    def skipped(self) -> bool:
        return self.error is not None


def _lookup(handle: ResourceTypeHandle, id_or_name: str) -> ResourceRef:
    ref = handle.lookup(id_or_name)
    if ref is None:
        raise ResourceNotFound(handle.keyword, id_or_name)
    return ref


def build_environment(
    registry: ResourceTypeRegistry,
    standalone_type: str,
    standalone_ref: str,
    virtual_type: str,
    virtual_ref: str,
) -> dict[str, dict[str, Any]]:
    """Resolve both resources and namespace their snapshots by keyword.

    Both keywords are resolved before any lookup is attempted.

    Raises:
        ResourceTypeNotSupported: A keyword is not bound for its role.
        NamespaceConflictError: Both handles share one keyword.
        ResourceNotFound: A lookup found nothing.
    """
    standalone = registry.require(standalone_type, STANDALONE)
    virtual = registry.require(virtual_type, VIRTUAL)
    if standalone.keyword == virtual.keyword:
        msg = f"Standalone and virtual resources share the namespace {standalone.keyword!r}"
        raise NamespaceConflictError(msg)

    standalone_obj = _lookup(standalone, standalone_ref)
    virtual_obj = _lookup(virtual, virtual_ref)
    return {
        standalone.keyword: dict(standalone.snapshot(standalone_obj)),
        virtual.keyword: dict(virtual.snapshot(virtual_obj)),
    }


def evaluate_pair(
    registry: ResourceTypeRegistry,
    standalone_type: str,
    standalone_ref: str,
    virtual_type: str,
    virtual_ref: str,
    condition: str,
) -> EvaluationResult:
    """Evaluate *condition* against a standalone/virtual resource pair.

    The condition is parsed first so syntax errors never trigger lookups.
    """
    expr = parse(condition)
    environment = build_environment(
        registry, standalone_type, standalone_ref, virtual_type, virtual_ref
    )
    return EvaluationResult(matched=evaluate(expr, environment), environment=environment)


def evaluate_rules(
    rules: Iterable[DynamicTagRule],
    environment: Environment,
) -> list[RuleOutcome]:
    """Evaluate every rule independently against one environment.

    A rule whose condition fails to parse or evaluate is recorded as
    skipped; the remaining rules are still evaluated.
    """
    outcomes: list[RuleOutcome] = []
    for rule in rules:
        try:
            matched = evaluate(parse(rule.condition), environment)
        except (ParseError, EvaluationError) as exc:
            outcomes.append(RuleOutcome(rule=rule, error=exc))
            continue
        outcomes.append(RuleOutcome(rule=rule, matched=matched))
    return outcomes
