"""BaseService: foundation for all schedtagctl services.

Every service receives a :class:`Catalog` at construction time. The Catalog
provides the repositories and the frozen resource type registry.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from schedtagctl.domain.errors import SchedtagError
from schedtagctl.services.result import ServiceResult

if TYPE_CHECKING:
    from schedtagctl.infrastructure.catalog import Catalog

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes.

    Usage::

        class RuleService(BaseService):
            def get_rule(self, rule: str) -> ServiceResult:
                found = self._catalog.rules.get(rule)
                ...
    """

    def __init__(self, catalog: Catalog) -> None:
        self._catalog = catalog

    @staticmethod
    def _domain_failure(op: str, exc: SchedtagError, **detail: Any) -> ServiceResult:
        """Translate a domain exception into a failed result."""
        return ServiceResult.failure(op, exc.code, str(exc), **detail)

    def _check_length(self, op: str, condition: str) -> ServiceResult | None:
        """Reject conditions longer than the configured maximum."""
        max_length = self._catalog.settings.conditions.max_length
        if len(condition) > max_length:
            return ServiceResult.failure(
                op,
                "INVALID_CONDITION",
                f"Condition exceeds {max_length} characters",
                max_length=max_length,
            )
        return None

    @staticmethod
    def _store_failure(op: str, exc: SQLAlchemyError) -> ServiceResult:
        """Translate a store error. Never conflated with an empty result."""
        if isinstance(exc, IntegrityError):
            return ServiceResult.failure(op, "NAME_CONFLICT", f"Constraint violated: {exc.orig}")
        logger.error("%s: store unavailable", op, exc_info=True)
        return ServiceResult.failure(op, "STORE_UNAVAILABLE", f"Store unavailable: {exc}")
