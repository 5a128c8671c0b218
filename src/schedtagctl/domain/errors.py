"""Exception taxonomy for rule validation and evaluation.

Every error raised by the domain layer derives from :class:`SchedtagError`
and carries the stable ``code`` the service layer reports in
``ServiceError.code``.
"""

from __future__ import annotations


class SchedtagError(Exception):
    """Base class for all domain errors."""

    code = "SCHEDTAG_ERROR"


class ParseError(SchedtagError):
    """Malformed condition syntax.

    ``position`` is the 0-based character offset where parsing stopped.
    """

    code = "INVALID_CONDITION"

    def __init__(self, message: str, position: int) -> None:
        super().__init__(f"{message} (at position {position})")
        self.message = message
        self.position = position


class EvaluationError(SchedtagError):
    """A well-formed condition that cannot be evaluated against an environment."""

    code = "EVALUATION_ERROR"


class UndefinedReferenceError(EvaluationError):
    """A reference names a namespace or field absent from the environment."""

    code = "UNDEFINED_REFERENCE"

    def __init__(self, reference: str, reason: str) -> None:
        super().__init__(f"Undefined reference {reference!r}: {reason}")
        self.reference = reference
        self.reason = reason


class TypeMismatchError(EvaluationError):
    """A comparison between incompatible scalar kinds."""

    code = "TYPE_MISMATCH"


class ResourceTypeNotSupported(SchedtagError):
    """A resource-type keyword is not bound in the required registry role."""

    code = "RESOURCE_TYPE_NOT_SUPPORTED"

    def __init__(self, keyword: str, role: str) -> None:
        super().__init__(f"{role.capitalize()} resource type {keyword!r} not supported")
        self.keyword = keyword
        self.role = role


class ResourceNotFound(SchedtagError):
    """A resource lookup by id-or-name found nothing."""

    code = "RESOURCE_NOT_FOUND"

    def __init__(self, keyword: str, id_or_name: str) -> None:
        super().__init__(f"{keyword} {id_or_name} not found")
        self.keyword = keyword
        self.id_or_name = id_or_name


class RegistryFrozenError(SchedtagError):
    """A bind was attempted after bring-up completed."""

    code = "REGISTRY_FROZEN"


class NamespaceConflictError(SchedtagError):
    """Both sides of an evaluation resolve to the same namespace keyword."""

    code = "NAMESPACE_CONFLICT"
