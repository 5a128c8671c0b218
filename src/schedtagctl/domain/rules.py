"""Scheduling tag and dynamic tag rule models.

A rule's applicability is derived through its tag: the tag declares which
resource type it applies to, the rule only points at the tag.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from pydantic import BaseModel


class TagStrategy(StrEnum):
    """How the scheduler treats candidates carrying a tag."""

    PREFER = "prefer"
    AVOID = "avoid"
    REQUIRE = "require"
    EXCLUDE = "exclude"


class Tag(BaseModel):
    """A scheduling tag applicable to one resource type."""

    model_config = {"frozen": True}

    id: str
    name: str
    resource_type: str
    default_strategy: str = TagStrategy.PREFER.value
    description: str | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Tag:
        return cls(
            id=row["id"],
            name=row["name"],
            resource_type=row["resource_type"],
            default_strategy=row["default_strategy"],
            description=row["description"],
        )


class DynamicTagRule(BaseModel):
    """A condition that, when true for a resource pair, applies ``tag_id``.

    ``enabled`` is tri-state: None means unset and is not treated as enabled.
    """

    model_config = {"frozen": True}

    id: str
    name: str
    tag_id: str
    condition: str
    enabled: bool | None = True
    description: str | None = None

    @property
    def is_enabled(self) -> bool:
        return self.enabled is True

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> DynamicTagRule:
        enabled = row["enabled"]
        return cls(
            id=row["id"],
            name=row["name"],
            tag_id=row["schedtag_id"],
            condition=row["condition"],
            enabled=None if enabled is None else bool(enabled),
            description=row["description"],
        )
