"""SQLAlchemy Core table definitions for the schedtagctl database.

A rule reaches its resource type only through its tag: ``dynamic_schedtags``
stores ``schedtag_id`` and never a copy of the tag's ``resource_type``.
"""

from __future__ import annotations

from sqlalchemy import (
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
    UniqueConstraint,
)

metadata = MetaData()

schedtags = Table(
    "schedtags",
    metadata,
    Column("id", Text, primary_key=True),
    Column("name", Text, nullable=False, unique=True),
    Column("resource_type", Text, nullable=False),
    Column("default_strategy", Text, nullable=False, default="prefer", server_default="prefer"),
    Column("description", Text),
    Column("created", Text, nullable=False),
    Column("modified", Text, nullable=False),
)

dynamic_schedtags = Table(
    "dynamic_schedtags",
    metadata,
    Column("id", Text, primary_key=True),
    Column("name", Text, nullable=False, unique=True),
    Column("schedtag_id", Text, ForeignKey("schedtags.id"), nullable=False),
    Column("condition", Text, nullable=False),
    # Tri-state: 1 = enabled, 0 = disabled, NULL = unset.
    Column("enabled", Integer, default=1, server_default="1"),
    Column("description", Text),
    Column("created", Text, nullable=False),
    Column("modified", Text, nullable=False),
)

resources = Table(
    "resources",
    metadata,
    Column("id", Text, primary_key=True),
    Column("resource_type", Text, nullable=False),
    Column("name", Text, nullable=False),
    Column("attributes", Text, nullable=False, default="{}", server_default="{}"),  # JSON object
    Column("created", Text, nullable=False),
    Column("modified", Text, nullable=False),
    UniqueConstraint("resource_type", "name"),
)

# ---------------------------------------------------------------------------
# Indexes for frequently filtered columns
# ---------------------------------------------------------------------------

Index("ix_schedtags_resource_type", schedtags.c.resource_type)
Index("ix_dynamic_schedtags_schedtag", dynamic_schedtags.c.schedtag_id)
Index("ix_dynamic_schedtags_enabled", dynamic_schedtags.c.enabled)
Index("ix_resources_type", resources.c.resource_type)
