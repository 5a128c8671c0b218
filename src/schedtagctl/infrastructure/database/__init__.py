"""SQLite database engine and schema via SQLAlchemy Core."""

from schedtagctl.infrastructure.database.engine import create_db_engine, init_database
from schedtagctl.infrastructure.database.schema import (
    dynamic_schedtags,
    metadata,
    resources,
    schedtags,
)

__all__ = [
    "create_db_engine",
    "dynamic_schedtags",
    "init_database",
    "metadata",
    "resources",
    "schedtags",
]
