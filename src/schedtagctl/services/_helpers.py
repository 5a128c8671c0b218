"""Shared service-layer helper functions."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime


def now_iso() -> str:
    """Current UTC time as standard ISO 8601."""
    return datetime.now(UTC).isoformat()


def new_id() -> str:
    """Fresh resource id (UUID4, 36 chars)."""
    return str(uuid.uuid4())
