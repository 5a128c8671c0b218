"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, schedtagctl.toml only contains
overrides. An empty file (or none at all) is a working configuration.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class DatabaseConfig(BaseModel):
    """[database] section."""

    model_config = {"frozen": True}

    # Relative paths resolve against the data root.
    path: Path = Path(".schedtagctl") / "schedtagctl.db"


class ConditionsConfig(BaseModel):
    """[conditions] section."""

    model_config = {"frozen": True}

    max_length: int = 1024


class RegistryConfig(BaseModel):
    """[registry] section: keywords served by the built-in inventory."""

    model_config = {"frozen": True}

    standalone: list[str] = Field(default_factory=lambda: ["host", "storage"])
    virtual: list[str] = Field(default_factory=lambda: ["guest", "disk"])


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    entrypoints: bool = True
