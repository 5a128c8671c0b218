"""Shared pytest fixtures and test helpers for schedtagctl tests."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from schedtagctl.config.models import PluginsConfig
from schedtagctl.config.settings import SchedtagSettings
from schedtagctl.infrastructure.catalog import Catalog
from schedtagctl.infrastructure.database.engine import init_database


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ambient SCHEDTAGCTL_* variables and installed plugins out of tests."""
    monkeypatch.delenv("SCHEDTAGCTL_CONFIG", raising=False)
    monkeypatch.setenv("SCHEDTAGCTL_PLUGINS__ENTRYPOINTS", "false")


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Generator[Engine]:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path / "schedtagctl.db")
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def settings(tmp_path: Path) -> SchedtagSettings:
    return SchedtagSettings(data_root=tmp_path, plugins=PluginsConfig(entrypoints=False))


@pytest.fixture
def catalog(settings: SchedtagSettings) -> Generator[Catalog]:
    """Catalog on a temp data root with only the built-in inventory plugin."""
    c = Catalog(settings)
    try:
        yield c
    finally:
        c.close()


@pytest.fixture
def _isolated_data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so the CLI creates an isolated database.

    Use via ``@pytest.mark.usefixtures("_isolated_data_dir")`` on command
    test classes.
    """
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Shared test helpers (used across service test modules)
# ---------------------------------------------------------------------------


def add_resource(catalog: Catalog, resource_type: str, name: str, **attrs: Any) -> dict[str, Any]:
    """Add an inventory resource via InventoryService, asserting success."""
    from schedtagctl.services.inventory import InventoryService

    result = InventoryService(catalog).add_resource(resource_type, name, attributes=attrs)
    assert result.ok, result.error
    return result.data


def create_tag(catalog: Catalog, name: str, resource_type: str = "host", **kwargs: Any) -> dict[str, Any]:
    """Create a tag via TagService, asserting success."""
    from schedtagctl.services.tags import TagService

    result = TagService(catalog).create_tag(name, resource_type, **kwargs)
    assert result.ok, result.error
    return result.data


def create_rule(
    catalog: Catalog, name: str, *, tag: str, condition: str, **kwargs: Any
) -> dict[str, Any]:
    """Create a rule via RuleService, asserting success."""
    from schedtagctl.services.rules import RuleService

    result = RuleService(catalog).create_rule(name, tag=tag, condition=condition, **kwargs)
    assert result.ok, result.error
    return result.data
