"""Tests for ServiceResult and ServiceError."""

import json

import pytest
from pydantic import ValidationError

from schedtagctl.services.result import ServiceError, ServiceResult


class TestServiceResult:
    def test_success_construction(self) -> None:
        result = ServiceResult(ok=True, op="create_rule", data={"id": "r1"})
        assert result.ok is True
        assert result.op == "create_rule"
        assert result.data == {"id": "r1"}
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_failure_shorthand(self) -> None:
        result = ServiceResult.failure("get_rule", "RULE_NOT_FOUND", "Rule x not found", rule="x")
        assert result.ok is False
        assert result.error is not None
        assert result.error.code == "RULE_NOT_FOUND"
        assert result.error.detail == {"rule": "x"}

    def test_json_serialization(self) -> None:
        result = ServiceResult(
            ok=True,
            op="match",
            data={"tags": []},
            warnings=["Rule r skipped: boom"],
            meta={"evaluated": 1, "skipped": 1},
        )
        parsed = json.loads(result.model_dump_json())
        assert parsed["ok"] is True
        assert parsed["warnings"] == ["Rule r skipped: boom"]
        assert parsed["meta"]["skipped"] == 1

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="test")
        with pytest.raises(ValidationError):
            result.ok = False  # type: ignore[misc]


class TestServiceError:
    def test_default_detail(self) -> None:
        error = ServiceError(code="INVALID_CONDITION", message="bad")
        assert error.detail == {}
