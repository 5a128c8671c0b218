"""Tests for format_result."""

import json

from schedtagctl.output.formatters import format_result, format_warning
from schedtagctl.services.result import ServiceError, ServiceResult


def _ok(op: str = "test", **data: object) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=dict(data))


def _err(op: str = "test", msg: str = "fail") -> ServiceResult:
    return ServiceResult(ok=False, op=op, error=ServiceError(code="RULE_NOT_FOUND", message=msg))


class TestFormatResult:
    def test_json_mode(self) -> None:
        data = json.loads(format_result(_ok("create_rule", id="r1"), json_output=True))
        assert data["ok"] is True
        assert data["data"]["id"] == "r1"

    def test_json_mode_error(self) -> None:
        data = json.loads(format_result(_err(), json_output=True))
        assert data["error"]["code"] == "RULE_NOT_FOUND"

    def test_human_key_values(self) -> None:
        output = format_result(_ok("get_rule", name="busy", enabled=None))
        assert output.startswith("OK: get_rule")
        assert "  name: busy" in output
        assert "  enabled: " in output

    def test_matched_rendered_as_yes_no(self) -> None:
        assert "matched: yes" in format_result(_ok("evaluate", matched=True))
        assert "matched: no" in format_result(_ok("evaluate", matched=False))

    def test_nested_values_as_json(self) -> None:
        output = format_result(_ok("evaluate", environment={"host": {"load": 1}}))
        assert '{"host":{"load":1}}' in output

    def test_items_table_uses_op_columns(self) -> None:
        items = [{"name": "busy", "resource_type": "host", "default_strategy": "avoid"}]
        output = format_result(_ok("list_tags", items=items, count=1))
        assert "default_strategy" in output
        assert "avoid" in output
        assert "count: 1" in output

    def test_items_table_fallback_columns(self) -> None:
        output = format_result(_ok("other", items=[{"b": 2, "a": 1}]))
        assert output.index("a") < output.index("b")

    def test_error(self) -> None:
        assert format_result(_err("get_rule", "Rule x not found")) == (
            "ERROR: get_rule [RULE_NOT_FOUND] Rule x not found"
        )

    def test_quiet_success_is_empty(self) -> None:
        assert format_result(_ok(id="r1"), quiet=True) == ""

    def test_quiet_error_still_shown(self) -> None:
        assert "RULE_NOT_FOUND" in format_result(_err(), quiet=True)

    def test_long_error_is_not_wrapped(self) -> None:
        message = "x" * 200
        assert format_result(_err("get_rule", message)).endswith(message)

    def test_no_ansi_outside_a_terminal(self) -> None:
        output = format_result(_ok("evaluate", matched=True))
        assert "\x1b[" not in output


class TestFormatWarning:
    def test_prefix(self) -> None:
        assert format_warning("Rule slow skipped: undefined") == (
            "WARNING: Rule slow skipped: undefined"
        )
