"""Rich/JSON output for ServiceResult.

Machines get ``--json`` (the full ServiceResult). Humans get a status line,
a table for list payloads, and key/value lines for everything else.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from schedtagctl.output.console import create_console, get_output

if TYPE_CHECKING:
    from schedtagctl.services.result import ServiceResult

# Columns shown for list payloads, keyed by the op that produced them.
_LIST_COLUMNS: dict[str, list[str]] = {
    "list_rules": ["name", "tag", "resource_type", "enabled", "condition"],
    "list_enabled_rules": ["name", "tag_id", "condition"],
    "list_tags": ["name", "resource_type", "default_strategy", "description"],
    "list_resources": ["resource_type", "name", "id", "attributes"],
}


def _styled_line(*parts: str | tuple[str, str]) -> str:
    """Render one line of (text, style) parts without wrapping."""
    console = create_console()
    console.print(Text.assemble(*parts), soft_wrap=True)
    return get_output(console).rstrip("\n")


def _cell(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return _json.dumps(value, separators=(",", ":"), sort_keys=True)
    return "" if value is None else str(value)


def _format_items(op: str, items: list[dict[str, Any]]) -> str:
    columns = _LIST_COLUMNS.get(op) or sorted(items[0])
    console = create_console()
    table = Table(show_header=True, header_style="st.key")
    for column in columns:
        table.add_column(column)
    for item in items:
        table.add_row(*(_cell(item.get(column)) for column in columns))
    console.print(table)
    return get_output(console).rstrip()


def _format_data_human(data: dict[str, Any]) -> str:
    lines: list[str] = []
    for key, value in data.items():
        lines.append(f"  {key}: {_cell(value)}")
    return "\n".join(lines)


def format_result(
    result: ServiceResult,
    *,
    json_output: bool = False,
    quiet: bool = False,
) -> str:
    """Format a ServiceResult for display."""
    if json_output:
        return result.model_dump_json(indent=2)
    if not result.ok:
        error_msg = result.error.message if result.error else "Unknown error"
        code = result.error.code if result.error else "ERROR"
        return _styled_line(("ERROR", "st.error"), f": {result.op} [{code}] {error_msg}")
    if quiet:
        return ""

    parts = [_styled_line(("OK", "st.ok"), ": ", (result.op, "st.op"))]
    data = dict(result.data)
    items = data.pop("items", None)
    if "matched" in data:
        verdict = ("yes", "st.match") if data.pop("matched") else ("no", "st.nomatch")
        parts.append(_styled_line("  matched: ", verdict))
    if data:
        parts.append(_format_data_human(data))
    if items:
        parts.append(_format_items(result.op, items))
    return "\n".join(parts)


def format_warning(message: str) -> str:
    """Format a ServiceResult warning for stderr."""
    return _styled_line(("WARNING", "st.warning"), f": {message}")
