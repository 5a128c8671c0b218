"""Rich Console factory and theme for schedtagctl output.

Consoles render to a StringIO buffer so formatters keep returning ``str``.
In non-TTY environments (tests, pipes) Rich disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

SCHEDTAG_THEME = Theme(
    {
        "st.ok": "bold green",
        "st.error": "bold red",
        "st.warning": "bold yellow",
        "st.op": "bold cyan",
        "st.key": "dim",
        "st.match": "bold green",
        "st.nomatch": "bold red",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=SCHEDTAG_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
