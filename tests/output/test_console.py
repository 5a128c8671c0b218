"""Tests for Rich Console factory and theme."""

from io import StringIO

from schedtagctl.output.console import SCHEDTAG_THEME, create_console, get_output


class TestCreateConsole:
    def test_returns_console_with_stringio(self) -> None:
        console = create_console()
        assert isinstance(console.file, StringIO)

    def test_no_color_disables_ansi(self) -> None:
        console = create_console(no_color=True)
        console.print("[st.error]boom[/st.error]")
        output = get_output(console)
        assert "\x1b" not in output
        assert "boom" in output

    def test_widths(self) -> None:
        assert create_console().width == 120
        assert create_console(width=80).width == 80

    def test_theme_styles(self) -> None:
        names = ("st.ok", "st.error", "st.warning", "st.op", "st.key", "st.match", "st.nomatch")
        for name in names:
            assert name in SCHEDTAG_THEME.styles
