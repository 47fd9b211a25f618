"""
Unit tests for the Inline Formatter.
"""
import pytest

from citemark.domain.models.render import FormatMode, LineBreak, TextRun
from citemark.domain.services.inline_formatter import format_text, split_bold


class TestSplitBold:
    """Test bold span detection."""

    def test_double_asterisk(self):
        assert split_bold("a **b** c") == [("a ", False), ("b", True), (" c", False)]

    def test_double_underscore(self):
        assert split_bold("__b__") == [("b", True)]

    def test_non_greedy(self):
        assert split_bold("**a** and **b**") == [("a", True), (" and ", False), ("b", True)]

    def test_mixed_delimiters(self):
        assert split_bold("**a** __b__") == [("a", True), (" ", False), ("b", True)]

    def test_extra_asterisk_stays_in_content(self):
        assert split_bold("***a**") == [("*a", True)]

    @pytest.mark.parametrize("text", ["a ** b", "**open", "close**", "__half", "* single *"])
    def test_unmatched_delimiters_pass_through(self, text):
        assert split_bold(text) == [(text, False)]

    def test_bold_does_not_cross_line_break(self):
        assert split_bold("**a\nb**") == [("**a\nb**", False)]


class TestFormatInline:
    """Inline mode collapses line breaks."""

    def test_bold_run(self):
        assert format_text("a **b** c", FormatMode.INLINE) == [
            TextRun(text="a "),
            TextRun(text="b", bold=True),
            TextRun(text=" c"),
        ]

    def test_line_breaks_become_spaces(self):
        assert format_text("line one\nline two", FormatMode.INLINE) == [TextRun(text="line one line two")]

    def test_never_emits_line_break(self):
        result = format_text("a\n\n**b**\nc", FormatMode.INLINE)
        assert not any(isinstance(i, LineBreak) for i in result)
        assert result == [TextRun(text="a  "), TextRun(text="b", bold=True), TextRun(text=" c")]

    def test_unclosed_bold_across_lines(self):
        assert format_text("**a\nb**", FormatMode.INLINE) == [TextRun(text="**a b**")]


class TestFormatBlock:
    """Block mode keeps line breaks between lines."""

    def test_lines(self):
        assert format_text("a\nb", FormatMode.BLOCK) == [TextRun(text="a"), LineBreak(), TextRun(text="b")]

    def test_blank_line_is_two_line_breaks(self):
        assert format_text("a\n\nb", FormatMode.BLOCK) == [
            TextRun(text="a"), LineBreak(), LineBreak(), TextRun(text="b")
        ]

    def test_bold_per_line(self):
        assert format_text("Line one\nLine **two**", FormatMode.BLOCK) == [
            TextRun(text="Line one"),
            LineBreak(),
            TextRun(text="Line "),
            TextRun(text="two", bold=True),
        ]

    def test_unclosed_bold_across_lines(self):
        assert format_text("**a\nb**", FormatMode.BLOCK) == [
            TextRun(text="**a"), LineBreak(), TextRun(text="b**")
        ]

    def test_windows_line_endings(self):
        assert format_text("a\r\nb", FormatMode.BLOCK) == [TextRun(text="a"), LineBreak(), TextRun(text="b")]

    def test_no_trailing_break_for_last_line(self):
        result = format_text("a\nb", FormatMode.BLOCK)
        assert not isinstance(result[-1], LineBreak)


class TestFormatCommon:

    @pytest.mark.parametrize("mode", [FormatMode.INLINE, FormatMode.BLOCK])
    def test_empty_input(self, mode):
        assert format_text("", mode) == []

    @pytest.mark.parametrize("mode", [FormatMode.INLINE, FormatMode.BLOCK])
    def test_delimiter_symmetry(self, mode):
        assert format_text("__x__", mode) == format_text("**x**", mode) == [TextRun(text="x", bold=True)]

    def test_default_mode_is_block(self):
        assert format_text("a\nb") == format_text("a\nb", FormatMode.BLOCK)
