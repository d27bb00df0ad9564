"""Tests for the inline span formatter."""

from __future__ import annotations

import unittest

from agent_chat.inline import format_inline, spans_to_text
from agent_chat.models import Bold, InlineCode, Italic, PlainText


class FormatInlineTests(unittest.TestCase):
    """Validate code > bold > italic precedence and plain-text fallbacks."""

    def test_mixed_markers(self) -> None:
        spans = format_inline("Use `x=1` **bold** and *italic*")
        self.assertEqual(
            spans,
            [
                PlainText("Use "),
                InlineCode("x=1"),
                PlainText(" "),
                Bold("bold"),
                PlainText(" and "),
                Italic("italic"),
            ],
        )

    def test_plain_line_round_trips(self) -> None:
        line = "Nothing special here, just words: 1 + 2 = 3."
        spans = format_inline(line)
        self.assertEqual(spans, [PlainText(line)])
        self.assertEqual(spans_to_text(spans), line)

    def test_empty_line_has_no_spans(self) -> None:
        self.assertEqual(format_inline(""), [])

    def test_markers_inside_code_are_inert(self) -> None:
        self.assertEqual(
            format_inline("`**not bold** *nor italic*`"),
            [InlineCode("**not bold** *nor italic*")],
        )

    def test_code_takes_precedence_over_bold(self) -> None:
        self.assertEqual(
            format_inline("**a `b` c**"),
            [PlainText("**a "), InlineCode("b"), PlainText(" c**")],
        )

    def test_italic_is_not_confused_with_bold(self) -> None:
        self.assertEqual(
            format_inline("**strong** then *soft*"),
            [Bold("strong"), PlainText(" then "), Italic("soft")],
        )

    def test_empty_delimiters_stay_literal(self) -> None:
        for text in ("a `` b", "a **** b", "a ** b", "lonely * star"):
            with self.subTest(text=text):
                self.assertEqual(format_inline(text), [PlainText(text)])

    def test_unbalanced_markers_stay_literal(self) -> None:
        self.assertEqual(format_inline("`open code"), [PlainText("`open code")])
        self.assertEqual(format_inline("**open bold"), [PlainText("**open bold")])

    def test_adjacent_spans(self) -> None:
        self.assertEqual(
            format_inline("`a``b`"),
            [InlineCode("a"), InlineCode("b")],
        )

    def test_italic_wrapping_bold_degrades(self) -> None:
        spans = format_inline("*x **y** z*")
        self.assertEqual(spans, [PlainText("*x "), Bold("y"), PlainText(" z*")])

    def test_spans_to_text_drops_markers(self) -> None:
        spans = format_inline("Use `x=1` **bold** and *italic*")
        self.assertEqual(spans_to_text(spans), "Use x=1 bold and italic")


if __name__ == "__main__":
    unittest.main()
