"""Tests for fenced-code extraction."""

from __future__ import annotations

import unittest

from agent_chat.fences import split_message
from agent_chat.models import Segment, SegmentKind


class SplitMessageTests(unittest.TestCase):
    """Validate prose/code segmentation on triple-backtick fences."""

    def test_text_without_fences_is_one_segment(self) -> None:
        for text in ("", "hello", "  spaced  \n\nlines ", "single `tick` only"):
            with self.subTest(text=text):
                self.assertEqual(
                    split_message(text), [Segment(SegmentKind.TEXT, text)]
                )

    def test_language_and_body_are_extracted(self) -> None:
        segments = split_message("```lang\ncode\n```")
        self.assertEqual(segments, [Segment(SegmentKind.CODE, "code", "lang")])

    def test_missing_language_defaults_to_text(self) -> None:
        segments = split_message("```\nprint(1)\n```")
        self.assertEqual(segments[0].language, "text")
        self.assertEqual(segments[0].content, "print(1)")

    def test_language_tag_is_trimmed(self) -> None:
        segments = split_message("```  python  \nx = 1\n```")
        self.assertEqual(segments[0].language, "python")

    def test_surrounding_text_passes_through_untouched(self) -> None:
        text = "Intro:\n```py\na\n\n  b\n```\n  after  "
        segments = split_message(text)
        self.assertEqual(
            segments,
            [
                Segment(SegmentKind.TEXT, "Intro:\n"),
                Segment(SegmentKind.CODE, "a\n\n  b", "py"),
                Segment(SegmentKind.TEXT, "\n  after  "),
            ],
        )

    def test_code_body_keeps_interior_blank_lines_and_indent(self) -> None:
        segments = split_message("```js\n  if (a) {\n\n    b()\n  }\n```")
        self.assertEqual(segments[0].content, "  if (a) {\n\n    b()\n  }")

    def test_multiple_blocks_are_matched_non_greedily(self) -> None:
        segments = split_message("```a\n1\n```\nmid\n```b\n2\n```")
        self.assertEqual(
            [segment.kind for segment in segments],
            [SegmentKind.CODE, SegmentKind.TEXT, SegmentKind.CODE],
        )
        self.assertEqual(segments[0].language, "a")
        self.assertEqual(segments[1].content, "\nmid\n")
        self.assertEqual(segments[2].content, "2")

    def test_markdown_inside_fence_is_not_interpreted(self) -> None:
        segments = split_message("```md\n# not a heading\n- nor a list\n```")
        self.assertEqual(segments[0].kind, SegmentKind.CODE)
        self.assertEqual(segments[0].content, "# not a heading\n- nor a list")

    def test_unterminated_fence_degrades_to_text(self) -> None:
        text = "before\n```python\nprint('open')"
        self.assertEqual(split_message(text), [Segment(SegmentKind.TEXT, text)])

    def test_odd_trailing_fence_stays_in_prose(self) -> None:
        segments = split_message("```a\n1\n```\ntail ```b\nopen")
        self.assertEqual(segments[0], Segment(SegmentKind.CODE, "1", "a"))
        self.assertEqual(segments[1], Segment(SegmentKind.TEXT, "\ntail ```b\nopen"))

    def test_single_line_fence_uses_content_as_language(self) -> None:
        segments = split_message("```python```")
        self.assertEqual(segments, [Segment(SegmentKind.CODE, "", "python")])

    def test_crlf_line_break_before_closing_fence_is_dropped(self) -> None:
        segments = split_message("```python\r\nx=1\r\n```")
        self.assertEqual(segments, [Segment(SegmentKind.CODE, "x=1", "python")])

    def test_crlf_interior_line_breaks_are_kept(self) -> None:
        segments = split_message("```\r\na\r\nb\r\n```")
        self.assertEqual(segments, [Segment(SegmentKind.CODE, "a\r\nb", "text")])


if __name__ == "__main__":
    unittest.main()
