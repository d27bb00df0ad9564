"""Inline formatter: one line of text to a flat sequence of styled spans.

Markers are resolved in three passes of decreasing precedence: backtick code
first, then ``**bold**``, then ``*italic*``. Each pass only sees the plain
text left over by the previous one, so markers inside code are inert and
bold content is never re-scanned for italics.
"""

from __future__ import annotations

import re
from typing import Callable, Iterable

from .models import Bold, InlineCode, Italic, PlainText, Span

_CODE_RE = re.compile(r"(`[^`]+`)")
_BOLD_RE = re.compile(r"(\*\*[^*]+\*\*)")
_ITALIC_RE = re.compile(r"(\*[^*]+\*)")


def _split_pass(
    spans: Iterable[Span],
    pattern: re.Pattern[str],
    marker: str,
    factory: Callable[[str], Span],
) -> list[Span]:
    result: list[Span] = []
    width = len(marker)
    for span in spans:
        if not isinstance(span, PlainText):
            result.append(span)
            continue
        for index, piece in enumerate(pattern.split(span.text)):
            if not piece:
                continue
            if index % 2:
                result.append(factory(piece[width:-width]))
            else:
                result.append(PlainText(piece))
    return result


def _merge_plain(spans: list[Span]) -> list[Span]:
    merged: list[Span] = []
    for span in spans:
        if merged and isinstance(span, PlainText) and isinstance(merged[-1], PlainText):
            merged[-1] = PlainText(merged[-1].text + span.text)
        else:
            merged.append(span)
    return merged


def format_inline(text: str) -> list[Span]:
    """Return the styled spans for *text*, a single line without newlines.

    Empty delimiter pairs (two adjacent backticks, ``****`` or ``**``) do not
    match any pattern and survive as literal plain text.
    """
    if not text:
        return []
    spans: list[Span] = [PlainText(text)]
    spans = _split_pass(spans, _CODE_RE, "`", InlineCode)
    spans = _split_pass(spans, _BOLD_RE, "**", Bold)
    spans = _split_pass(spans, _ITALIC_RE, "*", Italic)
    return _merge_plain(spans)


def spans_to_text(spans: Iterable[Span]) -> str:
    """Concatenate the visible text of *spans*, dropping all markers."""
    return "".join(span.text for span in spans)
