"""Split a message into prose and fenced-code segments.

Fences are matched pairwise and non-greedily, so an odd trailing fence is
left in the surrounding prose instead of swallowing the rest of the message.
"""

from __future__ import annotations

import re

from .models import Segment, SegmentKind

FENCE = "```"
DEFAULT_LANGUAGE = "text"

_FENCE_RE = re.compile(r"(```.*?```)", re.DOTALL)


def _code_segment(fenced: str) -> Segment:
    inner = fenced[len(FENCE) : -len(FENCE)]
    first_line, newline, body = inner.partition("\n")
    language = first_line.strip() or DEFAULT_LANGUAGE
    # The line break before the closing fence belongs to the fence, not the code.
    if newline:
        if body.endswith("\r\n"):
            body = body[:-2]
        elif body.endswith("\n"):
            body = body[:-1]
    return Segment(SegmentKind.CODE, body, language=language)


def split_message(text: str) -> list[Segment]:
    """Return the ordered ``TEXT``/``CODE`` segments of *text*.

    Text outside fences is passed through untouched. A message without any
    complete fence pair yields exactly one text segment equal to the input.
    """
    parts = _FENCE_RE.split(text)
    if len(parts) == 1:
        return [Segment(SegmentKind.TEXT, text)]

    segments: list[Segment] = []
    for index, part in enumerate(parts):
        # re.split places captured fences at odd indices.
        if index % 2:
            segments.append(_code_segment(part))
        elif part:
            segments.append(Segment(SegmentKind.TEXT, part))
    return segments
