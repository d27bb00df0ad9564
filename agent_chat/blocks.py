"""Line lexer and block segmenter for the prose parts of a message."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import re
from typing import Iterable, Iterator

from .inline import format_inline
from .models import Blank, BlockNode, Heading, ListBlock, Paragraph, Span

MAX_HEADING_LEVEL = 6

_HEADING_RE = re.compile(r"^(#+)\s*")
_BULLET_RE = re.compile(r"^[-*+]\s")
_ORDERED_RE = re.compile(r"^\d+\.\s")


class LineKind(str, Enum):
    BLANK = "blank"
    HEADING = "heading"
    BULLET = "bullet"
    ORDERED = "ordered"
    TEXT = "text"


@dataclass(frozen=True)
class LineToken:
    """A classified source line with its markers already stripped."""

    kind: LineKind
    text: str = ""
    level: int = 0


def classify_line(line: str) -> LineToken:
    """Classify one line, checking heading, then bullet, then ordered markers."""
    stripped = line.strip()
    if not stripped:
        return LineToken(LineKind.BLANK)
    heading = _HEADING_RE.match(stripped)
    if heading:
        level = min(len(heading.group(1)), MAX_HEADING_LEVEL)
        return LineToken(LineKind.HEADING, stripped[heading.end() :], level)
    bullet = _BULLET_RE.match(stripped)
    if bullet:
        return LineToken(LineKind.BULLET, stripped[bullet.end() :])
    ordered = _ORDERED_RE.match(stripped)
    if ordered:
        return LineToken(LineKind.ORDERED, stripped[ordered.end() :])
    return LineToken(LineKind.TEXT, stripped)


def tokenize(text: str) -> Iterator[LineToken]:
    """Yield one token per ``\\n``-separated line of *text*."""
    for line in text.split("\n"):
        yield classify_line(line)


class _PendingList:
    def __init__(self) -> None:
        self.kind: LineKind | None = None
        self.items: list[tuple[Span, ...]] = []

    def add(self, token: LineToken, out: list[BlockNode]) -> None:
        if self.kind is not token.kind:
            self.flush(out)
            self.kind = token.kind
        self.items.append(tuple(format_inline(token.text)))

    def flush(self, out: list[BlockNode]) -> None:
        if self.items:
            out.append(
                ListBlock(ordered=self.kind is LineKind.ORDERED, items=tuple(self.items))
            )
        self.kind = None
        self.items = []


def segment_tokens(tokens: Iterable[LineToken]) -> list[BlockNode]:
    """Group line tokens into block nodes.

    Consecutive list lines of the same kind share one ``ListBlock``; any other
    line, or a list line of the other kind, closes the open list.
    """
    blocks: list[BlockNode] = []
    pending = _PendingList()
    for token in tokens:
        if token.kind in (LineKind.BULLET, LineKind.ORDERED):
            pending.add(token, blocks)
            continue
        pending.flush(blocks)
        if token.kind is LineKind.BLANK:
            blocks.append(Blank())
        elif token.kind is LineKind.HEADING:
            blocks.append(Heading(token.level, tuple(format_inline(token.text))))
        else:
            blocks.append(Paragraph(tuple(format_inline(token.text))))
    pending.flush(blocks)
    return blocks


def segment_text(text: str) -> list[BlockNode]:
    """Return the block nodes for a prose segment."""
    return segment_tokens(tokenize(text))
