"""Render pipeline: message text to an ordered sequence of block nodes."""

from __future__ import annotations

from typing import Iterable

from .blocks import segment_text
from .fences import split_message
from .inline import spans_to_text
from .models import (
    Blank,
    BlockNode,
    CodeBlock,
    Heading,
    ListBlock,
    Paragraph,
    SegmentKind,
)


def render_message(text: str) -> list[BlockNode]:
    """Render *text* into block nodes in display order.

    Fenced code is extracted first and never reaches the prose segmenter.
    """
    blocks: list[BlockNode] = []
    for segment in split_message(text):
        if segment.kind is SegmentKind.CODE:
            blocks.append(CodeBlock(segment.language, segment.content))
        else:
            blocks.extend(segment_text(segment.content))
    return blocks


def block_text(block: BlockNode) -> str:
    """Return the visible text of one block, list items joined by newlines."""
    if isinstance(block, (Heading, Paragraph)):
        return spans_to_text(block.spans)
    if isinstance(block, ListBlock):
        return "\n".join(spans_to_text(item) for item in block.items)
    if isinstance(block, CodeBlock):
        return block.raw_code
    if isinstance(block, Blank):
        return ""
    raise TypeError(f"Unsupported block node {block!r}")


def blocks_to_text(blocks: Iterable[BlockNode]) -> str:
    """Concatenate the visible text of *blocks*, one block per line."""
    return "\n".join(block_text(block) for block in blocks)
