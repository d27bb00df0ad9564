"""Map block nodes and spans onto rich renderables."""

from __future__ import annotations

from typing import Iterable

from rich.console import Group, RenderableType
from rich.syntax import Syntax
from rich.text import Text

from .models import (
    Blank,
    Bold,
    BlockNode,
    CodeBlock,
    Heading,
    InlineCode,
    Italic,
    ListBlock,
    Paragraph,
    PlainText,
    Span,
)

SPAN_STYLES: dict[type, str] = {
    PlainText: "",
    Bold: "bold",
    Italic: "italic",
    InlineCode: "bold red on grey15",
}

HEADING_STYLES: dict[int, str] = {
    1: "bold underline",
    2: "bold",
    3: "bold",
    4: "bold",
    5: "bold dim",
    6: "bold dim",
}

BULLET = "•"


def spans_to_rich(spans: Iterable[Span], base_style: str = "") -> Text:
    """Build one styled :class:`Text` from *spans*."""
    text = Text(style=base_style)
    for span in spans:
        text.append(span.text, style=SPAN_STYLES[type(span)] or None)
    return text


def highlight_code(block: CodeBlock, theme: str = "monokai") -> Syntax:
    """Delegate highlighting of *block* to pygments through rich."""
    return Syntax(
        block.raw_code,
        block.language.lower(),
        theme=theme,
        line_numbers=False,
        word_wrap=True,
    )


def list_to_rich(block: ListBlock) -> Text:
    lines = Text()
    for number, item in enumerate(block.items, start=1):
        marker = f"{number}. " if block.ordered else f"{BULLET} "
        if number > 1:
            lines.append("\n")
        lines.append("  " + marker, style="dim")
        lines.append_text(spans_to_rich(item))
    return lines


def block_to_rich(block: BlockNode, code_theme: str = "monokai") -> RenderableType:
    """Return the renderable for a single block node."""
    if isinstance(block, Heading):
        return spans_to_rich(block.spans, HEADING_STYLES[block.level])
    if isinstance(block, Paragraph):
        return spans_to_rich(block.spans)
    if isinstance(block, ListBlock):
        return list_to_rich(block)
    if isinstance(block, CodeBlock):
        return highlight_code(block, code_theme)
    if isinstance(block, Blank):
        return Text()
    raise TypeError(f"Unsupported block node {block!r}")


def blocks_to_rich(blocks: Iterable[BlockNode], code_theme: str = "monokai") -> Group:
    """Stack the renderables of *blocks* in order."""
    return Group(*(block_to_rich(block, code_theme) for block in blocks))
