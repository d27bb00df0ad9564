"""Message bubble widgets for finished, streaming and pending replies."""

from __future__ import annotations

from typing import Any

from rich.console import Group
from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import Static

from ..models import BlockNode, CodeBlock, Message, Role
from ..presentation import blocks_to_rich
from ..render import render_message
from .code_block import CodeBlockView

STREAM_CURSOR = "▌"


def group_blocks(blocks: list[BlockNode]) -> list[list[BlockNode] | CodeBlock]:
    """Collapse runs of prose blocks so each run renders in one widget."""
    groups: list[list[BlockNode] | CodeBlock] = []
    for block in blocks:
        if isinstance(block, CodeBlock):
            groups.append(block)
        elif groups and isinstance(groups[-1], list):
            groups[-1].append(block)
        else:
            groups.append([block])
    return groups


class MessageBubble(Vertical):
    """Render one stored message: verbatim for the user, formatted for the assistant."""

    DEFAULT_CSS = """
    MessageBubble {
        height: auto;
    }
    MessageBubble > .bubble-header {
        color: $text-muted;
    }
    MessageBubble > .prose-segment {
        height: auto;
    }
    """

    def __init__(
        self,
        message: Message,
        show_timestamp: bool = True,
        code_theme: str = "monokai",
        copy_feedback_seconds: float = 2.0,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.message = message
        self.show_timestamp = show_timestamp
        self.code_theme = code_theme
        self.copy_feedback_seconds = copy_feedback_seconds
        self.add_class(f"role-{message.role.value}")

    @property
    def role_prefix(self) -> str:
        """Return a human-friendly role label."""
        return "You" if self.message.role is Role.USER else "Assistant"

    def header_text(self) -> Text:
        header = Text(self.role_prefix, style="bold")
        if self.show_timestamp:
            local = self.message.timestamp.astimezone()
            header.append(f"  {local:%H:%M}", style="dim italic")
        return header

    def compose(self) -> ComposeResult:
        yield Static(self.header_text(), classes="bubble-header")
        if self.message.role is Role.USER:
            yield Static(Text(self.message.content), classes="prose-segment")
            return
        for group in group_blocks(render_message(self.message.content)):
            if isinstance(group, CodeBlock):
                yield CodeBlockView(
                    group,
                    code_theme=self.code_theme,
                    copy_feedback_seconds=self.copy_feedback_seconds,
                )
            else:
                yield Static(
                    blocks_to_rich(group, self.code_theme), classes="prose-segment"
                )


class StreamingBubble(Static):
    """Live view of a reply being revealed, re-rendered on every tick."""

    def __init__(self, code_theme: str = "monokai", **kwargs: Any) -> None:
        super().__init__("", **kwargs)
        self.code_theme = code_theme
        self.revealed_text = ""
        self.add_class("role-assistant")

    def set_text(self, text: str) -> None:
        self.revealed_text = text
        rendered = blocks_to_rich(render_message(text), self.code_theme)
        cursor = Text(STREAM_CURSOR, style="blink dim")
        self.update(Group(rendered, cursor))


class PendingBubble(Static):
    """Placeholder shown while the remote reply is outstanding."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(Text("Thinking...", style="dim italic"), **kwargs)
        self.add_class("role-assistant")
