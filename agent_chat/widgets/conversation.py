"""Scrollable conversation view widget."""

from __future__ import annotations

from typing import Any

from textual.containers import VerticalScroll

from ..models import Message
from .message import MessageBubble, PendingBubble, StreamingBubble
from .welcome import WelcomePanel


class ConversationView(VerticalScroll):
    """Host the message bubbles plus at most one transient reply bubble."""

    def __init__(
        self,
        show_timestamps: bool = True,
        code_theme: str = "monokai",
        copy_feedback_seconds: float = 2.0,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.show_timestamps = show_timestamps
        self.code_theme = code_theme
        self.copy_feedback_seconds = copy_feedback_seconds
        self._transient: PendingBubble | StreamingBubble | None = None

    def compose(self):  # type: ignore[override]
        yield WelcomePanel()

    async def add_message(self, message: Message) -> MessageBubble:
        """Create, mount, and scroll to a new message bubble."""
        await self._hide_welcome()
        bubble = MessageBubble(
            message,
            show_timestamp=self.show_timestamps,
            code_theme=self.code_theme,
            copy_feedback_seconds=self.copy_feedback_seconds,
        )
        bubble.add_class(f"message-{message.role.value}")
        if self._transient is not None:
            await self.mount(bubble, before=self._transient)
        else:
            await self.mount(bubble)
        self.scroll_end(animate=True)
        return bubble

    async def show_pending(self) -> PendingBubble:
        """Show the thinking placeholder in place of any transient bubble."""
        bubble = PendingBubble(classes="message-assistant")
        await self._replace_transient(bubble)
        return bubble

    async def show_streaming(self) -> StreamingBubble:
        """Show an empty streaming bubble in place of any transient bubble."""
        bubble = StreamingBubble(code_theme=self.code_theme, classes="message-assistant")
        await self._replace_transient(bubble)
        return bubble

    def update_streaming(self, text: str) -> None:
        if isinstance(self._transient, StreamingBubble):
            self._transient.set_text(text)
            self.scroll_end(animate=False)

    async def clear_transient(self) -> None:
        if self._transient is not None:
            await self._transient.remove()
            self._transient = None

    async def reset(self) -> None:
        """Remove every bubble and show the welcome panel again."""
        self._transient = None
        await self.remove_children()
        await self.mount(WelcomePanel())

    async def _replace_transient(self, bubble: PendingBubble | StreamingBubble) -> None:
        await self.clear_transient()
        await self._hide_welcome()
        self._transient = bubble
        await self.mount(bubble)
        self.scroll_end(animate=False)

    async def _hide_welcome(self) -> None:
        for panel in self.query(WelcomePanel):
            await panel.remove()
