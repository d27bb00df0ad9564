"""Code block widget with a language label and a copy-to-clipboard button."""

from __future__ import annotations

import logging
from typing import Any

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.message import Message
from textual.widgets import Button, Label, Static

from ..models import CodeBlock
from ..presentation import highlight_code

LOGGER = logging.getLogger(__name__)

COPY_LABEL = "Copy"
COPIED_LABEL = "Copied"


class CodeBlockView(Vertical):
    """Render a fenced code block; the copy button reports the raw code."""

    DEFAULT_CSS = """
    CodeBlockView {
        height: auto;
        margin: 1 0;
        border: solid $panel;
        background: $surface-darken-1;
    }
    CodeBlockView > #code-header {
        height: 1;
        padding: 0 1;
        background: $panel;
    }
    CodeBlockView > #code-header > #lang-label {
        width: 1fr;
        color: $text-muted;
    }
    CodeBlockView > #code-header > #copy-btn {
        width: auto;
        min-width: 8;
        height: 1;
        border: none;
        background: $panel;
        color: $text;
        padding: 0 1;
    }
    CodeBlockView > #code-header > #copy-btn:hover {
        background: $accent;
    }
    CodeBlockView > #code-body {
        height: auto;
        padding: 0 1;
    }
    """

    class CopyRequested(Message):
        """Posted when the user clicks the copy button."""

        def __init__(self, code: str) -> None:
            super().__init__()
            self.code = code

    def __init__(
        self,
        block: CodeBlock,
        code_theme: str = "monokai",
        copy_feedback_seconds: float = 2.0,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.block = block
        self.code_theme = code_theme
        self.copy_feedback_seconds = copy_feedback_seconds

    def compose(self) -> ComposeResult:
        with Horizontal(id="code-header"):
            yield Label(self.block.language, id="lang-label")
            yield Button(COPY_LABEL, id="copy-btn")
        yield Static(highlight_code(self.block, self.code_theme), id="code-body")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Request a copy and flip the button label for a short while."""
        if event.button.id != "copy-btn":
            return
        event.stop()
        self.post_message(self.CopyRequested(self.block.raw_code))
        event.button.label = COPIED_LABEL
        self.set_timer(self.copy_feedback_seconds, self._reset_copy_label)

    def _reset_copy_label(self) -> None:
        try:
            self.query_one("#copy-btn", Button).label = COPY_LABEL
        except NoMatches:
            LOGGER.debug("code_block.reset_label.skipped")
