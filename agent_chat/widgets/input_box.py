"""Input row with the message field and a send/stop button pair."""

from __future__ import annotations

from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widgets import Button, Input, Static


class InputBox(Vertical):
    """Message field plus a send button that turns into stop while streaming."""

    class StopRequested(Message):
        """Posted when the user clicks the stop button."""

    def compose(self):  # type: ignore[override]
        with Horizontal(id="input_row"):
            yield Input(placeholder="Message AI Assistant...", id="message_input")
            yield Button("Send", id="send_button", variant="success")
            yield Button("Stop", id="stop_button", variant="error", classes="hidden")
        yield Static(
            "AI can make mistakes. Consider checking important information.",
            id="input_disclaimer",
        )

    def set_mode(self, *, pending: bool, streaming: bool) -> None:
        """Reflect the session flags on the input controls."""
        self.query_one("#message_input", Input).disabled = pending
        send_button = self.query_one("#send_button", Button)
        stop_button = self.query_one("#stop_button", Button)
        send_button.disabled = pending
        send_button.set_class(streaming, "hidden")
        stop_button.set_class(not streaming, "hidden")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Forward stop clicks as StopRequested messages."""
        if event.button.id == "stop_button":
            event.stop()
            self.post_message(self.StopRequested())
