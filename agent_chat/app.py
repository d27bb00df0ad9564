"""Main Textual application for chatting with the remote multi-agent service."""

from __future__ import annotations

from collections.abc import Callable
import logging
from pathlib import Path
import sys
from typing import Any

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.message_pump import MessagePump
from textual.timer import Timer
from textual.widgets import Button, Footer, Header, Input

from .client import ChatClient
from .config import Config, load_settings
from .logging_utils import configure_logging
from .models import Message, Role
from .session import ConversationSession
from .state import SessionState
from .widgets.code_block import CodeBlockView
from .widgets.conversation import ConversationView
from .widgets.input_box import InputBox

LOGGER = logging.getLogger(__name__)


class _TimerHandle:
    def __init__(self, timer: Timer) -> None:
        self._timer = timer

    def cancel(self) -> None:
        self._timer.stop()


class TextualScheduler:
    """Drive reveal ticks from a Textual interval timer on *host*."""

    def __init__(self, host: MessagePump) -> None:
        self._host = host

    def schedule(self, callback: Callable[[], None], interval: float) -> _TimerHandle:
        return _TimerHandle(self._host.set_interval(interval, callback))


class AgentChatApp(App):
    """Chat UI that paces assistant replies out word by word."""

    CSS = """
    Screen {
        layout: vertical;
        background: $background;
    }

    #app-root {
        layout: vertical;
        width: 100%;
        height: 1fr;
    }

    #conversation {
        height: 1fr;
        padding: 1;
    }

    InputBox {
        height: auto;
        padding: 0 1;
        border-top: solid $panel;
        background: $surface;
    }

    #input_row {
        height: auto;
    }

    #message_input {
        width: 1fr;
    }

    #send_button, #stop_button {
        margin-left: 1;
        min-width: 10;
    }

    #input_disclaimer {
        color: $text-muted;
        content-align: center middle;
        width: 100%;
    }

    .hidden {
        display: none;
    }

    MessageBubble, StreamingBubble, PendingBubble {
        width: 85%;
        height: auto;
        margin: 1 0;
        padding: 1 2;
        border: round $panel;
    }

    .message-user {
        margin-left: 15%;
        background: $primary 30%;
    }

    .message-assistant {
        background: $surface;
    }
    """

    DEFAULT_ACTION_DESCRIPTIONS: dict[str, str] = {
        "send_message": "Send",
        "new_conversation": "New Chat",
        "interrupt_stream": "Stop",
        "copy_last_message": "Copy Last",
        "quit": "Quit",
    }

    def __init__(
        self,
        config_path: Path | None = None,
        session: ConversationSession | None = None,
    ) -> None:
        self.settings: Config = load_settings(config_path)
        configure_logging(self.settings.logging.model_dump())
        LOGGER.info(
            "app.python",
            extra={
                "event": "app.python",
                "executable": sys.executable,
                "version": sys.version.split()[0],
            },
        )
        chat_cfg = self.settings.chat
        self.client: ChatClient | None = None
        if session is None:
            self.client = ChatClient(chat_cfg.endpoint, timeout=chat_cfg.timeout)
            session = ConversationSession(
                self.client,
                TextualScheduler(self),
                tick_interval=self.settings.reveal.tick_interval_seconds,
                error_message=chat_cfg.render_error_message(),
            )
        self.session = session
        self.session.on_message = self._on_session_message
        self.session.on_progress = self._on_session_progress
        self.session.on_state_change = self._on_session_state
        self._binding_specs = self._binding_specs_from_config(
            self.settings.keybinds.model_dump()
        )

        self._w_input: Input | None = None
        self._w_input_box: InputBox | None = None
        self._w_conversation: ConversationView | None = None
        super().__init__()

    @classmethod
    def _binding_specs_from_config(cls, keybinds: dict[str, Any]) -> list[Binding]:
        bindings: list[Binding] = []
        for action_name, description in cls.DEFAULT_ACTION_DESCRIPTIONS.items():
            binding_key = keybinds.get(action_name)
            if isinstance(binding_key, str) and binding_key.strip():
                bindings.append(
                    Binding(
                        key=binding_key.strip(),
                        action=action_name,
                        description=description,
                        show=True,
                    )
                )
        return bindings

    def compose(self) -> ComposeResult:
        """Compose app widgets."""
        ui_cfg = self.settings.ui
        yield Header()
        with Container(id="app-root"):
            yield ConversationView(
                show_timestamps=ui_cfg.show_timestamps,
                code_theme=ui_cfg.code_theme,
                copy_feedback_seconds=ui_cfg.copy_feedback_seconds,
                id="conversation",
            )
            yield InputBox()
        yield Footer()

    async def on_mount(self) -> None:
        """Register runtime keybindings and cache widget references."""
        self.title = self.settings.app.title
        self.sub_title = "Ready"
        for binding in self._binding_specs:
            self.bind(
                binding.key,
                binding.action,
                description=binding.description,
                show=binding.show,
            )
        self._w_input = self.query_one("#message_input", Input)
        self._w_input_box = self.query_one(InputBox)
        self._w_conversation = self.query_one(ConversationView)
        self._w_input.focus()

    async def on_unmount(self) -> None:
        await self.session.close()
        if self.client is not None:
            await self.client.aclose()

    # Session callbacks run synchronously inside the session; widget updates
    # that need awaiting are queued on the app.

    def _on_session_message(self, message: Message) -> None:
        self.call_later(self._show_message, message)

    def _on_session_progress(self, text: str) -> None:
        if self._w_conversation is not None:
            self._w_conversation.update_streaming(text)

    def _on_session_state(self, state: SessionState) -> None:
        self.call_later(self._show_state, state)

    async def _show_message(self, message: Message) -> None:
        conversation = self._w_conversation or self.query_one(ConversationView)
        await conversation.add_message(message)

    async def _show_state(self, state: SessionState) -> None:
        conversation = self._w_conversation or self.query_one(ConversationView)
        input_box = self._w_input_box or self.query_one(InputBox)
        input_box.set_mode(
            pending=state is SessionState.PENDING,
            streaming=state is SessionState.STREAMING,
        )
        if state is SessionState.PENDING:
            self.sub_title = "Thinking..."
            await conversation.show_pending()
        elif state is SessionState.STREAMING:
            self.sub_title = "Streaming response..."
            bubble = await conversation.show_streaming()
            bubble.set_text(self.session.streaming_text)
        else:
            self.sub_title = "Ready"
            await conversation.clear_transient()
            if self._w_input is not None:
                self._w_input.focus()

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        """Handle input submit events."""
        if event.input.id == "message_input":
            await self.send_user_message()

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle send button clicks."""
        if event.button.id == "send_button":
            await self.send_user_message()

    async def on_input_box_stop_requested(self, _message: InputBox.StopRequested) -> None:
        await self.action_interrupt_stream()

    def on_code_block_view_copy_requested(self, event: CodeBlockView.CopyRequested) -> None:
        """Copy a code block's raw text to the clipboard."""
        event.stop()
        self.copy_to_clipboard(event.code)
        self.sub_title = "Code copied to clipboard."

    async def action_send_message(self) -> None:
        """Action invoked by keybinding for sending a message."""
        await self.send_user_message()

    async def send_user_message(self) -> None:
        """Hand the input text to the session without blocking the UI."""
        input_widget = self._w_input or self.query_one("#message_input", Input)
        if not await self.session.state.can_send_message():
            self.sub_title = "Busy. Wait for the current reply to finish."
            return
        text = input_widget.value
        if not text.strip():
            self.sub_title = "Cannot send an empty message."
            return
        input_widget.value = ""
        self.run_worker(self.session.submit(text), group="send", exit_on_error=False)

    async def action_interrupt_stream(self) -> None:
        """Stop the reveal in progress, keeping what was already shown."""
        if not self.session.is_streaming:
            self.sub_title = "No response to interrupt."
            return
        await self.session.cancel()
        self.sub_title = "Response stopped."

    async def action_new_conversation(self) -> None:
        """Clear the conversation and abandon any reply in flight."""
        await self.session.reset()
        conversation = self._w_conversation or self.query_one(ConversationView)
        await conversation.reset()
        input_box = self._w_input_box or self.query_one(InputBox)
        input_box.set_mode(pending=False, streaming=False)
        self.sub_title = "New conversation."

    async def action_copy_last_message(self) -> None:
        """Copy the newest assistant reply to the clipboard."""
        last = self.session.store.last(Role.ASSISTANT)
        if last is None:
            self.sub_title = "No assistant message to copy."
            return
        self.copy_to_clipboard(last.content)
        self.sub_title = "Copied last reply to clipboard."
