"""Conversation session: one user turn, one request, one paced reply."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
import logging
from typing import Protocol

from .exceptions import ChatTransportError
from .message_store import MessageStore
from .models import Message, Role
from .reveal import (
    DEFAULT_TICK_INTERVAL_SECONDS,
    AsyncioScheduler,
    RevealController,
    RevealResult,
    Scheduler,
)
from .state import SessionState, StateManager

LOGGER = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = (
    "Sorry, I encountered an error. Please make sure the backend server is running."
)


class ReplySource(Protocol):
    async def send(self, message: str) -> str: ...


class ConversationSession:
    """Own the message list, the request/streaming flags and the active reveal.

    Only one request is ever in flight: :meth:`submit` is ignored unless the
    session is idle, and :meth:`cancel` is ignored unless a reply is being
    revealed.
    """

    def __init__(
        self,
        client: ReplySource,
        scheduler: Scheduler | None = None,
        *,
        tick_interval: float = DEFAULT_TICK_INTERVAL_SECONDS,
        error_message: str = DEFAULT_ERROR_MESSAGE,
        on_message: Callable[[Message], None] | None = None,
        on_progress: Callable[[str], None] | None = None,
        on_state_change: Callable[[SessionState], None] | None = None,
    ) -> None:
        self._client = client
        self.error_message = error_message
        self.on_message = on_message
        self.on_progress = on_progress
        self.on_state_change = on_state_change
        self.store = MessageStore()
        self.state = StateManager()
        self._reveal = RevealController(
            scheduler or AsyncioScheduler(),
            interval=tick_interval,
            on_progress=self._handle_progress,
            on_finalize=self._handle_finalize,
        )
        self._reveal_done: asyncio.Future[RevealResult | None] | None = None
        self._inflight: asyncio.Task[object] | None = None

    @property
    def messages(self) -> tuple[Message, ...]:
        return self.store.messages

    @property
    def is_pending(self) -> bool:
        """True while waiting for the remote reply."""
        return self.state.current is SessionState.PENDING

    @property
    def is_streaming(self) -> bool:
        """True while a reply is being revealed."""
        return self.state.current is SessionState.STREAMING

    @property
    def streaming_text(self) -> str:
        """Return the prefix revealed so far, or an empty string."""
        return self._reveal.emitted_prefix

    async def submit(self, text: str) -> Message | None:
        """Send *text* and return the assistant message appended for it.

        Returns ``None`` when the input is blank, when the session is busy, or
        when a reveal is cancelled before any word was shown.
        """
        content = text.strip()
        if not content:
            return None
        if not await self.state.transition_if(SessionState.IDLE, SessionState.PENDING):
            LOGGER.info(
                "session.submit.ignored",
                extra={
                    "event": "session.submit.ignored",
                    "state": self.state.current.value,
                },
            )
            return None
        self._inflight = asyncio.current_task()
        try:
            self._append(Role.USER, content)
            self._announce(SessionState.IDLE, SessionState.PENDING)
            try:
                reply = await self._client.send(content)
            except ChatTransportError as exc:
                LOGGER.warning(
                    "session.request.failed",
                    extra={
                        "event": "session.request.failed",
                        "error_type": exc.__class__.__name__,
                    },
                )
                return self._append(Role.ASSISTANT, self.error_message)

            result = await self._reveal_reply(reply)
            if result is None:
                return None
            return self._append(Role.ASSISTANT, result.text)
        finally:
            self._inflight = None
            self._reveal.close()
            self._reveal_done = None
            await self._transition(SessionState.IDLE)

    async def cancel(self) -> RevealResult | None:
        """Stop the reveal in progress; no-op unless streaming."""
        if await self.state.get_state() is not SessionState.STREAMING:
            LOGGER.debug(
                "session.cancel.ignored", extra={"event": "session.cancel.ignored"}
            )
            return None
        result = self._reveal.cancel()
        self._resolve_reveal(result)
        return result

    async def reset(self) -> None:
        """Start a new conversation, abandoning any request or reveal in flight."""
        await self.close()
        self.store.clear()
        await self._transition(SessionState.IDLE)
        LOGGER.info("session.reset", extra={"event": "session.reset"})

    async def close(self) -> None:
        """Abandon any request in flight and release the reveal timer.

        Nothing is appended for a reply cut off this way.
        """
        task = self._inflight
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._reveal.close()
        self._resolve_reveal(None)

    async def _reveal_reply(self, reply: str) -> RevealResult | None:
        self._reveal_done = asyncio.get_running_loop().create_future()
        await self._transition(SessionState.STREAMING)
        self._reveal.start(reply)
        return await self._reveal_done

    def _append(self, role: Role, content: str) -> Message:
        message = self.store.append(role, content)
        if self.on_message is not None:
            self.on_message(message)
        return message

    def _handle_progress(self, prefix: str) -> None:
        if self.on_progress is not None:
            self.on_progress(prefix)

    def _handle_finalize(self, result: RevealResult) -> None:
        self._resolve_reveal(result)

    def _resolve_reveal(self, result: RevealResult | None) -> None:
        if self._reveal_done is not None and not self._reveal_done.done():
            self._reveal_done.set_result(result)

    async def _transition(self, new_state: SessionState) -> None:
        previous = self.state.current
        current = await self.state.transition_to(new_state)
        if previous is not current:
            self._announce(previous, current)

    def _announce(self, previous: SessionState, new_state: SessionState) -> None:
        LOGGER.info(
            "session.state.transition",
            extra={
                "event": "session.state.transition",
                "from_state": previous.value,
                "to_state": new_state.value,
            },
        )
        if self.on_state_change is not None:
            self.on_state_change(new_state)
