"""Tests for the conversation session flow."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
import unittest

from agent_chat.exceptions import ChatConnectionError, ChatTransportError
from agent_chat.models import Role
from agent_chat.reveal import RevealResult
from agent_chat.session import DEFAULT_ERROR_MESSAGE, ConversationSession
from agent_chat.state import SessionState


class ManualHandle:
    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

class ManualScheduler:
    """Scheduler that only ticks when :meth:`fire` is called."""

    def __init__(self) -> None:
        self.callback: Callable[[], None] | None = None
        self.handles: list[ManualHandle] = []

    def schedule(self, callback: Callable[[], None], interval: float) -> ManualHandle:  # noqa: ARG002
        self.callback = callback
        handle = ManualHandle()
        self.handles.append(handle)
        return handle

    @property
    def live(self) -> bool:
        return bool(self.handles) and not self.handles[-1].cancelled

    def fire(self, times: int = 1) -> None:
        for _ in range(times):
            if not self.live or self.callback is None:
                return
            self.callback()

    def drain(self, limit: int = 1000) -> None:
        """Tick until the current reveal releases its timer."""
        for _ in range(limit):
            if not self.live:
                return
            self.fire()

class FakeReplySource:
    """Reply source returning canned replies, optionally gated or failing."""

    def __init__(
        self,
        reply: str = "hello there",
        *,
        error: ChatTransportError | None = None,
        gated: bool = False,
    ) -> None:
        self.reply = reply
        self.error = error
        self.sent: list[str] = []
        self.gate = asyncio.Event()
        if not gated:
            self.gate.set()

    async def send(self, message: str) -> str:
        self.sent.append(message)
        await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.reply

async def wait_until(predicate: Callable[[], bool], attempts: int = 200) -> None:
    """Yield to the loop until *predicate* holds."""
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition not reached")

class ConversationSessionTests(unittest.IsolatedAsyncioTestCase):
    """Validate the IDLE -> PENDING -> STREAMING -> IDLE cycle."""

    def _build(
        self, source: FakeReplySource
    ) -> tuple[ConversationSession, ManualScheduler]:
        scheduler = ManualScheduler()
        self.states: list[SessionState] = []
        self.progress: list[str] = []
        self.appended: list[str] = []
        session = ConversationSession(
            source,
            scheduler,
            on_message=lambda message: self.appended.append(message.content),
            on_progress=self.progress.append,
            on_state_change=self.states.append,
        )
        return session, scheduler

    async def test_successful_turn_appends_full_reply(self) -> None:
        session, scheduler = self._build(FakeReplySource("a b c"))
        task = asyncio.create_task(session.submit("  hi  "))
        await wait_until(lambda: session.is_streaming)
        scheduler.drain()
        message = await task

        self.assertIsNotNone(message)
        assert message is not None
        self.assertEqual(message.content, "a b c")
        self.assertEqual(message.role, Role.ASSISTANT)
        self.assertEqual(
            [(m.role, m.content) for m in session.messages],
            [(Role.USER, "hi"), (Role.ASSISTANT, "a b c")],
        )
        self.assertEqual(self.progress, ["a", "a b", "a b c"])
        self.assertEqual(
            self.states,
            [SessionState.PENDING, SessionState.STREAMING, SessionState.IDLE],
        )
        self.assertFalse(session.is_pending)
        self.assertFalse(session.is_streaming)

    async def test_user_message_is_appended_before_pending_is_announced(self) -> None:
        source = FakeReplySource(gated=True)
        session, scheduler = self._build(source)
        seen_at_pending: list[int] = []

        def record(state: SessionState) -> None:
            if state is SessionState.PENDING:
                seen_at_pending.append(len(session.messages))

        session.on_state_change = record

        task = asyncio.create_task(session.submit("question"))
        await wait_until(lambda: session.is_pending)
        self.assertEqual(seen_at_pending, [1])
        source.gate.set()
        await wait_until(lambda: session.is_streaming)
        scheduler.drain()
        await task

    async def test_blank_input_is_ignored(self) -> None:
        source = FakeReplySource()
        session, _scheduler = self._build(source)
        self.assertIsNone(await session.submit("   \n\t"))
        self.assertEqual(session.messages, ())
        self.assertEqual(source.sent, [])
        self.assertEqual(self.states, [])

    async def test_submit_while_pending_is_noop(self) -> None:
        source = FakeReplySource("done", gated=True)
        session, scheduler = self._build(source)
        first = asyncio.create_task(session.submit("first"))
        await wait_until(lambda: session.is_pending)

        self.assertIsNone(await session.submit("second"))
        self.assertEqual(len(session.messages), 1)
        self.assertEqual(source.sent, ["first"])

        source.gate.set()
        await wait_until(lambda: session.is_streaming)
        self.assertIsNone(await session.submit("third"))
        scheduler.drain()
        await first
        self.assertEqual(source.sent, ["first"])
        self.assertEqual(len(session.messages), 2)

    async def test_transport_failure_appends_error_reply(self) -> None:
        source = FakeReplySource(error=ChatConnectionError("down"))
        session, scheduler = self._build(source)
        message = await session.submit("hello")

        assert message is not None
        self.assertEqual(message.content, DEFAULT_ERROR_MESSAGE)
        self.assertEqual(message.role, Role.ASSISTANT)
        self.assertEqual(len(session.messages), 2)
        self.assertEqual(scheduler.handles, [])
        self.assertEqual(self.states, [SessionState.PENDING, SessionState.IDLE])

    async def test_custom_error_message_is_used(self) -> None:
        source = FakeReplySource(error=ChatConnectionError("down"))
        session, _scheduler = self._build(source)
        session.error_message = "Backend unavailable."
        message = await session.submit("hello")
        assert message is not None
        self.assertEqual(message.content, "Backend unavailable.")

    async def test_cancel_keeps_revealed_prefix(self) -> None:
        session, scheduler = self._build(FakeReplySource("a b c d"))
        task = asyncio.create_task(session.submit("go"))
        await wait_until(lambda: session.is_streaming)
        scheduler.fire(2)
        self.assertEqual(session.streaming_text, "a b")

        result = await session.cancel()
        self.assertEqual(result, RevealResult("a b", truncated=True))
        message = await task
        assert message is not None
        self.assertEqual(message.content, "a b")
        self.assertEqual(session.messages[-1].content, "a b")
        self.assertTrue(scheduler.handles[-1].cancelled)
        self.assertEqual(session.state.current, SessionState.IDLE)

    async def test_cancel_before_first_word_appends_nothing(self) -> None:
        session, scheduler = self._build(FakeReplySource("a b"))
        task = asyncio.create_task(session.submit("go"))
        await wait_until(lambda: session.is_streaming)
        self.assertIsNone(await session.cancel())
        self.assertIsNone(await task)
        self.assertEqual([m.role for m in session.messages], [Role.USER])
        self.assertTrue(scheduler.handles[-1].cancelled)

    async def test_cancel_while_not_streaming_is_noop(self) -> None:
        source = FakeReplySource(gated=True)
        session, scheduler = self._build(source)
        self.assertIsNone(await session.cancel())

        task = asyncio.create_task(session.submit("go"))
        await wait_until(lambda: session.is_pending)
        self.assertIsNone(await session.cancel())
        self.assertTrue(session.is_pending)
        source.gate.set()
        await wait_until(lambda: session.is_streaming)
        scheduler.drain()
        await task

    async def test_reset_abandons_pending_request(self) -> None:
        source = FakeReplySource(gated=True)
        session, scheduler = self._build(source)
        task = asyncio.create_task(session.submit("go"))
        await wait_until(lambda: session.is_pending)

        await session.reset()
        self.assertTrue(task.cancelled())
        self.assertEqual(session.messages, ())
        self.assertEqual(session.state.current, SessionState.IDLE)
        self.assertEqual(scheduler.handles, [])

    async def test_reset_during_reveal_releases_timer(self) -> None:
        session, scheduler = self._build(FakeReplySource("a b c"))
        task = asyncio.create_task(session.submit("go"))
        await wait_until(lambda: session.is_streaming)
        scheduler.fire()

        await session.reset()
        self.assertTrue(task.done())
        self.assertTrue(scheduler.handles[-1].cancelled)
        self.assertEqual(session.messages, ())
        self.assertEqual(session.streaming_text, "")
        self.assertIn(SessionState.IDLE, self.states)

    async def test_next_turn_allowed_after_completion(self) -> None:
        source = FakeReplySource("ok")
        session, scheduler = self._build(source)
        for text in ("one", "two"):
            task = asyncio.create_task(session.submit(text))
            await wait_until(lambda: session.is_streaming)
            scheduler.drain()
            await task
        self.assertEqual(source.sent, ["one", "two"])
        self.assertEqual(len(session.messages), 4)
        self.assertEqual(self.appended, ["one", "ok", "two", "ok"])

if __name__ == "__main__":
    unittest.main()
