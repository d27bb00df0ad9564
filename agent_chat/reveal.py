"""Word-paced reveal of a complete reply with cancel semantics.

The controller is a plain state machine. Time is supplied by a
:class:`Scheduler`, so the same logic runs on an asyncio loop, a Textual
interval timer, or a manual scheduler in tests.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
import logging
from typing import Protocol

LOGGER = logging.getLogger(__name__)

DEFAULT_TICK_INTERVAL_SECONDS = 0.03


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Source of repeating timed callbacks."""

    def schedule(self, callback: Callable[[], None], interval: float) -> Cancellable:
        """Call *callback* every *interval* seconds until the handle is cancelled."""
        ...


class _RepeatingCall:
    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        callback: Callable[[], None],
        interval: float,
    ) -> None:
        self._loop = loop
        self._callback = callback
        self._interval = interval
        self._cancelled = False
        self._handle: asyncio.TimerHandle | None = loop.call_later(interval, self._fire)

    def _fire(self) -> None:
        self._handle = None
        if self._cancelled:
            return
        self._callback()
        if not self._cancelled:
            self._handle = self._loop.call_later(self._interval, self._fire)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class AsyncioScheduler:
    """Scheduler backed by ``loop.call_later``; the next call is armed after each tick."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def schedule(self, callback: Callable[[], None], interval: float) -> _RepeatingCall:
        loop = self._loop or asyncio.get_running_loop()
        return _RepeatingCall(loop, callback, interval)


class RevealPhase(str, Enum):
    IDLE = "IDLE"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


@dataclass
class RevealState:
    """Progress of the reply currently being paced out."""

    full_text: str
    words: list[str] = field(default_factory=list)
    emitted_prefix: str = ""
    cursor: int = 0
    active: bool = True

    @classmethod
    def for_text(cls, full_text: str) -> RevealState:
        return cls(full_text=full_text, words=full_text.split(" "))


@dataclass(frozen=True)
class RevealResult:
    """Finalized text of one reveal; ``truncated`` when it was cut short."""

    text: str
    truncated: bool = False


class RevealController:
    """Pace a reply out one word per tick and finalize it exactly once."""

    def __init__(
        self,
        scheduler: Scheduler,
        interval: float = DEFAULT_TICK_INTERVAL_SECONDS,
        on_progress: Callable[[str], None] | None = None,
        on_finalize: Callable[[RevealResult], None] | None = None,
    ) -> None:
        self._scheduler = scheduler
        self.interval = interval
        self.on_progress = on_progress
        self.on_finalize = on_finalize
        self._phase = RevealPhase.IDLE
        self._state: RevealState | None = None
        self._timer: Cancellable | None = None

    @property
    def phase(self) -> RevealPhase:
        return self._phase

    @property
    def state(self) -> RevealState | None:
        """Return the live reveal state, or ``None`` outside ``ACTIVE``."""
        return self._state

    @property
    def is_active(self) -> bool:
        return self._phase is RevealPhase.ACTIVE

    @property
    def emitted_prefix(self) -> str:
        return self._state.emitted_prefix if self._state is not None else ""

    def start(self, full_text: str) -> bool:
        """Begin revealing *full_text*; returns False if a reveal is already active."""
        if self.is_active:
            LOGGER.debug("reveal.start.rejected", extra={"event": "reveal.start.rejected"})
            return False
        self._state = RevealState.for_text(full_text)
        self._phase = RevealPhase.ACTIVE
        LOGGER.info(
            "reveal.start",
            extra={
                "event": "reveal.start",
                "words": len(self._state.words),
                "chars": len(full_text),
            },
        )
        self._timer = self._scheduler.schedule(self.tick, self.interval)
        return True

    def tick(self) -> None:
        """Advance by one word, or finalize once every word has been shown."""
        state = self._state
        if not self.is_active or state is None:
            return
        if state.cursor < len(state.words):
            state.cursor += 1
            state.emitted_prefix = " ".join(state.words[: state.cursor])
            if self.on_progress is not None:
                self.on_progress(state.emitted_prefix)
            return

        self._finish(RevealPhase.COMPLETED)
        state.emitted_prefix = ""
        LOGGER.info("reveal.complete", extra={"event": "reveal.complete"})
        self._emit(RevealResult(state.full_text))

    def cancel(self) -> RevealResult | None:
        """Stop an active reveal and finalize whatever prefix was already shown.

        Returns the truncated result, or ``None`` when nothing had been shown
        yet or no reveal was active.
        """
        state = self._state
        if not self.is_active or state is None:
            LOGGER.debug(
                "reveal.cancel.ignored", extra={"event": "reveal.cancel.ignored"}
            )
            return None
        self._finish(RevealPhase.CANCELLED)
        LOGGER.info(
            "reveal.cancel",
            extra={
                "event": "reveal.cancel",
                "cursor": state.cursor,
                "words": len(state.words),
            },
        )
        if not state.emitted_prefix:
            return None
        result = RevealResult(state.emitted_prefix, truncated=True)
        self._emit(result)
        return result

    def close(self) -> None:
        """Release the timer and drop any active reveal without emitting."""
        if self.is_active:
            self._finish(RevealPhase.CANCELLED)
            LOGGER.info("reveal.discard", extra={"event": "reveal.discard"})
        self._release_timer()

    def _finish(self, phase: RevealPhase) -> None:
        self._release_timer()
        self._phase = phase
        if self._state is not None:
            self._state.active = False
        self._state = None

    def _release_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _emit(self, result: RevealResult) -> None:
        if self.on_finalize is not None:
            self.on_finalize(result)
