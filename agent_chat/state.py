"""Session state machine and lock-protected transitions."""

from __future__ import annotations

import asyncio
from enum import Enum
import logging

LOGGER = logging.getLogger(__name__)


class SessionState(str, Enum):
    """Lifecycle of one request/response cycle."""

    IDLE = "IDLE"
    PENDING = "PENDING"
    STREAMING = "STREAMING"


ALLOWED_TRANSITIONS: dict[SessionState, frozenset[SessionState]] = {
    SessionState.IDLE: frozenset({SessionState.PENDING}),
    SessionState.PENDING: frozenset({SessionState.STREAMING, SessionState.IDLE}),
    SessionState.STREAMING: frozenset({SessionState.IDLE}),
}


def is_allowed(current: SessionState, new_state: SessionState) -> bool:
    """Return True for a listed edge or a same-state no-op."""
    return new_state is current or new_state in ALLOWED_TRANSITIONS[current]


class StateManager:
    """Serialize state changes so only one request cycle runs at a time.

    Edges outside :data:`ALLOWED_TRANSITIONS` are rejected and leave the state
    untouched; IDLE can only be left through PENDING.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._state = SessionState.IDLE

    @property
    def current(self) -> SessionState:
        """Return the last committed state without waiting for the lock."""
        return self._state

    async def get_state(self) -> SessionState:
        async with self._lock:
            return self._state

    async def transition_to(self, new_state: SessionState) -> SessionState:
        """Move to *new_state* if the edge is allowed and return the resulting state."""
        async with self._lock:
            if not is_allowed(self._state, new_state):
                LOGGER.debug(
                    "state.transition.rejected",
                    extra={
                        "event": "state.transition.rejected",
                        "from_state": self._state.value,
                        "to_state": new_state.value,
                    },
                )
                return self._state
            self._state = new_state
            return self._state

    async def transition_if(
        self,
        expected_state: SessionState,
        new_state: SessionState,
    ) -> bool:
        """Transition only when the current state matches *expected_state*."""
        async with self._lock:
            if self._state is not expected_state or not is_allowed(
                self._state, new_state
            ):
                return False
            self._state = new_state
            return True

    async def can_send_message(self) -> bool:
        """Return True when a new submission may start."""
        async with self._lock:
            return self._state is SessionState.IDLE
