"""Ordered, append-only conversation history."""

from __future__ import annotations

from typing import Iterator

from .models import Message, Role


class MessageStore:
    """Hold the messages of one conversation in chronological order."""

    def __init__(self) -> None:
        self._messages: list[Message] = []

    @property
    def messages(self) -> tuple[Message, ...]:
        """Return an immutable snapshot of all stored messages."""
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))

    def append(self, role: Role | str, content: str) -> Message:
        """Create, store and return a new message.

        Content is kept exactly as given; callers decide on trimming.
        """
        message = Message(content=content, role=Role(role))
        self._messages.append(message)
        return message

    def last(self, role: Role | str | None = None) -> Message | None:
        """Return the newest message, optionally restricted to *role*."""
        wanted = Role(role) if role is not None else None
        for message in reversed(self._messages):
            if wanted is None or message.role is wanted:
                return message
        return None

    def clear(self) -> None:
        """Drop every message."""
        self._messages = []
