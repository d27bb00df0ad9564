"""Value types shared by the render pipeline, reveal controller and session."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Union
import uuid


class Role(str, Enum):
    """Author of a conversation message."""

    USER = "user"
    ASSISTANT = "assistant"


def _new_message_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Message:
    """A single immutable entry in the conversation history."""

    content: str
    role: Role
    id: str = field(default_factory=_new_message_id)
    timestamp: datetime = field(default_factory=_utcnow)


# Inline spans ---------------------------------------------------------------


@dataclass(frozen=True)
class PlainText:
    text: str


@dataclass(frozen=True)
class Bold:
    text: str


@dataclass(frozen=True)
class Italic:
    text: str


@dataclass(frozen=True)
class InlineCode:
    text: str


Span = Union[PlainText, Bold, Italic, InlineCode]


# Block nodes ----------------------------------------------------------------


@dataclass(frozen=True)
class Heading:
    level: int
    spans: tuple[Span, ...]


@dataclass(frozen=True)
class Paragraph:
    spans: tuple[Span, ...]


@dataclass(frozen=True)
class ListBlock:
    """A run of consecutive list items of one kind."""

    ordered: bool
    items: tuple[tuple[Span, ...], ...]


@dataclass(frozen=True)
class CodeBlock:
    """Fenced code, carried verbatim for an external highlighter."""

    language: str
    raw_code: str


@dataclass(frozen=True)
class Blank:
    pass


BlockNode = Union[Heading, Paragraph, ListBlock, CodeBlock, Blank]


# Fence extraction -----------------------------------------------------------


class SegmentKind(str, Enum):
    TEXT = "text"
    CODE = "code"


@dataclass(frozen=True)
class Segment:
    """A slice of a message either inside (``CODE``) or outside (``TEXT``) a fence.

    ``language`` is only meaningful for code segments.
    """

    kind: SegmentKind
    content: str
    language: str = ""
