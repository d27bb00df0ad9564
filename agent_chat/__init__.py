"""Top-level package for agent-chat-tui."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .app import AgentChatApp
    from .client import ChatClient
    from .config import ensure_config_dir, load_config, load_settings
    from .exceptions import (
        AgentChatError,
        ChatConnectionError,
        ChatHTTPStatusError,
        ChatResponseError,
        ChatTransportError,
        ConfigValidationError,
    )
    from .message_store import MessageStore
    from .render import render_message
    from .reveal import RevealController
    from .session import ConversationSession
    from .state import SessionState, StateManager

__all__ = [
    "AgentChatApp",
    "AgentChatError",
    "ChatClient",
    "ChatConnectionError",
    "ChatHTTPStatusError",
    "ChatResponseError",
    "ChatTransportError",
    "ConfigValidationError",
    "ConversationSession",
    "MessageStore",
    "RevealController",
    "SessionState",
    "StateManager",
    "ensure_config_dir",
    "load_config",
    "load_settings",
    "render_message",
]

_EXCEPTION_NAMES = {
    "AgentChatError",
    "ChatConnectionError",
    "ChatHTTPStatusError",
    "ChatResponseError",
    "ChatTransportError",
    "ConfigValidationError",
}


def __getattr__(name: str) -> Any:
    """Lazily import symbols to keep optional UI dependencies optional at import time."""
    if name in _EXCEPTION_NAMES:
        from . import exceptions

        return getattr(exceptions, name)
    if name in {"ensure_config_dir", "load_config", "load_settings"}:
        from . import config

        return getattr(config, name)
    if name in {"SessionState", "StateManager"}:
        from . import state

        return getattr(state, name)
    if name == "ChatClient":
        from .client import ChatClient

        return ChatClient
    if name == "MessageStore":
        from .message_store import MessageStore

        return MessageStore
    if name == "render_message":
        from .render import render_message

        return render_message
    if name == "RevealController":
        from .reveal import RevealController

        return RevealController
    if name == "ConversationSession":
        from .session import ConversationSession

        return ConversationSession
    if name == "AgentChatApp":
        from .app import AgentChatApp

        return AgentChatApp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
