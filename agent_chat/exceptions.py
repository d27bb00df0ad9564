"""Domain exception hierarchy for the agent chat application."""

from __future__ import annotations


class AgentChatError(RuntimeError):
    """Base class for all domain-level chat errors."""


class ChatTransportError(AgentChatError):
    """Raised when a reply could not be obtained from the chat endpoint."""


class ChatConnectionError(ChatTransportError):
    """Raised when the chat endpoint cannot be reached."""


class ChatHTTPStatusError(ChatTransportError):
    """Raised when the chat endpoint answers with a non-success status."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class ChatResponseError(ChatTransportError):
    """Raised when the response body is not a valid ``{"reply": ...}`` payload."""


class ConfigValidationError(AgentChatError):
    """Raised when configuration cannot be validated safely."""
