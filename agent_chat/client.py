"""Async client for the remote chat endpoint (``{message}`` in, ``{reply}`` out)."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

import httpx

from .exceptions import (
    ChatConnectionError,
    ChatHTTPStatusError,
    ChatResponseError,
    ChatTransportError,
)

LOGGER = logging.getLogger(__name__)


class ChatClient:
    """Send one user message per request and return the assistant reply.

    No retries are attempted; every failure surfaces as a
    :class:`ChatTransportError` subclass.
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def send(self, message: str) -> str:
        """POST *message* and return the ``reply`` field of the JSON response."""
        LOGGER.info(
            "chat.request.start",
            extra={"event": "chat.request.start", "chars": len(message)},
        )
        started = time.monotonic()
        try:
            response = await self._client.post(
                self.endpoint,
                json={"message": message},
                headers={"Content-Type": "application/json"},
            )
            response.raise_for_status()
            reply = self._extract_reply(response)
        except asyncio.CancelledError:
            LOGGER.info(
                "chat.request.cancelled", extra={"event": "chat.request.cancelled"}
            )
            raise
        except Exception as exc:  # noqa: BLE001 - transport can fail in many ways.
            mapped = self._map_exception(exc)
            LOGGER.warning(
                "chat.request.failed",
                extra={
                    "event": "chat.request.failed",
                    "error_type": mapped.__class__.__name__,
                },
            )
            raise mapped from exc

        LOGGER.info(
            "chat.request.complete",
            extra={
                "event": "chat.request.complete",
                "status": response.status_code,
                "reply_chars": len(reply),
                "elapsed_ms": round((time.monotonic() - started) * 1000),
            },
        )
        return reply

    @staticmethod
    def _extract_reply(response: httpx.Response) -> str:
        try:
            payload: Any = response.json()
        except ValueError as exc:
            raise ChatResponseError("Response body is not valid JSON.") from exc
        if not isinstance(payload, dict):
            raise ChatResponseError("Response body must be a JSON object.")
        reply = payload.get("reply")
        if not isinstance(reply, str):
            raise ChatResponseError("Response body has no string 'reply' field.")
        return reply

    def _map_exception(self, exc: Exception) -> ChatTransportError:
        if isinstance(exc, ChatTransportError):
            return exc
        if isinstance(exc, httpx.HTTPStatusError):
            status = exc.response.status_code
            return ChatHTTPStatusError(
                f"Chat endpoint {self.endpoint} answered with HTTP {status}.",
                status_code=status,
            )
        if isinstance(exc, (httpx.TimeoutException, httpx.NetworkError)):
            return ChatConnectionError(
                f"Unable to connect to chat endpoint {self.endpoint}."
            )
        if isinstance(exc, httpx.HTTPError):
            return ChatConnectionError(
                f"Request to chat endpoint {self.endpoint} failed: {exc}"
            )
        return ChatTransportError(
            f"Unexpected failure talking to {self.endpoint}: {exc}"
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP client when this instance created it."""
        if self._owns_client:
            await self._client.aclose()
