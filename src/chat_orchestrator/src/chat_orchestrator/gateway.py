"""Model gateway: one request/response exchange with the language model per call.

The provider client is built lazily on first use, once, behind a lock. A ``ConfigurationError``
raised while building it marks the gateway as unconfigured instead of failing the request.
"""

from __future__ import annotations

import logging
import os
import threading
from typing import TYPE_CHECKING

import ai_client_api
from ai_client_api import Client, ConfigurationError
from ai_client_api.client import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from ai_client_api import Completion, Message, ToolDefinition

logger = logging.getLogger("chat_orchestrator.gateway")


def _default_client_factory() -> Client:
    return ai_client_api.get_client()


class ModelGateway:
    """Holds the model client and forwards transcripts to it.

    Attributes:
        _client_factory: Builds the provider client; may raise ``ConfigurationError``.
        _client: Provider client, once built.
        _lock: Guards the one-time construction against concurrent first use.

    """

    def __init__(
        self,
        client_factory: Callable[[], Client] | None = None,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> None:
        self._client_factory = client_factory or _default_client_factory
        self._client: Client | None = None
        self._lock = threading.Lock()
        self._temperature = (
            temperature if temperature is not None else float(os.environ.get("MODEL_TEMPERATURE", DEFAULT_TEMPERATURE))
        )
        self._max_tokens = max_tokens if max_tokens is not None else int(os.environ.get("MODEL_MAX_TOKENS", DEFAULT_MAX_TOKENS))

    def is_configured(self) -> bool:
        """Return False when the provider client cannot be built for lack of configuration."""
        try:
            self._get_client()
        except ConfigurationError as exc:
            logger.warning("Model provider not configured: %s", exc)
            return False
        return True

    def complete(
        self,
        messages: Sequence[Message],
        tools: Sequence[ToolDefinition] | None = None,
        tool_choice: str = "auto",
        *,
        trace_id: str | None = None,
    ) -> Completion:
        """Send the transcript and tool catalog; provider errors propagate without retries."""
        client = self._get_client()
        logger.debug(
            "Sending completion request messages=%d tools=%d trace_id=%s",
            len(messages),
            len(tools or ()),
            trace_id,
        )
        try:
            completion = client.complete(
                messages,
                tools,
                tool_choice,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except Exception:
            logger.error("Model request failed trace_id=%s", trace_id)
            raise

        usage = completion.usage
        logger.debug(
            "Completion received finish_reason=%s tool_calls=%d prompt_tokens=%s completion_tokens=%s trace_id=%s",
            completion.finish_reason,
            len(completion.tool_calls),
            usage.prompt_tokens if usage else None,
            usage.completion_tokens if usage else None,
            trace_id,
        )
        return completion

    def _get_client(self) -> Client:
        if self._client is None:
            with self._lock:
                if self._client is None:
                    self._client = self._client_factory()
                    logger.info("Model provider client initialized")
        return self._client
