"""Abstract interfaces for AI APIs."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ai_client_api.models import Completion, Message, ToolDefinition

__all__ = ["Client", "ConfigurationError", "get_client"]

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 1024


class ConfigurationError(RuntimeError):
    """Raised when a provider cannot be constructed because endpoint/credential settings are missing."""


class Client(ABC):
    """The contract for AI services."""

    @abstractmethod
    def complete(  # noqa: PLR0913
        self,
        messages: Sequence[Message],
        tools: Sequence[ToolDefinition] | None = None,
        tool_choice: str = "auto",
        *,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> Completion:
        """Run one exchange with the model.

        Args:
            messages: Full transcript, including system and tool-role messages.
            tools: Optional tool definitions to enable tool calling.
            tool_choice: Tool selection mode ("auto", "none" or "required").
            temperature: Sampling temperature.
            max_tokens: Maximum output tokens.

        Returns:
            Completion carrying text content and/or requested tool calls.

        """
        raise NotImplementedError


def get_client() -> Client:
    """Return the default AI client implementation.

    Returns:
        Client implementation.

    Raises:
        ConfigurationError: When the implementation is missing required settings.

    """
    raise NotImplementedError
