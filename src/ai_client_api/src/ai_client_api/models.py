"""Abstract schemas for AI tool calling."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__ = [
    "Completion",
    "Message",
    "ToolCall",
    "ToolDefinition",
    "Usage",
    "message",
    "tool_call",
    "tool_definition",
]


class ToolCall(ABC):
    """Abstract tool call requested by the model."""

    @property
    @abstractmethod
    def id(self) -> str:
        """Return the correlation id assigned by the model."""
        raise NotImplementedError

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the requested tool name (empty when the model omitted it)."""
        raise NotImplementedError

    @property
    @abstractmethod
    def arguments_json(self) -> str:
        """Return the raw, unvalidated JSON arguments string."""
        raise NotImplementedError

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable representation of the tool call."""
        raise NotImplementedError


class Message(ABC):
    """Abstract transcript message (system, user, assistant or tool)."""

    @property
    @abstractmethod
    def role(self) -> str:
        """Return the message role."""
        raise NotImplementedError

    @property
    @abstractmethod
    def content(self) -> str | None:
        """Return the text content; None for assistant messages carrying only tool calls."""
        raise NotImplementedError

    @property
    @abstractmethod
    def tool_calls(self) -> Sequence[ToolCall]:
        """Return tool calls requested by an assistant message."""
        raise NotImplementedError

    @property
    @abstractmethod
    def tool_call_id(self) -> str | None:
        """Return the tool call id a tool-role message replies to."""
        raise NotImplementedError

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable representation of the message."""
        raise NotImplementedError


class ToolDefinition(ABC):
    """Abstract definition of an available tool."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the tool name."""
        raise NotImplementedError

    @property
    @abstractmethod
    def description(self) -> str:
        """Return the tool description."""
        raise NotImplementedError

    @property
    @abstractmethod
    def input_schema(self) -> dict[str, Any]:
        """Return the tool input schema."""
        raise NotImplementedError

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable representation of the tool definition."""
        raise NotImplementedError


class Usage(ABC):
    """Abstract token usage reported by the provider."""

    @property
    @abstractmethod
    def prompt_tokens(self) -> int:
        """Return tokens consumed by the prompt."""
        raise NotImplementedError

    @property
    @abstractmethod
    def completion_tokens(self) -> int:
        """Return tokens produced by the completion."""
        raise NotImplementedError

    @property
    @abstractmethod
    def total_tokens(self) -> int:
        """Return total tokens for the exchange."""
        raise NotImplementedError


class Completion(ABC):
    """Abstract result of one model exchange."""

    @property
    @abstractmethod
    def content(self) -> str | None:
        """Return free-text content, if any."""
        raise NotImplementedError

    @property
    @abstractmethod
    def tool_calls(self) -> Sequence[ToolCall]:
        """Return requested tool calls (empty when the model answered directly)."""
        raise NotImplementedError

    @property
    @abstractmethod
    def finish_reason(self) -> str:
        """Return the provider-reported completion reason."""
        raise NotImplementedError

    @property
    @abstractmethod
    def usage(self) -> Usage | None:
        """Return token usage, when reported."""
        raise NotImplementedError


def message(
    role: str,
    content: str | None = None,
    *,
    tool_calls: Sequence[ToolCall] | None = None,
    tool_call_id: str | None = None,
) -> Message:
    """Construct a concrete Message instance.

    Args:
        role: Message role ("system", "user", "assistant" or "tool").
        content: Text payload; may be None for assistant tool-call messages.
        tool_calls: Tool calls carried by an assistant message.
        tool_call_id: Correlation id for tool-role replies.

    Returns:
        Concrete Message instance bound by the active implementation.

    """
    raise NotImplementedError


def tool_call(call_id: str, name: str, arguments_json: str) -> ToolCall:
    """Construct a concrete ToolCall instance.

    Args:
        call_id: Correlation id assigned by the model.
        name: Requested tool name.
        arguments_json: Raw JSON argument string.

    Returns:
        Concrete ToolCall instance bound by the active implementation.

    """
    raise NotImplementedError


def tool_definition(name: str, description: str, input_schema: dict[str, Any]) -> ToolDefinition:
    """Construct a concrete ToolDefinition instance.

    Args:
        name: Tool name exposed to the model.
        description: Human-readable tool description.
        input_schema: JSON schema describing tool inputs.

    Returns:
        Concrete ToolDefinition instance bound by the active implementation.

    """
    raise NotImplementedError
