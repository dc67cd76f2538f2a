"""Claude models implementation colocated with the Claude client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence

import ai_client_api
from ai_client_api import models

# ---------------------------------------------------------------------------
# Claude models
# ---------------------------------------------------------------------------


class ClaudeToolCall(models.ToolCall):
    """Tool call decoded from a Claude tool_use block."""

    def __init__(self, call_id: str, name: str, arguments_json: str) -> None:
        """Create a tool call with raw JSON arguments."""
        self._id = call_id
        self._name = name
        self._arguments_json = arguments_json

    @property
    def id(self) -> str:
        """Get the tool_use identifier."""
        return self._id

    @property
    def name(self) -> str:
        """Get the requested tool name."""
        return self._name

    @property
    def arguments_json(self) -> str:
        """Get the raw JSON argument string."""
        return self._arguments_json

    def to_dict(self) -> dict[str, Any]:
        """Return this tool call as a JSON-serializable dict."""
        return {"id": self._id, "name": self._name, "arguments": self._arguments_json}


class ClaudeMessage(models.Message):
    """Provider-neutral transcript message used with the Claude client."""

    def __init__(
        self,
        role: str,
        content: str | None = None,
        *,
        tool_calls: Sequence[models.ToolCall] | None = None,
        tool_call_id: str | None = None,
    ) -> None:
        """Create a transcript message."""
        self._role = role
        self._content = content
        self._tool_calls: list[models.ToolCall] = list(tool_calls or [])
        self._tool_call_id = tool_call_id

    @property
    def role(self) -> str:
        """Get the message role."""
        return self._role

    @property
    def content(self) -> str | None:
        """Get the text content."""
        return self._content

    @property
    def tool_calls(self) -> list[models.ToolCall]:
        """Get the tool calls carried by an assistant message."""
        return self._tool_calls

    @property
    def tool_call_id(self) -> str | None:
        """Get the correlation id of a tool-role reply."""
        return self._tool_call_id

    def to_dict(self) -> dict[str, Any]:
        """Return this message as a JSON-serializable dict."""
        payload: dict[str, Any] = {"role": self._role, "content": self._content}
        if self._tool_calls:
            payload["tool_calls"] = [call.to_dict() for call in self._tool_calls]
        if self._tool_call_id is not None:
            payload["tool_call_id"] = self._tool_call_id
        return payload


class ClaudeToolDefinition(models.ToolDefinition):
    """Tool definition passed to Claude to enable tool_use blocks."""

    def __init__(self, name: str, description: str, input_schema: dict[str, Any]) -> None:
        """Create a Claude tool definition."""
        self._name = name
        self._description = description
        self._input_schema = input_schema

    @property
    def name(self) -> str:
        """Get the tool name."""
        return self._name

    @property
    def description(self) -> str:
        """Get the tool description."""
        return self._description

    @property
    def input_schema(self) -> dict[str, Any]:
        """Get the JSON schema for tool input."""
        return self._input_schema

    def to_dict(self) -> dict[str, Any]:
        """Return this tool definition in the Messages API shape."""
        return {
            "name": self._name,
            "description": self._description,
            "input_schema": self._input_schema,
        }


class ClaudeUsage(models.Usage):
    """Token usage reported by the Messages API."""

    def __init__(self, input_tokens: int, output_tokens: int) -> None:
        self._input_tokens = input_tokens
        self._output_tokens = output_tokens

    @property
    def prompt_tokens(self) -> int:
        return self._input_tokens

    @property
    def completion_tokens(self) -> int:
        return self._output_tokens

    @property
    def total_tokens(self) -> int:
        return self._input_tokens + self._output_tokens


class ClaudeCompletion(models.Completion):
    """Result of one Messages API call."""

    def __init__(
        self,
        content: str | None,
        tool_calls: Sequence[models.ToolCall],
        finish_reason: str,
        usage: ClaudeUsage | None = None,
    ) -> None:
        self._content = content
        self._tool_calls = list(tool_calls)
        self._finish_reason = finish_reason
        self._usage = usage

    @property
    def content(self) -> str | None:
        return self._content

    @property
    def tool_calls(self) -> list[models.ToolCall]:
        return self._tool_calls

    @property
    def finish_reason(self) -> str:
        return self._finish_reason

    @property
    def usage(self) -> ClaudeUsage | None:
        return self._usage


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def message_impl(
    role: str,
    content: str | None = None,
    *,
    tool_calls: Sequence[models.ToolCall] | None = None,
    tool_call_id: str | None = None,
) -> ClaudeMessage:
    """Build a ClaudeMessage."""
    return ClaudeMessage(role, content, tool_calls=tool_calls, tool_call_id=tool_call_id)


def tool_call_impl(call_id: str, name: str, arguments_json: str) -> ClaudeToolCall:
    """Build a ClaudeToolCall."""
    return ClaudeToolCall(call_id=call_id, name=name, arguments_json=arguments_json)


def tool_definition_impl(
    name: str,
    description: str,
    input_schema: dict[str, Any],
) -> ClaudeToolDefinition:
    """Build a ClaudeToolDefinition."""
    return ClaudeToolDefinition(name=name, description=description, input_schema=input_schema)


# ---------------------------------------------------------------------------
# Factory registration
# ---------------------------------------------------------------------------


def register() -> None:
    """Register Claude factory helpers with the abstract API."""
    ai_client_api.message = message_impl
    ai_client_api.tool_call = tool_call_impl
    ai_client_api.tool_definition = tool_definition_impl
    models.message = message_impl
    models.tool_call = tool_call_impl
    models.tool_definition = tool_definition_impl
