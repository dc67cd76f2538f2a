"""Claude Client Implementation.

Concrete ai_client_api.Client backed by Anthropic's Claude Messages API. Resolves API keys
from environment variables, converts the provider-neutral transcript into Messages API
payloads, and converts Anthropic responses back into ai_client_api completions.
"""

from __future__ import annotations

import json
import os
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence

import anthropic

import ai_client_api
from ai_client_api import Client, ConfigurationError, Message, ToolDefinition
from ai_client_api.client import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE
from claude_client_impl.models_impl import ClaudeCompletion, ClaudeToolCall, ClaudeUsage

DEFAULT_MODEL = "claude-haiku-4-5-20251001"
TOOL_CHOICES: dict[str, dict[str, str]] = {
    "auto": {"type": "auto"},
    "none": {"type": "none"},
    "required": {"type": "any"},
}

# ---------------------------------------------------------------------------
# Client implementation
# ---------------------------------------------------------------------------


class ClaudeClient(Client):
    """Concrete ai_client_api.Client that forwards chat to Anthropic's Claude Messages API.

    Authentication:
        - ANTHROPIC_API_KEY (required)
        - ANTHROPIC_MODEL (optional, defaults to claude-haiku-4-5-20251001)
        - ANTHROPIC_BASE_URL (optional, overrides the API endpoint)

    Attributes:
        _client: Anthropic SDK client.
        _model: Model name used for requests.

    """

    def __init__(self, api_key: str | None = None) -> None:
        """Initialize the Claude client, resolving API key/model defaults from the environment.

        Raises:
            ConfigurationError: When no API key is available.

        """
        key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        if not key:
            raise ConfigurationError("ANTHROPIC_API_KEY is required.")  # noqa: TRY003, EM101
        client_kwargs: dict[str, Any] = {"api_key": key}
        base_url = os.environ.get("ANTHROPIC_BASE_URL")
        if base_url:
            client_kwargs["base_url"] = base_url
        self._client = anthropic.Anthropic(**client_kwargs)
        self._model = os.environ.get("ANTHROPIC_MODEL", DEFAULT_MODEL)

    def complete(  # noqa: PLR0913
        self,
        messages: Sequence[Message],
        tools: Sequence[ToolDefinition] | None = None,
        tool_choice: str = "auto",
        *,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> ClaudeCompletion:
        """Invoke Claude and return a provider-neutral completion.

        Args:
            messages: Full transcript; system messages are lifted into the system prompt.
            tools: Optional tool definitions; enables tool_use blocks in Claude responses.
            tool_choice: "auto", "none" or "required".
            temperature: Sampling temperature.
            max_tokens: Maximum output tokens.

        Returns:
            Completion with text content, tool calls, stop reason and usage.

        """
        system, serialized_messages = to_request_messages(messages)
        request_kwargs: dict[str, Any] = {
            "model": self._model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": serialized_messages,
        }
        if system:
            request_kwargs["system"] = system
        if tools:
            request_kwargs["tools"] = [tool.to_dict() for tool in tools]
            request_kwargs["tool_choice"] = TOOL_CHOICES.get(tool_choice, TOOL_CHOICES["auto"])

        api_response = self._client.messages.create(**request_kwargs)
        return to_completion(api_response)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


def get_client_impl() -> ClaudeClient:
    """Return a new ClaudeClient using env defaults."""
    return ClaudeClient()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _parse_arguments(arguments_json: str) -> dict[str, Any]:
    """Decode tool-call arguments for a tool_use block; non-object payloads become {}."""
    try:
        parsed = json.loads(arguments_json or "{}")
    except json.JSONDecodeError:
        return {}
    return parsed if isinstance(parsed, dict) else {}


def _is_tool_result_turn(entry: dict[str, Any]) -> bool:
    content = entry["content"]
    return entry["role"] == "user" and bool(content) and all(block["type"] == "tool_result" for block in content)


def to_request_messages(messages: Sequence[Message]) -> tuple[str, list[dict[str, Any]]]:
    """Convert the neutral transcript into (system prompt, Messages API messages).

    Consecutive tool-role messages are grouped into one user turn of tool_result blocks,
    since Claude expects every tool_use of a turn to be answered in the next user message.
    """
    system_parts: list[str] = []
    serialized: list[dict[str, Any]] = []
    for msg in messages:
        if msg.role == "system":
            if msg.content:
                system_parts.append(msg.content.strip())
            continue

        if msg.role == "tool":
            block = {"type": "tool_result", "tool_use_id": msg.tool_call_id, "content": msg.content or ""}
            if serialized and _is_tool_result_turn(serialized[-1]):
                serialized[-1]["content"].append(block)
            else:
                serialized.append({"role": "user", "content": [block]})
            continue

        blocks: list[dict[str, Any]] = []
        if msg.content:
            blocks.append({"type": "text", "text": msg.content})
        blocks.extend(
            {
                "type": "tool_use",
                "id": call.id,
                "name": call.name,
                "input": _parse_arguments(call.arguments_json),
            }
            for call in msg.tool_calls
        )
        if blocks:
            serialized.append({"role": msg.role, "content": blocks})
    return "\n\n".join(system_parts), serialized


def to_completion(api_response: Any) -> ClaudeCompletion:  # noqa: ANN401
    """Convert an Anthropic Messages API response into a ClaudeCompletion."""
    texts: list[str] = []
    tool_calls: list[ClaudeToolCall] = []
    for block in api_response.content:
        if block.type == "text":
            texts.append(block.text)
        elif block.type == "tool_use":
            tool_calls.append(
                ClaudeToolCall(
                    call_id=block.id,
                    name=block.name or "",
                    arguments_json=json.dumps(block.input or {}),
                )
            )

    usage = None
    api_usage = getattr(api_response, "usage", None)
    if api_usage is not None:
        usage = ClaudeUsage(
            input_tokens=getattr(api_usage, "input_tokens", 0) or 0,
            output_tokens=getattr(api_usage, "output_tokens", 0) or 0,
        )

    content = "".join(texts).strip() or None
    return ClaudeCompletion(
        content=content,
        tool_calls=tool_calls,
        finish_reason=getattr(api_response, "stop_reason", None) or "",
        usage=usage,
    )


# ---------------------------------------------------------------------------
# Factory registration
# ---------------------------------------------------------------------------


def register() -> None:
    """Bind the Claude client factory into ai_client_api.get_client."""
    ai_client_api.get_client = get_client_impl
