"""Conversation orchestration: the bounded tool-calling loop.

``ChatService.process`` seeds a transcript, then alternates between asking the model and executing
the tool calls it requests, for at most ``MAX_ITERATIONS`` model calls. Tool calls of one turn run
concurrently; their replies are appended in request order, each correlated by call id. Every exit
path yields a ``ChatResponse``.
"""

from __future__ import annotations

import json
import logging
import os
import secrets
import string
import time
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

import ai_client_api
from chat_orchestrator import prompts
from chat_orchestrator.models import ChatMetadata, ChatResponse, CollectedData, PreviousMessage
from chat_orchestrator.tools import registry
from chat_orchestrator.tools.registry import ToolContext, ToolResult

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ai_client_api import Message, ToolCall
    from chat_orchestrator.gateway import ModelGateway
    from chat_orchestrator.models import ChatRequest

logger = logging.getLogger("chat_orchestrator")

MAX_ITERATIONS = 5
DEFAULT_MAX_PARALLEL_TOOLS = 4
_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_conversation_id() -> str:
    """Return a new id of the form ``conv_<epoch-ms>_<random7>``."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(7))
    return f"conv_{int(time.time() * 1000)}_{suffix}"


class ChatService:
    """Drives one user turn end-to-end; holds no per-conversation state."""

    def __init__(
        self,
        gateway: ModelGateway,
        *,
        max_iterations: int = MAX_ITERATIONS,
        max_parallel_tools: int | None = None,
    ) -> None:
        self._gateway = gateway
        self._max_iterations = max_iterations
        if max_parallel_tools is None:
            max_parallel_tools = int(os.environ.get("MAX_PARALLEL_TOOLS", DEFAULT_MAX_PARALLEL_TOOLS))
        self._max_parallel_tools = max(1, max_parallel_tools)

    # -----------------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------------

    def process(self, request: ChatRequest) -> ChatResponse:
        """Answer one user message, calling tools as the model requests."""
        trace_id = request.trace_id
        conversation_id = request.conversation_id or generate_conversation_id()

        try:
            if not self._gateway.is_configured():
                logger.warning("LLM not configured, returning fallback response trace_id=%s", trace_id)
                return ChatResponse(message=prompts.NOT_CONFIGURED_REPLY, conversation_id=conversation_id)
            return self._run_loop(request, conversation_id)
        except Exception:
            logger.exception("Chat processing failed conversation_id=%s trace_id=%s", conversation_id, trace_id)
            return ChatResponse(message=prompts.ERROR_REPLY, conversation_id=conversation_id)

    def get_history(self, conversation_id: str) -> list[PreviousMessage]:
        """Return stored turns for a conversation; nothing is persisted, so always empty."""
        logger.debug("History requested conversation_id=%s", conversation_id)
        return []

    # -----------------------------------------------------------------------
    # Loop
    # -----------------------------------------------------------------------

    def _run_loop(self, request: ChatRequest, conversation_id: str) -> ChatResponse:
        trace_id = request.trace_id
        context = ToolContext(user_id=request.user_id, auth_token=request.auth_token, trace_id=trace_id)
        transcript = build_transcript(request)
        tool_defs = registry.list_definitions()

        tools_used: list[str] = []
        collected = CollectedData()
        tokens_used: int | None = None
        content: str | None = None

        for iteration in range(1, self._max_iterations + 1):
            completion = self._gateway.complete(transcript, tool_defs, "auto", trace_id=trace_id)
            content = completion.content
            if completion.usage is not None:
                tokens_used = (tokens_used or 0) + completion.usage.total_tokens

            calls = list(completion.tool_calls)
            if not calls:
                break
            if iteration == self._max_iterations:
                logger.warning(
                    "Iteration ceiling reached with %d pending tool calls trace_id=%s",
                    len(calls),
                    trace_id,
                )
                break

            logger.debug("Processing tool calls iteration=%d count=%d trace_id=%s", iteration, len(calls), trace_id)
            transcript.append(ai_client_api.message("assistant", content, tool_calls=calls))

            results = self._execute_tool_calls(calls, context)
            for call, result in zip(calls, results):
                tools_used.append(call.name)
                registry.collect(call.name, result, collected)
                transcript.append(
                    ai_client_api.message("tool", _tool_output_to_text(result), tool_call_id=call.id),
                )

        return ChatResponse(
            message=content or prompts.EMPTY_REPLY,
            conversation_id=conversation_id,
            data=None if collected.is_empty() else collected,
            metadata=ChatMetadata(tools_used=tools_used or None, tokens_used=tokens_used),
        )

    def _execute_tool_calls(self, calls: Sequence[ToolCall], context: ToolContext) -> list[ToolResult]:
        """Run the calls of one turn concurrently; results come back in request order."""
        if len(calls) == 1:
            return [registry.run_tool(calls[0].name, calls[0].arguments_json, context)]
        workers = min(len(calls), self._max_parallel_tools)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="tool") as pool:
            return list(pool.map(lambda call: registry.run_tool(call.name, call.arguments_json, context), calls))


# ---------------------------------------------------------------------------
# Message helpers
# ---------------------------------------------------------------------------


def build_transcript(request: ChatRequest) -> list[Message]:
    """Seed the transcript: system instruction, recent prior turns, then the new user message."""
    transcript = [ai_client_api.message("system", prompts.SYSTEM_PROMPT)]
    if request.context is not None:
        transcript.extend(ai_client_api.message(turn.role, turn.content) for turn in request.context.recent())
    transcript.append(ai_client_api.message("user", request.message))
    return transcript


def _tool_output_to_text(output: object) -> str:
    """Normalize tool output into a string payload."""
    if isinstance(output, str):
        return output
    try:
        return json.dumps(output, ensure_ascii=True)
    except TypeError:
        return json.dumps(output, ensure_ascii=True, default=str)
