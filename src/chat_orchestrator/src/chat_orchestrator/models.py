"""Pydantic schemas for the chat endpoint envelopes."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

MAX_CONTEXT_MESSAGES = 10


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class PreviousMessage(_CamelModel):
    """One prior turn supplied by the client."""

    role: Literal["user", "assistant"]
    content: str


class ChatContext(_CamelModel):
    """Prior-turn context; only the most recent turns are forwarded to the model."""

    previous_messages: list[PreviousMessage] = Field(default_factory=list, alias="previousMessages")

    def recent(self, limit: int = MAX_CONTEXT_MESSAGES) -> list[PreviousMessage]:
        """Return the last ``limit`` prior turns."""
        return self.previous_messages[-limit:] if limit > 0 else []


class ChatRequest(_CamelModel):
    """Inbound "send message" payload."""

    message: str
    user_id: str | None = Field(default=None, alias="userId")
    conversation_id: str | None = Field(default=None, alias="conversationId")
    context: ChatContext | None = None
    trace_id: str | None = Field(default=None, alias="traceId")
    auth_token: str | None = Field(default=None, alias="authToken")


class CollectedData(_CamelModel):
    """Structured records gathered from tool results for client-side rendering.

    Append-only and not deduplicated: repeating a search appends its products again.
    """

    products: list[dict[str, Any]] | None = None
    orders: list[dict[str, Any]] | None = None

    def add_products(self, records: list[dict[str, Any]]) -> None:
        self.products = [*(self.products or []), *records]

    def add_orders(self, records: list[dict[str, Any]]) -> None:
        self.orders = [*(self.orders or []), *records]

    def is_empty(self) -> bool:
        return not self.products and not self.orders


class ChatMetadata(_CamelModel):
    tools_used: list[str] | None = Field(default=None, alias="toolsUsed")
    tokens_used: int | None = Field(default=None, alias="tokensUsed")


class ChatResponse(_CamelModel):
    """Outbound reply envelope."""

    message: str
    conversation_id: str = Field(alias="conversationId")
    data: CollectedData | None = None
    metadata: ChatMetadata | None = None


class HistoryResponse(_CamelModel):
    """Stub history payload; conversations are not persisted."""

    conversation_id: str = Field(alias="conversationId")
    messages: list[PreviousMessage] = Field(default_factory=list)
