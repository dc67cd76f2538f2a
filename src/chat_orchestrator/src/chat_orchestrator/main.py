"""FastAPI app for the shopping assistant chat gateway.

Resolves the request trace id, hands chat messages to the ChatService, and exposes the
history stub and a health endpoint.
"""

from __future__ import annotations

import logging
import os
import uuid
from functools import lru_cache
from typing import Annotated

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Header

from chat_orchestrator.chat_service import ChatService
from chat_orchestrator.gateway import ModelGateway
from chat_orchestrator.models import ChatRequest, ChatResponse, HistoryResponse

load_dotenv()

app = FastAPI(title="Chat Service", version="0.1.0")

logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger("chat_orchestrator.api")


@lru_cache(maxsize=1)
def get_chat_service() -> ChatService:
    """Return the process-wide ChatService."""
    return ChatService(ModelGateway())


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@app.get("/health")
async def health() -> dict[str, str]:
    """Return a basic health payload."""
    return {"status": "ok"}


@app.post("/api/chat/message", response_model=ChatResponse, response_model_exclude_none=True)
def send_message(
    chat_request: ChatRequest,
    service: Annotated[ChatService, Depends(get_chat_service)],
    x_trace_id: Annotated[str | None, Header()] = None,
) -> ChatResponse:
    """Answer a chat message."""
    trace_id = x_trace_id or chat_request.trace_id or uuid.uuid4().hex
    logger.info(
        "Processing chat message user_id=%s conversation_id=%s length=%d trace_id=%s",
        chat_request.user_id,
        chat_request.conversation_id,
        len(chat_request.message),
        trace_id,
    )
    return service.process(chat_request.model_copy(update={"trace_id": trace_id}))


@app.get("/api/chat/history/{conversation_id}", response_model=HistoryResponse)
def get_history(
    conversation_id: str,
    service: Annotated[ChatService, Depends(get_chat_service)],
) -> HistoryResponse:
    """Return conversation history (always empty; nothing is persisted)."""
    return HistoryResponse(conversation_id=conversation_id, messages=service.get_history(conversation_id))
