"""Public export surface for ``ai_client_api``."""

from ai_client_api.client import Client, ConfigurationError, get_client
from ai_client_api.models import (
    Completion,
    Message,
    ToolCall,
    ToolDefinition,
    Usage,
    message,
    tool_call,
    tool_definition,
)

__all__ = [
    "Client",
    "Completion",
    "ConfigurationError",
    "Message",
    "ToolCall",
    "ToolDefinition",
    "Usage",
    "get_client",
    "message",
    "tool_call",
    "tool_definition",
]
