"""Claude implementation of ai_client_api; importing the package binds its factories."""

from claude_client_impl.claude_impl import register as _register_client
from claude_client_impl.models_impl import register as _register_models


def register() -> None:
    """Bind the Claude client factory and the neutral message/tool factories."""
    _register_client()
    _register_models()


register()
