"""Shopping assistant chat orchestrator."""

import claude_client_impl  # noqa: F401  # ensure AI implementation registers itself
