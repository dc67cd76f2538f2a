"""Orchestrator tools; importing this package registers every tool module."""

from chat_orchestrator.tools import catalog, orders  # noqa: F401
