"""Clients package - HTTP clients for external services."""

from research_assistant.clients.model import ModelClient, ModelClientError

__all__ = [
    "ModelClient",
    "ModelClientError",
]
