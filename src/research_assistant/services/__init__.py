"""Services package - business logic layer."""

from research_assistant.services.context_builder import build_context, group_by_source
from research_assistant.services.prompt_builder import PromptBuilder
from research_assistant.services.relay import CompletionRelay, RelayRun, RelayState
from research_assistant.services.retrieval import RetrievalService
from research_assistant.services.sessions import SessionStore
from research_assistant.services.summarization import SummarizationError, SummarizationService

__all__ = [
    "build_context",
    "group_by_source",
    "PromptBuilder",
    "RetrievalService",
    "CompletionRelay",
    "RelayRun",
    "RelayState",
    "SessionStore",
    "SummarizationService",
    "SummarizationError",
]
