"""FastAPI dependencies for the research assistant API."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from research_assistant.adapters import ProviderAdapter, build_adapters
from research_assistant.clients import ModelClient
from research_assistant.core.config import Settings, get_settings
from research_assistant.schemas.internal import SourceType
from research_assistant.services import (
    CompletionRelay,
    PromptBuilder,
    RetrievalService,
    SessionStore,
    SummarizationService,
)


@lru_cache
def get_model_client() -> ModelClient:
    """Get the model client singleton."""
    settings = get_settings()
    return ModelClient(
        api_key=settings.fireworks_api_key,
        base_url=settings.fireworks_base_url,
        timeout=settings.generation_timeout,
    )


@lru_cache
def get_adapters() -> dict[SourceType, ProviderAdapter]:
    """Get the provider adapters, one per source type."""
    return build_adapters(get_settings())


@lru_cache
def get_session_store() -> SessionStore:
    """Get the session store singleton."""
    return SessionStore(get_settings().sessions_dir)


def get_prompt_builder() -> PromptBuilder:
    """Get a prompt builder instance."""
    return PromptBuilder()


def get_retrieval_service(
    adapters: Annotated[dict[SourceType, ProviderAdapter], Depends(get_adapters)],
) -> RetrievalService:
    """Get the retrieval service."""
    return RetrievalService(adapters)


def get_relay(
    retrieval_service: Annotated[RetrievalService, Depends(get_retrieval_service)],
    model_client: Annotated[ModelClient, Depends(get_model_client)],
    prompt_builder: Annotated[PromptBuilder, Depends(get_prompt_builder)],
    session_store: Annotated[SessionStore, Depends(get_session_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> CompletionRelay:
    """Get the completion relay."""
    return CompletionRelay(
        retrieval_service=retrieval_service,
        model_client=model_client,
        prompt_builder=prompt_builder,
        settings=settings,
        session_store=session_store,
    )


def get_summarization_service(
    model_client: Annotated[ModelClient, Depends(get_model_client)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> SummarizationService:
    """Get the summarization service."""
    return SummarizationService(model_client, settings)
