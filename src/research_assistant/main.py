"""Main FastAPI application for the research assistant service."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from research_assistant import __version__
from research_assistant.api import api_router, health_router
from research_assistant.core.config import get_settings
from research_assistant.observability import (
    CorrelationIDMiddleware,
    RequestLoggingMiddleware,
    configure_logging,
    get_logger,
)

_settings = get_settings()

# Configure structured logging
configure_logging(
    log_level=_settings.log_level,
    log_format=_settings.log_format if not _settings.debug else "console",
    development_mode=_settings.debug,
)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager."""
    settings = get_settings()
    logger.info(
        "app.startup",
        service=settings.service_name,
        version=__version__,
        chat_model=settings.chat_model,
        model_key_configured=bool(settings.fireworks_api_key),
        web_search_key_configured=bool(settings.tavily_api_key),
        debug=settings.debug,
    )

    yield

    logger.info("app.shutdown", service=settings.service_name)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Research Assistant",
        description="""
Multi-source research assistant.

Answers questions with a hosted language model, grounded in live results
from web search, code hosting, social search and crypto market data.

## Workflow

1. Client sends a question, the sources to search and prior turns
2. Selected sources are queried in parallel
3. Results are formatted into a context block in the system prompt
4. The model's answer is relayed token by token over SSE
5. The results behind the answer are sent as a final sources frame
        """,
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Middleware executes in reverse order of addition, so add RequestLogging first
    app.add_middleware(
        RequestLoggingMiddleware,
        exclude_paths={"/health", "/ready", "/docs", "/openapi.json", "/redoc"},
        log_request_headers=settings.log_request_headers,
        log_request_body=settings.log_request_body,
    )
    app.add_middleware(CorrelationIDMiddleware)

    app.include_router(health_router)  # /health, /ready
    app.include_router(api_router)  # /api/chat, /api/summarize, /api/sessions

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "research_assistant.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
