"""Health check endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from research_assistant.core.config import Settings, get_settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(settings: Annotated[Settings, Depends(get_settings)]) -> dict:
    """Basic health check endpoint."""
    return {"status": "healthy", "service": settings.service_name}


@router.get("/ready")
async def ready(settings: Annotated[Settings, Depends(get_settings)]) -> dict:
    """
    Readiness check.

    The service can stream answers only with a model key; without a web
    search key it still answers from the canned fallback results.
    """
    checks = {
        "model_api_key": bool(settings.fireworks_api_key),
        "web_search_api_key": bool(settings.tavily_api_key),
    }
    return {
        "status": "ready" if checks["model_api_key"] else "degraded",
        "checks": checks,
    }
