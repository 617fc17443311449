"""API router configuration."""

from fastapi import APIRouter

from research_assistant.api.endpoints import chat, health, sessions, summarize

api_router = APIRouter(prefix="/api")
api_router.include_router(chat.router)
api_router.include_router(summarize.router)
api_router.include_router(sessions.router)

# Health router at root level
health_router = health.router
