"""Summarize endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from research_assistant.api.dependencies import get_summarization_service
from research_assistant.core.config import ConfigurationError, Settings, get_settings
from research_assistant.observability import get_logger
from research_assistant.observability.constants import LogEvents
from research_assistant.schemas import ErrorResponse, SummarizeRequest, SummarizeResponse
from research_assistant.services import SummarizationError, SummarizationService

logger = get_logger(__name__)

router = APIRouter(prefix="/summarize", tags=["summarize"])


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(exclude_none=True),
    )


@router.post(
    "",
    response_model=SummarizeResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Empty conversation"},
        500: {"model": ErrorResponse, "description": "Summary generation failed"},
    },
)
async def summarize(
    request: SummarizeRequest,
    service: Annotated[SummarizationService, Depends(get_summarization_service)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Summarize a research conversation in a few sentences."""
    if not request.conversation.strip():
        return _error(400, "Conversation is required")

    try:
        settings.require_model_api_key()
    except ConfigurationError as e:
        logger.error(LogEvents.CHAT_CONFIG_MISSING, endpoint="summarize", error=str(e))
        return _error(500, str(e))

    try:
        summary = await service.summarize(request.conversation)
    except SummarizationError:
        return _error(500, "Failed to generate summary")

    return SummarizeResponse(summary=summary)
