"""Chat endpoint - streams a grounded answer as server-sent events."""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, StreamingResponse

from research_assistant.api.dependencies import get_relay
from research_assistant.core.config import ConfigurationError, Settings, get_settings
from research_assistant.observability import get_logger
from research_assistant.observability.constants import LogEvents
from research_assistant.schemas import ChatRequest, ErrorResponse
from research_assistant.services import CompletionRelay

logger = get_logger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # Disable nginx buffering
}


@router.post(
    "",
    responses={
        200: {"content": {"text/event-stream": {}}, "description": "SSE stream"},
        422: {"description": "Invalid request body"},
        500: {"model": ErrorResponse, "description": "Model provider not configured"},
    },
)
async def chat(
    request: ChatRequest,
    relay: Annotated[CompletionRelay, Depends(get_relay)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """
    Answer a research question from live search results.

    Returns a Server-Sent Events stream of ``data: <json>`` frames:

    - `{"content": "..."}` - one chunk of the answer, in order
    - `{"sources": [...]}` - the search results behind the answer (omitted when none)
    - `[DONE]` - end of stream

    If anything fails after the stream has started, an apology is sent as a
    content frame and the stream still ends with `[DONE]`.
    """
    try:
        settings.require_model_api_key()
    except ConfigurationError as e:
        logger.error(LogEvents.CHAT_CONFIG_MISSING, error=str(e))
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error=str(e)).model_dump(exclude_none=True),
        )

    logger.info(
        LogEvents.CHAT_REQUEST_STARTED,
        sources=[source.value for source in request.sources],
        session_id=request.session_id,
    )
    return StreamingResponse(
        relay.stream_frames(request),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
