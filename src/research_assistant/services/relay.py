"""Completion relay - streams a model answer grounded in aggregated search results.

One ``CompletionRelay.stream`` call handles one request and walks the
states below; the run's state lives in a per-call ``RelayRun``.

    IDLE -> AGGREGATING -> PROMPTING -> STREAMING -> FINALIZING -> CLOSED

Any state before FINALIZING may move to ERRORED, which ends in CLOSED.

The emitted sequence is always ``content* sources? done``. On failure it is
``content* <apology content> done``. Closing the iterator (client
disconnect) closes the upstream connection and stops emission.
"""

import asyncio
import time
from collections.abc import AsyncIterator
from contextlib import aclosing
from dataclasses import dataclass, field
from enum import Enum

from research_assistant.clients.model import ModelClient, ModelClientError
from research_assistant.core.config import Settings
from research_assistant.observability import get_logger
from research_assistant.observability.constants import LogEvents
from research_assistant.schemas.events import (
    ContentEvent,
    DoneEvent,
    ErrorEvent,
    SourcesEvent,
    StreamEvent,
)
from research_assistant.schemas.internal import RetrievalResult
from research_assistant.schemas.requests import ChatRequest
from research_assistant.services.context_builder import build_context
from research_assistant.services.prompt_builder import PromptBuilder
from research_assistant.services.retrieval import RetrievalService
from research_assistant.services.sessions import SessionStore

logger = get_logger(__name__)


class RelayState(str, Enum):
    """States of one relay run."""

    IDLE = "idle"
    AGGREGATING = "aggregating"
    PROMPTING = "prompting"
    STREAMING = "streaming"
    FINALIZING = "finalizing"
    CLOSED = "closed"
    ERRORED = "errored"


@dataclass
class RelayRun:
    """Mutable state of a single request's relay."""

    request: ChatRequest
    state: RelayState = RelayState.IDLE
    results: list[RetrievalResult] = field(default_factory=list)
    answer_parts: list[str] = field(default_factory=list)
    sources_sent: bool = False
    done_sent: bool = False

    def transition(self, state: RelayState) -> None:
        logger.debug("relay.state.changed", from_state=self.state.value, to_state=state.value)
        self.state = state

    @property
    def answer(self) -> str:
        return "".join(self.answer_parts)


class CompletionRelay:
    """Runs retrieval, builds the prompt and relays the model's token stream."""

    def __init__(
        self,
        retrieval_service: RetrievalService,
        model_client: ModelClient,
        prompt_builder: PromptBuilder,
        settings: Settings,
        session_store: SessionStore | None = None,
    ):
        self.retrieval_service = retrieval_service
        self.model_client = model_client
        self.prompt_builder = prompt_builder
        self.settings = settings
        self.session_store = session_store

    async def stream(self, request: ChatRequest) -> AsyncIterator[StreamEvent]:
        """
        Process a chat request and yield stream events.

        Never raises for pipeline failures: they end the stream with the
        apology content event followed by ``DoneEvent``.

        Args:
            request: The validated chat request

        Yields:
            ContentEvent per model delta, at most one SourcesEvent, then DoneEvent
        """
        run = RelayRun(request=request)
        start_time = time.perf_counter()
        logger.info(
            LogEvents.SSE_STREAM_STARTED,
            sources=[source.value for source in request.sources],
            history_turns=len(request.history),
        )

        try:
            try:
                run.transition(RelayState.AGGREGATING)
                run.results = await self.retrieval_service.aggregate(
                    request.message, request.sources
                )

                run.transition(RelayState.PROMPTING)
                messages = self.prompt_builder.build(
                    user_message=request.message,
                    context=build_context(run.results),
                    history=request.history,
                )

                run.transition(RelayState.STREAMING)
                logger.info(LogEvents.CHAT_GENERATION_STARTED, model=self.settings.chat_model)
                deltas = self.model_client.chat_stream(
                    model=self.settings.chat_model,
                    messages=messages,
                    temperature=self.settings.chat_temperature,
                    max_tokens=self.settings.chat_max_tokens,
                )
                async with aclosing(deltas):
                    async for delta in deltas:
                        run.answer_parts.append(delta)
                        yield ContentEvent(content=delta)
                logger.info(
                    LogEvents.CHAT_GENERATION_COMPLETED,
                    content_events=len(run.answer_parts),
                    answer_chars=len(run.answer),
                )

            except Exception as e:
                failed_in = run.state
                run.transition(RelayState.ERRORED)
                if isinstance(e, ModelClientError):
                    logger.error(
                        LogEvents.CHAT_GENERATION_FAILED,
                        status_code=e.status_code,
                        error=str(e),
                        content_events=len(run.answer_parts),
                    )
                else:
                    logger.exception(LogEvents.SSE_STREAM_FAILED, state=failed_in.value)
                yield ErrorEvent()
                run.done_sent = True
                yield DoneEvent()
                run.transition(RelayState.CLOSED)
                return

            run.transition(RelayState.FINALIZING)
            await self._record_exchange(run)
            if run.results:
                run.sources_sent = True
                yield SourcesEvent(sources=tuple(run.results))
            run.done_sent = True
            yield DoneEvent()
            run.transition(RelayState.CLOSED)

        except (GeneratorExit, asyncio.CancelledError):
            logger.info(
                LogEvents.SSE_STREAM_CANCELLED, state=run.state.value, done_sent=run.done_sent
            )
            run.transition(RelayState.CLOSED)
            raise

        logger.info(
            LogEvents.SSE_STREAM_COMPLETED,
            content_events=len(run.answer_parts),
            results=len(run.results),
            sources_sent=run.sources_sent,
            total_time_ms=int((time.perf_counter() - start_time) * 1000),
        )

    async def stream_frames(self, request: ChatRequest) -> AsyncIterator[str]:
        """Wire-encoded frames for :meth:`stream`."""
        async with aclosing(self.stream(request)) as events:
            async for event in events:
                yield event.encode()

    async def _record_exchange(self, run: RelayRun) -> None:
        """Append the completed exchange to the request's session, if any."""
        session_id = run.request.session_id
        if not session_id or self.session_store is None:
            return

        try:
            await asyncio.to_thread(
                self.session_store.append_exchange,
                session_id,
                run.request.message,
                run.answer,
                run.results,
            )
        except Exception as e:
            logger.error(
                LogEvents.SESSION_APPEND_FAILED,
                session_id=session_id,
                error_type=type(e).__name__,
                error=str(e),
            )
