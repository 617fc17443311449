"""Tests for the completion relay."""

import httpx
import pytest
import respx
import structlog.testing

from research_assistant.clients.model import ModelClient
from research_assistant.observability.constants import LogEvents
from research_assistant.schemas.events import (
    APOLOGY_MESSAGE,
    ContentEvent,
    DoneEvent,
    ErrorEvent,
    SourcesEvent,
)
from research_assistant.schemas.internal import SourceType
from research_assistant.schemas.requests import ChatRequest, Message
from research_assistant.services.prompt_builder import PromptBuilder
from research_assistant.services.relay import CompletionRelay
from research_assistant.services.retrieval import RetrievalService
from tests.fakes import (
    ChunkedStream,
    FakeModelClient,
    StubAdapter,
    delta_frame,
    make_result,
    parse_frames,
    random_chunks,
)

MODEL_BASE_URL = "https://model.test/v1"


def _make_relay(adapters, model_client, settings, session_store=None) -> CompletionRelay:
    return CompletionRelay(
        retrieval_service=RetrievalService(adapters),
        model_client=model_client,
        prompt_builder=PromptBuilder(),
        settings=settings,
        session_store=session_store,
    )


async def _collect(relay: CompletionRelay, request: ChatRequest) -> list:
    return [event async for event in relay.stream(request)]


class TestCompletionRelay:
    """Tests for CompletionRelay.stream()."""

    @pytest.mark.asyncio
    async def test_content_then_sources_then_done(self, adapters, settings):
        model = FakeModelClient(deltas=["Bit", "coin"])
        relay = _make_relay(adapters, model, settings)

        events = await _collect(relay, ChatRequest(message="bitcoin", sources=["web", "crypto"]))

        assert events[:2] == [ContentEvent(content="Bit"), ContentEvent(content="coin")]
        assert isinstance(events[2], SourcesEvent)
        assert [r.title for r in events[2].sources] == ["Web One", "Bitcoin (BTC)"]
        assert events[3] == DoneEvent()
        assert len(events) == 4

    @pytest.mark.asyncio
    async def test_prompt_carries_context_and_history(self, adapters, settings):
        model = FakeModelClient()
        relay = _make_relay(adapters, model, settings)
        request = ChatRequest(
            message="and ethereum?",
            sources=["crypto"],
            history=[
                Message(role="user", content="bitcoin?"),
                Message(role="assistant", content="digital gold"),
            ],
        )

        await _collect(relay, request)

        (messages,) = model.stream_calls
        assert "CURRENT SEARCH RESULTS:" in messages[0].content
        assert "## Crypto Results" in messages[0].content
        assert "Web One" not in messages[0].content
        assert [m.content for m in messages[1:]] == ["bitcoin?", "digital gold", "and ethereum?"]

    @pytest.mark.asyncio
    async def test_no_results_means_no_sources_event(self, settings):
        adapters = {SourceType.WEB: StubAdapter(SourceType.WEB)}
        model = FakeModelClient(deltas=["answer"])
        relay = _make_relay(adapters, model, settings)

        events = await _collect(relay, ChatRequest(message="q"))

        assert events == [ContentEvent(content="answer"), DoneEvent()]
        assert "CURRENT SEARCH RESULTS" not in model.stream_calls[0][0].content

    @pytest.mark.asyncio
    async def test_upstream_failure_before_content(self, adapters, settings):
        model = FakeModelClient(fail_after=0)
        relay = _make_relay(adapters, model, settings)

        events = await _collect(relay, ChatRequest(message="q"))

        assert events == [ErrorEvent(), DoneEvent()]
        assert events[0].encode() == f'data: {{"content": "{APOLOGY_MESSAGE}"}}\n\n'

    @pytest.mark.asyncio
    async def test_failure_mid_stream_keeps_delivered_content(self, adapters, settings):
        model = FakeModelClient(deltas=["one", "two", "three"], fail_after=2)
        relay = _make_relay(adapters, model, settings)

        with structlog.testing.capture_logs() as logs:
            events = await _collect(relay, ChatRequest(message="q"))

        assert events == [
            ContentEvent(content="one"),
            ContentEvent(content="two"),
            ErrorEvent(),
            DoneEvent(),
        ]
        failed = [log for log in logs if log["event"] == LogEvents.CHAT_GENERATION_FAILED]
        assert failed[0]["status_code"] == 401

    @pytest.mark.asyncio
    async def test_unexpected_error_also_ends_with_done(self, adapters, settings):
        model = FakeModelClient(fail_after=1, error=RuntimeError("bug"))
        relay = _make_relay(adapters, model, settings)

        events = await _collect(relay, ChatRequest(message="q"))

        assert events[-2:] == [ErrorEvent(), DoneEvent()]

    @pytest.mark.asyncio
    async def test_closing_stream_closes_upstream(self, adapters, settings):
        model = FakeModelClient(deltas=["a", "b", "c"])
        relay = _make_relay(adapters, model, settings)
        stream = relay.stream(ChatRequest(message="q"))

        with structlog.testing.capture_logs() as logs:
            first = await stream.__anext__()
            await stream.aclose()

        assert first == ContentEvent(content="a")
        assert model.closed
        assert any(log["event"] == LogEvents.SSE_STREAM_CANCELLED for log in logs)

    @pytest.mark.asyncio
    async def test_exchange_appended_to_session(self, adapters, settings, session_store):
        model = FakeModelClient(deltas=["Bitcoin is ", "a currency."])
        relay = _make_relay(adapters, model, settings, session_store)

        await _collect(relay, ChatRequest(message="What is bitcoin?", session_id="s1"))

        session = session_store.get("s1")
        assert session is not None
        assert session.title == "What is bitcoin?"
        user, assistant = session.messages
        assert (user.role, user.content) == ("user", "What is bitcoin?")
        assert (assistant.role, assistant.content) == ("assistant", "Bitcoin is a currency.")
        assert [s.title for s in assistant.sources] == ["Web One"]

    @pytest.mark.asyncio
    async def test_failed_exchange_not_appended(self, adapters, settings, session_store):
        relay = _make_relay(adapters, FakeModelClient(fail_after=1), settings, session_store)

        await _collect(relay, ChatRequest(message="q", session_id="s1"))

        assert session_store.get("s1") is None

    @pytest.mark.asyncio
    async def test_session_write_failure_does_not_break_stream(self, adapters, settings):
        class BrokenStore:
            def append_exchange(self, *args):
                raise OSError("disk full")

        relay = _make_relay(adapters, FakeModelClient(), settings, BrokenStore())

        events = await _collect(relay, ChatRequest(message="q", session_id="s1"))

        assert events[-1] == DoneEvent()
        assert isinstance(events[-2], SourcesEvent)

    @pytest.mark.asyncio
    async def test_stream_frames_encodes_events(self, adapters, settings):
        relay = _make_relay(adapters, FakeModelClient(deltas=["hi"]), settings)

        frames = [frame async for frame in relay.stream_frames(ChatRequest(message="q"))]

        assert frames[0] == 'data: {"content": "hi"}\n\n'
        assert frames[1].startswith('data: {"sources": [{"title": "Web One"')
        assert frames[-1] == "data: [DONE]\n\n"


class TestRelayOverChunkedUpstream:
    """The relay driven by the real ModelClient reading a chunked upstream body."""

    DELTAS = ["Bitcoin ", "и ", "Ethereum ", "🚀", " differ"]

    def _upstream_body(self) -> bytes:
        frames = [delta_frame(d) for d in self.DELTAS]
        frames.insert(2, b"data: {not json\n\n")
        return b"".join(frames) + b"data: [DONE]\n\n"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("seed", range(20))
    @respx.mock
    async def test_frame_order_survives_random_splits(self, adapters, settings, seed):
        chunks = random_chunks(self._upstream_body(), seed)
        respx.post(f"{MODEL_BASE_URL}/chat/completions").mock(
            return_value=httpx.Response(
                200,
                stream=ChunkedStream(chunks),
                headers={"Content-Type": "text/event-stream"},
            )
        )
        model = ModelClient(api_key="test-key", base_url=MODEL_BASE_URL, timeout=5.0)
        relay = _make_relay(adapters, model, settings)
        request = ChatRequest(message="bitcoin vs ethereum", sources=["web", "crypto"])

        body = "".join([frame async for frame in relay.stream_frames(request)])
        frames = parse_frames(body)

        assert [f["content"] for f in frames[:-2]] == self.DELTAS
        assert [s["title"] for s in frames[-2]["sources"]] == ["Web One", "Bitcoin (BTC)"]
        assert frames[-1] == "[DONE]"
