"""Test doubles for adapters and the model client."""

import json
import random
from collections.abc import AsyncIterator

import httpx

from research_assistant.adapters.base import ProviderAdapter
from research_assistant.clients.model import ModelClientError
from research_assistant.schemas.internal import GenerationResult, RetrievalResult, SourceType
from research_assistant.schemas.requests import Message


class StubAdapter(ProviderAdapter):
    """Adapter returning canned results and recording queries."""

    def __init__(
        self,
        source: SourceType,
        results: list[RetrievalResult] | None = None,
        error: Exception | None = None,
        timeout: float = 8.0,
    ):
        super().__init__(max_results=10, timeout=timeout)
        self.source = source
        self.results = results or []
        self.error = error
        self.queries: list[str] = []

    async def _search(self, query: str) -> list[RetrievalResult]:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return list(self.results)


class FakeModelClient:
    """Stands in for ModelClient; streams scripted deltas.

    ``fail_after=n`` yields the first ``n`` deltas and then raises ``error``.
    """

    def __init__(
        self,
        deltas: list[str] | None = None,
        fail_after: int | None = None,
        error: Exception | None = None,
        summary: str = "Summary text",
    ):
        self.deltas = deltas if deltas is not None else ["Hello", " world"]
        self.fail_after = fail_after
        self.error = error or ModelClientError("upstream failed", status_code=401)
        self.summary = summary
        self.stream_calls: list[list[Message]] = []
        self.chat_calls: list[list[Message]] = []
        self.closed = False

    async def chat_stream(
        self, model: str, messages: list[Message], temperature: float = 0.7, max_tokens: int = 1024
    ) -> AsyncIterator[str]:
        self.stream_calls.append(messages)
        try:
            for i, delta in enumerate(self.deltas):
                if self.fail_after is not None and i >= self.fail_after:
                    raise self.error
                yield delta
            if self.fail_after is not None:
                raise self.error
        finally:
            self.closed = True

    async def chat(
        self, model: str, messages: list[Message], temperature: float = 0.7, max_tokens: int = 1024
    ) -> GenerationResult:
        self.chat_calls.append(messages)
        if self.fail_after is not None:
            raise self.error
        return GenerationResult(response=self.summary, latency_ms=5)

    @property
    def call_count(self) -> int:
        return len(self.stream_calls) + len(self.chat_calls)


def make_result(
    title: str,
    source: SourceType = SourceType.WEB,
    url: str | None = None,
    snippet: str = "snippet",
    content: str | None = None,
) -> RetrievalResult:
    return RetrievalResult(
        title=title,
        url=url or f"https://example.com/{title.lower().replace(' ', '-')}",
        snippet=snippet,
        content=content,
        source=source,
    )


def parse_frames(body: str) -> list[object]:
    """Split an SSE body into decoded payloads; ``[DONE]`` stays a string."""
    frames: list[object] = []
    for block in body.split("\n\n"):
        if not block:
            continue
        assert block.startswith("data: "), block
        payload = block[len("data: ") :]
        frames.append(payload if payload == "[DONE]" else json.loads(payload))
    return frames


def delta_frame(content: str) -> bytes:
    """One upstream chat-completion chunk carrying ``content``."""
    payload = {"choices": [{"delta": {"content": content}}]}
    return f"data: {json.dumps(payload, ensure_ascii=False, separators=(',', ':'))}\n\n".encode()


class ChunkedStream(httpx.AsyncByteStream):
    """Response body delivered in the given chunks."""

    def __init__(self, chunks: list[bytes]):
        self.chunks = chunks

    async def __aiter__(self):
        for chunk in self.chunks:
            yield chunk


def random_chunks(body: bytes, seed: int, cuts: int = 12) -> list[bytes]:
    """Split ``body`` at ``cuts`` random byte offsets, reproducibly per seed."""
    rng = random.Random(seed)
    offsets = sorted(rng.sample(range(1, len(body)), cuts))
    return [body[a:b] for a, b in zip([0, *offsets], [*offsets, len(body)])]
