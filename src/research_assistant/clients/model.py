"""Client for the OpenAI-compatible model provider (Fireworks)."""

import json
import time
from collections.abc import AsyncIterator
from contextlib import aclosing

import httpx

from research_assistant.clients.sse import DONE_SENTINEL, SSEFrameParser
from research_assistant.observability import get_logger
from research_assistant.observability.constants import LogEvents
from research_assistant.schemas.internal import GenerationResult
from research_assistant.schemas.requests import ChatCompletionRequest, Message

logger = get_logger(__name__)


class ModelClientError(Exception):
    """Error from the model provider."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ModelClient:
    """Client for calling the model provider's chat completions API."""

    def __init__(
        self,
        api_key: str | None,
        base_url: str = "https://api.fireworks.ai/inference/v1",
        timeout: float = 120.0,
    ):
        self.api_key = api_key
        self.chat_url = f"{base_url.rstrip('/')}/chat/completions"
        self.timeout = httpx.Timeout(timeout)

    def _headers(self, accept: str = "application/json") -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": accept}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def chat(
        self,
        model: str,
        messages: list[Message],
        temperature: float = 0.7,
        max_tokens: int = 1024,
    ) -> GenerationResult:
        """
        Send messages to the model and wait for the full response.

        Args:
            model: Model identifier
            messages: List of conversation messages
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate

        Returns:
            GenerationResult with response text and metadata

        Raises:
            ModelClientError: If the request fails
        """
        start_time = time.perf_counter()
        logger.debug(LogEvents.MODEL_QUERY_STARTED, model=model, stream=False)
        request_data = ChatCompletionRequest(
            model=model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
            stream=False,
        )

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.post(
                    self.chat_url,
                    json=request_data.model_dump(),
                    headers=self._headers(),
                )
            except httpx.TimeoutException as e:
                raise ModelClientError("Model request timed out") from e
            except httpx.RequestError as e:
                raise ModelClientError(f"Network error: {e}") from e

        latency_ms = int((time.perf_counter() - start_time) * 1000)

        if response.status_code != 200:
            raise ModelClientError(
                f"Model request failed: HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ModelClientError("Model returned a non-JSON response") from e

        logger.info(LogEvents.MODEL_QUERY_COMPLETED, model=model, latency_ms=latency_ms)

        return GenerationResult(
            response=self._extract_response_text(data),
            latency_ms=latency_ms,
            usage=data.get("usage") if isinstance(data, dict) else None,
        )

    async def chat_stream(
        self,
        model: str,
        messages: list[Message],
        temperature: float = 0.7,
        max_tokens: int = 1024,
    ) -> AsyncIterator[str]:
        """
        Send messages to the model and stream the response.

        A non-success status raises before anything is yielded. Frames that
        are not valid JSON deltas are skipped and counted. Closing the
        iterator closes the upstream connection.

        Yields:
            Non-empty response text deltas as they arrive

        Raises:
            ModelClientError: On non-success status, timeout or transport error
        """
        request_data = ChatCompletionRequest(
            model=model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
            stream=True,
        )
        skipped = 0
        logger.debug(LogEvents.MODEL_QUERY_STARTED, model=model, stream=True)

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                async with client.stream(
                    "POST",
                    self.chat_url,
                    json=request_data.model_dump(),
                    headers=self._headers(accept="text/event-stream"),
                ) as response:
                    if response.status_code != 200:
                        error_text = await response.aread()
                        raise ModelClientError(
                            f"Model stream failed: HTTP {response.status_code} - {error_text[:200]!r}",
                            status_code=response.status_code,
                        )

                    async with aclosing(self._iter_payloads(response)) as payloads:
                        async for payload in payloads:
                            if payload == DONE_SENTINEL:
                                break
                            try:
                                content = self._extract_delta(payload)
                            except ValueError:
                                skipped += 1
                                continue
                            if content:
                                yield content

            except httpx.TimeoutException as e:
                raise ModelClientError("Model stream timed out") from e
            except httpx.RequestError as e:
                raise ModelClientError(f"Network error during stream: {e}") from e
            finally:
                if skipped:
                    logger.warning(LogEvents.MODEL_STREAM_FRAMES_SKIPPED, count=skipped)

    async def _iter_payloads(self, response: httpx.Response) -> AsyncIterator[str]:
        parser = SSEFrameParser()
        async for chunk in response.aiter_bytes():
            for payload in parser.feed(chunk):
                yield payload
        for payload in parser.flush():
            yield payload

    def _extract_delta(self, payload: str) -> str | None:
        """Extract ``choices[0].delta.content``; raise ValueError on a malformed frame."""
        parsed = json.loads(payload)
        if not isinstance(parsed, dict):
            raise ValueError("stream frame is not a JSON object")

        choices = parsed.get("choices")
        if not choices or not isinstance(choices, list):
            return None
        first = choices[0]
        delta = first.get("delta") if isinstance(first, dict) else None
        if not isinstance(delta, dict):
            return None
        content = delta.get("content")
        return content if isinstance(content, str) else None

    def _extract_response_text(self, data: dict) -> str:
        """Extract response text from a non-streaming response."""
        if isinstance(data, dict) and "choices" in data:
            choices = data["choices"]
            if choices and isinstance(choices[0], dict):
                message = choices[0].get("message") or {}
                return message.get("content") or ""

        logger.warning(
            LogEvents.MODEL_QUERY_FAILED,
            reason="unrecognized_response",
            keys=list(data.keys()) if isinstance(data, dict) else None,
        )
        return ""
