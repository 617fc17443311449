"""Base class for search provider adapters."""

import asyncio
import time
from abc import ABC, abstractmethod

import httpx

from research_assistant.observability import get_logger
from research_assistant.observability.constants import LogEvents
from research_assistant.schemas.internal import RetrievalResult, SourceType

logger = get_logger(__name__)


class ProviderAdapter(ABC):
    """Turns a free-text query into a bounded list of normalized results.

    Subclasses implement ``_search`` with the provider's request shape and
    response mapping. ``search`` wraps it with the timeout budget, the
    result cap and the never-raise contract: every failure resolves to an
    empty list.
    """

    source: SourceType

    def __init__(self, max_results: int = 5, timeout: float = 8.0):
        self.max_results = max_results
        self.timeout = timeout

    async def search(self, query: str) -> list[RetrievalResult]:
        """Search the provider; returns ``[]`` on any failure."""
        start_time = time.perf_counter()

        try:
            results = await asyncio.wait_for(self._search(query), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(
                LogEvents.ADAPTER_SEARCH_TIMEOUT,
                source=self.source.value,
                timeout_s=self.timeout,
            )
            return []
        except httpx.HTTPError as e:
            logger.warning(
                LogEvents.ADAPTER_SEARCH_FAILED,
                source=self.source.value,
                error_type=type(e).__name__,
                error=str(e),
            )
            return []
        except Exception:
            logger.exception(LogEvents.ADAPTER_SEARCH_FAILED, source=self.source.value)
            return []

        capped = [
            r if r.source == self.source else r.model_copy(update={"source": self.source})
            for r in results[: self.max_results]
        ]

        latency_ms = int((time.perf_counter() - start_time) * 1000)
        logger.info(
            LogEvents.ADAPTER_SEARCH_COMPLETED,
            source=self.source.value,
            results=len(capped),
            latency_ms=latency_ms,
        )
        return capped

    @abstractmethod
    async def _search(self, query: str) -> list[RetrievalResult]:
        """Provider-specific request and mapping. May raise."""

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=httpx.Timeout(self.timeout))
