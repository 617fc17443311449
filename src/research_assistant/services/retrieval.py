"""Retrieval service - fans a query out to the selected search providers."""

import asyncio
import time
from collections.abc import Iterable, Mapping

from research_assistant.adapters.base import ProviderAdapter
from research_assistant.observability import get_logger
from research_assistant.observability.constants import LogEvents
from research_assistant.schemas.internal import RetrievalResult, SourceType

logger = get_logger(__name__)


class RetrievalService:
    """Aggregates results from multiple provider adapters."""

    def __init__(self, adapters: Mapping[SourceType, ProviderAdapter]):
        self.adapters = dict(adapters)

    async def aggregate(
        self,
        query: str,
        sources: Iterable[SourceType],
    ) -> list[RetrievalResult]:
        """
        Query the requested sources in parallel and concatenate their results.

        Only adapters for the requested sources are called. All calls are
        joined before returning; each adapter bounds its own wait, so a
        slow provider contributes nothing rather than stalling the request.
        Results keep the order in which sources were requested and each
        adapter's own ordering.

        Args:
            query: The search query
            sources: Source types to search (duplicates are ignored)

        Returns:
            Results grouped by source; empty when every provider came back empty
        """
        active: list[tuple[SourceType, ProviderAdapter]] = []
        for source in dict.fromkeys(sources):
            adapter = self.adapters.get(source)
            if adapter is None:
                logger.warning(LogEvents.ADAPTER_SEARCH_SKIPPED, source=source.value)
                continue
            active.append((source, adapter))

        if not active:
            return []

        logger.info(
            LogEvents.CHAT_RETRIEVAL_STARTED,
            sources=[source.value for source, _ in active],
        )
        start_time = time.perf_counter()

        # One slot per source; adapters never share a result list.
        slots = await asyncio.gather(
            *(adapter.search(query) for _, adapter in active),
            return_exceptions=True,
        )

        results: list[RetrievalResult] = []
        counts: dict[str, int] = {}
        for (source, _), slot in zip(active, slots):
            if isinstance(slot, BaseException):
                logger.error(
                    LogEvents.CHAT_RETRIEVAL_FAILED,
                    source=source.value,
                    error_type=type(slot).__name__,
                    error=str(slot),
                )
                counts[source.value] = 0
                continue
            counts[source.value] = len(slot)
            results.extend(slot)

        total_latency_ms = int((time.perf_counter() - start_time) * 1000)
        logger.info(
            LogEvents.CHAT_RETRIEVAL_COMPLETED,
            counts=counts,
            total_results=len(results),
            latency_ms=total_latency_ms,
        )

        return results
