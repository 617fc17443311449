"""General web search adapter (Tavily) with a static fallback result set."""

from typing import Any
from urllib.parse import quote_plus

import httpx

from research_assistant.adapters.base import ProviderAdapter
from research_assistant.observability import get_logger
from research_assistant.observability.constants import LogEvents
from research_assistant.schemas.internal import RetrievalResult, SourceType

logger = get_logger(__name__)

SNIPPET_LENGTH = 200


class WebSearchAdapter(ProviderAdapter):
    """Web search through the Tavily API.

    Without an API key, or when Tavily fails, the adapter answers with
    :func:`fallback_results` instead of an empty list.
    """

    source = SourceType.WEB

    def __init__(
        self,
        api_key: str | None,
        url: str = "https://api.tavily.com/search",
        max_results: int = 5,
        timeout: float = 8.0,
    ):
        super().__init__(max_results=max_results, timeout=timeout)
        self.api_key = api_key
        self.url = url

    async def _search(self, query: str) -> list[RetrievalResult]:
        if not self.api_key:
            logger.info(
                LogEvents.ADAPTER_SEARCH_FALLBACK, source=self.source.value, reason="no_api_key"
            )
            return fallback_results(query)

        request_data = {
            "api_key": self.api_key,
            "query": query,
            "search_depth": "advanced",
            "max_results": self.max_results,
            "include_answer": True,
            "include_raw_content": False,
        }

        async with self._client() as client:
            try:
                response = await client.post(
                    self.url,
                    json=request_data,
                    headers={"Content-Type": "application/json"},
                )
            except httpx.RequestError as e:
                logger.warning(
                    LogEvents.ADAPTER_SEARCH_FALLBACK,
                    source=self.source.value,
                    reason="request_error",
                    error=str(e),
                )
                return fallback_results(query)

        if response.status_code != 200:
            logger.warning(
                LogEvents.ADAPTER_SEARCH_FALLBACK,
                source=self.source.value,
                reason="http_status",
                status_code=response.status_code,
            )
            return fallback_results(query)

        try:
            data = response.json()
        except ValueError:
            logger.warning(
                LogEvents.ADAPTER_SEARCH_FALLBACK, source=self.source.value, reason="bad_json"
            )
            return fallback_results(query)

        return self._parse_tavily_response(data)

    def _parse_tavily_response(self, data: Any) -> list[RetrievalResult]:
        """Map Tavily's ``results[]`` to retrieval results.

        Tavily returns ``{"results": [{"title", "url", "content", "score"}, ...]}``.
        Entries without a title or url are dropped.
        """
        if not isinstance(data, dict):
            return []

        results = []
        for item in data.get("results") or []:
            if not isinstance(item, dict):
                continue
            title = item.get("title")
            url = item.get("url")
            if not title or not url:
                continue
            content = item.get("content") or ""
            snippet = content[:SNIPPET_LENGTH] + "..." if content else ""
            results.append(
                RetrievalResult(
                    title=title,
                    url=url,
                    snippet=snippet,
                    content=content or None,
                    source=self.source,
                )
            )
        return results


def fallback_results(query: str) -> list[RetrievalResult]:
    """Static results used when live web search is unavailable.

    Topic keywords pick a curated set; anything else gets a single link
    to run the search on a general-purpose engine.
    """
    lower_query = query.lower()

    if "sentient" in lower_query:
        return [
            RetrievalResult(
                title="Sentient AGI - GitHub",
                url="https://github.com/sentient-agi",
                snippet=(
                    "Sentient builds open, community-owned AI models and decentralized "
                    "infrastructure for AI."
                ),
                content=(
                    "Sentient is building decentralized AI infrastructure with community-owned "
                    "models like Dobby, frameworks for confidential computing, and tools for "
                    "building AI agents."
                ),
            ),
            RetrievalResult(
                title="Sentient Agent Framework",
                url="https://github.com/sentient-agi/Sentient-Agent-Framework",
                snippet=(
                    "Python package for building agents that serve Sentient Chat events with "
                    "multimodal inputs and real-time rendering."
                ),
            ),
            RetrievalResult(
                title="OpenDeepSearch by Sentient",
                url="https://github.com/sentient-agi/OpenDeepSearch",
                snippet="Search tool for AI agents enabling deep web search and retrieval.",
            ),
        ]

    if "dobby" in lower_query:
        return [
            RetrievalResult(
                title="Dobby Unhinged Llama Model",
                url="https://huggingface.co/SentientAGI/Dobby-Unhinged-Llama-3.3-70B",
                snippet="Community-owned model with a pro-crypto, pro-freedom stance.",
                content=(
                    "Dobby is a fine-tuned Llama 3.3 70B model with strong conviction towards "
                    "personal freedom, decentralization, and crypto."
                ),
            ),
        ]

    if any(word in lower_query for word in ("crypto", "blockchain", "decentrali")):
        return [
            RetrievalResult(
                title="Decentralized AI Explained",
                url="https://ethereum.org/en/decentralized-ai/",
                snippet=(
                    "Decentralized AI combines blockchain technology with artificial "
                    "intelligence to create transparent, community-owned AI systems."
                ),
            ),
            RetrievalResult(
                title="The Future of Crypto and AI",
                url="https://a16z.com/crypto-ai/",
                snippet=(
                    "Cryptocurrency and AI are converging to create new economic models for "
                    "AI development, ownership, and monetization."
                ),
            ),
        ]

    return [
        RetrievalResult(
            title="Search Results",
            url=f"https://www.google.com/search?q={quote_plus(query)}",
            snippet="For more information, try searching on Google or other search engines.",
        )
    ]
