"""Adapters package - one search provider adapter per source type."""

from research_assistant.adapters.base import ProviderAdapter
from research_assistant.adapters.code_host import CodeHostAdapter
from research_assistant.adapters.market_data import MarketDataAdapter
from research_assistant.adapters.social import SocialAdapter
from research_assistant.adapters.web import WebSearchAdapter, fallback_results
from research_assistant.core.config import Settings
from research_assistant.schemas.internal import SourceType


def build_adapters(settings: Settings) -> dict[SourceType, ProviderAdapter]:
    """Construct one adapter per source type from configuration."""
    timeout = settings.adapter_timeout
    return {
        SourceType.WEB: WebSearchAdapter(
            api_key=settings.tavily_api_key,
            url=settings.tavily_url,
            max_results=settings.web_max_results,
            timeout=timeout,
        ),
        SourceType.CODE_HOST: CodeHostAdapter(
            api_url=settings.github_api_url,
            token=settings.github_token,
            max_results=settings.code_host_max_results,
            timeout=timeout,
        ),
        SourceType.SOCIAL: SocialAdapter(
            search_url=settings.social_search_url,
            timeout=timeout,
        ),
        SourceType.MARKET_DATA: MarketDataAdapter(
            api_url=settings.coingecko_api_url,
            max_results=settings.market_data_max_results,
            timeout=timeout,
        ),
    }


__all__ = [
    "ProviderAdapter",
    "WebSearchAdapter",
    "CodeHostAdapter",
    "SocialAdapter",
    "MarketDataAdapter",
    "build_adapters",
    "fallback_results",
]
