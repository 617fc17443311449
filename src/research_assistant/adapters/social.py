"""Social search adapter.

No social network API is integrated; the adapter returns a single link
to the live search page for the query. This degraded mode is the
adapter's normal behavior, not an error.
"""

from urllib.parse import urlencode

from research_assistant.adapters.base import ProviderAdapter
from research_assistant.schemas.internal import RetrievalResult, SourceType


class SocialAdapter(ProviderAdapter):
    """Returns one synthetic search-link result for the query."""

    source = SourceType.SOCIAL

    def __init__(
        self,
        search_url: str = "https://twitter.com/search",
        max_results: int = 1,
        timeout: float = 8.0,
    ):
        super().__init__(max_results=max_results, timeout=timeout)
        self.search_url = search_url

    async def _search(self, query: str) -> list[RetrievalResult]:
        link = f"{self.search_url}?{urlencode({'q': query, 'src': 'typed_query', 'f': 'live'})}"
        return [
            RetrievalResult(
                title=f"Twitter Search: {query}",
                url=link,
                snippet=(
                    f'Search Twitter for recent discussions about "{query}". '
                    "Click to view live results."
                ),
                content=(
                    f'Twitter search results for "{query}". '
                    "This will show you the latest tweets and discussions."
                ),
                source=self.source,
            )
        ]
