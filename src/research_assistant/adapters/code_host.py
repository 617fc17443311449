"""Code-hosting search adapter (GitHub repository search)."""

from typing import Any

from research_assistant.adapters.base import ProviderAdapter
from research_assistant.observability import get_logger
from research_assistant.observability.constants import LogEvents
from research_assistant.schemas.internal import RetrievalResult, SourceType

logger = get_logger(__name__)


class CodeHostAdapter(ProviderAdapter):
    """Searches GitHub repositories, most-starred first."""

    source = SourceType.CODE_HOST

    def __init__(
        self,
        api_url: str = "https://api.github.com",
        token: str | None = None,
        max_results: int = 5,
        timeout: float = 8.0,
    ):
        super().__init__(max_results=max_results, timeout=timeout)
        self.api_url = api_url.rstrip("/")
        self.token = token

    async def _search(self, query: str) -> list[RetrievalResult]:
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "Research-Assistant",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        async with self._client() as client:
            response = await client.get(
                f"{self.api_url}/search/repositories",
                params={"q": query, "sort": "stars", "per_page": self.max_results},
                headers=headers,
            )

        if response.status_code != 200:
            logger.warning(
                LogEvents.ADAPTER_SEARCH_FAILED,
                source=self.source.value,
                status_code=response.status_code,
            )
            return []

        return self._parse_repositories(response.json())

    def _parse_repositories(self, data: Any) -> list[RetrievalResult]:
        if not isinstance(data, dict):
            return []

        results = []
        for repo in data.get("items") or []:
            if not isinstance(repo, dict):
                continue
            full_name = repo.get("full_name")
            html_url = repo.get("html_url")
            if not full_name or not html_url:
                continue

            description = repo.get("description") or ""
            stars = repo.get("stargazers_count")
            forks = repo.get("forks_count")
            language = repo.get("language")
            owner = repo.get("owner") if isinstance(repo.get("owner"), dict) else {}

            stats = [
                f"Stars: {stars if stars is not None else 'N/A'}",
                f"Language: {language or 'N/A'}",
                f"Forks: {forks if forks is not None else 'N/A'}",
            ]
            metadata = {
                key: value
                for key, value in (
                    ("stars", stars),
                    ("language", language),
                    ("author", owner.get("login")),
                )
                if value is not None
            }

            results.append(
                RetrievalResult(
                    title=full_name,
                    url=html_url,
                    snippet=description or "No description available",
                    content=f"{description}\n\n{' | '.join(stats)}",
                    source=self.source,
                    metadata=metadata or None,
                )
            )
        return results
