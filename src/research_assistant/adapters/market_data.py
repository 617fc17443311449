"""Market-data search adapter (CoinGecko free tier)."""

from typing import Any

import httpx

from research_assistant.adapters.base import ProviderAdapter
from research_assistant.observability import get_logger
from research_assistant.observability.constants import LogEvents
from research_assistant.schemas.internal import RetrievalResult, SourceType

logger = get_logger(__name__)


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


class MarketDataAdapter(ProviderAdapter):
    """Looks up coins matching the query, then fetches their market data.

    Two calls: ``/search`` to resolve coin ids, ``/coins/markets`` for
    prices. If the second call fails, the coins found by the first are
    returned without prices.
    """

    source = SourceType.MARKET_DATA

    def __init__(
        self,
        api_url: str = "https://api.coingecko.com/api/v3",
        max_results: int = 3,
        timeout: float = 8.0,
    ):
        super().__init__(max_results=max_results, timeout=timeout)
        self.api_url = api_url.rstrip("/")

    async def _search(self, query: str) -> list[RetrievalResult]:
        async with self._client() as client:
            search_response = await client.get(f"{self.api_url}/search", params={"query": query})
            if search_response.status_code != 200:
                logger.warning(
                    LogEvents.ADAPTER_SEARCH_FAILED,
                    source=self.source.value,
                    status_code=search_response.status_code,
                )
                return []

            coins = self._parse_coins(search_response.json())
            if not coins:
                return []

            try:
                details_response = await client.get(
                    f"{self.api_url}/coins/markets",
                    params={
                        "vs_currency": "usd",
                        "ids": ",".join(coin["id"] for coin in coins),
                        "order": "market_cap_desc",
                        "sparkline": "false",
                    },
                )
            except httpx.RequestError as e:
                logger.warning(
                    LogEvents.ADAPTER_SEARCH_FAILED,
                    source=self.source.value,
                    stage="markets",
                    error=str(e),
                )
                return [self._basic_result(coin) for coin in coins]

        if details_response.status_code != 200:
            return [self._basic_result(coin) for coin in coins]

        try:
            details = details_response.json()
        except ValueError:
            return [self._basic_result(coin) for coin in coins]

        if not isinstance(details, list):
            return [self._basic_result(coin) for coin in coins]
        return [
            self._market_result(coin) for coin in details if isinstance(coin, dict) and coin.get("id")
        ]

    def _parse_coins(self, data: Any) -> list[dict[str, Any]]:
        if not isinstance(data, dict):
            return []
        coins = [c for c in data.get("coins") or [] if isinstance(c, dict) and c.get("id")]
        return coins[: self.max_results]

    def _display_name(self, coin: dict[str, Any]) -> str:
        name = coin.get("name") or coin["id"]
        symbol = coin.get("symbol")
        return f"{name} ({symbol.upper()})" if symbol else name

    def _coin_url(self, coin: dict[str, Any]) -> str:
        return f"https://www.coingecko.com/en/coins/{coin['id']}"

    def _basic_result(self, coin: dict[str, Any]) -> RetrievalResult:
        return RetrievalResult(
            title=self._display_name(coin),
            url=self._coin_url(coin),
            snippet=f"Cryptocurrency: {coin.get('name') or coin['id']}",
            source=self.source,
        )

    def _market_result(self, coin: dict[str, Any]) -> RetrievalResult:
        price = _as_number(coin.get("current_price"))
        change = _as_number(coin.get("price_change_percentage_24h"))
        market_cap = _as_number(coin.get("market_cap"))
        rank = coin.get("market_cap_rank")
        title = self._display_name(coin)

        # Absent numbers are left out of the text and the metadata alike.
        snippet_parts: list[str] = []
        content_lines = [title, ""]
        if price is not None:
            snippet_parts.append(f"Price: ${price:,}")
            content_lines.append(f"Current Price: ${price:,}")
        if change is not None:
            snippet_parts.append(f"24h: {change:.2f}%")
            content_lines.append(f"24h Change: {change:.2f}%")
        if market_cap is not None:
            snippet_parts.append(f"Market Cap: ${market_cap / 1e9:.2f}B")
            content_lines.append(f"Market Cap: ${market_cap / 1e9:.2f}B")
        snippet = " | ".join(snippet_parts)
        if rank is not None:
            content_lines.append(f"Rank: #{rank}")

        metadata = {
            key: value
            for key, value in (("price", price), ("change24h", change), ("marketCap", market_cap))
            if value is not None
        }

        return RetrievalResult(
            title=title,
            url=self._coin_url(coin),
            snippet=snippet or f"Cryptocurrency: {coin.get('name') or coin['id']}",
            content="\n".join(content_lines),
            source=self.source,
            metadata=metadata or None,
        )
