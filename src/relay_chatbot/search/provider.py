"""Search provider backed by a SearxNG instance.

Two stages:
1. Primary query against the aggregator's JSON endpoint (hard failure on a
   non-success response, transient transport errors retried)
2. Excerpt enrichment of the top hits (failures absorbed, snippet kept)
"""

import httpx

from relay_chatbot.core.exceptions import SearchError
from relay_chatbot.core.resilience import (
    TransientError,
    classify_http_error,
    operation_timeout,
    search_circuit_breaker,
    search_retry,
)
from relay_chatbot.relay.models import SearchResult
from relay_chatbot.search.excerpts import fetch_excerpt, merge_excerpt
from relay_chatbot.utils.logging import get_logger


logger = get_logger(__name__)

MAX_RESULTS = 5
ENRICHED_RESULTS = 2


class SearchProvider:
    """
    Queries the aggregator and enriches the best hits with page text.

    Only the first ENRICHED_RESULTS hits are fetched: page fetches are
    slow, and the top hits are the ones the backend is most likely to use.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        search_timeout: float = 10.0,
        excerpt_timeout: float = 8.0,
    ):
        """
        Initialize search provider.

        Args:
            client: Shared HTTP client
            base_url: SearxNG base URL
            search_timeout: Timeout for the primary query (seconds)
            excerpt_timeout: Total time allowed for each landing-page fetch (seconds)
        """
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._search_timeout = search_timeout
        self._excerpt_timeout = excerpt_timeout

    async def search(self, query: str) -> list[SearchResult]:
        """
        Run a query and return at most MAX_RESULTS enriched results.

        Raises:
            SearchError: Aggregator returned a non-success status or bad body
            TransientError: Aggregator unreachable after retries
        """
        results = await self._query(query)
        logger.info("Search completed", query=query, results=len(results))
        return await self._enrich(results)

    @search_retry
    @search_circuit_breaker
    async def _query(self, query: str) -> list[SearchResult]:
        try:
            response = await self._client.get(
                f"{self._base_url}/search",
                params={"q": query, "format": "json", "language": "en"},
                timeout=self._search_timeout,
            )
        except httpx.TimeoutException as e:
            raise TransientError(f"Search timeout: {e}") from e
        except httpx.TransportError as e:
            raise TransientError(f"Search connection error: {e}") from e

        if not response.is_success:
            raise classify_http_error(response.status_code, "Search aggregator")

        try:
            data = response.json()
        except ValueError as e:
            raise SearchError(f"Search aggregator returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise SearchError("Search aggregator returned an unexpected body")

        return parse_hits(data.get("results") or [])

    async def _enrich(self, results: list[SearchResult]) -> list[SearchResult]:
        enriched = []
        for position, result in enumerate(results):
            if position < ENRICHED_RESULTS:
                result = await self._with_excerpt(result)
            enriched.append(result)
        return enriched

    async def _with_excerpt(self, result: SearchResult) -> SearchResult:
        try:
            bounded_fetch = operation_timeout(self._excerpt_timeout)(fetch_excerpt)
            excerpt = await bounded_fetch(self._client, result.url, self._excerpt_timeout)
        except Exception as e:
            logger.warning("Excerpt fetch failed, keeping snippet", url=result.url, error=str(e))
            return result
        return result.model_copy(update={"snippet": merge_excerpt(result.snippet, excerpt)})


def parse_hits(hits: list) -> list[SearchResult]:
    """Drop hits without a URL, default title and snippet, cap at MAX_RESULTS."""
    results = []
    for hit in hits:
        if not isinstance(hit, dict):
            continue
        url = hit.get("url")
        if not url or not isinstance(url, str):
            continue
        results.append(
            SearchResult(
                title=str(hit.get("title") or url),
                snippet=str(hit.get("content") or ""),
                url=url,
            )
        )
        if len(results) == MAX_RESULTS:
            break
    return results
