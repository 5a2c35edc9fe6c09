"""Web search capability."""

import json
import math
from typing import Any

from relay_chatbot.config.prompts import CITATION_INSTRUCTIONS
from relay_chatbot.core.exceptions import ToolExecutionError
from relay_chatbot.relay.models import SearchResult
from relay_chatbot.tools.base import Capability, CapabilityContext, CapabilityResult
from relay_chatbot.tools.registry import CapabilityRegistry


MIN_RESULTS = 1
MAX_RESULTS = 7
DEFAULT_RESULTS = 5


def clamp_max_results(value: Any) -> int:
    """
    Clamp a requested result count into [MIN_RESULTS, MAX_RESULTS].

    Numeric strings ("3") are accepted; anything else non-numeric gets the default.
    """
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return DEFAULT_RESULTS
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return DEFAULT_RESULTS
    if isinstance(value, float) and not math.isfinite(value):
        return DEFAULT_RESULTS
    return max(MIN_RESULTS, min(MAX_RESULTS, int(value)))


def parse_arguments(arguments: str) -> tuple[str, int]:
    """
    Parse web_search argument text into (query, max_results).

    Raises:
        ToolExecutionError: Text is not a JSON object or the query is missing/empty
    """
    try:
        data = json.loads(arguments) if arguments.strip() else {}
    except json.JSONDecodeError as e:
        raise ToolExecutionError(f"Invalid JSON arguments: {e}", capability="web_search") from e

    if not isinstance(data, dict):
        raise ToolExecutionError("Arguments must be a JSON object", capability="web_search")

    query = data.get("query")
    if not isinstance(query, str) or not query.strip():
        raise ToolExecutionError("Missing required argument: query", capability="web_search")

    return query.strip(), clamp_max_results(data.get("max_results"))


def build_payload(query: str, results: list[SearchResult]) -> dict[str, Any]:
    """Tool message payload: query, 1-based indexed results, citation instructions."""
    return {
        "query": query,
        "results": [
            {
                "index": position,
                "title": result.title,
                "snippet": result.snippet,
                "url": result.url,
            }
            for position, result in enumerate(results, start=1)
        ],
        "instructions": CITATION_INSTRUCTIONS,
    }


@CapabilityRegistry.register
class WebSearchCapability(Capability):
    """Searches the web and returns indexed, citable results."""

    name = "web_search"
    description = (
        "Search the web for up-to-date information. Returns a numbered list of "
        "results (title, snippet, url) that must be cited by index, e.g. [1]."
    )
    parameters = {
        "type": "object",
        "properties": {
            "query": {
                "type": "string",
                "description": "Short, specific search query",
            },
            "max_results": {
                "type": "integer",
                "description": f"Number of results to return ({MIN_RESULTS}-{MAX_RESULTS})",
                "minimum": MIN_RESULTS,
                "maximum": MAX_RESULTS,
                "default": DEFAULT_RESULTS,
            },
        },
        "required": ["query"],
    }

    async def invoke(self, arguments: str, context: CapabilityContext) -> CapabilityResult:
        query, max_results = parse_arguments(arguments)

        if context.search_provider is None:
            raise ToolExecutionError("Search is not configured", capability=self.name)

        results = await context.search_provider.search(query)
        results = results[:max_results]

        return CapabilityResult(
            payload=build_payload(query, results),
            results=results,
        )
