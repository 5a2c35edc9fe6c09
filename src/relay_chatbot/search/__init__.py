"""Web search against a SearxNG aggregator."""

from relay_chatbot.search.provider import SearchProvider

__all__ = ["SearchProvider"]
