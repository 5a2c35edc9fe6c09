"""Pytest fixtures for testing."""

from typing import AsyncIterator, Callable

import httpx
import pytest
import pytest_asyncio

from helpers import BACKEND_URL, SEARCH_URL, FakeSearchProvider, ScriptedBackend
from relay_chatbot.config.settings import Settings
from relay_chatbot.relay.backend import BackendClient
from relay_chatbot.relay.models import SearchResult
from relay_chatbot.relay.orchestrator import RelayOrchestrator
from relay_chatbot.tools.base import CapabilityContext
from relay_chatbot.tools.executor import ToolExecutor


@pytest.fixture
def settings() -> Settings:
    """Create test settings."""
    return Settings(
        llama_base_url=BACKEND_URL,
        llama_model="test-model",
        searxng_base_url=SEARCH_URL,
        max_tool_rounds=3,
        log_level="DEBUG",
    )


@pytest.fixture
def search_results() -> list[SearchResult]:
    """Three canned search hits."""
    return [
        SearchResult(title="Headline one", snippet="First snippet", url="https://news.test/1"),
        SearchResult(title="Headline two", snippet="Second snippet", url="https://news.test/2"),
        SearchResult(title="Headline three", snippet="", url="https://news.test/3"),
    ]


@pytest_asyncio.fixture
async def mock_client() -> AsyncIterator[Callable[[Callable], httpx.AsyncClient]]:
    """Create AsyncClients over MockTransport handlers, closed after the test."""
    clients: list[httpx.AsyncClient] = []

    def factory(handler: Callable) -> httpx.AsyncClient:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield factory

    for client in clients:
        await client.aclose()


@pytest.fixture
def make_orchestrator(settings: Settings, mock_client):
    """Build an orchestrator wired to a scripted backend and a fake search provider."""

    def factory(
        rounds: list,
        search_provider: FakeSearchProvider | None = None,
        settings_override: Settings | None = None,
    ) -> tuple[RelayOrchestrator, ScriptedBackend]:
        backend = ScriptedBackend(rounds)
        used_settings = settings_override or settings
        orchestrator = RelayOrchestrator(
            settings=used_settings,
            backend=BackendClient(mock_client(backend), used_settings),
            executor=ToolExecutor(
                CapabilityContext(search_provider=search_provider or FakeSearchProvider())
            ),
        )
        return orchestrator, backend

    return factory
