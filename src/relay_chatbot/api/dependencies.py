"""FastAPI dependency injection."""

from typing import Annotated

import httpx
from fastapi import Depends, Request

from relay_chatbot.app import Application
from relay_chatbot.config.settings import Settings, get_settings
from relay_chatbot.relay.backend import BackendClient
from relay_chatbot.relay.orchestrator import RelayOrchestrator
from relay_chatbot.search.provider import SearchProvider
from relay_chatbot.tools.base import CapabilityContext
from relay_chatbot.tools.executor import ToolExecutor


def get_app_settings() -> Settings:
    """Get application settings."""
    return get_settings()


def get_application(request: Request) -> Application:
    """Get the process-wide Application from application state."""
    return request.app.state.application


async def get_http_client(request: Request) -> httpx.AsyncClient:
    """Get the shared HTTP client from application state."""
    return request.app.state.http_client


async def get_search_provider(
    settings: Annotated[Settings, Depends(get_app_settings)],
    client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
) -> SearchProvider:
    """Get a search provider bound to the shared client."""
    return SearchProvider(
        client=client,
        base_url=settings.searxng_base_url,
        search_timeout=settings.search_timeout_seconds,
        excerpt_timeout=settings.excerpt_timeout_seconds,
    )


async def get_orchestrator(
    settings: Annotated[Settings, Depends(get_app_settings)],
    client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
    search_provider: Annotated[SearchProvider, Depends(get_search_provider)],
) -> RelayOrchestrator:
    """
    Build the relay for one request.

    Orchestrators are cheap and own per-request state, so each request
    gets its own.
    """
    return RelayOrchestrator(
        settings=settings,
        backend=BackendClient(client, settings),
        executor=ToolExecutor(CapabilityContext(search_provider=search_provider)),
    )


# Type aliases for dependency injection
ApplicationDep = Annotated[Application, Depends(get_application)]
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
HTTPClientDep = Annotated[httpx.AsyncClient, Depends(get_http_client)]
OrchestratorDep = Annotated[RelayOrchestrator, Depends(get_orchestrator)]
