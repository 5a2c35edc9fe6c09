"""Application class with startup/shutdown lifecycle."""

import asyncio

import httpx

from relay_chatbot import __version__
from relay_chatbot.config.settings import Settings
from relay_chatbot.utils.logging import get_logger


logger = get_logger(__name__)


class Application:
    """
    Process-wide resources with graceful shutdown.

    Handles:
    - The shared HTTP client (backend, search aggregator, page fetches)
    - Draining in-flight chat streams
    - Timeout for cleanup operations
    """

    def __init__(self, settings: Settings):
        """Initialize application."""
        self.settings = settings
        self.http_client: httpx.AsyncClient | None = None
        self._active_requests: set[str] = set()
        self._is_shutting_down = False

    async def startup(self) -> None:
        """Initialize resources on startup."""
        logger.info(
            "Starting application...",
            backend=self.settings.llama_base_url,
            model=self.settings.llama_model,
            search=self.settings.searxng_base_url,
        )
        self.http_client = httpx.AsyncClient(
            headers={"User-Agent": f"relay-chatbot/{__version__}"},
        )
        self._is_shutting_down = False
        logger.info("Application started")

    async def shutdown(self, timeout: float = 30.0) -> None:
        """
        Graceful shutdown with timeout.

        1. Stop accepting new requests
        2. Wait for in-flight streams (with timeout)
        3. Close the HTTP client

        Args:
            timeout: Maximum time to wait for streams to complete
        """
        logger.info("Shutdown initiated...")
        self._is_shutting_down = True

        if self._active_requests:
            logger.info(f"Waiting for {len(self._active_requests)} requests...")
            try:
                await asyncio.wait_for(self._wait_for_requests(), timeout=timeout)
            except asyncio.TimeoutError:
                logger.warning("Timeout waiting for requests, forcing shutdown")

        if self.http_client is not None:
            await self.http_client.aclose()
            self.http_client = None

        logger.info("Shutdown complete")

    async def _wait_for_requests(self) -> None:
        """Wait until all requests complete."""
        while self._active_requests:
            await asyncio.sleep(0.1)

    @property
    def is_shutting_down(self) -> bool:
        """Check if application is shutting down."""
        return self._is_shutting_down

    @property
    def active_requests(self) -> set[str]:
        """Get set of active request IDs."""
        return self._active_requests
