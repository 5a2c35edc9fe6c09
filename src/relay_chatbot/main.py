"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException
from starlette.types import Scope

from relay_chatbot import __version__
from relay_chatbot.api.routes import router
from relay_chatbot.app import Application
from relay_chatbot.config.settings import Settings, get_settings
from relay_chatbot.utils.logging import configure_logging, get_logger

# Registers the built-in capabilities
import relay_chatbot.tools  # noqa: F401


logger = get_logger(__name__)


class SPAStaticFiles(StaticFiles):
    """Static files with index.html fallback for client-side routes."""

    async def get_response(self, path: str, scope: Scope):
        try:
            return await super().get_response(path, scope)
        except HTTPException as e:
            if e.status_code != 404:
                raise
            return await super().get_response("index.html", scope)


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Settings to use; loaded from the environment when omitted

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    application = Application(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # Startup
        await application.startup()
        app.state.application = application
        app.state.http_client = application.http_client

        yield

        # Shutdown
        await application.shutdown()

    app = FastAPI(
        title="Relay Chatbot API",
        description="Streaming chat relay with web search tool calls",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router, prefix="/api")

    static_dir = Path(settings.static_dir)
    if (static_dir / "index.html").is_file():
        app.mount("/", SPAStaticFiles(directory=static_dir, html=True), name="static")
        logger.info("Serving static frontend", directory=str(static_dir))

    return app


# Create application instance
app = create_app()


def main() -> None:
    """Entry point for running the application."""
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "relay_chatbot.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
