"""FastAPI routes for the chat API."""

from typing import AsyncIterator
from uuid import uuid4

from fastapi import APIRouter, HTTPException
from fastapi.responses import StreamingResponse

from relay_chatbot import __version__
from relay_chatbot.api.dependencies import ApplicationDep, OrchestratorDep, SettingsDep
from relay_chatbot.api.models import ChatRequest, HealthResponse
from relay_chatbot.api.sse import event_stream
from relay_chatbot.utils.logging import bind_request_context, get_logger


logger = get_logger(__name__)
router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Health check endpoint.

    Returns application status and version.
    """
    return HealthResponse(status="ok", version=__version__)


@router.post("/chat/stream")
async def chat_stream(
    chat_request: ChatRequest,
    application: ApplicationDep,
    orchestrator: OrchestratorDep,
    settings: SettingsDep,
) -> StreamingResponse:
    """
    Streaming chat endpoint.

    Returns a Server-Sent Events stream:
    - sources: JSON array of {title, snippet, url}; empty first, then
      re-sent after every search
    - unnamed events: {"choices":[{"delta":{"content": "..."}}]}
    - error: plain-text diagnostic, ends the stream

    The stream closes when the answer is complete.
    """
    if application.is_shutting_down:
        raise HTTPException(status_code=503, detail="Service is shutting down")

    request_id = uuid4().hex[:12]
    bind_request_context(request_id=request_id)
    logger.info(
        "Chat request received",
        use_search=chat_request.use_search,
        history=len(chat_request.history),
    )

    async def stream() -> AsyncIterator[str]:
        application.active_requests.add(request_id)
        try:
            events = orchestrator.relay(
                message=chat_request.message,
                use_search=chat_request.use_search,
                history=chat_request.history_messages(),
            )
            async for chunk in event_stream(events, keepalive=settings.sse_keepalive_seconds):
                yield chunk
        finally:
            application.active_requests.discard(request_id)
            logger.debug("Chat stream closed", state=orchestrator.state.value)

    return StreamingResponse(
        stream(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
            "X-Request-ID": request_id,
        },
    )
