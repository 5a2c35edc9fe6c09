"""Client for the completion backend's streaming chat endpoint."""

from typing import Any, AsyncIterator

import httpx

from relay_chatbot.config.settings import Settings
from relay_chatbot.core.exceptions import BackendError
from relay_chatbot.relay.frames import FrameParser
from relay_chatbot.relay.models import AutoToolChoice, Conversation, NamedToolChoice
from relay_chatbot.utils.logging import get_logger


logger = get_logger(__name__)

COMPLETIONS_PATH = "/v1/chat/completions"


class BackendClient:
    """
    Sends one round to an OpenAI-compatible backend and yields its payloads.

    Failures are not retried: the caller ends the relay on BackendError.
    """

    def __init__(self, client: httpx.AsyncClient, settings: Settings):
        """
        Initialize backend client.

        Args:
            client: Shared HTTP client
            settings: Backend address, model, credentials and timeouts
        """
        self._client = client
        self._url = settings.llama_base_url.rstrip("/") + COMPLETIONS_PATH
        self._model = settings.llama_model
        self._api_key = settings.llama_api_key
        self._timeout = httpx.Timeout(
            settings.backend_read_timeout_seconds,
            connect=settings.backend_connect_timeout_seconds,
        )

    def build_request(
        self,
        conversation: Conversation,
        tools: list[dict[str, Any]] | None = None,
        tool_choice: AutoToolChoice | NamedToolChoice | None = None,
    ) -> dict[str, Any]:
        """Request body for one streamed round."""
        body: dict[str, Any] = {
            "model": self._model,
            "messages": conversation.to_wire(),
            "stream": True,
        }
        if tools:
            body["tools"] = tools
            body["tool_choice"] = (tool_choice or AutoToolChoice()).to_wire()
            body["parse_tool_calls"] = True
        return body

    async def stream_payloads(
        self,
        conversation: Conversation,
        tools: list[dict[str, Any]] | None = None,
        tool_choice: AutoToolChoice | NamedToolChoice | None = None,
    ) -> AsyncIterator[str]:
        """
        Stream the `data:` payloads of one round, sentinel included.

        Raises:
            BackendError: Backend unreachable, non-success status, or stream broken
        """
        body = self.build_request(conversation, tools, tool_choice)

        try:
            async with self._client.stream(
                "POST",
                self._url,
                json=body,
                headers={"Authorization": f"Bearer {self._api_key}"},
                timeout=self._timeout,
            ) as response:
                if not response.is_success:
                    detail = (await response.aread()).decode("utf-8", errors="replace")
                    logger.error(
                        "Backend returned error status",
                        status_code=response.status_code,
                        detail=detail[:500],
                    )
                    raise BackendError(
                        f"LLM backend returned HTTP {response.status_code}",
                        status_code=response.status_code,
                    )

                parser = FrameParser()
                async for chunk in response.aiter_bytes():
                    for payload in parser.feed(chunk):
                        yield payload

                if parser.pending.strip():
                    logger.debug("Discarding incomplete trailing frame", size=len(parser.pending))

        except httpx.TimeoutException as e:
            raise BackendError(f"LLM backend timed out: {type(e).__name__}") from e
        except httpx.HTTPError as e:
            raise BackendError(f"LLM backend request failed: {type(e).__name__}") from e
