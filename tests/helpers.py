"""Payload builders and fakes shared by the tests."""

import json
from typing import Any, AsyncIterator

import httpx

from relay_chatbot.relay.models import SearchResult

BACKEND_URL = "http://llama.test"
SEARCH_URL = "http://searx.test"


def content_payload(text: str) -> str:
    return json.dumps({"choices": [{"delta": {"content": text}}]})


def tool_payload(
    index: int = 0,
    id: str | None = None,
    name: str | None = None,
    arguments: str | None = None,
) -> str:
    fragment: dict[str, Any] = {"index": index}
    if id is not None:
        fragment["id"] = id
        fragment["type"] = "function"
    function: dict[str, Any] = {}
    if name is not None:
        function["name"] = name
    if arguments is not None:
        function["arguments"] = arguments
    if function:
        fragment["function"] = function
    return json.dumps({"choices": [{"delta": {"tool_calls": [fragment]}}]})


def sse_body(*payloads: str, done: bool = True) -> bytes:
    frames = [f"data: {payload}\n\n" for payload in payloads]
    if done:
        frames.append("data: [DONE]\n\n")
    return "".join(frames).encode()


def search_call_round(call_id: str, query: str) -> bytes:
    """A round whose only output is one web_search call, split over several payloads."""
    arguments = json.dumps({"query": query})
    middle = len(arguments) // 2
    return sse_body(
        tool_payload(0, id=call_id, name="web_search"),
        tool_payload(0, arguments=arguments[:middle]),
        tool_payload(0, arguments=arguments[middle:]),
    )


class FakeSearchProvider:
    """Returns canned results and records queries."""

    def __init__(self, results: list[SearchResult] | None = None, error: Exception | None = None):
        self.results = results or []
        self.error = error
        self.queries: list[str] = []

    async def search(self, query: str) -> list[SearchResult]:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return list(self.results)


class ScriptedBackend:
    """
    MockTransport handler serving one scripted SSE body per round.

    Each round is either bytes (sent whole), a list of byte chunks (streamed
    chunk by chunk), an httpx.Response, or an httpx.TransportError subclass
    to raise.
    """

    def __init__(self, rounds: list[Any]):
        self.rounds = list(rounds)
        self.requests: list[dict[str, Any]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v1/chat/completions"
        self.requests.append(json.loads(request.content))
        if not self.rounds:
            raise AssertionError("Backend called more often than scripted")
        body = self.rounds.pop(0)
        if isinstance(body, type) and issubclass(body, httpx.TransportError):
            raise body("scripted transport failure", request=request)
        if isinstance(body, httpx.Response):
            return body
        if isinstance(body, list):
            return httpx.Response(200, content=_chunked(body))
        return httpx.Response(200, content=body)


async def _chunked(chunks: list[bytes]) -> AsyncIterator[bytes]:
    for chunk in chunks:
        yield chunk
