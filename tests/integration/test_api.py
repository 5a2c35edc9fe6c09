"""Integration tests for the HTTP API against mocked upstream services."""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from helpers import SEARCH_URL, ScriptedBackend, content_payload, search_call_round, sse_body
from relay_chatbot import __version__
from relay_chatbot.api.dependencies import get_app_settings, get_http_client
from relay_chatbot.main import create_app


PAGE = "<html><body><p>Full article text.</p></body></html>"


class Upstream:
    """Routes relay traffic: backend rounds, the aggregator and landing pages."""

    def __init__(self, rounds: list):
        self.backend = ScriptedBackend(rounds)
        self.search_queries: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/v1/chat/completions":
            return self.backend(request)
        if str(request.url).startswith(f"{SEARCH_URL}/search"):
            self.search_queries.append(request.url.params["q"])
            return httpx.Response(
                200,
                json={
                    "results": [
                        {"title": "One", "content": "first", "url": "https://news.test/1"},
                        {"title": "Two", "content": "second", "url": "https://news.test/2"},
                    ]
                },
            )
        return httpx.Response(200, text=PAGE, headers={"content-type": "text/html"})


def parse_sse(body: str) -> list[tuple[str, str]]:
    """Split an SSE body into (event name, data) pairs, skipping comments."""
    events = []
    for block in body.split("\n\n"):
        if not block.strip() or block.startswith(":"):
            continue
        name, data = "message", []
        for line in block.split("\n"):
            if line.startswith("event: "):
                name = line.removeprefix("event: ")
            elif line.startswith("data: "):
                data.append(line.removeprefix("data: "))
        events.append((name, "\n".join(data)))
    return events


@pytest.fixture
def make_client(settings):
    """Build a TestClient whose outbound HTTP goes to an Upstream fake."""

    def factory(upstream: Upstream) -> TestClient:
        app = create_app(settings)
        outbound = httpx.AsyncClient(transport=httpx.MockTransport(upstream))

        async def http_client_override() -> httpx.AsyncClient:
            return outbound

        app.dependency_overrides[get_app_settings] = lambda: settings
        app.dependency_overrides[get_http_client] = http_client_override
        return TestClient(app)

    return factory


class TestHealth:
    """Tests for the health endpoint."""

    def test_health(self, make_client):
        with make_client(Upstream([])) as client:
            response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "version": __version__}


class TestChatStream:
    """Tests for the streaming chat endpoint."""

    def test_plain_answer(self, make_client):
        """Test a search-off relay streams sources then unnamed content events."""
        upstream = Upstream([sse_body(content_payload("Hello"), content_payload("!"))])

        with make_client(upstream) as client:
            response = client.post("/api/chat/stream", json={"message": "Hi"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        assert response.headers["cache-control"] == "no-cache"
        assert response.headers["x-request-id"]

        events = parse_sse(response.text)
        assert events[0] == ("sources", "[]")
        assert [name for name, _ in events[1:]] == ["message", "message"]
        text = "".join(json.loads(data)["choices"][0]["delta"]["content"] for _, data in events[1:])
        assert text == "Hello!"

    def test_search_round_trip(self, make_client):
        upstream = Upstream([
            search_call_round("call_1", "latest news"),
            sse_body(content_payload("See [1].")),
        ])

        with make_client(upstream) as client:
            response = client.post(
                "/api/chat/stream",
                json={
                    "message": "What's new?",
                    "use_search": True,
                    "history": [
                        {"role": "user", "content": "Hello"},
                        {"role": "assistant", "content": "Hi there"},
                    ],
                },
            )

        events = parse_sse(response.text)
        assert [name for name, _ in events] == ["sources", "sources", "message"]

        sources = json.loads(events[1][1])
        assert [s["url"] for s in sources] == ["https://news.test/1", "https://news.test/2"]
        assert sources[0]["snippet"] == "first\n\nFull article text."
        assert upstream.search_queries == ["latest news"]

        first, second = upstream.backend.requests
        assert [m["role"] for m in first["messages"]] == ["system", "user", "assistant", "user"]
        assert second["messages"][-1]["tool_call_id"] == "call_1"

    def test_backend_failure_reported_as_error_event(self, make_client):
        upstream = Upstream([httpx.Response(500, text="model crashed")])

        with make_client(upstream) as client:
            response = client.post("/api/chat/stream", json={"message": "Hi"})

        assert response.status_code == 200
        events = parse_sse(response.text)
        assert events == [("sources", "[]"), ("error", "LLM backend returned HTTP 500")]

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"message": 42},
            {"message": "Hi", "history": [{"role": "tool", "content": "x"}]},
        ],
    )
    def test_invalid_request(self, make_client, body):
        with make_client(Upstream([])) as client:
            response = client.post("/api/chat/stream", json=body)

        assert response.status_code == 422


class TestShutdown:
    """Tests for request handling while the application shuts down."""

    def test_stream_refused_during_shutdown(self, make_client):
        upstream = Upstream([sse_body(content_payload("never"))])

        with make_client(upstream) as client:
            application = client.app.state.application
            client.portal.call(application.shutdown)
            response = client.post("/api/chat/stream", json={"message": "Hi"})

        assert application.is_shutting_down
        assert response.status_code == 503
        assert upstream.backend.requests == []

    def test_finished_streams_leave_no_active_requests(self, make_client):
        upstream = Upstream([sse_body(content_payload("ok"))])

        with make_client(upstream) as client:
            application = client.app.state.application
            client.post("/api/chat/stream", json={"message": "Hi"})

            assert application.active_requests == set()
            assert not application.is_shutting_down
