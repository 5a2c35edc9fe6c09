"""Event data models."""

import json
import re

from pydantic import BaseModel

from relay_chatbot.relay.models import SearchResult

from .types import EventType

# SSE line terminators only; str.splitlines() would also split U+2028 and U+0085
_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


class Event(BaseModel):
    """Base event model."""

    event_type: EventType

    @property
    def data(self) -> str:
        """Event data as sent on the wire."""
        raise NotImplementedError

    def to_sse(self) -> str:
        """Format event for SSE stream."""
        lines = []
        if self.event_type != EventType.CONTENT:
            lines.append(f"event: {self.event_type.value}")
        for line in _LINE_BREAK_RE.split(self.data):
            lines.append(f"data: {line}")
        return "\n".join(lines) + "\n\n"


class SourcesEvent(Event):
    """Result set to display next to the answer."""

    event_type: EventType = EventType.SOURCES
    results: list[SearchResult] = []

    @property
    def data(self) -> str:
        return json.dumps([r.model_dump() for r in self.results], ensure_ascii=False)

    @classmethod
    def create(cls, results: list[SearchResult]) -> "SourcesEvent":
        return cls(results=list(results))


class ContentEvent(Event):
    """One content fragment, re-wrapped in the completion delta envelope."""

    event_type: EventType = EventType.CONTENT
    content: str

    @property
    def data(self) -> str:
        return json.dumps(
            {"choices": [{"delta": {"content": self.content}}]},
            ensure_ascii=False,
        )

    @classmethod
    def create(cls, content: str) -> "ContentEvent":
        return cls(content=content)


class ErrorEvent(Event):
    """Terminal error with a plain-text diagnostic."""

    event_type: EventType = EventType.ERROR
    message: str

    @property
    def data(self) -> str:
        return self.message

    @classmethod
    def create(cls, message: str) -> "ErrorEvent":
        return cls(message=message)
