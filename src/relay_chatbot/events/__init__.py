"""Client-facing SSE events."""

from relay_chatbot.events.models import ContentEvent, ErrorEvent, Event, SourcesEvent
from relay_chatbot.events.types import EventType

__all__ = [
    "ContentEvent",
    "ErrorEvent",
    "Event",
    "EventType",
    "SourcesEvent",
]
