"""Event type enumerations."""

from enum import Enum


class EventType(str, Enum):
    """Event kinds sent to the client."""

    # Result set of the latest search (JSON array, possibly empty)
    SOURCES = "sources"

    # Content delta; sent without an `event:` line so it arrives as "message"
    CONTENT = "message"

    # Plain-text diagnostic, at most one per stream
    ERROR = "error"
