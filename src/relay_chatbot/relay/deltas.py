"""Models for the backend's streamed completion chunks."""

import json

from pydantic import BaseModel, ValidationError

from relay_chatbot.utils.logging import get_logger


logger = get_logger(__name__)


class FunctionFragment(BaseModel):
    """Partial function data of one tool call."""

    name: str | None = None
    arguments: str | None = None


class ToolCallFragment(BaseModel):
    """One piece of a tool call, addressed to a slot by index."""

    index: int = 0
    id: str | None = None
    function: FunctionFragment | None = None


class Delta(BaseModel):
    content: str | None = None
    tool_calls: list[ToolCallFragment] | None = None


class Choice(BaseModel):
    delta: Delta = Delta()


class StreamChunk(BaseModel):
    """`{"choices": [{"delta": {...}}]}` envelope of a single payload."""

    choices: list[Choice]

    @property
    def delta(self) -> Delta:
        """Delta of the first choice (the relay never requests n > 1)."""
        if not self.choices:
            return Delta()
        return self.choices[0].delta

    @property
    def content(self) -> str | None:
        return self.delta.content

    @property
    def tool_calls(self) -> list[ToolCallFragment]:
        return self.delta.tool_calls or []


def parse_stream_chunk(payload: str) -> StreamChunk | None:
    """
    Parse a JSON payload into a StreamChunk.

    Returns None for anything that is not the expected envelope; callers
    skip those payloads.
    """
    try:
        return StreamChunk.model_validate(json.loads(payload))
    except (json.JSONDecodeError, ValidationError) as e:
        logger.debug("Skipping malformed payload", error=str(e), payload=payload[:200])
        return None
