"""Base class for capabilities the backend can call.

A capability is one named action offered to the backend as a function
tool. It declares a JSON schema for its arguments, receives the raw
argument text exactly as the backend streamed it, and returns a payload
that goes back into the conversation as a tool message.
"""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, ConfigDict

from relay_chatbot.relay.models import SearchResult


class CapabilityContext(BaseModel):
    """Collaborators available to capabilities during execution."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    # SearchProvider; typed loosely so tests can pass fakes
    search_provider: Any | None = None


class CapabilityResult(BaseModel):
    """
    Outcome of a successful invocation.

    `results` is set when the invocation produced a result set that the
    client should display.
    """

    payload: dict[str, Any]
    results: list[SearchResult] | None = None


class Capability(ABC):
    """
    Base class for capabilities.

    Example:
        @CapabilityRegistry.register
        class ClockCapability(Capability):
            name = "clock"
            description = "Get the current UTC time"

            async def invoke(self, arguments, context):
                now = datetime.now(timezone.utc).isoformat()
                return CapabilityResult(payload={"now": now})
    """

    # Metadata - must be set by subclasses
    name: str
    description: str

    # JSON Schema for the arguments object
    parameters: dict[str, Any] = {}

    @abstractmethod
    async def invoke(self, arguments: str, context: CapabilityContext) -> CapabilityResult:
        """
        Execute the capability.

        Args:
            arguments: Raw JSON argument text as accumulated from the stream
            context: Execution collaborators

        Returns:
            CapabilityResult with the payload for the backend

        Raises:
            ToolExecutionError: On invalid arguments or failed execution
        """
        pass

    def declaration(self) -> dict[str, Any]:
        """OpenAI-style function tool declaration."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }
