"""Dispatches finalized tool invocations to capabilities."""

import json
import time
from dataclasses import dataclass
from typing import Any

from relay_chatbot.core.exceptions import ToolExecutionError, UnknownCapabilityError
from relay_chatbot.relay.models import Message, SearchResult, ToolInvocation
from relay_chatbot.tools.base import CapabilityContext
from relay_chatbot.tools.registry import CapabilityRegistry
from relay_chatbot.utils.logging import get_logger


logger = get_logger(__name__)


@dataclass
class ToolOutcome:
    """Result of one invocation: what goes back to the backend, and what the client sees."""

    invocation: ToolInvocation
    payload: dict[str, Any]
    results: list[SearchResult] | None = None
    error: str | None = None
    duration_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_message(self) -> Message:
        """Tool-role message answering the invocation."""
        return Message.tool_result(
            self.invocation,
            json.dumps(self.payload, ensure_ascii=False),
        )


class ToolExecutor:
    """
    Runs tool invocations against the capability registry.

    Never raises for a failed invocation: failures become an error payload
    so the conversation stays valid and the backend can react.
    """

    def __init__(
        self,
        context: CapabilityContext,
        registry: type[CapabilityRegistry] = CapabilityRegistry,
    ):
        self._context = context
        self._registry = registry

    def declarations(self) -> list[dict[str, Any]]:
        """Tool declarations sent to the backend when search is enabled."""
        return self._registry.declarations()

    async def execute(
        self,
        invocation: ToolInvocation,
        offered: set[str] | None = None,
    ) -> ToolOutcome:
        """
        Execute one invocation.

        Args:
            invocation: Finalized tool call
            offered: Capability names declared to the backend this relay;
                anything else is refused. None allows every registered capability.
        """
        start_time = time.time()
        log = logger.bind(tool=invocation.name, tool_call_id=invocation.id)

        try:
            if offered is not None and invocation.name not in offered:
                if not self._registry.exists(invocation.name):
                    raise UnknownCapabilityError(invocation.name)
                raise ToolExecutionError(
                    f"Capability not enabled for this conversation: {invocation.name}",
                    capability=invocation.name,
                )
            capability = self._registry.create(invocation.name)
            result = await capability.invoke(invocation.arguments, self._context)
        except ToolExecutionError as e:
            log.warning("Tool invocation failed", error=str(e))
            return self._failure(invocation, str(e), start_time)
        except Exception as e:
            log.error(f"Tool execution error: {e}", exc_info=True)
            return self._failure(invocation, f"{invocation.name} failed: {e}", start_time)

        duration_ms = (time.time() - start_time) * 1000
        log.info(
            "Tool executed",
            duration_ms=round(duration_ms, 1),
            results=len(result.results) if result.results is not None else None,
        )
        return ToolOutcome(
            invocation=invocation,
            payload=result.payload,
            results=result.results,
            duration_ms=duration_ms,
        )

    @staticmethod
    def _failure(invocation: ToolInvocation, error: str, start_time: float) -> ToolOutcome:
        return ToolOutcome(
            invocation=invocation,
            payload={"error": error},
            error=error,
            duration_ms=(time.time() - start_time) * 1000,
        )
