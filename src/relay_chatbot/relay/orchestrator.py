"""Relay orchestrator: the multi-round streaming tool loop.

One relay per client request:

    AWAIT_RESPONSE -> STREAM_DELTA -> DONE                 (no tool calls)
    AWAIT_RESPONSE -> STREAM_DELTA -> EXECUTE_TOOLS -> AWAIT_RESPONSE

The relay is an async generator of client events. It is consumed directly
by the HTTP response, so a closed client connection closes the generator
and no further rounds are driven.
"""

import time
from contextlib import aclosing
from enum import Enum
from typing import AsyncIterator, Iterable

from relay_chatbot.config.prompts import system_prompt
from relay_chatbot.config.settings import Settings
from relay_chatbot.core.exceptions import BackendError
from relay_chatbot.events.models import ContentEvent, ErrorEvent, Event, SourcesEvent
from relay_chatbot.relay.accumulator import ToolCallAccumulator
from relay_chatbot.relay.backend import BackendClient
from relay_chatbot.relay.deltas import parse_stream_chunk
from relay_chatbot.relay.frames import is_done_sentinel
from relay_chatbot.relay.models import AutoToolChoice, Conversation, Message
from relay_chatbot.tools.executor import ToolExecutor
from relay_chatbot.utils.logging import get_logger


logger = get_logger(__name__)


class RelayState(str, Enum):
    """States of one relay."""

    AWAIT_RESPONSE = "await_response"
    STREAM_DELTA = "stream_delta"
    EXECUTE_TOOLS = "execute_tools"
    DONE = "done"
    ERROR = "error"


class RelayOrchestrator:
    """
    Owns the conversation and drives backend rounds until a final answer.

    Tool invocations of a round run one at a time, in slot order.
    """

    def __init__(
        self,
        settings: Settings,
        backend: BackendClient,
        executor: ToolExecutor,
    ):
        self._settings = settings
        self._backend = backend
        self._executor = executor
        self.state = RelayState.AWAIT_RESPONSE

    async def relay(
        self,
        message: str,
        use_search: bool,
        history: Iterable[Message] = (),
    ) -> AsyncIterator[Event]:
        """
        Relay one user message.

        Args:
            message: New user message
            use_search: Whether the web_search capability is offered
            history: Prior messages, sent verbatim after the system prompt

        Yields:
            SourcesEvent, ContentEvent and at most one ErrorEvent
        """
        conversation = Conversation.seed(system_prompt(use_search), history, message)
        tools = self._executor.declarations() if use_search else None
        offered = {tool["function"]["name"] for tool in tools or []}
        tool_choice = AutoToolChoice() if tools else None
        deadline = time.monotonic() + self._settings.relay_timeout_seconds

        yield SourcesEvent.create([])

        for round_number in range(1, self._settings.max_tool_rounds + 1):
            log = logger.bind(round=round_number)
            accumulator = ToolCallAccumulator()
            self.state = RelayState.AWAIT_RESPONSE
            log.debug("Sending round to backend", messages=len(conversation))

            try:
                async with aclosing(
                    self._backend.stream_payloads(conversation, tools, tool_choice)
                ) as payloads:
                    self.state = RelayState.STREAM_DELTA
                    async for payload in payloads:
                        if is_done_sentinel(payload):
                            break

                        if time.monotonic() > deadline:
                            yield self._fail(
                                f"Relay timed out after {self._settings.relay_timeout_seconds:g} seconds"
                            )
                            return

                        chunk = parse_stream_chunk(payload)
                        if chunk is None:
                            continue

                        if chunk.tool_calls:
                            accumulator.add_all(chunk.tool_calls)
                            continue

                        if not accumulator.signaled and chunk.content:
                            yield ContentEvent.create(chunk.content)

            except BackendError as e:
                log.error("Backend round failed", error=str(e), status_code=e.status_code)
                yield self._fail(str(e))
                return

            if not accumulator.signaled:
                self.state = RelayState.DONE
                log.info("Relay completed", rounds=round_number)
                return

            invocations = accumulator.finalize()
            if not invocations:
                log.warning("Tool calls signaled but none could be assembled", slots=len(accumulator))
                yield self._fail("The model requested a tool call that could not be assembled")
                return

            self.state = RelayState.EXECUTE_TOOLS
            conversation.append(Message.assistant_tool_calls(invocations))

            for invocation in invocations:
                outcome = await self._executor.execute(invocation, offered=offered)
                if outcome.results is not None:
                    yield SourcesEvent.create(outcome.results)
                conversation.append(outcome.to_message())

        logger.warning("Tool round limit reached", max_tool_rounds=self._settings.max_tool_rounds)
        yield self._fail(
            f"Stopped after {self._settings.max_tool_rounds} tool rounds without a final answer"
        )

    def _fail(self, message: str) -> ErrorEvent:
        self.state = RelayState.ERROR
        return ErrorEvent.create(message)
