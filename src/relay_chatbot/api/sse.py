"""SSE stream helpers."""

import asyncio
from typing import AsyncGenerator, AsyncIterator

from relay_chatbot.events.models import ErrorEvent, Event
from relay_chatbot.utils.logging import get_logger


logger = get_logger(__name__)

KEEPALIVE = ": keepalive\n\n"


async def event_stream(
    events: AsyncGenerator[Event, None],
    keepalive: float = 15.0,
) -> AsyncIterator[str]:
    """
    Format relay events as SSE, with keepalive comments while idle.

    The relay is never cancelled because of a keepalive: the pending step
    keeps running and is awaited again. When the client goes away the
    pending step is cancelled and the relay generator is closed.

    Args:
        events: Relay event generator
        keepalive: Idle interval before a keepalive comment is sent (seconds)

    Yields:
        SSE formatted event strings
    """
    pending: asyncio.Future[Event] | None = None
    try:
        while True:
            if pending is None:
                pending = asyncio.ensure_future(anext(events))

            done, _ = await asyncio.wait({pending}, timeout=keepalive)
            if not done:
                yield KEEPALIVE
                continue

            step, pending = pending, None
            try:
                event = step.result()
            except StopAsyncIteration:
                break
            except Exception as e:
                logger.error(f"Relay failed: {e}", exc_info=True)
                yield ErrorEvent.create("Internal error (see server logs)").to_sse()
                break

            yield event.to_sse()

    finally:
        if pending is not None and not pending.done():
            # Cancelling the running step also finalizes the relay generator
            pending.cancel()
            try:
                await pending
            except (asyncio.CancelledError, StopAsyncIteration):
                pass
            except Exception as e:
                logger.debug(f"Relay raised while cancelling: {e}")
        else:
            await events.aclose()
