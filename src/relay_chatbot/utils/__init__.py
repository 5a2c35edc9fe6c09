"""Utility modules."""

from relay_chatbot.utils.logging import bind_request_context, configure_logging, get_logger

__all__ = [
    "bind_request_context",
    "configure_logging",
    "get_logger",
]
