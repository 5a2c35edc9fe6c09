"""Capabilities offered to the completion backend.

Importing this package registers the built-in capabilities.
"""

from relay_chatbot.tools.base import Capability, CapabilityContext, CapabilityResult
from relay_chatbot.tools.executor import ToolExecutor, ToolOutcome
from relay_chatbot.tools.registry import CapabilityRegistry
from relay_chatbot.tools.web_search import WebSearchCapability

__all__ = [
    "Capability",
    "CapabilityContext",
    "CapabilityRegistry",
    "CapabilityResult",
    "ToolExecutor",
    "ToolOutcome",
    "WebSearchCapability",
]
