"""Registry of the capabilities offered to the backend."""

from typing import Type

from relay_chatbot.core.exceptions import UnknownCapabilityError
from relay_chatbot.tools.base import Capability
from relay_chatbot.utils.logging import get_logger


logger = get_logger(__name__)


class CapabilityRegistry:
    """
    Closed set of capabilities, keyed by name.

    Design Pattern: Registry + Factory

    Usage:
        @CapabilityRegistry.register
        class MyCapability(Capability):
            name = "my_capability"
            ...

        capability = CapabilityRegistry.create("my_capability")
    """

    _capabilities: dict[str, Type[Capability]] = {}
    _instances: dict[str, Capability] = {}

    @classmethod
    def register(cls, capability_class: Type[Capability]) -> Type[Capability]:
        """Register a capability class (usable as a decorator)."""
        name = capability_class.name
        if name in cls._capabilities:
            logger.warning(f"Overwriting existing capability: {name}")
        cls._capabilities[name] = capability_class
        cls._instances.pop(name, None)
        logger.debug(f"Registered capability: {name}")
        return capability_class

    @classmethod
    def create(cls, name: str) -> Capability:
        """
        Create or get the cached instance of a capability.

        Raises:
            UnknownCapabilityError: If no capability has that name
        """
        if name not in cls._instances:
            capability_class = cls._capabilities.get(name)
            if capability_class is None:
                raise UnknownCapabilityError(name)
            cls._instances[name] = capability_class()
        return cls._instances[name]

    @classmethod
    def exists(cls, name: str) -> bool:
        return name in cls._capabilities

    @classmethod
    def list_capabilities(cls) -> list[str]:
        return list(cls._capabilities.keys())

    @classmethod
    def declarations(cls) -> list[dict]:
        """Tool declarations for every registered capability."""
        return [cls.create(name).declaration() for name in cls._capabilities]
