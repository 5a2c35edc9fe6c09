"""Reassembly of tool calls streamed as fragments."""

from dataclasses import dataclass

from relay_chatbot.relay.deltas import ToolCallFragment
from relay_chatbot.relay.models import ToolInvocation
from relay_chatbot.utils.logging import get_logger


logger = get_logger(__name__)


@dataclass
class PartialToolInvocation:
    """Builder for one slot: first id and name win, arguments append."""

    id: str | None = None
    name: str | None = None
    arguments: str = ""

    def merge(self, fragment: ToolCallFragment) -> None:
        if fragment.id and self.id is None:
            self.id = fragment.id
        if fragment.function is None:
            return
        if fragment.function.name and self.name is None:
            self.name = fragment.function.name
        if fragment.function.arguments:
            self.arguments += fragment.function.arguments

    @property
    def is_complete(self) -> bool:
        return bool(self.id) and bool(self.name)

    def build(self) -> ToolInvocation:
        return ToolInvocation.create(id=self.id, name=self.name, arguments=self.arguments)


class ToolCallAccumulator:
    """
    Slot-indexed collection of partial tool calls for one round.

    Slots grow on demand when a higher index shows up. Argument text is
    never parsed here: fragments are partial JSON and only the full
    concatenation is meaningful.
    """

    def __init__(self) -> None:
        self._slots: list[PartialToolInvocation] = []
        self._fragments_seen = 0

    def add(self, fragment: ToolCallFragment) -> None:
        """Merge one fragment into its slot."""
        index = fragment.index
        if index < 0:
            logger.debug("Ignoring tool call fragment with negative index", index=index)
            return
        while len(self._slots) <= index:
            self._slots.append(PartialToolInvocation())
        self._slots[index].merge(fragment)
        self._fragments_seen += 1

    def add_all(self, fragments: list[ToolCallFragment]) -> None:
        for fragment in fragments:
            self.add(fragment)

    @property
    def signaled(self) -> bool:
        """Whether the backend sent any tool call fragment this round."""
        return self._fragments_seen > 0

    def finalize(self) -> list[ToolInvocation]:
        """Complete invocations in slot order; slots missing an id or name are dropped."""
        invocations = []
        for index, slot in enumerate(self._slots):
            if not slot.is_complete:
                logger.debug(
                    "Dropping incomplete tool call",
                    slot=index,
                    has_id=bool(slot.id),
                    has_name=bool(slot.name),
                )
                continue
            invocations.append(slot.build())
        return invocations

    def __len__(self) -> int:
        return len(self._slots)
