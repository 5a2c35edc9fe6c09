"""Conversation data model shared by the relay, the executor and the backend client."""

from enum import Enum
from typing import Annotated, Any, Iterable, Iterator, Literal, Union

from pydantic import BaseModel, Field


class Role(str, Enum):
    """Message roles understood by the completion backend."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class SearchResult(BaseModel):
    """One search hit as shown to the client and cited by the backend."""

    title: str
    snippet: str = ""
    url: str


class FunctionCall(BaseModel):
    """Capability name plus raw (unparsed) JSON argument text."""

    name: str
    arguments: str = ""


class ToolInvocation(BaseModel):
    """A complete tool call issued by the backend."""

    id: str
    type: Literal["function"] = "function"
    function: FunctionCall

    @classmethod
    def create(cls, id: str, name: str, arguments: str = "") -> "ToolInvocation":
        return cls(id=id, function=FunctionCall(name=name, arguments=arguments))

    @property
    def name(self) -> str:
        return self.function.name

    @property
    def arguments(self) -> str:
        return self.function.arguments


class Message(BaseModel):
    """
    A single conversation message.

    Assistant messages carry either content or tool_calls, never both.
    Tool messages carry the id and name of the invocation they answer.
    """

    role: Role
    content: str | None = None
    tool_calls: list[ToolInvocation] | None = None
    tool_call_id: str | None = None
    name: str | None = None

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(role=Role.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role=Role.USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> "Message":
        return cls(role=Role.ASSISTANT, content=content)

    @classmethod
    def assistant_tool_calls(cls, invocations: list[ToolInvocation]) -> "Message":
        return cls(role=Role.ASSISTANT, tool_calls=list(invocations))

    @classmethod
    def tool_result(cls, invocation: ToolInvocation, content: str) -> "Message":
        return cls(
            role=Role.TOOL,
            content=content,
            tool_call_id=invocation.id,
            name=invocation.name,
        )

    def to_wire(self) -> dict[str, Any]:
        """Serialize for the backend request body (absent fields omitted)."""
        return self.model_dump(mode="json", exclude_none=True)


class Conversation:
    """
    Ordered, append-only list of messages for one relay.

    The whole list is re-sent to the backend every round.
    """

    def __init__(self, messages: Iterable[Message] | None = None):
        self._messages: list[Message] = list(messages or [])

    @classmethod
    def seed(
        cls,
        system_prompt: str,
        history: Iterable[Message],
        user_message: str,
    ) -> "Conversation":
        """System prompt, then the caller's history verbatim, then the new user message."""
        conversation = cls([Message.system(system_prompt)])
        for message in history:
            conversation.append(message)
        conversation.append(Message.user(user_message))
        return conversation

    def append(self, message: Message) -> None:
        self._messages.append(message)

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    def to_wire(self) -> list[dict[str, Any]]:
        return [message.to_wire() for message in self._messages]

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self._messages)


# =============================================================================
# TOOL CHOICE
# =============================================================================


class AutoToolChoice(BaseModel):
    """Let the backend decide whether to call a tool."""

    kind: Literal["auto"] = "auto"

    def to_wire(self) -> str:
        return "auto"


class NamedToolChoice(BaseModel):
    """Force the backend to call one specific capability."""

    kind: Literal["function"] = "function"
    name: str

    def to_wire(self) -> dict[str, Any]:
        return {"type": "function", "function": {"name": self.name}}


ToolChoice = Annotated[
    Union[AutoToolChoice, NamedToolChoice],
    Field(discriminator="kind"),
]
