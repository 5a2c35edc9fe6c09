"""Tests for the conversation model and stream chunk parsing."""

from pydantic import TypeAdapter

from relay_chatbot.relay.deltas import parse_stream_chunk
from relay_chatbot.relay.models import (
    AutoToolChoice,
    Conversation,
    Message,
    NamedToolChoice,
    Role,
    ToolChoice,
    ToolInvocation,
)


class TestStreamChunk:
    """Tests for payload envelope parsing."""

    def test_content_delta(self):
        chunk = parse_stream_chunk('{"choices":[{"delta":{"content":"Hi"}}]}')
        assert chunk is not None
        assert chunk.content == "Hi"
        assert chunk.tool_calls == []

    def test_tool_call_delta(self):
        chunk = parse_stream_chunk(
            '{"choices":[{"delta":{"tool_calls":[{"index":1,"id":"c1",'
            '"type":"function","function":{"name":"web_search","arguments":""}}]}}]}'
        )
        assert chunk is not None
        [fragment] = chunk.tool_calls
        assert fragment.index == 1
        assert fragment.id == "c1"
        assert fragment.function.name == "web_search"

    def test_role_only_and_empty_choices(self):
        """Test chunks without content parse but carry nothing."""
        role_only = parse_stream_chunk('{"choices":[{"delta":{"role":"assistant"}}]}')
        assert role_only is not None and role_only.content is None
        empty = parse_stream_chunk('{"choices":[],"usage":{"total_tokens":3}}')
        assert empty is not None and empty.content is None

    def test_malformed_payloads(self):
        """Test anything outside the envelope is rejected."""
        assert parse_stream_chunk("not json") is None
        assert parse_stream_chunk('{"error":"boom"}') is None
        assert parse_stream_chunk('{"choices":"nope"}') is None
        assert parse_stream_chunk("[1,2]") is None


class TestMessage:
    """Tests for message wire format."""

    def test_assistant_tool_calls_have_no_content(self):
        invocation = ToolInvocation.create("c1", "web_search", '{"query":"x"}')
        wire = Message.assistant_tool_calls([invocation]).to_wire()
        assert wire == {
            "role": "assistant",
            "tool_calls": [
                {
                    "id": "c1",
                    "type": "function",
                    "function": {"name": "web_search", "arguments": '{"query":"x"}'},
                }
            ],
        }

    def test_tool_result(self):
        invocation = ToolInvocation.create("c1", "web_search")
        wire = Message.tool_result(invocation, '{"ok":true}').to_wire()
        assert wire == {
            "role": "tool",
            "content": '{"ok":true}',
            "tool_call_id": "c1",
            "name": "web_search",
        }


class TestConversation:
    """Tests for conversation seeding."""

    def test_seed_order(self):
        history = [Message.user("earlier"), Message.assistant("reply")]
        conversation = Conversation.seed("system text", history, "now")
        assert [m.role for m in conversation] == [
            Role.SYSTEM,
            Role.USER,
            Role.ASSISTANT,
            Role.USER,
        ]
        assert conversation.to_wire()[0] == {"role": "system", "content": "system text"}
        assert conversation.to_wire()[-1] == {"role": "user", "content": "now"}

    def test_append(self):
        conversation = Conversation.seed("s", [], "u")
        conversation.append(Message.assistant("a"))
        assert len(conversation) == 3
        assert conversation.messages[-1].content == "a"


class TestToolChoice:
    """Tests for the tool choice variants."""

    def test_auto(self):
        assert AutoToolChoice().to_wire() == "auto"

    def test_named(self):
        assert NamedToolChoice(name="web_search").to_wire() == {
            "type": "function",
            "function": {"name": "web_search"},
        }

    def test_discriminated_validation(self):
        adapter = TypeAdapter(ToolChoice)
        assert isinstance(adapter.validate_python({"kind": "auto"}), AutoToolChoice)
        named = adapter.validate_python({"kind": "function", "name": "web_search"})
        assert isinstance(named, NamedToolChoice)
