"""Unit tests for per-block delta accumulation."""

import json

import pytest

from llm_stream_sdk.errors import BlockKindMismatchError, MalformedToolInputError, StreamProtocolError
from llm_stream_sdk.models.events import (
    ReasoningContentDelta,
    TextDelta,
    ToolUseInputDelta,
    ToolUseStart,
)
from llm_stream_sdk.models.messages import ReasoningBlock, TextBlock, ToolUseBlock
from llm_stream_sdk.streaming.accumulator import BlockAccumulator, BlockKind


def make_block(start=None, index=0, **kwargs):
    block = BlockAccumulator(index, **kwargs)
    block.open(start)
    return block


class TestTextBlocks:
    """Text accumulation."""

    def test_concatenates_fragments_in_order(self):
        block = make_block()
        for piece in ["The ", "quick ", "fox"]:
            block.apply(TextDelta(text=piece))

        result = block.finalize()
        assert isinstance(result, TextBlock)
        assert result.text == "The quick fox"
        assert block.kind is BlockKind.TEXT
        assert block.delta_count == 3

    def test_block_without_deltas_is_empty_text(self):
        result = make_block().finalize()
        assert result == TextBlock(text="")

    def test_empty_fragments_are_kept(self):
        block = make_block()
        block.apply(TextDelta(text=""))
        block.apply(TextDelta(text="a"))
        assert block.finalize().text == "a"

    def test_tool_input_on_text_block_raises(self):
        block = make_block()
        block.apply(TextDelta(text="hi"))

        with pytest.raises(BlockKindMismatchError) as exc_info:
            block.apply(ToolUseInputDelta(input="{}"))

        assert exc_info.value.content_block_index == 0
        assert exc_info.value.block_kind == "text"
        assert exc_info.value.delta_type == "toolUseInputDelta"

    def test_reasoning_on_text_block_raises(self):
        block = make_block()
        block.apply(TextDelta(text="hi"))
        with pytest.raises(BlockKindMismatchError):
            block.apply(ReasoningContentDelta(text="thinking"))


class TestToolUseBlocks:
    """Tool input accumulation and parsing."""

    def test_fragments_parse_once_complete(self):
        block = make_block(ToolUseStart(tool_use_id="t1", name="search"))
        for fragment in ['{"query": "we', 'ather", "lim', 'it": 3}']:
            block.apply(ToolUseInputDelta(input=fragment))

        result = block.finalize()
        assert isinstance(result, ToolUseBlock)
        assert result.tool_use_id == "t1"
        assert result.name == "search"
        assert result.input == {"query": "weather", "limit": 3}

    def test_incomplete_json_raises_with_raw_input(self):
        block = make_block(ToolUseStart(tool_use_id="t1", name="search"), index=2)
        block.apply(ToolUseInputDelta(input='{"a":'))

        with pytest.raises(MalformedToolInputError) as exc_info:
            block.finalize()

        error = exc_info.value
        assert error.raw_input == '{"a":'
        assert error.content_block_index == 2
        assert error.tool_use_id == "t1"
        assert error.name == "search"
        assert isinstance(error.__cause__, json.JSONDecodeError)

    def test_empty_input_is_empty_object(self):
        block = make_block(ToolUseStart(tool_use_id="t1", name="now"))
        assert block.finalize().input == {}

    def test_empty_input_raises_when_not_treated_as_object(self):
        block = make_block(ToolUseStart(tool_use_id="t1", name="now"), empty_tool_input_as_object=False)
        with pytest.raises(MalformedToolInputError):
            block.finalize()

    def test_non_object_json_is_kept(self):
        block = make_block(ToolUseStart(tool_use_id="t1", name="pick"))
        block.apply(ToolUseInputDelta(input="[1, 2]"))
        assert block.finalize().input == [1, 2]

    def test_text_on_tool_block_raises(self):
        block = make_block(ToolUseStart(tool_use_id="t1", name="search"))
        with pytest.raises(BlockKindMismatchError) as exc_info:
            block.apply(TextDelta(text="oops"))
        assert exc_info.value.block_kind == "toolUse"

    def test_tool_input_without_start_raises(self):
        block = make_block(index=1)
        block.apply(ToolUseInputDelta(input='{"a": 1}'))

        with pytest.raises(StreamProtocolError) as exc_info:
            block.finalize()
        assert exc_info.value.content_block_index == 1


class TestReasoningBlocks:
    """Reasoning text, signature and redacted content."""

    def test_text_and_signature(self):
        block = make_block()
        block.apply(ReasoningContentDelta(text="A", signature="s1"))
        block.apply(ReasoningContentDelta(text="B"))

        result = block.finalize()
        assert isinstance(result, ReasoningBlock)
        assert result.text == "AB"
        assert result.signature == "s1"
        assert result.redacted_content is None

    def test_last_signature_wins(self):
        block = make_block()
        block.apply(ReasoningContentDelta(text="A", signature="s1"))
        block.apply(ReasoningContentDelta(signature="s2"))
        assert block.finalize().signature == "s2"

    def test_signature_only_block_has_no_text(self):
        block = make_block()
        block.apply(ReasoningContentDelta(signature="s1"))

        result = block.finalize()
        assert result.text is None
        assert result.model_dump() == {"type": "reasoningBlock", "signature": "s1"}

    def test_redacted_content_is_concatenated(self):
        block = make_block()
        block.apply(ReasoningContentDelta(redacted_content=b"\x01\x02"))
        block.apply(ReasoningContentDelta(redacted_content=b"\x03"))

        result = block.finalize()
        assert result.redacted_content == b"\x01\x02\x03"
        assert "text" not in result.model_dump()
        assert "signature" not in result.model_dump()
        assert block.kind is BlockKind.REDACTED_REASONING

    def test_mixing_redacted_and_text_raises(self):
        block = make_block()
        block.apply(ReasoningContentDelta(redacted_content=b"x"))
        with pytest.raises(BlockKindMismatchError):
            block.apply(ReasoningContentDelta(text="visible"))

    def test_mixing_text_and_redacted_raises(self):
        block = make_block()
        block.apply(ReasoningContentDelta(text="visible"))
        with pytest.raises(BlockKindMismatchError):
            block.apply(ReasoningContentDelta(redacted_content=b"x"))


def test_unknown_delta_raises():
    block = make_block()
    with pytest.raises(StreamProtocolError):
        block.apply(object())
