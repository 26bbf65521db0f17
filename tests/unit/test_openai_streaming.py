"""Unit tests for OpenAI Chat Completions stream normalization."""

import pytest

from llm_stream_sdk.models.events import (
    ContentBlockDeltaEvent,
    ContentBlockStartEvent,
    ContentBlockStopEvent,
    MessageStartEvent,
    MessageStopEvent,
    MetadataEvent,
    TextDelta,
    ToolUseInputDelta,
    ToolUseStart,
)
from llm_stream_sdk.models.messages import Usage
from llm_stream_sdk.providers.openai.streaming import normalize_openai_stream
from tests.helpers.streaming_mocks import (
    create_stream,
    openai_chunk,
    openai_text_chunks,
    openai_tool_call,
    openai_tool_chunks,
)


async def collect(chunks, **kwargs):
    return [event async for event in normalize_openai_stream(create_stream(chunks), **kwargs)]


@pytest.mark.asyncio
async def test_text_stream_gets_block_framing():
    events = await collect(openai_text_chunks(["Hel", "lo"]))

    assert events == [
        MessageStartEvent(),
        ContentBlockStartEvent(content_block_index=0),
        ContentBlockDeltaEvent(content_block_index=0, delta=TextDelta(text="Hel")),
        ContentBlockDeltaEvent(content_block_index=0, delta=TextDelta(text="lo")),
        ContentBlockStopEvent(content_block_index=0),
        MessageStopEvent(stop_reason="endTurn"),
        MetadataEvent(usage=Usage(input_tokens=10, output_tokens=5, total_tokens=15)),
    ]


@pytest.mark.asyncio
async def test_switch_from_text_to_tool_closes_text_block():
    events = await collect(openai_tool_chunks("call_1", "search", ['{"q"', ': "x"}']))

    assert events[1:8] == [
        ContentBlockStartEvent(content_block_index=0),
        ContentBlockDeltaEvent(content_block_index=0, delta=TextDelta(text="Checking.")),
        ContentBlockStopEvent(content_block_index=0),
        ContentBlockStartEvent(
            content_block_index=1,
            start=ToolUseStart(tool_use_id="call_1", name="search")
        ),
        ContentBlockDeltaEvent(content_block_index=1, delta=ToolUseInputDelta(input='{"q"')),
        ContentBlockDeltaEvent(content_block_index=1, delta=ToolUseInputDelta(input=': "x"}')),
        ContentBlockStopEvent(content_block_index=1),
    ]
    assert events[8] == MessageStopEvent(stop_reason="toolUse")


@pytest.mark.asyncio
async def test_parallel_tool_calls_get_separate_blocks():
    chunks = [
        openai_chunk(role="assistant"),
        openai_chunk(tool_calls=[openai_tool_call(0, id="call_a", name="f", arguments="{}")]),
        openai_chunk(tool_calls=[openai_tool_call(1, id="call_b", name="g", arguments='{"n": 2}')]),
        openai_chunk(finish_reason="tool_calls"),
    ]
    events = await collect(chunks)

    starts = [event for event in events if isinstance(event, ContentBlockStartEvent)]
    assert [start.start.tool_use_id for start in starts] == ["call_a", "call_b"]
    assert [start.content_block_index for start in starts] == [0, 1]
    stops = [event.content_block_index for event in events if isinstance(event, ContentBlockStopEvent)]
    assert stops == [0, 1]


@pytest.mark.asyncio
async def test_finish_reasons_are_mapped():
    events = await collect([openai_chunk(content="x"), openai_chunk(finish_reason="length")])
    assert events[-1] == MessageStopEvent(stop_reason="maxTokens")

    events = await collect([openai_chunk(content="x"), openai_chunk(finish_reason="content_filter")])
    assert events[-1] == MessageStopEvent(stop_reason="contentFiltered")


@pytest.mark.asyncio
async def test_source_ending_without_finish_reason_leaves_block_open():
    events = await collect([openai_chunk(role="assistant", content="partial")])

    assert events == [
        MessageStartEvent(),
        ContentBlockStartEvent(content_block_index=0),
        ContentBlockDeltaEvent(content_block_index=0, delta=TextDelta(text="partial")),
    ]


@pytest.mark.asyncio
async def test_raw_events_captured():
    chunks = openai_text_chunks(["a"])
    events = await collect(chunks, capture_raw_events=True)
    assert events[-1].raw_event is chunks[-1]
