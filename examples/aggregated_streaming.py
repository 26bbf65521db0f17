"""
Example: Aggregated Streaming

Shows the live channel and the final message of an aggregated stream,
first over a hand-written canonical event sequence and then through the
Anthropic provider (requires ANTHROPIC_API_KEY).
"""

import asyncio
import logging

from llm_stream_sdk import (
    AnthropicProvider,
    ContentBlockDeltaEvent,
    ContentBlockStartEvent,
    ContentBlockStopEvent,
    MessageStartEvent,
    MessageStopEvent,
    StreamingOptions,
    TextDelta,
    aggregate_events,
)
from llm_stream_sdk.observability import InMemoryMetricsSink
from llm_stream_sdk.streaming import is_content_block


def example_sync_aggregation():
    """Aggregate canonical events without any backend."""
    print("=== Synchronous aggregation ===\n")

    events = [
        MessageStartEvent(role="assistant"),
        ContentBlockStartEvent(content_block_index=0),
        ContentBlockDeltaEvent(content_block_index=0, delta=TextDelta(text="Hello")),
        ContentBlockDeltaEvent(content_block_index=0, delta=TextDelta(text=", world")),
        ContentBlockStopEvent(content_block_index=0),
        MessageStopEvent(stop_reason="endTurn"),
    ]

    def consume():
        message = yield from aggregate_events(events)
        print(f"\nFinal message: {message.model_dump()}")

    for item in consume():
        label = "block" if is_content_block(item) else "event"
        print(f"{label}: {item.type}")


async def example_provider_streaming():
    """Stream a response from Anthropic, printing text as it arrives."""
    print("\n=== Provider streaming ===\n")

    sink = InMemoryMetricsSink()
    provider = AnthropicProvider(
        "claude-3-5-haiku-latest",
        options=StreamingOptions(metrics_sink=sink, log_streaming_metrics=True)
    )
    if not provider.is_available():
        print("ANTHROPIC_API_KEY not set, skipping")
        return

    async with provider.stream_aggregated("Write a haiku about Python", max_tokens=100) as stream:
        async for item in stream:
            if isinstance(item, ContentBlockDeltaEvent) and isinstance(item.delta, TextDelta):
                print(item.delta.text, end="", flush=True)

    message = stream.message
    print(f"\n\nStop reason: {message.stop_reason}")
    if message.usage:
        print(f"Tokens: {message.usage.input_tokens} in, {message.usage.output_tokens} out")

    summary = await sink.get_summary()
    print(f"Streams recorded: {summary.count}, avg duration {summary.avg_duration_ms:.0f}ms")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    example_sync_aggregation()
    asyncio.run(example_provider_streaming())
