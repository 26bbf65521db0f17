"""Shared pytest fixtures for LLM Stream SDK tests."""

import pytest
from unittest.mock import AsyncMock, MagicMock

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
from llm_stream_sdk.models.streaming import StreamingOptions
from llm_stream_sdk.observability.sinks import InMemoryMetricsSink
from tests.helpers.streaming_mocks import (
    anthropic_text_events,
    create_stream,
    openai_text_chunks,
)


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Mock environment variables for testing."""
    env_vars = {
        "OPENAI_API_KEY": "test-openai-key",
        "ANTHROPIC_API_KEY": "test-anthropic-key",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


@pytest.fixture
def no_api_keys(monkeypatch):
    """Remove backend API keys and keep .env files from restoring them."""
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.setattr("llm_stream_sdk.providers.anthropic.adapter.load_dotenv", lambda: False)
    monkeypatch.setattr("llm_stream_sdk.providers.openai.adapter.load_dotenv", lambda: False)


@pytest.fixture
def text_events():
    """Canonical events for a plain text response."""
    return [
        MessageStartEvent(role="assistant"),
        ContentBlockStartEvent(content_block_index=0),
        ContentBlockDeltaEvent(content_block_index=0, delta=TextDelta(text="Hello")),
        ContentBlockDeltaEvent(content_block_index=0, delta=TextDelta(text=", world")),
        ContentBlockStopEvent(content_block_index=0),
        MessageStopEvent(stop_reason="endTurn"),
        MetadataEvent(usage=Usage(input_tokens=10, output_tokens=5)),
    ]


@pytest.fixture
def tool_events():
    """Canonical events for a text block followed by a tool call."""
    return [
        MessageStartEvent(role="assistant"),
        ContentBlockStartEvent(content_block_index=0),
        ContentBlockDeltaEvent(content_block_index=0, delta=TextDelta(text="Let me check.")),
        ContentBlockStopEvent(content_block_index=0),
        ContentBlockStartEvent(
            content_block_index=1,
            start=ToolUseStart(tool_use_id="tool-1", name="get_weather")
        ),
        ContentBlockDeltaEvent(content_block_index=1, delta=ToolUseInputDelta(input='{"city": ')),
        ContentBlockDeltaEvent(content_block_index=1, delta=ToolUseInputDelta(input='"Paris"}')),
        ContentBlockStopEvent(content_block_index=1),
        MessageStopEvent(stop_reason="toolUse"),
    ]


@pytest.fixture
def metrics_sink():
    """In-memory metrics sink."""
    return InMemoryMetricsSink()


@pytest.fixture
def options_with_sink(metrics_sink):
    """Streaming options recording into the in-memory sink."""
    return StreamingOptions(metrics_sink=metrics_sink, log_streaming_metrics=True)


@pytest.fixture
def mock_bedrock_client():
    """Mock synchronous bedrock-runtime client; set ``stream_events`` before use."""
    client = MagicMock()
    client.stream_events = []

    def converse_stream(**kwargs):
        return {"stream": iter(client.stream_events)}

    client.converse_stream = MagicMock(side_effect=converse_stream)
    return client


@pytest.fixture
def mock_anthropic_client():
    """Mock Anthropic client."""
    client = MagicMock()
    chunks = ["Test", " response"]

    async def create_response(**kwargs):
        return create_stream(anthropic_text_events(chunks))

    client.messages.create = AsyncMock(side_effect=create_response)
    return client


@pytest.fixture
def mock_openai_client():
    """Mock OpenAI client."""
    client = MagicMock()
    chunks = ["Test", " response", " streaming"]

    async def create_response(**kwargs):
        return create_stream(openai_text_chunks(chunks))

    client.chat.completions.create = AsyncMock(side_effect=create_response)
    return client
