from __future__ import annotations

import logging
from typing import Any, AsyncGenerator, List, Optional

from ...core.normalization import merge_usage, normalize_stop_reason, normalize_usage
from ...models.events import (
    ContentBlockDeltaEvent,
    ContentBlockStartEvent,
    ContentBlockStopEvent,
    MessageStartEvent,
    MessageStopEvent,
    MetadataEvent,
    ModelStreamEvent,
    ReasoningContentDelta,
    TextDelta,
    ToolUseInputDelta,
    ToolUseStart,
)
from ...models.messages import Usage
from ...streaming.types import iterate_source
from ..base import ProviderError, get_field


logger = logging.getLogger(__name__)


class AnthropicStreamNormalizer:
    """Translates one Messages API event stream into canonical events.

    Stop reason and usage arrive spread over ``message_start`` and
    ``message_delta``; they are held here until ``message_stop``.
    """

    def __init__(self):
        self.stop_reason: Optional[str] = None
        self.stop_sequence: Optional[str] = None
        self.usage: Optional[Usage] = None

    def _merge_usage(self, usage_data: Any) -> None:
        if usage_data is not None:
            self.usage = merge_usage(self.usage, normalize_usage(usage_data, "anthropic"))

    def convert(self, native: Any) -> List[ModelStreamEvent]:
        """Translate one native event; unknown events yield nothing."""
        event_type = get_field(native, "type")

        if event_type == "message_start":
            message = get_field(native, "message")
            self._merge_usage(get_field(message, "usage"))
            return [MessageStartEvent(role=get_field(message, "role", "assistant"))]

        if event_type == "content_block_start":
            return self._block_start(get_field(native, "index", 0), get_field(native, "content_block"))

        if event_type == "content_block_delta":
            return self._block_delta(get_field(native, "index", 0), get_field(native, "delta"))

        if event_type == "content_block_stop":
            return [ContentBlockStopEvent(content_block_index=get_field(native, "index", 0))]

        if event_type == "message_delta":
            delta = get_field(native, "delta")
            stop_reason = get_field(delta, "stop_reason")
            if stop_reason:
                self.stop_reason = stop_reason
            self.stop_sequence = get_field(delta, "stop_sequence") or self.stop_sequence
            self._merge_usage(get_field(native, "usage"))
            return []

        if event_type == "message_stop":
            events: List[ModelStreamEvent] = [
                MessageStopEvent(
                    stop_reason=normalize_stop_reason(self.stop_reason, "anthropic"),
                    additional_fields={"stop_sequence": self.stop_sequence} if self.stop_sequence else None,
                )
            ]
            if self.usage is not None:
                events.append(MetadataEvent(usage=self.usage))
            return events

        if event_type == "error":
            error = get_field(native, "error")
            raise ProviderError(
                get_field(error, "message") or "Anthropic stream error",
                provider="anthropic",
                error_type=get_field(error, "type"),
            )

        if event_type != "ping":
            logger.debug("Skipping unknown Anthropic stream event: %s", event_type)
        return []

    def _block_start(self, index: int, block: Any) -> List[ModelStreamEvent]:
        block_type = get_field(block, "type")

        if block_type == "tool_use":
            start = ToolUseStart(tool_use_id=get_field(block, "id"), name=get_field(block, "name"))
            return [ContentBlockStartEvent(content_block_index=index, start=start)]

        events: List[ModelStreamEvent] = [ContentBlockStartEvent(content_block_index=index)]
        if block_type == "redacted_thinking":
            # Redacted thinking arrives whole in the start event
            data = get_field(block, "data") or ""
            events.append(
                ContentBlockDeltaEvent(
                    content_block_index=index,
                    delta=ReasoningContentDelta(redacted_content=data.encode()),
                )
            )
        return events

    def _block_delta(self, index: int, delta: Any) -> List[ModelStreamEvent]:
        delta_type = get_field(delta, "type")

        if delta_type == "text_delta":
            canonical = TextDelta(text=get_field(delta, "text", ""))
        elif delta_type == "input_json_delta":
            canonical = ToolUseInputDelta(input=get_field(delta, "partial_json", ""))
        elif delta_type == "thinking_delta":
            canonical = ReasoningContentDelta(text=get_field(delta, "thinking", ""))
        elif delta_type == "signature_delta":
            canonical = ReasoningContentDelta(signature=get_field(delta, "signature"))
        else:
            logger.debug("Skipping unsupported Anthropic delta: %s", delta_type)
            return []

        return [ContentBlockDeltaEvent(content_block_index=index, delta=canonical)]


async def normalize_anthropic_stream(
    source: Any,
    capture_raw_events: bool = False,
) -> AsyncGenerator[ModelStreamEvent, None]:
    """Normalize an Anthropic ``messages.create(stream=True)`` stream into canonical events."""
    normalizer = AnthropicStreamNormalizer()
    async for native in iterate_source(source):
        for event in normalizer.convert(native):
            if capture_raw_events:
                event.raw_event = native
            yield event
