from __future__ import annotations

from typing import Any, AsyncGenerator, List, Optional, Tuple

from ...core.normalization import normalize_stop_reason, normalize_usage
from ...models.events import (
    ContentBlockDeltaEvent,
    ContentBlockStartEvent,
    ContentBlockStopEvent,
    MessageStartEvent,
    MessageStopEvent,
    MetadataEvent,
    ModelStreamEvent,
    TextDelta,
    ToolUseInputDelta,
    ToolUseStart,
)
from ...streaming.types import iterate_source
from ..base import get_field


class OpenAIStreamNormalizer:
    """Synthesizes block framing for a Chat Completions chunk stream.

    Chunks carry no block boundaries, so a block is opened when content of
    a new kind appears (text, or a tool call with a new tool index) and the
    previous block is closed at that point. ``finish_reason`` closes
    whatever is still open.
    """

    def __init__(self):
        self.started = False
        self.next_index = 0
        self.current_key: Optional[Tuple[str, int]] = None
        self.current_index: Optional[int] = None

    def _close_current(self) -> List[ModelStreamEvent]:
        if self.current_key is None:
            return []
        events: List[ModelStreamEvent] = [ContentBlockStopEvent(content_block_index=self.current_index)]
        self.current_key = None
        self.current_index = None
        return events

    def _switch_to(self, key: Tuple[str, int], start: Optional[ToolUseStart] = None) -> List[ModelStreamEvent]:
        if key == self.current_key:
            return []
        events = self._close_current()
        self.current_key = key
        self.current_index = self.next_index
        self.next_index += 1
        events.append(ContentBlockStartEvent(content_block_index=self.current_index, start=start))
        return events

    def convert(self, chunk: Any) -> List[ModelStreamEvent]:
        """Translate one chunk into canonical events."""
        events: List[ModelStreamEvent] = []
        choices = get_field(chunk, "choices") or []
        choice = choices[0] if choices else None
        delta = get_field(choice, "delta")

        if not self.started:
            self.started = True
            events.append(MessageStartEvent(role=get_field(delta, "role") or "assistant"))

        content = get_field(delta, "content")
        if content:
            events.extend(self._switch_to(("text", 0)))
            events.append(ContentBlockDeltaEvent(content_block_index=self.current_index, delta=TextDelta(text=content)))

        for tool_call in get_field(delta, "tool_calls") or []:
            function = get_field(tool_call, "function")
            key = ("tool", get_field(tool_call, "index", 0))
            if key != self.current_key:
                start = ToolUseStart(
                    tool_use_id=get_field(tool_call, "id") or "",
                    name=get_field(function, "name") or "",
                )
                events.extend(self._switch_to(key, start))
            arguments = get_field(function, "arguments")
            if arguments:
                events.append(
                    ContentBlockDeltaEvent(
                        content_block_index=self.current_index,
                        delta=ToolUseInputDelta(input=arguments),
                    )
                )

        finish_reason = get_field(choice, "finish_reason")
        if finish_reason:
            events.extend(self._close_current())
            events.append(MessageStopEvent(stop_reason=normalize_stop_reason(finish_reason, "openai")))

        usage = get_field(chunk, "usage")
        if usage is not None:
            events.append(MetadataEvent(usage=normalize_usage(usage, "openai")))

        return events


async def normalize_openai_stream(
    source: Any,
    capture_raw_events: bool = False,
) -> AsyncGenerator[ModelStreamEvent, None]:
    """Normalize a ``chat.completions.create(stream=True)`` stream into canonical events.

    Blocks left open when the source ends without a ``finish_reason`` are
    not closed here.
    """
    normalizer = OpenAIStreamNormalizer()
    async for chunk in iterate_source(source):
        for event in normalizer.convert(chunk):
            if capture_raw_events:
                event.raw_event = chunk
            yield event
