from __future__ import annotations

import logging
from typing import Any, AsyncGenerator, Dict, List

from ...core.normalization import normalize_stop_reason, normalize_usage
from ...models.events import (
    ContentBlockDeltaEvent,
    ContentBlockStartEvent,
    ContentBlockStopEvent,
    Delta,
    MessageStartEvent,
    MessageStopEvent,
    MetadataEvent,
    ModelStreamEvent,
    ReasoningContentDelta,
    TextDelta,
    ToolUseInputDelta,
    ToolUseStart,
)
from ...streaming.types import iterate_source
from ..base import ProviderError, get_field


logger = logging.getLogger(__name__)

# Exceptions Converse delivers inside the event stream
BEDROCK_STREAM_EXCEPTIONS = {
    "internalServerException",
    "modelStreamErrorException",
    "validationException",
    "throttlingException",
    "serviceUnavailableException",
}


def _convert_delta(delta: Dict[str, Any]) -> Delta:
    if "text" in delta:
        return TextDelta(text=delta["text"])
    if "toolUse" in delta:
        return ToolUseInputDelta(input=get_field(delta["toolUse"], "input", ""))
    if "reasoningContent" in delta:
        reasoning = delta["reasoningContent"]
        return ReasoningContentDelta(
            text=get_field(reasoning, "text"),
            signature=get_field(reasoning, "signature"),
            redacted_content=get_field(reasoning, "redactedContent"),
        )
    raise ProviderError(f"Unsupported Bedrock delta {sorted(delta)}", provider="bedrock")


def convert_bedrock_event(native: Dict[str, Any]) -> List[ModelStreamEvent]:
    """Translate one Converse stream event into canonical events.

    Returns an empty list for events that carry nothing canonical.

    Raises:
        ProviderError: If the event is a stream exception
    """
    for error_type in BEDROCK_STREAM_EXCEPTIONS:
        if error_type in native:
            details = native[error_type] or {}
            raise ProviderError(
                get_field(details, "message") or f"Bedrock stream failed with {error_type}",
                provider="bedrock",
                error_type=error_type,
                status_code=get_field(details, "originalStatusCode"),
            )

    if "messageStart" in native:
        return [MessageStartEvent(role=native["messageStart"].get("role", "assistant"))]

    if "contentBlockStart" in native:
        data = native["contentBlockStart"]
        tool_use = get_field(data.get("start"), "toolUse")
        start = None
        if tool_use is not None:
            start = ToolUseStart(tool_use_id=tool_use["toolUseId"], name=tool_use["name"])
        return [ContentBlockStartEvent(content_block_index=data.get("contentBlockIndex", 0), start=start)]

    if "contentBlockDelta" in native:
        data = native["contentBlockDelta"]
        return [
            ContentBlockDeltaEvent(
                content_block_index=data.get("contentBlockIndex", 0),
                delta=_convert_delta(data.get("delta", {})),
            )
        ]

    if "contentBlockStop" in native:
        return [ContentBlockStopEvent(content_block_index=native["contentBlockStop"].get("contentBlockIndex", 0))]

    if "messageStop" in native:
        data = native["messageStop"]
        return [
            MessageStopEvent(
                stop_reason=normalize_stop_reason(data.get("stopReason"), "bedrock"),
                additional_fields=data.get("additionalModelResponseFields"),
            )
        ]

    if "metadata" in native:
        data = native["metadata"]
        usage = data.get("usage")
        return [
            MetadataEvent(
                usage=normalize_usage(usage, "bedrock") if usage is not None else None,
                metrics=data.get("metrics"),
            )
        ]

    logger.debug("Skipping unknown Bedrock stream event: %s", sorted(native))
    return []


async def normalize_bedrock_stream(
    source: Any,
    capture_raw_events: bool = False,
) -> AsyncGenerator[ModelStreamEvent, None]:
    """Normalize a Converse event stream (sync or async) into canonical events."""
    async for native in iterate_source(source):
        for event in convert_bedrock_event(native):
            if capture_raw_events:
                event.raw_event = native
            yield event
