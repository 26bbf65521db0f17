"""
Aggregation of canonical stream events into a complete message.

The aggregator consumes canonical events one at a time and produces two
outputs from that single pass:

- a live channel: every event forwarded unchanged, plus each finished
  content block emitted right after the ``ContentBlockStopEvent`` that
  completed it;
- a terminal ``Message`` assembled once the event sequence ends.

Sequencing contract: for every block, the live channel yields the stop
event first and the finished block immediately after it.
"""

from __future__ import annotations

import time
from typing import (
    AsyncGenerator,
    AsyncIterable,
    Dict,
    Generator,
    Iterable,
    Iterator,
    List,
    Optional,
    Tuple,
    Union,
)

from ..errors import StreamProtocolError
from ..models.events import (
    ContentBlockDeltaEvent,
    ContentBlockStartEvent,
    ContentBlockStopEvent,
    MessageStartEvent,
    MessageStopEvent,
    MetadataEvent,
    ModelStreamEvent,
)
from ..models.messages import ContentBlock, Message, ReasoningBlock, Role, TextBlock, ToolUseBlock, Usage
from ..models.streaming import DEFAULT_OPTIONS, StreamingOptions
from ..observability.logging import StreamLogger, new_request_id
from ..observability.metrics import StreamingMetrics
from .accumulator import BlockAccumulator
from .types import AggregationState, StreamItem, iterate_source


logger = StreamLogger("aggregator")


class StreamAggregator:
    """Push-style state machine folding canonical events into a ``Message``.

    One instance aggregates exactly one response. Open blocks are kept in
    a registry keyed by block index; several may be open at once.
    """

    def __init__(
        self,
        options: Optional[StreamingOptions] = None,
        provider: Optional[str] = None,
        model: Optional[str] = None
    ):
        self.options = options or DEFAULT_OPTIONS
        self.provider = provider
        self.model = model
        self.request_id = self.options.request_id or new_request_id()

        self.state = AggregationState.IDLE
        self.role: Optional[Role] = None
        self.content: List[ContentBlock] = []
        self.stop_reason: Optional[str] = None
        self.usage: Optional[Usage] = None

        self._blocks: Dict[int, BlockAccumulator] = {}
        self._start_time: Optional[float] = None
        self.metrics = StreamingMetrics(
            request_id=self.request_id,
            provider=provider,
            model=model
        )

    @property
    def open_indices(self) -> List[int]:
        return sorted(self._blocks)

    def start(self) -> None:
        """Mark the start of the stream for timing."""
        if self._start_time is None:
            self._start_time = time.time()

    def process(self, event: ModelStreamEvent) -> Iterator[StreamItem]:
        """Apply one event, yielding the items it puts on the live channel.

        The event is applied as the generator is consumed. A stop event is
        yielded before its block is finalized, so a consumer has already
        seen it when finalization fails.

        Raises:
            StreamProtocolError: On block framing violations
            MalformedToolInputError: If a finished tool-use block has invalid input
        """
        if self.state is AggregationState.FINISHED:
            raise StreamProtocolError(f"Received {event.type} after the stream finished")

        self.start()
        if self.metrics.total_events == 0:
            self.metrics.time_to_first_event_ms = (time.time() - self._start_time) * 1000
        self.metrics.total_events += 1

        if isinstance(event, ContentBlockStopEvent):
            index = event.content_block_index
            self._get_block(index, event.type)
            yield event
            yield self._close_block(index)
            return

        self._apply(event)
        yield event

    def _apply(self, event: ModelStreamEvent) -> None:
        if isinstance(event, MessageStartEvent):
            self.role = event.role
            self.state = AggregationState.STARTED
        elif isinstance(event, ContentBlockStartEvent):
            self._open_block(event)
        elif isinstance(event, ContentBlockDeltaEvent):
            self._get_block(event.content_block_index, event.type).apply(event.delta)
            self.metrics.total_deltas += 1
        elif isinstance(event, MessageStopEvent):
            self.stop_reason = event.stop_reason
            self.state = AggregationState.STOPPED
        elif isinstance(event, MetadataEvent):
            if event.usage is not None:
                self.usage = event.usage
        else:
            raise StreamProtocolError(f"Unknown stream event {type(event).__name__}")

    def _open_block(self, event: ContentBlockStartEvent) -> None:
        index = event.content_block_index
        if index in self._blocks:
            raise StreamProtocolError(
                f"Content block {index} started while already open",
                content_block_index=index
            )
        accumulator = BlockAccumulator(
            index,
            empty_tool_input_as_object=self.options.empty_tool_input_as_object
        )
        accumulator.open(event.start)
        self._blocks[index] = accumulator
        logger.debug(
            "Opened content block",
            model=self.model,
            request_id=self.request_id,
            index=index,
            tool=event.start.name if event.start else None
        )

    def _get_block(self, index: int, event_type: str) -> BlockAccumulator:
        try:
            return self._blocks[index]
        except KeyError:
            raise StreamProtocolError(
                f"Received {event_type} for content block {index} which is not open",
                content_block_index=index
            ) from None

    def _close_block(self, index: int) -> ContentBlock:
        accumulator = self._get_block(index, "contentBlockStop")
        block = accumulator.finalize()
        del self._blocks[index]
        self.content.append(block)
        self._count_block(block)
        logger.debug(
            "Closed content block",
            model=self.model,
            request_id=self.request_id,
            index=index,
            block_type=block.type,
            deltas=accumulator.delta_count
        )
        return block

    def _count_block(self, block: ContentBlock) -> None:
        self.metrics.blocks_completed += 1
        if isinstance(block, TextBlock):
            self.metrics.text_blocks += 1
            self.metrics.text_chars += len(block.text)
        elif isinstance(block, ToolUseBlock):
            self.metrics.tool_use_blocks += 1
        elif isinstance(block, ReasoningBlock):
            self.metrics.reasoning_blocks += 1

    def finish(self) -> Message:
        """Assemble the final message once the event sequence has ended.

        Raises:
            StreamProtocolError: If any block is still open
        """
        if self._blocks:
            raise StreamProtocolError(
                f"Stream ended with unterminated content blocks {self.open_indices}",
                open_indices=self._blocks.keys()
            )

        message = Message(
            role=self.role or Role.ASSISTANT,
            content=list(self.content),
            stop_reason=self.stop_reason,
            usage=self.usage
        )
        self.state = AggregationState.FINISHED
        self._finish_metrics()

        logger.info(
            "Aggregated message",
            model=self.model,
            request_id=self.request_id,
            provider=self.provider,
            blocks=len(message.content),
            stop_reason=message.stop_reason
        )
        if message.usage is not None:
            logger.log_usage(message.usage, self.model, self.request_id)
        if self.options.log_streaming_metrics:
            logger.log_streaming_metrics(self.metrics.to_dict(), self.model, self.request_id)
        return message

    def _finish_metrics(self) -> None:
        self.start()
        self.metrics.duration_ms = (time.time() - self._start_time) * 1000
        self.metrics.stop_reason = self.stop_reason
        if self.usage is not None:
            self.metrics.input_tokens = self.usage.input_tokens
            self.metrics.output_tokens = self.usage.output_tokens
            self.metrics.total_tokens = self.usage.total_tokens

    def log_failure(self, error: Exception) -> None:
        logger.error(
            "Stream aggregation failed",
            model=self.model,
            request_id=self.request_id,
            provider=self.provider,
            error=error,
            open_blocks=self.open_indices or None
        )


def aggregate_events(
    events: Iterable[ModelStreamEvent],
    options: Optional[StreamingOptions] = None,
    provider: Optional[str] = None,
    model: Optional[str] = None
) -> Generator[StreamItem, None, Message]:
    """Aggregate a synchronous event sequence.

    Yields the live channel items; the final ``Message`` is the generator's
    return value::

        message = yield from aggregate_events(events)
    """
    aggregator = StreamAggregator(options, provider=provider, model=model)
    aggregator.start()
    try:
        for event in events:
            yield from aggregator.process(event)
        return aggregator.finish()
    except Exception as e:
        aggregator.log_failure(e)
        raise


class AggregatedStream:
    """Async live channel plus terminal message for one response.

    Iterate with ``async for`` to receive forwarded events and finished
    blocks as they happen; afterwards ``message`` holds the final
    ``Message``. ``get_final_message()`` drains whatever is left first.

    Nothing is read from the source until iteration begins, and the
    stream can be iterated only once.
    """

    def __init__(
        self,
        events: Union[AsyncIterable[ModelStreamEvent], Iterable[ModelStreamEvent]],
        options: Optional[StreamingOptions] = None,
        provider: Optional[str] = None,
        model: Optional[str] = None
    ):
        self._source = events
        self.options = options or DEFAULT_OPTIONS
        self.aggregator = StreamAggregator(self.options, provider=provider, model=model)
        self._iterator: Optional[AsyncGenerator[StreamItem, None]] = None
        self._message: Optional[Message] = None
        self._error: Optional[Exception] = None

    @property
    def request_id(self) -> str:
        return self.aggregator.request_id

    @property
    def metrics(self) -> StreamingMetrics:
        return self.aggregator.metrics

    @property
    def message(self) -> Message:
        """The final message; only available once the stream has completed."""
        if self._error is not None:
            raise RuntimeError(f"Stream failed: {self._error!r}") from self._error
        if self._message is None:
            raise RuntimeError("Stream has not completed; iterate it or await get_final_message()")
        return self._message

    def __aiter__(self) -> AsyncGenerator[StreamItem, None]:
        if self._iterator is not None:
            raise RuntimeError("AggregatedStream can only be iterated once")
        self._iterator = self._run()
        return self._iterator

    async def _run(self) -> AsyncGenerator[StreamItem, None]:
        self.aggregator.start()
        try:
            async for event in iterate_source(self._source):
                for item in self.aggregator.process(event):
                    yield item
            message = self.aggregator.finish()
        except Exception as e:
            self._error = e
            self.aggregator.log_failure(e)
            raise
        finally:
            await self._close_source()

        if self.options.metrics_sink is not None:
            await self.options.metrics_sink.record(self.aggregator.metrics)
        self._message = message

    async def _close_source(self) -> None:
        aclose = getattr(self._source, "aclose", None)
        if aclose is not None:
            await aclose()

    async def get_final_message(self) -> Message:
        """Consume any remaining items and return the final message.

        Once the stream has failed, every later call raises the original error.
        """
        if self._error is not None:
            raise self._error
        if self._message is None:
            iterator = self._iterator if self._iterator is not None else self.__aiter__()
            async for _ in iterator:
                pass
        return self.message

    async def aclose(self) -> None:
        """Stop the stream early and close the upstream source."""
        if self._iterator is not None:
            await self._iterator.aclose()
        # An iterator that never started does not close its source
        await self._close_source()

    async def __aenter__(self) -> "AggregatedStream":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


async def collect_aggregated(stream: AggregatedStream) -> Tuple[List[StreamItem], Message]:
    """Collect all live channel items and the final message of a stream.

    Returns:
        Tuple of (items, message)
    """
    items = [item async for item in stream]
    return items, stream.message
