"""
Exceptions raised while aggregating a model response stream.

Every error here is fatal to the response being aggregated. Nothing in this
package retries; callers that want a retry issue a new request.
"""

from typing import Iterable, Optional


class StreamAggregationError(Exception):
    pass


class StreamProtocolError(StreamAggregationError):
    """
    The canonical event sequence broke the block framing rules.

    Raised for a delta or stop on an index with no open block, a second
    start on an index that is still open, or a sequence that ends while
    blocks are still open.

    Attributes:
        content_block_index: Index the offending event referred to
        open_indices: Indices still open when the sequence ended
    """

    def __init__(
        self,
        message: str,
        content_block_index: Optional[int] = None,
        open_indices: Optional[Iterable[int]] = None
    ):
        super().__init__(message)
        self.content_block_index = content_block_index
        self.open_indices = sorted(open_indices) if open_indices else []


class BlockKindMismatchError(StreamProtocolError):
    """A delta arrived that does not fit the kind the block is committed to."""

    def __init__(self, message: str, content_block_index: Optional[int] = None,
                 block_kind: Optional[str] = None, delta_type: Optional[str] = None):
        super().__init__(message, content_block_index=content_block_index)
        self.block_kind = block_kind
        self.delta_type = delta_type


class MalformedToolInputError(StreamAggregationError):
    """
    The concatenated tool-use input is not valid JSON.

    The underlying ``json.JSONDecodeError`` is chained as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        raw_input: str,
        content_block_index: Optional[int] = None,
        tool_use_id: Optional[str] = None,
        name: Optional[str] = None
    ):
        super().__init__(message)
        self.raw_input = raw_input
        self.content_block_index = content_block_index
        self.tool_use_id = tool_use_id
        self.name = name
