"""
Per-block accumulation of streamed deltas.

A ``BlockAccumulator`` holds the partial state of exactly one content block
between its start and stop events, and turns it into a finalized content
block when the block completes.
"""

import json
from enum import Enum
from typing import List, Optional

from ..errors import BlockKindMismatchError, MalformedToolInputError, StreamProtocolError
from ..models.events import (
    Delta,
    ReasoningContentDelta,
    TextDelta,
    ToolUseInputDelta,
    ToolUseStart,
)
from ..models.messages import ContentBlock, ReasoningBlock, TextBlock, ToolUseBlock


class BlockKind(str, Enum):
    """What a block turns into once finalized."""
    TEXT = "text"
    TOOL_USE = "toolUse"
    REASONING = "reasoning"
    REDACTED_REASONING = "redactedReasoning"


class BlockAccumulator:
    """Merges deltas for one content block index into a finished block.

    The block kind is committed by a tool-use start descriptor, or lazily
    by the first delta. Later deltas must agree with that kind.
    """

    def __init__(self, content_block_index: int, empty_tool_input_as_object: bool = True):
        self.content_block_index = content_block_index
        self.empty_tool_input_as_object = empty_tool_input_as_object
        self.kind: Optional[BlockKind] = None
        self.tool_use: Optional[ToolUseStart] = None
        self.delta_count = 0
        self._text: List[str] = []
        self._tool_input: List[str] = []
        self._redacted: List[bytes] = []
        self._signature: Optional[str] = None
        self._has_reasoning_text = False

    def open(self, start: Optional[ToolUseStart] = None) -> None:
        """Start the block, committing it to tool-use when ``start`` is given."""
        if start is not None:
            self.kind = BlockKind.TOOL_USE
            self.tool_use = start

    def apply(self, delta: Delta) -> None:
        """Merge one delta into the block."""
        if isinstance(delta, TextDelta):
            self._commit(BlockKind.TEXT, delta)
            self._text.append(delta.text)
        elif isinstance(delta, ToolUseInputDelta):
            self._commit(BlockKind.TOOL_USE, delta)
            self._tool_input.append(delta.input)
        elif isinstance(delta, ReasoningContentDelta):
            self._apply_reasoning(delta)
        else:
            raise StreamProtocolError(
                f"Unsupported delta {type(delta).__name__} for block {self.content_block_index}",
                content_block_index=self.content_block_index
            )
        self.delta_count += 1

    def _apply_reasoning(self, delta: ReasoningContentDelta) -> None:
        if delta.redacted_content is not None:
            self._commit(BlockKind.REDACTED_REASONING, delta)
            self._redacted.append(bytes(delta.redacted_content))
            return

        self._commit(BlockKind.REASONING, delta)
        if delta.text is not None:
            self._text.append(delta.text)
            self._has_reasoning_text = True
        # Signatures may arrive on any fragment; the last one wins
        if delta.signature is not None:
            self._signature = delta.signature

    def _commit(self, kind: BlockKind, delta: Delta) -> None:
        if self.kind is None:
            self.kind = kind
            return
        if self.kind is not kind:
            raise BlockKindMismatchError(
                f"Block {self.content_block_index} is a {self.kind.value} block "
                f"and cannot take a {delta.type}",
                content_block_index=self.content_block_index,
                block_kind=self.kind.value,
                delta_type=delta.type
            )

    def finalize(self) -> ContentBlock:
        """Build the finished content block.

        Raises:
            MalformedToolInputError: If tool-use input is not valid JSON
        """
        if self.kind is BlockKind.TOOL_USE:
            return self._finalize_tool_use()
        if self.kind is BlockKind.REASONING:
            return ReasoningBlock(
                text="".join(self._text) if self._has_reasoning_text else None,
                signature=self._signature
            )
        if self.kind is BlockKind.REDACTED_REASONING:
            return ReasoningBlock(redacted_content=b"".join(self._redacted))
        # Text, or a block that never received a delta
        return TextBlock(text="".join(self._text))

    def _finalize_tool_use(self) -> ToolUseBlock:
        if self.tool_use is None:
            raise StreamProtocolError(
                f"Tool input for block {self.content_block_index} arrived without a tool-use start",
                content_block_index=self.content_block_index
            )
        raw_input = "".join(self._tool_input)
        tool_use_id = self.tool_use.tool_use_id
        name = self.tool_use.name

        if not raw_input.strip() and self.empty_tool_input_as_object:
            parsed = {}
        else:
            try:
                parsed = json.loads(raw_input)
            except json.JSONDecodeError as e:
                raise MalformedToolInputError(
                    f"Tool input for block {self.content_block_index} "
                    f"({name or 'unnamed tool'}) is not valid JSON: {e.msg}",
                    raw_input=raw_input,
                    content_block_index=self.content_block_index,
                    tool_use_id=tool_use_id,
                    name=name
                ) from e

        return ToolUseBlock(tool_use_id=tool_use_id, name=name, input=parsed)
