"""
Message and content block models.

A ``Message`` is the final aggregate of one streamed model response. Its
content is a list of finalized content blocks, discriminated by ``type``.
"""

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    model_serializer,
    model_validator,
)


class Role(str, Enum):
    """Role of a message sender."""
    USER = "user"
    ASSISTANT = "assistant"


class StopReason(str, Enum):
    """Known reasons a model stopped generating.

    Backends may report reasons not listed here; those are passed through
    as plain strings.
    """
    CONTENT_FILTERED = "contentFiltered"
    END_TURN = "endTurn"
    GUARDRAIL_INTERVENED = "guardrailIntervened"
    MAX_TOKENS = "maxTokens"
    STOP_SEQUENCE = "stopSequence"
    TOOL_USE = "toolUse"
    MODEL_CONTEXT_WINDOW_EXCEEDED = "modelContextWindowExceeded"


class Usage(BaseModel):
    """Token accounting for one response."""
    input_tokens: int = Field(default=0, ge=0, description="Tokens in the request")
    output_tokens: int = Field(default=0, ge=0, description="Tokens generated")
    total_tokens: int = Field(default=0, ge=0, description="Input plus output tokens")
    cache_read_input_tokens: Optional[int] = Field(None, ge=0)
    cache_write_input_tokens: Optional[int] = Field(None, ge=0)

    @model_validator(mode="after")
    def fill_total(self) -> "Usage":
        if not self.total_tokens:
            self.total_tokens = self.input_tokens + self.output_tokens
        return self


class TextBlock(BaseModel):
    """Plain text produced by the model."""
    type: Literal["textBlock"] = "textBlock"
    text: str


class ToolUseBlock(BaseModel):
    """A tool invocation requested by the model.

    ``input`` is the parsed JSON payload; its meaning belongs to the tool.
    """
    type: Literal["toolUseBlock"] = "toolUseBlock"
    tool_use_id: str
    name: str
    input: Any = None


class ReasoningBlock(BaseModel):
    """Reasoning produced by the model.

    Either ``text`` (with an optional ``signature``) or ``redacted_content``
    is set, never both. Unset fields are left out of every serialized form,
    including when the block is dumped as part of a ``Message``. Redacted
    content is opaque bytes and travels as base64 in JSON.
    """
    model_config = ConfigDict(ser_json_bytes="base64", val_json_bytes="base64")

    type: Literal["reasoningBlock"] = "reasoningBlock"
    text: Optional[str] = None
    signature: Optional[str] = None
    redacted_content: Optional[bytes] = None

    @model_serializer(mode="wrap")
    def omit_unset_fields(self, handler: SerializerFunctionWrapHandler) -> Dict[str, Any]:
        return {key: value for key, value in handler(self).items() if value is not None}


ContentBlock = Annotated[
    Union[TextBlock, ToolUseBlock, ReasoningBlock],
    Field(discriminator="type")
]

CONTENT_BLOCK_TYPES = (TextBlock, ToolUseBlock, ReasoningBlock)


class Message(BaseModel):
    """A complete message in a conversation."""
    model_config = ConfigDict(ser_json_bytes="base64", val_json_bytes="base64")

    type: Literal["message"] = "message"
    role: Role
    content: List[ContentBlock] = Field(default_factory=list)
    stop_reason: Optional[str] = None
    usage: Optional[Usage] = None

    @property
    def text(self) -> str:
        """Concatenated text of all text blocks."""
        return "".join(block.text for block in self.content if isinstance(block, TextBlock))

    @property
    def tool_uses(self) -> List[ToolUseBlock]:
        """Tool use blocks in content order."""
        return [block for block in self.content if isinstance(block, ToolUseBlock)]

    @classmethod
    def user(cls, text: str) -> "Message":
        """Build a single-text-block user message."""
        return cls(role=Role.USER, content=[TextBlock(text=text)])
