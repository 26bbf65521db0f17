from __future__ import annotations

from typing import Any, Dict, List, Optional

from ...models.messages import Message, TextBlock, ToolUseBlock


DEFAULT_MAX_TOKENS = 4096


def to_anthropic_messages(messages: List[Message]) -> List[Dict[str, Any]]:
    """Convert messages to Messages API format.

    Only text and tool-use blocks are sent; other block types are dropped.
    """
    converted = []
    for message in messages:
        content = []
        for block in message.content:
            if isinstance(block, TextBlock):
                content.append({"type": "text", "text": block.text})
            elif isinstance(block, ToolUseBlock):
                content.append({
                    "type": "tool_use",
                    "id": block.tool_use_id,
                    "name": block.name,
                    "input": block.input,
                })
        converted.append({"role": message.role.value, "content": content})
    return converted


def build_messages_request(
    model_id: str,
    messages: List[Message],
    system_prompt: Optional[str] = None,
    **params: Any,
) -> Dict[str, Any]:
    """Build the keyword arguments for ``client.messages.create``.

    ``max_tokens`` is required by the API and defaults to
    ``DEFAULT_MAX_TOKENS``. Tools are passed as ``{name, description,
    input_schema}`` dicts, which is already the Anthropic shape. ``system=None``
    is dropped to satisfy SDK validators.
    """
    request: Dict[str, Any] = {
        "model": model_id,
        "messages": to_anthropic_messages(messages),
        "max_tokens": params.pop("max_tokens", None) or DEFAULT_MAX_TOKENS,
        "stream": True,
    }
    if system_prompt:
        request["system"] = system_prompt
    for key, value in params.items():
        if value is not None:
            request[key] = value
    return request
