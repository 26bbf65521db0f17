import json
from typing import Any, Dict, List, Optional

from ...models.messages import Message, TextBlock, ToolUseBlock


def to_openai_messages(messages: List[Message], system_prompt: Optional[str] = None) -> List[Dict[str, Any]]:
    """Convert messages to Chat Completions format.

    Text blocks are joined into ``content``; tool-use blocks become
    ``tool_calls`` with JSON-encoded arguments. Other block types are dropped.
    """
    converted: List[Dict[str, Any]] = []
    if system_prompt:
        converted.append({"role": "system", "content": system_prompt})

    for message in messages:
        text = "".join(block.text for block in message.content if isinstance(block, TextBlock))
        entry: Dict[str, Any] = {"role": message.role.value, "content": text}

        tool_calls = [
            {
                "id": block.tool_use_id,
                "type": "function",
                "function": {"name": block.name, "arguments": json.dumps(block.input)},
            }
            for block in message.content
            if isinstance(block, ToolUseBlock)
        ]
        if tool_calls:
            entry["tool_calls"] = tool_calls
            if not text:
                entry["content"] = None
        converted.append(entry)
    return converted


def to_openai_tools(tools: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Wrap ``{name, description, input_schema}`` tool specs as functions."""
    return [
        {
            "type": "function",
            "function": {
                "name": tool["name"],
                "description": tool.get("description", ""),
                "parameters": tool.get("input_schema", {"type": "object"}),
            },
        }
        for tool in tools
    ]


def build_chat_request(
    model_id: str,
    messages: List[Message],
    system_prompt: Optional[str] = None,
    tools: Optional[List[Dict[str, Any]]] = None,
    **params: Any,
) -> Dict[str, Any]:
    """Build the keyword arguments for ``client.chat.completions.create``.

    Usage is requested in-stream through ``stream_options``.
    """
    request: Dict[str, Any] = {
        "model": model_id,
        "messages": to_openai_messages(messages, system_prompt),
        "stream": True,
        "stream_options": {"include_usage": True},
    }
    if tools:
        request["tools"] = to_openai_tools(tools)
    for key, value in params.items():
        if value is not None:
            request[key] = value
    return request
