from __future__ import annotations

from typing import Any, Dict, List, Optional

from ...models.messages import Message, TextBlock, ToolUseBlock


# Request parameter name -> Converse inferenceConfig key
INFERENCE_CONFIG_KEYS = {
    "max_tokens": "maxTokens",
    "temperature": "temperature",
    "top_p": "topP",
    "stop_sequences": "stopSequences",
}


def to_converse_messages(messages: List[Message]) -> List[Dict[str, Any]]:
    """Convert messages to Converse format.

    Only text and tool-use blocks are sent; other block types are dropped.
    """
    converted = []
    for message in messages:
        content = []
        for block in message.content:
            if isinstance(block, TextBlock):
                content.append({"text": block.text})
            elif isinstance(block, ToolUseBlock):
                content.append({
                    "toolUse": {
                        "toolUseId": block.tool_use_id,
                        "name": block.name,
                        "input": block.input,
                    }
                })
        converted.append({"role": message.role.value, "content": content})
    return converted


def to_tool_config(tools: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Wrap ``{name, description, input_schema}`` tool specs for Converse."""
    return {
        "tools": [
            {
                "toolSpec": {
                    "name": tool["name"],
                    "description": tool.get("description", ""),
                    "inputSchema": {"json": tool.get("input_schema", {"type": "object"})},
                }
            }
            for tool in tools
        ]
    }


def build_converse_request(
    model_id: str,
    messages: List[Message],
    system_prompt: Optional[str] = None,
    tools: Optional[List[Dict[str, Any]]] = None,
    **params: Any,
) -> Dict[str, Any]:
    """Build the keyword arguments for ``client.converse_stream``.

    Known inference parameters go to ``inferenceConfig``; anything else is
    passed through as ``additionalModelRequestFields``.
    """
    request: Dict[str, Any] = {
        "modelId": model_id,
        "messages": to_converse_messages(messages),
    }
    if system_prompt:
        request["system"] = [{"text": system_prompt}]

    inference_config = {}
    additional_fields = {}
    for key, value in params.items():
        if value is None:
            continue
        if key in INFERENCE_CONFIG_KEYS:
            inference_config[INFERENCE_CONFIG_KEYS[key]] = value
        else:
            additional_fields[key] = value

    if inference_config:
        request["inferenceConfig"] = inference_config
    if additional_fields:
        request["additionalModelRequestFields"] = additional_fields
    if tools:
        request["toolConfig"] = to_tool_config(tools)
    return request
