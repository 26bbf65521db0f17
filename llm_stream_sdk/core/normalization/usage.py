"""
Usage normalization module.

This module converts usage data reported by different backends into the
canonical ``Usage`` model. All adapters go through ``normalize_usage`` so
usage looks the same regardless of which backend produced it.
"""

from typing import Any, Dict, Optional

from ...models.messages import Usage


def usage_to_dict(usage_data: Any) -> Dict[str, Any]:
    """Turn a backend usage object (pydantic model, plain object or dict) into a dict."""
    if usage_data is None:
        return {}
    if isinstance(usage_data, dict):
        return usage_data
    if hasattr(usage_data, "model_dump"):
        return usage_data.model_dump()
    return dict(getattr(usage_data, "__dict__", {}))


def _int(value: Any) -> int:
    # Backends and mocks report missing counters as None
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def _optional_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    return _int(value)


def normalize_usage(usage_data: Any, provider: str) -> Usage:
    """
    Normalize usage data into the canonical ``Usage`` model.

    Args:
        usage_data: Raw usage data from the backend (dict or object)
        provider: Backend name for field mapping ("bedrock", "anthropic", "openai")

    Returns:
        Usage with input, output and total token counts
    """
    data = usage_to_dict(usage_data)

    if provider == "bedrock":
        return Usage(
            input_tokens=_int(data.get("inputTokens")),
            output_tokens=_int(data.get("outputTokens")),
            total_tokens=_int(data.get("totalTokens")),
            cache_read_input_tokens=_optional_int(data.get("cacheReadInputTokens")),
            cache_write_input_tokens=_optional_int(data.get("cacheWriteInputTokens")),
        )

    if provider == "anthropic":
        # Anthropic has no total; Usage fills it from input + output
        return Usage(
            input_tokens=_int(data.get("input_tokens")),
            output_tokens=_int(data.get("output_tokens")),
            cache_read_input_tokens=_optional_int(data.get("cache_read_input_tokens")),
            cache_write_input_tokens=_optional_int(data.get("cache_creation_input_tokens")),
        )

    if provider == "openai":
        cached = None
        details = data.get("prompt_tokens_details")
        if details is not None:
            cached = _optional_int(usage_to_dict(details).get("cached_tokens"))
        return Usage(
            input_tokens=_int(data.get("prompt_tokens")),
            output_tokens=_int(data.get("completion_tokens")),
            total_tokens=_int(data.get("total_tokens")),
            cache_read_input_tokens=cached,
        )

    # Generic mapping for unknown providers
    input_tokens = 0
    for field_name in ("input_tokens", "inputTokens", "prompt_tokens"):
        if field_name in data:
            input_tokens = _int(data[field_name])
            break
    output_tokens = 0
    for field_name in ("output_tokens", "outputTokens", "completion_tokens"):
        if field_name in data:
            output_tokens = _int(data[field_name])
            break
    return Usage(
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        total_tokens=_int(data.get("total_tokens", data.get("totalTokens"))),
    )


def merge_usage(base: Optional[Usage], update: Usage) -> Usage:
    """Combine usage reported in several events of one response.

    Non-zero counters in ``update`` win; the total is recomputed.
    """
    if base is None:
        return update
    merged = Usage(
        input_tokens=update.input_tokens or base.input_tokens,
        output_tokens=update.output_tokens or base.output_tokens,
        cache_read_input_tokens=(
            update.cache_read_input_tokens
            if update.cache_read_input_tokens is not None
            else base.cache_read_input_tokens
        ),
        cache_write_input_tokens=(
            update.cache_write_input_tokens
            if update.cache_write_input_tokens is not None
            else base.cache_write_input_tokens
        ),
    )
    return merged
