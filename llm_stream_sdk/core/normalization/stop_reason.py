"""
Stop reason normalization.

Backends report why generation ended in their own vocabulary. These helpers
map them onto the canonical camelCase ``StopReason`` values; anything
unknown is converted to camelCase and passed through unchanged otherwise.
"""

import re
from typing import Optional

from ...models.messages import StopReason


OPENAI_STOP_REASONS = {
    "stop": StopReason.END_TURN.value,
    "length": StopReason.MAX_TOKENS.value,
    "tool_calls": StopReason.TOOL_USE.value,
    "function_call": StopReason.TOOL_USE.value,
    "content_filter": StopReason.CONTENT_FILTERED.value,
}

ANTHROPIC_STOP_REASONS = {
    "refusal": StopReason.CONTENT_FILTERED.value,
    "model_context_window_exceeded": StopReason.MODEL_CONTEXT_WINDOW_EXCEEDED.value,
}

_SNAKE_RE = re.compile(r"_([a-z0-9])")


def to_camel_case(value: str) -> str:
    """Convert ``end_turn`` style values to ``endTurn``."""
    return _SNAKE_RE.sub(lambda m: m.group(1).upper(), value)


def normalize_stop_reason(stop_reason: Optional[str], provider: str) -> Optional[str]:
    """
    Map a backend stop reason to its canonical value.

    Args:
        stop_reason: Stop reason as reported by the backend
        provider: Backend name ("bedrock", "anthropic", "openai")

    Returns:
        Canonical stop reason, or None when the backend reported none
    """
    if not stop_reason:
        return None

    if provider == "openai" and stop_reason in OPENAI_STOP_REASONS:
        return OPENAI_STOP_REASONS[stop_reason]
    if provider == "anthropic" and stop_reason in ANTHROPIC_STOP_REASONS:
        return ANTHROPIC_STOP_REASONS[stop_reason]

    return to_camel_case(stop_reason)
