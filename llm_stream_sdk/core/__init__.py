"""Core provider-agnostic logic for the LLM Stream SDK.

- normalization: Usage and stop reason normalization
"""

__all__ = []
