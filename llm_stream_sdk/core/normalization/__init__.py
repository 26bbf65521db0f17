"""Normalization layer for standardizing backend data.

This layer handles:
- Usage data normalization
- Stop reason normalization
"""

from .stop_reason import normalize_stop_reason
from .usage import merge_usage, normalize_usage

__all__ = ["normalize_usage", "merge_usage", "normalize_stop_reason"]
