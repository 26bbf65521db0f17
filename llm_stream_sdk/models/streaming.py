"""
Streaming configuration models.

This module provides configuration options for stream aggregation,
including raw event capture, metrics and tool input handling.
"""

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from dotenv import load_dotenv


ENV_PREFIX = "LLM_STREAM_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(f"{ENV_PREFIX}{name}")
    if value is None:
        return default
    value = value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean for {ENV_PREFIX}{name}: {value!r}")


@dataclass
class StreamingOptions:
    """
    Configuration for stream normalization and aggregation.

    One options object can be shared by many streams; it is never mutated
    by the aggregator.
    """

    capture_raw_events: bool = False
    """Attach the backend's native event to each canonical event."""

    log_streaming_metrics: bool = False
    """Log a metrics summary when a stream completes."""

    metrics_sink: Optional[Any] = None
    """MetricsSink that receives a StreamingMetrics record per completed stream."""

    request_id: Optional[str] = None
    """Request ID used in log records; generated when not set."""

    empty_tool_input_as_object: bool = True
    """Finalize a tool-use block that received no input as ``{}``."""

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "StreamingOptions":
        """Create StreamingOptions from dictionary.

        Args:
            config: Configuration dictionary

        Returns:
            StreamingOptions instance
        """
        # Filter out unknown keys
        known_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered_config = {k: v for k, v in config.items() if k in known_fields}
        return cls(**filtered_config)

    @classmethod
    def from_env(cls, **overrides: Any) -> "StreamingOptions":
        """Create StreamingOptions from ``LLM_STREAM_*`` environment variables.

        A ``.env`` file in the working directory is loaded first. Keyword
        arguments override values read from the environment.
        """
        load_dotenv()
        config = {
            "capture_raw_events": _env_flag("CAPTURE_RAW_EVENTS", False),
            "log_streaming_metrics": _env_flag("LOG_METRICS", False),
            "empty_tool_input_as_object": _env_flag("EMPTY_TOOL_INPUT_AS_OBJECT", True),
        }
        config.update(overrides)
        return cls.from_dict(config)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary.

        Returns:
            Configuration as dictionary
        """
        return {
            "capture_raw_events": self.capture_raw_events,
            "log_streaming_metrics": self.log_streaming_metrics,
            "metrics_sink": type(self.metrics_sink).__name__ if self.metrics_sink else None,
            "request_id": self.request_id,
            "empty_tool_input_as_object": self.empty_tool_input_as_object,
        }


# Preset configurations for common use cases

DEFAULT_OPTIONS = StreamingOptions()
"""Default streaming options with minimal overhead."""

DEBUG_OPTIONS = StreamingOptions(
    capture_raw_events=True,
    log_streaming_metrics=True
)
"""Options for debugging with raw events and metrics logging."""
