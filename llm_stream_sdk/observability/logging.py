"""
Key-value log records for the aggregation pipeline.

Every record is emitted on ``llm_stream_sdk.<component>``, where the
component is either the aggregator or a backend name, and starts with a
bracketed ``key=value`` prefix. Fields whose value is ``None`` are left
out, so one call site can pass optional context without branching::

    [component=anthropic model=claude-3 request_id=1a2b3c4d method=stream] Completed stream request
"""

import logging
import time
import uuid
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Optional

ErrorClassifier = Callable[[Exception], Dict[str, Any]]


def new_request_id() -> str:
    """Short id correlating one response across logs and metrics."""
    return str(uuid.uuid4())[:8]


def _elapsed_ms(started: float) -> int:
    return int((time.time() - started) * 1000)


class StreamLogger:
    """Logger bound to one pipeline component such as "aggregator" or "bedrock"."""

    def __init__(self, component: str):
        self.component = component
        self.logger = logging.getLogger(f"llm_stream_sdk.{component}")

    def _log(self, level: int, message: str, model: Optional[str],
             request_id: Optional[str], fields: Dict[str, Any]) -> None:
        if not self.logger.isEnabledFor(level):
            return
        context = {"component": self.component, "model": model, "request_id": request_id, **fields}
        prefix = " ".join(f"{key}={value}" for key, value in context.items() if value is not None)
        self.logger.log(level, f"[{prefix}] {message}")

    def debug(self, message: str, model: Optional[str] = None,
              request_id: Optional[str] = None, **fields):
        self._log(logging.DEBUG, message, model, request_id, fields)

    def info(self, message: str, model: Optional[str] = None,
             request_id: Optional[str] = None, **fields):
        self._log(logging.INFO, message, model, request_id, fields)

    def error(self, message: str, model: Optional[str] = None,
              request_id: Optional[str] = None, error: Optional[Exception] = None, **fields):
        """Log a failure; ``error`` contributes its class name and text."""
        if error is not None:
            fields["error_type"] = type(error).__name__
            fields["error_msg"] = str(error)
        self._log(logging.ERROR, message, model, request_id, fields)

    @contextmanager
    def track_stream(self, method: str, model: Optional[str] = None,
                     request_id: Optional[str] = None,
                     classify: Optional[ErrorClassifier] = None) -> Iterator[Dict[str, Any]]:
        """
        Time one backend call and log how it ended.

        A failure is logged with the exception plus whatever ``classify``
        returns for it (for example ``ErrorMapper.classify`` adds
        ``retryable`` and ``status_code``), then re-raised unchanged.

        Args:
            method: Name of the backend operation, e.g. "stream"
            model: Model the call targets
            request_id: Correlation id; a fresh one is made when omitted
            classify: Maps the raised exception to extra log fields

        Yields:
            Dict with ``request_id``, ``model``, ``method`` and ``start_time``
        """
        request_id = request_id or new_request_id()
        started = time.time()
        self.debug(f"Starting {method} request", model=model, request_id=request_id, method=method)

        try:
            yield {"request_id": request_id, "model": model, "method": method, "start_time": started}
        except Exception as e:
            self.error(
                f"Failed {method} request",
                model=model,
                request_id=request_id,
                error=e,
                method=method,
                duration_ms=_elapsed_ms(started),
                **(classify(e) if classify else {})
            )
            raise

        self.info(
            f"Completed {method} request",
            model=model,
            request_id=request_id,
            method=method,
            duration_ms=_elapsed_ms(started)
        )

    def log_usage(self, usage: Any, model: Optional[str], request_id: Optional[str]):
        """Record the token counts of a finished message."""
        self.info(
            "Token usage",
            model=model,
            request_id=request_id,
            input_tokens=usage.input_tokens,
            output_tokens=usage.output_tokens,
            total_tokens=usage.total_tokens,
            cache_read_tokens=usage.cache_read_input_tokens or None,
            cache_write_tokens=usage.cache_write_input_tokens or None
        )

    def log_streaming_metrics(self, metrics: Dict[str, Any], model: Optional[str],
                              request_id: Optional[str]):
        """Summarize a ``StreamingMetrics.to_dict()`` in one record."""
        self.info(
            "Streaming metrics",
            model=model,
            request_id=request_id,
            events=metrics.get("total_events"),
            deltas=metrics.get("total_deltas"),
            blocks=metrics.get("blocks_completed"),
            text_chars=metrics.get("text_chars"),
            duration_ms=int(metrics.get("duration_ms", 0)),
            stop_reason=metrics.get("stop_reason")
        )
