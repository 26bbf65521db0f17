"""
Error classification utilities for providers.

Client errors are never wrapped or retried here; these helpers only compute
the fields attached to failure log records so retryable failures can be
told apart from permanent ones.
"""

from typing import Any, Dict, Optional

import httpx


RATE_LIMIT_PHRASES = ("rate limit", "too many requests", "quota exceeded", "too_many_requests", "throttl")


class ErrorMapper:
    """Classifies provider and transport errors for logging."""

    # Common HTTP status codes that indicate retryable errors
    RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}

    @staticmethod
    def get_status_code(error: Exception) -> Optional[int]:
        """Extract an HTTP status code from an SDK or httpx error."""
        status_code = getattr(error, "status_code", None)
        if isinstance(status_code, int):
            return status_code
        if isinstance(error, httpx.HTTPStatusError):
            return error.response.status_code
        return None

    @staticmethod
    def is_retryable(error: Exception) -> bool:
        """
        Determine if an error is retryable.

        Args:
            error: The exception to check

        Returns:
            bool: True if the error is retryable
        """
        status_code = ErrorMapper.get_status_code(error)
        if status_code is not None and status_code in ErrorMapper.RETRYABLE_STATUS_CODES:
            return True

        if isinstance(error, (httpx.TimeoutException, httpx.ConnectError)):
            return True

        # Rate limits reported without a status code, e.g. Bedrock stream exceptions
        messages = [str(error)]
        for attr in ("message", "error_type"):
            value = getattr(error, attr, None)
            if value:
                messages.append(str(value))
        text = " ".join(messages).lower()
        return any(phrase in text for phrase in RATE_LIMIT_PHRASES)

    @staticmethod
    def classify(error: Exception) -> Dict[str, Any]:
        """Fields describing ``error`` for a failure log record."""
        return {
            "retryable": ErrorMapper.is_retryable(error),
            "status_code": ErrorMapper.get_status_code(error),
        }
