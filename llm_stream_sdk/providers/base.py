"""
Base Provider Interface

This module defines the abstract base class for all model providers.
A provider turns a backend's native stream into canonical stream events;
aggregation into a complete ``Message`` is shared by every provider through
``stream_aggregated``.
"""

import inspect
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Any, AsyncGenerator, List, Optional, Union

from ..models.events import ModelStreamEvent
from ..models.messages import Message
from ..models.streaming import DEFAULT_OPTIONS, StreamingOptions
from ..observability.logging import new_request_id
from ..streaming import AggregatedStream


class ProviderError(Exception):
    """
    Error reported by a backend inside its event stream.

    Transport and API errors raised by a backend client propagate unchanged;
    this is only raised when the backend delivers an error as a stream event.

    Attributes:
        message: Error message
        provider: Provider name
        error_type: Backend error type (e.g. "throttlingException")
        status_code: HTTP status code if applicable
    """

    def __init__(
        self,
        message: str,
        provider: str,
        error_type: Optional[str] = None,
        status_code: Optional[int] = None
    ):
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.error_type = error_type
        self.status_code = status_code


def get_field(obj: Any, name: str, default: Any = None) -> Any:
    """Read ``name`` from a dict or an object attribute."""
    if obj is None:
        return default
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


def to_messages(messages: Union[str, List[Message]]) -> List[Message]:
    """Accept a plain prompt string for backward compatibility."""
    if isinstance(messages, str):
        return [Message.user(messages)]
    return list(messages)


async def close_stream(stream: Any) -> None:
    """Close a backend stream if it supports closing."""
    for name in ("aclose", "close"):
        close = getattr(stream, name, None)
        if callable(close):
            result = close()
            if inspect.isawaitable(result):
                await result
            return


class ModelProvider(ABC):
    """
    Abstract base class for model providers.

    The provider is responsible for:
    - Building the backend request from input messages
    - Calling the backend client in streaming mode
    - Normalizing native stream events to canonical events

    Aggregation, metrics and the final ``Message`` are handled by
    ``AggregatedStream`` and are the same for every provider.
    """

    def __init__(
        self,
        model_id: str,
        client: Any = None,
        options: Optional[StreamingOptions] = None
    ):
        self.model_id = model_id
        self._client = client
        self.options = options or DEFAULT_OPTIONS

    @abstractmethod
    def stream(
        self,
        messages: Union[str, List[Message]],
        system_prompt: Optional[str] = None,
        options: Optional[StreamingOptions] = None,
        **params
    ) -> AsyncGenerator[ModelStreamEvent, None]:
        """
        Stream canonical events for one model response.

        Implementations are async generators: nothing is sent to the
        backend until the first event is requested.

        Args:
            messages: Either a string prompt or list of messages
            system_prompt: Optional system prompt
            options: Streaming options; defaults to the provider's options
            **params: Backend request parameters (e.g. max_tokens, temperature)

        Yields:
            ModelStreamEvent: Canonical events in arrival order
        """

    def stream_aggregated(
        self,
        messages: Union[str, List[Message]],
        system_prompt: Optional[str] = None,
        options: Optional[StreamingOptions] = None,
        **params
    ) -> AggregatedStream:
        """
        Stream one response and aggregate it into a ``Message``.

        The returned stream yields every canonical event plus each finished
        content block; the final message is available from it once the
        stream completes.
        """
        options = options or self.options
        if options.request_id is None:
            options = replace(options, request_id=new_request_id())

        events = self.stream(messages, system_prompt=system_prompt, options=options, **params)
        return AggregatedStream(
            events,
            options,
            provider=self.get_provider_name(),
            model=self.model_id
        )

    def is_available(self) -> bool:
        """Check if the provider has a client or the credentials to build one."""
        return self._client is not None

    def get_provider_name(self) -> str:
        """
        Get the name of this provider.

        By default, returns the class name without 'Provider' suffix.

        Returns:
            str: The provider name (e.g., "openai", "anthropic")
        """
        class_name = self.__class__.__name__
        if class_name.endswith("Provider"):
            return class_name[:-8].lower()
        return class_name.lower()
