import os
from typing import Any, AsyncGenerator, List, Optional, Union

from anthropic import AsyncAnthropic
from dotenv import load_dotenv

from ..base import ModelProvider, close_stream, to_messages
from ..errors import ErrorMapper
from ...models.events import ModelStreamEvent
from ...models.messages import Message
from ...models.streaming import StreamingOptions
from ...observability.logging import StreamLogger
from .payloads import build_messages_request
from .streaming import normalize_anthropic_stream


logger = StreamLogger("anthropic")


class AnthropicProvider(ModelProvider):
    """Anthropic Messages API provider."""

    def __init__(
        self,
        model_id: str,
        client: Optional[Any] = None,
        options: Optional[StreamingOptions] = None,
        api_key: Optional[str] = None
    ):
        super().__init__(model_id, client=client, options=options)
        if api_key is None:
            load_dotenv()
            api_key = os.getenv("ANTHROPIC_API_KEY")
        self._api_key = api_key

    @property
    def client(self) -> Any:
        """Lazy initialization of the Anthropic client."""
        if self._client is None:
            if not self._api_key:
                raise RuntimeError("Anthropic API key not found in environment variables")
            self._client = AsyncAnthropic(api_key=self._api_key)
        return self._client

    def is_available(self) -> bool:
        return self._client is not None or bool(self._api_key)

    async def stream(
        self,
        messages: Union[str, List[Message]],
        system_prompt: Optional[str] = None,
        options: Optional[StreamingOptions] = None,
        **params
    ) -> AsyncGenerator[ModelStreamEvent, None]:
        """Stream canonical events from ``messages.create(stream=True)``."""
        options = options or self.options
        request = build_messages_request(self.model_id, to_messages(messages), system_prompt, **params)

        with logger.track_stream("stream", self.model_id, request_id=options.request_id,
                                 classify=ErrorMapper.classify):
            response = await self.client.messages.create(**request)
            try:
                async for event in normalize_anthropic_stream(
                    response, capture_raw_events=options.capture_raw_events
                ):
                    yield event
            finally:
                await close_stream(response)
