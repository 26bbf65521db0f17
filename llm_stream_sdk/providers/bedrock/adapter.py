import inspect
from typing import Any, AsyncGenerator, List, Optional, Union

from ..base import ModelProvider, close_stream, to_messages
from ..errors import ErrorMapper
from ...models.events import ModelStreamEvent
from ...models.messages import Message
from ...models.streaming import StreamingOptions
from ...observability.logging import StreamLogger
from .payloads import build_converse_request
from .streaming import normalize_bedrock_stream


logger = StreamLogger("bedrock")


class BedrockProvider(ModelProvider):
    """Amazon Bedrock Converse provider.

    The client is supplied by the caller: a boto3 ``bedrock-runtime`` client
    or any object whose ``converse_stream`` returns (or resolves to) a dict
    with a ``stream`` entry.
    """

    def __init__(self, model_id: str, client: Any, options: Optional[StreamingOptions] = None):
        if client is None:
            raise ValueError("BedrockProvider requires a bedrock-runtime client")
        super().__init__(model_id, client=client, options=options)

    @property
    def client(self) -> Any:
        return self._client

    async def stream(
        self,
        messages: Union[str, List[Message]],
        system_prompt: Optional[str] = None,
        options: Optional[StreamingOptions] = None,
        **params
    ) -> AsyncGenerator[ModelStreamEvent, None]:
        """Stream canonical events from ``converse_stream``."""
        options = options or self.options
        request = build_converse_request(self.model_id, to_messages(messages), system_prompt, **params)

        with logger.track_stream("stream", self.model_id, request_id=options.request_id,
                                 classify=ErrorMapper.classify):
            response = self.client.converse_stream(**request)
            if inspect.isawaitable(response):
                response = await response

            native_stream = response["stream"]
            try:
                async for event in normalize_bedrock_stream(
                    native_stream, capture_raw_events=options.capture_raw_events
                ):
                    yield event
            finally:
                await close_stream(native_stream)
