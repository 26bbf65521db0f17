"""Unit tests for provider request building, error classification and client setup."""

import httpx
import pytest
from unittest.mock import patch

from llm_stream_sdk.models.messages import Message, Role, TextBlock, ToolUseBlock
from llm_stream_sdk.providers import AnthropicProvider, BedrockProvider, OpenAIProvider
from llm_stream_sdk.providers.anthropic.payloads import DEFAULT_MAX_TOKENS, build_messages_request
from llm_stream_sdk.providers.base import ProviderError, get_field, to_messages
from llm_stream_sdk.providers.bedrock.payloads import build_converse_request
from llm_stream_sdk.providers.errors import ErrorMapper
from llm_stream_sdk.providers.openai.payloads import build_chat_request
from tests.helpers.mock_exceptions import (
    MockAuthenticationError,
    MockBadRequestError,
    MockRateLimitError,
    MockServerError,
)


WEATHER_TOOL = {
    "name": "get_weather",
    "description": "Current weather",
    "input_schema": {"type": "object", "properties": {"city": {"type": "string"}}},
}


@pytest.fixture
def conversation():
    return [
        Message.user("Weather in Paris?"),
        Message(
            role=Role.ASSISTANT,
            content=[
                TextBlock(text="Checking."),
                ToolUseBlock(tool_use_id="t1", name="get_weather", input={"city": "Paris"}),
            ]
        ),
    ]


class TestHelpers:
    """Shared provider helpers."""

    def test_to_messages_wraps_prompt(self):
        assert to_messages("hi") == [Message.user("hi")]

    def test_get_field(self):
        assert get_field({"a": 1}, "a") == 1
        assert get_field({"a": 1}, "b", 2) == 2
        assert get_field(None, "a", 3) == 3


class TestPayloads:
    """Backend request building."""

    def test_converse_request(self, conversation):
        request = build_converse_request(
            "anthropic.claude-3-haiku",
            conversation,
            system_prompt="Be brief",
            tools=[WEATHER_TOOL],
            max_tokens=100,
            temperature=0.2,
            top_k=5
        )

        assert request["modelId"] == "anthropic.claude-3-haiku"
        assert request["system"] == [{"text": "Be brief"}]
        assert request["inferenceConfig"] == {"maxTokens": 100, "temperature": 0.2}
        assert request["additionalModelRequestFields"] == {"top_k": 5}
        assert request["messages"][1]["content"][1] == {
            "toolUse": {"toolUseId": "t1", "name": "get_weather", "input": {"city": "Paris"}}
        }
        assert request["toolConfig"]["tools"][0]["toolSpec"]["inputSchema"]["json"] == WEATHER_TOOL["input_schema"]

    def test_messages_request(self, conversation):
        request = build_messages_request("claude-3-haiku", conversation, tools=[WEATHER_TOOL])

        assert request["stream"] is True
        assert request["max_tokens"] == DEFAULT_MAX_TOKENS
        assert "system" not in request
        assert request["tools"] == [WEATHER_TOOL]
        assert request["messages"][1]["content"][1] == {
            "type": "tool_use", "id": "t1", "name": "get_weather", "input": {"city": "Paris"}
        }

    def test_chat_request(self, conversation):
        request = build_chat_request("gpt-4o-mini", conversation, system_prompt="Be brief", temperature=None)

        assert request["stream_options"] == {"include_usage": True}
        assert "temperature" not in request
        assert request["messages"][0] == {"role": "system", "content": "Be brief"}
        assistant = request["messages"][2]
        assert assistant["content"] == "Checking."
        assert assistant["tool_calls"][0]["function"] == {
            "name": "get_weather",
            "arguments": '{"city": "Paris"}',
        }


class TestErrorMapper:
    """Retryability classification for failure logs."""

    @pytest.mark.parametrize("error,retryable", [
        (MockRateLimitError(), True),
        (MockServerError(status_code=503), True),
        (MockAuthenticationError(), False),
        (MockBadRequestError(), False),
        (httpx.ConnectError("Connection refused"), True),
        (httpx.ReadTimeout("Timed out"), True),
        (ValueError("Too many requests, slow down"), True),
        (ProviderError("Rate exceeded", "bedrock", error_type="throttlingException"), True),
        (ProviderError("Bad input", "bedrock", error_type="validationException"), False),
    ])
    def test_is_retryable(self, error, retryable):
        assert ErrorMapper.is_retryable(error) is retryable

    def test_classify(self):
        assert ErrorMapper.classify(MockServerError(status_code=502)) == {"retryable": True, "status_code": 502}
        assert ErrorMapper.classify(ValueError("boom")) == {"retryable": False, "status_code": None}


class TestProviderSetup:
    """Client configuration and availability."""

    def test_bedrock_requires_client(self):
        with pytest.raises(ValueError):
            BedrockProvider("model", client=None)

    def test_provider_names(self, mock_bedrock_client, mock_anthropic_client, mock_openai_client):
        assert BedrockProvider("m", mock_bedrock_client).get_provider_name() == "bedrock"
        assert AnthropicProvider("m", mock_anthropic_client).get_provider_name() == "anthropic"
        assert OpenAIProvider("m", mock_openai_client).get_provider_name() == "openai"

    def test_available_with_env_key(self, mock_env_vars):
        assert AnthropicProvider("claude").is_available()
        assert OpenAIProvider("gpt").is_available()

    def test_unavailable_without_key(self, no_api_keys):
        provider = OpenAIProvider("gpt")
        assert not provider.is_available()
        with pytest.raises(RuntimeError):
            provider.client

    def test_client_built_lazily(self, mock_env_vars):
        with patch("llm_stream_sdk.providers.anthropic.adapter.AsyncAnthropic") as client_class:
            provider = AnthropicProvider("claude")
            client_class.assert_not_called()

            client = provider.client
            client_class.assert_called_once_with(api_key="test-anthropic-key")
            assert provider.client is client
