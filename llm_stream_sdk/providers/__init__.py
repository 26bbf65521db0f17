"""
Providers Layer

This layer contains all backend-specific implementations.
Each provider builds the backend request, calls the caller-supplied (or
lazily built) client in streaming mode, and normalizes the native stream
into canonical stream events.
"""

from .base import ModelProvider, ProviderError
from .bedrock.adapter import BedrockProvider
from .anthropic.adapter import AnthropicProvider
from .openai.adapter import OpenAIProvider
from .errors import ErrorMapper

__all__ = [
    "ModelProvider",
    "ProviderError",
    "ErrorMapper",
    "BedrockProvider",
    "AnthropicProvider",
    "OpenAIProvider",
]
