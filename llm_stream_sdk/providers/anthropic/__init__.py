from .adapter import AnthropicProvider
from .streaming import AnthropicStreamNormalizer, normalize_anthropic_stream

__all__ = ["AnthropicProvider", "AnthropicStreamNormalizer", "normalize_anthropic_stream"]
