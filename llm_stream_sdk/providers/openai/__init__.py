from .adapter import OpenAIProvider
from .streaming import OpenAIStreamNormalizer, normalize_openai_stream

__all__ = ["OpenAIProvider", "OpenAIStreamNormalizer", "normalize_openai_stream"]
