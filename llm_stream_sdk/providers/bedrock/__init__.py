from .adapter import BedrockProvider
from .streaming import convert_bedrock_event, normalize_bedrock_stream

__all__ = ["BedrockProvider", "convert_bedrock_event", "normalize_bedrock_stream"]
