from .anthropic_provider import AnthropicProvider
from .gemini import GeminiProvider
from .huggingface import HuggingFaceProvider
from .openai_provider import OpenAIProvider

__all__ = [
    "AnthropicProvider",
    "GeminiProvider",
    "HuggingFaceProvider",
    "OpenAIProvider",
]
