"""Octo LLM Integration.

Provider clients with tool calling, routed by ``<provider>/<model>`` id:
- Anthropic (Claude)
- OpenAI (GPT)
"""

from .client import LLMClient, LLMError, LLMAuthError, LLMRateLimitError, LLMTurn, ToolCall
from .anthropic_client import AnthropicClient
from .openai_client import OpenAIClient
from .router import AVAILABLE_MODELS, LLMRouter

__all__ = [
    "LLMClient",
    "LLMError",
    "LLMAuthError",
    "LLMRateLimitError",
    "LLMTurn",
    "ToolCall",
    "AnthropicClient",
    "OpenAIClient",
    "LLMRouter",
    "AVAILABLE_MODELS",
]
