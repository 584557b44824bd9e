"""LLM Router - resolves ``<provider>/<model>`` identifiers to clients.

The chat UI names models as ``anthropic/claude-sonnet-4-5`` or
``openai/gpt-4o-mini``; the router splits the provider prefix off and hands
back a client for the model.
"""

from typing import Any

from .client import LLMClient, LLMError
from .openai_client import OpenAIClient
from .anthropic_client import AnthropicClient


AVAILABLE_MODELS: list[dict[str, str]] = [
    {"label": "Claude Opus 4.1", "value": "anthropic/claude-opus-4-1", "icon": "i-simple-icons-anthropic"},
    {"label": "Claude Sonnet 4.5", "value": "anthropic/claude-sonnet-4-5", "icon": "i-simple-icons-anthropic"},
    {"label": "GPT-4o mini", "value": "openai/gpt-4o-mini", "icon": "i-simple-icons-openai"},
    {"label": "GPT-5 nano", "value": "openai/gpt-5-nano", "icon": "i-simple-icons-openai"},
]


def split_model_id(model_id: str) -> tuple[str, str]:
    """Split ``provider/model``; raises ``LLMError`` on malformed ids."""
    provider, sep, model = model_id.partition("/")
    if not sep or not provider or not model:
        raise LLMError(f"Model id must look like '<provider>/<model>', got {model_id!r}")
    return provider, model


class LLMRouter:
    """Builds and caches one client per model id."""

    PROVIDERS = {
        "anthropic": AnthropicClient,
        "openai": OpenAIClient,
    }

    def __init__(
        self,
        anthropic_api_key: str | None = None,
        openai_api_key: str | None = None,
    ):
        """Initialize router with provider credentials.

        Args:
            anthropic_api_key: Falls back to ANTHROPIC_API_KEY
            openai_api_key: Falls back to OPENAI_API_KEY
        """
        self._api_keys: dict[str, str | None] = {
            "anthropic": anthropic_api_key or None,
            "openai": openai_api_key or None,
        }
        self._clients: dict[str, LLMClient] = {}

    def for_model(self, model_id: str) -> LLMClient:
        """Return the client for ``model_id``.

        Raises:
            LLMError: unknown provider or malformed id
            LLMAuthError: provider key missing
        """
        if model_id in self._clients:
            return self._clients[model_id]

        provider, model = split_model_id(model_id)
        client_cls: Any = self.PROVIDERS.get(provider)
        if client_cls is None:
            known = ", ".join(sorted(self.PROVIDERS))
            raise LLMError(f"Unknown LLM provider {provider!r} (known: {known})")

        client = client_cls(api_key=self._api_keys.get(provider), model=model)
        self._clients[model_id] = client
        return client
