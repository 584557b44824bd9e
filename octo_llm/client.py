"""Base LLM client interface.

Defines the contract that all LLM clients must implement, and the
provider-neutral message format the chat loop works in:

    {"role": "user", "content": "..."}
    {"role": "assistant", "content": "...", "tool_calls": [{"id", "name", "arguments"}]}
    {"role": "tool", "tool_call_id": "...", "name": "...", "content": "...", "is_error": False}

Each client converts this list to its provider's wire format.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ToolCall:
    """A tool invocation requested by the model."""

    id: str
    name: str
    arguments: dict[str, Any]

    def as_message_part(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "arguments": self.arguments}


@dataclass
class LLMTurn:
    """One model response: text plus any requested tool calls."""

    text: str = ""
    tool_calls: list[ToolCall] = field(default_factory=list)
    stop_reason: str | None = None

    def as_message(self) -> dict[str, Any]:
        """Assistant message in the neutral format."""
        message: dict[str, Any] = {"role": "assistant", "content": self.text}
        if self.tool_calls:
            message["tool_calls"] = [call.as_message_part() for call in self.tool_calls]
        return message


class LLMClient(ABC):
    """Abstract base class for LLM clients."""

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 2000,
        **kwargs: Any,
    ) -> str:
        """Generate text completion from prompt.

        Args:
            prompt: User prompt or question
            system_prompt: Optional system instructions
            temperature: Sampling temperature (0.0-1.0)
            max_tokens: Maximum tokens to generate
            **kwargs: Additional model-specific parameters

        Returns:
            Generated text response

        Raises:
            LLMError: If generation fails
        """
        pass

    @abstractmethod
    async def respond(
        self,
        messages: list[dict[str, Any]],
        system_prompt: str | None = None,
        tools: list[dict[str, Any]] | None = None,
        max_tokens: int = 4096,
    ) -> LLMTurn:
        """Continue a conversation, letting the model call tools.

        Args:
            messages: Conversation in the neutral message format
            system_prompt: Optional system instructions
            tools: Tool declarations ``{"name", "description", "input_schema"}``
            max_tokens: Maximum tokens to generate

        Returns:
            The model's turn

        Raises:
            LLMError: If the call fails
        """
        pass

    @abstractmethod
    async def count_tokens(self, text: str) -> int:
        """Count tokens in text using the model's tokenizer.

        Args:
            text: Text to count tokens for

        Returns:
            Number of tokens
        """
        pass

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Return the model identifier (e.g., 'gpt-4o', 'claude-sonnet-4-5')."""
        pass


class LLMError(Exception):
    """Base exception for LLM client errors."""

    pass


class LLMAuthError(LLMError):
    """Authentication error with LLM provider."""

    pass


class LLMRateLimitError(LLMError):
    """Rate limit exceeded."""

    pass
