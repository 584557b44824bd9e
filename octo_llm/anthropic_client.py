"""Anthropic Claude client.

Used for chat turns with native tool use.
"""

import json
import os
from typing import Any

from anthropic import AsyncAnthropic
from anthropic import APIError, AuthenticationError, RateLimitError

from .client import (
    LLMClient,
    LLMError,
    LLMAuthError,
    LLMRateLimitError,
    LLMTurn,
    ToolCall,
)


def to_anthropic_messages(messages: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Convert neutral messages to Anthropic content blocks.

    Consecutive tool results are folded into one user message, as the
    Messages API requires.
    """
    converted: list[dict[str, Any]] = []

    for message in messages:
        role = message["role"]

        if role == "user":
            converted.append({"role": "user", "content": message["content"]})

        elif role == "assistant":
            blocks: list[dict[str, Any]] = []
            if message.get("content"):
                blocks.append({"type": "text", "text": message["content"]})
            for call in message.get("tool_calls", []):
                blocks.append(
                    {
                        "type": "tool_use",
                        "id": call["id"],
                        "name": call["name"],
                        "input": call["arguments"],
                    }
                )
            converted.append({"role": "assistant", "content": blocks})

        elif role == "tool":
            block = {
                "type": "tool_result",
                "tool_use_id": message["tool_call_id"],
                "content": message["content"],
                "is_error": message.get("is_error", False),
            }
            previous = converted[-1] if converted else None
            if (
                previous
                and previous["role"] == "user"
                and isinstance(previous["content"], list)
                and all(b.get("type") == "tool_result" for b in previous["content"])
            ):
                previous["content"].append(block)
            else:
                converted.append({"role": "user", "content": [block]})

        else:
            raise LLMError(f"Unsupported message role: {role}")

    return converted


class AnthropicClient(LLMClient):
    """Claude client for chat turns and tool use."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "claude-sonnet-4-5",
    ):
        """Initialize Anthropic client.

        Args:
            api_key: Anthropic API key (defaults to ANTHROPIC_API_KEY env var)
            model: Model to use (default: claude-sonnet-4-5)
        """
        self.api_key = api_key or os.getenv("ANTHROPIC_API_KEY")
        if not self.api_key:
            raise LLMAuthError("ANTHROPIC_API_KEY not found in environment")

        self.client = AsyncAnthropic(api_key=self.api_key)
        self._model = model

    @property
    def model_name(self) -> str:
        """Return model identifier."""
        return self._model

    async def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 2000,
        **kwargs: Any,
    ) -> str:
        """Generate text completion using Claude.

        Raises:
            LLMAuthError: Invalid API key
            LLMRateLimitError: Rate limit exceeded
            LLMError: Other API errors
        """
        try:
            response = await self.client.messages.create(
                model=self._model,
                max_tokens=max_tokens,
                temperature=temperature,
                system=system_prompt or "",
                messages=[{"role": "user", "content": prompt}],
                **kwargs,
            )
        except AuthenticationError as e:
            raise LLMAuthError(f"Anthropic authentication failed: {e}")
        except RateLimitError as e:
            raise LLMRateLimitError(f"Anthropic rate limit exceeded: {e}")
        except APIError as e:
            raise LLMError(f"Anthropic API error: {e}")

        text_blocks = [block.text for block in response.content if block.type == "text"]
        return "\n".join(text_blocks)

    async def count_tokens(self, text: str) -> int:
        """Count tokens using Anthropic's count API.

        Args:
            text: Text to count

        Returns:
            Token count
        """
        try:
            response = await self.client.messages.count_tokens(
                model=self._model,
                messages=[{"role": "user", "content": text}],
            )
        except AuthenticationError as e:
            raise LLMAuthError(f"Anthropic authentication failed: {e}")
        except RateLimitError as e:
            raise LLMRateLimitError(f"Anthropic rate limit exceeded: {e}")
        except APIError as e:
            raise LLMError(f"Anthropic API error: {e}")
        return response.input_tokens

    async def respond(
        self,
        messages: list[dict[str, Any]],
        system_prompt: str | None = None,
        tools: list[dict[str, Any]] | None = None,
        max_tokens: int = 4096,
    ) -> LLMTurn:
        """Run one Messages API call with tool declarations."""
        params: dict[str, Any] = {
            "model": self._model,
            "max_tokens": max_tokens,
            "system": system_prompt or "",
            "messages": to_anthropic_messages(messages),
        }
        if tools:
            params["tools"] = tools

        try:
            response = await self.client.messages.create(**params)
        except AuthenticationError as e:
            raise LLMAuthError(f"Anthropic authentication failed: {e}")
        except RateLimitError as e:
            raise LLMRateLimitError(f"Anthropic rate limit exceeded: {e}")
        except APIError as e:
            raise LLMError(f"Anthropic API error: {e}")

        text_parts: list[str] = []
        tool_calls: list[ToolCall] = []
        for block in response.content:
            if block.type == "text":
                text_parts.append(block.text)
            elif block.type == "tool_use":
                arguments = block.input
                if isinstance(arguments, str):
                    arguments = json.loads(arguments or "{}")
                tool_calls.append(ToolCall(id=block.id, name=block.name, arguments=arguments))

        return LLMTurn(
            text="\n".join(text_parts),
            tool_calls=tool_calls,
            stop_reason=response.stop_reason,
        )
