"""OpenAI client.

Used for chat turns with function calling, and for short utility prompts such
as chat titles.
"""

import json
import os
from typing import Any

from openai import AsyncOpenAI
from openai import APIError, AuthenticationError, RateLimitError

from .client import (
    LLMClient,
    LLMError,
    LLMAuthError,
    LLMRateLimitError,
    LLMTurn,
    ToolCall,
)


def to_openai_messages(
    messages: list[dict[str, Any]], system_prompt: str | None = None
) -> list[dict[str, Any]]:
    """Convert neutral messages to Chat Completions messages."""
    converted: list[dict[str, Any]] = []
    if system_prompt:
        converted.append({"role": "system", "content": system_prompt})

    for message in messages:
        role = message["role"]

        if role == "user":
            converted.append({"role": "user", "content": message["content"]})

        elif role == "assistant":
            entry: dict[str, Any] = {"role": "assistant", "content": message.get("content") or None}
            if message.get("tool_calls"):
                entry["tool_calls"] = [
                    {
                        "id": call["id"],
                        "type": "function",
                        "function": {
                            "name": call["name"],
                            "arguments": json.dumps(call["arguments"]),
                        },
                    }
                    for call in message["tool_calls"]
                ]
            converted.append(entry)

        elif role == "tool":
            converted.append(
                {
                    "role": "tool",
                    "tool_call_id": message["tool_call_id"],
                    "content": message["content"],
                }
            )

        else:
            raise LLMError(f"Unsupported message role: {role}")

    return converted


def to_openai_tools(tools: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return [
        {
            "type": "function",
            "function": {
                "name": tool["name"],
                "description": tool["description"],
                "parameters": tool["input_schema"],
            },
        }
        for tool in tools
    ]


class OpenAIClient(LLMClient):
    """OpenAI chat client."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-4o-mini",
        organization: str | None = None,
    ):
        """Initialize OpenAI client.

        Args:
            api_key: OpenAI API key (defaults to OPENAI_API_KEY env var)
            model: Model to use (default: gpt-4o-mini)
            organization: Optional organization ID
        """
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not self.api_key:
            raise LLMAuthError("OPENAI_API_KEY not found in environment")

        self.client = AsyncOpenAI(
            api_key=self.api_key,
            organization=organization,
        )
        self._model = model

    @property
    def model_name(self) -> str:
        """Return model identifier."""
        return self._model

    def _token_params(self, max_tokens: int, temperature: float | None = None) -> dict[str, Any]:
        # GPT-5 family: max_completion_tokens, and only the default temperature
        if self._model.startswith("gpt-5"):
            return {"max_completion_tokens": max_tokens}
        params: dict[str, Any] = {"max_tokens": max_tokens}
        if temperature is not None:
            params["temperature"] = temperature
        return params

    async def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 2000,
        **kwargs: Any,
    ) -> str:
        """Generate text completion.

        Raises:
            LLMAuthError: Invalid API key
            LLMRateLimitError: Rate limit exceeded
            LLMError: Other API errors
        """
        messages = to_openai_messages([{"role": "user", "content": prompt}], system_prompt)

        try:
            response = await self.client.chat.completions.create(
                model=self._model,
                messages=messages,
                **self._token_params(max_tokens, temperature),
                **kwargs,
            )
        except AuthenticationError as e:
            raise LLMAuthError(f"OpenAI authentication failed: {e}")
        except RateLimitError as e:
            raise LLMRateLimitError(f"OpenAI rate limit exceeded: {e}")
        except APIError as e:
            raise LLMError(f"OpenAI API error: {e}")

        return response.choices[0].message.content or ""

    async def count_tokens(self, text: str) -> int:
        """Approximate token count (~4 characters per token)."""
        return len(text) // 4

    async def respond(
        self,
        messages: list[dict[str, Any]],
        system_prompt: str | None = None,
        tools: list[dict[str, Any]] | None = None,
        max_tokens: int = 4096,
    ) -> LLMTurn:
        """Run one Chat Completions call with function declarations."""
        params: dict[str, Any] = {
            "model": self._model,
            "messages": to_openai_messages(messages, system_prompt),
            **self._token_params(max_tokens),
        }
        if tools:
            params["tools"] = to_openai_tools(tools)

        try:
            response = await self.client.chat.completions.create(**params)
        except AuthenticationError as e:
            raise LLMAuthError(f"OpenAI authentication failed: {e}")
        except RateLimitError as e:
            raise LLMRateLimitError(f"OpenAI rate limit exceeded: {e}")
        except APIError as e:
            raise LLMError(f"OpenAI API error: {e}")

        choice = response.choices[0]
        tool_calls = []
        for call in choice.message.tool_calls or []:
            try:
                arguments = json.loads(call.function.arguments or "{}")
            except json.JSONDecodeError as e:
                raise LLMError(f"Model returned invalid tool arguments for {call.function.name}: {e}")
            tool_calls.append(ToolCall(id=call.id, name=call.function.name, arguments=arguments))

        return LLMTurn(
            text=choice.message.content or "",
            tool_calls=tool_calls,
            stop_reason=choice.finish_reason,
        )
