"""
In-process chat store.

Chats live for the lifetime of the API process. Messages use the neutral
format consumed by ``octo_agents.run_chat_turn``.
"""

import asyncio
import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Chat(BaseModel):
    """A conversation and its message history."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str | None = None
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)
    messages: list[dict[str, Any]] = Field(default_factory=list)


class ChatStore:
    """Async-safe dictionary of chats keyed by id."""

    def __init__(self):
        self._chats: dict[str, Chat] = {}
        self._lock = asyncio.Lock()

    async def create(self, title: str | None = None) -> Chat:
        chat = Chat(title=title)
        async with self._lock:
            self._chats[chat.id] = chat
        return chat

    async def get(self, chat_id: str) -> Chat | None:
        async with self._lock:
            return self._chats.get(chat_id)

    async def list_chats(self) -> list[Chat]:
        """All chats, most recently updated first."""
        async with self._lock:
            return sorted(self._chats.values(), key=lambda c: c.updated_at, reverse=True)

    async def delete(self, chat_id: str) -> bool:
        async with self._lock:
            return self._chats.pop(chat_id, None) is not None

    async def set_title(self, chat_id: str, title: str) -> None:
        async with self._lock:
            chat = self._chats[chat_id]
            chat.title = title
            chat.updated_at = _now()

    async def append_messages(self, chat_id: str, messages: list[dict[str, Any]]) -> None:
        async with self._lock:
            chat = self._chats[chat_id]
            chat.messages.extend(messages)
            chat.updated_at = _now()
