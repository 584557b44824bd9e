"""Octo Agents.

Chat agent loop that drives tool registries during conversation turns.
"""

from .chat_loop import (
    ChatTurnResult,
    PendingApproval,
    generate_chat_title,
    run_chat_turn,
    tool_declarations,
)
from .prompts import build_system_prompt

__all__ = [
    "ChatTurnResult",
    "PendingApproval",
    "build_system_prompt",
    "generate_chat_title",
    "run_chat_turn",
    "tool_declarations",
]
