"""Chat Agent Loop: Model → Tools → Model.

Drives one conversation turn against a tool registry. The registry only
flags write tools as needing approval; this loop is where the flag is
enforced. A gated call with no decision ends the turn with status
``awaiting_approval``; the caller resumes it by passing ``approvals``
(tool call id → bool) on the next call.
"""

import json
import re
import time
from dataclasses import dataclass, field
from typing import Any

import httpx
from pydantic import ValidationError

from octo_llm.client import LLMClient, LLMError, ToolCall
from octo_obs.logging import get_logger
from octo_obs.metrics import (
    agent_loop_duration,
    chat_turns_total,
    tool_approval_requests_total,
    tool_execution_duration,
    tool_executions_total,
)
from octo_tools.adapters.github.exceptions import GitHubAPIError
from octo_tools.base import tool_input_schema
from octo_tools.registry import ToolRegistry

from .prompts import DENIED_TOOL_RESULT, TITLE_PROMPT

logger = get_logger(__name__)

MAX_TITLE_LENGTH = 30


@dataclass
class PendingApproval:
    """A gated tool call waiting for the user's decision."""

    tool_call_id: str
    tool_name: str
    arguments: dict[str, Any]


@dataclass
class ChatTurnResult:
    """Outcome of ``run_chat_turn``.

    ``messages`` holds only what this turn appended to the history. A
    ``failed`` turn carries the model error in ``error``; its messages still
    record any tool calls that already ran.
    """

    status: str  # completed, awaiting_approval, max_steps, failed
    messages: list[dict[str, Any]] = field(default_factory=list)
    pending_approvals: list[PendingApproval] = field(default_factory=list)
    steps: int = 0
    error: LLMError | None = None

    @property
    def text(self) -> str:
        return "\n\n".join(
            m["content"] for m in self.messages if m["role"] == "assistant" and m.get("content")
        )


def tool_declarations(registry: ToolRegistry) -> list[dict[str, Any]]:
    """Registry tools as ``{"name", "description", "input_schema"}`` declarations."""
    return [
        {
            "name": tool.name,
            "description": tool.description,
            "input_schema": tool_input_schema(tool),
        }
        for tool in registry
    ]


def unanswered_tool_calls(history: list[dict[str, Any]]) -> list[ToolCall]:
    """Tool calls of the last assistant message that have no tool result yet."""
    answered: set[str] = set()
    for message in reversed(history):
        if message["role"] == "tool":
            answered.add(message["tool_call_id"])
            continue
        if message["role"] == "assistant":
            return [
                ToolCall(id=c["id"], name=c["name"], arguments=c["arguments"])
                for c in message.get("tool_calls", [])
                if c["id"] not in answered
            ]
        return []
    return []


def _tool_message(call: ToolCall, content: str, is_error: bool = False) -> dict[str, Any]:
    return {
        "role": "tool",
        "tool_call_id": call.id,
        "name": call.name,
        "content": content,
        "is_error": is_error,
    }


async def execute_tool_call(
    registry: ToolRegistry, call: ToolCall, ctx: dict[str, Any]
) -> dict[str, Any]:
    """Run one tool call and wrap the outcome as a tool message.

    Argument validation failures and remote API failures are returned to the
    model as error results so it can correct itself. Any other exception
    raised by the tool is logged with its traceback and reported the same way.
    """
    tool = registry.get(call.name)
    if tool is None:
        logger.warning("tool_not_found", tool=call.name, tool_call_id=call.id)
        return _tool_message(call, f"Unknown tool: {call.name}", is_error=True)

    start = time.perf_counter()
    try:
        with tool_execution_duration.labels(tool_name=call.name).time():
            result = await tool.execute(ctx, call.arguments)
    except ValidationError as e:
        tool_executions_total.labels(tool_name=call.name, status="failure").inc()
        logger.warning("tool_input_invalid", tool=call.name, errors=e.errors())
        return _tool_message(call, f"Invalid arguments for {call.name}: {e}", is_error=True)
    except (GitHubAPIError, httpx.HTTPError) as e:
        tool_executions_total.labels(tool_name=call.name, status="failure").inc()
        logger.warning("tool_failed", tool=call.name, error=str(e), error_type=type(e).__name__)
        return _tool_message(call, f"{type(e).__name__}: {e}", is_error=True)
    except Exception as e:
        tool_executions_total.labels(tool_name=call.name, status="failure").inc()
        logger.error(
            "tool_crashed",
            tool=call.name,
            tool_call_id=call.id,
            error=str(e),
            error_type=type(e).__name__,
            exc_info=True,
        )
        return _tool_message(call, f"{type(e).__name__}: {e}", is_error=True)

    tool_executions_total.labels(tool_name=call.name, status="success").inc()
    logger.info(
        "tool_executed",
        tool=call.name,
        tool_call_id=call.id,
        duration_ms=int((time.perf_counter() - start) * 1000),
    )
    return _tool_message(call, json.dumps(result, default=str))


async def _process_tool_calls(
    registry: ToolRegistry,
    calls: list[ToolCall],
    approvals: dict[str, bool],
    ctx: dict[str, Any],
) -> tuple[list[dict[str, Any]], list[PendingApproval]]:
    """Execute, deny, or hold each call according to its approval flag."""
    results: list[dict[str, Any]] = []
    pending: list[PendingApproval] = []

    for call in calls:
        tool = registry.get(call.name)
        gated = tool is not None and bool(tool.metadata.requires_approval)

        if gated:
            decision = approvals.get(call.id)
            if decision is None:
                tool_approval_requests_total.labels(tool_name=call.name, decision="pending").inc()
                pending.append(PendingApproval(call.id, call.name, call.arguments))
                continue
            tool_approval_requests_total.labels(
                tool_name=call.name, decision="approved" if decision else "denied"
            ).inc()
            if not decision:
                logger.info("tool_denied", tool=call.name, tool_call_id=call.id)
                results.append(_tool_message(call, DENIED_TOOL_RESULT, is_error=True))
                continue

        results.append(await execute_tool_call(registry, call, ctx))

    return results, pending


async def run_chat_turn(
    llm: LLMClient,
    registry: ToolRegistry,
    history: list[dict[str, Any]],
    *,
    user_message: str | None = None,
    system_prompt: str | None = None,
    approvals: dict[str, bool] | None = None,
    max_steps: int = 5,
    max_tokens: int = 4096,
    ctx: dict[str, Any] | None = None,
) -> ChatTurnResult:
    """Run one chat turn.

    Args:
        llm: Model client
        registry: Tools the model may call
        history: Conversation so far (neutral message format); not mutated
        user_message: New user message, if any
        system_prompt: System instructions
        approvals: Decisions for gated tool calls, keyed by tool call id.
            Calls still undecided when a new user message arrives are denied.
        max_steps: Maximum model calls in this turn
        max_tokens: Per-call generation limit
        ctx: Execution context passed to tools

    Returns:
        ChatTurnResult with the messages this turn appended

    Raises:
        LLMError: If the model fails before the turn has done anything.
            Later failures return status ``failed`` instead.
    """
    approvals = dict(approvals or {})
    ctx = ctx or {}
    working = list(history)
    appended: list[dict[str, Any]] = []

    def append(message: dict[str, Any]) -> None:
        working.append(message)
        appended.append(message)

    def finish(
        status: str,
        steps: int,
        pending: list[PendingApproval] | None = None,
        error: LLMError | None = None,
    ):
        chat_turns_total.labels(status=status).inc()
        logger.bind(**ctx).info(
            "chat_turn_completed",
            status=status,
            steps=steps,
            pending=[p.tool_name for p in pending or []],
        )
        return ChatTurnResult(
            status=status,
            messages=appended,
            pending_approvals=pending or [],
            steps=steps,
            error=error,
        )

    with agent_loop_duration.time():
        # Resume calls left open by a previous turn.
        open_calls = unanswered_tool_calls(working)
        if open_calls:
            if user_message is not None:
                for call in open_calls:
                    approvals.setdefault(call.id, False)
            results, pending = await _process_tool_calls(registry, open_calls, approvals, ctx)
            for message in results:
                append(message)
            if pending:
                return finish("awaiting_approval", 0, pending)

        if user_message is not None:
            append({"role": "user", "content": user_message})

        declarations = tool_declarations(registry)
        steps = 0
        while steps < max_steps:
            try:
                turn = await llm.respond(
                    working,
                    system_prompt=system_prompt,
                    tools=declarations or None,
                    max_tokens=max_tokens,
                )
            except LLMError as e:
                # Only the user message so far; nothing to keep.
                if all(m["role"] == "user" for m in appended):
                    raise
                logger.warning("chat_turn_failed", step=steps + 1, error=str(e))
                return finish("failed", steps, error=e)
            steps += 1
            append(turn.as_message())

            if not turn.tool_calls:
                return finish("completed", steps)

            logger.debug(
                "tool_calls_requested",
                tools=[c.name for c in turn.tool_calls],
                step=steps,
            )
            results, pending = await _process_tool_calls(registry, turn.tool_calls, approvals, ctx)
            for message in results:
                append(message)
            if pending:
                return finish("awaiting_approval", steps, pending)

        return finish("max_steps", steps)


_TITLE_STRIP = re.compile(r"[\"':#*`]")


async def generate_chat_title(llm: LLMClient, first_message: str) -> str:
    """Short plain-text title for a new chat."""
    raw = await llm.generate(
        prompt=json.dumps({"role": "user", "content": first_message}),
        system_prompt=TITLE_PROMPT,
        temperature=0.3,
        max_tokens=30,
    )
    cleaned = _TITLE_STRIP.sub("", raw).strip()
    title = cleaned.splitlines()[0] if cleaned else ""
    return title[:MAX_TITLE_LENGTH].strip() or "New chat"
