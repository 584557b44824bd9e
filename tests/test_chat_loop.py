"""Tests for the chat agent loop and its approval gate."""

import json
from unittest.mock import AsyncMock, patch

import pytest

from octo_agents import generate_chat_title, run_chat_turn, tool_declarations
from octo_agents.chat_loop import unanswered_tool_calls
from octo_agents.prompts import DENIED_TOOL_RESULT, build_system_prompt
from octo_llm.client import LLMError, LLMRateLimitError, LLMTurn, ToolCall
from octo_tools.adapters.github import register_github_tools
from octo_tools.adapters.github.exceptions import GitHubNotFoundError
from octo_tools.registry import ToolRegistry

ISSUE = {
    "number": 3,
    "title": "Broken build",
    "state": "open",
    "html_url": "https://github.com/octo/demo/issues/3",
    "user": {"login": "alice"},
    "labels": [],
    "assignees": [],
    "created_at": "2025-01-01T00:00:00Z",
    "updated_at": "2025-01-01T00:00:00Z",
}
CLOSED = {**ISSUE, "state": "closed", "state_reason": "completed"}

GET_ISSUE = ToolCall("call_get", "getIssue", {"owner": "octo", "repo": "demo", "issue_number": 3})
CLOSE_ISSUE = ToolCall(
    "call_close", "closeIssue", {"owner": "octo", "repo": "demo", "issue_number": 3}
)


@pytest.fixture
def registry(github_client):
    registry = ToolRegistry()
    register_github_tools(registry, client=github_client, preset="issue-triage")
    return registry


def _tool_messages(messages):
    return [m for m in messages if m["role"] == "tool"]


@pytest.mark.asyncio
async def test_plain_answer_without_tools(make_llm):
    llm = make_llm([LLMTurn(text="Hello!", stop_reason="end_turn")])

    result = await run_chat_turn(llm, ToolRegistry(), [], user_message="Hi")

    assert result.status == "completed"
    assert result.text == "Hello!"
    assert result.steps == 1
    assert result.messages == [
        {"role": "user", "content": "Hi"},
        {"role": "assistant", "content": "Hello!"},
    ]
    assert llm.calls[0]["tools"] is None


@pytest.mark.asyncio
async def test_read_tool_runs_without_approval(make_llm, registry, github_client, mock_ctx):
    llm = make_llm(
        [
            LLMTurn(tool_calls=[GET_ISSUE]),
            LLMTurn(text="Issue 3 is about a broken build."),
        ]
    )

    with patch.object(github_client, "get_issue", AsyncMock(return_value=ISSUE)) as mock_get:
        result = await run_chat_turn(
            llm, registry, [], user_message="What is issue 3?", ctx=mock_ctx
        )

    mock_get.assert_awaited_once_with("octo", "demo", 3)
    assert result.status == "completed"
    assert result.steps == 2
    [tool_message] = _tool_messages(result.messages)
    assert tool_message["tool_call_id"] == "call_get"
    assert tool_message["is_error"] is False
    assert json.loads(tool_message["content"])["title"] == "Broken build"
    # The second model call sees the tool result
    assert llm.calls[1]["messages"][-1] == tool_message


@pytest.mark.asyncio
async def test_write_tool_waits_for_approval(make_llm, registry, github_client):
    llm = make_llm([LLMTurn(text="Closing it.", tool_calls=[CLOSE_ISSUE])])

    with patch.object(github_client, "update_issue", AsyncMock()) as mock_update:
        result = await run_chat_turn(llm, registry, [], user_message="Close issue 3")

    mock_update.assert_not_awaited()
    assert result.status == "awaiting_approval"
    assert [p.tool_call_id for p in result.pending_approvals] == ["call_close"]
    assert result.pending_approvals[0].arguments["issue_number"] == 3
    assert _tool_messages(result.messages) == []


@pytest.mark.asyncio
async def test_approved_call_runs_on_resume(make_llm, registry, github_client):
    llm = make_llm([LLMTurn(text="Closing it.", tool_calls=[CLOSE_ISSUE])])
    first = await run_chat_turn(llm, registry, [], user_message="Close issue 3")
    history = first.messages

    llm.turns.append(LLMTurn(text="Closed."))
    with patch.object(
        github_client, "update_issue", AsyncMock(return_value=CLOSED)
    ) as mock_update:
        result = await run_chat_turn(llm, registry, history, approvals={"call_close": True})

    mock_update.assert_awaited_once_with(
        "octo", "demo", 3, state="closed", state_reason="completed"
    )
    assert result.status == "completed"
    assert result.messages[0]["role"] == "tool"
    assert result.messages[0]["is_error"] is False
    assert result.text == "Closed."


@pytest.mark.asyncio
async def test_denied_call_is_reported_to_model(make_llm, registry, github_client):
    llm = make_llm([LLMTurn(tool_calls=[CLOSE_ISSUE])])
    first = await run_chat_turn(llm, registry, [], user_message="Close issue 3")

    llm.turns.append(LLMTurn(text="Okay, leaving it open."))
    with patch.object(github_client, "update_issue", AsyncMock()) as mock_update:
        result = await run_chat_turn(
            llm, registry, first.messages, approvals={"call_close": False}
        )

    mock_update.assert_not_awaited()
    assert result.messages[0]["content"] == DENIED_TOOL_RESULT
    assert result.messages[0]["is_error"] is True
    assert result.status == "completed"


@pytest.mark.asyncio
async def test_new_message_denies_open_calls(make_llm, registry, github_client):
    llm = make_llm([LLMTurn(tool_calls=[CLOSE_ISSUE])])
    first = await run_chat_turn(llm, registry, [], user_message="Close issue 3")

    with patch.object(github_client, "update_issue", AsyncMock()) as mock_update:
        result = await run_chat_turn(
            llm, registry, first.messages, user_message="Actually, never mind"
        )

    mock_update.assert_not_awaited()
    assert [m["role"] for m in result.messages[:2]] == ["tool", "user"]
    assert result.messages[0]["content"] == DENIED_TOOL_RESULT


@pytest.mark.asyncio
async def test_no_decision_keeps_waiting(make_llm, registry):
    llm = make_llm([LLMTurn(tool_calls=[CLOSE_ISSUE])])
    first = await run_chat_turn(llm, registry, [], user_message="Close issue 3")

    result = await run_chat_turn(llm, registry, first.messages, approvals={"other": True})

    assert result.status == "awaiting_approval"
    assert result.steps == 0
    assert len(llm.calls) == 1


@pytest.mark.asyncio
async def test_ungated_write_tool_runs_immediately(make_llm, github_client):
    registry = ToolRegistry()
    register_github_tools(
        registry, client=github_client, require_approval={"closeIssue": False}
    )
    llm = make_llm([LLMTurn(tool_calls=[CLOSE_ISSUE]), LLMTurn(text="Done.")])

    with patch.object(github_client, "update_issue", AsyncMock(return_value=CLOSED)):
        result = await run_chat_turn(llm, registry, [], user_message="Close issue 3")

    assert result.status == "completed"
    assert result.pending_approvals == []


@pytest.mark.asyncio
async def test_tool_error_goes_back_to_model(make_llm, registry, github_client):
    llm = make_llm([LLMTurn(tool_calls=[GET_ISSUE]), LLMTurn(text="It does not exist.")])

    with patch.object(
        github_client, "get_issue", AsyncMock(side_effect=GitHubNotFoundError("Not Found"))
    ):
        result = await run_chat_turn(llm, registry, [], user_message="Issue 3?")

    [tool_message] = _tool_messages(result.messages)
    assert tool_message["is_error"] is True
    assert "GitHubNotFoundError" in tool_message["content"]
    assert result.status == "completed"


@pytest.mark.asyncio
async def test_unexpected_tool_exception_goes_back_to_model(make_llm, registry, github_client):
    llm = make_llm([LLMTurn(tool_calls=[GET_ISSUE]), LLMTurn(text="That issue looks odd.")])
    partial = {"number": 3, "state": "open"}

    with patch.object(github_client, "get_issue", AsyncMock(return_value=partial)):
        result = await run_chat_turn(llm, registry, [], user_message="Issue 3?")

    [tool_message] = _tool_messages(result.messages)
    assert tool_message["is_error"] is True
    assert tool_message["content"].startswith("KeyError")
    assert result.status == "completed"
    assert result.text == "That issue looks odd."


@pytest.mark.asyncio
async def test_model_failure_after_tool_keeps_partial_turn(make_llm, github_client):
    registry = ToolRegistry()
    register_github_tools(
        registry, client=github_client, require_approval={"closeIssue": False}
    )
    error = LLMRateLimitError("slow down")
    llm = make_llm([LLMTurn(tool_calls=[CLOSE_ISSUE]), error])

    with patch.object(
        github_client, "update_issue", AsyncMock(return_value=CLOSED)
    ) as mock_update:
        result = await run_chat_turn(llm, registry, [], user_message="Close issue 3")

    mock_update.assert_awaited_once()
    assert result.status == "failed"
    assert result.error is error
    assert result.steps == 1
    assert [m["role"] for m in result.messages] == ["user", "assistant", "tool"]
    assert result.messages[2]["is_error"] is False


@pytest.mark.asyncio
async def test_model_failure_on_first_step_raises(make_llm, registry):
    llm = make_llm([LLMError("provider down")])

    with pytest.raises(LLMError, match="provider down"):
        await run_chat_turn(llm, registry, [], user_message="Hi")


@pytest.mark.asyncio
async def test_invalid_arguments_go_back_to_model(make_llm, registry):
    bad_call = ToolCall("call_bad", "getIssue", {"owner": "octo"})
    llm = make_llm([LLMTurn(tool_calls=[bad_call]), LLMTurn(text="Sorry.")])

    result = await run_chat_turn(llm, registry, [], user_message="Issue?")

    [tool_message] = _tool_messages(result.messages)
    assert tool_message["is_error"] is True
    assert tool_message["content"].startswith("Invalid arguments for getIssue")


@pytest.mark.asyncio
async def test_unknown_tool(make_llm, registry):
    llm = make_llm(
        [LLMTurn(tool_calls=[ToolCall("c", "mergePullRequest", {})]), LLMTurn(text="ok")]
    )

    result = await run_chat_turn(llm, registry, [], user_message="Merge it")

    [tool_message] = _tool_messages(result.messages)
    assert tool_message["content"] == "Unknown tool: mergePullRequest"


@pytest.mark.asyncio
async def test_max_steps(make_llm, registry, github_client):
    llm = make_llm([LLMTurn(tool_calls=[GET_ISSUE]) for _ in range(5)])

    with patch.object(github_client, "get_issue", AsyncMock(return_value=ISSUE)):
        result = await run_chat_turn(llm, registry, [], user_message="Loop", max_steps=3)

    assert result.status == "max_steps"
    assert result.steps == 3
    assert len(llm.calls) == 3


@pytest.mark.asyncio
async def test_history_is_not_mutated(make_llm):
    history = [{"role": "user", "content": "Earlier"}, {"role": "assistant", "content": "Yes"}]
    llm = make_llm([LLMTurn(text="Now")])

    await run_chat_turn(llm, ToolRegistry(), history, user_message="Again")

    assert len(history) == 2
    assert llm.calls[0]["messages"][:2] == history


def test_tool_declarations(registry):
    declarations = tool_declarations(registry)

    assert [d["name"] for d in declarations] == registry.names()
    assert all("title" not in d["input_schema"] for d in declarations)


def test_unanswered_tool_calls():
    history = [
        {"role": "user", "content": "x"},
        {
            "role": "assistant",
            "content": "",
            "tool_calls": [
                {"id": "a", "name": "getIssue", "arguments": {}},
                {"id": "b", "name": "closeIssue", "arguments": {}},
            ],
        },
        {"role": "tool", "tool_call_id": "a", "name": "getIssue", "content": "{}"},
    ]

    assert [c.id for c in unanswered_tool_calls(history)] == ["b"]
    assert unanswered_tool_calls(history[:1]) == []


@pytest.mark.asyncio
async def test_generate_chat_title(make_llm):
    llm = make_llm(title='"Broken build: triage"\nextra line')
    assert await generate_chat_title(llm, "Why is the build broken?") == "Broken build triage"


@pytest.mark.asyncio
async def test_generate_chat_title_truncates_and_defaults(make_llm):
    assert len(await generate_chat_title(make_llm(title="x" * 80), "hi")) == 30
    assert await generate_chat_title(make_llm(title="   "), "hi") == "New chat"
    assert await generate_chat_title(make_llm(title='""'), "hi") == "New chat"
    assert await generate_chat_title(make_llm(title="**\n:"), "hi") == "New chat"


def test_system_prompt_mentions_user():
    assert "The user's name is Ada." in build_system_prompt("Ada")
    assert "{user_line}" not in build_system_prompt()
