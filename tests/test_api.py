"""API Endpoint Tests."""

from unittest.mock import AsyncMock, patch

import pytest

from octo_llm.client import LLMRateLimitError, LLMTurn, ToolCall
from octo_tools.adapters.github.client import GitHubClientWrapper
from octo_tools.adapters.github.presets import UnknownPresetError

from apps.chat_api.deps import build_github_registry

CLOSE_ISSUE = ToolCall(
    "call_close", "closeIssue", {"owner": "octo", "repo": "demo", "issue_number": 3}
)
CLOSED = {
    "number": 3,
    "title": "Broken build",
    "state": "closed",
    "state_reason": "completed",
    "html_url": "https://github.com/octo/demo/issues/3",
}


def _new_chat(client):
    response = client.post("/chats")
    assert response.status_code == 201
    return response.json()["id"]


def test_root_endpoint(client):
    """Test root endpoint returns API info."""
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["name"] == "Octo Chat API"


def test_healthz_returns_200(client):
    """Test liveness probe."""
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_readyz_returns_ready(client):
    """Test readiness probe (an Anthropic key is configured)."""
    response = client.get("/readyz")
    assert response.status_code == 200
    assert response.json()["checks"]["github_token"] == "not_configured"


def test_metrics_exposed(client):
    """Test Prometheus metrics endpoint."""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "text/plain" in response.headers["content-type"]


def test_request_id_header(client):
    response = client.get("/healthz", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


def test_models(client):
    response = client.get("/models")
    body = response.json()

    assert body["default"] == "anthropic/claude-sonnet-4-5"
    assert "openai/gpt-4o-mini" in [m["value"] for m in body["models"]]


def test_tools_catalogue(client):
    response = client.get("/tools")
    tools = {t["name"]: t for t in response.json()["tools"]}

    assert len(tools) == 18
    assert tools["getRepository"]["requires_approval"] is None
    assert tools["mergePullRequest"]["requires_approval"] is True
    assert tools["getIssue"]["input_schema"]["required"] == ["owner", "repo", "issue_number"]


def test_tools_catalogue_follows_settings(client, api_settings):
    api_settings.GITHUB_TOOL_PRESET = ["issue-triage"]
    api_settings.GITHUB_REQUIRE_APPROVAL = {"addIssueComment": False}

    tools = {t["name"]: t for t in client.get("/tools").json()["tools"]}

    assert len(tools) == 8
    assert tools["addIssueComment"]["requires_approval"] is False
    assert tools["closeIssue"]["requires_approval"] is True


class TestChats:
    def test_create_list_get_delete(self, client):
        chat_id = _new_chat(client)

        assert [c["id"] for c in client.get("/chats").json()] == [chat_id]
        assert client.get(f"/chats/{chat_id}").json()["messages"] == []

        assert client.delete(f"/chats/{chat_id}").status_code == 204
        assert client.get(f"/chats/{chat_id}").status_code == 404
        assert client.delete(f"/chats/{chat_id}").status_code == 404

    def test_unknown_chat_turn(self, client):
        response = client.post("/chats/missing", json={"message": "hi"})
        assert response.status_code == 404

    def test_turn_needs_message_or_approvals(self, client):
        chat_id = _new_chat(client)
        response = client.post(f"/chats/{chat_id}", json={"model": "openai/gpt-4o-mini"})
        assert response.status_code == 422

    def test_first_message_sets_title(self, client, scripted_llm):
        scripted_llm.turns.append(LLMTurn(text="Hello there."))
        chat_id = _new_chat(client)

        response = client.post(f"/chats/{chat_id}", json={"message": "Hi"})
        body = response.json()

        assert response.status_code == 200
        assert body["status"] == "completed"
        assert body["text"] == "Hello there."
        assert body["title"] == "Test chat"
        assert body["pending_approvals"] == []

        chat = client.get(f"/chats/{chat_id}").json()
        assert [m["role"] for m in chat["messages"]] == ["user", "assistant"]
        assert chat["title"] == "Test chat"

    def test_no_token_means_no_tools(self, client, scripted_llm):
        chat_id = _new_chat(client)

        client.post(f"/chats/{chat_id}", json={"message": "Hi"})

        assert scripted_llm.calls[0]["tools"] is None

    def test_approval_round_trip(self, client, scripted_llm):
        scripted_llm.turns.append(LLMTurn(text="I will close it.", tool_calls=[CLOSE_ISSUE]))
        chat_id = _new_chat(client)

        with patch.object(
            GitHubClientWrapper, "update_issue", AsyncMock(return_value=CLOSED)
        ) as mock_update:
            first = client.post(
                f"/chats/{chat_id}",
                json={"message": "Close issue 3", "github_token": "ghp_request_token"},
            ).json()

            assert first["status"] == "awaiting_approval"
            assert first["pending_approvals"] == [
                {
                    "tool_call_id": "call_close",
                    "tool_name": "closeIssue",
                    "arguments": {"owner": "octo", "repo": "demo", "issue_number": 3},
                }
            ]
            mock_update.assert_not_awaited()
            assert len(scripted_llm.calls[0]["tools"]) == 18

            scripted_llm.turns.append(LLMTurn(text="Closed."))
            second = client.post(
                f"/chats/{chat_id}",
                json={"approvals": {"call_close": True}, "github_token": "ghp_request_token"},
            ).json()

        mock_update.assert_awaited_once()
        assert second["status"] == "completed"
        assert second["text"] == "Closed."
        roles = [m["role"] for m in client.get(f"/chats/{chat_id}").json()["messages"]]
        assert roles == ["user", "assistant", "tool", "assistant"]

    def test_model_failure_after_approved_call_keeps_history(self, client, scripted_llm):
        scripted_llm.turns.append(LLMTurn(text="I will close it.", tool_calls=[CLOSE_ISSUE]))
        chat_id = _new_chat(client)

        with patch.object(
            GitHubClientWrapper, "update_issue", AsyncMock(return_value=CLOSED)
        ) as mock_update:
            client.post(
                f"/chats/{chat_id}",
                json={"message": "Close issue 3", "github_token": "ghp_request_token"},
            )
            scripted_llm.turns.append(LLMRateLimitError("slow down"))
            response = client.post(
                f"/chats/{chat_id}",
                json={"approvals": {"call_close": True}, "github_token": "ghp_request_token"},
            )

        assert response.status_code == 429
        mock_update.assert_awaited_once()
        messages = client.get(f"/chats/{chat_id}").json()["messages"]
        assert [m["role"] for m in messages] == ["user", "assistant", "tool"]
        assert messages[-1]["tool_call_id"] == "call_close"
        assert messages[-1]["is_error"] is False


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides,error_cls",
    [
        ({"GITHUB_TOOL_PRESET": ["no-such-preset"]}, UnknownPresetError),
        ({"GITHUB_REQUIRE_APPROVAL": {"getIssue": True}}, ValueError),
    ],
)
async def test_rejected_tool_settings_close_the_client(api_settings, overrides, error_cls):
    settings = api_settings.model_copy(update=overrides)

    with patch.object(GitHubClientWrapper, "aclose", AsyncMock()) as mock_close:
        with pytest.raises(error_cls):
            await build_github_registry(settings, "ghp_request_token")

    mock_close.assert_awaited_once()


@pytest.mark.asyncio
async def test_registry_without_token_has_no_client(api_settings):
    registry, client = await build_github_registry(api_settings, "")

    assert client is None
    assert len(registry) == 0
