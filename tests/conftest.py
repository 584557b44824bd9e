"""Pytest fixtures."""

from types import SimpleNamespace
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from octo_llm.client import LLMClient, LLMTurn
from octo_tools.adapters.github.client import GitHubClientWrapper


class ScriptedLLM(LLMClient):
    """LLM that replays queued turns (raising queued exceptions) and records what it was sent."""

    def __init__(self, turns: list[LLMTurn] | None = None, title: str = "Test chat"):
        self.turns = list(turns or [])
        self.title = title
        self.calls: list[dict[str, Any]] = []

    @property
    def model_name(self) -> str:
        return "scripted"

    async def generate(self, prompt, system_prompt=None, temperature=0.7, max_tokens=2000, **kwargs):
        return self.title

    async def count_tokens(self, text):
        return len(text) // 4

    async def respond(self, messages, system_prompt=None, tools=None, max_tokens=4096):
        self.calls.append({"messages": list(messages), "tools": tools})
        if not self.turns:
            return LLMTurn(text="done", stop_reason="end_turn")
        turn = self.turns.pop(0)
        if isinstance(turn, Exception):
            raise turn
        return turn


class FakeLLMRouter:
    """Hands out the same scripted LLM for every model id."""

    def __init__(self, llm: ScriptedLLM):
        self.llm = llm
        self.requested: list[str] = []

    def for_model(self, model_id: str) -> ScriptedLLM:
        self.requested.append(model_id)
        return self.llm


@pytest.fixture
def github_token():
    """Mock GitHub token."""
    return "ghp_mock_token_12345"


@pytest.fixture
def mock_ctx():
    """Mock execution context."""
    return {"chat_id": "test_chat", "model": "anthropic/claude-sonnet-4-5"}


@pytest.fixture
def github_client(github_token):
    """Client whose methods tests replace with ``patch.object``."""
    return GitHubClientWrapper(token=github_token)


@pytest.fixture
def github_api(github_token):
    """Client backed by ``httpx.MockTransport``.

    Set ``routes[(method, path)] = (status, json_body)``; unrouted requests
    get a 404. Every request is recorded in ``requests``.
    """
    routes: dict[tuple[str, str], tuple[int, Any]] = {}
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        status, body = routes.get(
            (request.method, request.url.path), (404, {"message": "Not Found"})
        )
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    client = GitHubClientWrapper(token=github_token, transport=httpx.MockTransport(handler))
    return SimpleNamespace(client=client, routes=routes, requests=requests)


@pytest.fixture
def make_llm():
    """Factory for scripted LLMs: ``make_llm([LLMTurn(...), ...])``."""
    return ScriptedLLM


@pytest.fixture
def scripted_llm():
    """Scripted LLM with no queued turns (answers "done")."""
    return ScriptedLLM()


@pytest.fixture
def api_settings():
    """Settings for API tests: no server GitHub token, an Anthropic key."""
    from octo_config.settings import Settings

    return Settings(_env_file=None, GITHUB_TOKEN="", ANTHROPIC_API_KEY="sk-ant-test")


@pytest.fixture
def client(scripted_llm, api_settings):
    """FastAPI test client with the LLM router and settings replaced."""
    from apps.chat_api.deps import get_llm_router, get_settings
    from apps.chat_api.main import app

    fake_router = FakeLLMRouter(scripted_llm)
    app.dependency_overrides[get_llm_router] = lambda: fake_router
    app.dependency_overrides[get_settings] = lambda: api_settings
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
