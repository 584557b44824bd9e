"""Tests for GitHub tool composition (create_github_tools / register_github_tools)."""

import pytest

from octo_tools.adapters.github import (
    GitHubClientWrapper,
    UnknownPresetError,
    create_github_tools,
    register_github_tools,
)
from octo_tools.adapters.github.presets import ToolName, WRITE_TOOL_NAMES
from octo_tools.registry import ToolRegistry

WRITE_TOOLS = {name.value for name in WRITE_TOOL_NAMES}
ALL_TOOLS = [name.value for name in ToolName]


def _approval_flags(tools):
    return {name: tool.metadata.requires_approval for name, tool in tools.items()}


class TestCreateGithubTools:
    def test_defaults_build_every_tool(self, github_token):
        tools = create_github_tools(github_token)

        assert list(tools) == ALL_TOOLS
        assert all(tools[name].name == name for name in tools)

    def test_write_tools_require_approval_by_default(self, github_token):
        flags = _approval_flags(create_github_tools(github_token))

        for name, flag in flags.items():
            if name in WRITE_TOOLS:
                assert flag is True
            else:
                assert flag is None

    def test_approval_disabled(self, github_token):
        flags = _approval_flags(create_github_tools(github_token, require_approval=False))

        assert all(flags[name] is False for name in WRITE_TOOLS)
        assert all(flags[name] is None for name in set(flags) - WRITE_TOOLS)

    def test_per_tool_approval(self, github_token):
        tools = create_github_tools(
            github_token,
            require_approval={"mergePullRequest": True, "addIssueComment": False},
        )
        flags = _approval_flags(tools)

        assert flags["mergePullRequest"] is True
        assert flags["addIssueComment"] is False
        # Unlisted write tools still need approval
        assert flags["createIssue"] is True
        assert flags["createOrUpdateFile"] is True
        assert flags["getRepository"] is None

    def test_approval_for_read_tool_rejected(self, github_token):
        with pytest.raises(ValueError):
            create_github_tools(github_token, require_approval={"listIssues": True})

    def test_preset_filters_tools(self, github_token):
        tools = create_github_tools(github_token, preset="issue-triage")

        assert set(tools) == {
            "listIssues",
            "getIssue",
            "createIssue",
            "addIssueComment",
            "closeIssue",
            "getRepository",
            "searchRepositories",
            "searchCode",
        }

    def test_preset_keeps_tool_order(self, github_token):
        tools = create_github_tools(github_token, preset=["issue-triage", "code-review"])
        assert list(tools) == [name for name in ALL_TOOLS if name in tools]

    def test_preset_and_approval_combine(self, github_token):
        tools = create_github_tools(
            github_token, require_approval={"addIssueComment": False}, preset="issue-triage"
        )
        flags = _approval_flags(tools)

        assert flags["addIssueComment"] is False
        assert flags["createIssue"] is True
        assert flags["closeIssue"] is True
        assert flags["listIssues"] is None

    def test_repo_explorer_has_no_gated_tools(self, github_token):
        tools = create_github_tools(github_token, preset="repo-explorer")
        assert not WRITE_TOOLS & set(tools)
        assert all(tool.metadata.requires_approval is None for tool in tools.values())

    def test_empty_preset_list_builds_nothing(self, github_token):
        assert create_github_tools(github_token, preset=[]) == {}

    def test_unknown_preset(self, github_token):
        with pytest.raises(UnknownPresetError):
            create_github_tools(github_token, preset="superuser")

    def test_tools_share_one_client(self, github_token):
        tools = create_github_tools(github_token)
        clients = {id(tool.client) for tool in tools.values()}

        assert len(clients) == 1

    def test_given_client_is_used(self, github_client):
        tools = create_github_tools(client=github_client)
        assert all(tool.client is github_client for tool in tools.values())

    def test_construction_makes_no_requests(self, github_api):
        create_github_tools(client=github_api.client, preset="maintainer")
        assert github_api.requests == []

    def test_each_call_returns_fresh_tools(self, github_token):
        first = create_github_tools(github_token, require_approval=False)
        second = create_github_tools(github_token)

        assert first is not second
        assert first["createIssue"] is not second["createIssue"]
        # Flags of one call never leak into another
        assert first["createIssue"].metadata.requires_approval is False
        assert second["createIssue"].metadata.requires_approval is True

    def test_repeat_calls_are_equivalent(self, github_token):
        first = create_github_tools(github_token, preset="code-review")
        second = create_github_tools(github_token, preset="code-review")

        assert list(first) == list(second)
        assert _approval_flags(first) == _approval_flags(second)

    def test_write_metadata(self, github_token):
        tools = create_github_tools(github_token)

        assert tools["mergePullRequest"].metadata.risk_level == "high"
        assert tools["addIssueComment"].metadata.risk_level == "low"
        assert tools["closeIssue"].metadata.idempotent is True
        assert tools["createIssue"].metadata.capabilities == ["github.write"]
        assert tools["getIssue"].metadata.capabilities == ["github.read"]

    def test_token_or_client_required(self):
        with pytest.raises(ValueError, match="token or a client"):
            create_github_tools()


class TestRegisterGithubTools:
    def test_registers_into_registry(self, github_token):
        registry = ToolRegistry()
        client = register_github_tools(registry, token=github_token, preset="code-review")

        assert isinstance(client, GitHubClientWrapper)
        assert "addPullRequestComment" in registry
        assert "createIssue" not in registry
        assert [t.name for t in registry.requiring_approval()] == ["addPullRequestComment"]

    def test_returns_shared_client(self, github_client):
        registry = ToolRegistry()
        client = register_github_tools(registry, client=github_client)

        assert client is github_client
        assert len(registry) == 18
        assert registry.get("getCommit").client is github_client
