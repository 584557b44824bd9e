"""GitHub adapter for Octo.

Provides tools for interacting with GitHub:
- Repositories, branches and file content
- Pull requests (list, inspect, open, merge, comment)
- Issues (list, inspect, open, comment, close)
- Code and repository search
- Commits

Write tools require human approval by default. Control this globally or per
tool with ``require_approval``, and use ``preset`` to get only the tools a
use case needs.

Usage:
    from octo_tools.adapters.github import create_github_tools

    # All tools, every write tool gated
    tools = create_github_tools(token="ghp_...")

    # Code-review agent
    tools = create_github_tools(token="ghp_...", preset="code-review")

    # Combined presets with granular approval
    tools = create_github_tools(
        token="ghp_...",
        preset=["code-review", "issue-triage"],
        require_approval={"mergePullRequest": True, "addPullRequestComment": False},
    )
"""

from collections.abc import Iterable, Mapping

from octo_obs.logging import get_logger
from octo_tools.base import Tool

from .approval import (
    ApprovalPolicy,
    PerToolApproval,
    UniformApproval,
    approval_policy_from,
    resolve_approval,
)
from .client import GitHubClientWrapper
from .exceptions import (
    GitHubAPIError,
    GitHubAuthError,
    GitHubConflictError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubValidationError,
)
from .presets import (
    ALL_TOOL_NAMES,
    PRESET_TOOLS,
    WRITE_TOOL_NAMES,
    ToolName,
    ToolPreset,
    UnknownPresetError,
    resolve_preset_tools,
)
from .tools import (
    AddIssueCommentTool,
    AddPullRequestCommentTool,
    CloseIssueTool,
    CreateBranchTool,
    CreateIssueTool,
    CreateOrUpdateFileTool,
    CreatePullRequestTool,
    CreateRepositoryTool,
    ForkRepositoryTool,
    GetCommitTool,
    GetFileContentTool,
    GetIssueTool,
    GetPullRequestTool,
    GetRepositoryTool,
    ListBranchesTool,
    ListCommitsTool,
    ListIssuesTool,
    ListPullRequestsTool,
    MergePullRequestTool,
    SearchCodeTool,
    SearchRepositoriesTool,
)

__all__ = [
    # Composition
    "create_github_tools",
    "register_github_tools",
    # Client
    "GitHubClientWrapper",
    # Exceptions
    "GitHubAPIError",
    "GitHubAuthError",
    "GitHubConflictError",
    "GitHubNotFoundError",
    "GitHubRateLimitError",
    "GitHubValidationError",
    "UnknownPresetError",
    # Names, presets, approval
    "ToolName",
    "ToolPreset",
    "ALL_TOOL_NAMES",
    "WRITE_TOOL_NAMES",
    "PRESET_TOOLS",
    "resolve_preset_tools",
    "ApprovalPolicy",
    "UniformApproval",
    "PerToolApproval",
    "approval_policy_from",
    "resolve_approval",
    # Tools
    "GetRepositoryTool",
    "ListBranchesTool",
    "GetFileContentTool",
    "CreateOrUpdateFileTool",
    "CreateBranchTool",
    "ForkRepositoryTool",
    "CreateRepositoryTool",
    "ListPullRequestsTool",
    "GetPullRequestTool",
    "CreatePullRequestTool",
    "MergePullRequestTool",
    "AddPullRequestCommentTool",
    "ListIssuesTool",
    "GetIssueTool",
    "CreateIssueTool",
    "AddIssueCommentTool",
    "CloseIssueTool",
    "SearchCodeTool",
    "SearchRepositoriesTool",
    "ListCommitsTool",
    "GetCommitTool",
]

logger = get_logger(__name__)

READ_TOOL_CLASSES = {
    ToolName.GET_REPOSITORY: GetRepositoryTool,
    ToolName.LIST_BRANCHES: ListBranchesTool,
    ToolName.GET_FILE_CONTENT: GetFileContentTool,
    ToolName.LIST_PULL_REQUESTS: ListPullRequestsTool,
    ToolName.GET_PULL_REQUEST: GetPullRequestTool,
    ToolName.LIST_ISSUES: ListIssuesTool,
    ToolName.GET_ISSUE: GetIssueTool,
    ToolName.SEARCH_CODE: SearchCodeTool,
    ToolName.SEARCH_REPOSITORIES: SearchRepositoriesTool,
    ToolName.LIST_COMMITS: ListCommitsTool,
    ToolName.GET_COMMIT: GetCommitTool,
}

WRITE_TOOL_CLASSES = {
    ToolName.CREATE_OR_UPDATE_FILE: CreateOrUpdateFileTool,
    ToolName.CREATE_PULL_REQUEST: CreatePullRequestTool,
    ToolName.MERGE_PULL_REQUEST: MergePullRequestTool,
    ToolName.ADD_PULL_REQUEST_COMMENT: AddPullRequestCommentTool,
    ToolName.CREATE_ISSUE: CreateIssueTool,
    ToolName.ADD_ISSUE_COMMENT: AddIssueCommentTool,
    ToolName.CLOSE_ISSUE: CloseIssueTool,
}

if set(READ_TOOL_CLASSES) | set(WRITE_TOOL_CLASSES) != ALL_TOOL_NAMES or set(
    WRITE_TOOL_CLASSES
) != WRITE_TOOL_NAMES:
    raise RuntimeError("GitHub tool classes are out of sync with ToolName")


def create_github_tools(
    token: str | None = None,
    require_approval: "bool | Mapping[str, bool] | ApprovalPolicy" = True,
    preset: "str | ToolPreset | Iterable[str | ToolPreset] | None" = None,
    *,
    client: GitHubClientWrapper | None = None,
) -> dict[str, Tool]:
    """Build the GitHub tool set for an agent.

    Args:
        token: GitHub token; used to build the shared client when ``client``
            is not given
        require_approval: ``True``/``False`` for every write tool, or a
            mapping of write tool name to flag (unlisted write tools require
            approval)
        preset: One preset or several (their tool sets are unioned); omit
            for all tools
        client: Pre-built client to share instead of creating one

    Returns:
        Mapping of tool name to tool, in ``ToolName`` order

    Raises:
        UnknownPresetError: unknown preset identifier
        ValueError: approval mapping names a tool that is not a write tool

    No network calls are made here; they happen when a tool is executed.
    """
    if client is None:
        if not token:
            raise ValueError("A GitHub token or a client is required")
        client = GitHubClientWrapper(token=token)

    policy = approval_policy_from(require_approval)
    allowed = resolve_preset_tools(preset)

    tools: dict[str, Tool] = {}
    for name in ToolName:
        if allowed is not None and name not in allowed:
            continue
        if name in WRITE_TOOL_CLASSES:
            tool = WRITE_TOOL_CLASSES[name](client, requires_approval=resolve_approval(name, policy))
        else:
            tool = READ_TOOL_CLASSES[name](client)
        tools[name.value] = tool

    logger.debug(
        "github_tools_created",
        tool_count=len(tools),
        filtered=allowed is not None,
        gated=[n for n, t in tools.items() if t.metadata.requires_approval],
    )

    return tools


def register_github_tools(
    registry,
    token: str | None = None,
    require_approval: "bool | Mapping[str, bool] | ApprovalPolicy" = True,
    preset: "str | ToolPreset | Iterable[str | ToolPreset] | None" = None,
    *,
    client: GitHubClientWrapper | None = None,
) -> GitHubClientWrapper:
    """Register GitHub tools with a tool registry.

    Args:
        registry: ToolRegistry instance
        token: GitHub personal access token
        require_approval: See ``create_github_tools``
        preset: See ``create_github_tools``
        client: Pre-built client to share

    Returns:
        The shared client, so the caller can close it

    Example:
        from octo_tools.registry import ToolRegistry
        from octo_tools.adapters.github import register_github_tools

        registry = ToolRegistry()
        client = register_github_tools(registry, token="ghp_...", preset="repo-explorer")
    """
    if client is None:
        if not token:
            raise ValueError("A GitHub token or a client is required")
        client = GitHubClientWrapper(token=token)

    for tool in create_github_tools(
        require_approval=require_approval, preset=preset, client=client
    ).values():
        registry.register(tool)

    return client
