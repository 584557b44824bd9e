"""GitHub tools package.

Exports all GitHub tools for easy importing.
"""

from .base import GitHubTool, GitHubWriteTool
from .repository import (
    GetRepositoryTool,
    ListBranchesTool,
    GetFileContentTool,
    CreateOrUpdateFileTool,
    CreateBranchTool,
    ForkRepositoryTool,
    CreateRepositoryTool,
)
from .pull_requests import (
    ListPullRequestsTool,
    GetPullRequestTool,
    CreatePullRequestTool,
    MergePullRequestTool,
    AddPullRequestCommentTool,
)
from .issues import (
    ListIssuesTool,
    GetIssueTool,
    CreateIssueTool,
    AddIssueCommentTool,
    CloseIssueTool,
)
from .search import SearchCodeTool, SearchRepositoriesTool
from .commits import ListCommitsTool, GetCommitTool

__all__ = [
    "GitHubTool",
    "GitHubWriteTool",
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
