"""GitHub adapter Pydantic schemas.

Input and output schemas for all GitHub tools. Outputs keep only the fields
an LLM needs (names, counts, URLs, timestamps).
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class RepoInput(BaseModel):
    """Fields shared by every repository-scoped tool."""

    owner: str = Field(..., description="Repository owner (user or organization)")
    repo: str = Field(..., description="Repository name")


# ============================================================================
# REPOSITORY TOOL SCHEMAS
# ============================================================================


class GetRepositoryInput(RepoInput):
    """Input schema for GetRepositoryTool."""


class RepositoryOutput(BaseModel):
    """Output schema for GetRepositoryTool."""

    name: str
    full_name: str
    description: str | None = None
    url: str
    default_branch: str
    stars: int
    forks: int
    open_issues: int
    language: str | None = None
    private: bool
    created_at: str
    updated_at: str


class ListBranchesInput(RepoInput):
    """Input schema for ListBranchesTool."""

    per_page: int = Field(30, ge=1, le=100, description="Number of branches to return (max 100)")


class BranchResult(BaseModel):
    """Single branch."""

    name: str
    sha: str
    protected: bool


class GetFileContentInput(RepoInput):
    """Input schema for GetFileContentTool."""

    path: str = Field(..., description="Path to the file in the repository")
    ref: str | None = Field(
        None, description="Branch, tag, or commit SHA (defaults to the default branch)"
    )


class DirectoryEntry(BaseModel):
    """Entry in a directory listing."""

    name: str
    type: str
    path: str


class DirectoryOutput(BaseModel):
    """Directory listing returned by GetFileContentTool."""

    type: Literal["directory"] = "directory"
    entries: list[DirectoryEntry]


class NodeOutput(BaseModel):
    """Symlink or submodule returned by GetFileContentTool (metadata only)."""

    type: str
    path: str


class FileOutput(BaseModel):
    """Decoded file returned by GetFileContentTool."""

    type: Literal["file"] = "file"
    path: str
    sha: str
    size: int
    content: str


class CreateOrUpdateFileInput(RepoInput):
    """Input schema for CreateOrUpdateFileTool."""

    path: str = Field(..., description="Path to the file in the repository")
    message: str = Field(..., description="Commit message")
    content: str = Field(
        ..., description="File content (plain text, will be base64-encoded automatically)"
    )
    branch: str | None = Field(
        None, description="Branch to commit to (defaults to the default branch)"
    )
    sha: str | None = Field(
        None,
        description="SHA of the file being replaced (required when updating an existing file)",
    )


class CreateOrUpdateFileOutput(BaseModel):
    """Output schema for CreateOrUpdateFileTool."""

    path: str | None = None
    sha: str | None = None
    commit_sha: str
    commit_url: str | None = None


class CreateBranchInput(RepoInput):
    """Input schema for CreateBranchTool."""

    branch: str = Field(..., description="Name for the new branch")
    from_: str | None = Field(
        None,
        alias="from",
        description=(
            "Source branch name or commit SHA to branch from (defaults to the default branch)"
        ),
    )

    model_config = ConfigDict(populate_by_name=True)


class CreateBranchOutput(BaseModel):
    """Output schema for CreateBranchTool."""

    ref: str
    sha: str
    url: str


class ForkRepositoryInput(RepoInput):
    """Input schema for ForkRepositoryTool."""

    organization: str | None = Field(
        None, description="Organization to fork into (omit to fork to your personal account)"
    )
    name: str | None = Field(
        None, description="Name for the forked repository (defaults to the original name)"
    )


class ParentRepository(BaseModel):
    """Upstream of a fork."""

    full_name: str
    url: str


class ForkRepositoryOutput(BaseModel):
    """Output schema for ForkRepositoryTool."""

    name: str
    full_name: str
    url: str
    clone_url: str
    ssh_url: str
    default_branch: str
    private: bool
    parent: ParentRepository | None = None


class CreateRepositoryInput(BaseModel):
    """Input schema for CreateRepositoryTool."""

    name: str = Field(..., description="Repository name")
    description: str | None = Field(None, description="A short description of the repository")
    private: bool = Field(False, description="Whether the repository is private")
    auto_init: bool = Field(False, description="Create an initial commit with a README")
    gitignore_template: str | None = Field(
        None, description='Gitignore template to use (e.g. "Node", "Python")'
    )
    license_template: str | None = Field(
        None, description='License keyword (e.g. "mit", "apache-2.0")'
    )
    org: str | None = Field(
        None, description="Organization to create the repository in (omit for personal repo)"
    )


class CreateRepositoryOutput(BaseModel):
    """Output schema for CreateRepositoryTool."""

    name: str
    full_name: str
    description: str | None = None
    url: str
    clone_url: str
    ssh_url: str
    default_branch: str | None = None
    private: bool
    created_at: str


# ============================================================================
# PULL REQUEST TOOL SCHEMAS
# ============================================================================


class ListPullRequestsInput(RepoInput):
    """Input schema for ListPullRequestsTool."""

    state: Literal["open", "closed", "all"] = Field("open", description="Pull request state filter")
    per_page: int = Field(30, ge=1, le=100, description="Number of pull requests to return")


class PullRequestSummary(BaseModel):
    """Single pull request in a listing."""

    number: int
    title: str
    state: str
    url: str
    author: str | None = None
    branch: str
    base_branch: str
    draft: bool = False
    created_at: str
    updated_at: str


class GetPullRequestInput(RepoInput):
    """Input schema for GetPullRequestTool."""

    pull_number: int = Field(..., description="Pull request number")


class PullRequestOutput(BaseModel):
    """Output schema for GetPullRequestTool."""

    number: int
    title: str
    body: str | None = None
    state: str
    url: str
    author: str | None = None
    branch: str
    base_branch: str
    merged: bool = False
    mergeable: bool | None = None
    additions: int = 0
    deletions: int = 0
    changed_files: int = 0
    comments: int = 0
    review_comments: int = 0
    created_at: str
    updated_at: str
    merged_at: str | None = None


class CreatePullRequestInput(RepoInput):
    """Input schema for CreatePullRequestTool."""

    title: str = Field(..., description="Pull request title")
    head: str = Field(..., description="Branch containing the changes")
    base: str = Field(..., description="Branch to merge into")
    body: str | None = Field(None, description="Pull request description")
    draft: bool = Field(False, description="Open as a draft pull request")


class CreatePullRequestOutput(BaseModel):
    """Output schema for CreatePullRequestTool."""

    number: int
    title: str
    url: str
    state: str
    draft: bool = False


class MergePullRequestInput(RepoInput):
    """Input schema for MergePullRequestTool."""

    pull_number: int = Field(..., description="Pull request number")
    commit_title: str | None = Field(None, description="Title for the merge commit")
    commit_message: str | None = Field(None, description="Extra detail for the merge commit")
    merge_method: Literal["merge", "squash", "rebase"] = Field(
        "merge", description="Merge method to use"
    )


class MergePullRequestOutput(BaseModel):
    """Output schema for MergePullRequestTool."""

    merged: bool
    message: str
    sha: str | None = None


class AddPullRequestCommentInput(RepoInput):
    """Input schema for AddPullRequestCommentTool."""

    pull_number: int = Field(..., description="Pull request number")
    body: str = Field(..., description="Comment text (Markdown)")


class CommentOutput(BaseModel):
    """Output schema for comment-creating tools."""

    id: int
    url: str
    body: str
    created_at: str


# ============================================================================
# ISSUE TOOL SCHEMAS
# ============================================================================


class ListIssuesInput(RepoInput):
    """Input schema for ListIssuesTool."""

    state: Literal["open", "closed", "all"] = Field("open", description="Issue state filter")
    labels: list[str] | None = Field(None, description="Only issues with all of these labels")
    per_page: int = Field(30, ge=1, le=100, description="Number of issues to return")


class IssueSummary(BaseModel):
    """Single issue in a listing."""

    number: int
    title: str
    state: str
    url: str
    author: str | None = None
    labels: list[str]
    comments: int = 0
    created_at: str
    updated_at: str


class GetIssueInput(RepoInput):
    """Input schema for GetIssueTool."""

    issue_number: int = Field(..., description="Issue number")


class IssueOutput(BaseModel):
    """Output schema for GetIssueTool."""

    number: int
    title: str
    body: str | None = None
    state: str
    state_reason: str | None = None
    url: str
    author: str | None = None
    labels: list[str]
    assignees: list[str]
    comments: int = 0
    created_at: str
    updated_at: str
    closed_at: str | None = None


class CreateIssueInput(RepoInput):
    """Input schema for CreateIssueTool."""

    title: str = Field(..., description="Issue title")
    body: str | None = Field(None, description="Issue body/description")
    labels: list[str] | None = Field(None, description="Labels to apply")
    assignees: list[str] | None = Field(None, description="Logins to assign")


class CreateIssueOutput(BaseModel):
    """Output schema for CreateIssueTool."""

    number: int
    title: str
    url: str
    state: str
    created_at: str


class AddIssueCommentInput(RepoInput):
    """Input schema for AddIssueCommentTool."""

    issue_number: int = Field(..., description="Issue number")
    body: str = Field(..., description="Comment text (Markdown)")


class CloseIssueInput(RepoInput):
    """Input schema for CloseIssueTool."""

    issue_number: int = Field(..., description="Issue number")
    state_reason: Literal["completed", "not_planned"] = Field(
        "completed", description="Why the issue is being closed"
    )


class CloseIssueOutput(BaseModel):
    """Output schema for CloseIssueTool."""

    number: int
    title: str
    url: str
    state: str
    state_reason: str | None = None
    closed_at: str | None = None


# ============================================================================
# SEARCH TOOL SCHEMAS
# ============================================================================


class SearchCodeInput(BaseModel):
    """Input schema for SearchCodeTool."""

    query: str = Field(
        ...,
        description="GitHub code search query, e.g. 'useState repo:facebook/react language:ts'",
    )
    per_page: int = Field(10, ge=1, le=100, description="Number of results to return")


class CodeSearchItem(BaseModel):
    """Single code search hit."""

    name: str
    path: str
    url: str
    repository: str


class SearchCodeOutput(BaseModel):
    """Output schema for SearchCodeTool."""

    total_count: int
    items: list[CodeSearchItem]


class SearchRepositoriesInput(BaseModel):
    """Input schema for SearchRepositoriesTool."""

    query: str = Field(..., description="GitHub repository search query, e.g. 'topic:cli stars:>100'")
    sort: Literal["stars", "forks", "help-wanted-issues", "updated"] | None = Field(
        None, description="Sort field (defaults to best match)"
    )
    order: Literal["asc", "desc"] = Field("desc", description="Sort order")
    per_page: int = Field(10, ge=1, le=100, description="Number of results to return")


class RepositorySearchItem(BaseModel):
    """Single repository search hit."""

    name: str
    full_name: str
    description: str | None = None
    url: str
    stars: int
    language: str | None = None
    updated_at: str


class SearchRepositoriesOutput(BaseModel):
    """Output schema for SearchRepositoriesTool."""

    total_count: int
    items: list[RepositorySearchItem]


# ============================================================================
# COMMIT TOOL SCHEMAS
# ============================================================================


class ListCommitsInput(RepoInput):
    """Input schema for ListCommitsTool."""

    sha: str | None = Field(None, description="Branch name or commit SHA to start listing from")
    path: str | None = Field(None, description="Only commits touching this path")
    author: str | None = Field(None, description="GitHub login or email address of the author")
    since: str | None = Field(None, description="ISO 8601 timestamp; only commits after this date")
    until: str | None = Field(None, description="ISO 8601 timestamp; only commits before this date")
    per_page: int = Field(30, ge=1, le=100, description="Number of commits to return")


class CommitSummary(BaseModel):
    """Single commit in a listing."""

    sha: str
    message: str
    author: str | None = None
    date: str | None = None
    url: str


class GetCommitInput(RepoInput):
    """Input schema for GetCommitTool."""

    ref: str = Field(..., description="Commit SHA, branch or tag name")


class CommitStats(BaseModel):
    additions: int = 0
    deletions: int = 0
    total: int = 0


class CommitFile(BaseModel):
    """File changed by a commit."""

    filename: str
    status: str
    additions: int
    deletions: int
    patch: str | None = None


class CommitOutput(BaseModel):
    """Output schema for GetCommitTool."""

    sha: str
    message: str
    author: str | None = None
    date: str | None = None
    url: str
    stats: CommitStats
    files: list[CommitFile]
