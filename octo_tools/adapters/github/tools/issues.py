"""GitHub issue tools."""

from typing import Any

from octo_tools.adapters.github.schemas import (
    AddIssueCommentInput,
    CloseIssueInput,
    CloseIssueOutput,
    CommentOutput,
    CreateIssueInput,
    CreateIssueOutput,
    GetIssueInput,
    IssueOutput,
    IssueSummary,
    ListIssuesInput,
)

from .base import GitHubTool, GitHubWriteTool


def _label_names(issue: dict[str, Any]) -> list[str]:
    # Labels come back as objects, or as bare strings on some older payloads.
    return [
        label["name"] if isinstance(label, dict) else label for label in issue.get("labels", [])
    ]


def _login(user: dict[str, Any] | None) -> str | None:
    return user.get("login") if user else None


class ListIssuesTool(GitHubTool):
    """List issues; pull requests that the issues endpoint mixes in are dropped."""

    name = "listIssues"
    description = "List issues in a GitHub repository, optionally filtered by state and labels"
    input_model = ListIssuesInput

    async def execute(
        self, ctx: dict[str, Any], input_data: dict[str, Any]
    ) -> list[dict[str, Any]]:
        """Execute list issues.

        Args:
            ctx: Execution context (chat_id, model, etc.)
            input_data: Tool input matching ListIssuesInput schema

        Returns:
            Issue summaries, newest first as GitHub returns them
        """
        args = self.parse_input(input_data)
        data = await self.client.list_issues(
            args.owner,
            args.repo,
            state=args.state,
            labels=",".join(args.labels) if args.labels else None,
            per_page=args.per_page,
        )

        return [
            IssueSummary(
                number=issue["number"],
                title=issue["title"],
                state=issue["state"],
                url=issue["html_url"],
                author=_login(issue.get("user")),
                labels=_label_names(issue),
                comments=issue.get("comments", 0),
                created_at=issue["created_at"],
                updated_at=issue["updated_at"],
            ).model_dump()
            for issue in data
            if "pull_request" not in issue
        ]


class GetIssueTool(GitHubTool):
    """Tool for reading one issue with its body, labels and assignees."""

    name = "getIssue"
    description = "Get detailed information about a GitHub issue"
    input_model = GetIssueInput

    async def execute(self, ctx: dict[str, Any], input_data: dict[str, Any]) -> dict[str, Any]:
        args = self.parse_input(input_data)
        issue = await self.client.get_issue(args.owner, args.repo, args.issue_number)

        return IssueOutput(
            number=issue["number"],
            title=issue["title"],
            body=issue.get("body"),
            state=issue["state"],
            state_reason=issue.get("state_reason"),
            url=issue["html_url"],
            author=_login(issue.get("user")),
            labels=_label_names(issue),
            assignees=[a["login"] for a in issue.get("assignees") or []],
            comments=issue.get("comments", 0),
            created_at=issue["created_at"],
            updated_at=issue["updated_at"],
            closed_at=issue.get("closed_at"),
        ).model_dump()


class CreateIssueTool(GitHubWriteTool):
    """Tool for opening GitHub issues.

    Capabilities:
    - Create new issues
    - Apply labels and assignees at creation

    Use Cases:
    - "Open a bug report for the failing build"
    - "File a feature request labelled enhancement"
    """

    name = "createIssue"
    description = "Create a new issue in a GitHub repository"
    input_model = CreateIssueInput

    async def execute(self, ctx: dict[str, Any], input_data: dict[str, Any]) -> dict[str, Any]:
        """Execute create issue.

        Args:
            ctx: Execution context (chat_id, model, etc.)
            input_data: Tool input matching CreateIssueInput schema

        Returns:
            Created issue matching CreateIssueOutput schema

        Raises:
            ValidationError: Input does not match CreateIssueInput
            GitHubAPIError: API errors
        """
        args = self.parse_input(input_data)
        issue = await self.client.create_issue(
            args.owner,
            args.repo,
            title=args.title,
            body=args.body,
            labels=args.labels,
            assignees=args.assignees,
        )

        return CreateIssueOutput(
            number=issue["number"],
            title=issue["title"],
            url=issue["html_url"],
            state=issue["state"],
            created_at=issue["created_at"],
        ).model_dump()


class AddIssueCommentTool(GitHubWriteTool):
    """Tool for commenting on an issue."""

    name = "addIssueComment"
    description = "Add a comment to a GitHub issue"
    input_model = AddIssueCommentInput
    risk_level = "low"

    async def execute(self, ctx: dict[str, Any], input_data: dict[str, Any]) -> dict[str, Any]:
        """Execute add issue comment.

        Args:
            ctx: Execution context (chat_id, model, etc.)
            input_data: Tool input matching AddIssueCommentInput schema

        Returns:
            Created comment matching CommentOutput schema

        Raises:
            GitHubNotFoundError: Issue does not exist
            GitHubAPIError: Other API errors
        """
        args = self.parse_input(input_data)
        comment = await self.client.create_issue_comment(
            args.owner, args.repo, args.issue_number, body=args.body
        )

        return CommentOutput(
            id=comment["id"],
            url=comment["html_url"],
            body=comment["body"],
            created_at=comment["created_at"],
        ).model_dump()


class CloseIssueTool(GitHubWriteTool):
    """Tool for closing issues.

    Closing an already closed issue succeeds and returns its current state,
    so the tool is idempotent. ``state_reason`` is ``completed`` or
    ``not_planned``.
    """

    name = "closeIssue"
    description = "Close a GitHub issue as completed or not planned"
    input_model = CloseIssueInput
    idempotent = True

    async def execute(self, ctx: dict[str, Any], input_data: dict[str, Any]) -> dict[str, Any]:
        """Execute close issue.

        Args:
            ctx: Execution context (chat_id, model, etc.)
            input_data: Tool input matching CloseIssueInput schema

        Returns:
            Closed issue matching CloseIssueOutput schema

        Raises:
            GitHubAPIError: API errors
        """
        args = self.parse_input(input_data)
        issue = await self.client.update_issue(
            args.owner,
            args.repo,
            args.issue_number,
            state="closed",
            state_reason=args.state_reason,
        )

        return CloseIssueOutput(
            number=issue["number"],
            title=issue["title"],
            url=issue["html_url"],
            state=issue["state"],
            state_reason=issue.get("state_reason"),
            closed_at=issue.get("closed_at"),
        ).model_dump()
