"""GitHub pull request tools."""

from typing import Any

from octo_tools.adapters.github.schemas import (
    AddPullRequestCommentInput,
    CommentOutput,
    CreatePullRequestInput,
    CreatePullRequestOutput,
    GetPullRequestInput,
    ListPullRequestsInput,
    MergePullRequestInput,
    MergePullRequestOutput,
    PullRequestOutput,
    PullRequestSummary,
)

from .base import GitHubTool, GitHubWriteTool


def _login(user: dict[str, Any] | None) -> str | None:
    return user.get("login") if user else None


class ListPullRequestsTool(GitHubTool):
    """Tool for listing pull requests by state (open, closed or all)."""

    name = "listPullRequests"
    description = "List pull requests in a GitHub repository"
    input_model = ListPullRequestsInput

    async def execute(
        self, ctx: dict[str, Any], input_data: dict[str, Any]
    ) -> list[dict[str, Any]]:
        args = self.parse_input(input_data)
        data = await self.client.list_pull_requests(
            args.owner, args.repo, state=args.state, per_page=args.per_page
        )

        return [
            PullRequestSummary(
                number=pr["number"],
                title=pr["title"],
                state=pr["state"],
                url=pr["html_url"],
                author=_login(pr.get("user")),
                branch=pr["head"]["ref"],
                base_branch=pr["base"]["ref"],
                draft=pr.get("draft", False),
                created_at=pr["created_at"],
                updated_at=pr["updated_at"],
            ).model_dump()
            for pr in data
        ]


class GetPullRequestTool(GitHubTool):
    """Pull request details including merge state and diff size."""

    name = "getPullRequest"
    description = (
        "Get detailed information about a pull request, including its description, branches, "
        "merge status, and size of the change"
    )
    input_model = GetPullRequestInput

    async def execute(self, ctx: dict[str, Any], input_data: dict[str, Any]) -> dict[str, Any]:
        args = self.parse_input(input_data)
        pr = await self.client.get_pull_request(args.owner, args.repo, args.pull_number)

        return PullRequestOutput(
            number=pr["number"],
            title=pr["title"],
            body=pr.get("body"),
            state="merged" if pr.get("merged") else pr["state"],
            url=pr["html_url"],
            author=_login(pr.get("user")),
            branch=pr["head"]["ref"],
            base_branch=pr["base"]["ref"],
            merged=pr.get("merged", False),
            mergeable=pr.get("mergeable"),
            additions=pr.get("additions", 0),
            deletions=pr.get("deletions", 0),
            changed_files=pr.get("changed_files", 0),
            comments=pr.get("comments", 0),
            review_comments=pr.get("review_comments", 0),
            created_at=pr["created_at"],
            updated_at=pr["updated_at"],
            merged_at=pr.get("merged_at"),
        ).model_dump()


class CreatePullRequestTool(GitHubWriteTool):
    """Tool for opening pull requests.

    Capabilities:
    - Open a pull request from ``head`` into ``base``
    - Open it as a draft

    Use Cases:
    - "Open a PR from feature/login into main"
    - "Create a draft PR for the docs branch"
    """

    name = "createPullRequest"
    description = "Create a new pull request in a GitHub repository"
    input_model = CreatePullRequestInput

    async def execute(self, ctx: dict[str, Any], input_data: dict[str, Any]) -> dict[str, Any]:
        """Execute create pull request.

        Args:
            ctx: Execution context (chat_id, model, etc.)
            input_data: Tool input matching CreatePullRequestInput schema

        Returns:
            Created pull request matching CreatePullRequestOutput schema

        Raises:
            GitHubValidationError: No commits between branches, or a PR already exists
            GitHubAPIError: Other API errors
        """
        args = self.parse_input(input_data)
        pr = await self.client.create_pull_request(
            args.owner,
            args.repo,
            title=args.title,
            head=args.head,
            base=args.base,
            body=args.body,
            draft=args.draft,
        )

        return CreatePullRequestOutput(
            number=pr["number"],
            title=pr["title"],
            url=pr["html_url"],
            state=pr["state"],
            draft=pr.get("draft", False),
        ).model_dump()


class MergePullRequestTool(GitHubWriteTool):
    """Tool for merging pull requests.

    High risk: merging changes the base branch. ``merge_method`` is
    ``merge``, ``squash`` or ``rebase``.
    """

    name = "mergePullRequest"
    description = "Merge a pull request using a merge commit, squash, or rebase"
    input_model = MergePullRequestInput
    risk_level = "high"

    async def execute(self, ctx: dict[str, Any], input_data: dict[str, Any]) -> dict[str, Any]:
        """Execute merge pull request.

        Args:
            ctx: Execution context (chat_id, model, etc.)
            input_data: Tool input matching MergePullRequestInput schema

        Returns:
            Merge result matching MergePullRequestOutput schema

        Raises:
            GitHubAPIError: 405 when the PR is not mergable, 409 on a head SHA mismatch
        """
        args = self.parse_input(input_data)
        data = await self.client.merge_pull_request(
            args.owner,
            args.repo,
            args.pull_number,
            commit_title=args.commit_title,
            commit_message=args.commit_message,
            merge_method=args.merge_method,
        )

        return MergePullRequestOutput(
            merged=data.get("merged", False),
            message=data.get("message", ""),
            sha=data.get("sha"),
        ).model_dump()


class AddPullRequestCommentTool(GitHubWriteTool):
    """Post a conversation comment on a pull request (not a line review comment)."""

    name = "addPullRequestComment"
    description = "Add a comment to a pull request"
    input_model = AddPullRequestCommentInput
    risk_level = "low"

    async def execute(self, ctx: dict[str, Any], input_data: dict[str, Any]) -> dict[str, Any]:
        """Execute add pull request comment.

        Args:
            ctx: Execution context (chat_id, model, etc.)
            input_data: Tool input matching AddPullRequestCommentInput schema

        Returns:
            Created comment matching CommentOutput schema

        Raises:
            GitHubAPIError: API errors
        """
        args = self.parse_input(input_data)
        comment = await self.client.create_issue_comment(
            args.owner, args.repo, args.pull_number, body=args.body
        )

        return CommentOutput(
            id=comment["id"],
            url=comment["html_url"],
            body=comment["body"],
            created_at=comment["created_at"],
        ).model_dump()
