"""GitHub commit tools."""

from typing import Any

from octo_tools.adapters.github.schemas import (
    CommitFile,
    CommitOutput,
    CommitStats,
    CommitSummary,
    GetCommitInput,
    ListCommitsInput,
)

from .base import GitHubTool


def _author(commit: dict[str, Any]) -> tuple[str | None, str | None]:
    """Prefer the GitHub login, fall back to the git author name."""
    git_author = commit["commit"].get("author") or {}
    account = commit.get("author") or {}
    return account.get("login") or git_author.get("name"), git_author.get("date")


class ListCommitsTool(GitHubTool):
    """Tool for listing commits on a branch, optionally narrowed by path, author or dates."""

    name = "listCommits"
    description = (
        "List commits in a GitHub repository, optionally filtered by branch, path, author, "
        "or date range"
    )
    input_model = ListCommitsInput

    async def execute(
        self, ctx: dict[str, Any], input_data: dict[str, Any]
    ) -> list[dict[str, Any]]:
        args = self.parse_input(input_data)
        data = await self.client.list_commits(
            args.owner,
            args.repo,
            sha=args.sha,
            path=args.path,
            author=args.author,
            since=args.since,
            until=args.until,
            per_page=args.per_page,
        )

        results = []
        for commit in data:
            author, date = _author(commit)
            results.append(
                CommitSummary(
                    sha=commit["sha"],
                    message=commit["commit"]["message"],
                    author=author,
                    date=date,
                    url=commit["html_url"],
                ).model_dump()
            )
        return results


class GetCommitTool(GitHubTool):
    """Single commit with line stats and per-file patches."""

    name = "getCommit"
    description = (
        "Get details of a specific commit including changed files, additions, and deletions"
    )
    input_model = GetCommitInput

    async def execute(self, ctx: dict[str, Any], input_data: dict[str, Any]) -> dict[str, Any]:
        args = self.parse_input(input_data)
        commit = await self.client.get_commit(args.owner, args.repo, args.ref)
        author, date = _author(commit)

        return CommitOutput(
            sha=commit["sha"],
            message=commit["commit"]["message"],
            author=author,
            date=date,
            url=commit["html_url"],
            stats=CommitStats(**(commit.get("stats") or {})),
            files=[
                CommitFile(
                    filename=f["filename"],
                    status=f["status"],
                    additions=f.get("additions", 0),
                    deletions=f.get("deletions", 0),
                    patch=f.get("patch"),
                )
                for f in commit.get("files", [])
            ],
        ).model_dump()
