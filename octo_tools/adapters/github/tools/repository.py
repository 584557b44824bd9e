"""GitHub repository tools.

Repository metadata, branches, file content, and the write operations that
create files, branches, forks and repositories.
"""

import base64
import re
from typing import Any

from octo_tools.adapters.github.schemas import (
    BranchResult,
    CreateBranchInput,
    CreateBranchOutput,
    CreateOrUpdateFileInput,
    CreateOrUpdateFileOutput,
    CreateRepositoryInput,
    CreateRepositoryOutput,
    DirectoryEntry,
    DirectoryOutput,
    FileOutput,
    ForkRepositoryInput,
    ForkRepositoryOutput,
    GetFileContentInput,
    GetRepositoryInput,
    ListBranchesInput,
    NodeOutput,
    ParentRepository,
    RepositoryOutput,
)

from .base import GitHubTool, GitHubWriteTool

COMMIT_SHA_PATTERN = re.compile(r"^[0-9a-f]{40}$", re.IGNORECASE)


def encode_content(text: str) -> str:
    """Encode plain text the way the contents API expects it."""
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def decode_content(encoded: str) -> str:
    """Decode contents API base64 (wrapped at 60 columns); invalid UTF-8 becomes U+FFFD."""
    return base64.b64decode(encoded).decode("utf-8", errors="replace")


class GetRepositoryTool(GitHubTool):
    """Repository overview: description, stars, forks, language, default branch."""

    name = "getRepository"
    description = (
        "Get information about a GitHub repository including description, stars, forks, "
        "language, and default branch"
    )
    input_model = GetRepositoryInput

    async def execute(self, ctx: dict[str, Any], input_data: dict[str, Any]) -> dict[str, Any]:
        args = self.parse_input(input_data)
        data = await self.client.get_repository(args.owner, args.repo)

        return RepositoryOutput(
            name=data["name"],
            full_name=data["full_name"],
            description=data.get("description"),
            url=data["html_url"],
            default_branch=data["default_branch"],
            stars=data.get("stargazers_count", 0),
            forks=data.get("forks_count", 0),
            open_issues=data.get("open_issues_count", 0),
            language=data.get("language"),
            private=data.get("private", False),
            created_at=data["created_at"],
            updated_at=data["updated_at"],
        ).model_dump()


class ListBranchesTool(GitHubTool):
    """Tool for listing branches with their head SHA and protection flag."""

    name = "listBranches"
    description = "List branches in a GitHub repository"
    input_model = ListBranchesInput

    async def execute(
        self, ctx: dict[str, Any], input_data: dict[str, Any]
    ) -> list[dict[str, Any]]:
        args = self.parse_input(input_data)
        data = await self.client.list_branches(args.owner, args.repo, per_page=args.per_page)

        return [
            BranchResult(
                name=branch["name"],
                sha=branch["commit"]["sha"],
                protected=branch.get("protected", False),
            ).model_dump()
            for branch in data
        ]


class GetFileContentTool(GitHubTool):
    """Read a file, or list a directory.

    The contents API answers with one of three shapes:
    - a list for directories (entries keep GitHub's order)
    - a dict with ``type`` symlink/submodule (metadata only)
    - a dict with ``type`` file and base64 ``content``, returned decoded
    """

    name = "getFileContent"
    description = "Get the content of a file from a GitHub repository"
    input_model = GetFileContentInput

    async def execute(self, ctx: dict[str, Any], input_data: dict[str, Any]) -> dict[str, Any]:
        """Execute get file content.

        Args:
            ctx: Execution context (chat_id, model, etc.)
            input_data: Tool input matching GetFileContentInput schema

        Returns:
            FileOutput, DirectoryOutput or NodeOutput, depending on the path

        Raises:
            GitHubNotFoundError: Path or ref does not exist
        """
        args = self.parse_input(input_data)
        data = await self.client.get_content(args.owner, args.repo, args.path, ref=args.ref)

        if isinstance(data, list):
            return DirectoryOutput(
                entries=[
                    DirectoryEntry(name=e["name"], type=e["type"], path=e["path"]) for e in data
                ]
            ).model_dump()

        if data.get("type") != "file":
            return NodeOutput(type=data["type"], path=data["path"]).model_dump()

        return FileOutput(
            path=data["path"],
            sha=data["sha"],
            size=data["size"],
            content=decode_content(data.get("content", "")),
        ).model_dump()


class CreateOrUpdateFileTool(GitHubWriteTool):
    """Commit a single file.

    GitHub creates the file when no ``sha`` is given and replaces it when the
    current blob SHA is given.
    """

    name = "createOrUpdateFile"
    description = (
        "Create or update a file in a GitHub repository. Provide the SHA when updating an "
        "existing file."
    )
    input_model = CreateOrUpdateFileInput
    risk_level = "high"

    async def execute(self, ctx: dict[str, Any], input_data: dict[str, Any]) -> dict[str, Any]:
        """Execute create or update file.

        Args:
            ctx: Execution context (chat_id, model, etc.)
            input_data: Tool input matching CreateOrUpdateFileInput schema;
                ``content`` is plain text and is base64-encoded here

        Returns:
            File and commit SHAs matching CreateOrUpdateFileOutput schema

        Raises:
            GitHubConflictError: ``sha`` does not match the current file
            GitHubValidationError: ``sha`` missing for an existing file
            GitHubAPIError: Other API errors
        """
        args = self.parse_input(input_data)
        data = await self.client.create_or_update_file(
            args.owner,
            args.repo,
            args.path,
            message=args.message,
            content_b64=encode_content(args.content),
            branch=args.branch,
            sha=args.sha,
        )

        content = data.get("content") or {}
        return CreateOrUpdateFileOutput(
            path=content.get("path"),
            sha=content.get("sha"),
            commit_sha=data["commit"]["sha"],
            commit_url=data["commit"].get("html_url"),
        ).model_dump()


class CreateBranchTool(GitHubWriteTool):
    """Create a branch from a branch name or a commit SHA.

    When ``from`` is not a full 40-hex SHA, it is treated as a branch name and
    resolved to a SHA first; when omitted, the repository's default branch is
    looked up and used. The lookup and the ref creation are separate calls, so
    a default branch changed in between is not noticed.
    """

    name = "createBranch"
    description = (
        "Create a new branch in a GitHub repository from an existing branch or commit SHA"
    )
    input_model = CreateBranchInput

    async def execute(self, ctx: dict[str, Any], input_data: dict[str, Any]) -> dict[str, Any]:
        """Execute create branch.

        Args:
            ctx: Execution context (chat_id, model, etc.)
            input_data: Tool input matching CreateBranchInput schema

        Returns:
            Created ref matching CreateBranchOutput schema

        Raises:
            GitHubNotFoundError: Source branch does not exist
            GitHubValidationError: Branch already exists
        """
        args = self.parse_input(input_data)
        sha = args.from_

        if not sha or not COMMIT_SHA_PATTERN.match(sha):
            source = args.from_
            if not source:
                repository = await self.client.get_repository(args.owner, args.repo)
                source = repository["default_branch"]
            ref = await self.client.get_ref(args.owner, args.repo, f"heads/{source}")
            sha = ref["object"]["sha"]

        data = await self.client.create_ref(
            args.owner, args.repo, ref=f"refs/heads/{args.branch}", sha=sha
        )

        return CreateBranchOutput(
            ref=data["ref"],
            sha=data["object"]["sha"],
            url=data["url"],
        ).model_dump()


class ForkRepositoryTool(GitHubWriteTool):
    """Tool for forking a repository.

    GitHub creates forks asynchronously; the returned repository may still
    be empty for a short while.
    """

    name = "forkRepository"
    description = (
        "Fork a GitHub repository to the authenticated user account or a specified organization"
    )
    input_model = ForkRepositoryInput

    async def execute(self, ctx: dict[str, Any], input_data: dict[str, Any]) -> dict[str, Any]:
        """Execute fork repository.

        Args:
            ctx: Execution context (chat_id, model, etc.)
            input_data: Tool input matching ForkRepositoryInput schema

        Returns:
            The fork matching ForkRepositoryOutput schema

        Raises:
            GitHubAPIError: API errors
        """
        args = self.parse_input(input_data)
        data = await self.client.create_fork(
            args.owner, args.repo, organization=args.organization, name=args.name
        )

        parent = data.get("parent")
        return ForkRepositoryOutput(
            name=data["name"],
            full_name=data["full_name"],
            url=data["html_url"],
            clone_url=data["clone_url"],
            ssh_url=data["ssh_url"],
            default_branch=data["default_branch"],
            private=data.get("private", False),
            parent=(
                ParentRepository(full_name=parent["full_name"], url=parent["html_url"])
                if parent
                else None
            ),
        ).model_dump()


class CreateRepositoryTool(GitHubWriteTool):
    """Tool for creating a repository for the user, or in ``org`` when given."""

    name = "createRepository"
    description = (
        "Create a new GitHub repository for the authenticated user or a specified organization"
    )
    input_model = CreateRepositoryInput

    async def execute(self, ctx: dict[str, Any], input_data: dict[str, Any]) -> dict[str, Any]:
        """Execute create repository.

        Args:
            ctx: Execution context (chat_id, model, etc.)
            input_data: Tool input matching CreateRepositoryInput schema

        Returns:
            The new repository matching CreateRepositoryOutput schema

        Raises:
            GitHubValidationError: Name already taken
            GitHubAPIError: Other API errors
        """
        args = self.parse_input(input_data)
        payload = args.model_dump(exclude={"org"})
        data = await self.client.create_repository(payload, org=args.org)

        return CreateRepositoryOutput(
            name=data["name"],
            full_name=data["full_name"],
            description=data.get("description"),
            url=data["html_url"],
            clone_url=data["clone_url"],
            ssh_url=data["ssh_url"],
            default_branch=data.get("default_branch"),
            private=data.get("private", False),
            created_at=data["created_at"],
        ).model_dump()
